"""Populate-once caches for immutable calendar data."""
from __future__ import annotations

import logging
from typing import Callable, Dict, Generic, Hashable, Iterator, TypeVar

__all__ = ["ComputeOnceCache"]

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class ComputeOnceCache(Generic[K, V]):
    """Map keys to values built on first access and never replaced.

    Concurrent first accesses may each build the value; only the first stored
    result is kept and returned to every caller. Values must be immutable.
    """

    def __init__(self, name: str, factory: Callable[[K], V]) -> None:
        self.name = name
        self._factory = factory
        self._entries: Dict[K, V] = {}

    def get(self, key: K) -> V:
        try:
            return self._entries[key]
        except KeyError:
            pass
        value = self._factory(key)
        stored = self._entries.setdefault(key, value)
        if stored is value:
            logger.debug("%s cache populated for %r", self.name, key)
        return stored

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[K]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
