"""Exceptions raised by the Jalali calendar engine."""
from __future__ import annotations

from typing import Optional

__all__ = [
    "FormatError",
    "InvalidDateError",
    "JalaliCalendarError",
    "OutOfRangeError",
    "ParseError",
    "UnknownLocaleError",
]


class JalaliCalendarError(ValueError):
    """Base class for every error raised by the engine."""


class InvalidDateError(JalaliCalendarError):
    """A month or day outside the valid range for the Jalali calendar."""


class OutOfRangeError(JalaliCalendarError):
    """A date outside the span the converter supports."""


class FormatError(JalaliCalendarError):
    """An unusable format pattern, locale table or date passed to the formatter."""


class UnknownLocaleError(JalaliCalendarError):
    """No locale table is registered for the requested id."""


class ParseError(JalaliCalendarError):
    """Text that does not match a format pattern.

    ``position`` is the character offset in ``text`` where matching stopped and
    ``token_index`` the index of the pattern segment that failed (``None`` when
    the failure is not tied to one segment, e.g. trailing input).
    """

    def __init__(
        self,
        message: str,
        *,
        text: str,
        position: int,
        token_index: Optional[int] = None,
        token: Optional[str] = None,
    ) -> None:
        self.reason = message
        self.text = text
        self.position = position
        self.token_index = token_index
        self.token = token
        where = f"position {position}"
        if token_index is not None:
            where = f"segment {token_index} ({token!r}) at {where}"
        super().__init__(f"{message}: {text!r}, {where}")
