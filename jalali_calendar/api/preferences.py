"""Locale preference helpers exposed to both server and client layers."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Literal, Optional

from ._frappe import frappe, maybe_whitelist
from .errors import UnknownLocaleError
from .locales import BUILTIN_LOCALES, normalize_locale_id

__all__ = [
    "DEFAULT_LOCALE",
    "LocaleSelection",
    "VALID_LOCALES",
    "get_preference_context",
    "get_system_locale",
    "get_user_locale",
    "resolve_locale",
    "set_locale_preference",
    "set_system_locale",
    "set_user_locale",
]

logger = logging.getLogger(__name__)

LocaleSource = Literal["default", "system", "user"]

DEFAULT_LOCALE = "fa"
VALID_LOCALES = frozenset(BUILTIN_LOCALES)
_PREFERENCE_KEY = "jalali_calendar_locale"


@dataclass(frozen=True)
class LocaleSelection:
    """Resolved locale id and where it came from."""

    value: str
    source: LocaleSource


_FALLBACK_STORE: Dict[str, Dict[Optional[str], Optional[str]]] = {
    "system": {None: None},
    "user": {},
}


def _normalize_locale(value: Optional[str]) -> Optional[str]:
    try:
        normalized = normalize_locale_id(value)
    except UnknownLocaleError:
        return None
    return normalized if normalized in VALID_LOCALES else None


def _require_locale(value: Optional[str]) -> str:
    normalized = _normalize_locale(value)
    if not normalized:
        raise ValueError("locale must be one of: {}".format(", ".join(sorted(VALID_LOCALES))))
    return normalized


def _session_user(user: Optional[str]) -> Optional[str]:
    if not user:
        user = getattr(getattr(frappe, "session", None), "user", None)  # type: ignore[attr-defined]
    if not user or user == "Guest":
        return None
    return user


def _read_system_value() -> Optional[str]:
    if frappe:
        stored = frappe.db.get_default(_PREFERENCE_KEY)  # type: ignore[attr-defined]
        return _normalize_locale(stored)
    return _FALLBACK_STORE["system"].get(None)


def _write_system_value(locale_id: str) -> None:
    if frappe:
        frappe.db.set_default(_PREFERENCE_KEY, locale_id)  # type: ignore[attr-defined]
        if hasattr(frappe, "clear_cache"):
            frappe.clear_cache()
        return
    _FALLBACK_STORE["system"][None] = locale_id


def _read_user_value(user: Optional[str]) -> Optional[str]:
    if frappe:
        user = _session_user(user)
        if user is None:
            return None
        stored = frappe.db.get_default(_PREFERENCE_KEY, user=user)  # type: ignore[attr-defined]
        return _normalize_locale(stored)
    if user is None:
        return None
    return _FALLBACK_STORE["user"].get(user)


def _write_user_value(locale_id: str, user: Optional[str]) -> None:
    if frappe:
        user = _session_user(user)
        if user is None:  # pragma: no cover - depends on Frappe session
            raise ValueError("Cannot store locale preference for anonymous sessions")
        frappe.db.set_default(_PREFERENCE_KEY, locale_id, user=user)  # type: ignore[attr-defined]
        if hasattr(frappe, "defaults") and hasattr(frappe.defaults, "clear_cache"):
            frappe.defaults.clear_cache(user=user)  # type: ignore[attr-defined]
        return
    if user is None:
        raise RuntimeError("user must be provided when frappe is unavailable")
    _FALLBACK_STORE["user"][user] = locale_id


def get_system_locale(*, raw: bool = False) -> str:
    """Return the system-wide locale selection."""

    stored = _read_system_value()
    if raw:
        return stored or ""
    return stored or DEFAULT_LOCALE


def set_system_locale(locale_id: str) -> LocaleSelection:
    selected = _require_locale(locale_id)
    _write_system_value(selected)
    logger.info("System calendar locale set to %s", selected)
    return resolve_locale()


def get_user_locale(user: Optional[str] = None) -> Optional[str]:
    return _read_user_value(user)


def set_user_locale(locale_id: str, user: Optional[str] = None) -> LocaleSelection:
    selected = _require_locale(locale_id)
    _write_user_value(selected, user)
    logger.info("Calendar locale for %s set to %s", user or "session user", selected)
    return resolve_locale(user)


def resolve_locale(user: Optional[str] = None) -> LocaleSelection:
    """Resolve the active locale: user override, then system default, then ``fa``."""

    user_value = get_user_locale(user)
    if user_value:
        return LocaleSelection(user_value, "user")

    system_raw = get_system_locale(raw=True)
    if system_raw:
        return LocaleSelection(system_raw, "system")

    return LocaleSelection(DEFAULT_LOCALE, "default")


def get_preference_context(user: Optional[str] = None) -> Dict[str, object]:
    """Return a serialisable representation of the resolved preference."""

    resolved = resolve_locale(user)
    context: Dict[str, object] = {
        "active_locale": resolved.value,
        "source": resolved.source,
    }

    system_raw = get_system_locale(raw=True)
    if system_raw:
        context["system_locale"] = system_raw

    user_raw = get_user_locale(user)
    if user_raw:
        context["user_locale"] = user_raw

    return context


def set_locale_preference(scope: str, locale_id: str, user: Optional[str] = None) -> Dict[str, object]:
    """Update a locale preference and return the resulting context."""

    normalized_scope = (scope or "user").strip().lower()
    if normalized_scope == "system":
        set_system_locale(locale_id)
        return get_preference_context()
    if normalized_scope == "user":
        set_user_locale(locale_id, user)
        return get_preference_context(user)
    raise ValueError("scope must be either 'system' or 'user'")


get_preference_context = maybe_whitelist(get_preference_context)
set_locale_preference = maybe_whitelist(set_locale_preference)
