"""Hook implementations that integrate the Jalali calendar with Frappe."""
from __future__ import annotations

from .api import engine


def boot_session(bootinfo):
    """Inject the calendar context for the session user into the boot payload."""

    context = engine.get_calendar_context()
    if isinstance(bootinfo, dict):
        bootinfo.setdefault("jalali_calendar", context)
    else:  # ``bootinfo`` is typically a ``frappe._dict``
        setattr(bootinfo, "jalali_calendar", context)
