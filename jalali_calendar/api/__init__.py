"""Server-side helpers exposed by the Jalali calendar package."""

from . import converter, engine, formatting, locales, preferences
from .converter import JalaliDate, gregorian_to_jalali, jalali_to_gregorian
from .engine import CalendarEngine
from .errors import (
    FormatError,
    InvalidDateError,
    JalaliCalendarError,
    OutOfRangeError,
    ParseError,
    UnknownLocaleError,
)

__all__ = [
    "CalendarEngine",
    "FormatError",
    "InvalidDateError",
    "JalaliCalendarError",
    "JalaliDate",
    "OutOfRangeError",
    "ParseError",
    "UnknownLocaleError",
    "converter",
    "engine",
    "formatting",
    "gregorian_to_jalali",
    "jalali_to_gregorian",
    "locales",
    "preferences",
]
