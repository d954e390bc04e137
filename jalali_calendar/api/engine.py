"""Calendar interface consumed by date-picker bindings.

:class:`CalendarEngine` bundles conversion, arithmetic, locale lookups and
text handling behind one object so a UI layer only depends on this module.
The engine keeps references to a :class:`LocaleCache` and a
:class:`FormatCache`; engines derived with :meth:`CalendarEngine.with_locale`
share them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple, Union

from . import converter, preferences
from ._frappe import maybe_whitelist
from .cache import ComputeOnceCache
from .converter import GregorianLike, JalaliDate, JalaliLike
from .errors import JalaliCalendarError, ParseError
from .formatting import FormatCache, FormatSpec, format_date, parse_date
from .locales import LocaleCache, LocaleTable, normalize_locale_id

__all__ = [
    "CalendarEngine",
    "DatePickerFormats",
    "PERSIAN_DATE_FORMATS",
    "convert_to_gregorian",
    "convert_to_jalali",
    "get_calendar_context",
    "get_engine",
]

logger = logging.getLogger(__name__)

Pattern = Union[str, FormatSpec]


@dataclass(frozen=True)
class DatePickerFormats:
    """Patterns for the input field and the month/year header of a picker."""

    parse_date_input: str = "YYYY/MM/DD"
    date_input: str = "YYYY/MM/DD"
    month_year_label: str = "YYYY MMMM"
    date_a11y_label: str = "YYYY/MM/DD"
    month_year_a11y_label: str = "YYYY MMMM"

    def as_dict(self) -> Dict[str, Dict[str, str]]:
        return {
            "parse": {"dateInput": self.parse_date_input},
            "display": {
                "dateInput": self.date_input,
                "monthYearLabel": self.month_year_label,
                "dateA11yLabel": self.date_a11y_label,
                "monthYearA11yLabel": self.month_year_a11y_label,
            },
        }


PERSIAN_DATE_FORMATS = DatePickerFormats()


class CalendarEngine:
    """Conversion, arithmetic, locale names and text handling for one locale."""

    def __init__(
        self,
        locale_id: str = "fa",
        *,
        locales: Optional[LocaleCache] = None,
        formats: Optional[FormatCache] = None,
        display_formats: DatePickerFormats = PERSIAN_DATE_FORMATS,
    ) -> None:
        self.locales = locales if locales is not None else LocaleCache()
        self.formats = formats if formats is not None else FormatCache()
        self.display_formats = display_formats
        self.locale: LocaleTable = self.locales.get(locale_id)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.locale_id!r})"

    @property
    def locale_id(self) -> str:
        return self.locale.locale_id

    def with_locale(self, locale_id: str) -> "CalendarEngine":
        """Return an engine for another locale sharing this engine's caches."""

        return type(self)(
            locale_id,
            locales=self.locales,
            formats=self.formats,
            display_formats=self.display_formats,
        )

    # Conversion

    def to_jalali(self, value: GregorianLike) -> JalaliDate:
        return converter.gregorian_to_jalali(value)

    def to_gregorian(self, value: JalaliLike) -> date:
        return converter.jalali_to_gregorian(value)

    # Construction and queries

    def create_date(self, year: int, month: int, day: int) -> JalaliDate:
        return converter.create_date(year, month, day)

    def today(self) -> JalaliDate:
        return JalaliDate.today()

    def get_year(self, value: JalaliDate) -> int:
        return value.year

    def get_month(self, value: JalaliDate) -> int:
        return value.month

    def get_date(self, value: JalaliDate) -> int:
        return value.day

    def get_day_of_week(self, value: JalaliDate) -> int:
        return value.day_of_week()

    def get_num_days_in_month(self, value: JalaliDate) -> int:
        return value.days_in_month()

    def is_leap_year(self, year: int) -> bool:
        return converter.is_jalali_leap(year)

    # Arithmetic

    def add_calendar_years(self, value: JalaliDate, years: int) -> JalaliDate:
        return value.add_years(years)

    def add_calendar_months(self, value: JalaliDate, months: int) -> JalaliDate:
        return value.add_months(months)

    def add_calendar_days(self, value: JalaliDate, days: int) -> JalaliDate:
        return value.add_days(days)

    # Locale data

    def get_month_names(self, style: str = "long") -> Tuple[str, ...]:
        return self.locale.month_names(style)

    def get_day_of_week_names(self, style: str = "long") -> Tuple[str, ...]:
        return self.locale.weekday_names(style)

    get_weekday_names = get_day_of_week_names

    def get_first_day_of_week(self) -> int:
        return self.locale.first_day_of_week

    def get_date_names(self) -> Tuple[str, ...]:
        return self.locale.date_names()

    def get_year_name(self, value: JalaliDate) -> str:
        return str(value.year)

    # Text

    def format(self, value: JalaliDate, pattern: Optional[Pattern] = None) -> str:
        spec = self.formats.get(pattern if pattern is not None else self.display_formats.date_input)
        return format_date(value, spec, self.locale)

    def format_month_year_label(self, value: JalaliDate) -> str:
        return self.format(value, self.display_formats.month_year_label)

    def parse(self, text: Optional[str], pattern: Optional[Pattern] = None) -> Optional[JalaliDate]:
        """Parse user input; empty input yields ``None``, anything else must match."""

        if not text:
            return None
        spec = self.formats.get(pattern if pattern is not None else self.display_formats.parse_date_input)
        return parse_date(text, spec, self.locale)

    def to_iso8601(self, value: JalaliDate) -> str:
        """Return the Gregorian ISO 8601 date for ``value``."""

        return self.to_gregorian(value).isoformat()

    def is_date_instance(self, obj: Any) -> bool:
        return isinstance(obj, JalaliDate)

    def is_valid(self, obj: Any) -> bool:
        if not isinstance(obj, JalaliDate):
            return False
        try:
            converter.create_date(obj.year, obj.month, obj.day)
        except JalaliCalendarError:
            return False
        return True

    def deserialize(self, value: Any) -> Optional[JalaliDate]:
        """Turn model values (Gregorian dates or ISO strings) into Jalali dates."""

        if value is None or value == "":
            return None
        if isinstance(value, JalaliDate):
            return value
        if isinstance(value, (date, datetime)):
            return self.to_jalali(value)
        if isinstance(value, str):
            try:
                gregorian = datetime.fromisoformat(value.strip())
            except ValueError as exc:
                logger.debug("Rejected non-ISO date value %r", value)
                raise ParseError("not an ISO 8601 Gregorian date", text=value, position=0) from exc
            return self.to_jalali(gregorian)
        raise TypeError(f"Cannot deserialize {type(value).__name__} into a JalaliDate")

    # Comparison

    def compare_date(self, first: JalaliDate, second: JalaliDate) -> int:
        """Return a negative, zero or positive number like ``DateAdapter.compareDate``."""

        return (
            first.year - second.year
            or first.month - second.month
            or first.day - second.day
        )

    def same_date(self, first: Optional[JalaliDate], second: Optional[JalaliDate]) -> bool:
        if first is None or second is None:
            return first is second
        return self.compare_date(first, second) == 0

    def clamp_date(
        self,
        value: JalaliDate,
        minimum: Optional[JalaliDate] = None,
        maximum: Optional[JalaliDate] = None,
    ) -> JalaliDate:
        if minimum is not None and self.compare_date(value, minimum) < 0:
            return minimum
        if maximum is not None and self.compare_date(value, maximum) > 0:
            return maximum
        return value

    def get_calendar_context(self) -> Dict[str, object]:
        """Return a serialisable description of the locale and picker formats."""

        return {
            "locale": self.locale_id,
            "first_day_of_week": self.get_first_day_of_week(),
            "month_names": {style: list(self.get_month_names(style)) for style in ("long", "short", "narrow")},
            "weekday_names": {style: list(self.get_day_of_week_names(style)) for style in ("long", "short", "narrow")},
            "formats": self.display_formats.as_dict(),
        }


_shared_locales = LocaleCache()
_shared_formats = FormatCache()
_engines: ComputeOnceCache[str, CalendarEngine] = ComputeOnceCache(
    "engine",
    lambda locale_id: CalendarEngine(locale_id, locales=_shared_locales, formats=_shared_formats),
)


def get_engine(locale_id: Optional[str] = None, user: Optional[str] = None) -> CalendarEngine:
    """Return the shared engine for ``locale_id`` or the user's preferred locale."""

    if locale_id is None:
        locale_id = preferences.resolve_locale(user).value
    return _engines.get(normalize_locale_id(locale_id))


def get_calendar_context(user: Optional[str] = None) -> Dict[str, object]:
    selection = preferences.resolve_locale(user)
    context = get_engine(selection.value).get_calendar_context()
    context["source"] = selection.source
    return context


def convert_to_jalali(value: GregorianLike) -> str:
    return converter.gregorian_to_jalali(value).isoformat()


def convert_to_gregorian(value: JalaliLike) -> str:
    return converter.jalali_to_gregorian(value).isoformat()


get_calendar_context = maybe_whitelist(get_calendar_context)
convert_to_jalali = maybe_whitelist(convert_to_jalali)
convert_to_gregorian = maybe_whitelist(convert_to_gregorian)
