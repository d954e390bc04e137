"""Gregorian ↔ Jalali conversion and Jalali calendar arithmetic.

Leap years follow the 33-year arithmetic cycle: a year is leap when its
remainder modulo 33 is one of :data:`LEAP_RESIDUES`. Jalali dates are mapped
onto the proleptic Gregorian ordinal used by :meth:`datetime.date.toordinal`,
so both calendars share one linear day count.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Tuple, Union

from .errors import InvalidDateError, OutOfRangeError

__all__ = [
    "GregorianDate",
    "JalaliDate",
    "LEAP_RESIDUES",
    "MAXYEAR",
    "MINYEAR",
    "add_days",
    "add_months",
    "add_years",
    "coerce_gregorian",
    "coerce_jalali",
    "create_date",
    "day_of_week",
    "days_in_month",
    "gregorian_to_jalali",
    "is_jalali_leap",
    "jalali_to_gregorian",
]

GregorianDate = date

LEAP_RESIDUES = frozenset({1, 5, 9, 13, 17, 22, 26, 30})

_JALALI_MONTH_LENGTHS = (31, 31, 31, 31, 31, 31, 30, 30, 30, 30, 30, 29)
_DAYS_BEFORE_MONTH = tuple(sum(_JALALI_MONTH_LENGTHS[:i]) for i in range(12))
# leap years among cycle years 1..n
_LEAPS_BEFORE = tuple(sum(1 for r in LEAP_RESIDUES if r <= n) for n in range(33))
_CYCLE_DAYS = 33 * 365 + len(LEAP_RESIDUES)

# Ordinal of 1 Farvardin 1, i.e. 0622-03-21 proleptic Gregorian.
_EPOCH_ORDINAL = 226895
_MIN_ORDINAL = _EPOCH_ORDINAL
_MAX_ORDINAL = date.max.toordinal()

MINYEAR = 1
MAXYEAR = 9378

GregorianLike = Union[str, date, datetime, Iterable[int]]
JalaliLike = Union[str, "JalaliDate", Iterable[int]]


@dataclass(frozen=True, order=True)
class JalaliDate:
    """Immutable representation of a Jalali (Persian) calendar date."""

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        _check_fields(self.year, self.month, self.day)

    @classmethod
    def fromordinal(cls, ordinal: int) -> "JalaliDate":
        """Build a date from a proleptic Gregorian ordinal."""

        if not (_MIN_ORDINAL <= ordinal <= _MAX_ORDINAL):
            raise OutOfRangeError(f"day number {ordinal} is outside the supported range")
        days = ordinal - _EPOCH_ORDINAL
        year = days * 33 // _CYCLE_DAYS + 1
        while _days_before_year(year + 1) <= days:
            year += 1
        while _days_before_year(year) > days:
            year -= 1

        day_of_year = days - _days_before_year(year)
        if day_of_year < 186:
            month = 1 + day_of_year // 31
            day = 1 + day_of_year % 31
        else:
            day_of_year -= 186
            month = 7 + day_of_year // 30
            day = 1 + day_of_year % 30
        return cls(year, month, day)

    @classmethod
    def from_gregorian(cls, value: GregorianLike) -> "JalaliDate":
        return gregorian_to_jalali(value)

    @classmethod
    def today(cls) -> "JalaliDate":
        return cls.fromordinal(date.today().toordinal())

    def toordinal(self) -> int:
        return (
            _EPOCH_ORDINAL
            + _days_before_year(self.year)
            + _DAYS_BEFORE_MONTH[self.month - 1]
            + self.day
            - 1
        )

    def to_gregorian(self) -> date:
        return jalali_to_gregorian(self)

    def isoformat(self, sep: str = "-") -> str:
        return f"{self.year:04d}{sep}{self.month:02d}{sep}{self.day:02d}"

    def is_leap_year(self) -> bool:
        return is_jalali_leap(self.year)

    def days_in_month(self) -> int:
        return days_in_month(self.year, self.month)

    def day_of_year(self) -> int:
        return _DAYS_BEFORE_MONTH[self.month - 1] + self.day

    def day_of_week(self) -> int:
        """Return the weekday, 0 for Sunday through 6 for Saturday."""

        # ordinal 1 (0001-01-01) was a Monday
        return self.toordinal() % 7

    def add_days(self, days: int) -> "JalaliDate":
        return JalaliDate.fromordinal(self.toordinal() + days)

    def add_months(self, months: int) -> "JalaliDate":
        """Shift by whole months, clamping the day to the target month length."""

        year, month_index = divmod(self.year * 12 + self.month - 1 + months, 12)
        return _clamped(year, month_index + 1, self.day)

    def add_years(self, years: int) -> "JalaliDate":
        """Shift by whole years; 30 Esfand becomes 29 Esfand in common years."""

        return _clamped(self.year + years, self.month, self.day)


def _check_fields(year: int, month: int, day: int) -> None:
    if not (MINYEAR <= year <= MAXYEAR):
        raise OutOfRangeError(f"year must be in {MINYEAR}..{MAXYEAR}, got {year}")
    if not (1 <= month <= 12):
        raise InvalidDateError(f"month must be in 1..12 for Jalali calendar, got {month}")
    max_day = days_in_month(year, month)
    if not (1 <= day <= max_day):
        raise InvalidDateError(f"day must be in 1..{max_day} for {year}/{month:02d}, got {day}")
    ordinal = _EPOCH_ORDINAL + _days_before_year(year) + _DAYS_BEFORE_MONTH[month - 1] + day - 1
    if ordinal > _MAX_ORDINAL:
        raise OutOfRangeError(f"{year:04d}-{month:02d}-{day:02d} falls after {date.max.isoformat()}")


def _clamped(year: int, month: int, day: int) -> JalaliDate:
    return JalaliDate(year, month, min(day, days_in_month(year, month)))


def _days_before_year(year: int) -> int:
    cycles, remainder = divmod(year - 1, 33)
    return 365 * (year - 1) + len(LEAP_RESIDUES) * cycles + _LEAPS_BEFORE[remainder]


def is_jalali_leap(year: int) -> bool:
    return year % 33 in LEAP_RESIDUES


def days_in_month(year: int, month: int) -> int:
    if not (1 <= month <= 12):
        raise InvalidDateError(f"month must be in 1..12 for Jalali calendar, got {month}")
    if month == 12 and is_jalali_leap(year):
        return 30
    return _JALALI_MONTH_LENGTHS[month - 1]


def create_date(year: int, month: int, day: int) -> JalaliDate:
    """Validate the fields and build a :class:`JalaliDate`."""

    return JalaliDate(year, month, day)


def day_of_week(value: JalaliLike) -> int:
    return _as_jalali(value).day_of_week()


def add_days(value: JalaliLike, days: int) -> JalaliDate:
    return _as_jalali(value).add_days(days)


def add_months(value: JalaliLike, months: int) -> JalaliDate:
    return _as_jalali(value).add_months(months)


def add_years(value: JalaliLike, years: int) -> JalaliDate:
    return _as_jalali(value).add_years(years)


def _split_date_string(value: str, calendar: str) -> Tuple[int, int, int]:
    tokens = value.strip().replace("/", "-").split("-")
    if len(tokens) != 3:
        raise InvalidDateError(f"Unsupported {calendar} date string: {value!r}")
    try:
        return tuple(int(part) for part in tokens)  # type: ignore[return-value]
    except ValueError as exc:
        raise InvalidDateError(f"Unsupported {calendar} date string: {value!r}") from exc


def coerce_gregorian(value: GregorianLike) -> Tuple[int, int, int]:
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.year, value.month, value.day
    if isinstance(value, str):
        return _split_date_string(value, "Gregorian")
    try:
        year, month, day = value  # type: ignore[misc]
    except (TypeError, ValueError) as exc:
        raise TypeError("Expected a date, string, or iterable of three integers") from exc
    return int(year), int(month), int(day)


def coerce_jalali(value: JalaliLike) -> Tuple[int, int, int]:
    if isinstance(value, JalaliDate):
        return value.year, value.month, value.day
    if isinstance(value, str):
        return _split_date_string(value, "Jalali")
    try:
        year, month, day = value  # type: ignore[misc]
    except (TypeError, ValueError) as exc:
        raise TypeError("Expected a JalaliDate, string, or iterable of three integers") from exc
    return int(year), int(month), int(day)


def _as_jalali(value: JalaliLike) -> JalaliDate:
    if isinstance(value, JalaliDate):
        return value
    return JalaliDate(*coerce_jalali(value))


def gregorian_to_jalali(value: GregorianLike) -> JalaliDate:
    gy, gm, gd = coerce_gregorian(value)
    if not (1 <= gy <= 9999):
        raise OutOfRangeError(f"Gregorian year {gy} is outside the supported range")
    try:
        target = date(gy, gm, gd)
    except ValueError as exc:
        raise InvalidDateError(f"Invalid Gregorian date {gy}-{gm}-{gd}: {exc}") from exc
    return JalaliDate.fromordinal(target.toordinal())


def jalali_to_gregorian(value: JalaliLike) -> date:
    jalali = _as_jalali(value)
    ordinal = jalali.toordinal()
    if ordinal > _MAX_ORDINAL:
        raise OutOfRangeError(f"{jalali.isoformat()} falls after {date.max.isoformat()}")
    return date.fromordinal(ordinal)
