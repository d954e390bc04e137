"""Month and weekday name tables for the Jalali calendar."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Tuple

from .cache import ComputeOnceCache
from .errors import UnknownLocaleError

__all__ = [
    "BUILTIN_LOCALES",
    "LocaleCache",
    "LocaleTable",
    "STYLES",
    "normalize_locale_id",
]

STYLES = ("long", "short", "narrow")

ASCII_DIGITS = "0123456789"
PERSIAN_DIGITS = "۰۱۲۳۴۵۶۷۸۹"


@dataclass(frozen=True)
class LocaleTable:
    """Read-only names for one locale.

    Weekday sequences start on Sunday, matching ``JalaliDate.day_of_week``.
    Short and narrow variants may be left empty when a locale has none.
    """

    locale_id: str
    months_long: Tuple[str, ...]
    weekdays_long: Tuple[str, ...]
    months_short: Tuple[str, ...] = ()
    months_narrow: Tuple[str, ...] = ()
    weekdays_short: Tuple[str, ...] = ()
    weekdays_narrow: Tuple[str, ...] = ()
    first_day_of_week: int = 0
    native_digits: str = ASCII_DIGITS

    def __post_init__(self) -> None:
        for field, size, required in (
            ("months_long", 12, True),
            ("months_short", 12, False),
            ("months_narrow", 12, False),
            ("weekdays_long", 7, True),
            ("weekdays_short", 7, False),
            ("weekdays_narrow", 7, False),
        ):
            names = tuple(getattr(self, field))
            object.__setattr__(self, field, names)
            if len(names) != size and (required or names):
                raise ValueError(f"{field} of locale {self.locale_id!r} must hold {size} names")
        if not (0 <= self.first_day_of_week <= 6):
            raise ValueError("first_day_of_week must be in 0..6")
        if len(self.native_digits) != 10:
            raise ValueError("native_digits must hold exactly ten characters")

    def month_names(self, style: str = "long") -> Tuple[str, ...]:
        return getattr(self, f"months_{_check_style(style)}")

    def weekday_names(self, style: str = "long") -> Tuple[str, ...]:
        return getattr(self, f"weekdays_{_check_style(style)}")

    def date_names(self, native_digits: bool = False) -> Tuple[str, ...]:
        """Return the day-of-month labels ``"1"`` through ``"31"``."""

        names = tuple(str(day) for day in range(1, 32))
        if native_digits:
            return tuple(self.localize_digits(name) for name in names)
        return names

    def localize_digits(self, text: str) -> str:
        return text.translate(str.maketrans(ASCII_DIGITS, self.native_digits))


def _check_style(style: str) -> str:
    if style not in STYLES:
        raise ValueError("style must be one of: {}".format(", ".join(STYLES)))
    return style


def _persian_table() -> LocaleTable:
    months = (
        "فروردین",
        "اردیبهشت",
        "خرداد",
        "تیر",
        "مرداد",
        "شهریور",
        "مهر",
        "آبان",
        "آذر",
        "دی",
        "بهمن",
        "اسفند",
    )
    weekdays = (
        "یک‌شنبه",
        "دوشنبه",
        "سه‌شنبه",
        "چهارشنبه",
        "پنج‌شنبه",
        "جمعه",
        "شنبه",
    )
    return LocaleTable(
        locale_id="fa",
        months_long=months,
        months_short=months,
        months_narrow=("فرو", "ارد", "خرد", "تیر", "مرد", "شهر", "مهر", "آبا", "آذر", "دی", "بهم", "اسف"),
        weekdays_long=weekdays,
        weekdays_short=weekdays,
        weekdays_narrow=("ی", "د", "س", "چ", "پ", "ج", "ش"),
        first_day_of_week=6,
        native_digits=PERSIAN_DIGITS,
    )


def _english_table() -> LocaleTable:
    return LocaleTable(
        locale_id="en",
        months_long=(
            "Farvardin",
            "Ordibehesht",
            "Khordaad",
            "Tir",
            "Mordaad",
            "Shahrivar",
            "Mehr",
            "Aabaan",
            "Aazar",
            "Dey",
            "Bahman",
            "Esfand",
        ),
        months_short=("Far", "Ord", "Kho", "Tir", "Mor", "Sha", "Meh", "Aab", "Aaz", "Dey", "Bah", "Esf"),
        months_narrow=("F", "O", "K", "T", "M", "S", "M", "A", "A", "D", "B", "E"),
        weekdays_long=("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"),
        weekdays_short=("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"),
        weekdays_narrow=("S", "M", "T", "W", "T", "F", "S"),
        first_day_of_week=0,
    )


BUILTIN_LOCALES: Mapping[str, Callable[[], LocaleTable]] = {
    "fa": _persian_table,
    "en": _english_table,
}


def normalize_locale_id(value: Optional[str]) -> str:
    """Reduce ``"fa-IR"``/``"fa_IR"`` style tags to their language subtag."""

    if not isinstance(value, str) or not value.strip():
        raise UnknownLocaleError(f"Invalid locale id: {value!r}")
    return value.strip().replace("_", "-").split("-")[0].lower()


class LocaleCache:
    """Locale tables built on first request and shared afterwards."""

    def __init__(self, sources: Optional[Mapping[str, Callable[[], LocaleTable]]] = None) -> None:
        self._sources: Dict[str, Callable[[], LocaleTable]] = dict(BUILTIN_LOCALES)
        for locale_id, loader in (sources or {}).items():
            self._sources[normalize_locale_id(locale_id)] = loader
        self._tables: ComputeOnceCache[str, LocaleTable] = ComputeOnceCache("locale", self._load)

    def _load(self, locale_id: str) -> LocaleTable:
        try:
            loader = self._sources[locale_id]
        except KeyError:
            raise UnknownLocaleError(
                "Unknown locale {!r}; available: {}".format(locale_id, ", ".join(self.available()))
            ) from None
        return loader()

    def get(self, locale_id: str) -> LocaleTable:
        return self._tables.get(normalize_locale_id(locale_id))

    def available(self) -> Tuple[str, ...]:
        return tuple(sorted(self._sources))

    def __contains__(self, locale_id: object) -> bool:
        try:
            return normalize_locale_id(locale_id) in self._sources  # type: ignore[arg-type]
        except UnknownLocaleError:
            return False
