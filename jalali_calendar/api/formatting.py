"""Token based formatting and parsing of Jalali dates.

Patterns use moment-style tokens::

    YYYY  four digit year          YY    two digit year
    MMMM  long month name          MMM   short month name
    MM    zero padded month        M     month number
    DD    zero padded day          D     day number
    dddd  long weekday name        ddd   short weekday name
    dd    narrow weekday name      d     weekday number (0 = Sunday)

A ``j`` prefix (``jYYYY/jMM/jDD``) is accepted for compatibility with
jalali-moment patterns and text inside ``[...]`` is copied literally.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, NamedTuple, Optional, Set, Tuple, Union

from .cache import ComputeOnceCache
from .converter import MAXYEAR, MINYEAR, JalaliDate, create_date, days_in_month
from .errors import FormatError, JalaliCalendarError, OutOfRangeError, ParseError
from .locales import ASCII_DIGITS, PERSIAN_DIGITS, LocaleTable

__all__ = [
    "FormatCache",
    "FormatSpec",
    "Segment",
    "format_date",
    "parse_date",
]

_ARABIC_INDIC_DIGITS = "٠١٢٣٤٥٦٧٨٩"


class _Token(NamedTuple):
    field: str
    width: int
    fixed: bool
    style: Optional[str] = None


# Ordered longest first so the tokenizer prefers ``MMMM`` over ``MM``.
_TOKENS: Dict[str, _Token] = {
    "YYYY": _Token("year", 4, True),
    "YY": _Token("year", 2, True),
    "MMMM": _Token("month", 0, False, "long"),
    "MMM": _Token("month", 0, False, "short"),
    "MM": _Token("month", 2, True),
    "M": _Token("month", 2, False),
    "DD": _Token("day", 2, True),
    "D": _Token("day", 2, False),
    "dddd": _Token("weekday", 0, False, "long"),
    "ddd": _Token("weekday", 0, False, "short"),
    "dd": _Token("weekday", 0, False, "narrow"),
    "d": _Token("weekday", 1, False),
}


class Segment(NamedTuple):
    """One piece of a compiled pattern; ``token`` is ``None`` for literals."""

    token: Optional[str]
    text: str

    @property
    def is_literal(self) -> bool:
        return self.token is None


def _match_token(pattern: str, index: int) -> Optional[str]:
    for token in _TOKENS:
        if pattern.startswith(token, index):
            return token
    return None


def _tokenize(pattern: str) -> Tuple[Segment, ...]:
    segments: List[Segment] = []
    literal: List[str] = []

    def flush() -> None:
        text = "".join(literal)
        literal.clear()
        if text:
            segments.append(Segment(None, text))

    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == "[":
            end = pattern.find("]", index + 1)
            if end == -1:
                raise FormatError(f"Unterminated literal escape at position {index} in {pattern!r}")
            literal.append(pattern[index + 1:end])
            index = end + 1
            continue

        start = index + 1 if char == "j" else index
        token = _match_token(pattern, start)
        if token is None:
            literal.append(char)
            index += 1
            continue

        flush()
        end = start + len(token)
        segments.append(Segment(token, pattern[index:end]))
        index = end

    flush()
    return tuple(segments)


@dataclass(frozen=True)
class FormatSpec:
    """A pattern string compiled once into ordered token/literal segments."""

    pattern: str
    segments: Tuple[Segment, ...]

    @classmethod
    def compile(cls, pattern: str) -> "FormatSpec":
        if not isinstance(pattern, str) or not pattern:
            raise FormatError(f"Format pattern must be a non-empty string, got {pattern!r}")
        return cls(pattern, _tokenize(pattern))

    @property
    def tokens(self) -> Tuple[str, ...]:
        return tuple(segment.token for segment in self.segments if segment.token)

    def has_field(self, field: str) -> bool:
        return any(_TOKENS[token].field == field for token in self.tokens)


class FormatCache:
    """Compiled :class:`FormatSpec` objects keyed by pattern string."""

    def __init__(self) -> None:
        self._specs: ComputeOnceCache[str, FormatSpec] = ComputeOnceCache("format", FormatSpec.compile)

    def get(self, pattern: Union[str, FormatSpec]) -> FormatSpec:
        if isinstance(pattern, FormatSpec):
            return pattern
        return self._specs.get(pattern)

    def __len__(self) -> int:
        return len(self._specs)


def _as_spec(spec: Union[str, FormatSpec]) -> FormatSpec:
    return spec if isinstance(spec, FormatSpec) else FormatSpec.compile(spec)


def _names(locale: LocaleTable, field: str, style: str) -> Tuple[str, ...]:
    if field == "month":
        return locale.month_names(style)
    return locale.weekday_names(style)


def format_date(
    value: JalaliDate,
    spec: Union[str, FormatSpec],
    locale: LocaleTable,
    *,
    native_digits: bool = False,
) -> str:
    """Render ``value`` according to ``spec`` using names from ``locale``."""

    spec = _as_spec(spec)
    if not isinstance(value, JalaliDate):
        raise FormatError(f"Cannot format {type(value).__name__}; expected JalaliDate")
    try:
        create_date(value.year, value.month, value.day)
    except JalaliCalendarError as exc:
        raise FormatError(f"Cannot format invalid date: {exc}") from exc

    numbers = {
        "year": value.year,
        "month": value.month,
        "day": value.day,
        "weekday": value.day_of_week(),
    }
    parts: List[str] = []
    for segment in spec.segments:
        if segment.token is None:
            parts.append(segment.text)
            continue
        token = _TOKENS[segment.token]
        number = numbers[token.field]
        if token.style is not None:
            names = _names(locale, token.field, token.style)
            if not names:
                raise FormatError(
                    f"Locale {locale.locale_id!r} has no {token.style} {token.field} names "
                    f"required by {segment.text!r}"
                )
            parts.append(names[number - 1] if token.field == "month" else names[number])
            continue
        if segment.token == "YY":
            number %= 100
        text = f"{number:0{token.width}d}" if token.fixed else str(number)
        parts.append(locale.localize_digits(text) if native_digits else text)
    return "".join(parts)


def _digit_table(locale: LocaleTable) -> Dict[int, int]:
    table = str.maketrans(PERSIAN_DIGITS + _ARABIC_INDIC_DIGITS, ASCII_DIGITS * 2)
    table.update(str.maketrans(locale.native_digits, ASCII_DIGITS))
    return table


def _pivot_two_digit_year(value: int) -> int:
    return value + (1300 if value > 47 else 1400)


class _Scanner:
    """Single left-to-right pass over ``text`` driven by the pattern segments."""

    def __init__(self, text: str, spec: FormatSpec, locale: LocaleTable) -> None:
        self.original = text
        self.text = text.translate(_digit_table(locale))
        self.spec = spec
        self.locale = locale
        self.position = 0
        self.fields: Dict[str, int] = {}
        self.weekdays: Optional[Set[int]] = None
        self.origins: Dict[str, Tuple[int, int]] = {}

    def fail(self, message: str, index: Optional[int] = None, position: Optional[int] = None) -> ParseError:
        token = self.spec.segments[index].text if index is not None else None
        return ParseError(
            message,
            text=self.original,
            position=self.position if position is None else position,
            token_index=index,
            token=token,
        )

    def run(self) -> JalaliDate:
        for index, segment in enumerate(self.spec.segments):
            if self.position >= len(self.text):
                raise self.fail("unexpected end of input", index)
            if segment.token is None:
                self._literal(index, segment.text)
            else:
                self._token(index, segment.token)
        if self.position != len(self.text):
            raise self.fail("unexpected trailing input")
        return self._build()

    def _literal(self, index: int, literal: str) -> None:
        if not self.text.startswith(literal, self.position):
            raise self.fail(f"expected {literal!r}", index)
        self.position += len(literal)

    def _token(self, index: int, name: str) -> None:
        token = _TOKENS[name]
        start = self.position
        if token.style is not None:
            matches = self._names(index, token)
            if token.field == "weekday":
                self.weekdays = matches if self.weekdays is None else self.weekdays & matches
                self.origins.setdefault("weekday", (index, start))
                return
            if len(matches) > 1:
                raise self.fail(f"ambiguous {token.style} month name", index, start)
            value = min(matches) + 1
        else:
            value = self._number(index, token)
            if name == "YY":
                value = _pivot_two_digit_year(value)
            if token.field == "weekday":
                if value > 6:
                    raise self.fail("weekday number must be in 0..6", index, start)
                self.weekdays = {value} if self.weekdays is None else self.weekdays & {value}
                self.origins.setdefault("weekday", (index, start))
                return

        previous = self.fields.get(token.field)
        if previous is not None and previous != value:
            raise self.fail(f"conflicting {token.field} values {previous} and {value}", index, start)
        self.fields[token.field] = value
        self.origins.setdefault(token.field, (index, start))

    def _number(self, index: int, token: _Token) -> int:
        end = self.position
        limit = min(len(self.text), self.position + token.width)
        while end < limit and self.text[end] in ASCII_DIGITS:
            end += 1
        consumed = end - self.position
        if consumed == 0 or (token.fixed and consumed != token.width):
            expected = f"{token.width} digits" if token.fixed else "a number"
            raise self.fail(f"expected {expected} for {token.field}", index)
        value = int(self.text[self.position:end])
        self.position = end
        return value

    def _names(self, index: int, token: _Token) -> Set[int]:
        names = _names(self.locale, token.field, token.style or "long")
        if not names:
            raise FormatError(f"Locale {self.locale.locale_id!r} has no {token.style} {token.field} names")
        best = 0
        matches: Set[int] = set()
        for number, candidate in enumerate(names):
            size = len(candidate)
            chunk = self.text[self.position:self.position + size]
            if size < best or chunk.casefold() != candidate.casefold():
                continue
            if size > best:
                best, matches = size, set()
            matches.add(number)
        if not matches:
            raise self.fail(f"expected a {token.style} {token.field} name", index)
        self.position += best
        return matches

    def _build(self) -> JalaliDate:
        year = self.fields["year"]
        month = self.fields.get("month", 1)
        day = self.fields.get("day", 1)

        if not (MINYEAR <= year <= MAXYEAR):
            raise self.fail(f"year must be in {MINYEAR}..{MAXYEAR}", *self.origins["year"])
        if not (1 <= month <= 12):
            raise self.fail("month must be in 1..12", *self.origins["month"])
        max_day = days_in_month(year, month)
        if not (1 <= day <= max_day):
            raise self.fail(f"day must be in 1..{max_day}", *self.origins["day"])

        try:
            result = JalaliDate(year, month, day)
        except OutOfRangeError as exc:
            raise self.fail(str(exc), *self.origins["year"]) from exc
        if self.weekdays is not None and result.day_of_week() not in self.weekdays:
            raise self.fail("weekday does not match the date", *self.origins["weekday"])
        return result


def parse_date(text: str, spec: Union[str, FormatSpec], locale: LocaleTable) -> JalaliDate:
    """Parse ``text`` against ``spec``; all of the text must match."""

    spec = _as_spec(spec)
    if not isinstance(text, str):
        raise TypeError(f"Expected text to parse, got {type(text).__name__}")
    if not spec.has_field("year"):
        raise FormatError(f"Pattern {spec.pattern!r} has no year token to parse")
    return _Scanner(text, spec, locale).run()
