from datetime import date, datetime

import pytest

from jalali_calendar.api.converter import (
    MAXYEAR,
    JalaliDate,
    coerce_gregorian,
    coerce_jalali,
    create_date,
    day_of_week,
    days_in_month,
    gregorian_to_jalali,
    is_jalali_leap,
    jalali_to_gregorian,
)
from jalali_calendar.api.errors import InvalidDateError, OutOfRangeError


@pytest.mark.parametrize(
    "value,expected",
    [
        (date(2024, 3, 20), "1403-01-01"),
        ("2023-03-21", "1402-01-01"),
        ((2017, 1, 1), "1395-10-12"),
        (datetime(2025, 3, 20, 23, 59), "1403-12-30"),
        (date(2025, 3, 21), "1404-01-01"),
    ],
)
def test_gregorian_to_jalali_known_values(value, expected):
    assert gregorian_to_jalali(value).isoformat() == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (JalaliDate(1403, 1, 1), date(2024, 3, 20)),
        ("1402-01-01", date(2023, 3, 21)),
        ((1395, 10, 12), date(2017, 1, 1)),
        ("1403/12/30", date(2025, 3, 20)),
    ],
)
def test_jalali_to_gregorian_known_values(value, expected):
    assert jalali_to_gregorian(value) == expected


@pytest.mark.parametrize(
    "gregorian",
    [
        date(2000, 2, 29),
        date(1991, 8, 6),
        date(2010, 12, 31),
        date(2030, 6, 1),
    ],
)
def test_roundtrip_conversion(gregorian):
    jalali = gregorian_to_jalali(gregorian)
    roundtrip = jalali_to_gregorian(jalali)
    assert roundtrip == gregorian


def test_roundtrip_across_supported_span():
    first = date(622, 3, 21).toordinal()
    last = date.max.toordinal()
    for ordinal in list(range(first, last, 9973)) + [first, last]:
        gregorian = date.fromordinal(ordinal)
        jalali = gregorian_to_jalali(gregorian)
        assert jalali.toordinal() == ordinal
        assert jalali_to_gregorian(jalali) == gregorian
        assert gregorian_to_jalali(jalali_to_gregorian(jalali)) == jalali


def test_consecutive_days_around_year_boundaries_are_contiguous():
    for year in (1, 1399, 1402, 1403, 1404, 2000, MAXYEAR - 1):
        start = JalaliDate(year, 12, days_in_month(year, 12))
        following = gregorian_to_jalali(date.fromordinal(start.toordinal() + 1))
        assert following == JalaliDate(year + 1, 1, 1)


def test_supported_span_edges():
    assert gregorian_to_jalali(date(622, 3, 21)) == JalaliDate(1, 1, 1)
    assert gregorian_to_jalali(date.max) == JalaliDate(9378, 10, 10)
    assert jalali_to_gregorian(JalaliDate(9378, 10, 10)) == date.max


@pytest.mark.parametrize("fields", [(9378, 10, 11), (9378, 11, 1), (9378, 12, 29)])
def test_dates_after_last_gregorian_day_cannot_be_constructed(fields):
    with pytest.raises(OutOfRangeError):
        JalaliDate(*fields)
    with pytest.raises(OutOfRangeError):
        create_date(*fields)


def test_last_supported_day_is_constructible_but_not_extendable():
    last = JalaliDate(9378, 10, 10)
    assert last.add_days(0) == last
    assert last.to_gregorian() == date.max
    with pytest.raises(OutOfRangeError):
        last.add_days(1)
    with pytest.raises(OutOfRangeError):
        last.add_months(1)


@pytest.mark.parametrize(
    "call",
    [
        lambda: gregorian_to_jalali(date(622, 3, 20)),
        lambda: gregorian_to_jalali(date.min),
        lambda: jalali_to_gregorian(JalaliDate(9378, 10, 11)),
        lambda: JalaliDate(0, 1, 1),
        lambda: JalaliDate(MAXYEAR + 1, 1, 1),
        lambda: gregorian_to_jalali((10000, 1, 1)),
    ],
)
def test_conversion_outside_supported_span_raises(call):
    with pytest.raises(OutOfRangeError):
        call()


def test_invalid_gregorian_input_raises_invalid_date():
    with pytest.raises(InvalidDateError):
        gregorian_to_jalali((2023, 2, 29))
    with pytest.raises(InvalidDateError):
        gregorian_to_jalali("2024-03-xx")


def test_coerce_helpers_accept_various_inputs():
    assert coerce_gregorian("2024/03/20") == (2024, 3, 20)
    assert coerce_jalali("1403/01/01") == (1403, 1, 1)
    assert coerce_gregorian((2022, 11, 5)) == (2022, 11, 5)
    assert coerce_jalali(JalaliDate(1402, 12, 29)) == (1402, 12, 29)
    assert coerce_gregorian(datetime(2024, 3, 20, 10, 30)) == (2024, 3, 20)


def test_coerce_helpers_reject_unusable_input():
    with pytest.raises(InvalidDateError):
        coerce_jalali("1403-01")
    with pytest.raises(TypeError):
        coerce_gregorian(20240320)
    with pytest.raises(TypeError):
        coerce_jalali((1403, 1))


def test_is_jalali_leap_matches_known_years():
    assert is_jalali_leap(1399)
    assert not is_jalali_leap(1400)
    assert is_jalali_leap(1403)
    assert not is_jalali_leap(1404)
    assert is_jalali_leap(1408)
    assert is_jalali_leap(1375)


def test_leap_years_follow_33_year_cycle():
    leaps = [year for year in range(1, 34) if is_jalali_leap(year)]
    assert leaps == [1, 5, 9, 13, 17, 22, 26, 30]
    for year in range(1300, 1500):
        assert is_jalali_leap(year) == is_jalali_leap(year + 33)


@pytest.mark.parametrize("year", [1, 1354, 1399, 1400, 1402, 1403, 1404, 1408, 9377])
def test_month_length_table(year):
    for month in range(1, 7):
        assert days_in_month(year, month) == 31
    for month in range(7, 12):
        assert days_in_month(year, month) == 30
    assert days_in_month(year, 12) == (30 if is_jalali_leap(year) else 29)


def test_year_length_matches_leap_rule():
    for year in range(1350, 1450):
        length = JalaliDate(year + 1, 1, 1).toordinal() - JalaliDate(year, 1, 1).toordinal()
        assert length == (366 if is_jalali_leap(year) else 365)


def test_days_in_month_rejects_invalid_month():
    with pytest.raises(InvalidDateError):
        days_in_month(1403, 13)


def test_nowruz_1403_is_leap_with_thirty_day_esfand():
    assert is_jalali_leap(1403)
    assert days_in_month(1403, 12) == 30


@pytest.mark.parametrize(
    "fields",
    [
        (1403, 12, 31),
        (1402, 12, 30),
        (1403, 13, 1),
        (1403, 0, 1),
        (1403, 7, 31),
        (1403, 1, 0),
    ],
)
def test_create_date_rejects_invalid_fields(fields):
    with pytest.raises(InvalidDateError):
        create_date(*fields)


def test_invalid_date_error_is_a_value_error():
    with pytest.raises(ValueError):
        JalaliDate(1403, 12, 31)


def test_day_of_week_uses_sunday_based_numbering():
    # 2024-03-20 was a Wednesday
    assert day_of_week(JalaliDate(1403, 1, 1)) == 3
    assert JalaliDate(1403, 1, 1).day_of_week() == 3
    for offset in range(14):
        gregorian = date(2024, 3, 20).toordinal() + offset
        expected = (date.fromordinal(gregorian).weekday() + 1) % 7
        assert gregorian_to_jalali(date.fromordinal(gregorian)).day_of_week() == expected


def test_jalali_date_queries():
    value = JalaliDate(1403, 7, 15)
    assert value.is_leap_year()
    assert value.days_in_month() == 30
    assert value.day_of_year() == 186 + 15
    assert value.isoformat("/") == "1403/07/15"
    assert value.to_gregorian() == jalali_to_gregorian(value)
    assert JalaliDate.from_gregorian(value.to_gregorian()) == value


def test_jalali_dates_are_ordered_and_immutable():
    earlier = JalaliDate(1402, 12, 29)
    later = JalaliDate(1403, 1, 1)
    assert earlier < later
    assert sorted([later, earlier]) == [earlier, later]
    with pytest.raises(AttributeError):
        later.day = 2  # type: ignore[misc]


def test_today_matches_gregorian_today():
    before = date.today()
    today = JalaliDate.today().to_gregorian()
    assert before <= today <= date.today()
