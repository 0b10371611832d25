"""
Тесты для общего ядра: деньги, период проживания, утилиты.
"""

import re
from datetime import date
from decimal import Decimal

import pytest

from hotel_reservation.shared_kernel import (
    DateRange,
    InvalidDateRangeException,
    Money,
    dates_overlap,
    format_date,
    generate_reservation_id,
)


class TestMoney:
    def test_multiply_by_nights(self):
        price = Money(amount=Decimal("3000"))
        assert price * 2 == Money(amount=Decimal("6000"))
        assert price.currency == "RUB"

    def test_negative_amount_is_rejected(self):
        with pytest.raises(ValueError):
            Money(amount=-1)

    def test_lowercase_currency_is_rejected(self):
        with pytest.raises(ValueError):
            Money(amount=1, currency="rub")

    def test_negative_multiplier_is_rejected(self):
        with pytest.raises(ValueError, match="Множитель"):
            Money(amount=1) * -2

    def test_str(self):
        assert str(Money(amount=Decimal("3000"))) == "3000.00 RUB"


class TestDateRange:
    def test_nights(self):
        period = DateRange(check_in=date(2024, 1, 1), check_out=date(2024, 1, 3))
        assert period.nights == 2
        assert str(period) == "2024-01-01 -> 2024-01-03"

    def test_check_out_must_follow_check_in(self):
        with pytest.raises(ValueError, match="Дата выезда"):
            DateRange(check_in=date(2024, 1, 3), check_out=date(2024, 1, 3))

    def test_at_least_one_night_coerces_inverted_range(self):
        period = DateRange.at_least_one_night(date(2024, 1, 5), date(2024, 1, 2))
        assert period.check_in == date(2024, 1, 5)
        assert period.check_out == date(2024, 1, 6)
        assert period.nights == 1

    def test_at_least_one_night_keeps_valid_range(self):
        period = DateRange.at_least_one_night(date(2024, 1, 1), date(2024, 1, 4))
        assert period.nights == 3

    def test_at_least_one_night_at_calendar_end(self):
        with pytest.raises(InvalidDateRangeException):
            DateRange.at_least_one_night(date.max, date.max)

    def test_checkout_day_is_free_for_next_check_in(self):
        first = DateRange(check_in=date(2024, 1, 1), check_out=date(2024, 1, 3))
        second = DateRange(check_in=date(2024, 1, 3), check_out=date(2024, 1, 5))
        assert not first.overlaps(second)
        assert not second.overlaps(first)

    def test_overlapping_ranges(self):
        first = DateRange(check_in=date(2024, 1, 1), check_out=date(2024, 1, 3))
        second = DateRange(check_in=date(2024, 1, 2), check_out=date(2024, 1, 4))
        assert first.overlaps(second)


@pytest.mark.parametrize(
    "a_start, a_end, b_start, b_end, expected",
    [
        (1, 3, 2, 4, True),
        (1, 3, 3, 5, False),
        (3, 5, 1, 3, False),
        (1, 10, 4, 5, True),
        (4, 5, 1, 10, True),
    ],
)
def test_dates_overlap(a_start, a_end, b_start, b_end, expected):
    d = lambda day: date(2024, 1, day)  # noqa: E731
    assert dates_overlap(d(a_start), d(a_end), d(b_start), d(b_end)) is expected


def test_format_date():
    assert format_date(date(2024, 2, 29)) == "2024-02-29"


def test_generate_reservation_id():
    first = generate_reservation_id(1)
    second = generate_reservation_id(1)
    assert re.fullmatch(r"R000001-[0-9A-F]{8}", first)
    assert first != second
