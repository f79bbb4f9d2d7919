"""Tests for closed date intervals."""

from datetime import date, datetime

import pytest

from lodgely.domain.errors import InvalidRangeError, ReservationError
from lodgely.domain.intervals import DateInterval, make_interval


class TestMakeInterval:
    def test_valid_range(self):
        interval = make_interval(date(2024, 6, 1), date(2024, 6, 10))
        assert interval == DateInterval(date(2024, 6, 1), date(2024, 6, 10))

    def test_single_day_is_valid(self):
        interval = make_interval(date(2024, 6, 1), date(2024, 6, 1))
        assert interval.days == 1

    def test_end_before_start_rejected(self):
        with pytest.raises(InvalidRangeError) as exc_info:
            make_interval(date(2024, 6, 10), date(2024, 6, 5))

        assert exc_info.value.start == date(2024, 6, 10)
        assert exc_info.value.end == date(2024, 6, 5)

    def test_error_is_value_error_and_reservation_error(self):
        with pytest.raises(ValueError):
            make_interval(date(2024, 6, 10), date(2024, 6, 5))
        with pytest.raises(ReservationError):
            make_interval(date(2024, 6, 10), date(2024, 6, 5))

    def test_datetime_rejected(self):
        with pytest.raises(InvalidRangeError):
            make_interval(datetime(2024, 6, 1, 10), date(2024, 6, 5))

    def test_non_date_rejected(self):
        with pytest.raises(InvalidRangeError):
            make_interval("2024-06-01", "2024-06-05")


class TestDateInterval:
    def test_days_counts_both_ends(self):
        assert DateInterval(date(2024, 6, 1), date(2024, 6, 10)).days == 10

    def test_contains_is_inclusive(self):
        interval = DateInterval(date(2024, 6, 1), date(2024, 6, 10))
        assert interval.contains(date(2024, 6, 1))
        assert interval.contains(date(2024, 6, 10))
        assert not interval.contains(date(2024, 6, 11))
        assert not interval.contains(date(2024, 5, 31))

    def test_ordering_by_start_then_end(self):
        a = DateInterval(date(2024, 6, 1), date(2024, 6, 10))
        b = DateInterval(date(2024, 6, 1), date(2024, 6, 12))
        c = DateInterval(date(2024, 6, 2), date(2024, 6, 3))
        assert sorted([c, b, a]) == [a, b, c]

    def test_str(self):
        interval = DateInterval(date(2024, 6, 1), date(2024, 6, 10))
        assert str(interval) == "[2024-06-01, 2024-06-10]"
