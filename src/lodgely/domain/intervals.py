"""Closed date intervals used for reservation ranges.

Both endpoints are inclusive: [2024-06-01, 2024-06-10] covers ten days.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from lodgely.domain.errors import InvalidRangeError


@dataclass(frozen=True, order=True)
class DateInterval:
    """Closed interval of calendar dates, ordered by start then end."""

    start: date
    end: date

    @property
    def days(self) -> int:
        """Number of calendar days covered, both ends included."""
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def __str__(self) -> str:
        return f"[{self.start.isoformat()}, {self.end.isoformat()}]"


def _is_plain_date(value: object) -> bool:
    # datetime is a subclass of date; mixing them breaks ordering
    return isinstance(value, date) and not isinstance(value, datetime)


def make_interval(start: date, end: date) -> DateInterval:
    """Build a closed interval.

    Args:
        start: First day (inclusive).
        end: Last day (inclusive). May equal start for a single day.

    Returns:
        DateInterval for the range.

    Raises:
        InvalidRangeError: If either bound is not a date, or end < start.
    """
    if not (_is_plain_date(start) and _is_plain_date(end)):
        raise InvalidRangeError(start, end, "start and end must be dates")
    if end < start:
        raise InvalidRangeError(start, end)
    return DateInterval(start=start, end=end)
