"""Shared test helper functions for Lodgely tests.

Regular functions and classes (not fixtures), importable from conftest.py and
individual test files.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

# Reference "now" for managers built in tests; scenario dates lie after it.
FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
TODAY = FIXED_NOW.date()


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def d(iso: str) -> date:
    """Shorthand for date.fromisoformat."""
    return date.fromisoformat(iso)
