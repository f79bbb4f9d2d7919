"""Tests for the per-resource availability index."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from helpers import d
from lodgely.domain.availability import AvailabilityIndex
from lodgely.domain.intervals import DateInterval
from lodgely.domain.models import Reservation, ReservationStatus

_NOW = datetime(2024, 5, 1, tzinfo=timezone.utc)


def _res(rid: str, start: str, end: str, resource: str = "prop-1") -> Reservation:
    return Reservation(
        id=rid,
        resource_id=resource,
        holder_id="user-1",
        start=d(start),
        end=d(end),
        status=ReservationStatus.CONFIRMED,
        total_price=Decimal("100.00"),
        created_at=_NOW,
        updated_at=_NOW,
    )


def _iv(start: str, end: str) -> DateInterval:
    return DateInterval(d(start), d(end))


@pytest.fixture
def index():
    return AvailabilityIndex()


class TestQuery:
    def test_empty_resource_is_free(self, index):
        assert index.query("prop-1", _iv("2024-06-01", "2024-06-05")) is True

    def test_overlap_is_not_free(self, index):
        index.insert("prop-1", _res("a", "2024-06-01", "2024-06-10"))

        assert index.query("prop-1", _iv("2024-06-05", "2024-06-12")) is False

    def test_touching_boundary_is_not_free(self, index):
        index.insert("prop-1", _res("a", "2024-06-01", "2024-06-10"))

        assert index.query("prop-1", _iv("2024-06-10", "2024-06-15")) is False
        assert index.query("prop-1", _iv("2024-05-25", "2024-06-01")) is False

    def test_gap_is_free(self, index):
        index.insert("prop-1", _res("a", "2024-06-01", "2024-06-10"))
        index.insert("prop-1", _res("b", "2024-06-20", "2024-06-25"))

        assert index.query("prop-1", _iv("2024-06-11", "2024-06-19")) is True

    def test_other_resource_is_ignored(self, index):
        index.insert("prop-1", _res("a", "2024-06-01", "2024-06-10"))

        assert index.query("prop-2", _iv("2024-06-01", "2024-06-10")) is True

    def test_exclude_reservation_id(self, index):
        index.insert("prop-1", _res("a", "2024-06-01", "2024-06-10"))

        assert index.query(
            "prop-1", _iv("2024-06-01", "2024-06-10"), exclude_reservation_id="a"
        ) is True

    def test_long_earlier_entry_still_found(self, index):
        """An entry starting long before the query can still cover it."""
        index.insert("prop-1", _res("long", "2024-01-01", "2024-12-31"))
        index.insert("prop-1", _res("short", "2025-02-01", "2025-02-03"))

        assert index.find_conflict("prop-1", _iv("2024-07-01", "2024-07-02")) == "long"


class TestFindConflict:
    def test_returns_first_conflict_by_start(self, index):
        index.insert("prop-1", _res("later", "2024-06-08", "2024-06-09"))
        index.insert("prop-1", _res("earlier", "2024-06-02", "2024-06-03"))

        assert index.find_conflict("prop-1", _iv("2024-06-01", "2024-06-30")) == "earlier"

    def test_none_when_free(self, index):
        index.insert("prop-1", _res("a", "2024-06-01", "2024-06-03"))

        assert index.find_conflict("prop-1", _iv("2024-06-04", "2024-06-05")) is None


class TestInsertRemove:
    def test_entries_sorted_by_start(self, index):
        index.insert("prop-1", _res("c", "2024-08-01", "2024-08-02"))
        index.insert("prop-1", _res("a", "2024-06-01", "2024-06-02"))
        index.insert("prop-1", _res("b", "2024-07-01", "2024-07-02"))

        assert [rid for _, rid in index.entries("prop-1")] == ["a", "b", "c"]

    def test_reinsert_replaces_entry(self, index):
        index.insert("prop-1", _res("a", "2024-06-01", "2024-06-02"))
        index.insert("prop-1", _res("a", "2024-06-01", "2024-06-02"))

        assert len(index.entries("prop-1")) == 1

    def test_remove_frees_range(self, index):
        reservation = _res("a", "2024-06-01", "2024-06-10")
        index.insert("prop-1", reservation)
        index.remove("prop-1", reservation)

        assert index.query("prop-1", _iv("2024-06-01", "2024-06-10")) is True
        assert index.entries("prop-1") == []

    def test_remove_absent_is_noop(self, index):
        index.remove("prop-1", _res("ghost", "2024-06-01", "2024-06-02"))
        index.insert("prop-1", _res("a", "2024-06-01", "2024-06-02"))
        index.remove("prop-1", _res("ghost", "2024-06-01", "2024-06-02"))

        assert [rid for _, rid in index.entries("prop-1")] == ["a"]

    def test_entries_is_a_snapshot(self, index):
        index.insert("prop-1", _res("a", "2024-06-01", "2024-06-02"))
        snapshot = index.entries("prop-1")
        index.insert("prop-1", _res("b", "2024-07-01", "2024-07-02"))

        assert len(snapshot) == 1

