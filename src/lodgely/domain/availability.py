"""Per-resource availability index.

Keeps the blocking reservations of each resource sorted by start date so an
overlap scan can stop as soon as an entry starts after the queried range
ends. Each resource has its own bucket lock: readers see a bucket either
before or after a write, and buckets never contend with each other.
"""

from __future__ import annotations

import bisect
import threading
from dataclasses import dataclass, field

from lodgely.domain.intervals import DateInterval
from lodgely.domain.models import Reservation
from lodgely.domain.overlap import overlaps


@dataclass
class _Bucket:
    lock: threading.Lock = field(default_factory=threading.Lock)
    # (interval, reservation_id), sorted
    entries: list[tuple[DateInterval, str]] = field(default_factory=list)


class AvailabilityIndex:
    """Sorted per-resource collection of blocking reservation intervals."""

    def __init__(self) -> None:
        # Buckets are never dropped; one per resource ever indexed.
        self._buckets: dict[str, _Bucket] = {}
        self._registry_lock = threading.Lock()

    def _bucket(self, resource_id: str) -> _Bucket:
        bucket = self._buckets.get(resource_id)
        if bucket is None:
            with self._registry_lock:
                bucket = self._buckets.setdefault(resource_id, _Bucket())
        return bucket

    def find_conflict(
        self,
        resource_id: str,
        interval: DateInterval,
        *,
        exclude_reservation_id: str | None = None,
    ) -> str | None:
        """Return the id of the first indexed entry overlapping interval.

        Args:
            resource_id: Resource to scan.
            interval: Requested range (closed).
            exclude_reservation_id: Entry to ignore (the reservation being
                confirmed, when it is already indexed).

        Returns:
            Conflicting reservation id, or None if the range is free.
        """
        bucket = self._buckets.get(resource_id)
        if bucket is None:
            return None

        with bucket.lock:
            for candidate, reservation_id in bucket.entries:
                if candidate.start > interval.end:
                    break
                if reservation_id == exclude_reservation_id:
                    continue
                if overlaps(candidate, interval):
                    return reservation_id
        return None

    def query(
        self,
        resource_id: str,
        interval: DateInterval,
        *,
        exclude_reservation_id: str | None = None,
    ) -> bool:
        """Return True if no indexed entry overlaps interval."""
        return (
            self.find_conflict(
                resource_id,
                interval,
                exclude_reservation_id=exclude_reservation_id,
            )
            is None
        )

    def insert(self, resource_id: str, reservation: Reservation) -> None:
        """Index a reservation; re-inserting the same id replaces its entry."""
        bucket = self._bucket(resource_id)
        entry = (reservation.interval, reservation.id)
        with bucket.lock:
            bucket.entries = [e for e in bucket.entries if e[1] != reservation.id]
            bisect.insort(bucket.entries, entry)

    def remove(self, resource_id: str, reservation: Reservation) -> None:
        """Drop a reservation from the index. Absent entries are ignored."""
        bucket = self._buckets.get(resource_id)
        if bucket is None:
            return
        with bucket.lock:
            bucket.entries = [e for e in bucket.entries if e[1] != reservation.id]

    def entries(self, resource_id: str) -> list[tuple[DateInterval, str]]:
        """Snapshot of the indexed (interval, reservation_id) pairs, sorted."""
        bucket = self._buckets.get(resource_id)
        if bucket is None:
            return []
        with bucket.lock:
            return list(bucket.entries)
