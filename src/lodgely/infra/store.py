"""Persistence collaborators for the reservation manager.

The manager writes through to a store before acknowledging any change, and
loads its working set from the store at startup.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Protocol

import psycopg2.errors

from lodgely.domain.errors import NotFoundError, OverlapError
from lodgely.domain.models import Reservation
from lodgely.infra.db import txn
from lodgely.infra.repositories.bookings_repository import (
    insert_booking,
    list_bookings,
    update_booking_status,
)
from lodgely.observability.logging import get_logger

logger = get_logger(__name__)


class ReservationStore(Protocol):
    """Durable storage for reservation records."""

    def insert(self, reservation: Reservation) -> None: ...

    def update(self, reservation: Reservation) -> None: ...

    def load_all(self) -> list[Reservation]: ...


class InMemoryReservationStore:
    """Dict-backed store for tests and embedded use."""

    def __init__(self, reservations: list[Reservation] | None = None) -> None:
        self._lock = threading.Lock()
        self._rows: dict[str, Reservation] = {r.id: r for r in reservations or []}

    def insert(self, reservation: Reservation) -> None:
        with self._lock:
            if reservation.id in self._rows:
                raise ValueError(f"Reservation {reservation.id} already stored")
            self._rows[reservation.id] = reservation

    def update(self, reservation: Reservation) -> None:
        with self._lock:
            if reservation.id not in self._rows:
                raise NotFoundError(reservation.id)
            self._rows[reservation.id] = reservation

    def load_all(self) -> list[Reservation]:
        with self._lock:
            return list(self._rows.values())

    def get(self, reservation_id: str) -> Reservation | None:
        with self._lock:
            return self._rows.get(reservation_id)


class PostgresReservationStore:
    """Write-through store backed by the bookings table.

    The bookings table carries its own exclusion constraint; a violation
    reported by Postgres surfaces as OverlapError.
    """

    def __init__(self, dsn: str | None = None) -> None:
        self._dsn = dsn

    def insert(self, reservation: Reservation) -> None:
        with _exclusion_as_overlap(reservation):
            with txn(dsn=self._dsn) as cur:
                insert_booking(cur, reservation)

    def update(self, reservation: Reservation) -> None:
        with _exclusion_as_overlap(reservation):
            with txn(dsn=self._dsn) as cur:
                if not update_booking_status(cur, reservation):
                    raise NotFoundError(reservation.id)

    def load_all(self) -> list[Reservation]:
        with txn(dsn=self._dsn) as cur:
            return list_bookings(cur)


@contextmanager
def _exclusion_as_overlap(reservation: Reservation) -> Iterator[None]:
    """Map a Postgres exclusion_violation to OverlapError."""
    try:
        yield
    except psycopg2.errors.ExclusionViolation as exc:
        logger.warning(
            "booking exclusion constraint violated",
            extra={
                "extra_fields": {
                    "reservation_id": reservation.id,
                    "resource_id": reservation.resource_id,
                    "start": reservation.start.isoformat(),
                    "end": reservation.end.isoformat(),
                },
            },
        )
        raise OverlapError(
            reservation.resource_id,
            reservation_id=reservation.id,
        ) from exc
