"""Reservation models."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from lodgely.domain.intervals import DateInterval


class ReservationStatus(str, Enum):
    """Booking status, stored as text in bookings.status."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELED = "canceled"


# Allowed status moves. Same-status moves are handled by the manager as no-ops.
TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset(
        {ReservationStatus.CONFIRMED, ReservationStatus.CANCELED}
    ),
    ReservationStatus.CONFIRMED: frozenset({ReservationStatus.CANCELED}),
    ReservationStatus.CANCELED: frozenset(),
}


@dataclass(frozen=True)
class Reservation:
    """A date-range hold on a resource (one bookings row).

    Instances are immutable; status changes produce a new instance via
    with_status().
    """

    id: str
    resource_id: str
    holder_id: str
    start: date
    end: date
    status: ReservationStatus
    total_price: Decimal
    created_at: datetime
    updated_at: datetime

    @property
    def interval(self) -> DateInterval:
        return DateInterval(start=self.start, end=self.end)

    @property
    def nights(self) -> int:
        """Length of stay in nights (end - start)."""
        return (self.end - self.start).days

    def with_status(self, status: ReservationStatus, *, at: datetime) -> Reservation:
        return replace(self, status=status, updated_at=at)
