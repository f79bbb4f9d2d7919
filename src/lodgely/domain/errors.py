"""Typed errors raised by the reservation engine.

Every error leaves the engine in its prior state. Callers translate these
into user-facing messages.
"""

from __future__ import annotations

from datetime import date


class ReservationError(Exception):
    """Base class for reservation engine errors."""

    pass


class InvalidRangeError(ReservationError, ValueError):
    """Raised when an end date is not after (or before) the start date."""

    def __init__(self, start: object, end: object, message: str | None = None) -> None:
        self.start = start
        self.end = end
        super().__init__(message or f"Invalid date range: {start} to {end}")


class InvalidDateError(ReservationError, ValueError):
    """Raised when a reservation would start before the current date."""

    def __init__(self, start: date, today: date) -> None:
        self.start = start
        self.today = today
        super().__init__(f"Start date {start} is in the past (today is {today})")


class InvalidPriceError(ReservationError, ValueError):
    """Raised when the total price is not positive."""

    pass


class OverlapError(ReservationError):
    """Raised when confirming would overlap a blocking reservation."""

    def __init__(
        self,
        resource_id: str,
        reservation_id: str | None = None,
        conflicting_reservation_id: str | None = None,
    ) -> None:
        self.resource_id = resource_id
        self.reservation_id = reservation_id
        self.conflicting_reservation_id = conflicting_reservation_id
        detail = (
            f" (conflicts with {conflicting_reservation_id})"
            if conflicting_reservation_id
            else ""
        )
        super().__init__(f"Resource {resource_id} is not available{detail}")


class NotFoundError(ReservationError, LookupError):
    """Raised when a reservation id is unknown."""

    def __init__(self, reservation_id: str) -> None:
        self.reservation_id = reservation_id
        super().__init__(f"Reservation {reservation_id} not found")


class InvalidTransitionError(ReservationError):
    """Raised when a status change is not allowed from the current status."""

    def __init__(self, reservation_id: str, current: str, target: str) -> None:
        self.reservation_id = reservation_id
        self.current = current
        self.target = target
        super().__init__(
            f"Reservation {reservation_id} cannot move from {current} to {target}"
        )
