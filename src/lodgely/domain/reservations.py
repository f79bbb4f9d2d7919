"""Reservation lifecycle manager.

The manager is the only component that changes reservation status. It keeps
the working set in memory, writes every change through to a store before
acknowledging it, and enforces the non-overlap invariant:

    no two confirmed reservations of the same resource share a day
    (closed ranges, so check-out day == next check-in day is a conflict).

Check-then-insert in confirm() runs under a per-resource lock. Different
resources never share a lock.

Lifecycle:
    pending -> confirmed  (gated by the overlap check)
    pending -> canceled
    confirmed -> canceled
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Callable
from contextlib import ExitStack
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from lodgely.domain.availability import AvailabilityIndex
from lodgely.domain.errors import (
    InvalidDateError,
    InvalidPriceError,
    InvalidRangeError,
    InvalidTransitionError,
    NotFoundError,
    OverlapError,
)
from lodgely.domain.intervals import make_interval
from lodgely.domain.models import TRANSITIONS, Reservation, ReservationStatus
from lodgely.infra.settings import EngineSettings
from lodgely.infra.store import ReservationStore
from lodgely.infra.time import to_utc, utc_now
from lodgely.observability.correlation import correlation_scope
from lodgely.observability.logging import get_logger

logger = get_logger(__name__)

# bookings.total_price is NUMERIC(10, 2)
_PRICE_STEP = Decimal("0.01")
_PRICE_LIMIT = Decimal("100000000")


def _coerce_price(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, float):
        # floats carry binary rounding error into money columns
        value = str(value)
    try:
        price = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidPriceError(f"Invalid total price: {value!r}") from None
    if not price.is_finite() or price <= 0:
        raise InvalidPriceError(f"Total price must be positive, got {value!r}")
    if price >= _PRICE_LIMIT:
        raise InvalidPriceError(f"Total price must be below {_PRICE_LIMIT}, got {value!r}")
    quantized = price.quantize(_PRICE_STEP)
    if quantized != price:
        raise InvalidPriceError(f"Total price allows at most 2 decimal places, got {value!r}")
    return quantized


class ReservationManager:
    """Creates, confirms and cancels reservations under the overlap invariant.

    Args:
        store: Persistence collaborator; written before every acknowledgement.
        settings: Engine policy flags (see lodgely.infra.settings).
        clock: Returns the current timezone-aware datetime. Defaults to UTC now.
    """

    def __init__(
        self,
        store: ReservationStore,
        *,
        settings: EngineSettings | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._settings = settings or EngineSettings()
        self._clock = clock or utc_now
        self._index = AvailabilityIndex()
        self._reservations: dict[str, Reservation] = {}
        # One lock per resource ever seen; sized by the property catalog.
        self._resource_locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    # ── internals ──────────────────────────────────────────────────────

    def _resource_lock(self, resource_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._resource_locks.get(resource_id)
            if lock is None:
                lock = self._resource_locks[resource_id] = threading.Lock()
            return lock

    def _blocks(self, reservation: Reservation) -> bool:
        """Whether a reservation occupies the availability index."""
        if reservation.status is ReservationStatus.CONFIRMED:
            return True
        return (
            self._settings.pending_blocks
            and reservation.status is ReservationStatus.PENDING
        )

    def _current(self, reservation_id: str) -> Reservation:
        reservation = self._reservations.get(reservation_id)
        if reservation is None:
            raise NotFoundError(reservation_id)
        return reservation

    def _reject_overlap(
        self,
        reservation: Reservation,
        conflicting_id: str,
        *,
        action: str,
    ) -> None:
        logger.warning(
            "reservation overlap rejected",
            extra={
                "extra_fields": {
                    "action": action,
                    "reservation_id": reservation.id,
                    "resource_id": reservation.resource_id,
                    "requested_start": reservation.start.isoformat(),
                    "requested_end": reservation.end.isoformat(),
                    "conflicting_reservation_id": conflicting_id,
                },
            },
        )
        raise OverlapError(
            reservation.resource_id,
            reservation_id=reservation.id,
            conflicting_reservation_id=conflicting_id,
        )

    def _log_transition(self, reservation: Reservation, previous: ReservationStatus) -> None:
        logger.info(
            "reservation status changed",
            extra={
                "extra_fields": {
                    "reservation_id": reservation.id,
                    "resource_id": reservation.resource_id,
                    "from_status": previous.value,
                    "to_status": reservation.status.value,
                },
            },
        )

    # ── operations ─────────────────────────────────────────────────────

    def create(
        self,
        resource_id: str,
        holder_id: str,
        start: date,
        end: date,
        total_price: Decimal | int | str,
        *,
        correlation_id: str | None = None,
    ) -> Reservation:
        """Create a pending reservation.

        Under the default policy the new reservation does not occupy the
        availability index until it is confirmed. With pending_blocks enabled
        it is checked against and inserted into the index immediately.

        Raises:
            InvalidRangeError: If end is not after start.
            InvalidDateError: If start is before today.
            InvalidPriceError: If total_price is not a positive amount with at
                most 2 decimal places below 10^8.
            OverlapError: With pending_blocks, if the range is already taken.
        """
        interval = make_interval(start, end)
        if interval.start == interval.end:
            raise InvalidRangeError(start, end, "end date must be after start date")

        now = to_utc(self._clock())
        today = now.date()
        if not self._settings.allow_past_start and start < today:
            raise InvalidDateError(start, today)

        price = _coerce_price(total_price)

        reservation = Reservation(
            id=str(uuid.uuid4()),
            resource_id=resource_id,
            holder_id=holder_id,
            start=start,
            end=end,
            status=ReservationStatus.PENDING,
            total_price=price,
            created_at=now,
            updated_at=now,
        )

        with correlation_scope(correlation_id):
            with self._resource_lock(resource_id):
                if self._settings.pending_blocks:
                    conflicting_id = self._index.find_conflict(resource_id, interval)
                    if conflicting_id is not None:
                        self._reject_overlap(reservation, conflicting_id, action="create")
                self._store.insert(reservation)
                if self._settings.pending_blocks:
                    self._index.insert(resource_id, reservation)
                self._reservations[reservation.id] = reservation

            logger.info(
                "reservation created",
                extra={
                    "extra_fields": {
                        "reservation_id": reservation.id,
                        "resource_id": resource_id,
                        "start": start.isoformat(),
                        "end": end.isoformat(),
                        "nights": reservation.nights,
                    },
                },
            )
        return reservation

    def confirm(
        self,
        reservation_id: str,
        *,
        correlation_id: str | None = None,
    ) -> Reservation:
        """Confirm a pending reservation if its range is free.

        Confirming an already confirmed reservation returns it unchanged.

        Raises:
            NotFoundError: If the reservation id is unknown.
            InvalidTransitionError: If the reservation was canceled.
            OverlapError: If another blocking reservation overlaps the range.
                The reservation stays pending.
        """
        resource_id = self._current(reservation_id).resource_id

        with correlation_scope(correlation_id):
            with self._resource_lock(resource_id):
                reservation = self._current(reservation_id)
                if reservation.status is ReservationStatus.CONFIRMED:
                    return reservation
                if ReservationStatus.CONFIRMED not in TRANSITIONS[reservation.status]:
                    raise InvalidTransitionError(
                        reservation_id,
                        reservation.status.value,
                        ReservationStatus.CONFIRMED.value,
                    )

                conflicting_id = self._index.find_conflict(
                    resource_id,
                    reservation.interval,
                    exclude_reservation_id=reservation_id,
                )
                if conflicting_id is not None:
                    self._reject_overlap(reservation, conflicting_id, action="confirm")

                confirmed = reservation.with_status(
                    ReservationStatus.CONFIRMED, at=to_utc(self._clock())
                )
                self._store.update(confirmed)
                self._index.insert(resource_id, confirmed)
                self._reservations[reservation_id] = confirmed

            self._log_transition(confirmed, reservation.status)
        return confirmed

    def cancel(
        self,
        reservation_id: str,
        *,
        correlation_id: str | None = None,
    ) -> Reservation:
        """Cancel a reservation from any status. Idempotent.

        Raises:
            NotFoundError: If the reservation id is unknown.
        """
        resource_id = self._current(reservation_id).resource_id

        with correlation_scope(correlation_id):
            with self._resource_lock(resource_id):
                reservation = self._current(reservation_id)
                if reservation.status is ReservationStatus.CANCELED:
                    return reservation

                canceled = reservation.with_status(
                    ReservationStatus.CANCELED, at=to_utc(self._clock())
                )
                self._store.update(canceled)
                self._index.remove(resource_id, reservation)
                self._reservations[reservation_id] = canceled

            self._log_transition(canceled, reservation.status)
        return canceled

    def is_available(self, resource_id: str, start: date, end: date) -> bool:
        """Return True if no blocking reservation overlaps [start, end].

        Raises:
            InvalidRangeError: If end is before start.
        """
        return self._index.query(resource_id, make_interval(start, end))

    def get(self, reservation_id: str) -> Reservation:
        """Return the current state of a reservation.

        Raises:
            NotFoundError: If the reservation id is unknown.
        """
        return self._current(reservation_id)

    def list_reservations(
        self,
        resource_id: str,
        *,
        status: ReservationStatus | None = None,
    ) -> list[Reservation]:
        """Reservations of a resource ordered by start date."""
        found = [
            r
            for r in list(self._reservations.values())
            if r.resource_id == resource_id and (status is None or r.status is status)
        ]
        return sorted(found, key=lambda r: (r.start, r.end, r.created_at, r.id))

    def load(self) -> int:
        """Rebuild the working set from the store and re-validate it.

        Holds every resource lock while reading the store and swapping the
        working set, so in-flight mutations finish first and later ones see
        the reloaded state. The previous working set is kept if the stored
        data already breaks the invariant.

        With pending_blocks, overlapping pending rows (stored before the flag
        was enabled) are all indexed and keep blocking until canceled.

        Returns:
            Number of reservations loaded.

        Raises:
            OverlapError: If two stored confirmed reservations overlap.
        """
        with self._registry_lock, ExitStack() as held:
            for resource_id in sorted(self._resource_locks):
                held.enter_context(self._resource_locks[resource_id])

            rows = self._store.load_all()
            index = AvailabilityIndex()
            reservations: dict[str, Reservation] = {}

            # Confirmed first: only confirmed-vs-confirmed overlaps are fatal.
            ordered = sorted(
                rows,
                key=lambda r: (r.status is not ReservationStatus.CONFIRMED, r.start, r.id),
            )
            for reservation in ordered:
                reservations[reservation.id] = reservation
                if not self._blocks(reservation):
                    continue
                conflicting_id = index.find_conflict(
                    reservation.resource_id, reservation.interval
                )
                if conflicting_id is not None:
                    context = {
                        "reservation_id": reservation.id,
                        "resource_id": reservation.resource_id,
                        "conflicting_reservation_id": conflicting_id,
                    }
                    if reservation.status is ReservationStatus.CONFIRMED:
                        logger.error(
                            "stored reservations violate overlap invariant",
                            extra={"extra_fields": context},
                        )
                        raise OverlapError(
                            reservation.resource_id,
                            reservation_id=reservation.id,
                            conflicting_reservation_id=conflicting_id,
                        )
                    logger.warning(
                        "stored pending reservation overlaps",
                        extra={"extra_fields": context},
                    )
                index.insert(reservation.resource_id, reservation)

            self._index = index
            self._reservations = reservations

        logger.info(
            "reservations loaded",
            extra={"extra_fields": {"count": len(reservations)}},
        )
        return len(reservations)
