"""Bookings repository - persistence for reservation records.

Uses raw SQL with psycopg2 (no ORM).
"""

from __future__ import annotations

from decimal import Decimal

from psycopg2.extensions import cursor as PgCursor

from lodgely.domain.models import Reservation, ReservationStatus

_COLUMNS = """
    booking_id, property_id, user_id, start_date, end_date,
    total_price, status, created_at, updated_at
"""


def _row_to_reservation(row: tuple) -> Reservation:
    return Reservation(
        id=str(row[0]),
        resource_id=str(row[1]),
        holder_id=str(row[2]),
        start=row[3],
        end=row[4],
        total_price=Decimal(row[5]),
        status=ReservationStatus(row[6]),
        created_at=row[7],
        updated_at=row[8],
    )


def insert_booking(cur: PgCursor, reservation: Reservation) -> None:
    """Insert a new booking row.

    Args:
        cur: Database cursor (within transaction).
        reservation: Reservation to persist; its id becomes booking_id.
    """
    cur.execute(
        """
        INSERT INTO bookings (
            booking_id, property_id, user_id, start_date, end_date,
            total_price, status, created_at, updated_at
        )
        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
        """,
        (
            reservation.id,
            reservation.resource_id,
            reservation.holder_id,
            reservation.start,
            reservation.end,
            reservation.total_price,
            reservation.status.value,
            reservation.created_at,
            reservation.updated_at,
        ),
    )


def update_booking_status(cur: PgCursor, reservation: Reservation) -> bool:
    """Write status and updated_at for an existing booking.

    Returns:
        True if a row was updated, False if booking_id does not exist.
    """
    cur.execute(
        """
        UPDATE bookings
        SET status = %s, updated_at = %s
        WHERE booking_id = %s
        """,
        (reservation.status.value, reservation.updated_at, reservation.id),
    )
    return cur.rowcount == 1


def list_bookings(cur: PgCursor, *, property_id: str | None = None) -> list[Reservation]:
    """Fetch bookings ordered by property and start date.

    Args:
        cur: Database cursor.
        property_id: Optional filter on a single property.
    """
    query = f"SELECT {_COLUMNS} FROM bookings"
    params: list = []
    if property_id is not None:
        query += " WHERE property_id = %s"
        params.append(property_id)
    query += " ORDER BY property_id, start_date, booking_id"

    cur.execute(query, params)
    return [_row_to_reservation(row) for row in cur.fetchall()]
