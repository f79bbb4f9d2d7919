"""Exclusion constraint against overlapping confirmed bookings.

Second layer behind the in-process overlap check: even if a writer bypasses
the reservation manager, Postgres refuses two confirmed bookings of the same
property whose closed date ranges share a day. daterange(..., '[]') makes
touching endpoints a conflict, same as the in-process predicate.

Revision ID: 002_no_booking_overlap_constraint
Revises: 001_initial_schema
Create Date: 2026-10-18
"""
from __future__ import annotations

from alembic import op

revision = "002_no_booking_overlap_constraint"
down_revision = "001_initial_schema"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    op.execute(
        """
        ALTER TABLE bookings
        ADD CONSTRAINT no_confirmed_booking_overlap EXCLUDE USING gist (
            property_id WITH =,
            daterange(start_date, end_date, '[]') WITH &&
        ) WHERE (status = 'confirmed')
        """
    )


def downgrade() -> None:
    op.execute("ALTER TABLE bookings DROP CONSTRAINT IF EXISTS no_confirmed_booking_overlap")
    # btree_gist is kept: other indexes may depend on it.
