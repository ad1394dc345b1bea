"""DB-level exclusion constraint against overlapping bookings.

The checkout guard re-reads availability right before payment, but two
guests can still pass that check at the same moment. This constraint makes
the second confirmation write fail instead of double-booking the apartment.

Revision ID: 002_bookings_no_overlap
Revises: 001_initial_schema
Create Date: 2026-10-19
"""
from __future__ import annotations

from pathlib import Path

from alembic import op

revision = "002_bookings_no_overlap"
down_revision = "001_initial_schema"
branch_labels = None
depends_on = None

_SQL_FILE = Path(__file__).resolve().parent.parent / "sql" / "002_bookings_no_overlap.sql"


def upgrade() -> None:
    op.execute(_SQL_FILE.read_text(encoding="utf-8"))


def downgrade() -> None:
    op.execute("ALTER TABLE bookings DROP CONSTRAINT IF EXISTS bookings_no_overlap")
    # btree_gist stays installed.
