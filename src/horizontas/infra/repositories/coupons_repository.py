"""Coupons repository - discount codes with activity and expiry filters."""

from datetime import datetime
from decimal import Decimal

from psycopg2.extensions import cursor as PgCursor


def find_valid_coupon(cur: PgCursor, code: str, *, now: datetime) -> dict | None:
    """Find an active, unexpired coupon by exact (case-sensitive) code.

    Returns:
        Dict with code, discount_percent (Decimal) and expires_at, or None.
    """
    cur.execute(
        """
        SELECT code, discount_percent, expires_at
        FROM coupons
        WHERE code = %s
          AND is_active = true
          AND expires_at > %s
        LIMIT 1
        """,
        (code, now),
    )
    row = cur.fetchone()
    if row is None:
        return None

    return {
        "code": row[0],
        "discount_percent": Decimal(str(row[1])),
        "expires_at": row[2],
    }
