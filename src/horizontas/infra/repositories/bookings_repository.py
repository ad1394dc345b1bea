"""Bookings repository - reservations that block an apartment's calendar.

Rows are written downstream of payment confirmation; this module only reads.
"""

from datetime import date

from psycopg2.extensions import cursor as PgCursor

from horizontas.domain.models import Reservation


def list_reservations(
    cur: PgCursor,
    apartment_id: str,
    *,
    since: date | None = None,
) -> list[Reservation]:
    """List reservations for an apartment.

    Args:
        cur: Database cursor.
        apartment_id: Apartment identifier.
        since: If given, skip stays that ended on or before this day.

    Returns:
        Reservations ordered by check-in.
    """
    conditions = ["apartment_id = %s"]
    params: list = [apartment_id]

    if since is not None:
        conditions.append("check_out > %s")
        params.append(since)

    where = " AND ".join(conditions)
    cur.execute(
        f"""
        SELECT apartment_id, check_in, check_out
        FROM bookings
        WHERE {where}
        ORDER BY check_in
        """,
        params,
    )
    return [
        Reservation(unit_id=row[0], check_in=row[1], check_out=row[2])
        for row in cur.fetchall()
    ]
