"""Apartments repository - read access to the rental unit catalogue.

Uses raw SQL with psycopg2 (no ORM). `price_per_night` is stored as a
NUMERIC euro amount and converted to cents here.
"""

from decimal import ROUND_HALF_UP, Decimal

from psycopg2.extensions import cursor as PgCursor

from horizontas.domain.models import RentalUnit

_COLUMNS = "id, name, description, price_per_night, image_url, allows_extra_bed"


def euros_to_cents(amount) -> int:
    cents = Decimal(str(amount)) * 100
    return int(cents.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _row_to_unit(row: tuple) -> RentalUnit:
    return RentalUnit(
        id=row[0],
        name=row[1],
        description=row[2],
        nightly_rate_cents=euros_to_cents(row[3]),
        image_url=row[4],
        allows_extra_bed=bool(row[5]),
    )


def list_apartments(cur: PgCursor) -> list[RentalUnit]:
    cur.execute(f"SELECT {_COLUMNS} FROM apartments ORDER BY name")
    return [_row_to_unit(row) for row in cur.fetchall()]


def get_apartment(cur: PgCursor, apartment_id: str) -> RentalUnit | None:
    """Fetch one apartment by id.

    Args:
        cur: Database cursor.
        apartment_id: Apartment identifier (slug, e.g. 'mara').

    Returns:
        RentalUnit or None if not found.
    """
    cur.execute(
        f"SELECT {_COLUMNS} FROM apartments WHERE id = %s",
        (apartment_id,),
    )
    row = cur.fetchone()
    if row is None:
        return None
    return _row_to_unit(row)
