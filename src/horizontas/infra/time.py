"""Time utilities for consistent timestamp and calendar-day handling."""

import os
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

DEFAULT_PROPERTY_TIMEZONE = "Europe/Vilnius"


def utc_now() -> datetime:
    """Return current UTC timestamp (timezone-aware)."""
    return datetime.now(timezone.utc)


def property_timezone() -> ZoneInfo:
    return ZoneInfo(os.environ.get("PROPERTY_TIMEZONE", DEFAULT_PROPERTY_TIMEZONE))


def property_today(now: datetime | None = None) -> date:
    """Calendar day at the property; days before it are never bookable."""
    now = now or utc_now()
    return now.astimezone(property_timezone()).date()
