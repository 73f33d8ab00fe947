"""Time helpers: UTC timestamps for storage, barangay-local dates for ages."""
from __future__ import annotations

from datetime import datetime, timezone, date
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_TIMEZONE = 'Asia/Manila'


def utc_now() -> datetime:
    """Return a UTC timestamp without tzinfo for legacy DB columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_today() -> date:
    """Return today's date in UTC (naive)."""
    return utc_now().date()


def local_today(tz_name: str | None = None) -> date:
    """Return today's date in the barangay timezone.

    Birthdays roll over at local midnight, not UTC midnight, so ages are
    computed against this date. Falls back to UTC when the zone is unknown.
    """
    if tz_name is None:
        try:
            from flask import current_app
            tz_name = current_app.config.get('BARANGAY_TIMEZONE', DEFAULT_TIMEZONE)
        except RuntimeError:
            tz_name = DEFAULT_TIMEZONE
    try:
        return datetime.now(ZoneInfo(tz_name)).date()
    except (ZoneInfoNotFoundError, ValueError):
        return utc_today()
