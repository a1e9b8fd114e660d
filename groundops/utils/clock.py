"""Clock helpers.

Timestamps are stored as naive UTC datetimes, matching the database columns.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """Return the current UTC time without tzinfo."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def minutes_from(reference: datetime, offset_min: float) -> datetime:
    return reference + timedelta(minutes=offset_min)


__all__ = ["utcnow", "minutes_from"]
