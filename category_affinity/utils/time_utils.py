"""
Date and time helpers.

The pipeline compares order timestamps against a reference date. Everything
is normalized to timezone-aware UTC so naive and aware datetimes never meet.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(tz=timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_reference_date(value: str | None) -> datetime:
    """Parse a CLI reference date.

    Accepts ``YYYY-MM-DD`` (taken as the end of that day, UTC) or a full ISO
    8601 datetime. ``None`` or empty means now.

    Raises:
        ValueError: If the string is neither format.
    """
    if not value:
        return utcnow()
    try:
        day = date.fromisoformat(value)
    except ValueError:
        pass
    else:
        return datetime.combine(day, time.max, tzinfo=timezone.utc)
    try:
        return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        raise ValueError(
            f"Invalid reference date '{value}'. Expected YYYY-MM-DD or ISO 8601."
        )
