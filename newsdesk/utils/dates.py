"""Timestamp parsing helpers."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

import pendulum


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO 8601 or RFC 822 timestamp into an aware UTC datetime.

    Returns None when the value is empty or cannot be parsed.
    """
    if not value or not value.strip():
        return None
    value = value.strip()

    try:
        parsed = pendulum.parse(value, strict=False)
        if isinstance(parsed, datetime):
            return ensure_utc(parsed)
    except (ValueError, TypeError, OverflowError):
        pass

    try:
        return ensure_utc(parsedate_to_datetime(value))
    except (ValueError, TypeError, IndexError):
        return None


def within_window(
    published_at: datetime,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
) -> bool:
    """Inclusive date-range check; a missing bound is open."""
    published_at = ensure_utc(published_at)
    if date_from is not None and published_at < ensure_utc(date_from):
        return False
    if date_to is not None and published_at > ensure_utc(date_to):
        return False
    return True
