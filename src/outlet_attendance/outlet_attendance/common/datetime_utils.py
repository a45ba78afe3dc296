from __future__ import annotations

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Current aware UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def from_timestamp(value: int | float) -> datetime:
    """Convert a unix timestamp (e.g. a JWT ``exp`` claim) into aware UTC."""
    return datetime.fromtimestamp(value, tz=timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """MySQL DATETIME columns come back naive; they are stored as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
