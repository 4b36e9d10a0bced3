from datetime import datetime, timezone


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Stored datetimes are naive UTC; convert aware input."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
