"""Timestamp helpers shared by the time and spam analyzers."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Return value unchanged if it carries an offset, else the same wall time as UTC."""
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def one_year_before(now: datetime) -> datetime:
    """Midnight of the same calendar day one year earlier (Feb 29 falls back to Feb 28)."""
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    try:
        return midnight.replace(year=midnight.year - 1)
    except ValueError:
        return midnight.replace(year=midnight.year - 1, day=28)
