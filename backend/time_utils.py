from datetime import UTC, datetime


def utcnow_naive():
    """Return current UTC timestamp as naive datetime for DB timestamp columns."""
    return datetime.now(UTC).replace(tzinfo=None)


def today_iso():
    """Current UTC calendar date as ``YYYY-MM-DD``, the format event and booking dates use."""
    return utcnow_naive().date().isoformat()


def isoformat_or_none(value):
    return value.isoformat() if value else None
