from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Make a naive datetime timezone-aware (UTC). Already-aware datetimes are converted to UTC.

    MongoDB stores datetimes without tzinfo (naive). When you read a date field
    from a Mongo document and need to compare it with utcnow() (which is
    tz-aware), wrap it with ensure_utc() first.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_utc(value: str | datetime) -> datetime:
    """Parse a date string or datetime into a tz-aware UTC datetime.

    Handles ISO 8601 strings (with or without Z/offset) and bare datetimes.
    Raises ValueError for anything else.
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    return ensure_utc(datetime.fromisoformat(str(value).strip().replace("Z", "+00:00")))


def to_iso_utc(dt: datetime) -> str:
    """Serialize as second-precision ISO 8601 with a Z suffix."""
    return ensure_utc(dt).strftime("%Y-%m-%dT%H:%M:%SZ")


def to_iso_date(dt: datetime) -> str:
    return ensure_utc(dt).strftime("%Y-%m-%d")
