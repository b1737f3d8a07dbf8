from datetime import datetime, timezone

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def to_iso8601(dt: datetime) -> str:
    """
    Render an absolute, timezone-independent ISO-8601 timestamp with a trailing 'Z'
    (same shape as JavaScript's Date.toISOString()).
    Naive datetimes are assumed to already be UTC.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"
