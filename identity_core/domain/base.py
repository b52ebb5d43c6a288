from datetime import UTC, datetime


def utc_now() -> datetime:
    """Naive UTC timestamp, the form the SQL columns store and return"""
    return datetime.now(UTC).replace(tzinfo=None)


def from_timestamp(ts: int) -> datetime:
    return datetime.fromtimestamp(ts, UTC).replace(tzinfo=None)
