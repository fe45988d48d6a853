"""
DateTime utilities for consistent timezone handling.

The document store keeps timestamps as UTC with millisecond precision,
so values produced here are normalised the same way.
"""
from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Get the current UTC time with timezone awareness.
    
    Returns:
        datetime: Current UTC time truncated to milliseconds
    """
    return truncate_to_millis(datetime.now(timezone.utc))


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC timezone.
    
    Naive datetimes are assumed to already be UTC, which is how the
    document store returns them.
    
    Args:
        dt: Datetime to convert
    
    Returns:
        datetime: Datetime in UTC timezone
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    if dt.tzinfo != timezone.utc:
        return dt.astimezone(timezone.utc)
    return dt


def truncate_to_millis(dt: datetime) -> datetime:
    """Drop sub-millisecond precision."""
    return dt.replace(microsecond=(dt.microsecond // 1000) * 1000)


def normalize_store_datetime(dt: datetime) -> datetime:
    """Normalise a datetime to aware UTC with store precision."""
    return truncate_to_millis(to_utc(dt))
