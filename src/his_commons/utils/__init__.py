"""Utility helpers for his-commons."""

from .datetime import utc_now, to_utc, truncate_to_millis, normalize_store_datetime
from .uuid import generate_uuid_v4

__all__ = [
    "utc_now",
    "to_utc",
    "truncate_to_millis",
    "normalize_store_datetime",
    "generate_uuid_v4",
]
