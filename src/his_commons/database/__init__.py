"""Document store connection management."""

from .connection import MongoConnectionManager

__all__ = [
    "MongoConnectionManager",
]
