"""Repository layer for his-commons."""

from .base import BaseRepository
from .protocols import DocumentCollection, DocumentCursor

__all__ = [
    "BaseRepository",
    "DocumentCollection",
    "DocumentCursor",
]
