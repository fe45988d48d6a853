"""Pagination protocols for repositories."""

from .repository import PaginatedRepository

__all__ = [
    "PaginatedRepository",
]
