"""Base models for his-commons."""

from .base import BaseSchema, BaseEntity

__all__ = [
    "BaseSchema",
    "BaseEntity",
]
