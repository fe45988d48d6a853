"""Pagination response entities and metadata."""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

T = TypeVar('T')


@dataclass(frozen=True)
class PaginationMetadata:
    """Pagination metadata for performance tracking."""
    
    find_duration_ms: Optional[float] = None
    count_duration_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None
    
    @classmethod
    def from_durations(
        cls,
        find_seconds: Optional[float],
        count_seconds: Optional[float],
        total_seconds: float,
    ) -> 'PaginationMetadata':
        """Create metadata from durations measured in seconds."""
        def to_ms(seconds: Optional[float]) -> Optional[float]:
            return round(seconds * 1000, 3) if seconds is not None else None
        
        return cls(
            find_duration_ms=to_ms(find_seconds),
            count_duration_ms=to_ms(count_seconds),
            total_duration_ms=to_ms(total_seconds),
        )


@dataclass(frozen=True)
class PaginationResponse(Generic[T]):
    """Offset pagination response with page info.
    
    ``total`` is the count matching the effective filter at the instant
    the count ran; ``data`` comes from a concurrent find and may reflect
    a slightly different snapshot under concurrent writes.
    """
    
    data: List[T]
    page: int
    page_size: int
    total: int
    metadata: Optional[PaginationMetadata] = field(default=None, compare=False)
    
    @property
    def count(self) -> int:
        """Get number of items in current page."""
        return len(self.data)
    
    @property
    def total_pages(self) -> int:
        """Calculate total number of pages."""
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total / self.page_size)
    
    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page < self.total_pages
    
    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.page > 1
    
    @property
    def next_page(self) -> Optional[int]:
        """Get next page number."""
        return self.page + 1 if self.has_next else None
    
    @property
    def prev_page(self) -> Optional[int]:
        """Get previous page number."""
        return self.page - 1 if self.has_prev else None
    
    @property
    def pagination(self) -> Dict[str, Any]:
        """Pagination block of the wire format."""
        return {
            "page": self.page,
            "pageSize": self.page_size,
            "total": self.total,
            "totalPages": self.total_pages,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }
    
    def to_dict(self, serializer: Optional[Callable[[T], Any]] = None) -> Dict[str, Any]:
        """Render the wire body ``{"data": [...], "pagination": {...}}``.
        
        Items exposing ``to_response()`` are serialized through it unless
        an explicit serializer is given.
        """
        if serializer is None:
            serializer = _default_serializer
        return {
            "data": [serializer(item) for item in self.data],
            "pagination": self.pagination,
        }


def _default_serializer(item: Any) -> Any:
    to_response = getattr(item, "to_response", None)
    return to_response() if callable(to_response) else item
