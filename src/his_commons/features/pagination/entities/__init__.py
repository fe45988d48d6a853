"""Pagination entities for requests, responses, and metadata."""

from .requests import (
    PaginationRequest,
    QueryOptions,
    SortField,
    SortOrder,
    FIELD_PATH_PATTERN,
    is_valid_field_path,
)

from .responses import (
    PaginationResponse,
    PaginationMetadata,
)

__all__ = [
    # Requests
    "PaginationRequest",
    "QueryOptions",
    "SortField",
    "SortOrder",
    "FIELD_PATH_PATTERN",
    "is_valid_field_path",
    
    # Responses
    "PaginationResponse",
    "PaginationMetadata",
]
