"""Pagination feature for his-commons.

Request and response entities for the pagination wire format, the query
builder turning a request into a store filter and sort, the paginated
repository protocol and a FastAPI dependency for controllers.
"""

from .entities import (
    SortOrder,
    SortField,
    PaginationRequest,
    QueryOptions,
    PaginationMetadata,
    PaginationResponse,
)

from .protocols import PaginatedRepository

from .utils import (
    build_filter,
    build_sort,
    parse_filter,
    parse_sort,
    build_search_predicate,
)

from .dependencies import pagination_params

__all__ = [
    # Entities
    "SortOrder",
    "SortField",
    "PaginationRequest",
    "QueryOptions",
    "PaginationMetadata",
    "PaginationResponse",
    
    # Protocols
    "PaginatedRepository",
    
    # Query building
    "build_filter",
    "build_sort",
    "parse_filter",
    "parse_sort",
    "build_search_predicate",
    
    # HTTP
    "pagination_params",
]
