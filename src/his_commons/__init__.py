"""His-Commons - shared repository layer for the HIS domain services.

This library provides the base entity model, the pagination wire
contract, the query builder and a generic document store repository
used by every domain service.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

from .config import HisCommonsSettings, get_settings

from .core.exceptions import (
    # Base Exception
    HisCommonsError,
    
    # Common Exceptions
    DatabaseError,
    QueryTimeoutError,
    EntityNotFoundError,
    ValidationError,
    PaginationValidationError,
    MalformedQueryInputError,
    PatchValidationError,
    
    # Utility Functions
    get_http_status_code,
    create_error_response,
)

from .core.shared import AuditUser, RequestContext

from .models import BaseSchema, BaseEntity

from .features.pagination import (
    SortOrder,
    SortField,
    PaginationRequest,
    PaginationResponse,
    PaginationMetadata,
    QueryOptions,
    build_filter,
    build_sort,
    pagination_params,
)

from .repositories import BaseRepository, DocumentCollection

from .database import MongoConnectionManager

__all__ = [
    "__version__",
    
    # Configuration
    "HisCommonsSettings",
    "get_settings",
    
    # Exceptions
    "HisCommonsError",
    "DatabaseError",
    "QueryTimeoutError",
    "EntityNotFoundError",
    "ValidationError",
    "PaginationValidationError",
    "MalformedQueryInputError",
    "PatchValidationError",
    "get_http_status_code",
    "create_error_response",
    
    # Context
    "AuditUser",
    "RequestContext",
    
    # Models
    "BaseSchema",
    "BaseEntity",
    
    # Pagination
    "SortOrder",
    "SortField",
    "PaginationRequest",
    "PaginationResponse",
    "PaginationMetadata",
    "QueryOptions",
    "build_filter",
    "build_sort",
    "pagination_params",
    
    # Repositories
    "BaseRepository",
    "DocumentCollection",
    "MongoConnectionManager",
]
