"""Exceptions module for his-commons.

This module provides the complete exception hierarchy for his-commons.
Only EntityNotFoundError, PatchValidationError and store driver errors
cross the repository boundary; MalformedQueryInputError is always
recovered inside the query builder.
"""

from .base import (
    HisCommonsError,
    get_http_status_code,
    create_error_response,
)

from .database import (
    DatabaseError,
    QueryError,
    QueryTimeoutError,
    RepositoryError,
    EntityNotFoundError,
)

from .infrastructure import (
    ValidationError,
    PaginationValidationError,
    MalformedQueryInputError,
    PatchValidationError,
)

from .http_mapping import HTTP_STATUS_MAP

__all__ = [
    # Base
    "HisCommonsError",
    "get_http_status_code",
    "create_error_response",
    "HTTP_STATUS_MAP",
    
    # Database
    "DatabaseError",
    "QueryError",
    "QueryTimeoutError",
    "RepositoryError",
    "EntityNotFoundError",
    
    # Validation
    "ValidationError",
    "PaginationValidationError",
    "MalformedQueryInputError",
    "PatchValidationError",
]
