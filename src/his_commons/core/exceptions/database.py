"""Database-related exceptions for his-commons.

Driver errors raised by the document store are never wrapped in these
classes; they reach the caller unmodified.
"""

from typing import Optional

from .base import HisCommonsError


class DatabaseError(HisCommonsError):
    """Base class for database-related errors."""
    pass


class QueryError(DatabaseError):
    """Base class for query execution errors."""
    pass


class QueryTimeoutError(QueryError):
    """Raised when a repository query exceeds its timeout."""
    
    def __init__(self, operation: str, timeout_seconds: float):
        self.operation = operation
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Query '{operation}' timed out after {timeout_seconds}s",
            details={"operation": operation, "timeout_seconds": timeout_seconds},
        )


class RepositoryError(DatabaseError):
    """Base class for repository-related errors."""
    pass


class EntityNotFoundError(RepositoryError):
    """Raised when an entity is not found in the repository."""
    
    def __init__(self, entity_type: str, identifier: str, message: Optional[str] = None):
        self.entity_type = entity_type
        self.identifier = identifier
        super().__init__(
            message or f"{entity_type} with identifier '{identifier}' not found",
            details={"entity_type": entity_type, "identifier": identifier},
        )
