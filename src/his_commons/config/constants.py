"""Constants for his-commons.

This module defines the constants shared by the entity model, the
pagination contract and the repository layer. They mirror the defaults
exposed on the pagination wire format.
"""

from typing import Final, FrozenSet


class PaginationDefaults:
    """Pagination defaults and bounds."""
    
    PAGE: Final[int] = 1
    PAGE_SIZE: Final[int] = 10
    MIN_PAGE_SIZE: Final[int] = 1
    MAX_PAGE_SIZE: Final[int] = 100


class SortDefaults:
    """Default ordering applied by the query builder."""
    
    FIELD: Final[str] = "createdAt"
    DIRECTION: Final[int] = -1
    TIE_BREAK_FIELD: Final[str] = "_id"


class AuditDefaults:
    """Placeholders used when no acting principal is supplied."""
    
    USER_ID: Final[str] = "system"
    USER_NAME: Final[str] = "Unknown"


class StoreFields:
    """Store-level field names the repository writes itself."""
    
    ID: Final[str] = "_id"
    ACTIVE: Final[str] = "active"
    CREATED_AT: Final[str] = "createdAt"
    UPDATED_AT: Final[str] = "updatedAt"
    CREATED_BY: Final[str] = "createdBy"
    UPDATED_BY: Final[str] = "updatedBy"
    CREATED_BY_NAME: Final[str] = "createdByName"
    UPDATED_BY_NAME: Final[str] = "updatedByName"
    TENANT_ID: Final[str] = "tenantId"


# Fields a patch may never change once the record exists
IMMUTABLE_FIELDS: Final[FrozenSet[str]] = frozenset({
    StoreFields.ID,
    StoreFields.CREATED_AT,
    StoreFields.CREATED_BY,
    StoreFields.CREATED_BY_NAME,
})

# Comparison operators a caller-supplied filter may use
ALLOWED_FILTER_OPERATORS: Final[FrozenSet[str]] = frozenset({
    "$eq", "$ne", "$gt", "$gte", "$lt", "$lte", "$in", "$nin", "$exists",
})

# Operators whose operand must be a list
LIST_FILTER_OPERATORS: Final[FrozenSet[str]] = frozenset({"$in", "$nin"})
