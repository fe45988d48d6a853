"""Validation exceptions for his-commons."""

from typing import Any

from .base import HisCommonsError


class ValidationError(HisCommonsError):
    """Raised when input validation fails."""
    pass


class PaginationValidationError(ValidationError):
    """Raised when pagination wire parameters cannot be interpreted."""
    
    def __init__(self, parameter: str, value: Any, reason: str):
        self.parameter = parameter
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid pagination parameter '{parameter}': {reason}",
            details={"parameter": parameter, "value": value},
        )


class MalformedQueryInputError(ValidationError):
    """Raised when a caller-supplied sort or filter string is unusable.
    
    The query builder recovers from this error locally: the offending
    input is ignored and a warning is logged.
    """
    
    def __init__(self, field: str, raw_value: Any, reason: str):
        self.field = field
        self.raw_value = raw_value
        self.reason = reason
        super().__init__(
            f"Malformed {field} input: {reason}",
            details={"field": field, "raw_value": raw_value},
        )


class PatchValidationError(ValidationError):
    """Raised when a partial update carries a value its field cannot hold."""
    
    def __init__(self, entity_type: str, field: str, value: Any, reason: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid value for {entity_type}.{field}: {reason}",
            details={"entity_type": entity_type, "field": field, "value": value},
        )
