"""HTTP status code mapping for exceptions.

Lookup walks the exception's MRO so subclasses inherit the status of the
closest mapped ancestor.
"""

from typing import Dict, Type

from .base import HisCommonsError
from .database import DatabaseError, EntityNotFoundError, QueryTimeoutError
from .infrastructure import ValidationError


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    ValidationError: 400,
    
    # 404 Not Found
    EntityNotFoundError: 404,
    
    # 504 Gateway Timeout
    QueryTimeoutError: 504,
    
    # 500 Internal Server Error
    DatabaseError: 500,
    HisCommonsError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for an exception instance.
    
    Args:
        exception: The exception instance
        
    Returns:
        HTTP status code, 500 for anything unmapped
    """
    for exception_type in type(exception).__mro__:
        if exception_type in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[exception_type]
    return 500
