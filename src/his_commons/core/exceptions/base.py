"""Root of the his-commons exception hierarchy.

Every error carries a machine-readable ``error_code`` (the class name
unless given) and a ``details`` mapping that ends up in API error bodies.
"""

from typing import Any, Dict, Optional


class HisCommonsError(Exception):
    """Base class for errors raised by his-commons."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or type(self).__name__
        self.details = details or {}


def get_http_status_code(exception: Exception) -> int:
    """HTTP status for an exception; see ``http_mapping.HTTP_STATUS_MAP``."""
    from .http_mapping import get_http_status_code as lookup
    return lookup(exception)


def create_error_response(exception: HisCommonsError) -> Dict[str, Any]:
    """Wrap an error in the ``{"error": {...}}`` body returned by services."""
    body = {
        "code": exception.error_code,
        "message": exception.message,
        "details": exception.details,
        "type": type(exception).__name__,
    }
    return {"error": body}
