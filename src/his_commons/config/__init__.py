"""Configuration module for his-commons.

Constants, environment-driven settings and logging setup.
"""

from .constants import (
    PaginationDefaults,
    SortDefaults,
    AuditDefaults,
    StoreFields,
    IMMUTABLE_FIELDS,
    ALLOWED_FILTER_OPERATORS,
    LIST_FILTER_OPERATORS,
)

from .settings import HisCommonsSettings, get_settings

from .logging_config import (
    setup_logging,
    get_logger,
    LogVerbosity,
    LogFormat,
    LoggingConfig,
)

__all__ = [
    # Constants
    "PaginationDefaults",
    "SortDefaults",
    "AuditDefaults",
    "StoreFields",
    "IMMUTABLE_FIELDS",
    "ALLOWED_FILTER_OPERATORS",
    "LIST_FILTER_OPERATORS",

    # Settings
    "HisCommonsSettings",
    "get_settings",

    # Logging
    "setup_logging",
    "get_logger",
    "LogVerbosity",
    "LogFormat",
    "LoggingConfig",
]
