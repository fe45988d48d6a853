"""Logging setup for his-commons.

Services configure verbosity and output format through ``LOG_VERBOSITY``,
``LOG_FORMAT`` and ``ENABLE_DB_LOGGING``. The repository and connection
modules stay at warning level unless database logging is switched on,
and the store driver only reports errors.
"""

import logging
import logging.config
import os
from enum import Enum
from typing import Any, Dict


class LogVerbosity(str, Enum):
    QUIET = "QUIET"
    NORMAL = "NORMAL"
    VERBOSE = "VERBOSE"
    DEBUG = "DEBUG"


class LogFormat(str, Enum):
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


VERBOSITY_LEVELS = {
    LogVerbosity.QUIET: "ERROR",
    LogVerbosity.NORMAL: "WARNING",
    LogVerbosity.VERBOSE: "INFO",
    LogVerbosity.DEBUG: "DEBUG",
}

FORMAT_STRINGS = {
    LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(message)s",
    LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    LogFormat.JSON: '{"time":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}',
}


def get_log_level_from_verbosity(verbosity: str) -> str:
    """Level name for a verbosity mode; unknown modes count as NORMAL."""
    try:
        return VERBOSITY_LEVELS[LogVerbosity(verbosity.upper())]
    except ValueError:
        return VERBOSITY_LEVELS[LogVerbosity.NORMAL]


def get_format_string(log_format: str) -> str:
    try:
        return FORMAT_STRINGS[LogFormat(log_format.lower())]
    except ValueError:
        return FORMAT_STRINGS[LogFormat.SIMPLE]


class LoggingConfig:
    """Builds and applies the ``dictConfig`` used by his-commons."""

    # Held at WARNING unless ENABLE_DB_LOGGING is set
    DEFAULT_QUIET_MODULES = [
        "his_commons.repositories",
        "his_commons.database",
    ]

    # Store driver and event loop noise
    ERROR_ONLY_MODULES = [
        "pymongo",
        "motor",
        "asyncio",
    ]

    @classmethod
    def build_config(cls) -> Dict[str, Any]:
        level = get_log_level_from_verbosity(os.getenv("LOG_VERBOSITY", LogVerbosity.NORMAL.value))
        db_logging = os.getenv("ENABLE_DB_LOGGING", "false").lower() == "true"

        loggers: Dict[str, Dict[str, Any]] = {}
        if not db_logging:
            quiet_level = "DEBUG" if level == "DEBUG" else "WARNING"
            loggers.update({name: {"level": quiet_level} for name in cls.DEFAULT_QUIET_MODULES})
        loggers.update({
            name: {"level": "ERROR", "handlers": ["console"], "propagate": False}
            for name in cls.ERROR_ONLY_MODULES
        })

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": get_format_string(os.getenv("LOG_FORMAT", LogFormat.SIMPLE.value)),
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"level": level, "handlers": ["console"]},
            "loggers": loggers,
        }

    @classmethod
    def configure(cls) -> None:
        config = cls.build_config()
        logging.config.dictConfig(config)
        logging.getLogger(__name__).debug(f"Logging configured: level={config['root']['level']}")

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        return logging.getLogger(name)

    @classmethod
    def set_module_level(cls, module_name: str, level: str) -> None:
        """Override the level of one logger, e.g. ``set_module_level("motor", "info")``."""
        logging.getLogger(module_name).setLevel(getattr(logging, level.upper()))


def setup_logging() -> None:
    """Apply the environment driven logging config; called on package import."""
    LoggingConfig.configure()


def get_logger(name: str) -> logging.Logger:
    return LoggingConfig.get_logger(name)
