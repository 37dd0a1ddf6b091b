"""Centralized logging configuration for msp-authz.

Provides consistent, configurable logging with environment-based control
over verbosity and log format.
"""

import logging
import logging.config
import os
from enum import Enum
from typing import Optional

from .settings import AuthzSettings


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogVerbosity(str, Enum):
    """Log verbosity modes."""
    QUIET = "QUIET"      # Only errors and critical
    NORMAL = "NORMAL"    # Standard logging (warnings and above)
    VERBOSE = "VERBOSE"  # Info level logging
    DEBUG = "DEBUG"      # Full debug logging


class LogFormat(str, Enum):
    """Log format options."""
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


def get_log_level_from_verbosity(verbosity: str) -> str:
    """Map verbosity mode to log level."""
    verbosity_map = {
        LogVerbosity.QUIET: LogLevel.ERROR.value,
        LogVerbosity.NORMAL: LogLevel.WARNING.value,
        LogVerbosity.VERBOSE: LogLevel.INFO.value,
        LogVerbosity.DEBUG: LogLevel.DEBUG.value,
    }
    try:
        return verbosity_map[LogVerbosity(verbosity.upper())]
    except ValueError:
        return LogLevel.WARNING.value


def get_format_string(log_format: str) -> str:
    """Get the logging format string for a format name."""
    if log_format == LogFormat.JSON.value:
        return '{"time":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}'
    if log_format == LogFormat.DETAILED.value:
        return "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
    return "%(asctime)s - %(levelname)s - %(message)s"


class LoggingConfig:
    """Centralized logging configuration manager."""

    # Per-decision debug output; quiet unless authz debug logging is enabled
    DECISION_MODULES = [
        "msp_authz.features.permissions.services",
        "msp_authz.features.access.services",
    ]

    # Modules that should only log errors
    ERROR_ONLY_MODULES = [
        "asyncpg",
        "httpx",
        "httpcore",
        "asyncio",
    ]

    @classmethod
    def build_config(cls, settings: Optional[AuthzSettings] = None) -> dict:
        """Build a ``dictConfig`` mapping from settings, or from plain environment variables."""
        if settings is not None:
            log_level = settings.log_level or ""
            log_verbosity = settings.log_verbosity.upper()
            log_format = settings.log_format.lower()
        else:
            log_level = os.getenv("LOG_LEVEL", "")
            log_verbosity = os.getenv("LOG_VERBOSITY", "NORMAL").upper()
            log_format = os.getenv("LOG_FORMAT", LogFormat.SIMPLE.value).lower()
        enable_authz_debug = os.getenv("ENABLE_AUTHZ_DEBUG_LOGGING", "false").lower() == "true"

        # An explicit log level wins over the verbosity mapping
        effective_log_level = log_level.upper() or get_log_level_from_verbosity(log_verbosity)

        logging_config = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": get_format_string(log_format),
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": effective_log_level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": effective_log_level,
                "handlers": ["console"],
            },
            "loggers": {}
        }

        for module in cls.DECISION_MODULES:
            logging_config["loggers"][module] = {
                "level": "DEBUG" if enable_authz_debug else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            }

        for module in cls.ERROR_ONLY_MODULES:
            logging_config["loggers"][module] = {
                "level": "ERROR",
                "handlers": ["console"],
                "propagate": False,
            }

        return logging_config

    @classmethod
    def configure(cls, settings: Optional[AuthzSettings] = None) -> None:
        """Configure logging from settings or environment variables."""
        logging_config = cls.build_config(settings)
        logging.config.dictConfig(logging_config)

        logger = logging.getLogger(__name__)
        logger.debug(f"Logging configured: level={logging_config['root']['level']}")


def setup_logging(settings: Optional[AuthzSettings] = None) -> None:
    """Setup logging configuration from settings or environment variables.

    Call once at application startup; importing msp_authz never touches the
    host application's logging setup.
    """
    LoggingConfig.configure(settings)
