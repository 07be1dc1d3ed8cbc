"""Centralized logging configuration for campus-authz.

Provides consistent, configurable logging for both the stdlib loggers used by
the store repositories and the loguru logger used by the services, with
environment-based control over verbosity.
"""

import logging
import logging.config
import sys
from typing import Optional
from enum import Enum

from loguru import logger as loguru_logger

from .settings import AuthzSettings, get_settings


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


_FORMATS = {
    LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(message)s",
    LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    LogFormat.JSON: '{"time":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}',
}

_LOGURU_FORMATS = {
    LogFormat.SIMPLE: "{time:YYYY-MM-DD HH:mm:ss} - {level} - {message}",
    LogFormat.DETAILED: "{time:YYYY-MM-DD HH:mm:ss} - {name} - {level} - [{file}:{line}] - {message}",
}


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


class LoggingConfig:
    """Centralized logging configuration manager."""

    # Modules that should only log errors
    ERROR_ONLY_MODULES = [
        "asyncio",
        "asyncpg",
        "redis",
    ]

    @classmethod
    def configure(cls, settings: Optional[AuthzSettings] = None) -> None:
        """Configure stdlib logging and the loguru sink from settings."""
        settings = settings or get_settings()

        effective_log_level = get_log_level_from_verbosity(settings.log_verbosity)
        try:
            log_format = LogFormat(settings.log_format.lower())
        except ValueError:
            log_format = LogFormat.SIMPLE

        logging_config = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": _FORMATS[log_format],
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

        for module in cls.ERROR_ONLY_MODULES:
            logging_config["loggers"][module] = {
                "level": "ERROR",
                "handlers": ["console"],
                "propagate": False,
            }

        logging.config.dictConfig(logging_config)

        # Services log through loguru; keep its sink in step with stdlib
        loguru_logger.remove()
        loguru_logger.add(
            sys.stdout,
            level=effective_log_level,
            format=_LOGURU_FORMATS.get(log_format, _LOGURU_FORMATS[LogFormat.DETAILED]),
            serialize=log_format == LogFormat.JSON,
        )

        if effective_log_level == "DEBUG":
            logging.getLogger(__name__).debug(
                f"Logging configured: level={effective_log_level}, format={log_format.value}"
            )

    @classmethod
    def set_module_level(cls, module_name: str, level: str) -> None:
        """Set log level for a specific module."""
        logging.getLogger(module_name).setLevel(getattr(logging, level.upper()))


def setup_logging(settings: Optional[AuthzSettings] = None) -> None:
    """Setup logging configuration from settings.

    Should be called once at application startup.
    """
    LoggingConfig.configure(settings)
