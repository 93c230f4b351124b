"""Core modules for kordate.

Error types, logging and configuration shared by the extraction engine.
"""

from .config_manager import ConfigManager, ExtractorConfig, LoggingConfig
from .error_handler import (
    ConfigurationError,
    ErrorSeverity,
    InvalidDateError,
    InvalidTimezoneError,
    KorDateError,
    MalformedNumeralError,
    NoMatchError
)
from .logging_manager import LoggingManager

__all__ = [
    "ConfigManager",
    "ExtractorConfig",
    "LoggingConfig",
    "KorDateError",
    "NoMatchError",
    "InvalidTimezoneError",
    "MalformedNumeralError",
    "InvalidDateError",
    "ConfigurationError",
    "ErrorSeverity",
    "LoggingManager"
]
