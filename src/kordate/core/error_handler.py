"""Error Types for kordate

Exception hierarchy shared by the extraction engine, the configuration layer
and the public API.
"""

from enum import Enum
from typing import Optional


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class KorDateError(Exception):
    """Base exception class for kordate."""

    def __init__(self, message: str, severity: ErrorSeverity = ErrorSeverity.MEDIUM):
        self.message = message
        self.severity = severity
        super().__init__(self.message)


class NoMatchError(KorDateError):
    """Raised when no pattern of the requested kind matches the input."""

    def __init__(self, text: str, kind: str = "date"):
        self.text = text
        self.kind = kind
        super().__init__(
            f"No {kind} expression found in: '{text}'",
            severity=ErrorSeverity.LOW
        )


class InvalidTimezoneError(KorDateError):
    """Raised when a timezone identifier cannot be resolved."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown timezone identifier: '{name}'")


class MalformedNumeralError(KorDateError):
    """Raised when a captured numeral cannot be used.

    Covers strict-mode (``FillPolicy.ERROR_ON_MISSING``) failures, required
    fields that cannot be parsed, and relative offsets that overflow the
    supported calendar range.
    """

    def __init__(self, field: str, raw: Optional[str], reason: Optional[str] = None):
        self.field = field
        self.raw = raw
        message = f"Malformed {field} numeral: {raw!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidDateError(KorDateError):
    """Raised when an extracted value with out-of-range fields is converted."""
    pass


class ConfigurationError(KorDateError):
    """Error raised when configuration is invalid."""

    def __init__(self, message: str):
        super().__init__(message, severity=ErrorSeverity.HIGH)
