"""Error definitions for the scoring engine."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Enumeration of all possible error codes."""
    # Configuration Errors
    CONFIG_INVALID = "config_invalid"
    CONFIG_MISSING = "config_missing"

    # Data Errors
    VALIDATION_FAILED = "validation_failed"
    INSUFFICIENT_DATA = "insufficient_data"


@dataclass
class ScoringError(Exception):
    """Base exception for all scoring errors."""
    message: str
    code: ErrorCode
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Code: {self.code.value}, Details: {self.details})"
        return f"{self.message} (Code: {self.code.value})"

    def to_dict(self) -> dict[str, Any]:
        return {
            'error': self.message,
            'error_type': type(self).__name__,
            'code': self.code.value,
            'details': self.details or {},
        }


class ConfigError(ScoringError):
    """Round configuration is missing a required field or holds an unknown value."""
    def __init__(self, message: str, details: dict[str, Any] | None = None, missing: bool = False):
        code = ErrorCode.CONFIG_MISSING if missing else ErrorCode.CONFIG_INVALID
        super().__init__(message, code, details)


class ValidationError(ScoringError):
    """Snapshot records reference each other inconsistently."""
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.VALIDATION_FAILED, details)


class InsufficientDataError(ScoringError):
    """A calculation's precondition on the number of players or teams is not met."""
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.INSUFFICIENT_DATA, details)
