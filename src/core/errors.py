"""
Centralized error handling system for the Background Remover GUI.

This module provides the error taxonomy and custom exception hierarchy used by
the session controller, the remote conversion client and the UI layer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar

logger = logging.getLogger(__name__)


class ErrorType(Enum):
    """Error type categories for consistent error handling."""

    FILE = "file"
    CONVERSION = "conversion"
    SYSTEM = "system"
    VALIDATION = "validation"
    CONFIG = "config"


class ErrorCode(Enum):
    """Specific error codes for common scenarios."""

    # File-related errors
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"

    # Validation errors
    INVALID_INPUT = "INVALID_INPUT"
    PRECONDITION_FAILED = "PRECONDITION_FAILED"

    # Configuration errors
    CONFIG_MISSING = "CONFIG_MISSING"

    # Conversion errors
    NETWORK_ERROR = "NETWORK_ERROR"
    SERVICE_ERROR = "SERVICE_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    EMPTY_RESPONSE = "EMPTY_RESPONSE"

    # System errors
    TIMEOUT = "TIMEOUT"
    MEMORY_ERROR = "MEMORY_ERROR"
    OS_ERROR = "OS_ERROR"

    # Generic
    UNKNOWN = "UNKNOWN"


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class BaseAppError(Exception):
    """
    Base application error with structured metadata.

    This is the root of all custom application errors, providing
    structured information for consistent error handling and user feedback.
    """

    type: ErrorType
    code: ErrorCode
    user_message: str
    technical_message: str | None = None
    severity: ErrorSeverity = ErrorSeverity.MEDIUM
    retriable: bool = False
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Return user-friendly error message."""
        return self.user_message

    def __repr__(self) -> str:
        """Return detailed error representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"type={self.type.value}, "
            f"code={self.code.value}, "
            f"message='{self.user_message}'"
            f")"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type.value,
            "code": self.code.value,
            "user_message": self.user_message,
            "technical_message": self.technical_message,
            "severity": self.severity.value,
            "retriable": self.retriable,
            "context": self.context,
        }


class _CategorizedError(BaseAppError):
    """
    BaseAppError whose type is fixed by the subclass.

    Subclasses set ``error_type`` and may change the default severity and
    retriability; callers only pass the code and messages.
    """

    error_type: ClassVar[ErrorType]
    default_severity: ClassVar[ErrorSeverity] = ErrorSeverity.MEDIUM
    default_retriable: ClassVar[bool] = False

    def __init__(
        self,
        code: ErrorCode,
        user_message: str,
        technical_message: str | None = None,
        severity: ErrorSeverity | None = None,
        retriable: bool | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(
            type=self.error_type,
            code=code,
            user_message=user_message,
            technical_message=technical_message,
            severity=severity or self.default_severity,
            retriable=self.default_retriable if retriable is None else retriable,
            context=context or {},
        )


class FileError(_CategorizedError):
    """Reading or writing a local file failed."""

    error_type = ErrorType.FILE


class ConversionError(_CategorizedError):
    """The remote conversion failed. Worth retrying by default."""

    error_type = ErrorType.CONVERSION
    default_severity = ErrorSeverity.HIGH
    default_retriable = True


class SystemError(_CategorizedError):
    """System level errors."""

    error_type = ErrorType.SYSTEM
    default_severity = ErrorSeverity.HIGH


class ValidationError(_CategorizedError):
    """Input and state validation errors."""

    error_type = ErrorType.VALIDATION
    default_severity = ErrorSeverity.LOW


class ConfigError(_CategorizedError):
    """Configuration related errors."""

    error_type = ErrorType.CONFIG
    default_severity = ErrorSeverity.HIGH


class InvalidInputError(ValidationError):
    """The selected file is not declared as an image."""

    def __init__(self, mime_type: str | None = None, user_message: str = "Please choose a valid image file."):
        super().__init__(
            code=ErrorCode.INVALID_INPUT,
            user_message=user_message,
            technical_message=f"Rejected MIME type: {mime_type!r}",
            context={"mime_type": mime_type},
        )


class PreconditionError(ValidationError):
    """An operation was requested in a state that does not allow it."""

    def __init__(self, user_message: str, technical_message: str | None = None):
        super().__init__(
            code=ErrorCode.PRECONDITION_FAILED,
            user_message=user_message,
            technical_message=technical_message,
        )


class ConfigurationError(ConfigError):
    """A required configuration value (the API credential) is missing."""

    def __init__(self, setting: str, user_message: str | None = None):
        super().__init__(
            code=ErrorCode.CONFIG_MISSING,
            user_message=user_message or f"The image service is not configured. Set the {setting} environment variable.",
            technical_message=f"Missing required setting: {setting}",
            context={"setting": setting},
        )


class TransportError(ConversionError):
    """The image service could not be reached or answered with a failure."""

    def __init__(
        self,
        technical_message: str,
        code: ErrorCode = ErrorCode.NETWORK_ERROR,
        status_code: int | None = None,
        user_message: str = "Could not reach the image service.",
    ):
        context: dict[str, Any] = {}
        if status_code is not None:
            context["status_code"] = status_code
        super().__init__(
            code=code,
            user_message=user_message,
            technical_message=technical_message,
            context=context,
        )

    @property
    def status_code(self) -> int | None:
        """HTTP status returned by the service, if any."""
        return self.context.get("status_code")


class EmptyResponseError(ConversionError):
    """The image service answered but returned no image."""

    def __init__(self, technical_message: str = "No image was returned from the API."):
        super().__init__(
            code=ErrorCode.EMPTY_RESPONSE,
            user_message="The image service did not return an image.",
            technical_message=technical_message,
        )


# Exception mapping configuration
_EXCEPTION_MAPPING: dict[type[Exception], tuple[ErrorType, ErrorCode, str]] = {
    FileNotFoundError: (ErrorType.FILE, ErrorCode.FILE_NOT_FOUND, "File not found"),
    PermissionError: (ErrorType.FILE, ErrorCode.PERMISSION_DENIED, "Permission denied"),
    OSError: (ErrorType.SYSTEM, ErrorCode.OS_ERROR, "System error occurred"),
    ValueError: (ErrorType.VALIDATION, ErrorCode.INVALID_INPUT, "Invalid input provided"),
    TimeoutError: (ErrorType.SYSTEM, ErrorCode.TIMEOUT, "Operation timed out"),
    MemoryError: (ErrorType.SYSTEM, ErrorCode.MEMORY_ERROR, "Insufficient memory"),
}

_ERROR_CLASS_MAP: dict[ErrorType, type[BaseAppError]] = {
    ErrorType.FILE: FileError,
    ErrorType.CONVERSION: ConversionError,
    ErrorType.SYSTEM: SystemError,
    ErrorType.VALIDATION: ValidationError,
    ErrorType.CONFIG: ConfigError,
}


def map_exception(exc: Exception, context: dict[str, Any] | None = None) -> BaseAppError:
    """
    Map a built-in exception to a custom application error.

    Args:
        exc: The exception to map
        context: Optional context information

    Returns:
        BaseAppError instance with appropriate type and metadata
    """
    context = context or {}

    if isinstance(exc, BaseAppError):
        return exc

    exc_type = type(exc)
    if exc_type in _EXCEPTION_MAPPING:
        error_type, error_code, default_message = _EXCEPTION_MAPPING[exc_type]
        error_class = _ERROR_CLASS_MAP[error_type]
        user_message = str(exc) if str(exc) else default_message

        result: BaseAppError = error_class(
            code=error_code,
            user_message=user_message,
            technical_message=f"{exc_type.__name__}: {exc}",
            context=context,
        )
        return result

    # Fallback for unknown exceptions
    logger.warning(f"Unknown exception type: {exc_type.__name__}: {exc}")
    return SystemError(
        code=ErrorCode.UNKNOWN,
        user_message="An unexpected error occurred",
        technical_message=f"{exc_type.__name__}: {exc}",
        context=context,
    )


def from_exception(exc: Exception, context: dict[str, Any] | None = None) -> BaseAppError:
    """Convert any exception to a BaseAppError (alias for map_exception)."""
    return map_exception(exc, context)


def user_message_for(error: Exception) -> str:
    """
    Build the banner text shown to the user for an error.

    Retriable errors get a hint that the user can try again.
    """
    app_error = from_exception(error)
    message = app_error.user_message
    if app_error.retriable:
        message += " Please try again."
    return message
