"""Centralized error handling module."""

from enum import Enum
from typing import Any, Dict, Type

from tuiman.utils.logging import get_logger

_logger = None


def _get_logger():
    """Get logger with lazy initialisation."""
    global _logger
    if _logger is None:
        _logger = get_logger(__name__)
    return _logger


## Error Categories


class ErrorCategory(Enum):
    """Categories of errors for better handling."""

    STORAGE = "storage"
    DATABASE = "database"
    NETWORK = "network"
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    FILE_SYSTEM = "file_system"
    CONFIGURATION = "configuration"
    EDITOR = "editor"
    UNKNOWN = "unknown"


## Custom Exceptions


class TuimanError(Exception):
    """Base exception for all tuiman errors."""

    category = ErrorCategory.UNKNOWN
    user_message = "An error occurred"

    def __init__(
        self, message: str | None = None, details: Dict[str, Any] | None = None
    ):
        """Initialise TuimanError with optional message and details."""
        self.message = message or self.user_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error details to a dictionary."""
        return {
            "error_type": self.__class__.__name__,
            "category": self.category.value,
            "message": self.message,
            "details": self.details,
        }


## Request Storage Errors


class StorageError(TuimanError):
    """Base exception for request file storage errors."""

    category = ErrorCategory.STORAGE
    user_message = "A request storage error occurred"


class RequestNotFoundError(StorageError):
    """Exception when a request id has no stored file."""

    user_message = "Request not found"


class InvalidRequestIdError(StorageError):
    """Exception for ids that cannot be used as a file name."""

    user_message = "Invalid request id"


## Database Errors


class DatabaseError(TuimanError):
    """Base exception for database-related errors."""

    category = ErrorCategory.DATABASE
    user_message = "A database error occurred"


class DatabaseConnectionError(DatabaseError):
    """Exception for database connection failures."""

    user_message = "Failed to open the history database"


class HistoryWriteError(DatabaseError):
    """Exception when a run cannot be appended to the history log."""

    user_message = "Failed to record run"


## Network Errors


class NetworkError(TuimanError):
    """Base exception for network-related errors."""

    category = ErrorCategory.NETWORK
    user_message = "A network error occurred"


class TransportInitError(NetworkError):
    """Exception when the HTTP transport cannot be created."""

    user_message = "Failed to initialise the HTTP transport"


## Validation Errors


class ValidationError(TuimanError):
    """Base exception for validation-related errors."""

    category = ErrorCategory.VALIDATION
    user_message = "Invalid input"


class InvalidJSONBodyError(ValidationError):
    """Exception for request bodies that look like JSON but do not parse."""

    user_message = "Invalid JSON"


## File System Errors


class FileSystemError(TuimanError):
    """Base exception for file system-related errors."""

    category = ErrorCategory.FILE_SYSTEM
    user_message = "A file system error occurred"


class PathInitError(FileSystemError):
    """Exception when application directories cannot be created."""

    user_message = "Failed to initialise application directories"


class ExportImportError(FileSystemError):
    """Exception for export and import failures."""

    user_message = "Export or import failed"


## Configuration Errors


class ConfigurationError(TuimanError):
    """Base exception for configuration-related errors."""

    category = ErrorCategory.CONFIGURATION
    user_message = "A configuration error occurred"


class InvalidConfigError(ConfigurationError):
    """Exception for invalid configuration settings."""

    user_message = "Invalid configuration settings"


## Key Store Errors


class KeyStoreError(TuimanError):
    """Base exception for key store-related errors."""

    category = ErrorCategory.AUTHENTICATION
    user_message = "A key store error occurred"


class EncryptionError(KeyStoreError):
    """Exception for encryption/decryption failures."""

    user_message = "Failed to encrypt/decrypt data"


class CorruptedSecretsError(KeyStoreError):
    """Exception for corrupted key store data."""

    user_message = "Key store data is corrupted"


## External Editor Errors


class EditorError(TuimanError):
    """Exception for external editor failures."""

    category = ErrorCategory.EDITOR
    user_message = "Editor failed"


## Error Handler


class ErrorHandler:
    """Centralized error handling and logging."""

    @staticmethod
    def handle(
        error: Exception, context: str = "", log_traceback: bool = True
    ) -> Dict[str, Any]:
        """Handle errors with logging and user-friendly message."""
        if isinstance(error, TuimanError):
            _get_logger().error(f"{context}: {error.message}", extra={"context": error.details})
            if log_traceback:
                _get_logger().exception(error)
            return error.to_dict()
        else:
            _get_logger().error(f"{context}: {str(error)}")
            if log_traceback:
                _get_logger().exception(error)
            return {
                "error_type": "UnknownError",
                "category": ErrorCategory.UNKNOWN.value,
                "message": str(error),
                "details": {"context": context},
            }


## Context Manager for Error Handling


class error_context:
    """Context manager translating foreign exceptions into a TuimanError subclass.

    Exceptions that are already TuimanError pass through untouched. Anything
    listed in ``catch`` is logged and re-raised as ``error_cls`` with the
    original chained.
    """

    def __init__(
        self,
        context: str = "",
        error_cls: Type[TuimanError] = TuimanError,
        catch: tuple[Type[BaseException], ...] = (Exception,),
    ):
        """Initialise error context manager."""

        self.context = context
        self.error_cls = error_cls
        self.catch = catch

    def __enter__(self):
        """Enter the context."""
        return self

    def __exit__(self, exc_type, exc_value, exc_tb):
        """Exit the context and translate exceptions."""
        if exc_type is None or isinstance(exc_value, TuimanError):
            return False

        if not isinstance(exc_value, self.catch):
            return False

        ErrorHandler.handle(exc_value, self.context, log_traceback=False)
        message = f"{self.context}: {exc_value}" if self.context else str(exc_value)
        raise self.error_cls(message) from exc_value

