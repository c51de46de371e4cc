"""
Custom exceptions for MDB_LITE.

These exceptions provide more specific error types while maintaining
backward compatibility with RuntimeError. Errors raised by PyMongo itself
are never wrapped; they reach the caller unchanged.
"""

from typing import Any, Dict, List, Optional


class MongoLiteError(RuntimeError):
    """
    Base exception for MDB_LITE errors.

    Attributes:
        message: Error message
        context: Optional dictionary with additional context (database,
                 collection, host, etc.)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            context: Optional dictionary with additional context information
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class ConnectionFailedError(MongoLiteError):
    """
    Raised when a client handle could not reach the server.

    The error is sticky: once recorded on a handle, every later operation
    on that handle raises the same instance until a new handle is created.

    Attributes:
        host: Host portion of the connection string
        reason: Message of the underlying driver error
    """

    def __init__(
        self,
        host: str,
        reason: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(f"host: {host} error: {reason}", context=context)
        self.host = host
        self.reason = reason


class NotFoundError(MongoLiteError, LookupError):
    """
    Raised when a read, update or delete matched no document.

    Attributes:
        database: Database name (if available)
        collection: Collection name (if available)
    """

    def __init__(
        self,
        message: str = "not found",
        database: Optional[str] = None,
        collection: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if database:
            context["database"] = database
        if collection:
            context["collection"] = collection
        super().__init__(message, context=context)
        self.database = database
        self.collection = collection


class InvalidObjectIdError(MongoLiteError, ValueError):
    """
    Raised when a string is not a valid 24-character hex ObjectId.

    Attributes:
        value: The rejected input
    """

    def __init__(self, value: Any) -> None:
        super().__init__(f"invalid ObjectId hex: {value!r}", context={"value": value})
        self.value = value


class ConfigurationError(MongoLiteError):
    """
    Raised when configuration is invalid or missing.

    Attributes:
        message: Error message
        config_key: Configuration key that caused the error (if available)
        config_value: Configuration value that caused the error (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize the configuration error.

        Args:
            message: Error message
            config_key: Configuration key that caused the error (if available)
            config_value: Configuration value that caused the error (if available)
            context: Additional context information
        """
        context = context or {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value
        super().__init__(message, context=context)
        self.config_key = config_key
        self.config_value = config_value


class InvalidOptionsError(ConfigurationError):
    """
    Raised when a find options mapping carries a mistyped value.

    Attributes:
        error_paths: Option keys that failed validation
    """

    def __init__(
        self,
        message: str,
        error_paths: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if error_paths:
            context["error_paths"] = error_paths
        super().__init__(message, context=context)
        self.error_paths = error_paths or []
