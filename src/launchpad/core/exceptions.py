"""
Launchpad Exception Hierarchy.

Defines the domain exceptions raised by the registry, the store and the
ambient services. The HTTP layer maps each class to a status code.
"""

from typing import Any


class LaunchpadError(Exception):
    """
    Base exception for all Launchpad errors.

    All custom exceptions inherit from this class, allowing
    generic catch blocks and consistent error handling.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None):
        """
        Initialize a LaunchpadError.

        Args:
            message: Human-readable error message
            details: Optional structured data for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation with details."""
        base = self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{base} ({details_str})"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(LaunchpadError):
    """
    Malformed or missing input.

    Raised before storage is touched, when:
    - Required fields (id, name) are empty
    - Enum fields carry unknown values
    - A reorder sequence does not match the current id set
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        validation_errors: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize a ValidationError.

        Args:
            message: Human-readable error message
            field: Field name that failed validation
            validation_errors: List of specific validation errors
            details: Optional structured data for debugging
        """
        details = details or {}
        if field:
            details["field"] = field
        if validation_errors:
            details["validation_errors"] = validation_errors

        super().__init__(message, details=details)
        self.field = field
        self.validation_errors = validation_errors or []


class RecordError(LaunchpadError):
    """Errors targeting a specific application record."""

    def __init__(
        self,
        message: str,
        *,
        app_id: str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if app_id:
            details["app_id"] = app_id
        if operation:
            details["operation"] = operation

        super().__init__(message, details=details)
        self.app_id = app_id
        self.operation = operation


class NotFoundError(RecordError):
    """Raised when an operation targets an unknown id."""

    def __init__(
        self,
        message: str = "Application not found",
        *,
        app_id: str | None = None,
        operation: str | None = None,
    ):
        super().__init__(message, app_id=app_id, operation=operation)


class ConflictError(RecordError):
    """Raised when creating a record whose id already exists."""

    def __init__(self, message: str = "Application already exists", *, app_id: str | None = None):
        super().__init__(message, app_id=app_id, operation="create")


class StorageError(LaunchpadError):
    """
    Underlying persistence unavailable or a query failed.

    The original driver exception is chained as ``__cause__``; the
    message stays generic so callers can surface it safely.
    """

    def __init__(
        self,
        message: str = "Storage unavailable",
        *,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details=details)
        self.operation = operation


class ConfigurationError(LaunchpadError):
    """
    Errors in configuration loading or validation.

    Raised when:
    - Environment variables hold invalid values
    - Seed files are missing or malformed
    """

    def __init__(
        self,
        message: str,
        *,
        config_file: str | None = None,
        env_var: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if config_file:
            details["config_file"] = config_file
        if env_var:
            details["env_var"] = env_var

        super().__init__(message, details=details)
        self.config_file = config_file
        self.env_var = env_var


class LLMError(LaunchpadError):
    """
    Errors from the chat completion provider.

    Raised when:
    - API calls fail
    - Rate limits are exceeded
    - Responses cannot be parsed
    """

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        model: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if provider:
            details["provider"] = provider
        if model:
            details["model"] = model
        if status_code:
            details["status_code"] = status_code

        super().__init__(message, details=details)
        self.provider = provider
        self.model = model
        self.status_code = status_code


class LLMAuthenticationError(LLMError):
    """Raised when no API key is configured or the provider rejects it."""

    def __init__(
        self,
        message: str = "API authentication failed",
        *,
        provider: str | None = None,
    ):
        super().__init__(message, provider=provider, status_code=401)


class LLMRateLimitError(LLMError):
    """Raised when the provider rate limit is exceeded after retries."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        *,
        provider: str | None = None,
    ):
        super().__init__(message, provider=provider, status_code=429)


def format_exception(error: Exception) -> str:
    """
    Format an exception for user-friendly display.

    Args:
        error: The exception to format

    Returns:
        Formatted error message string
    """
    if isinstance(error, LaunchpadError):
        return str(error)
    return f"{error.__class__.__name__}: {error}"
