"""
Launchpad Core Module.

Provides the record model and the exception hierarchy.
"""

__all__ = [
    "AppRecord",
    "AppStatus",
    "AppType",
    "validate_record",
    # Exceptions
    "LaunchpadError",
    "ValidationError",
    "RecordError",
    "NotFoundError",
    "ConflictError",
    "StorageError",
    "ConfigurationError",
    "LLMError",
    "LLMAuthenticationError",
    "LLMRateLimitError",
]

from launchpad.core.exceptions import (
    ConfigurationError,
    ConflictError,
    LaunchpadError,
    LLMAuthenticationError,
    LLMError,
    LLMRateLimitError,
    NotFoundError,
    RecordError,
    StorageError,
    ValidationError,
)
from launchpad.core.models import AppRecord, AppStatus, AppType, validate_record
