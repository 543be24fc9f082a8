"""
Authentication module for Launchpad API.

Verifies externally issued admin tokens.
"""

from launchpad.api.auth.guard import require_admin
from launchpad.api.auth.tokens import (
    ExpiredTokenError,
    InvalidTokenError,
    TokenError,
    TokenPayload,
    create_access_token,
    decode_token,
    extract_token_from_header,
    validate_token,
)

__all__ = [
    "require_admin",
    "create_access_token",
    "decode_token",
    "validate_token",
    "extract_token_from_header",
    "TokenPayload",
    "TokenError",
    "InvalidTokenError",
    "ExpiredTokenError",
]
