"""
HS256 bearer tokens for admin access.

Tokens are issued by the corporate session service; this module verifies
them. ``create_access_token`` exists for local development and tests.
"""

import base64
import hashlib
import hmac
import json
import logging
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

logger = logging.getLogger(__name__)

# Matches the session service's default lifetime
DEFAULT_EXPIRATION_SECONDS = int(timedelta(hours=1).total_seconds())

JWT_ALGORITHM = "HS256"

ADMIN_ROLE = "admin"


class TokenError(Exception):
    """Base exception for token-related errors."""


class InvalidTokenError(TokenError):
    """Exception raised when a token is invalid or malformed."""


class ExpiredTokenError(TokenError):
    """Exception raised when a token has expired."""


@dataclass
class TokenPayload:
    """
    Verified token claims.

    Attributes:
        sub: Subject (user id or email)
        exp: Expiration timestamp (Unix epoch)
        iat: Issued at timestamp (Unix epoch)
        role: Session role ("admin" or "user")
        scope: Space-separated scopes (optional)
    """

    sub: str
    exp: int
    iat: int
    role: str | None = None
    scope: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenPayload":
        """Create TokenPayload from decoded claims."""
        return cls(
            sub=str(data["sub"]),
            exp=int(data["exp"]),
            iat=int(data.get("iat", 0)),
            role=data.get("role"),
            scope=data.get("scope"),
        )

    @property
    def is_admin(self) -> bool:
        """Admin if the role says so or the scope grants it."""
        if self.role == ADMIN_ROLE:
            return True
        return ADMIN_ROLE in (self.scope or "").split()


def _base64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _base64url_decode(data: str) -> bytes:
    padding = 4 - len(data) % 4
    if padding != 4:
        data += "=" * padding
    return base64.urlsafe_b64decode(data)


def _base64url_encode_json(data: dict[str, Any]) -> str:
    return _base64url_encode(json.dumps(data, separators=(",", ":"), sort_keys=True).encode("utf-8"))


def _sign_hmac(data: str, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), data.encode("utf-8"), hashlib.sha256).digest()
    return _base64url_encode(digest)


def create_access_token(
    subject: str,
    secret: str,
    *,
    role: str | None = None,
    scope: str | None = None,
    expiration_seconds: int = DEFAULT_EXPIRATION_SECONDS,
) -> str:
    """
    Create a signed token.

    Raises:
        ValueError: If subject or secret is empty
    """
    if not subject:
        raise ValueError("Subject cannot be empty")
    if not secret:
        raise ValueError("Secret cannot be empty")

    now = int(time.time())
    claims: dict[str, Any] = {"sub": subject, "iat": now, "exp": now + expiration_seconds}
    if role:
        claims["role"] = role
    if scope:
        claims["scope"] = scope

    header_b64 = _base64url_encode_json({"alg": JWT_ALGORITHM, "typ": "JWT"})
    payload_b64 = _base64url_encode_json(claims)
    signing_input = f"{header_b64}.{payload_b64}"
    return f"{signing_input}.{_sign_hmac(signing_input, secret)}"


def decode_token(token: str, secret: str) -> TokenPayload:
    """
    Verify signature and expiry and return the claims.

    Raises:
        InvalidTokenError: If token is malformed or signature is invalid
        ExpiredTokenError: If token has expired
    """
    if not token:
        raise InvalidTokenError("Token cannot be empty")

    parts = token.split(".")
    if len(parts) != 3:
        raise InvalidTokenError("Invalid token format")

    header_b64, payload_b64, signature = parts
    signing_input = f"{header_b64}.{payload_b64}"
    # Constant-time comparison
    if not hmac.compare_digest(_sign_hmac(signing_input, secret), signature):
        raise InvalidTokenError("Invalid token signature")

    try:
        header = json.loads(_base64url_decode(header_b64))
        claims = json.loads(_base64url_decode(payload_b64))
    except (ValueError, UnicodeDecodeError) as e:
        raise InvalidTokenError(f"Cannot decode token: {e}") from e

    if header.get("alg") != JWT_ALGORITHM:
        raise InvalidTokenError(f"Unsupported algorithm: {header.get('alg')}")
    if "sub" not in claims:
        raise InvalidTokenError("Token missing subject claim")
    if "exp" not in claims:
        raise InvalidTokenError("Token missing expiration claim")
    if int(time.time()) >= int(claims["exp"]):
        raise ExpiredTokenError(f"Token expired at {claims['exp']}")

    return TokenPayload.from_dict(claims)


def validate_token(token: str, secret: str) -> tuple[bool, TokenPayload | None, str | None]:
    """
    Validate a token without raising.

    Returns:
        Tuple of (is_valid, payload, error_message)
    """
    try:
        return True, decode_token(token, secret), None
    except TokenError as e:
        return False, None, str(e)


def extract_token_from_header(auth_header: str | None) -> str | None:
    """Return the token from ``Bearer <token>``, or None."""
    if not auth_header:
        return None

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1]
