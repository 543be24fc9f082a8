"""
Admin guard for mutating endpoints.

Read endpoints stay public; writes need a bearer token whose claims grant
the admin role. Disabled entirely when ``require_admin`` is off.
"""

import logging

from fastapi import Depends, Request

from launchpad.api.auth.tokens import TokenError, TokenPayload, decode_token, extract_token_from_header
from launchpad.api.dependencies import get_launcher_config
from launchpad.api.schemas.exceptions import AuthRequiredError, ForbiddenError
from launchpad.config import LauncherConfig

logger = logging.getLogger(__name__)


async def require_admin(
    request: Request,
    config: LauncherConfig = Depends(get_launcher_config),
) -> TokenPayload | None:
    """
    Authorize an admin-only operation.

    Returns:
        Verified claims, or None when the guard is disabled

    Raises:
        AuthRequiredError: If the token is missing, malformed or expired
        ForbiddenError: If the token does not grant admin
    """
    if not config.require_admin:
        return None

    token = extract_token_from_header(request.headers.get("authorization"))
    if not token:
        raise AuthRequiredError(detail="Provide an admin token (Authorization: Bearer <token>)")

    try:
        payload = decode_token(token, config.jwt_secret)
    except TokenError as e:
        logger.debug(f"Admin token rejected: {e}")
        raise AuthRequiredError(message="Invalid authentication credentials", detail=str(e))

    if not payload.is_admin:
        logger.warning(f"Non-admin '{payload.sub}' attempted {request.method} {request.url.path}")
        raise ForbiddenError()

    request.state.user_id = payload.sub
    return payload
