"""
Health check endpoints.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from launchpad.api.dependencies import get_registry
from launchpad.api.schemas.responses import HealthResponse
from launchpad.core.exceptions import StorageError
from launchpad.registry.service import RegistryService
from launchpad.version import __version__

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=HealthResponse, responses={503: {"model": HealthResponse}})
def health_check(registry: RegistryService = Depends(get_registry)):
    """
    Verify the database answers a trivial query.

    Returns:
        200 with status "ok", or 503 with status "error"
    """
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        registry.store.ping()
    except StorageError:
        logger.exception("Health check failed")
        return JSONResponse(
            status_code=503,
            content=HealthResponse(
                status="error",
                database="unavailable",
                version=__version__,
                timestamp=timestamp,
            ).model_dump(),
        )

    return HealthResponse(status="ok", database="connected", version=__version__, timestamp=timestamp)


@router.get("/ping")
async def ping() -> dict[str, str]:
    """Liveness probe; always succeeds."""
    return {"pong": datetime.now(timezone.utc).isoformat()}
