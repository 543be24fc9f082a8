"""
Global settings endpoints (flat key/value object).
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from launchpad.api.auth.guard import require_admin
from launchpad.api.dependencies import get_registry
from launchpad.registry.service import RegistryService

router = APIRouter()


@router.get("", response_model=dict[str, str])
def get_settings(registry: RegistryService = Depends(get_registry)) -> dict[str, str]:
    """All settings."""
    return registry.get_settings()


@router.put("", response_model=dict[str, str], dependencies=[Depends(require_admin)])
def put_settings(
    values: dict[str, Any] = Body(..., examples=[{"default_execution_mode": "browser"}]),
    registry: RegistryService = Depends(get_registry),
) -> dict[str, str]:
    """
    Upsert settings; a null value removes the key.

    Returns:
        The full settings object after the update
    """
    return registry.update_settings(values)
