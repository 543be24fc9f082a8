"""
Application registry endpoints.

Records are exchanged in client naming; the presentation adapter converts
at this boundary. Reads are public, writes require admin.
"""

import logging
import uuid
from typing import Any

from fastapi import APIRouter, Body, Depends, status

from launchpad.api.auth.guard import require_admin
from launchpad.api.dependencies import get_registry
from launchpad.api.schemas.requests import ReorderRequest
from launchpad.api.schemas.responses import MessageResponse
from launchpad.presentation.adapter import to_client, to_storage
from launchpad.registry.service import RegistryService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=list[dict[str, Any]])
def list_apps(registry: RegistryService = Depends(get_registry)) -> list[dict[str, Any]]:
    """
    Full registry snapshot in display order.

    Returns:
        Client-named records sorted by sortOrder
    """
    return [to_client(record.to_row()) for record in registry.list()]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_app_record(
    payload: dict[str, Any] = Body(..., examples=[{"id": "wiki", "name": "Wiki", "type": "URL"}]),
    registry: RegistryService = Depends(get_registry),
) -> dict[str, Any]:
    """
    Add an application.

    A missing or empty ``id`` is replaced by a generated UUID. A missing
    ``sortOrder`` appends the record to the end of the list.

    Raises:
        ValidationError: Missing name or invalid field (400)
        ConflictError: Duplicate id (409)
    """
    fields = to_storage(payload, partial=True)
    if not fields.get("id"):
        fields["id"] = str(uuid.uuid4())
    record = registry.create(fields)
    return to_client(record.to_row())


# Must be registered before the parameterized /{app_id} routes
@router.put("/reorder", response_model=MessageResponse, dependencies=[Depends(require_admin)])
def reorder_apps(
    request: ReorderRequest,
    registry: RegistryService = Depends(get_registry),
) -> MessageResponse:
    """
    Replace the display order.

    ``order`` must list every current id exactly once; anything else is
    rejected with 400 and the stored order is left unchanged.
    """
    registry.reorder(request.order)
    return MessageResponse(message="Order updated")


@router.get("/{app_id}")
def get_app_record(app_id: str, registry: RegistryService = Depends(get_registry)) -> dict[str, Any]:
    """Single record, 404 if unknown."""
    return to_client(registry.get(app_id).to_row())


@router.put("/{app_id}", dependencies=[Depends(require_admin)])
def update_app_record(
    app_id: str,
    payload: dict[str, Any] = Body(...),
    registry: RegistryService = Depends(get_registry),
) -> dict[str, Any]:
    """
    Partially update an application; ``sortOrder`` is ignored.

    Raises:
        NotFoundError: Unknown id (404)
        ValidationError: Invalid field or id change (400)
    """
    record = registry.update(app_id, to_storage(payload, partial=True))
    return to_client(record.to_row())


@router.delete("/{app_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
def delete_app_record(app_id: str, registry: RegistryService = Depends(get_registry)) -> MessageResponse:
    """Remove an application; 404 if it is already gone."""
    registry.delete(app_id)
    return MessageResponse(message="App deleted", id=app_id)
