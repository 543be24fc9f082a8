"""
Icon table endpoint.
"""

from fastapi import APIRouter

from launchpad.api.schemas.responses import IconTable
from launchpad.presentation.icons import FALLBACK_ICON, ICON_NAMES

router = APIRouter()


@router.get("", response_model=IconTable)
async def list_icons() -> IconTable:
    """Icon names tiles may reference; anything else renders as the fallback."""
    return IconTable(icons=list(ICON_NAMES), fallback=FALLBACK_ICON)
