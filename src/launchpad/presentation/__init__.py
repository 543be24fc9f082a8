"""
Launchpad Presentation Module.

Maps records to client naming and resolves icon names.
"""

__all__ = [
    "FIELD_MAP",
    "to_client",
    "to_storage",
    "FALLBACK_ICON",
    "ICON_NAMES",
    "resolve_icon",
]

from launchpad.presentation.adapter import FIELD_MAP, to_client, to_storage
from launchpad.presentation.icons import FALLBACK_ICON, ICON_NAMES, resolve_icon
