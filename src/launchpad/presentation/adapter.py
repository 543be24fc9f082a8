"""
Presentation Adapter - storage <-> client field naming.

Both directions are total over the defined fields: every field appears in
the output, and a field absent from the source maps to None.
"""

from typing import Any, Mapping

from launchpad.core.exceptions import ValidationError

# (storage name, client name)
FIELD_MAP: tuple[tuple[str, str], ...] = (
    ("id", "id"),
    ("name", "name"),
    ("description", "description"),
    ("icon_name", "iconName"),
    ("status", "status"),
    ("type", "type"),
    ("url", "url"),
    ("swarm_url", "swarmUrl"),
    ("owner", "owner"),
    ("source_url", "sourceUrl"),
    ("backend_port", "backendPort"),
    ("ai_model", "aiModel"),
    ("sort_order", "sortOrder"),
)

STORAGE_TO_CLIENT: dict[str, str] = dict(FIELD_MAP)
CLIENT_TO_STORAGE: dict[str, str] = {client: storage for storage, client in FIELD_MAP}

if len(STORAGE_TO_CLIENT) != len(CLIENT_TO_STORAGE) or len(FIELD_MAP) != len(STORAGE_TO_CLIENT):
    raise RuntimeError("Presentation field map is not one-to-one")


def to_client(stored: Mapping[str, Any]) -> dict[str, Any]:
    """
    Map a stored row to client naming.

    Storage-only columns (timestamps) are not part of the client contract
    and are dropped.
    """
    return {client: stored.get(storage) for storage, client in FIELD_MAP}


def to_storage(client: Mapping[str, Any], *, partial: bool = False) -> dict[str, Any]:
    """
    Map a client payload to storage naming.

    Args:
        client: Client-named mapping
        partial: Map only the keys present (partial update) instead of
            filling every defined field

    Raises:
        ValidationError: If the payload carries keys outside the field map
    """
    unknown = sorted(key for key in client if key not in CLIENT_TO_STORAGE)
    if unknown:
        raise ValidationError(
            f"Unknown field(s): {', '.join(unknown)}",
            field=unknown[0],
            validation_errors=[f"{key}: unknown field" for key in unknown],
        )

    if partial:
        return {CLIENT_TO_STORAGE[key]: value for key, value in client.items()}
    return {storage: client.get(name) for storage, name in FIELD_MAP}


def client_field(storage_name: str) -> str:
    """Client name for a storage field (used to report validation errors)."""
    return STORAGE_TO_CLIENT.get(storage_name, storage_name)
