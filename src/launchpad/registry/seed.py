"""
Registry seeding - stock tiles and YAML seed files.

Seed files use client field naming:

    apps:
      - id: chat
        name: Chat
        iconName: MessageSquare
        type: INTERNAL_VIEW
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from launchpad.core.exceptions import ConfigurationError, ValidationError
from launchpad.core.models import validate_record
from launchpad.presentation.adapter import to_storage
from launchpad.registry.service import RegistryService

logger = logging.getLogger(__name__)


DEFAULT_APPS: list[dict[str, Any]] = [
    {
        "id": "chat",
        "name": "Chat",
        "description": "AI Corporate Assistant",
        "iconName": "MessageSquare",
        "status": "ACTIVE",
        "type": "INTERNAL_VIEW",
    },
    {
        "id": "agent",
        "name": "Agent",
        "description": "Field Agent Portal",
        "iconName": "UserCheck",
        "url": "https://agent.tallman.com",
        "status": "ACTIVE",
        "type": "URL",
    },
    {
        "id": "project",
        "name": "Project",
        "description": "Project Management Suite",
        "iconName": "Briefcase",
        "url": "https://project.tallman.com",
        "status": "ACTIVE",
        "type": "URL",
    },
    {
        "id": "dashboard",
        "name": "Dashboard",
        "description": "Executive KPI Overview",
        "iconName": "LayoutDashboard",
        "url": "https://dash.tallman.com",
        "status": "MAINTENANCE",
        "type": "URL",
    },
    {
        "id": "datahub",
        "name": "DataHub",
        "description": "Central Data Warehouse",
        "iconName": "Database",
        "status": "MAINTENANCE",
        "type": "URL",
    },
    {
        "id": "engineering",
        "name": "Engineering",
        "description": "CAD & Specs Library",
        "iconName": "DraftingCompass",
        "status": "MAINTENANCE",
        "type": "URL",
    },
    {
        "id": "buckettruck",
        "name": "BucketTruck",
        "description": "Fleet Management",
        "iconName": "Truck",
        "url": "C:\\Apps\\BucketTruck\\launcher.exe",
        "status": "MAINTENANCE",
        "type": "EXE",
    },
    {
        "id": "cascade",
        "name": "Cascade",
        "description": "Workflow Automation",
        "iconName": "Workflow",
        "status": "MAINTENANCE",
        "type": "URL",
    },
    {
        "id": "testing",
        "name": "Testing",
        "description": "QA & Safety Checks",
        "iconName": "TestTube",
        "status": "MAINTENANCE",
        "type": "URL",
    },
    {
        "id": "picklist",
        "name": "PickList",
        "description": "Warehouse Picking",
        "iconName": "ClipboardList",
        "status": "MAINTENANCE",
        "type": "URL",
    },
    {
        "id": "rubber",
        "name": "Rubber",
        "description": "Insulation Goods",
        "iconName": "Shield",
        "status": "MAINTENANCE",
        "type": "URL",
    },
    {
        "id": "rental",
        "name": "Rental",
        "description": "Equipment Rental Sys",
        "iconName": "CalendarClock",
        "status": "MAINTENANCE",
        "type": "URL",
    },
]


def load_seed_file(path: Path | str) -> list[dict[str, Any]]:
    """
    Load client-named records from a YAML seed file.

    Raises:
        ConfigurationError: If the file is missing or not a list under ``apps``
    """
    seed_path = Path(path)
    if not seed_path.exists():
        raise ConfigurationError(f"Seed file not found: {seed_path}", config_file=str(seed_path))

    try:
        data = yaml.safe_load(seed_path.read_text())
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in seed file: {e}", config_file=str(seed_path)
        ) from e

    apps = data.get("apps") if isinstance(data, dict) else None
    if not isinstance(apps, list) or not all(isinstance(a, dict) for a in apps):
        raise ConfigurationError(
            "Seed file must contain an 'apps' list of mappings",
            config_file=str(seed_path),
        )
    return apps


def seed_registry(
    service: RegistryService,
    records: list[dict[str, Any]],
    *,
    replace: bool = False,
) -> int:
    """
    Insert client-named records in list order.

    Does nothing on a non-empty registry unless ``replace`` is set, in
    which case existing records are dropped in the same transaction.

    Returns:
        Number of records written

    Raises:
        ValidationError: If any record is invalid or ids repeat
    """
    if not replace and service.store.list_rows():
        logger.info("Registry already populated; skipping seed")
        return 0

    rows = []
    seen: set[str] = set()
    for position, client_record in enumerate(records):
        fields = to_storage(client_record, partial=True)
        fields["sort_order"] = position
        record = validate_record(fields)
        if record.id in seen:
            raise ValidationError(f"Duplicate id in seed: '{record.id}'", field="id")
        seen.add(record.id)
        rows.append(record.to_row())

    service.store.replace_all(rows)
    logger.info(f"Seeded registry with {len(rows)} applications")
    return len(rows)
