"""
Static icon table.

Tiles reference icons by symbolic name. Names outside this table resolve
to FALLBACK_ICON instead of being looked up dynamically.
"""

import re

FALLBACK_ICON = "Box"

ICON_NAMES: tuple[str, ...] = (
    "Activity",
    "AppWindow",
    "BarChart3",
    "Bot",
    "Box",
    "Briefcase",
    "Building2",
    "CalendarClock",
    "ClipboardList",
    "Cloud",
    "Code",
    "Cpu",
    "Database",
    "DraftingCompass",
    "FileText",
    "Folder",
    "Globe",
    "HardHat",
    "LayoutDashboard",
    "LifeBuoy",
    "Mail",
    "MessageSquare",
    "Package",
    "Server",
    "Settings",
    "Shield",
    "ShoppingCart",
    "TerminalSquare",
    "TestTube",
    "Truck",
    "UserCheck",
    "Users",
    "Warehouse",
    "Workflow",
    "Wrench",
)

_ICON_NAME_PATTERN = re.compile(r"^[A-Z][A-Za-z0-9]*$")


def _validate_table(names: tuple[str, ...], fallback: str) -> frozenset[str]:
    """Check the table once at import; a broken table is a packaging bug."""
    if len(set(names)) != len(names):
        raise RuntimeError("Icon table contains duplicate names")
    bad = [name for name in names if not _ICON_NAME_PATTERN.match(name)]
    if bad:
        raise RuntimeError(f"Invalid icon names: {', '.join(bad)}")
    if fallback not in names:
        raise RuntimeError(f"Fallback icon '{fallback}' missing from icon table")
    return frozenset(names)


KNOWN_ICONS = _validate_table(ICON_NAMES, FALLBACK_ICON)


def is_known_icon(name: str | None) -> bool:
    """Whether ``name`` is in the icon table."""
    return name in KNOWN_ICONS


def resolve_icon(name: str | None) -> str:
    """Return ``name`` if it is a known icon, else the fallback."""
    if name in KNOWN_ICONS:
        return name
    return FALLBACK_ICON
