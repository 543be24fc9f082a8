"""
Launchpad Registry Module.

Provides the ordered application registry and its SQLite store.
"""

__all__ = [
    "AppStore",
    "RegistryService",
    "DEFAULT_APPS",
    "load_seed_file",
    "seed_registry",
]

from launchpad.registry.seed import DEFAULT_APPS, load_seed_file, seed_registry
from launchpad.registry.service import RegistryService
from launchpad.registry.storage import AppStore
