"""Pytest configuration and fixtures."""

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# Keep tests independent of the host environment
os.environ.setdefault("LP_REQUIRE_ADMIN", "false")
os.environ.setdefault("LP_JWT_SECRET", "test-secret")
os.environ.setdefault("LP_LOG_LEVEL", "DEBUG")

from launchpad.config import LauncherConfig  # noqa: E402
from launchpad.registry.service import RegistryService  # noqa: E402
from launchpad.registry.storage import AppStore  # noqa: E402


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def store(temp_dir: Path) -> Generator[AppStore, None, None]:
    """Initialized store on a fresh database file."""
    app_store = AppStore(temp_dir / "launchpad.db")
    app_store.initialize()
    yield app_store
    app_store.close()


@pytest.fixture
def service(store: AppStore) -> RegistryService:
    """Registry service over the temporary store."""
    return RegistryService(store)


@pytest.fixture
def config(temp_dir: Path) -> LauncherConfig:
    """Open configuration pointing at the temporary database."""
    return LauncherConfig(
        db_path=temp_dir / "launchpad.db",
        require_admin=False,
        jwt_secret="test-secret",
        log_level="DEBUG",
    )


@pytest.fixture
def abc_service(service: RegistryService) -> RegistryService:
    """Registry holding A, B, C at positions 0, 1, 2."""
    for position, app_id in enumerate(["A", "B", "C"]):
        service.create({"id": app_id, "name": f"App {app_id}", "sort_order": position})
    return service
