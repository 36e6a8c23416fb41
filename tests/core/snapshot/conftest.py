"""Fixtures for snapshot engine tests."""

from pathlib import Path

import pytest

from save_vault.core.files import FileSetManager
from save_vault.core.registry import EntryRegistry
from save_vault.core.snapshot import SnapshotService
from save_vault.types import GlobalConfig


@pytest.fixture
def snapshot_service(
    registry: EntryRegistry, global_config: GlobalConfig, project_dir: Path
) -> SnapshotService:
    """SnapshotService with the sample project registered."""
    registry.add(project_dir)
    return SnapshotService(registry, global_config)


@pytest.fixture
def file_sets(registry: EntryRegistry) -> FileSetManager:
    """FileSetManager sharing the service's registry."""
    return FileSetManager(registry)

