"""Snapshot engine: staging, metadata, restore and retention."""

from save_vault.core.snapshot.metadata import SnapshotMetadata
from save_vault.core.snapshot.service import SnapshotService

__all__ = ["SnapshotMetadata", "SnapshotService"]
