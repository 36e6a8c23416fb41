"""Type definitions for save-vault configuration and on-disk manifests."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import NotRequired, TypedDict

# =============================================================================
# Global configuration
# =============================================================================


class DirectoryConfig(TypedDict):
    """Directory paths configuration."""

    storage: Path
    logs: Path


class GlobalConfig(TypedDict):
    """Global application configuration."""

    config_version: str
    protected_snapshots: int
    backup_before_restore: bool
    case_sensitive_paths: bool
    log_level: str
    console_log_level: str
    directory: DirectoryConfig


# =============================================================================
# Registry manifest (registry.json)
# =============================================================================


class EntryRecord(TypedDict):
    """Persisted record of one tracked entry."""

    root: str
    files: list[str]
    created: str


class RegistryManifest(TypedDict):
    """Top-level registry document."""

    version: int
    entries: dict[str, EntryRecord]


# =============================================================================
# Snapshot metadata (entries/<name>/metadata.json)
# =============================================================================


class SnapshotRecord(TypedDict):
    """Metadata for one committed snapshot."""

    directory: str
    created: str
    sequence: int
    sha256: str
    size: int
    files: int
    auto: bool


class SnapshotMetadataDocument(TypedDict):
    """Per-entry snapshot metadata document."""

    sequence: int
    snapshots: dict[str, SnapshotRecord]


# =============================================================================
# Snapshot contents (snapshots/<dir>/contents.json)
# =============================================================================


class StoredItem(TypedDict):
    """An auxiliary item captured inside a snapshot payload."""

    source: str
    stored: str
    kind: str


class SnapshotContents(TypedDict):
    """Describes where each captured path lives inside a payload."""

    root: str
    files: list[StoredItem]
    sha256: NotRequired[str]


@dataclass(frozen=True)
class SnapshotInfo:
    """Display information for one snapshot, newest-first ordering."""

    snapshot_id: str
    created: datetime | None
    sequence: int
    size: int
    files: int
    sha256: str
    auto: bool
    protected: bool
