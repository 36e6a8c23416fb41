"""Per-entry snapshot metadata.

``metadata.json`` is the commit point of the snapshot store: a payload
directory is only a snapshot once a record pointing at it is saved here.
Records are keyed by snapshot id and carry the payload directory, which
never changes, so renaming a snapshot rewrites this one file and nothing
else.
"""

import shutil
from pathlib import Path
from typing import cast

import orjson

from save_vault.config.schemas import SchemaValidationError, validate_document
from save_vault.constants import (
    METADATA_CORRUPTED_SUFFIX,
    SNAPSHOT_METADATA_FILENAME,
    SNAPSHOTS_DIR_NAME,
)
from save_vault.exceptions import (
    DuplicateSnapshotIdError,
    IOFailureError,
    ManifestError,
    SnapshotNotFoundError,
)
from save_vault.logger import get_logger
from save_vault.types import SnapshotMetadataDocument, SnapshotRecord
from save_vault.utils.json_io import read_json, write_json_atomic

logger = get_logger(__name__)


class SnapshotMetadata:
    """Manages snapshot records of one entry."""

    def __init__(self, entry_dir: Path) -> None:
        """Initialize metadata manager.

        Args:
            entry_dir: Snapshot store directory of the entry

        """
        self.entry_dir = entry_dir
        self.metadata_file = entry_dir / SNAPSHOT_METADATA_FILENAME
        self.snapshots_dir = entry_dir / SNAPSHOTS_DIR_NAME

    def load(self) -> SnapshotMetadataDocument:
        """Load metadata from file.

        A file that cannot be parsed is copied aside before the error is
        raised, so the payload directories it referenced are never treated
        as orphans and purged.

        Returns:
            Metadata document, empty when the entry has no snapshots yet

        Raises:
            ManifestError: If the file is unreadable or invalid

        """
        if not self.metadata_file.exists():
            return {"sequence": 0, "snapshots": {}}

        try:
            data = read_json(self.metadata_file)
            validate_document(
                "snapshot_metadata", data, str(self.metadata_file)
            )
        except (orjson.JSONDecodeError, SchemaValidationError, OSError) as e:
            logger.warning(
                "Corrupted metadata file %s: %s", self.metadata_file, e
            )
            corrupted_backup = self.metadata_file.with_suffix(
                METADATA_CORRUPTED_SUFFIX
            )
            try:
                shutil.copy2(self.metadata_file, corrupted_backup)
                logger.info(
                    "Backed up corrupted metadata to %s", corrupted_backup
                )
            except OSError:
                logger.exception("Could not copy %s aside", self.metadata_file)
            msg = f"Snapshot metadata is unreadable: {e}"
            raise ManifestError(msg, self.entry_dir.name) from e

        return cast("SnapshotMetadataDocument", data)

    def save(self, metadata: SnapshotMetadataDocument) -> None:
        """Save metadata to file atomically.

        Raises:
            IOFailureError: If the file cannot be written

        """
        try:
            write_json_atomic(self.metadata_file, metadata)
        except OSError as e:
            msg = f"Failed to write snapshot metadata: {e}"
            raise IOFailureError(msg, self.entry_dir.name) from e
        logger.debug("Saved metadata to %s", self.metadata_file)

    @staticmethod
    def ordered_ids(metadata: SnapshotMetadataDocument) -> list[str]:
        """Return snapshot ids newest first.

        Ordering follows the creation sequence, which is unaffected by
        renames and by clock changes.
        """
        snapshots = metadata["snapshots"]
        return sorted(
            snapshots,
            key=lambda snapshot_id: snapshots[snapshot_id]["sequence"],
            reverse=True,
        )

    def list_ids(self) -> list[str]:
        """List committed snapshot ids, newest first."""
        return self.ordered_ids(self.load())

    def get(self, snapshot_id: str) -> SnapshotRecord:
        """Get the record of a snapshot.

        Raises:
            SnapshotNotFoundError: If the id is unknown

        """
        record = self.load()["snapshots"].get(snapshot_id)
        if record is None:
            msg = f"No snapshot '{snapshot_id}'"
            raise SnapshotNotFoundError(msg, self.entry_dir.name)
        return record

    def payload_dir(self, record: SnapshotRecord) -> Path:
        """Get the payload directory a record points at."""
        return self.snapshots_dir / record["directory"]

    def add(
        self,
        snapshot_id: str,
        record: SnapshotRecord,
        metadata: SnapshotMetadataDocument | None = None,
    ) -> SnapshotRecord:
        """Commit a snapshot record.

        The record's sequence is assigned here from the document counter.

        Args:
            snapshot_id: Identifier of the new snapshot
            record: Record to store; its sequence is overwritten
            metadata: Already loaded document to update, if any

        Raises:
            DuplicateSnapshotIdError: If the id is already used

        """
        if metadata is None:
            metadata = self.load()
        if snapshot_id in metadata["snapshots"]:
            msg = f"Snapshot '{snapshot_id}' already exists"
            raise DuplicateSnapshotIdError(msg, self.entry_dir.name)

        metadata["sequence"] += 1
        record["sequence"] = metadata["sequence"]
        metadata["snapshots"][snapshot_id] = record
        self.save(metadata)
        logger.debug("Added snapshot %s to metadata", snapshot_id)
        return record

    def rename(self, old_id: str, new_id: str) -> None:
        """Change a snapshot's id in a single metadata write.

        Raises:
            SnapshotNotFoundError: If old_id is unknown
            DuplicateSnapshotIdError: If new_id is already used

        """
        metadata = self.load()
        snapshots = metadata["snapshots"]
        if old_id not in snapshots:
            msg = f"No snapshot '{old_id}'"
            raise SnapshotNotFoundError(msg, self.entry_dir.name)
        if new_id in snapshots:
            msg = f"Snapshot '{new_id}' already exists"
            raise DuplicateSnapshotIdError(msg, self.entry_dir.name)

        snapshots[new_id] = snapshots.pop(old_id)
        self.save(metadata)
        logger.debug("Renamed snapshot %s to %s", old_id, new_id)

    def remove(self, snapshot_id: str) -> SnapshotRecord:
        """Drop a snapshot record.

        Returns:
            The removed record

        Raises:
            SnapshotNotFoundError: If the id is unknown

        """
        metadata = self.load()
        record = metadata["snapshots"].pop(snapshot_id, None)
        if record is None:
            msg = f"No snapshot '{snapshot_id}'"
            raise SnapshotNotFoundError(msg, self.entry_dir.name)
        self.save(metadata)
        logger.debug("Removed snapshot %s from metadata", snapshot_id)
        return record
