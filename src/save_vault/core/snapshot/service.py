"""SnapshotService for creating and managing entry snapshots.

This module provides the engine behind:
- Creating snapshots through staging and an atomic publish step
- Listing snapshots newest-first and describing them
- Restoring a snapshot over the live entry, after an automatic safety
  snapshot
- Renaming snapshots and deleting them outside the retention window

Methods block on filesystem I/O and expect the caller to hold the entry
lock; VaultService provides both the threading and the locking.
"""

from pathlib import Path
from typing import TYPE_CHECKING

from save_vault.constants import SNAPSHOT_TIMESTAMP_FORMAT
from save_vault.core.naming import make_snapshot_id, validate_snapshot_id
from save_vault.core.snapshot.metadata import SnapshotMetadata
from save_vault.core.snapshot.restore import restore_payload
from save_vault.core.snapshot.staging import (
    compute_digest,
    discard_payload,
    load_contents,
    publish_payload,
    purge_stale,
    stage_payload,
)
from save_vault.exceptions import ProtectedSnapshotError, SnapshotNotFoundError
from save_vault.logger import get_logger
from save_vault.types import SnapshotInfo, SnapshotRecord
from save_vault.utils.datetime_utils import (
    get_current_datetime_local,
    parse_iso_datetime,
)

if TYPE_CHECKING:
    from save_vault.core.registry import EntryRegistry
    from save_vault.types import GlobalConfig

logger = get_logger(__name__)


class SnapshotService:
    """Creates, lists, restores, renames and deletes snapshots."""

    def __init__(
        self,
        registry: "EntryRegistry",
        global_config: "GlobalConfig",
    ) -> None:
        """Initialize snapshot service with dependencies.

        Args:
            registry: Entry registry resolving names to roots
            global_config: Global configuration dictionary

        """
        self.registry = registry
        self.global_config = global_config

    @property
    def protected_snapshots(self) -> int:
        """Number of newest snapshots that cannot be deleted."""
        return self.global_config["protected_snapshots"]

    def _metadata(self, name: str) -> SnapshotMetadata:
        return SnapshotMetadata(self.registry.entry_dir(name))

    def backup(self, name: str, *, auto: bool = False) -> str:
        """Create a snapshot of the entry's root and auxiliary paths.

        Leftovers of interrupted backups are purged first. The payload is
        staged, published by rename, and becomes a snapshot only when its
        metadata record is saved.

        Args:
            name: Entry name
            auto: Mark the snapshot as taken automatically before a restore

        Returns:
            Identifier of the new snapshot

        Raises:
            NotFoundError: If no such entry exists
            InvalidPathError: If the entry root no longer exists
            IOFailureError: If copying or publishing fails

        """
        record = self.registry.get(name)
        metadata = self._metadata(name)
        document = metadata.load()

        purge_stale(
            metadata.snapshots_dir,
            {item["directory"] for item in document["snapshots"].values()},
        )

        created = get_current_datetime_local()
        staged = stage_payload(
            metadata.snapshots_dir,
            Path(record["root"]),
            record["files"],
            label=created.strftime(SNAPSHOT_TIMESTAMP_FORMAT),
        )
        snapshot_id = make_snapshot_id(
            created, staged.sha256, document["snapshots"], auto=auto
        )
        directory = publish_payload(
            staged, metadata.snapshots_dir, snapshot_id
        )

        try:
            metadata.add(
                snapshot_id,
                SnapshotRecord(
                    directory=directory,
                    created=created.isoformat(),
                    sequence=0,
                    sha256=staged.sha256,
                    size=staged.size,
                    files=staged.files,
                    auto=auto,
                ),
                document,
            )
        except Exception:
            discard_payload(metadata.snapshots_dir / directory)
            raise

        logger.info(
            "Snapshot created: %s/%s (%d files, %d bytes)",
            name,
            snapshot_id,
            staged.files,
            staged.size,
        )
        return snapshot_id

    def backups(self, name: str) -> list[str]:
        """List committed snapshot ids of an entry, newest first.

        Raises:
            NotFoundError: If no such entry exists

        """
        return self._metadata(name).list_ids()

    def snapshot_info(self, name: str) -> list[SnapshotInfo]:
        """Describe every snapshot of an entry, newest first.

        Raises:
            NotFoundError: If no such entry exists

        """
        document = self._metadata(name).load()
        ordered = SnapshotMetadata.ordered_ids(document)
        protected = self.protected_snapshots

        infos: list[SnapshotInfo] = []
        for rank, snapshot_id in enumerate(ordered):
            record = document["snapshots"][snapshot_id]
            infos.append(
                SnapshotInfo(
                    snapshot_id=snapshot_id,
                    created=parse_iso_datetime(record.get("created")),
                    sequence=record["sequence"],
                    size=record.get("size", 0),
                    files=record.get("files", 0),
                    sha256=record["sha256"],
                    auto=record.get("auto", False),
                    protected=rank < protected,
                )
            )
        return infos

    def restore(self, name: str, snapshot_id: str) -> str | None:
        """Overwrite the entry's live paths with a snapshot.

        When ``backup_before_restore`` is enabled the current state is
        captured first as an automatic snapshot, unless the root is gone.

        Returns:
            Identifier of the automatic safety snapshot, if one was taken

        Raises:
            NotFoundError: If no such entry exists
            SnapshotNotFoundError: If the snapshot does not exist
            ManifestError: If the snapshot's contents manifest is unreadable
            IOFailureError: If copying or swapping fails

        """
        root = self.registry.root(name)
        metadata = self._metadata(name)
        record = metadata.get(snapshot_id)
        payload_dir = metadata.payload_dir(record)
        contents = load_contents(payload_dir)

        safety_id: str | None = None
        if self.global_config["backup_before_restore"]:
            if root.is_dir():
                logger.info("Backing up current state of %s before restore", name)
                safety_id = self.backup(name, auto=True)
            else:
                logger.warning(
                    "Root %s is missing, restoring without a safety snapshot",
                    root,
                )

        restore_payload(payload_dir, contents, root)
        logger.info("Restored %s from snapshot %s", name, snapshot_id)
        return safety_id

    def rename(self, name: str, old_id: str, new_id: str) -> None:
        """Rename a snapshot.

        Renaming a snapshot to its own id is a no-op.

        Raises:
            NotFoundError: If no such entry exists
            SnapshotNotFoundError: If old_id does not exist
            InvalidSnapshotIdError: If new_id is malformed
            DuplicateSnapshotIdError: If new_id is already used

        """
        metadata = self._metadata(name)
        metadata.get(old_id)
        if old_id == new_id:
            return

        validate_snapshot_id(new_id)
        metadata.rename(old_id, new_id)
        logger.info("Renamed snapshot %s/%s to %s", name, old_id, new_id)

    def remove_one(self, name: str, snapshot_id: str) -> None:
        """Delete one snapshot outside the retention window.

        Snapshots are ranked newest-first by creation sequence; the first
        ``protected_snapshots`` of that ranking cannot be deleted.

        Raises:
            NotFoundError: If no such entry exists
            SnapshotNotFoundError: If the snapshot does not exist
            ProtectedSnapshotError: If the snapshot is inside the window

        """
        metadata = self._metadata(name)
        document = metadata.load()
        ordered = SnapshotMetadata.ordered_ids(document)
        if snapshot_id not in document["snapshots"]:
            msg = f"No snapshot '{snapshot_id}'"
            raise SnapshotNotFoundError(msg, name)

        rank = ordered.index(snapshot_id)
        if rank < self.protected_snapshots:
            msg = (
                f"Snapshot '{snapshot_id}' is one of the "
                f"{self.protected_snapshots} most recent and cannot be deleted"
            )
            raise ProtectedSnapshotError(msg, name)

        record = metadata.remove(snapshot_id)
        discard_payload(metadata.payload_dir(record))
        logger.info("Deleted snapshot %s/%s", name, snapshot_id)

    def verify(self, name: str, snapshot_id: str) -> bool:
        """Check a snapshot's payload against its recorded digest.

        Raises:
            NotFoundError: If no such entry exists
            SnapshotNotFoundError: If the snapshot does not exist

        """
        metadata = self._metadata(name)
        record = metadata.get(snapshot_id)
        payload_dir = metadata.payload_dir(record)
        if not payload_dir.is_dir():
            logger.error("Payload of %s/%s is missing", name, snapshot_id)
            return False

        actual, _, _ = compute_digest(payload_dir)
        is_valid = actual == record["sha256"]
        if not is_valid:
            logger.error(
                "Integrity check failed for %s/%s: expected %s, got %s",
                name,
                snapshot_id,
                record["sha256"],
                actual,
            )
        return is_valid
