"""VaultService: the request/response surface of the snapshot store.

Every call is independent. Blocking filesystem work runs in worker threads
so a long copy for one entry never stalls operations on another, while
operations naming the same entry are serialized by a per-entry lock.
"""

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

from save_vault.core.files import FileSetManager
from save_vault.core.locking import EntryLocks
from save_vault.core.naming import derive_entry_name, resolve_path
from save_vault.core.registry import EntryRegistry
from save_vault.core.snapshot import SnapshotService
from save_vault.logger import get_logger
from save_vault.types import SnapshotInfo

if TYPE_CHECKING:
    from save_vault.config.config import ConfigManager
    from save_vault.types import GlobalConfig

logger = get_logger(__name__)


class VaultService:
    """Async facade over the registry, file sets and snapshot engine."""

    def __init__(self, global_config: "GlobalConfig") -> None:
        """Initialize the service for the configured store.

        Args:
            global_config: Global configuration dictionary

        """
        self.global_config = global_config
        case_sensitive = global_config["case_sensitive_paths"]
        self.registry = EntryRegistry(
            self.root(), case_sensitive=case_sensitive
        )
        self.file_sets = FileSetManager(self.registry)
        self.snapshots = SnapshotService(self.registry, global_config)
        self.locks = EntryLocks(case_sensitive=case_sensitive)

    @classmethod
    def create_default(
        cls, config_manager: "ConfigManager | None" = None
    ) -> "VaultService":
        """Create VaultService from the settings file.

        Args:
            config_manager: Optional configuration manager
                (creates new if None)

        Returns:
            Configured VaultService instance

        """
        if config_manager is None:
            # Import here to avoid circular dependency
            from save_vault.config.config import ConfigManager  # noqa: PLC0415

            config_manager = ConfigManager()

        return cls(config_manager.load_global_config())

    def root(self) -> Path:
        """Get the root storage directory of the store."""
        return Path(self.global_config["directory"]["storage"])

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    async def add(self, path: str | Path) -> str:
        """Register a directory as a new entry and return its name."""
        name = derive_entry_name(resolve_path(path))
        async with self.locks.hold(name):
            return await asyncio.to_thread(self.registry.add, path)

    async def list_entries(self) -> list[str]:
        """List entry names in lexical order."""
        return await asyncio.to_thread(self.registry.list_names)

    async def remove(self, name: str) -> None:
        """Delete an entry and all of its snapshots."""
        async with self.locks.hold(name):
            await asyncio.to_thread(self.registry.remove, name)

    # ------------------------------------------------------------------
    # Auxiliary paths
    # ------------------------------------------------------------------

    async def files(self, name: str) -> list[str]:
        """List an entry's auxiliary paths in insertion order."""
        return await asyncio.to_thread(self.file_sets.files, name)

    async def add_files(
        self, name: str, paths: list[str | Path]
    ) -> list[str]:
        """Attach paths to an entry; all or nothing."""
        async with self.locks.hold(name):
            return await asyncio.to_thread(
                self.file_sets.add_files, name, paths
            )

    async def remove_file(self, name: str, path: str | Path) -> str:
        """Detach one auxiliary path from an entry."""
        async with self.locks.hold(name):
            return await asyncio.to_thread(
                self.file_sets.remove_file, name, path
            )

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    async def backup(self, name: str) -> str:
        """Create a snapshot and return its identifier."""
        async with self.locks.hold(name):
            return await asyncio.to_thread(self.snapshots.backup, name)

    async def backups(self, name: str) -> list[str]:
        """List snapshot identifiers newest first."""
        async with self.locks.hold(name):
            return await asyncio.to_thread(self.snapshots.backups, name)

    async def snapshot_info(self, name: str) -> list[SnapshotInfo]:
        """Describe snapshots newest first."""
        async with self.locks.hold(name):
            return await asyncio.to_thread(self.snapshots.snapshot_info, name)

    async def restore(self, name: str, snapshot_id: str) -> str | None:
        """Restore a snapshot; returns the safety snapshot id if taken."""
        async with self.locks.hold(name):
            return await asyncio.to_thread(
                self.snapshots.restore, name, snapshot_id
            )

    async def rename(self, name: str, old_id: str, new_id: str) -> None:
        """Rename a snapshot."""
        async with self.locks.hold(name):
            await asyncio.to_thread(
                self.snapshots.rename, name, old_id, new_id
            )

    async def remove_one(self, name: str, snapshot_id: str) -> None:
        """Delete one snapshot outside the retention window."""
        async with self.locks.hold(name):
            await asyncio.to_thread(
                self.snapshots.remove_one, name, snapshot_id
            )

    async def verify(self, name: str, snapshot_id: str) -> bool:
        """Check a snapshot's payload against its recorded digest."""
        async with self.locks.hold(name):
            return await asyncio.to_thread(
                self.snapshots.verify, name, snapshot_id
            )
