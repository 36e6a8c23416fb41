"""Snapshot command coordinators.

Thin coordinators that delegate to VaultService and display results.
"""

from argparse import Namespace

from save_vault.logger import get_logger
from save_vault.types import SnapshotInfo

from .base import BaseCommandHandler

logger = get_logger(__name__)


class BackupHandler(BaseCommandHandler):
    """Create a snapshot of an entry."""

    operation = "Backup"
    mutates = True

    async def execute(self, args: Namespace) -> None:
        """Execute the backup command."""
        self._ensure_directories()
        logger.info("Creating snapshot of %s...", args.name)
        snapshot_id = await self.vault.backup(args.name)
        logger.info("✅ Snapshot created: %s", snapshot_id)


class BackupsHandler(BaseCommandHandler):
    """List snapshots of an entry, newest first."""

    operation = "Backups"

    async def execute(self, args: Namespace) -> None:
        """Execute the backups command."""
        if args.info:
            await self._show_info(args.name)
            return

        snapshot_ids = await self.vault.backups(args.name)
        if not snapshot_ids:
            logger.info("No snapshots found for %s", args.name)
            return
        for snapshot_id in snapshot_ids:
            logger.info(snapshot_id)

    async def _show_info(self, name: str) -> None:
        """Show details of every snapshot."""
        infos = await self.vault.snapshot_info(name)
        if not infos:
            logger.info("No snapshots found for %s", name)
            return

        logger.info("\nSnapshots of %s (newest first):", name)
        logger.info("=" * 60)
        for info in infos:
            self._show_snapshot(info)

        total_size_mb = sum(info.size for info in infos) / (1024 * 1024)
        logger.info("  📦 Total snapshots: %s", len(infos))
        logger.info("  📏 Total size: %.1f MB", total_size_mb)
        logger.info(
            "  🔒 Newest %s are protected from deletion",
            self.global_config["protected_snapshots"],
        )

    def _show_snapshot(self, info: SnapshotInfo) -> None:
        created = (
            info.created.strftime("%Y-%m-%d %H:%M:%S")
            if info.created
            else "Unknown"
        )
        symbol = "🔒" if info.protected else "  "
        label = " (auto)" if info.auto else ""
        logger.info("  %s %s%s", symbol, info.snapshot_id, label)
        logger.info("     Created: %s", created)
        logger.info(
            "     Size: %.1f MB in %s files", info.size / (1024 * 1024), info.files
        )
        logger.info("     SHA256: %s...", info.sha256[:16])
        logger.info("")


class RestoreHandler(BaseCommandHandler):
    """Overwrite an entry with one of its snapshots."""

    operation = "Restore"
    mutates = True

    async def execute(self, args: Namespace) -> None:
        """Execute the restore command."""
        logger.info("🔄 Restoring %s from %s...", args.name, args.snapshot_id)
        safety_id = await self.vault.restore(args.name, args.snapshot_id)
        if safety_id:
            logger.info("Previous state saved as %s", safety_id)
        logger.info("✅ Restored %s from %s", args.name, args.snapshot_id)


class RenameHandler(BaseCommandHandler):
    """Rename a snapshot."""

    operation = "Rename"
    mutates = True

    async def execute(self, args: Namespace) -> None:
        """Execute the rename command."""
        await self.vault.rename(args.name, args.old_id, args.new_id)
        logger.info("✅ Renamed %s to %s", args.old_id, args.new_id)


class RemoveOneHandler(BaseCommandHandler):
    """Delete one snapshot outside the retention window."""

    operation = "RemoveOne"
    mutates = True

    async def execute(self, args: Namespace) -> None:
        """Execute the remove-one command."""
        await self.vault.remove_one(args.name, args.snapshot_id)
        logger.info("✅ Deleted snapshot %s", args.snapshot_id)


class VerifyHandler(BaseCommandHandler):
    """Check a snapshot against its recorded digest."""

    operation = "Verify"

    async def execute(self, args: Namespace) -> None:
        """Execute the verify command.

        Raises:
            SystemExit: With status 1 when the snapshot does not match

        """
        if await self.vault.verify(args.name, args.snapshot_id):
            logger.info("✅ Snapshot %s is intact", args.snapshot_id)
            return
        logger.error("❌ Snapshot %s does not match its digest", args.snapshot_id)
        raise SystemExit(1)
