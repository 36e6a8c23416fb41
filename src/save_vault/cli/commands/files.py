"""Auxiliary path command coordinators: files, add-files, remove-file."""

from argparse import Namespace

from save_vault.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class FilesHandler(BaseCommandHandler):
    """List auxiliary paths of an entry."""

    operation = "Files"

    async def execute(self, args: Namespace) -> None:
        """Execute the files command."""
        paths = await self.vault.files(args.name)
        if not paths:
            logger.info("No extra files attached to %s", args.name)
            return
        for path in paths:
            logger.info(path)


class AddFilesHandler(BaseCommandHandler):
    """Attach files or directories to an entry."""

    operation = "AddFiles"
    mutates = True

    async def execute(self, args: Namespace) -> None:
        """Execute the add-files command."""
        added = await self.vault.add_files(args.name, args.paths)
        if not added:
            logger.info("All given paths are already attached to %s", args.name)
            return
        for path in added:
            logger.info("✅ Attached %s", path)


class RemoveFileHandler(BaseCommandHandler):
    """Detach one auxiliary path from an entry."""

    operation = "RemoveFile"
    mutates = True

    async def execute(self, args: Namespace) -> None:
        """Execute the remove-file command."""
        removed = await self.vault.remove_file(args.name, args.path)
        logger.info("✅ Detached %s from %s", removed, args.name)
