"""Entry command coordinators: add, list, remove and root."""

import asyncio
from argparse import Namespace

from save_vault.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class AddHandler(BaseCommandHandler):
    """Track a directory as a new entry."""

    operation = "Add"
    mutates = True

    async def execute(self, args: Namespace) -> None:
        """Execute the add command."""
        self._ensure_directories()
        name = await self.vault.add(args.path)
        logger.info("✅ Tracking %s as '%s'", args.path, name)


class ListHandler(BaseCommandHandler):
    """List tracked entries."""

    operation = "List"

    async def execute(self, args: Namespace) -> None:
        """Execute the list command."""
        names = await self.vault.list_entries()
        if not names:
            logger.info("No entries tracked yet. Use 'add PATH' to start.")
            return
        for name in names:
            logger.info(name)


class RemoveHandler(BaseCommandHandler):
    """Delete an entry together with all of its snapshots."""

    operation = "Remove"
    mutates = True

    async def execute(self, args: Namespace) -> None:
        """Execute the remove command, asking first unless --yes."""
        if not args.yes and not await self._confirm(args.name):
            logger.info("Cancelled, nothing was removed")
            return

        await self.vault.remove(args.name)
        logger.info("✅ Removed %s and all of its snapshots", args.name)

    async def _confirm(self, name: str) -> bool:
        prompt = (
            f"Remove '{name}' and permanently delete all of its snapshots? "
            "[y/N] "
        )
        try:
            answer = await asyncio.to_thread(input, prompt)
        except EOFError:
            return False
        return answer.strip().lower() in ("y", "yes")


class RootHandler(BaseCommandHandler):
    """Show the configured root storage directory."""

    operation = "Root"

    async def execute(self, args: Namespace) -> None:
        """Execute the root command."""
        logger.info(str(self.vault.root()))
