"""CLI runner for save-vault.

Orchestrates the execution of CLI commands by routing parsed
arguments to the appropriate command handlers.
"""

import sys
from argparse import Namespace
from collections.abc import Sequence

from save_vault import __version__
from save_vault.config import ConfigManager
from save_vault.config.paths import Paths
from save_vault.core.locking import LockManager
from save_vault.core.vault import VaultService
from save_vault.exceptions import SaveVaultError
from save_vault.logger import (
    get_logger,
    set_console_level,
    update_logger_from_config,
)

from .commands import (
    AddFilesHandler,
    AddHandler,
    BackupHandler,
    BackupsHandler,
    BaseCommandHandler,
    FilesHandler,
    ListHandler,
    RemoveFileHandler,
    RemoveHandler,
    RemoveOneHandler,
    RenameHandler,
    RestoreHandler,
    RootHandler,
    VerifyHandler,
)
from .parser import CLIParser

logger = get_logger(__name__)


class CLIRunner:
    """CLI command runner and orchestrator."""

    def __init__(
        self,
        config_manager: ConfigManager | None = None,
        vault: VaultService | None = None,
    ) -> None:
        """Initialize CLI runner with shared dependencies.

        Args:
            config_manager: Optional configuration manager
                (creates new if None)
            vault: Optional vault service (built from the settings if None)

        """
        self.config_manager = config_manager or ConfigManager()
        self.vault = vault or VaultService.create_default(self.config_manager)
        self.global_config = self.vault.global_config

        update_logger_from_config()
        self._init_command_handlers()

    def _init_command_handlers(self) -> None:
        """Initialize all command handlers with shared dependencies."""
        handler_types: dict[str, type[BaseCommandHandler]] = {
            "add": AddHandler,
            "list": ListHandler,
            "remove": RemoveHandler,
            "files": FilesHandler,
            "add-files": AddFilesHandler,
            "remove-file": RemoveFileHandler,
            "backup": BackupHandler,
            "backups": BackupsHandler,
            "restore": RestoreHandler,
            "rename": RenameHandler,
            "remove-one": RemoveOneHandler,
            "verify": VerifyHandler,
            "root": RootHandler,
        }
        self.command_handlers: dict[str, BaseCommandHandler] = {
            command: handler_type(self.config_manager, self.vault)
            for command, handler_type in handler_types.items()
        }

    async def run(self, argv: Sequence[str] | None = None) -> None:
        """Run the CLI application.

        Parses arguments, handles global flags, validates commands,
        and routes to the appropriate handler.

        Args:
            argv: Arguments to parse; defaults to sys.argv[1:].

        """
        parser = CLIParser(self.global_config)
        args = parser.parse_args(argv)

        if getattr(args, "version", False):
            print(__version__)
            return

        if not args.command:
            print("❌ No command specified. Use --help.")
            sys.exit(1)

        if args.verbose:
            set_console_level("DEBUG")

        await self._execute_command(args)

    async def _execute_command(self, args: Namespace) -> None:
        """Execute the specified command with the appropriate handler.

        Every failure is reported as "<Operation>: <cause>" and ends the
        process with status 1.

        Args:
            args: Parsed command-line arguments namespace.

        """
        handler = self.command_handlers.get(args.command)
        if handler is None:
            print(f"❌ Unknown command: {args.command}")
            sys.exit(1)

        try:
            if handler.mutates:
                lock_path = Paths.lock_file(self.vault.root())
                async with LockManager(lock_path):
                    await handler.execute(args)
            else:
                await handler.execute(args)
        except SaveVaultError as e:
            logger.error("❌ %s: %s", handler.operation, e)
            sys.exit(1)
        except KeyboardInterrupt:
            logger.info("\n⏹️  %s cancelled by user", handler.operation)
            sys.exit(1)
        except (OSError, ValueError) as e:
            logger.error("❌ %s: Unexpected error: %s", handler.operation, e)
            sys.exit(1)
