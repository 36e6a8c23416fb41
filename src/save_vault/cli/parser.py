"""CLI argument parser for save-vault.

Handles parsing of command-line arguments and provides a clean
interface for defining CLI commands and their options.
"""

import argparse
from argparse import Namespace
from collections.abc import Sequence

from save_vault.types import GlobalConfig


class CLIParser:
    """Command-line argument parser for save-vault."""

    def __init__(self, global_config: GlobalConfig) -> None:
        """Initialize the CLI parser with global configuration.

        Args:
            global_config: Global configuration dictionary, used for help
                text defaults.

        """
        self.global_config = global_config

    def parse_args(self, argv: Sequence[str] | None = None) -> Namespace:
        """Parse command-line arguments.

        Args:
            argv: Arguments to parse; defaults to sys.argv[1:].

        Returns:
            Namespace: Parsed arguments namespace.

        """
        parser = self.create_parser()
        return parser.parse_args(argv)

    def create_parser(self) -> argparse.ArgumentParser:
        """Build the full parser with global options and subcommands."""
        parser = self._create_main_parser()
        self._add_global_options(parser)
        self._add_subcommands(parser)
        return parser

    def _create_main_parser(self) -> argparse.ArgumentParser:
        return argparse.ArgumentParser(
            prog="save-vault",
            description="save-vault: versioned local snapshots of directories",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Track a directory and attach extra files
  %(prog)s add ~/games/project
  %(prog)s add-files project ~/.config/project/settings.ini

  # Take and inspect snapshots
  %(prog)s backup project
  %(prog)s backups project --info

  # Restore, rename and prune
  %(prog)s restore project 20260101_120000_1a2b3c4d
  %(prog)s rename project 20260101_120000_1a2b3c4d before-boss-fight
  %(prog)s remove-one project 20251201_080000_9f8e7d6c
            """,
        )

    def _add_global_options(self, parser: argparse.ArgumentParser) -> None:
        """Add global options to the main parser.

        Args:
            parser: The main parser to add options to.

        """
        parser.add_argument(
            "--version",
            action="store_true",
            help="Show save-vault version and exit",
        )
        parser.add_argument(
            "--verbose",
            action="store_true",
            help="Show debug output on the console",
        )

    def _add_subcommands(self, parser: argparse.ArgumentParser) -> None:
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands"
        )

        self._add_entry_commands(subparsers)
        self._add_file_commands(subparsers)
        self._add_snapshot_commands(subparsers)

        subparsers.add_parser("root", help="Show the root storage directory")

    def _add_entry_commands(self, subparsers) -> None:
        """Add commands managing tracked entries."""
        add_parser = subparsers.add_parser(
            "add", help="Track a directory as a new entry"
        )
        add_parser.add_argument(
            "path", help="Directory to track; its name becomes the entry name"
        )

        subparsers.add_parser("list", help="List tracked entries")

        remove_parser = subparsers.add_parser(
            "remove", help="Stop tracking an entry and delete its snapshots"
        )
        remove_parser.add_argument("name", help="Entry name")
        remove_parser.add_argument(
            "-y",
            "--yes",
            action="store_true",
            help="Do not ask for confirmation",
        )

    def _add_file_commands(self, subparsers) -> None:
        """Add commands managing auxiliary paths."""
        files_parser = subparsers.add_parser(
            "files", help="List auxiliary paths of an entry"
        )
        files_parser.add_argument("name", help="Entry name")

        add_files_parser = subparsers.add_parser(
            "add-files", help="Attach files or directories to an entry"
        )
        add_files_parser.add_argument("name", help="Entry name")
        add_files_parser.add_argument(
            "paths", nargs="+", help="Files or directories to attach"
        )

        remove_file_parser = subparsers.add_parser(
            "remove-file", help="Detach one auxiliary path from an entry"
        )
        remove_file_parser.add_argument("name", help="Entry name")
        remove_file_parser.add_argument("path", help="Path to detach")

    def _add_snapshot_commands(self, subparsers) -> None:
        """Add commands managing snapshots."""
        protected = self.global_config["protected_snapshots"]

        backup_parser = subparsers.add_parser(
            "backup", help="Create a snapshot of an entry"
        )
        backup_parser.add_argument("name", help="Entry name")

        backups_parser = subparsers.add_parser(
            "backups", help="List snapshots of an entry, newest first"
        )
        backups_parser.add_argument("name", help="Entry name")
        backups_parser.add_argument(
            "--info",
            action="store_true",
            help="Show size, file count and protection of each snapshot",
        )

        restore_parser = subparsers.add_parser(
            "restore", help="Overwrite an entry with one of its snapshots"
        )
        restore_parser.add_argument("name", help="Entry name")
        restore_parser.add_argument("snapshot_id", help="Snapshot to restore")

        rename_parser = subparsers.add_parser(
            "rename", help="Rename a snapshot"
        )
        rename_parser.add_argument("name", help="Entry name")
        rename_parser.add_argument("old_id", help="Current snapshot id")
        rename_parser.add_argument("new_id", help="New snapshot id")

        remove_one_parser = subparsers.add_parser(
            "remove-one",
            help=(
                f"Delete one snapshot (the {protected} newest are protected)"
            ),
        )
        remove_one_parser.add_argument("name", help="Entry name")
        remove_one_parser.add_argument("snapshot_id", help="Snapshot to delete")

        verify_parser = subparsers.add_parser(
            "verify", help="Check a snapshot against its recorded digest"
        )
        verify_parser.add_argument("name", help="Entry name")
        verify_parser.add_argument("snapshot_id", help="Snapshot to verify")
