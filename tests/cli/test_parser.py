"""Tests for the CLI argument parser."""

import pytest

from save_vault.cli.parser import CLIParser
from save_vault.types import GlobalConfig


@pytest.fixture
def parser(global_config: GlobalConfig) -> CLIParser:
    return CLIParser(global_config)


def test_add_command(parser: CLIParser) -> None:
    """Test parsing the add command."""
    args = parser.parse_args(["add", "~/games/project"])
    assert args.command == "add"
    assert args.path == "~/games/project"


def test_add_files_takes_many_paths(parser: CLIParser) -> None:
    """Test add-files collects every remaining argument."""
    args = parser.parse_args(["add-files", "project", "/a", "/b", "/c"])
    assert args.name == "project"
    assert args.paths == ["/a", "/b", "/c"]


def test_add_files_requires_a_path(parser: CLIParser) -> None:
    """Test add-files without paths is a usage error."""
    with pytest.raises(SystemExit):
        parser.parse_args(["add-files", "project"])


def test_remove_yes_flag(parser: CLIParser) -> None:
    """Test the confirmation bypass flag."""
    assert parser.parse_args(["remove", "project"]).yes is False
    assert parser.parse_args(["remove", "project", "-y"]).yes is True


def test_snapshot_commands(parser: CLIParser) -> None:
    """Test snapshot subcommands and their argument names."""
    args = parser.parse_args(["restore", "project", "20260101_120000_abcd1234"])
    assert args.snapshot_id == "20260101_120000_abcd1234"

    args = parser.parse_args(["rename", "project", "old", "new"])
    assert (args.old_id, args.new_id) == ("old", "new")

    args = parser.parse_args(["backups", "project", "--info"])
    assert args.info is True

    args = parser.parse_args(["remove-one", "project", "snap"])
    assert args.command == "remove-one"


def test_global_flags(parser: CLIParser) -> None:
    """Test global flags without a command."""
    args = parser.parse_args(["--version"])
    assert args.version is True
    assert args.command is None

    args = parser.parse_args(["--verbose", "list"])
    assert args.verbose is True
    assert args.command == "list"


def test_help_mentions_retention(global_config: GlobalConfig) -> None:
    """Test the remove-one help shows the configured retention window."""
    global_config["protected_snapshots"] = 4
    help_text = CLIParser(global_config).create_parser().format_help()
    assert "remove-one" in help_text
    assert "4 newest are protected" in help_text
