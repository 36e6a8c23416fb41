"""INI parser utilities for save-vault configuration.

Helpers for parsing the settings file with support for inline comments
and user-friendly documentation.
"""

import configparser
from datetime import UTC, datetime

from save_vault.constants import (
    GLOBAL_CONFIG_VERSION,
    ISO_DATETIME_FORMAT,
    KEY_CONFIG_VERSION,
    SECTION_DEFAULT,
    SECTION_DIRECTORY,
)

_TRUE_VALUES = frozenset({"1", "yes", "true", "on"})
_FALSE_VALUES = frozenset({"0", "no", "false", "off"})


def _strip_inline_comment(value: str) -> str:
    """Strip inline comments from configuration values.

    Args:
        value: Configuration value that may contain inline comment

    Returns:
        Value with inline comment removed (anything after '  #')

    """
    if "  #" in value:
        return value.split("  #")[0].strip()
    return value


def parse_bool(value: str | bool, default: bool) -> bool:  # noqa: FBT001
    """Parse an INI boolean, falling back to default on unknown text."""
    if isinstance(value, bool):
        return value
    lowered = _strip_inline_comment(value).strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return default


def create_parser() -> configparser.ConfigParser:
    """Create a ConfigParser with the options used for settings files."""
    return configparser.ConfigParser(
        inline_comment_prefixes=("#", ";"),
        interpolation=None,
    )


class ConfigCommentManager:
    """Manages configuration file comments for user-friendly documentation."""

    @staticmethod
    def get_file_header() -> str:
        """Generate file header comment with description and timestamp."""
        timestamp = datetime.now(tz=UTC).strftime(ISO_DATETIME_FORMAT)
        return f"""# save-vault Configuration
# This file contains settings for the save-vault snapshot manager.
# You can modify these values to customize the behavior of the application.
#
# Last updated: {timestamp}
# Configuration version: {GLOBAL_CONFIG_VERSION}

"""

    @staticmethod
    def get_section_comments() -> dict[str, str]:
        """Get comments for each configuration section."""
        return {
            SECTION_DEFAULT: """# ========================================
# MAIN CONFIGURATION
# ========================================
# config_version: Version of configuration format (DO NOT EDIT)
# protected_snapshots: Newest snapshots per entry that cannot be deleted
# backup_before_restore: Snapshot current state before every restore
# case_sensitive_paths: Compare paths and names case-sensitively
#   (set to false for case-insensitive filesystems)
# log_level: Detail level for log files (DEBUG, INFO, WARNING, ERROR)
# console_log_level: Console output detail level (DEBUG, INFO, etc.)

""",
            SECTION_DIRECTORY: """
# ========================================
# DIRECTORY PATHS
# ========================================
# Use absolute paths or paths starting with ~ for home directory.
#
# storage: Root of the snapshot store (registry and all snapshots)
# logs: Log files location

""",
        }

    @staticmethod
    def get_key_comments() -> dict[str, dict[str, str]]:
        """Get inline comments for specific configuration keys."""
        return {
            SECTION_DEFAULT: {
                KEY_CONFIG_VERSION: "# DO NOT MODIFY - Config format version",
            },
            SECTION_DIRECTORY: {},
        }
