"""Centralized constants module for save-vault.

This module serves as the single source of truth for all shared constants
across the save-vault codebase. Constants are organized by logical categories
and use typing.Final annotations to ensure immutability.

Usage:
    from save_vault.constants import GLOBAL_CONFIG_VERSION
"""

from typing import Final

# =============================================================================
# Configuration Constants
# =============================================================================

# Configuration version - single source of truth for config versioning
GLOBAL_CONFIG_VERSION: Final[str] = "1.0.0"

# Configuration directory and file names
CONFIG_FILE_NAME: Final[str] = "settings.conf"
CONFIG_DIR_NAME: Final[str] = ".config"
DEFAULT_CONFIG_SUBDIR: Final[str] = "save-vault"
DEFAULT_STORAGE_DIR_NAME: Final[str] = "save-vault"

# Environment overrides (used by tests and packaged deployments)
ENV_CONFIG_DIR: Final[str] = "SAVE_VAULT_CONFIG_DIR"
ENV_LOG_DIR: Final[str] = "SAVE_VAULT_LOG_DIR"

# Configuration defaults
DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_CONSOLE_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_PROTECTED_SNAPSHOTS: Final[int] = 10
DEFAULT_BACKUP_BEFORE_RESTORE: Final[bool] = True
DEFAULT_CASE_SENSITIVE_PATHS: Final[bool] = True

# Date/time formats used in config headers and saved timestamps
ISO_DATETIME_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Config section and key names
SECTION_DEFAULT: Final[str] = "DEFAULT"
SECTION_DIRECTORY: Final[str] = "directory"

KEY_CONFIG_VERSION: Final[str] = "config_version"
KEY_PROTECTED_SNAPSHOTS: Final[str] = "protected_snapshots"
KEY_BACKUP_BEFORE_RESTORE: Final[str] = "backup_before_restore"
KEY_CASE_SENSITIVE_PATHS: Final[str] = "case_sensitive_paths"
KEY_LOG_LEVEL: Final[str] = "log_level"
KEY_CONSOLE_LOG_LEVEL: Final[str] = "console_log_level"
KEY_STORAGE: Final[str] = "storage"
KEY_LOGS: Final[str] = "logs"

# Known directory keys expected in the directory section
DIRECTORY_KEYS: Final[tuple[str, ...]] = (KEY_STORAGE, KEY_LOGS)

# =============================================================================
# Configuration migration constants
# =============================================================================

CONFIG_BACKUP_TIMESTAMP_FORMAT: Final[str] = "%Y%m%d_%H%M%S"
CONFIG_BACKUP_SUFFIX_TEMPLATE: Final[str] = ".{timestamp}.backup"
CONFIG_FALLBACK_OLD_VERSION: Final[str] = "0.0.0"

# =============================================================================
# Logging Constants
# =============================================================================

LOG_FILE_NAME: Final[str] = "save-vault.log"
LOG_ROTATION_THRESHOLD_BYTES: Final[int] = 1024 * 1024  # 1 MB
LOG_BACKUP_COUNT: Final[int] = 3

LOG_CONSOLE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
LOG_CONSOLE_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOG_FILE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "%(funcName)s:%(lineno)d - %(message)s"
)
LOG_FILE_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": "\033[0m",
}

# =============================================================================
# Store layout constants
# =============================================================================

REGISTRY_FILENAME: Final[str] = "registry.json"
REGISTRY_FORMAT_VERSION: Final[int] = 1
LOCKFILE_NAME: Final[str] = ".save-vault.lock"

ENTRIES_DIR_NAME: Final[str] = "entries"
SNAPSHOTS_DIR_NAME: Final[str] = "snapshots"

SNAPSHOT_METADATA_FILENAME: Final[str] = "metadata.json"
SNAPSHOT_CONTENTS_FILENAME: Final[str] = "contents.json"
SNAPSHOT_ROOT_DIR_NAME: Final[str] = "root"
SNAPSHOT_FILES_DIR_NAME: Final[str] = "files"

# Temporary artifacts are hidden (leading dot) and carry these suffixes
STAGING_SUFFIX: Final[str] = ".tmp"
RESTORE_STAGING_SUFFIX: Final[str] = ".restore"
RESTORE_DISPLACED_SUFFIX: Final[str] = ".old"
REMOVAL_SUFFIX: Final[str] = ".removing"
JSON_TMP_PREFIX: Final[str] = "."
JSON_TMP_SUFFIX: Final[str] = ".tmp"
METADATA_CORRUPTED_SUFFIX: Final[str] = ".json.corrupted"

# =============================================================================
# Snapshot naming constants
# =============================================================================

SNAPSHOT_TIMESTAMP_FORMAT: Final[str] = "%Y%m%d_%H%M%S"
SNAPSHOT_DIGEST_LENGTH: Final[int] = 8
SNAPSHOT_AUTO_SUFFIX: Final[str] = "_auto"
SNAPSHOT_ID_MAX_LENGTH: Final[int] = 200
SNAPSHOT_ID_FORBIDDEN_CHARS: Final[tuple[str, ...]] = ("/", "\\", "\x00")

# Chunk size used for hashing payload files
HASH_CHUNK_SIZE: Final[int] = 64 * 1024
