"""Path constants and utilities for save-vault configuration.

This module centralizes path management for the application, making it
easy to reference and override paths consistently.
"""

import os
from pathlib import Path

from save_vault.constants import (
    CONFIG_DIR_NAME,
    CONFIG_FILE_NAME,
    DEFAULT_CONFIG_SUBDIR,
    DEFAULT_STORAGE_DIR_NAME,
    ENTRIES_DIR_NAME,
    ENV_CONFIG_DIR,
    LOCKFILE_NAME,
    REGISTRY_FILENAME,
)


class Paths:
    """Application paths and directory structure."""

    HOME_DIR = Path.home()
    DEFAULT_CONFIG_DIR = HOME_DIR / CONFIG_DIR_NAME / DEFAULT_CONFIG_SUBDIR
    DEFAULT_STORAGE_DIR = HOME_DIR / DEFAULT_STORAGE_DIR_NAME

    @classmethod
    def config_dir(cls) -> Path:
        """Get the configuration directory.

        Honors the SAVE_VAULT_CONFIG_DIR environment variable.
        """
        env_dir = os.getenv(ENV_CONFIG_DIR)
        if env_dir:
            return cls.expand_path(env_dir)
        return cls.DEFAULT_CONFIG_DIR

    @classmethod
    def settings_file(cls, config_dir: Path | None = None) -> Path:
        """Get path to the INI settings file."""
        return (config_dir or cls.config_dir()) / CONFIG_FILE_NAME

    @classmethod
    def logs_dir(cls, config_dir: Path | None = None) -> Path:
        """Get default log directory."""
        return (config_dir or cls.config_dir()) / "logs"

    @staticmethod
    def registry_file(storage_dir: Path) -> Path:
        """Get path to the registry manifest inside a store."""
        return storage_dir / REGISTRY_FILENAME

    @staticmethod
    def lock_file(storage_dir: Path) -> Path:
        """Get path to the process lock file inside a store."""
        return storage_dir / LOCKFILE_NAME

    @staticmethod
    def entries_dir(storage_dir: Path) -> Path:
        """Get the directory holding per-entry snapshot stores."""
        return storage_dir / ENTRIES_DIR_NAME

    @classmethod
    def entry_dir(cls, storage_dir: Path, name: str) -> Path:
        """Get the snapshot store directory for one entry."""
        return cls.entries_dir(storage_dir) / name

    @classmethod
    def expand_path(cls, path_str: str | Path) -> Path:
        """Expand and resolve path with ~ and relative path support.

        Example:
            >>> Paths.expand_path("~/Documents")
            Path('/home/user/Documents')

        """
        return Path(path_str).expanduser().resolve(strict=False)
