"""Configuration management for save-vault.

Lightweight facade over the specialized modules:
- global_config.py: GlobalConfigManager for INI configuration
- migration.py: settings file migration
- paths.py: Path constants and utilities
- schemas/: JSON schema validation of on-disk manifests
"""

import logging
from pathlib import Path

from save_vault.config.global_config import GlobalConfigManager
from save_vault.config.paths import Paths
from save_vault.types import GlobalConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """Facade that coordinates configuration access."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize configuration manager.

        Args:
            config_dir: Optional custom config directory.
                Defaults to Paths.config_dir()

        """
        self._config_dir = config_dir or Paths.config_dir()
        self.global_config_manager = GlobalConfigManager(self._config_dir)

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory path."""
        return self._config_dir

    @property
    def settings_file(self) -> Path:
        """Get the settings file path."""
        return self.global_config_manager.settings_file

    def ensure_directories_from_config(self, config: GlobalConfig) -> None:
        """Ensure all directories from config exist.

        Raises:
            ValueError: If a configured path is a file

        """
        for key, directory in config["directory"].items():
            if directory.exists() and not directory.is_dir():
                msg = (
                    f"Configured {key} path '{directory}' is a file, "
                    "not a directory"
                )
                raise ValueError(msg)
            directory.mkdir(parents=True, exist_ok=True)

    def load_global_config(self) -> GlobalConfig:
        """Load global configuration from INI file."""
        return self.global_config_manager.load_global_config()

    def save_global_config(self, config: GlobalConfig) -> None:
        """Save global configuration to INI file."""
        self.global_config_manager.save_global_config(config)

    def storage_root(self) -> Path:
        """Get the configured root storage directory (read-only)."""
        return self.load_global_config()["directory"]["storage"]
