"""Configuration management - settings, paths and manifest schemas.

This package provides:
- ConfigManager: Unified facade for configuration operations
- GlobalConfigManager: INI configuration management
- Paths: Path constants and utilities
"""

from save_vault.config.config import ConfigManager
from save_vault.config.global_config import GlobalConfigManager
from save_vault.config.parser import ConfigCommentManager
from save_vault.config.paths import Paths
from save_vault.types import GlobalConfig

__all__ = [
    "ConfigCommentManager",
    "ConfigManager",
    "GlobalConfig",
    "GlobalConfigManager",
    "Paths",
]
