"""Shared fixtures for config module tests."""

from pathlib import Path

import pytest

from save_vault.config import ConfigManager


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Provide a temporary config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def config_manager(config_dir: Path) -> ConfigManager:
    """ConfigManager instance using the temporary config directory."""
    return ConfigManager(config_dir)
