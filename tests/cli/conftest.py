"""Fixtures for CLI tests."""

from unittest.mock import MagicMock

import pytest

from save_vault.cli.runner import CLIRunner
from save_vault.core.vault import VaultService
from save_vault.types import GlobalConfig


@pytest.fixture
def vault(global_config: GlobalConfig) -> VaultService:
    """VaultService on the temporary store."""
    return VaultService(global_config)


@pytest.fixture
def runner(vault: VaultService) -> CLIRunner:
    """CLIRunner wired to the temporary store."""
    return CLIRunner(config_manager=MagicMock(), vault=vault)
