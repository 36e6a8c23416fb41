"""Pytest configuration and fixtures for save-vault tests."""

import logging
import os
import tempfile
from pathlib import Path

# Keep test runs away from the user's real settings and log files. This has
# to happen before save_vault is imported, since loggers initialize on import.
os.environ.setdefault(
    "SAVE_VAULT_LOG_DIR", tempfile.mkdtemp(prefix="save-vault-logs-")
)
os.environ.setdefault(
    "SAVE_VAULT_CONFIG_DIR", tempfile.mkdtemp(prefix="save-vault-config-")
)

import pytest  # noqa: E402

from save_vault.constants import GLOBAL_CONFIG_VERSION  # noqa: E402
from save_vault.core.registry import EntryRegistry  # noqa: E402
from save_vault.types import DirectoryConfig, GlobalConfig  # noqa: E402


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation for all loggers during tests.

    This allows pytest's caplog fixture to capture logs from all loggers,
    even those created with propagate=False in production code.
    """
    original_propagation = {}
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("save_vault"):
            logger = logging.getLogger(name)
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logger = logging.getLogger(name)
        logger.propagate = propagate_value


@pytest.fixture
def storage_dir(tmp_path: Path) -> Path:
    """Provide an empty store directory."""
    storage = tmp_path / "store"
    storage.mkdir()
    return storage


@pytest.fixture
def global_config(storage_dir: Path, tmp_path: Path) -> GlobalConfig:
    """Global configuration pointing at the temporary store."""
    return GlobalConfig(
        config_version=GLOBAL_CONFIG_VERSION,
        protected_snapshots=10,
        backup_before_restore=True,
        case_sensitive_paths=True,
        log_level="INFO",
        console_log_level="WARNING",
        directory=DirectoryConfig(storage=storage_dir, logs=tmp_path / "logs"),
    )


@pytest.fixture
def registry(storage_dir: Path) -> EntryRegistry:
    """EntryRegistry on the temporary store."""
    return EntryRegistry(storage_dir)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A tracked directory with a small nested tree."""
    project = tmp_path / "data" / "project"
    (project / "saves").mkdir(parents=True)
    (project / "saves" / "slot1.sav").write_bytes(b"slot one")
    (project / "saves" / "slot2.sav").write_bytes(b"slot two")
    (project / "profile.cfg").write_text("volume=7\n")
    (project / "empty").mkdir()
    return project


@pytest.fixture
def aux_file(tmp_path: Path) -> Path:
    """An auxiliary file living outside the project tree."""
    settings = tmp_path / "elsewhere" / "settings.ini"
    settings.parent.mkdir(parents=True)
    settings.write_text("[video]\nwidth=1920\n")
    return settings
