"""Tests for logger configuration module."""

import logging
from pathlib import Path

from pytest import MonkeyPatch

from save_vault.logger import get_logger
from save_vault.logger.config import load_log_settings
from save_vault.logger.formatters import HybridConsoleFormatter


def test_load_log_settings_with_env_var(monkeypatch: MonkeyPatch) -> None:
    """Test load_log_settings returns test dir when env var is set."""
    test_log_dir = "/tmp/pytest-save-vault-logs"
    monkeypatch.setenv("SAVE_VAULT_LOG_DIR", test_log_dir)

    console_level, file_level, log_path = load_log_settings()

    assert console_level == "INFO"
    assert file_level == "INFO"
    assert log_path == Path(test_log_dir) / "save-vault.log"


def test_load_log_settings_without_env_var(monkeypatch: MonkeyPatch) -> None:
    """Test load_log_settings returns default path when env var is not set."""
    monkeypatch.delenv("SAVE_VAULT_LOG_DIR", raising=False)

    _, _, log_path = load_log_settings()

    expected_path = (
        Path.home() / ".config" / "save-vault" / "logs" / "save-vault.log"
    )
    assert log_path == expected_path


def test_load_log_settings_with_tilde_in_env_var(
    monkeypatch: MonkeyPatch,
) -> None:
    """Test load_log_settings expands tilde in SAVE_VAULT_LOG_DIR."""
    monkeypatch.setenv("SAVE_VAULT_LOG_DIR", "~/custom-logs")

    _, _, log_path = load_log_settings()

    assert log_path == Path.home() / "custom-logs" / "save-vault.log"


def test_child_loggers_share_root() -> None:
    """Test module loggers are children of the save_vault logger."""
    logger = get_logger("save_vault.core.registry")
    assert logger.name == "save_vault.core.registry"
    assert logger.parent is not None
    assert logger.parent.name.startswith("save_vault")


def test_hybrid_formatter_plain_info() -> None:
    """Test INFO records are printed as bare messages."""
    formatter = HybridConsoleFormatter("%(levelname)s %(message)s")
    record = logging.LogRecord(
        "save_vault", logging.INFO, __file__, 1, "Snapshot created", None, None
    )
    assert formatter.format(record) == "Snapshot created"
