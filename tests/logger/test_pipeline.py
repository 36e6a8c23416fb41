"""Tests for the queue-fed log pipeline and level updates."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from save_vault.constants import GLOBAL_CONFIG_VERSION
from save_vault.logger import (
    LogPipeline,
    get_pipeline,
    set_console_level,
    update_logger_from_config,
)


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    return tmp_path / "logs" / "save-vault.log"


@pytest.fixture
def restore_levels() -> Iterator[None]:
    """Put the shared pipeline back to the default levels afterwards."""
    yield
    get_pipeline().set_levels(console="INFO", file="INFO")


class TestLogPipeline:
    """Test handler setup of a standalone pipeline."""

    def test_levels(self, log_file: Path) -> None:
        """Test initial levels and later changes."""
        pipeline = LogPipeline("WARNING", "DEBUG", log_file)

        assert pipeline.console.level == logging.WARNING
        assert pipeline.file is not None
        assert pipeline.file.level == logging.DEBUG

        pipeline.set_levels(console="debug")
        assert pipeline.console.level == logging.DEBUG
        assert pipeline.file.level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self, log_file: Path) -> None:
        """Test a misspelled level name does not break logging."""
        pipeline = LogPipeline("LOUD", "INFO", log_file)
        assert pipeline.console.level == logging.INFO

    def test_unwritable_log_dir_keeps_console(self, tmp_path: Path) -> None:
        """Test a log path under a regular file leaves only the console."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")

        pipeline = LogPipeline("INFO", "INFO", blocker / "save-vault.log")

        assert pipeline.file is None
        assert isinstance(pipeline.file_error, OSError)
        assert pipeline.handlers == [pipeline.console]

    def test_close_writes_queued_records(self, log_file: Path) -> None:
        """Test records logged before close end up in the log file."""
        pipeline = LogPipeline("CRITICAL", "DEBUG", log_file)
        logger = logging.getLogger("pipeline_under_test")
        pipeline.attach(logger)

        for index in range(50):
            logger.debug("record %d", index)
        pipeline.close()

        content = log_file.read_text()
        assert "record 0" in content
        assert "record 49" in content
        assert logger.handlers == []

    def test_close_is_idempotent(self, log_file: Path) -> None:
        """Test closing a pipeline that never started is harmless."""
        pipeline = LogPipeline("INFO", "INFO", log_file)
        pipeline.close()
        pipeline.close()


@pytest.mark.usefixtures("restore_levels")
class TestSharedPipeline:
    """Test level changes on the pipeline behind get_logger."""

    def test_set_console_level(self) -> None:
        """Test --verbose style level changes reach the console handler."""
        set_console_level("DEBUG")
        assert get_pipeline().console.level == logging.DEBUG

    def test_levels_from_settings(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test levels are read from settings.conf."""
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "settings.conf").write_text(
            "[DEFAULT]\n"
            f"config_version = {GLOBAL_CONFIG_VERSION}\n"
            "console_log_level = WARNING\n"
            "log_level = DEBUG\n"
        )
        monkeypatch.setenv("SAVE_VAULT_CONFIG_DIR", str(config_dir))

        update_logger_from_config()

        pipeline = get_pipeline()
        assert pipeline.console.level == logging.WARNING
        if pipeline.file is not None:
            assert pipeline.file.level == logging.DEBUG

    def test_broken_settings_keep_levels(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test an unparsable settings file only logs a warning."""
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "settings.conf").write_text("no section header\n")
        monkeypatch.setenv("SAVE_VAULT_CONFIG_DIR", str(config_dir))
        set_console_level("ERROR")

        update_logger_from_config()

        assert get_pipeline().console.level == logging.ERROR
        assert "Could not read log levels" in caplog.text
