"""Logging for save-vault.

Usage:
    >>> from save_vault.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Backing up %s", name)

Records are written by a background listener to stdout (INFO as bare
command output, everything else with time and level) and to
``save-vault.log``. ``SAVE_VAULT_LOG_DIR`` moves the log file; the test
suite points it at a temporary directory.
"""

from save_vault.logger.formatters import (
    ColoredConsoleFormatter,
    HybridConsoleFormatter,
)
from save_vault.logger.logger import (
    get_logger,
    get_pipeline,
    set_console_level,
    shutdown_logging,
    update_logger_from_config,
)
from save_vault.logger.pipeline import LogPipeline

__all__ = [
    "ColoredConsoleFormatter",
    "HybridConsoleFormatter",
    "LogPipeline",
    "get_logger",
    "get_pipeline",
    "set_console_level",
    "shutdown_logging",
    "update_logger_from_config",
]
