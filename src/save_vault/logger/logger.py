"""Logging entry points used by the rest of save-vault.

The first ``get_logger`` call installs one LogPipeline on the
``save_vault`` logger; module loggers are its children and need no
handlers of their own.
"""

import atexit
import configparser
import logging
import threading

from save_vault.logger.config import load_log_settings
from save_vault.logger.pipeline import LogPipeline

ROOT_LOGGER_NAME = "save_vault"

_install_lock = threading.Lock()
_pipeline: LogPipeline | None = None


def get_pipeline() -> LogPipeline:
    """Return the running pipeline, installing it on first use."""
    global _pipeline  # noqa: PLW0603
    with _install_lock:
        if _pipeline is not None:
            return _pipeline

        console_level, file_level, log_file = load_log_settings()
        pipeline = LogPipeline(console_level, file_level, log_file)
        root = logging.getLogger(ROOT_LOGGER_NAME)
        pipeline.attach(root)
        _pipeline = pipeline

    if pipeline.file_error is not None:
        root.warning(
            "Logging to the console only, cannot open %s: %s",
            log_file,
            pipeline.file_error,
        )
    return pipeline


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Get a logger below the save_vault root.

        >>> logger = get_logger(__name__)
    """
    get_pipeline()
    return logging.getLogger(name)


def set_console_level(level: str) -> None:
    """Change how much reaches the terminal (``--verbose`` uses DEBUG)."""
    get_pipeline().set_levels(console=level)


def update_logger_from_config() -> None:
    """Apply ``console_log_level`` and ``log_level`` from settings.conf.

    An unreadable settings file leaves the current levels in place; the
    problem is logged rather than raised so the command can still report
    its own errors.
    """
    # config logs through this package
    from save_vault.config import ConfigManager  # noqa: PLC0415

    try:
        config = ConfigManager().load_global_config()
    except (OSError, ValueError, configparser.Error) as e:
        logging.getLogger(ROOT_LOGGER_NAME).warning(
            "Could not read log levels from settings: %s", e
        )
        return

    get_pipeline().set_levels(
        console=config["console_log_level"], file=config["log_level"]
    )


def shutdown_logging() -> None:
    """Flush and stop the pipeline; the next get_logger starts a new one."""
    global _pipeline  # noqa: PLW0603
    with _install_lock:
        pipeline, _pipeline = _pipeline, None
    if pipeline is not None:
        pipeline.close()


atexit.register(shutdown_logging)
