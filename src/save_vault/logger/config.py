"""Bootstrap log settings.

Levels from settings.conf are applied later by update_logger_from_config;
at import time only the built-in defaults and the log location are known.
"""

import os
from pathlib import Path

from save_vault.constants import (
    CONFIG_DIR_NAME,
    DEFAULT_CONFIG_SUBDIR,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    ENV_LOG_DIR,
    LOG_FILE_NAME,
)


def load_log_settings() -> tuple[str, str, Path]:
    """Return (console level, file level, log file path).

    The log file lives in ``$SAVE_VAULT_LOG_DIR`` when that is set, and in
    ``~/.config/save-vault/logs`` otherwise.
    """
    env_log_dir = os.getenv(ENV_LOG_DIR)
    if env_log_dir:
        log_dir = Path(env_log_dir).expanduser()
    else:
        log_dir = Path.home() / CONFIG_DIR_NAME / DEFAULT_CONFIG_SUBDIR / "logs"

    return DEFAULT_CONSOLE_LOG_LEVEL, DEFAULT_LOG_LEVEL, log_dir / LOG_FILE_NAME
