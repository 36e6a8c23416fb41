"""Global configuration manager for INI settings."""

import configparser
import logging
from pathlib import Path

from save_vault.config.migration import (
    RawConfigDict,
    is_outdated,
    migrate_settings,
)
from save_vault.config.parser import (
    ConfigCommentManager,
    _strip_inline_comment,
    create_parser,
    parse_bool,
)
from save_vault.config.paths import Paths
from save_vault.constants import (
    DEFAULT_BACKUP_BEFORE_RESTORE,
    DEFAULT_CASE_SENSITIVE_PATHS,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PROTECTED_SNAPSHOTS,
    DIRECTORY_KEYS,
    GLOBAL_CONFIG_VERSION,
    KEY_BACKUP_BEFORE_RESTORE,
    KEY_CASE_SENSITIVE_PATHS,
    KEY_CONFIG_VERSION,
    KEY_CONSOLE_LOG_LEVEL,
    KEY_LOG_LEVEL,
    KEY_LOGS,
    KEY_PROTECTED_SNAPSHOTS,
    KEY_STORAGE,
    SECTION_DEFAULT,
    SECTION_DIRECTORY,
)
from save_vault.types import DirectoryConfig, GlobalConfig

logger = logging.getLogger(__name__)


def _bool_text(value: bool) -> str:  # noqa: FBT001
    return "true" if value else "false"


class GlobalConfigManager:
    """Manages global INI configuration."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize global config manager.

        Args:
            config_dir: Configuration directory path
                (defaults to Paths.config_dir())

        """
        self.config_dir = config_dir or Paths.config_dir()
        self.settings_file = Paths.settings_file(self.config_dir)

    def get_default_global_config(self) -> RawConfigDict:
        """Get default global configuration values."""
        return {
            KEY_CONFIG_VERSION: GLOBAL_CONFIG_VERSION,
            KEY_PROTECTED_SNAPSHOTS: str(DEFAULT_PROTECTED_SNAPSHOTS),
            KEY_BACKUP_BEFORE_RESTORE: _bool_text(
                DEFAULT_BACKUP_BEFORE_RESTORE
            ),
            KEY_CASE_SENSITIVE_PATHS: _bool_text(DEFAULT_CASE_SENSITIVE_PATHS),
            KEY_LOG_LEVEL: DEFAULT_LOG_LEVEL,
            KEY_CONSOLE_LOG_LEVEL: DEFAULT_CONSOLE_LOG_LEVEL,
            SECTION_DIRECTORY: {
                KEY_STORAGE: str(Paths.DEFAULT_STORAGE_DIR),
                KEY_LOGS: str(Paths.logs_dir(self.config_dir)),
            },
        }

    def _create_config_from_defaults(
        self, defaults: RawConfigDict
    ) -> configparser.ConfigParser:
        """Create ConfigParser from defaults dictionary."""
        config = create_parser()

        flat_defaults = {
            key: str(value)
            for key, value in defaults.items()
            if not isinstance(value, dict)
        }
        config.read_dict({SECTION_DEFAULT: flat_defaults})

        for key, value in defaults.items():
            if isinstance(value, dict):
                config.add_section(key)
                for subkey, subvalue in value.items():
                    config.set(key, subkey, str(subvalue))

        return config

    def load_global_config(self) -> GlobalConfig:
        """Load global configuration from INI file.

        Creates the settings file with defaults when it does not exist and
        migrates an outdated one in place.
        """
        defaults = self.get_default_global_config()

        if not self.settings_file.exists():
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self.save_global_config(self._convert_to_global_config(defaults))
            return self._convert_to_global_config(
                self._create_config_from_defaults(defaults)
            )

        user_config = create_parser()
        user_config.read(self.settings_file, encoding="utf-8")

        if is_outdated(user_config):
            try:
                result = migrate_settings(
                    user_config, defaults, self.settings_file
                )
            except OSError as e:
                logger.warning(
                    "Could not back up %s, leaving it unmigrated: %s",
                    self.settings_file,
                    e,
                )
            else:
                self.save_global_config(
                    self._convert_to_global_config(user_config)
                )
                logger.info(
                    "Migrated settings from %s to %s (backup at %s)",
                    result.from_version,
                    GLOBAL_CONFIG_VERSION,
                    result.backup_path,
                )
                for added in result.added:
                    logger.debug("Added missing setting %s", added)

        config = self._create_config_from_defaults(defaults)
        config.read_dict(
            {
                section: dict(user_config.items(section, raw=True))
                for section in user_config.sections()
            }
        )
        config.read_dict({SECTION_DEFAULT: dict(user_config.defaults())})

        return self._convert_to_global_config(config)

    def save_global_config(self, config: GlobalConfig) -> None:
        """Save global configuration to INI file with user-friendly comments."""
        comment_manager = ConfigCommentManager()
        section_comments = comment_manager.get_section_comments()
        key_comments = comment_manager.get_key_comments()

        default_data = {
            KEY_CONFIG_VERSION: config["config_version"],
            KEY_PROTECTED_SNAPSHOTS: str(config["protected_snapshots"]),
            KEY_BACKUP_BEFORE_RESTORE: _bool_text(
                config["backup_before_restore"]
            ),
            KEY_CASE_SENSITIVE_PATHS: _bool_text(
                config["case_sensitive_paths"]
            ),
            KEY_LOG_LEVEL: config["log_level"],
            KEY_CONSOLE_LOG_LEVEL: config["console_log_level"],
        }
        directory_data = {
            key: str(path) for key, path in config["directory"].items()
        }

        self.settings_file.parent.mkdir(parents=True, exist_ok=True)
        with self.settings_file.open("w", encoding="utf-8") as f:
            f.write(comment_manager.get_file_header())

            for section, data in (
                (SECTION_DEFAULT, default_data),
                (SECTION_DIRECTORY, directory_data),
            ):
                f.write(section_comments[section])
                f.write(f"[{section}]\n")
                for key, value in data.items():
                    inline_comment = key_comments[section].get(key, "")
                    if inline_comment:
                        f.write(f"{key} = {value}  {inline_comment}\n")
                    else:
                        f.write(f"{key} = {value}\n")

    def _convert_to_global_config(
        self,
        config: configparser.ConfigParser | RawConfigDict,
    ) -> GlobalConfig:
        """Convert configparser or dict to typed GlobalConfig."""
        if isinstance(config, configparser.ConfigParser):
            config_dict: RawConfigDict = {}
            for section_name in config.sections():
                config_dict[section_name] = {
                    key: value
                    for key, value in config.items(section_name, raw=True)
                    if not config.has_option(SECTION_DEFAULT, key)
                    or key in DIRECTORY_KEYS
                }
            for key, raw_value in config.defaults().items():
                config_dict[key] = raw_value
        else:
            config_dict = config

        def get_scalar(key: str, default: str) -> str:
            value = config_dict.get(key, default)
            if isinstance(value, dict):
                return default
            return _strip_inline_comment(value)

        def get_int(key: str, default: int) -> int:
            try:
                return int(get_scalar(key, str(default)))
            except ValueError:
                logger.warning(
                    "Invalid integer for %s, using default %s", key, default
                )
                return default

        directory_dict = config_dict.get(SECTION_DIRECTORY, {})
        directory_config: dict[str, Path] = {}
        if isinstance(directory_dict, dict):
            for key, value in directory_dict.items():
                if key in DIRECTORY_KEYS:
                    directory_config[key] = Paths.expand_path(
                        _strip_inline_comment(value)
                    )

        protected = get_int(
            KEY_PROTECTED_SNAPSHOTS, DEFAULT_PROTECTED_SNAPSHOTS
        )
        if protected < 0:
            logger.warning(
                "protected_snapshots cannot be negative, using %s",
                DEFAULT_PROTECTED_SNAPSHOTS,
            )
            protected = DEFAULT_PROTECTED_SNAPSHOTS

        return GlobalConfig(
            config_version=get_scalar(
                KEY_CONFIG_VERSION, GLOBAL_CONFIG_VERSION
            ),
            protected_snapshots=protected,
            backup_before_restore=parse_bool(
                get_scalar(
                    KEY_BACKUP_BEFORE_RESTORE,
                    _bool_text(DEFAULT_BACKUP_BEFORE_RESTORE),
                ),
                DEFAULT_BACKUP_BEFORE_RESTORE,
            ),
            case_sensitive_paths=parse_bool(
                get_scalar(
                    KEY_CASE_SENSITIVE_PATHS,
                    _bool_text(DEFAULT_CASE_SENSITIVE_PATHS),
                ),
                DEFAULT_CASE_SENSITIVE_PATHS,
            ),
            log_level=get_scalar(KEY_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper(),
            console_log_level=get_scalar(
                KEY_CONSOLE_LOG_LEVEL, DEFAULT_CONSOLE_LOG_LEVEL
            ).upper(),
            directory=DirectoryConfig(
                storage=directory_config.get(
                    KEY_STORAGE, Paths.DEFAULT_STORAGE_DIR
                ),
                logs=directory_config.get(
                    KEY_LOGS, Paths.logs_dir(self.config_dir)
                ),
            ),
        )
