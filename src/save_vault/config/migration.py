"""Bring an older settings.conf up to the current config_version.

Migration only ever adds keys: values the user already set are kept, and
the original file is copied aside before it is rewritten.
"""

import configparser
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from packaging.version import InvalidVersion, Version

from save_vault.constants import (
    CONFIG_BACKUP_SUFFIX_TEMPLATE,
    CONFIG_BACKUP_TIMESTAMP_FORMAT,
    CONFIG_FALLBACK_OLD_VERSION,
    GLOBAL_CONFIG_VERSION,
    KEY_CONFIG_VERSION,
    SECTION_DEFAULT,
)

# Scalar keys map to str, sections map to a dict of their keys.
RawConfigDict = dict[str, str | dict[str, str]]


def _parse_version(value: str) -> Version:
    try:
        return Version(value)
    except InvalidVersion:
        return Version(CONFIG_FALLBACK_OLD_VERSION)


def compare_versions(version1: str, version2: str) -> int:
    """Return -1, 0 or 1 as version1 sorts before, equal to or after version2.

    A version that does not parse counts as the oldest possible one.
    """
    v1 = _parse_version(version1)
    v2 = _parse_version(version2)
    return (v1 > v2) - (v1 < v2)


@dataclass
class MigrationResult:
    from_version: str
    backup_path: Path
    added: list[str] = field(default_factory=list)


def settings_version(parser: configparser.ConfigParser) -> str:
    return parser.get(
        SECTION_DEFAULT, KEY_CONFIG_VERSION, fallback=CONFIG_FALLBACK_OLD_VERSION
    )


def is_outdated(parser: configparser.ConfigParser) -> bool:
    """Check whether parsed settings predate GLOBAL_CONFIG_VERSION."""
    return compare_versions(settings_version(parser), GLOBAL_CONFIG_VERSION) < 0


def backup_settings(settings_file: Path) -> Path:
    """Copy settings_file to ``settings.<timestamp>.backup`` beside it.

    Raises:
        OSError: If the copy cannot be written

    """
    stamp = datetime.now().strftime(CONFIG_BACKUP_TIMESTAMP_FORMAT)
    target = settings_file.with_suffix(
        CONFIG_BACKUP_SUFFIX_TEMPLATE.format(timestamp=stamp)
    )
    shutil.copy2(settings_file, target)
    return target


def fill_missing(
    parser: configparser.ConfigParser, defaults: RawConfigDict
) -> list[str]:
    """Add every default the parser lacks; return them as ``[section] key``."""
    added: list[str] = []
    for name, value in defaults.items():
        if isinstance(value, dict):
            if not parser.has_section(name):
                parser.add_section(name)
            for key, item in value.items():
                if not parser.has_option(name, key):
                    parser.set(name, key, item)
                    added.append(f"[{name}] {key}")
        elif not parser.has_option(SECTION_DEFAULT, name):
            parser.set(SECTION_DEFAULT, name, value)
            added.append(f"[{SECTION_DEFAULT}] {name}")
    return added


def migrate_settings(
    parser: configparser.ConfigParser,
    defaults: RawConfigDict,
    settings_file: Path,
) -> MigrationResult:
    """Back up settings_file, then update parser in place.

    The caller writes the parser back; nothing is changed when the backup
    fails.

    Raises:
        OSError: If the backup copy cannot be written

    """
    from_version = settings_version(parser)
    backup_path = backup_settings(settings_file)
    added = fill_missing(parser, defaults)
    parser.set(SECTION_DEFAULT, KEY_CONFIG_VERSION, GLOBAL_CONFIG_VERSION)
    return MigrationResult(from_version, backup_path, added)
