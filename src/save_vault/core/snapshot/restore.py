"""Restore snapshot payloads over live paths.

Every restored path is first copied next to its target into a hidden
holder directory on the same filesystem and then swapped in with two
renames: the live item moves into the holder, the copy moves into place.
A failure before the second rename puts the live item back, so each path
is always either entirely old or entirely new.
"""

import shutil
import tempfile
from pathlib import Path

from save_vault.constants import (
    RESTORE_DISPLACED_SUFFIX,
    RESTORE_STAGING_SUFFIX,
    SNAPSHOT_ROOT_DIR_NAME,
)
from save_vault.exceptions import IOFailureError
from save_vault.logger import get_logger
from save_vault.types import SnapshotContents

logger = get_logger(__name__)


def _copy_into(source: Path, destination: Path) -> None:
    if source.is_dir() and not source.is_symlink():
        shutil.copytree(source, destination, symlinks=True)
    else:
        shutil.copy2(source, destination, follow_symlinks=False)


def _lexists(path: Path) -> bool:
    return path.exists() or path.is_symlink()


def restore_path(source: Path, target: Path) -> None:
    """Replace target with a copy of source.

    Args:
        source: File or directory inside a snapshot payload
        target: Live path to overwrite; created if it does not exist

    Raises:
        IOFailureError: If copying or swapping fails; target is unchanged

    """
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        holder = Path(
            tempfile.mkdtemp(
                dir=target.parent,
                prefix=f".{target.name}_",
                suffix=RESTORE_STAGING_SUFFIX,
            )
        )
    except OSError as e:
        msg = f"Failed to prepare restore: {e}"
        raise IOFailureError(msg, str(target)) from e

    staged = holder / target.name
    displaced = holder / f"{target.name}{RESTORE_DISPLACED_SUFFIX}"
    try:
        _copy_into(source, staged)

        had_target = _lexists(target)
        if had_target:
            target.rename(displaced)
        try:
            staged.rename(target)
        except OSError:
            if had_target:
                displaced.rename(target)
            raise
    except OSError as e:
        shutil.rmtree(holder, ignore_errors=True)
        msg = f"Failed to restore: {e}"
        raise IOFailureError(msg, str(target)) from e

    shutil.rmtree(holder, ignore_errors=True)
    if holder.exists():
        logger.warning("Could not fully delete %s", holder)
    logger.debug("Restored %s", target)


def restore_payload(
    payload_dir: Path, contents: SnapshotContents, root: Path
) -> list[Path]:
    """Restore an entry's root and auxiliary items from a payload.

    The root is restored first, then each auxiliary item at the location
    it was captured from.

    Args:
        payload_dir: Committed payload directory
        contents: The payload's contents manifest
        root: Current root directory of the entry

    Returns:
        Live paths that were restored

    Raises:
        IOFailureError: If any path fails; paths restored before it stay
            restored

    """
    restored: list[Path] = []

    restore_path(payload_dir / SNAPSHOT_ROOT_DIR_NAME, root)
    restored.append(root)

    for item in contents["files"]:
        source = payload_dir / item["stored"]
        target = Path(item["source"])
        if not _lexists(source):
            msg = f"Snapshot is missing stored item {item['stored']}"
            raise IOFailureError(msg, payload_dir.name)
        restore_path(source, target)
        restored.append(target)

    logger.debug("Restored %d path(s) from %s", len(restored), payload_dir)
    return restored
