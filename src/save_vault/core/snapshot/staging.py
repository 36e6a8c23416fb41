"""Snapshot payload staging, digesting and publishing.

A payload is built inside a hidden staging directory next to the
committed payloads and only renamed into its final place once every copy
has succeeded. Anything that fails in between is removed again, and any
staging leftover from an interrupted run is purged before the next backup.
"""

import hashlib
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import cast

import orjson

from save_vault.config.schemas import SchemaValidationError, validate_document
from save_vault.constants import (
    HASH_CHUNK_SIZE,
    SNAPSHOT_CONTENTS_FILENAME,
    SNAPSHOT_FILES_DIR_NAME,
    SNAPSHOT_ROOT_DIR_NAME,
    STAGING_SUFFIX,
)
from save_vault.exceptions import InvalidPathError, IOFailureError, ManifestError
from save_vault.logger import get_logger
from save_vault.types import SnapshotContents, StoredItem
from save_vault.utils.json_io import read_json, write_json_atomic

logger = get_logger(__name__)


@dataclass(frozen=True)
class StagedPayload:
    """A fully copied payload waiting to be published."""

    path: Path
    sha256: str
    size: int
    files: int
    contents: SnapshotContents


def _payload_members(payload_dir: Path) -> list[tuple[str, Path]]:
    """List every captured path below payload_dir, sorted by relative path.

    The contents manifest is excluded. Symlinks are listed but not
    followed.
    """
    members: list[tuple[str, Path]] = []
    for top in (SNAPSHOT_ROOT_DIR_NAME, SNAPSHOT_FILES_DIR_NAME):
        base = payload_dir / top
        if not base.exists():
            continue
        members.append((top, base))
        for current, dirnames, filenames in os.walk(base):
            current_path = Path(current)
            for item in (*dirnames, *filenames):
                path = current_path / item
                members.append((path.relative_to(payload_dir).as_posix(), path))
    members.sort(key=lambda member: member[0])
    return members


def compute_digest(payload_dir: Path) -> tuple[str, int, int]:
    """Compute the content digest of a payload.

    The SHA-256 covers relative paths, entry kinds, symlink targets and
    file bytes, so two payloads with the same tree hash the same no matter
    when they were taken.

    Returns:
        Tuple of (hex digest, total file bytes, number of files)

    """
    sha256_hash = hashlib.sha256()
    total_size = 0
    file_count = 0

    for relative, path in _payload_members(payload_dir):
        encoded = relative.encode("utf-8", "surrogateescape")
        if path.is_symlink():
            sha256_hash.update(b"L\0" + encoded + b"\0")
            sha256_hash.update(
                os.readlink(path).encode("utf-8", "surrogateescape") + b"\0"
            )
        elif path.is_dir():
            sha256_hash.update(b"D\0" + encoded + b"\0")
        else:
            sha256_hash.update(b"F\0" + encoded + b"\0")
            with path.open("rb") as f:
                for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
                    sha256_hash.update(chunk)
                    total_size += len(chunk)
            sha256_hash.update(b"\0")
            file_count += 1

    return sha256_hash.hexdigest(), total_size, file_count


def _copy_item(source: Path, destination: Path) -> str:
    """Copy a file or directory tree, keeping symlinks as symlinks.

    Returns:
        The kind of item copied, "file" or "dir"

    """
    if source.is_dir() and not source.is_symlink():
        shutil.copytree(source, destination, symlinks=True)
        return "dir"
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, destination, follow_symlinks=False)
    return "file"


def stage_payload(
    snapshots_dir: Path, root: Path, files: list[str], label: str
) -> StagedPayload:
    """Copy an entry's root and auxiliary paths into a staging directory.

    Auxiliary paths that no longer exist are skipped with a warning; the
    root itself must exist.

    Args:
        snapshots_dir: Directory holding the entry's payloads
        root: Entry root directory
        files: Auxiliary paths in insertion order
        label: Prefix for the staging directory name

    Returns:
        The staged payload, not yet visible as a snapshot

    Raises:
        InvalidPathError: If the root directory is missing
        IOFailureError: If any copy fails; the staging directory is removed

    """
    if not root.is_dir():
        msg = "Entry root is not an existing directory"
        raise InvalidPathError(msg, str(root))

    snapshots_dir.mkdir(parents=True, exist_ok=True)
    staging = Path(
        tempfile.mkdtemp(
            dir=snapshots_dir, prefix=f".{label}_", suffix=STAGING_SUFFIX
        )
    )

    try:
        _copy_item(root, staging / SNAPSHOT_ROOT_DIR_NAME)

        stored_items: list[StoredItem] = []
        for index, item in enumerate(files):
            source = Path(item)
            if not source.exists() and not source.is_symlink():
                logger.warning("Skipping missing file %s", source)
                continue
            stored = (
                Path(SNAPSHOT_FILES_DIR_NAME) / str(index) / source.name
            ).as_posix()
            kind = _copy_item(source, staging / stored)
            stored_items.append(
                StoredItem(source=str(source), stored=stored, kind=kind)
            )

        sha256, size, file_count = compute_digest(staging)
        contents = SnapshotContents(
            root=str(root), files=stored_items, sha256=sha256
        )
        write_json_atomic(staging / SNAPSHOT_CONTENTS_FILENAME, contents)
    except OSError as e:
        shutil.rmtree(staging, ignore_errors=True)
        msg = f"Failed to copy snapshot contents: {e}"
        raise IOFailureError(msg, str(root)) from e
    except BaseException:
        shutil.rmtree(staging, ignore_errors=True)
        raise

    logger.debug(
        "Staged %d file(s), %d bytes at %s", file_count, size, staging
    )
    return StagedPayload(
        path=staging,
        sha256=sha256,
        size=size,
        files=file_count,
        contents=contents,
    )


def publish_payload(staged: StagedPayload, snapshots_dir: Path, base: str) -> str:
    """Move a staged payload to its final directory.

    Args:
        staged: Payload produced by stage_payload
        snapshots_dir: Directory holding the entry's payloads
        base: Preferred directory name; a counter is appended if taken

    Returns:
        Name of the published payload directory

    Raises:
        IOFailureError: If the rename fails; the staging directory is removed

    """
    directory = base
    counter = 2
    while (snapshots_dir / directory).exists():
        directory = f"{base}-{counter}"
        counter += 1

    try:
        staged.path.rename(snapshots_dir / directory)
    except OSError as e:
        shutil.rmtree(staged.path, ignore_errors=True)
        msg = f"Failed to publish snapshot: {e}"
        raise IOFailureError(msg, base) from e
    return directory


def discard_payload(path: Path) -> None:
    """Delete a payload directory, logging instead of raising on failure."""
    shutil.rmtree(path, ignore_errors=True)
    if path.exists():
        logger.warning("Could not fully delete %s", path)


def purge_stale(snapshots_dir: Path, referenced: set[str]) -> list[Path]:
    """Delete staging leftovers and payloads no record points at.

    Must only run while the entry lock is held, since an in-flight backup's
    staging directory would otherwise look stale.

    Args:
        snapshots_dir: Directory holding the entry's payloads
        referenced: Payload directory names referenced by metadata

    Returns:
        The paths that were removed

    """
    if not snapshots_dir.is_dir():
        return []

    removed: list[Path] = []
    for path in snapshots_dir.iterdir():
        if path.name.startswith("."):
            if not path.name.endswith(STAGING_SUFFIX):
                continue
            logger.info("Removing interrupted staging directory %s", path)
        elif path.name in referenced:
            continue
        else:
            logger.info("Removing unreferenced payload %s", path)

        if path.is_dir() and not path.is_symlink():
            discard_payload(path)
        else:
            path.unlink(missing_ok=True)
        removed.append(path)
    return removed


def load_contents(payload_dir: Path) -> SnapshotContents:
    """Read and validate a payload's contents manifest.

    Raises:
        ManifestError: If the manifest is missing or invalid

    """
    contents_file = payload_dir / SNAPSHOT_CONTENTS_FILENAME
    try:
        data = read_json(contents_file)
        validate_document("snapshot_contents", data, str(contents_file))
    except (OSError, orjson.JSONDecodeError, SchemaValidationError) as e:
        msg = f"Snapshot contents are unreadable: {e}"
        raise ManifestError(msg, payload_dir.name) from e
    return cast("SnapshotContents", data)
