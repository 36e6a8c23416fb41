"""Path and naming utilities.

Derives entry names from filesystem paths, normalizes paths for equality
checks, and builds and validates snapshot identifiers.

Case sensitivity is an explicit setting (``case_sensitive_paths``) rather
than something detected from the filesystem; one store may track
paths on several filesystems.
"""

from collections.abc import Collection, Iterable
from datetime import datetime
from pathlib import Path

from save_vault.constants import (
    SNAPSHOT_AUTO_SUFFIX,
    SNAPSHOT_DIGEST_LENGTH,
    SNAPSHOT_ID_FORBIDDEN_CHARS,
    SNAPSHOT_ID_MAX_LENGTH,
    SNAPSHOT_TIMESTAMP_FORMAT,
)
from save_vault.exceptions import InvalidPathError, InvalidSnapshotIdError


def resolve_path(path: str | Path) -> Path:
    """Expand ~ and make path absolute without requiring it to exist."""
    return Path(path).expanduser().resolve(strict=False)


def normalize_path(path: str | Path, *, case_sensitive: bool = True) -> str:
    """Return the comparison key for a path.

    Separators and ``..`` segments are normalized by resolving the path;
    the result is case-folded when the store compares case-insensitively.
    """
    normalized = str(resolve_path(path))
    return normalized if case_sensitive else normalized.casefold()


def paths_equal(
    first: str | Path, second: str | Path, *, case_sensitive: bool = True
) -> bool:
    """Check whether two paths refer to the same location."""
    return normalize_path(first, case_sensitive=case_sensitive) == (
        normalize_path(second, case_sensitive=case_sensitive)
    )


def paths_overlap(
    first: str | Path, second: str | Path, *, case_sensitive: bool = True
) -> bool:
    """Check whether two paths are the same or one lies inside the other."""
    a = Path(normalize_path(first, case_sensitive=case_sensitive))
    b = Path(normalize_path(second, case_sensitive=case_sensitive))
    return a == b or a in b.parents or b in a.parents


def names_equal(first: str, second: str, *, case_sensitive: bool = True) -> bool:
    """Compare two entry names under the configured case semantics."""
    if case_sensitive:
        return first == second
    return first.casefold() == second.casefold()


def find_name(
    names: Iterable[str], name: str, *, case_sensitive: bool = True
) -> str | None:
    """Return the stored spelling of name, or None if absent."""
    for candidate in names:
        if names_equal(candidate, name, case_sensitive=case_sensitive):
            return candidate
    return None


def derive_entry_name(path: str | Path) -> str:
    """Derive the display name of an entry from its root path.

    The name is the final component of the resolved path, so
    ``/data/project`` and ``/data/project/`` both yield ``project``.

    Raises:
        InvalidPathError: If the path has no usable final component

    """
    name = resolve_path(path).name
    if not name or name in (".", ".."):
        msg = "Cannot derive an entry name from this path"
        raise InvalidPathError(msg, str(path))
    return name


def validate_snapshot_id(snapshot_id: str) -> str:
    """Validate a snapshot identifier supplied by a caller.

    Identifiers must be non-empty, free of surrounding whitespace and path
    separators, must not start with a dot (reserved for staging artifacts)
    and must fit within the maximum length.

    Returns:
        The identifier, unchanged

    Raises:
        InvalidSnapshotIdError: If the identifier is malformed

    """
    if not snapshot_id or not snapshot_id.strip():
        msg = "Snapshot id cannot be empty"
        raise InvalidSnapshotIdError(msg)
    if snapshot_id != snapshot_id.strip():
        msg = "Snapshot id cannot start or end with whitespace"
        raise InvalidSnapshotIdError(msg, snapshot_id)
    if snapshot_id.startswith("."):
        msg = "Snapshot id cannot start with '.'"
        raise InvalidSnapshotIdError(msg, snapshot_id)
    if any(char in snapshot_id for char in SNAPSHOT_ID_FORBIDDEN_CHARS):
        msg = "Snapshot id cannot contain path separators"
        raise InvalidSnapshotIdError(msg, snapshot_id)
    if len(snapshot_id) > SNAPSHOT_ID_MAX_LENGTH:
        msg = f"Snapshot id is longer than {SNAPSHOT_ID_MAX_LENGTH} characters"
        raise InvalidSnapshotIdError(msg, snapshot_id)
    return snapshot_id


def make_snapshot_id(
    created: datetime,
    digest: str,
    existing: Collection[str],
    *,
    auto: bool = False,
) -> str:
    """Build a unique snapshot identifier.

    Format: ``<YYYYMMDD_HHMMSS>_<digest8>[_auto]``. When the base id is
    already taken, ``-2``, ``-3``, ... is appended until it is unique.

    Args:
        created: Creation time of the snapshot
        digest: Hex content digest of the payload
        existing: Identifiers already used by the entry
        auto: Whether this is an automatic pre-restore snapshot

    Returns:
        Identifier not present in existing

    """
    base = (
        f"{created.strftime(SNAPSHOT_TIMESTAMP_FORMAT)}_"
        f"{digest[:SNAPSHOT_DIGEST_LENGTH]}"
    )
    if auto:
        base += SNAPSHOT_AUTO_SUFFIX

    candidate = base
    counter = 2
    while candidate in existing:
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate
