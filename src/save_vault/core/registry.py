"""Entry registry: the durable set of tracked locations.

The registry manifest (``registry.json`` at the store root) maps every
entry name to its root directory and its auxiliary paths. Each entry also
owns a snapshot store directory under ``entries/<name>``; removing the entry
removes that directory as well.
"""

import os
import shutil
import tempfile
import threading
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar, cast

import orjson

from save_vault.config.paths import Paths
from save_vault.config.schemas import SchemaValidationError, validate_document
from save_vault.constants import REGISTRY_FORMAT_VERSION, REMOVAL_SUFFIX
from save_vault.core.naming import (
    derive_entry_name,
    find_name,
    paths_overlap,
    resolve_path,
)
from save_vault.exceptions import (
    DuplicateNameError,
    InvalidPathError,
    IOFailureError,
    ManifestError,
    NotFoundError,
)
from save_vault.logger import get_logger
from save_vault.types import EntryRecord, RegistryManifest
from save_vault.utils.datetime_utils import get_current_datetime_local_iso
from save_vault.utils.json_io import read_json, write_json_atomic

logger = get_logger(__name__)

T = TypeVar("T")


def _empty_manifest() -> RegistryManifest:
    return {"version": REGISTRY_FORMAT_VERSION, "entries": {}}


class EntryRegistry:
    """Persists named tracked locations and their root paths.

    All read-modify-write cycles on the manifest run under one thread lock
    because operations on different entries execute concurrently in worker
    threads and share this single file.
    """

    def __init__(self, storage_dir: Path, *, case_sensitive: bool = True) -> None:
        """Initialize the registry for a store.

        Args:
            storage_dir: Root storage directory of the store
            case_sensitive: Whether names differing only in case are distinct

        """
        self.storage_dir = storage_dir
        self.case_sensitive = case_sensitive
        self.manifest_file = Paths.registry_file(storage_dir)
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Manifest persistence
    # ------------------------------------------------------------------

    def load(self) -> RegistryManifest:
        """Load the registry manifest.

        Returns:
            The manifest, or an empty one when the store is new

        Raises:
            ManifestError: If the manifest exists but is unreadable or invalid

        """
        if not self.manifest_file.exists():
            return _empty_manifest()

        try:
            data = read_json(self.manifest_file)
            validate_document("registry", data, self.manifest_file.name)
        except orjson.JSONDecodeError as e:
            msg = f"Invalid JSON in {self.manifest_file}: {e}"
            raise ManifestError(msg) from e
        except SchemaValidationError as e:
            raise ManifestError(str(e)) from e
        except OSError as e:
            msg = f"Failed to read {self.manifest_file}: {e}"
            raise ManifestError(msg) from e

        return cast("RegistryManifest", data)

    def save(self, manifest: RegistryManifest) -> None:
        """Write the manifest atomically.

        Raises:
            IOFailureError: If the manifest cannot be written

        """
        try:
            write_json_atomic(self.manifest_file, manifest)
        except OSError as e:
            msg = f"Failed to write registry: {e}"
            raise IOFailureError(msg) from e
        logger.debug("Saved registry to %s", self.manifest_file)

    def _update(self, mutate: Callable[[RegistryManifest], T]) -> T:
        """Apply mutate to the manifest and persist it under the lock."""
        with self._lock:
            manifest = self.load()
            result = mutate(manifest)
            self.save(manifest)
            return result

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def list_names(self) -> list[str]:
        """Return all entry names in lexical order."""
        return sorted(self.load()["entries"])

    def resolve_name(self, name: str) -> str:
        """Return the stored spelling of an entry name.

        Raises:
            NotFoundError: If no such entry exists

        """
        stored = find_name(
            self.load()["entries"], name, case_sensitive=self.case_sensitive
        )
        if stored is None:
            msg = "No such entry"
            raise NotFoundError(msg, name)
        return stored

    def get(self, name: str) -> EntryRecord:
        """Get the record of an entry.

        Raises:
            NotFoundError: If no such entry exists

        """
        entries = self.load()["entries"]
        stored = find_name(entries, name, case_sensitive=self.case_sensitive)
        if stored is None:
            msg = "No such entry"
            raise NotFoundError(msg, name)
        return entries[stored]

    def root(self, name: str) -> Path:
        """Get the root directory of an entry."""
        return Path(self.get(name)["root"])

    def check_outside_store(self, path: Path) -> None:
        """Refuse paths that are, contain or sit inside the store.

        Raises:
            InvalidPathError: If path overlaps the storage directory

        """
        if paths_overlap(
            path, self.storage_dir, case_sensitive=self.case_sensitive
        ):
            msg = f"Path overlaps the snapshot store at {self.storage_dir}"
            raise InvalidPathError(msg, str(path))

    def entry_dir(self, name: str) -> Path:
        """Get the snapshot store directory of an entry."""
        return Paths.entry_dir(self.storage_dir, self.resolve_name(name))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, path: str | Path) -> str:
        """Register a new entry rooted at path.

        Args:
            path: Directory to track; the entry is named after its final
                component

        Returns:
            The derived entry name

        Raises:
            InvalidPathError: If path is not an accessible directory, or
                overlaps the snapshot store
            DuplicateNameError: If an entry with the derived name exists

        """
        root = resolve_path(path)
        if not root.is_dir():
            msg = "Path is not an existing directory"
            raise InvalidPathError(msg, str(path))
        if not os.access(root, os.R_OK | os.X_OK):
            msg = "Directory is not readable"
            raise InvalidPathError(msg, str(path))
        self.check_outside_store(root)

        name = derive_entry_name(root)

        def _add(manifest: RegistryManifest) -> None:
            existing = find_name(
                manifest["entries"], name, case_sensitive=self.case_sensitive
            )
            if existing is not None:
                msg = f"An entry named '{existing}' already exists"
                raise DuplicateNameError(msg, name)
            manifest["entries"][name] = EntryRecord(
                root=str(root),
                files=[],
                created=get_current_datetime_local_iso(),
            )

        self._update(_add)
        logger.info("Added entry %s -> %s", name, root)
        return name

    def set_files(self, name: str, files: list[str]) -> None:
        """Replace the auxiliary path list of an entry.

        Raises:
            NotFoundError: If no such entry exists

        """

        def _set(manifest: RegistryManifest) -> None:
            stored = find_name(
                manifest["entries"], name, case_sensitive=self.case_sensitive
            )
            if stored is None:
                msg = "No such entry"
                raise NotFoundError(msg, name)
            manifest["entries"][stored]["files"] = list(files)

        self._update(_set)

    def remove(self, name: str) -> None:
        """Delete an entry together with all its snapshots.

        The snapshot store is first moved aside with a single rename, then
        the record is dropped; if dropping the record fails the store is
        moved back. Only then is the moved-aside tree deleted.

        Raises:
            NotFoundError: If no such entry exists
            IOFailureError: If the snapshot store cannot be moved aside

        """
        with self._lock:
            manifest = self.load()
            stored = find_name(
                manifest["entries"], name, case_sensitive=self.case_sensitive
            )
            if stored is None:
                msg = "No such entry"
                raise NotFoundError(msg, name)

            entry_dir = Paths.entry_dir(self.storage_dir, stored)
            trash: Path | None = None
            if entry_dir.exists():
                try:
                    trash = Path(
                        tempfile.mkdtemp(
                            dir=entry_dir.parent,
                            prefix=f".{stored}_",
                            suffix=REMOVAL_SUFFIX,
                        )
                    )
                    trash.rmdir()
                    entry_dir.rename(trash)
                except OSError as e:
                    msg = f"Failed to remove snapshot store: {e}"
                    raise IOFailureError(msg, stored) from e

            del manifest["entries"][stored]
            try:
                self.save(manifest)
            except IOFailureError:
                if trash is not None:
                    trash.rename(entry_dir)
                raise

        if trash is not None:
            shutil.rmtree(trash, ignore_errors=True)
            if trash.exists():
                logger.warning("Could not fully delete %s", trash)
        logger.info("Removed entry %s and all its snapshots", stored)
