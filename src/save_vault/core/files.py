"""Auxiliary path tracking for entries.

Auxiliary paths are files or directories outside an entry's root that are
captured alongside it. They are kept as an ordered list; a path is stored
at most once, compared by its resolved absolute form.
"""

from pathlib import Path

from save_vault.core.naming import normalize_path, resolve_path
from save_vault.core.registry import EntryRegistry
from save_vault.exceptions import InvalidPathError, NotFoundError
from save_vault.logger import get_logger

logger = get_logger(__name__)


class FileSetManager:
    """Reads and edits the auxiliary path list of registered entries."""

    def __init__(self, registry: EntryRegistry) -> None:
        """Initialize with the registry that stores the lists.

        Args:
            registry: Entry registry owning the records

        """
        self.registry = registry

    @property
    def case_sensitive(self) -> bool:
        return self.registry.case_sensitive

    def files(self, name: str) -> list[str]:
        """Return the auxiliary paths of an entry in insertion order.

        Raises:
            NotFoundError: If no such entry exists

        """
        return list(self.registry.get(name)["files"])

    def add_files(self, name: str, paths: list[str | Path]) -> list[str]:
        """Append paths to the entry's auxiliary list.

        Every path is checked before anything is stored, so a single
        missing path rejects the whole request. Paths already tracked, and
        repeats within the request, are skipped.

        Args:
            name: Entry name
            paths: Files or directories to attach

        Returns:
            The paths that were newly added, as stored

        Raises:
            NotFoundError: If no such entry exists
            InvalidPathError: If any path does not exist or overlaps the
                snapshot store

        """
        current = self.files(name)

        resolved: list[Path] = []
        for path in paths:
            candidate = resolve_path(path)
            if not candidate.exists():
                msg = "Path does not exist"
                raise InvalidPathError(msg, str(path))
            self.registry.check_outside_store(candidate)
            resolved.append(candidate)

        seen = {
            normalize_path(item, case_sensitive=self.case_sensitive)
            for item in current
        }
        added: list[str] = []
        for candidate in resolved:
            key = normalize_path(candidate, case_sensitive=self.case_sensitive)
            if key in seen:
                logger.debug("Skipping already tracked path %s", candidate)
                continue
            seen.add(key)
            added.append(str(candidate))

        if not added:
            logger.info("No new paths to add for %s", name)
            return []

        self.registry.set_files(name, current + added)
        logger.info("Added %d path(s) to %s", len(added), name)
        return added

    def remove_file(self, name: str, path: str | Path) -> str:
        """Detach one path from the entry's auxiliary list.

        Existing snapshots are untouched; only later backups are affected.

        Returns:
            The stored spelling of the removed path

        Raises:
            NotFoundError: If the entry or the path is not present

        """
        current = self.files(name)
        key = normalize_path(path, case_sensitive=self.case_sensitive)

        for index, item in enumerate(current):
            if normalize_path(item, case_sensitive=self.case_sensitive) == key:
                del current[index]
                self.registry.set_files(name, current)
                logger.info("Removed %s from %s", item, name)
                return item

        msg = f"Path is not tracked: {path}"
        raise NotFoundError(msg, name)
