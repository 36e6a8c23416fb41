"""Locking utilities for the snapshot store.

Two layers of mutual exclusion are provided:

- LockManager: process-level lock on the store using fcntl.flock, so two
  save-vault processes never mutate the same store at once.
- EntryLocks: one asyncio.Lock per busy entry name, so operations on the same
  entry are serialized while different entries proceed concurrently.
"""

from __future__ import annotations

import asyncio
import fcntl
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import (
    Path,  # noqa: TC003 - Path used at runtime for file operations
)
from typing import IO, TYPE_CHECKING, Self

from save_vault.exceptions import LockError

if TYPE_CHECKING:
    import types


class LockManager:
    """Async context manager for process-level file locking.

    Uses a non-blocking exclusive lock (LOCK_EX | LOCK_NB) so a second
    process fails fast instead of waiting.

    Example:
        >>> async with LockManager(storage / ".save-vault.lock"):
        ...     await vault.backup("project")

    """

    def __init__(self, lock_path: Path) -> None:
        """Initialize LockManager with lock file path.

        Args:
            lock_path: Path to the lock file to be created/used.

        """
        self._lock_path = lock_path
        self._lock_file: IO[str] | None = None

    async def __aenter__(self) -> Self:
        """Acquire lock when entering context.

        Raises:
            LockError: If another process holds the lock, or if file
                operations fail.

        """
        loop = asyncio.get_running_loop()

        def _acquire_lock() -> None:
            self._lock_path.parent.mkdir(parents=True, exist_ok=True)

            lock_file = None
            try:
                lock_file = self._lock_path.open("w", encoding="utf-8")
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                self._lock_file = lock_file
            except BlockingIOError as e:
                if lock_file is not None:
                    lock_file.close()
                msg = "Another save-vault process is using this store"
                raise LockError(msg, str(self._lock_path), cause=e) from e
            except OSError as e:
                if lock_file is not None:
                    lock_file.close()
                msg = f"Failed to acquire lock: {e}"
                raise LockError(msg, str(self._lock_path), cause=e) from e

        await loop.run_in_executor(None, _acquire_lock)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        """Release lock when exiting context.

        Safe to call even if lock was never acquired.
        """
        if self._lock_file is not None:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self._lock_file.close)
            self._lock_file = None


class _EntryLock:
    """An asyncio.Lock plus the number of tasks holding or awaiting it."""

    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self.users = 0


class EntryLocks:
    """Per-entry asyncio locks that exist only while in use.

    A lock is created when the first task asks for an entry and dropped
    once the last holder or waiter leaves, so names that are never used
    again (including unknown ones) do not accumulate.

    Keys are compared under the store's case semantics, so "Saves" and
    "saves" share one lock on case-insensitive stores.
    """

    def __init__(self, *, case_sensitive: bool = True) -> None:
        """Initialize an empty lock table.

        Args:
            case_sensitive: Whether entry names differing only in case are
                distinct entries.

        """
        self._case_sensitive = case_sensitive
        self._locks: dict[str, _EntryLock] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def _key(self, name: str) -> str:
        return name if self._case_sensitive else name.casefold()

    def is_locked(self, name: str) -> bool:
        """Check whether an operation currently holds the entry's lock."""
        entry = self._locks.get(self._key(name))
        return entry is not None and entry.lock.locked()

    @asynccontextmanager
    async def hold(self, name: str) -> AsyncIterator[None]:
        """Hold the entry's lock for the duration of the block."""
        key = self._key(name)
        entry = self._locks.get(key)
        if entry is None:
            entry = self._locks[key] = _EntryLock()

        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[key]
