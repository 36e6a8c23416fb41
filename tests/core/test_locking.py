"""Tests for process-level and per-entry locking."""

import asyncio
from pathlib import Path

import pytest

from save_vault.core.locking import EntryLocks, LockManager
from save_vault.exceptions import LockError


@pytest.fixture
def lock_path(tmp_path: Path) -> Path:
    """Provide a temporary lock file path."""
    return tmp_path / "store" / ".save-vault.lock"


@pytest.mark.asyncio
async def test_lock_manager_creates_parent_directory(lock_path: Path) -> None:
    """Test LockManager creates the store directory if missing."""
    async with LockManager(lock_path) as lock_mgr:
        assert lock_mgr._lock_file is not None
        assert lock_path.exists()


@pytest.mark.asyncio
async def test_lock_manager_releases_lock_on_exception(
    lock_path: Path,
) -> None:
    """Test LockManager releases the lock when the block raises."""
    lock_mgr = LockManager(lock_path)

    with pytest.raises(ValueError, match="boom"):
        async with lock_mgr:
            raise ValueError("boom")

    assert lock_mgr._lock_file is None
    async with LockManager(lock_path):
        pass


@pytest.mark.asyncio
async def test_lock_manager_fails_when_lock_held(lock_path: Path) -> None:
    """Test a second holder fails fast with LockError."""
    async with LockManager(lock_path):
        with pytest.raises(LockError, match="Another save-vault process"):
            async with LockManager(lock_path):
                pass


class TestEntryLocks:
    """Test per-entry lock table."""

    @pytest.mark.asyncio
    async def test_case_insensitive_keys(self) -> None:
        """Test case-insensitive stores share locks across spellings."""
        locks = EntryLocks(case_sensitive=False)
        async with locks.hold("Project"):
            assert locks.is_locked("project")
            assert len(locks) == 1

    @pytest.mark.asyncio
    async def test_case_sensitive_keys(self) -> None:
        """Test case-sensitive stores keep spellings apart."""
        locks = EntryLocks()
        async with locks.hold("Project"):
            assert not locks.is_locked("project")

    @pytest.mark.asyncio
    async def test_idle_locks_are_dropped(self) -> None:
        """Test the table only holds entries that are in use."""
        locks = EntryLocks()
        for name in ("project", "typo", "ghost"):
            async with locks.hold(name):
                assert len(locks) == 1
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_lock_kept_while_waiters_remain(self) -> None:
        """Test a released lock survives while another task waits on it."""
        locks = EntryLocks()
        order: list[str] = []

        async def second() -> None:
            async with locks.hold("project"):
                order.append("second")

        async with locks.hold("project"):
            waiter = asyncio.create_task(second())
            await asyncio.sleep(0)
            order.append("first")
        await waiter

        assert order == ["first", "second"]
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_cancelled_waiter_releases_slot(self) -> None:
        """Test a waiter cancelled before acquiring leaves no lock behind."""
        locks = EntryLocks()

        async def waiter() -> None:
            async with locks.hold("project"):
                pass

        async with locks.hold("project"):
            task = asyncio.create_task(waiter())
            await asyncio.sleep(0)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_same_entry_serialized(self) -> None:
        """Test two holders of one entry never overlap."""
        locks = EntryLocks()
        active = 0
        peak = 0

        async def worker() -> None:
            nonlocal active, peak
            async with locks.hold("project"):
                active += 1
                peak = max(peak, active)
                await asyncio.sleep(0.01)
                active -= 1

        await asyncio.gather(*(worker() for _ in range(5)))
        assert peak == 1

    @pytest.mark.asyncio
    async def test_different_entries_concurrent(self) -> None:
        """Test holding one entry does not block another."""
        locks = EntryLocks()
        async with locks.hold("first"):
            assert locks.is_locked("first")
            assert not locks.is_locked("second")
            async with asyncio.timeout(1):
                async with locks.hold("second"):
                    assert locks.is_locked("second")
