"""Tests for FileSetManager."""

from pathlib import Path

import pytest

from save_vault.core.files import FileSetManager
from save_vault.core.registry import EntryRegistry
from save_vault.exceptions import InvalidPathError, NotFoundError


@pytest.fixture
def file_sets(registry: EntryRegistry, project_dir: Path) -> FileSetManager:
    """FileSetManager with the sample project registered."""
    registry.add(project_dir)
    return FileSetManager(registry)


class TestFileSetManager:
    """Test auxiliary path tracking."""

    def test_files_empty_initially(self, file_sets: FileSetManager) -> None:
        """Test a new entry has no auxiliary paths."""
        assert file_sets.files("project") == []

    def test_files_unknown_entry(self, file_sets: FileSetManager) -> None:
        """Test listing files of an unknown entry raises NotFoundError."""
        with pytest.raises(NotFoundError):
            file_sets.files("ghost")

    def test_add_files_preserves_order(
        self, file_sets: FileSetManager, tmp_path: Path
    ) -> None:
        """Test files and directories are kept in insertion order."""
        second = tmp_path / "b.txt"
        first = tmp_path / "a_dir"
        second.write_text("b")
        first.mkdir()

        added = file_sets.add_files("project", [second, first])

        assert added == [str(second.resolve()), str(first.resolve())]
        assert file_sets.files("project") == added

    def test_add_files_deduplicates(
        self, file_sets: FileSetManager, aux_file: Path
    ) -> None:
        """Test the same resolved path is stored once."""
        file_sets.add_files("project", [aux_file])
        alias = aux_file.parent / "." / aux_file.name

        assert file_sets.add_files("project", [alias, aux_file]) == []
        assert file_sets.files("project") == [str(aux_file.resolve())]

    def test_add_files_all_or_nothing(
        self, file_sets: FileSetManager, aux_file: Path, tmp_path: Path
    ) -> None:
        """Test one missing path rejects the whole request."""
        with pytest.raises(InvalidPathError):
            file_sets.add_files("project", [aux_file, tmp_path / "missing"])

        assert file_sets.files("project") == []

    def test_add_files_store_overlap_rejected(
        self,
        file_sets: FileSetManager,
        aux_file: Path,
        storage_dir: Path,
    ) -> None:
        """Test the store, its contents and its parents cannot be attached."""
        registry_file = storage_dir / "registry.json"
        for path in (storage_dir, registry_file, storage_dir.parent):
            with pytest.raises(InvalidPathError, match="snapshot store"):
                file_sets.add_files("project", [aux_file, path])

        assert file_sets.files("project") == []

    def test_remove_file(
        self, file_sets: FileSetManager, aux_file: Path, tmp_path: Path
    ) -> None:
        """Test removing one path keeps the others in order."""
        other = tmp_path / "other.txt"
        other.write_text("x")
        file_sets.add_files("project", [aux_file, other])

        removed = file_sets.remove_file("project", aux_file)

        assert removed == str(aux_file.resolve())
        assert file_sets.files("project") == [str(other.resolve())]

    def test_remove_file_never_added(
        self, file_sets: FileSetManager, aux_file: Path
    ) -> None:
        """Test removing an untracked path raises NotFoundError."""
        with pytest.raises(NotFoundError):
            file_sets.remove_file("project", aux_file)

    def test_remove_file_after_source_deleted(
        self, file_sets: FileSetManager, aux_file: Path
    ) -> None:
        """Test a tracked path can be removed after it vanished on disk."""
        file_sets.add_files("project", [aux_file])
        aux_file.unlink()

        file_sets.remove_file("project", aux_file)
        assert file_sets.files("project") == []
