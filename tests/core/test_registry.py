"""Tests for EntryRegistry."""

from pathlib import Path
from unittest.mock import patch

import orjson
import pytest

from save_vault.config.paths import Paths
from save_vault.core.registry import EntryRegistry
from save_vault.exceptions import (
    DuplicateNameError,
    InvalidPathError,
    IOFailureError,
    ManifestError,
    NotFoundError,
)


class TestAdd:
    """Test registering entries."""

    def test_add_then_list(
        self, registry: EntryRegistry, project_dir: Path
    ) -> None:
        """Test the derived name is listed exactly once."""
        name = registry.add(project_dir)

        assert name == "project"
        assert registry.list_names().count("project") == 1
        assert registry.root("project") == project_dir.resolve()
        assert registry.get("project")["files"] == []

    def test_duplicate_name_rejected(
        self, registry: EntryRegistry, project_dir: Path, tmp_path: Path
    ) -> None:
        """Test a second directory with the same base name is refused."""
        registry.add(project_dir)
        other = tmp_path / "other" / "project"
        other.mkdir(parents=True)

        with pytest.raises(DuplicateNameError):
            registry.add(other)
        assert registry.root("project") == project_dir.resolve()

    def test_duplicate_name_case_insensitive(
        self, storage_dir: Path, project_dir: Path, tmp_path: Path
    ) -> None:
        """Test names differing in case collide on case-insensitive stores."""
        registry = EntryRegistry(storage_dir, case_sensitive=False)
        registry.add(project_dir)
        other = tmp_path / "other" / "Project"
        other.mkdir(parents=True)

        with pytest.raises(DuplicateNameError):
            registry.add(other)
        assert registry.resolve_name("PROJECT") == "project"

    @pytest.mark.parametrize("relative", ["", "store", "store/entries"])
    def test_store_overlap_rejected(
        self, registry: EntryRegistry, tmp_path: Path, relative: str
    ) -> None:
        """Test roots containing, equal to or inside the store are refused."""
        root = tmp_path / relative
        root.mkdir(parents=True, exist_ok=True)

        with pytest.raises(InvalidPathError, match="snapshot store"):
            registry.add(root)
        assert registry.list_names() == []

    def test_sibling_of_store_accepted(
        self, registry: EntryRegistry, tmp_path: Path
    ) -> None:
        """Test a directory whose name merely starts like the store is fine."""
        sibling = tmp_path / "store-old"
        sibling.mkdir()

        assert registry.add(sibling) == "store-old"

    def test_missing_directory_rejected(
        self, registry: EntryRegistry, tmp_path: Path
    ) -> None:
        """Test a nonexistent path raises InvalidPathError."""
        with pytest.raises(InvalidPathError):
            registry.add(tmp_path / "nope")
        assert registry.list_names() == []

    def test_file_rejected(self, registry: EntryRegistry, aux_file: Path) -> None:
        """Test a regular file is not a valid entry root."""
        with pytest.raises(InvalidPathError):
            registry.add(aux_file)

    def test_list_is_deterministic(
        self, registry: EntryRegistry, tmp_path: Path
    ) -> None:
        """Test names are listed in lexical order."""
        for name in ("zeta", "alpha", "mid"):
            (tmp_path / name).mkdir()
            registry.add(tmp_path / name)

        assert registry.list_names() == ["alpha", "mid", "zeta"]
        assert registry.list_names() == registry.list_names()


class TestPersistence:
    """Test the on-disk manifest."""

    def test_survives_new_instance(
        self, storage_dir: Path, project_dir: Path
    ) -> None:
        """Test entries are read back by a fresh registry."""
        EntryRegistry(storage_dir).add(project_dir)

        assert EntryRegistry(storage_dir).list_names() == ["project"]

    def test_corrupted_manifest(self, registry: EntryRegistry) -> None:
        """Test an unparsable manifest raises ManifestError."""
        registry.manifest_file.write_text("invalid json {")

        with pytest.raises(ManifestError):
            registry.list_names()

    def test_schema_violation(self, registry: EntryRegistry) -> None:
        """Test a manifest with the wrong shape raises ManifestError."""
        registry.manifest_file.write_bytes(
            orjson.dumps({"version": 1, "entries": {"x": {"root": 3}}})
        )

        with pytest.raises(ManifestError):
            registry.get("x")


class TestRemove:
    """Test removing entries."""

    def test_remove_deletes_store(
        self, registry: EntryRegistry, project_dir: Path, storage_dir: Path
    ) -> None:
        """Test removal drops the record and the snapshot store."""
        registry.add(project_dir)
        entry_dir = Paths.entry_dir(storage_dir, "project")
        (entry_dir / "snapshots").mkdir(parents=True)
        (entry_dir / "metadata.json").write_text("{}")

        registry.remove("project")

        assert registry.list_names() == []
        assert not entry_dir.exists()
        assert list(Paths.entries_dir(storage_dir).iterdir()) == []
        assert project_dir.exists()

    def test_remove_unknown(self, registry: EntryRegistry) -> None:
        """Test removing an unknown name raises NotFoundError."""
        with pytest.raises(NotFoundError):
            registry.remove("ghost")

    def test_remove_rolls_back_when_manifest_write_fails(
        self, registry: EntryRegistry, project_dir: Path, storage_dir: Path
    ) -> None:
        """Test the snapshot store is put back if the record survives."""
        registry.add(project_dir)
        entry_dir = Paths.entry_dir(storage_dir, "project")
        entry_dir.mkdir(parents=True)
        (entry_dir / "metadata.json").write_text("{}")

        with patch(
            "save_vault.core.registry.write_json_atomic",
            side_effect=OSError("disk full"),
        ):
            with pytest.raises(IOFailureError):
                registry.remove("project")

        assert registry.list_names() == ["project"]
        assert (entry_dir / "metadata.json").exists()
