"""Tests for restoring payloads over live paths."""

from pathlib import Path
from unittest.mock import patch

import pytest

from save_vault.core.snapshot.restore import restore_path, restore_payload
from save_vault.exceptions import IOFailureError


def _hidden_leftovers(directory: Path) -> list[Path]:
    return [p for p in directory.iterdir() if p.name.startswith(".")]


class TestRestorePath:
    """Test the per-path swap."""

    def test_replaces_directory(self, tmp_path: Path) -> None:
        """Test a directory is replaced wholesale, extra files vanish."""
        source = tmp_path / "payload"
        source.mkdir()
        (source / "keep.txt").write_text("snapshot")
        target = tmp_path / "live"
        target.mkdir()
        (target / "keep.txt").write_text("current")
        (target / "new.txt").write_text("created after snapshot")

        restore_path(source, target)

        assert (target / "keep.txt").read_text() == "snapshot"
        assert not (target / "new.txt").exists()
        assert _hidden_leftovers(tmp_path) == []

    def test_replaces_file(self, tmp_path: Path) -> None:
        """Test a single file is swapped in place."""
        source = tmp_path / "stored.ini"
        source.write_text("old settings")
        target = tmp_path / "live" / "settings.ini"
        target.parent.mkdir()
        target.write_text("new settings")

        restore_path(source, target)

        assert target.read_text() == "old settings"

    def test_creates_missing_target(self, tmp_path: Path) -> None:
        """Test a deleted target is recreated with its parents."""
        source = tmp_path / "stored.ini"
        source.write_text("content")
        target = tmp_path / "gone" / "deeper" / "settings.ini"

        restore_path(source, target)

        assert target.read_text() == "content"

    def test_failed_swap_keeps_current(self, tmp_path: Path) -> None:
        """Test the live item is put back when the swap fails."""
        source = tmp_path / "payload"
        source.mkdir()
        (source / "a.txt").write_text("snapshot")
        target = tmp_path / "live"
        target.mkdir()
        (target / "a.txt").write_text("current")

        original_rename = Path.rename

        def flaky_rename(self: Path, destination: Path) -> Path:
            if self.name == "live" and self.parent.name != "live":
                if Path(destination) == target:
                    raise OSError("simulated failure")
            return original_rename(self, destination)

        with patch.object(Path, "rename", flaky_rename):
            with pytest.raises(IOFailureError):
                restore_path(source, target)

        assert (target / "a.txt").read_text() == "current"
        assert _hidden_leftovers(tmp_path) == []


class TestRestorePayload:
    """Test restoring a whole payload."""

    def test_restores_root_and_aux(self, tmp_path: Path) -> None:
        """Test aux items go back to their recorded source paths."""
        payload = tmp_path / "payload"
        (payload / "root").mkdir(parents=True)
        (payload / "root" / "save.dat").write_text("v1")
        (payload / "files" / "0").mkdir(parents=True)
        (payload / "files" / "0" / "settings.ini").write_text("aux v1")

        root = tmp_path / "live"
        root.mkdir()
        (root / "save.dat").write_text("v2")
        aux = tmp_path / "elsewhere" / "settings.ini"

        restored = restore_payload(
            payload,
            {
                "root": str(root),
                "files": [
                    {
                        "source": str(aux),
                        "stored": "files/0/settings.ini",
                        "kind": "file",
                    }
                ],
            },
            root,
        )

        assert restored == [root, aux]
        assert (root / "save.dat").read_text() == "v1"
        assert aux.read_text() == "aux v1"
