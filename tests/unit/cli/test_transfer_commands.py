"""Unit tests for the copy, move and delete commands."""

import errno
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from treefs.cli.main import app
from treefs.filesystem.path import FsPath
from treefs.operations.digest import digest
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture(autouse=True)
def _no_user_config(isolated_config: Path) -> None:
    """Keep the user's real settings out of CLI tests."""


class TestCopy:
    """Tests for treefs copy."""

    def test_copies_tree(self, sample_tree: FsPath, tmp_path: Path) -> None:
        """A tree is copied and success is reported."""
        target = tmp_path / "copy"

        result = runner.invoke(app, ["copy", sample_tree.path_str, str(target)])

        assert result.exit_code == 0
        assert "Copied" in result.stdout
        assert digest(FsPath(target)) == digest(sample_tree)

    def test_existing_target_fails(self, sample_tree: FsPath, tmp_path: Path) -> None:
        """An existing target file fails without --overwrite."""
        target = tmp_path / "b.txt"
        target.write_text("old")

        result = runner.invoke(app, ["copy", (sample_tree / "b.txt").path_str, str(target)])

        assert result.exit_code == 1
        assert target.read_text() == "old"

    def test_overwrite(self, sample_tree: FsPath, tmp_path: Path) -> None:
        """--overwrite replaces the target."""
        target = tmp_path / "b.txt"
        target.write_text("old")

        result = runner.invoke(
            app, ["copy", (sample_tree / "b.txt").path_str, str(target), "--overwrite"]
        )

        assert result.exit_code == 0
        assert target.read_text() == "bye"

    def test_quiet_suppresses_success(self, sample_tree: FsPath, tmp_path: Path) -> None:
        """--quiet hides the success message."""
        result = runner.invoke(
            app, ["--quiet", "copy", sample_tree.path_str, str(tmp_path / "copy")]
        )

        assert result.exit_code == 0
        assert "Copied" not in result.stdout


class TestMove:
    """Tests for treefs move."""

    def test_moves_tree(self, sample_tree: FsPath, tmp_path: Path) -> None:
        """The source disappears and the destination holds the content."""
        target = tmp_path / "moved"

        result = runner.invoke(app, ["move", sample_tree.path_str, str(target)])

        assert result.exit_code == 0
        assert not sample_tree.exists()
        assert (target / "a" / "x.txt").read_text() == "hi"

    def test_existing_destination_fails(self, sample_tree: FsPath) -> None:
        """Moving onto an existing path fails without --overwrite."""
        result = runner.invoke(
            app, ["move", (sample_tree / "b.txt").path_str, (sample_tree / "a").path_str]
        )

        assert result.exit_code == 1
        assert (sample_tree / "b.txt").exists()


class TestDelete:
    """Tests for treefs delete."""

    def test_delete_with_yes(self, sample_tree: FsPath) -> None:
        """--yes deletes without prompting."""
        result = runner.invoke(app, ["delete", sample_tree.path_str, "--yes"])

        assert result.exit_code == 0
        assert "Deleted" in result.stdout
        assert not sample_tree.exists()

    def test_confirmation_declined(self, sample_tree: FsPath) -> None:
        """Answering no keeps the tree."""
        result = runner.invoke(app, ["delete", sample_tree.path_str], input="n\n")

        assert result.exit_code == 0
        assert "Aborted" in result.stdout
        assert sample_tree.exists()

    def test_confirmation_accepted(self, sample_tree: FsPath) -> None:
        """Answering yes deletes the tree."""
        result = runner.invoke(app, ["delete", sample_tree.path_str], input="y\n")

        assert result.exit_code == 0
        assert not sample_tree.exists()

    def test_missing_path(self, tmp_path: Path) -> None:
        """Deleting a missing path fails with exit code 1."""
        result = runner.invoke(app, ["delete", str(tmp_path / "missing"), "-y"])

        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_swallow_reports_leftovers(self, sample_tree: FsPath) -> None:
        """With --swallow, undeletable entries still produce exit code 1."""
        real_unlink = os.unlink
        blocked = (sample_tree / "b.txt").path_str

        def flaky_unlink(path: str) -> None:
            if path == blocked:
                raise PermissionError(errno.EACCES, "Permission denied", path)
            real_unlink(path)

        with patch("treefs.operations.delete.os.unlink", side_effect=flaky_unlink):
            result = runner.invoke(app, ["delete", sample_tree.path_str, "-y", "--swallow"])

        assert result.exit_code == 1
        assert "could not be deleted" in result.output
        assert (sample_tree / "b.txt").exists()
        assert not (sample_tree / "a").exists()

    def test_failure_without_swallow(self, sample_tree: FsPath) -> None:
        """Without --swallow the first failure aborts with exit code 1."""
        with patch(
            "treefs.operations.delete.os.unlink",
            side_effect=PermissionError(errno.EACCES, "Permission denied"),
        ):
            result = runner.invoke(app, ["delete", sample_tree.path_str, "-y"])

        assert result.exit_code == 1
        assert sample_tree.exists()
