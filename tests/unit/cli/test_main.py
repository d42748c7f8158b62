"""Unit tests for the top-level CLI application."""

import logging

from rich.logging import RichHandler
from treefs import __version__
from treefs.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


class TestGlobalOptions:
    """Tests for options handled by the main callback."""

    def test_version(self) -> None:
        """--version prints the version and exits cleanly."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"treefs version {__version__}" in result.stdout

    def test_help_lists_commands(self) -> None:
        """Every command is registered."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for name in ("ls", "walk", "digest", "copy", "move", "delete", "zip", "unzip"):
            assert name in result.stdout
        assert "audit" in result.stdout
        assert "config" in result.stdout

    def test_verbose_enables_debug_logging(self, isolated_config) -> None:
        """--verbose routes debug logging through Rich."""
        root = logging.getLogger()
        level = root.level
        try:
            result = runner.invoke(app, ["--verbose", "config", "path"])

            assert result.exit_code == 0
            assert any(isinstance(h, RichHandler) for h in root.handlers)
            assert root.level == logging.DEBUG
        finally:
            for handler in [h for h in root.handlers if isinstance(h, RichHandler)]:
                root.removeHandler(handler)
            root.setLevel(level)
