"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest
from treefs.filesystem.path import FsPath


@pytest.fixture
def sample_tree(tmp_path: Path) -> FsPath:
    """Small tree: a/ with a/x.txt = "hi", and b.txt = "bye"."""
    root = FsPath(tmp_path / "tree")
    (root / "a").create_directories()
    (root / "a" / "x.txt").write_text("hi")
    (root / "b.txt").write_text("bye")
    return root


@pytest.fixture
def deep_tree(tmp_path: Path) -> FsPath:
    """Three-level tree: d1/d2/d3/leaf.txt plus top.txt."""
    root = FsPath(tmp_path / "deep")
    (root / "d1" / "d2" / "d3").create_directories()
    (root / "d1" / "d2" / "d3" / "leaf.txt").write_text("leaf")
    (root / "d1" / "mid.txt").write_text("mid")
    (root / "top.txt").write_text("top")
    return root


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at a temp directory and return it."""
    config_home = tmp_path / "xdg-config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    return config_home
