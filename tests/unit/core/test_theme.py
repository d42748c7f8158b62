"""Unit tests for theme module.

Tests for theme loading, validation, and Rich theme generation.
"""

# pyright: reportPrivateUsage=false

from pathlib import Path

import pytest
import treefs.core.theme as theme_module
from rich.theme import Theme
from treefs.core.paths import get_user_theme_path
from treefs.core.theme import (
    ThemeColors,
    _load_toml_colors,
    get_bundled_theme_path,
    get_rich_theme,
    get_theme,
    load_theme,
)


class TestThemeColors:
    """Tests for ThemeColors Pydantic model."""

    def test_default_values(self) -> None:
        """ThemeColors has sensible defaults."""
        colors = ThemeColors()
        assert colors.text == "#ffffff"
        assert colors.kind_directory == "#0e8ac8"

    def test_short_hex_accepted(self) -> None:
        """Three-digit hex codes are valid."""
        assert ThemeColors(muted="#abc").muted == "#abc"

    def test_invalid_hex_no_hash(self) -> None:
        """ThemeColors rejects colors without # prefix."""
        with pytest.raises(ValueError, match="must start with '#'"):
            ThemeColors(text="ffffff")

    def test_invalid_hex_wrong_length(self) -> None:
        """ThemeColors rejects colors with wrong length."""
        with pytest.raises(ValueError, match="must be #RGB or #RRGGBB"):
            ThemeColors(kind_file="#ff")

    def test_invalid_hex_chars(self) -> None:
        """ThemeColors rejects invalid hex characters."""
        with pytest.raises(ValueError, match="invalid hex color"):
            ThemeColors(text="#gggggg")

    def test_extra_fields_forbidden(self) -> None:
        """ThemeColors rejects unknown fields."""
        with pytest.raises(ValueError):
            ThemeColors(unknown_field="#ffffff")  # type: ignore[call-arg]


class TestLoadTomlColors:
    """Tests for _load_toml_colors internal function."""

    def test_loads_valid_toml(self, tmp_path: Path) -> None:
        """Loads string colors and skips other values."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('[colors]\ntext = "#000000"\ndepth = 3\n')

        assert _load_toml_colors(theme_file) == {"text": "#000000"}

    def test_returns_none_for_missing_file(self, tmp_path: Path) -> None:
        """Returns None when file doesn't exist."""
        assert _load_toml_colors(tmp_path / "nonexistent.toml") is None

    def test_returns_none_for_invalid_toml(self, tmp_path: Path) -> None:
        """Returns None for malformed TOML."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text("not valid [ toml syntax")

        assert _load_toml_colors(theme_file) is None

    def test_returns_none_for_non_table_colors(self, tmp_path: Path) -> None:
        """A colors key that is not a table is rejected."""
        theme_file = tmp_path / "theme.toml"
        theme_file.write_text('colors = "red"\n')

        assert _load_toml_colors(theme_file) is None


class TestLoadTheme:
    """Tests for load_theme function."""

    def test_bundled_theme_is_shipped(self) -> None:
        """The bundled theme file is readable and complete."""
        colors = _load_toml_colors(Path(get_bundled_theme_path()))

        assert colors is not None
        assert set(colors) == set(ThemeColors.model_fields)

    def test_user_theme_overrides_bundled(self, isolated_config: Path) -> None:
        """A partial user theme overrides only the named colors."""
        user_path = get_user_theme_path()
        user_path.parent.mkdir(parents=True)
        user_path.write_text('[colors]\nkind_directory = "#123456"\n')

        colors = load_theme()

        assert colors.kind_directory == "#123456"
        assert colors.text == "#ffffff"

    def test_invalid_user_theme_falls_back(self, isolated_config: Path) -> None:
        """Invalid user colors fall back to defaults."""
        user_path = get_user_theme_path()
        user_path.parent.mkdir(parents=True)
        user_path.write_text('[colors]\ntext = "white"\n')

        assert load_theme() == ThemeColors()


class TestRichTheme:
    """Tests for Rich theme conversion and caching."""

    def test_styles_present(self) -> None:
        """Kind styles and the digest style are defined."""
        theme = get_rich_theme(ThemeColors())

        assert isinstance(theme, Theme)
        for name in ("kind.file", "kind.directory", "kind.symlink", "digest", "error"):
            assert name in theme.styles

    def test_get_theme_cached(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """get_theme returns the same instance on repeated calls."""
        monkeypatch.setattr(theme_module, "_cached_theme", None)

        assert get_theme() is get_theme()
