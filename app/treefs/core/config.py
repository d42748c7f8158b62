"""User settings for treefs.

Settings provide the defaults the CLI uses for digesting, archiving,
walking and deleting. They are stored in ~/.config/treefs/config.toml; a
missing file means all defaults.
"""

import hashlib
import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from treefs.core.errors import ConfigError, ConfigNotFoundError, ConfigParseError
from treefs.core.paths import get_config_path

logger = logging.getLogger(__name__)


class TreeFsSettings(BaseModel):
    """Configuration for treefs operations.

    Attributes:
        digest_algorithm: Default hash algorithm for digests and checksums.
        compression_level: Default ZIP compression level (-1 = library default).
        follow_links: Whether walks descend through symbolic links.
        buffer_size: Chunk size in bytes when streaming file content.
        swallow_delete_errors: Whether deletes ignore per-entry I/O failures.
    """

    model_config = ConfigDict(extra="forbid")

    digest_algorithm: Annotated[
        str,
        Field(description="Hash algorithm name, e.g. MD5 or SHA-256"),
    ] = "MD5"
    compression_level: Annotated[
        int,
        Field(ge=-1, le=9, description="ZIP compression level (-1 to 9)"),
    ] = -1
    follow_links: Annotated[
        bool,
        Field(description="Descend into symbolic links while walking"),
    ] = False
    buffer_size: Annotated[
        int,
        Field(ge=1024, le=16 * 1024 * 1024, description="Streaming buffer size in bytes"),
    ] = 65536
    swallow_delete_errors: Annotated[
        bool,
        Field(description="Ignore per-entry I/O failures while deleting"),
    ] = False

    @field_validator("digest_algorithm")
    @classmethod
    def validate_algorithm(cls, v: str) -> str:
        """Reject algorithm names hashlib cannot provide."""
        lowered = v.strip().lower()
        candidates = {lowered, lowered.replace("-", ""), lowered.replace("-", "_")}
        if not candidates & hashlib.algorithms_available:
            msg = f"unknown digest algorithm '{v}'"
            raise ValueError(msg)
        return v.strip()


def load_settings(path: Path | None = None) -> TreeFsSettings:
    """Load settings from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated TreeFsSettings object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return TreeFsSettings.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_settings_or_default(path: Path | None = None) -> TreeFsSettings:
    """Load settings, falling back to defaults when no file exists.

    Raises:
        ConfigParseError: If the file exists but is not valid TOML.
        ConfigError: If the file exists but doesn't match the schema.
    """
    try:
        return load_settings(path)
    except ConfigNotFoundError:
        logger.debug("No config file found, using default settings")
        return TreeFsSettings()


def save_settings(settings: TreeFsSettings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        settings: The settings to save.
        path: Path to save to. If None, uses the default config path.

    Returns:
        Path where the settings were saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = settings.model_dump()

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
