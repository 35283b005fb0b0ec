"""User configuration file loading."""

import logging
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".config" / "video-duplicate-finder.toml"
CONFIG_SECTION = "dupefind"


class UserConfig(BaseModel):
    """Settings read from the [dupefind] section of the user config file."""

    default_paths: list[Path] = Field(default_factory=list, description="Paths used with --default")
    paths: list[Path] = Field(default_factory=list, description="Paths used when none are given")
    extensions: list[str] = Field(default_factory=list, description="Extra file extensions")
    patterns: list[str] = Field(default_factory=list, description="Identifier regex patterns")
    dryrun: bool = False
    move_files: bool = False
    print_only: bool = False
    recurse: bool = False
    verbose: bool = False

    @classmethod
    def from_toml_str(cls, toml_str: str) -> "UserConfig":
        """
        Parse configuration from a TOML string.

        Other sections are ignored.

        Raises:
            ConfigurationError: If the string is not valid TOML or has invalid values
        """
        try:
            data = tomllib.loads(toml_str)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Failed to parse config: {e}") from e

        try:
            return cls.model_validate(data.get(CONFIG_SECTION, {}))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid [{CONFIG_SECTION}] config: {e}") from e

    @classmethod
    def load(cls, path: Path | None = None) -> "UserConfig":
        """
        Read the user config file if it exists, otherwise return defaults.

        Args:
            path: Config file path, defaults to CONFIG_PATH

        Raises:
            ConfigurationError: If the file exists but cannot be read or parsed
        """
        path = path or CONFIG_PATH
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug(f"No config file at {path}")
            return cls()
        except OSError as e:
            raise ConfigurationError(f"Failed to read config file {path}: {e}") from e

        try:
            return cls.from_toml_str(content)
        except ConfigurationError as e:
            raise ConfigurationError(f"Failed to parse config file {path}:\n{e}") from e
