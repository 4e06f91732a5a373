"""
User configuration management for firmflash.

This module handles user-specific configuration settings with multiple sources:
1. Environment variables (highest precedence)
2. Command-line provided config file
3. Config file in current directory
4. User's XDG config directory
5. Default values (lowest precedence)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from firmflash.config.models import UserConfigData
from firmflash.core.errors import ConfigError
from firmflash.core.structlog_logger import get_struct_logger


logger = get_struct_logger(__name__)


class UserConfig:
    """Manages user-specific configuration using Pydantic Settings."""

    def __init__(self, cli_config_path: str | Path | None = None) -> None:
        """Initialize the user configuration handler.

        Args:
            cli_config_path: Optional config file path provided via CLI
        """
        self._main_config_path: Path | None = None
        self._config_paths = self._generate_config_paths(cli_config_path)
        self._config = self._load_config()

    @property
    def config_path(self) -> Path | None:
        """Path of the config file that was loaded, if any."""
        return self._main_config_path

    @property
    def data(self) -> UserConfigData:
        return self._config

    def _generate_config_paths(self, cli_config_path: str | Path | None) -> list[Path]:
        """Generate a list of config paths to search in order of precedence."""
        config_paths = []

        if cli_config_path:
            config_paths.append(Path(cli_config_path).expanduser().resolve())

        config_paths.extend(
            [Path.cwd() / "firmflash.yaml", Path.cwd() / ".firmflash.yml"]
        )

        xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
        config_root = (
            Path(xdg_config_home) if xdg_config_home else Path.home() / ".config"
        )
        config_paths.extend(
            [
                config_root / "firmflash" / "config.yaml",
                config_root / "firmflash" / "config.yml",
            ]
        )
        return config_paths

    def _read_yaml(self, path: Path) -> dict[str, Any]:
        try:
            with path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Error reading config file {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid config file format: {path}")
        return data

    def _load_config(self) -> UserConfigData:
        """Load configuration from the first config file found plus environment."""
        config_data: dict[str, Any] = {}
        for path in self._config_paths:
            if path.is_file():
                config_data = self._read_yaml(path)
                self._main_config_path = path
                logger.debug("user_config_loaded", path=str(path))
                break
        else:
            logger.debug(
                "user_config_defaults",
                searched=[str(p) for p in self._config_paths],
            )

        try:
            return UserConfigData(**config_data)
        except ValidationError as e:
            source = self._main_config_path or "environment"
            raise ConfigError(f"Invalid configuration in {source}: {e}") from e


def create_user_config(cli_config_path: str | Path | None = None) -> UserConfig:
    """Create a UserConfig instance.

    Args:
        cli_config_path: Optional config file path provided via CLI

    Returns:
        Loaded UserConfig

    Raises:
        ConfigError: If the config file is unreadable or invalid
    """
    return UserConfig(cli_config_path=cli_config_path)
