"""User configuration models."""

from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class UserConfigData(BaseSettings):
    """User configuration data model with automatic environment variable support.

    Precedence order (highest to lowest):
    1. Environment variables (highest)
    2. Constructor arguments (file data)
    3. .env file
    4. Default values (lowest)
    """

    model_config = SettingsConfigDict(
        env_prefix="FIRMFLASH_",
        env_nested_delimiter="__",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Return sources in priority order: env > init > dotenv > file_secret."""
        return (
            env_settings,
            init_settings,
            dotenv_settings,
            file_secret_settings,
        )

    log_level: str = Field(
        default="WARNING",
        description="Log level used when no -v/--debug flag is given",
    )

    # Stored as a comma-separated string in the environment, accessed as list[Path]
    firmware_dirs: Annotated[list[Path], NoDecode] = Field(
        default_factory=list,
        description="Firmware catalog roots searched before the built-in defaults",
    )

    flash_tool: str = Field(
        default="espflash",
        min_length=1,
        description="Name or path of the external flashing executable",
    )

    include_littlefs: bool = Field(
        default=False,
        description="Flash littlefs filesystem images unless overridden on the CLI",
    )

    progress_pattern: str | None = Field(
        default=None,
        description="Regex with one group capturing the percentage in tool output",
    )

    @field_validator("firmware_dirs", mode="before")
    @classmethod
    def decode_firmware_dirs(cls, v: Any) -> list[Path]:
        if isinstance(v, str):
            return [Path(path.strip()) for path in v.split(",") if path.strip()]
        if isinstance(v, list):
            return [Path(str(path).strip()) for path in v if str(path).strip()]
        return []

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is recognized."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        upper_v = v.strip().upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return upper_v
