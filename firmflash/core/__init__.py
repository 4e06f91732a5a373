from .errors import (
    CatalogNotFoundError,
    ConfigError,
    EventDeliveryError,
    FirmflashError,
    FirmwareFileNotFoundError,
    FlashError,
    IntegrityMismatchError,
    ManifestParseError,
    ToolExecutionError,
    ToolNotFoundError,
)
from .logging import setup_logging


__all__ = [
    "setup_logging",
    "FirmflashError",
    "ConfigError",
    "CatalogNotFoundError",
    "ManifestParseError",
    "FlashError",
    "FirmwareFileNotFoundError",
    "IntegrityMismatchError",
    "ToolNotFoundError",
    "ToolExecutionError",
    "EventDeliveryError",
]
