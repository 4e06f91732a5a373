"""firmflash - serial firmware flashing orchestrator."""

from importlib.metadata import PackageNotFoundError, distribution

from .firmware.flash import FlashService, create_flash_service
from .firmware.models import (
    FirmwareInfo,
    FirmwareManifest,
    FlashProgress,
    FlashRequest,
)


try:
    __version__ = distribution(__package__ or "firmflash").version
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "FirmwareInfo",
    "FirmwareManifest",
    "FlashProgress",
    "FlashRequest",
    "FlashService",
    "create_flash_service",
    "__version__",
]
