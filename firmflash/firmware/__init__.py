"""Firmware domain: manifests, catalog discovery and flashing."""

from .catalog import default_catalog_candidates, discover_catalog, scan_catalog
from .manifest import MANIFEST_FILENAME, load_manifest
from .models import (
    FirmwareInfo,
    FirmwareManifest,
    FlashComplete,
    FlashFile,
    FlashProgress,
    FlashRequest,
    FlashStage,
    normalize_offset,
)


__all__ = [
    "MANIFEST_FILENAME",
    "FirmwareInfo",
    "FirmwareManifest",
    "FlashComplete",
    "FlashFile",
    "FlashProgress",
    "FlashRequest",
    "FlashStage",
    "default_catalog_candidates",
    "discover_catalog",
    "load_manifest",
    "normalize_offset",
    "scan_catalog",
]
