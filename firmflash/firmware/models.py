"""Firmware domain models."""

import re
from enum import Enum
from pathlib import Path

from pydantic import Field, field_validator, model_validator

from firmflash.models.base import FirmflashBaseModel, FrozenModel


LITTLEFS_TAG = "littlefs"

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")


def normalize_offset(offset: str) -> str:
    """Return the canonical ``0x``-prefixed form of a hex flash offset.

    The prefix is optional on input; digit case is preserved. Normalizing an
    already normalized offset returns it unchanged.

    Raises:
        ValueError: If the offset contains no hex digits or non-hex characters
    """
    digits = offset.strip()
    if digits[:2] in ("0x", "0X"):
        digits = digits[2:]
    if not _HEX_DIGITS.fullmatch(digits):
        raise ValueError(f"Invalid hex offset: {offset!r}")
    return f"0x{digits}"


class FlashStage(str, Enum):
    """Named phase of a flash run."""

    PREPARING = "preparing"
    VERIFYING = "verifying"
    CONNECTING = "connecting"
    FLASHING = "flashing"
    COMPLETED = "completed"
    FAILED = "failed"


class FlashFile(FirmflashBaseModel):
    """One binary payload of a manifest and its target flash offset."""

    offset: str
    path: str = Field(min_length=1)
    fs: str | None = None
    sha256: str | None = None

    @field_validator("offset")
    @classmethod
    def validate_offset(cls, v: str) -> str:
        """Reject offsets that are not hex, keeping the original text."""
        normalize_offset(v)
        return v

    @property
    def normalized_offset(self) -> str:
        """Offset in the form passed to the flashing tool."""
        return normalize_offset(self.offset)

    @property
    def is_littlefs(self) -> bool:
        """Whether this entry is an optional littlefs filesystem image."""
        return self.fs == LITTLEFS_TAG


class FirmwareManifest(FirmflashBaseModel):
    """Declarative description of one firmware version's image set."""

    name: str = Field(min_length=1)
    version: str
    env: str
    chip: str = Field(min_length=1)
    flash_size: str
    baud: int = Field(gt=0, strict=True)
    flash_mode: str
    flash_freq: str
    erase_flash: bool = Field(strict=True)
    files: list[FlashFile]

    def select_files(self, include_littlefs: bool) -> list[FlashFile]:
        """Files to flash, in manifest order.

        littlefs images are dropped unless ``include_littlefs`` is set; every
        other entry is always kept.
        """
        return [f for f in self.files if include_littlefs or not f.is_littlefs]


class FirmwareInfo(FrozenModel):
    """Catalog summary of one firmware version directory."""

    env: str
    version: str
    name: str
    chip: str
    flash_size: str
    path: Path


class FlashRequest(FirmflashBaseModel):
    """Caller's description of a single flash run."""

    port: str = Field(min_length=1)
    firmware_path: Path
    include_littlefs: bool = False
    custom_baud: int | None = Field(default=None, gt=0)


class FlashProgress(FrozenModel):
    """One progress event of a flash run."""

    stage: FlashStage
    current: int = Field(ge=0)
    total: int = Field(ge=0)
    percentage: float = Field(ge=0.0, le=100.0)
    message: str = ""

    @model_validator(mode="after")
    def validate_position(self) -> "FlashProgress":
        """Ensure the file position never exceeds the file count."""
        if self.current > self.total:
            raise ValueError(
                f"current ({self.current}) must not exceed total ({self.total})"
            )
        return self


class FlashComplete(FrozenModel):
    """Terminal event of a flash run, emitted exactly once."""

    success: bool
    message: str


__all__ = [
    "LITTLEFS_TAG",
    "FirmwareInfo",
    "FirmwareManifest",
    "FlashComplete",
    "FlashFile",
    "FlashProgress",
    "FlashRequest",
    "FlashStage",
    "normalize_offset",
]
