"""Pydantic base models shared by manifests, requests and events."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class FirmflashBaseModel(BaseModel):
    """Base model class for all firmflash Pydantic models.

    Unknown fields are ignored so that manifests written by newer tooling
    still load, and string fields are stripped of surrounding whitespace.
    """

    model_config = ConfigDict(
        extra="ignore",
        str_strip_whitespace=True,
        use_enum_values=True,
        validate_assignment=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible dictionary of every field, used for event payloads."""
        return self.model_dump(by_alias=True, exclude_unset=False, mode="json")


class FrozenModel(FirmflashBaseModel):
    """Immutable variant for read-only values such as catalog entries and events."""

    model_config = ConfigDict(
        extra="ignore",
        str_strip_whitespace=True,
        use_enum_values=True,
        frozen=True,
    )
