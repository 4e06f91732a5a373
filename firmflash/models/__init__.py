"""Shared model base classes."""

from .base import FirmflashBaseModel, FrozenModel


__all__ = ["FirmflashBaseModel", "FrozenModel"]
