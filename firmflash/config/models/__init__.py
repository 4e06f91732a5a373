"""Configuration models."""

from .user import UserConfigData


__all__ = ["UserConfigData"]
