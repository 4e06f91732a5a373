"""Exception hierarchy for firmflash.

Catalog and manifest errors are raised while reading firmware metadata;
everything under ``FlashError`` aborts a flash run.
"""

from pathlib import Path
from typing import Any


class FirmflashError(Exception):
    """Base class for all firmflash errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class ConfigError(FirmflashError):
    """Raised when the user configuration cannot be loaded."""


class CatalogNotFoundError(FirmflashError):
    """Raised when none of the candidate firmware catalog roots exist."""

    def __init__(self, candidates: list[Path]) -> None:
        listed = ", ".join(str(c) for c in candidates) or "<none>"
        super().__init__(
            f"Firmware directory not found (searched: {listed})",
            candidates=[str(c) for c in candidates],
        )
        self.candidates = candidates


class ManifestParseError(FirmflashError):
    """Raised when a manifest file is unreadable or fails validation."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Invalid manifest {path}: {reason}", path=str(path))
        self.path = Path(path)
        self.reason = reason


class FlashError(FirmflashError):
    """Base class for errors that abort a flash run."""


class FirmwareFileNotFoundError(FlashError, FileNotFoundError):
    """Raised when the manifest or a firmware binary is missing."""

    def __init__(self, path: Path, kind: str = "Firmware file") -> None:
        FlashError.__init__(self, f"{kind} not found: {path}", path=str(path))
        self.filename = str(path)


class IntegrityMismatchError(FlashError):
    """Raised when a firmware binary does not match its expected digest."""

    def __init__(self, path: Path, expected: str, actual: str) -> None:
        super().__init__(
            f"SHA256 mismatch for {path}: expected {expected}, got {actual}",
            path=str(path),
        )
        self.path = path
        self.expected = expected
        self.actual = actual


class ToolNotFoundError(FlashError):
    """Raised when the external flashing executable is not on the search path."""

    def __init__(self, tool: str) -> None:
        super().__init__(
            f"Flashing tool '{tool}' not found; make sure it is installed and on PATH",
            tool=tool,
        )
        self.tool = tool


class ToolExecutionError(FlashError):
    """Raised when the flashing tool exits with a non-zero status.

    The captured output is kept verbatim on ``stdout`` and ``stderr``.
    """

    def __init__(self, tool: str, returncode: int, stdout: str, stderr: str) -> None:
        super().__init__(
            f"{tool} failed with exit code {returncode}:\n"
            f"STDERR: {stderr}\nSTDOUT: {stdout}",
            tool=tool,
            returncode=returncode,
        )
        self.tool = tool
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class EventDeliveryError(FlashError):
    """Raised when a must-succeed event could not be delivered to the sink."""

    def __init__(self, event: str, cause: Exception) -> None:
        super().__init__(f"Failed to emit {event}: {cause}", event=event)
        self.event = event


__all__ = [
    "CatalogNotFoundError",
    "ConfigError",
    "EventDeliveryError",
    "FirmflashError",
    "FirmwareFileNotFoundError",
    "FlashError",
    "IntegrityMismatchError",
    "ManifestParseError",
    "ToolExecutionError",
    "ToolNotFoundError",
]
