"""Firmware manifest loading and validation."""

import json
from pathlib import Path

from pydantic import ValidationError

from firmflash.core.errors import ManifestParseError
from firmflash.core.structlog_logger import get_struct_logger
from firmflash.firmware.models import FirmwareManifest


logger = get_struct_logger(__name__)

MANIFEST_FILENAME = "manifest.json"


def _describe_validation_error(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        problems.append(f"{location}: {item['msg']}")
    return "; ".join(problems)


def load_manifest(path: Path) -> FirmwareManifest:
    """Read and validate a firmware manifest file.

    Required fields are never defaulted: a manifest missing ``name``,
    ``chip``, ``baud``, ``files`` or a file's ``offset``/``path`` is rejected.

    Args:
        path: Path of the manifest JSON file

    Returns:
        The validated manifest

    Raises:
        ManifestParseError: If the file cannot be read, is not JSON, or fails
            validation
    """
    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ManifestParseError(path, f"not valid UTF-8: {e}") from e
    except OSError as e:
        raise ManifestParseError(path, f"cannot read file: {e}") from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestParseError(path, f"invalid JSON: {e}") from e
    except RecursionError as e:
        raise ManifestParseError(path, "invalid JSON: nested too deeply") from e

    if not isinstance(data, dict):
        raise ManifestParseError(path, "top-level value must be a JSON object")

    try:
        manifest = FirmwareManifest.model_validate(data)
    except ValidationError as e:
        raise ManifestParseError(path, _describe_validation_error(e)) from e

    logger.debug(
        "manifest_loaded",
        path=str(path),
        name=manifest.name,
        version=manifest.version,
        files=len(manifest.files),
    )
    return manifest
