"""Discovery of the on-disk firmware catalog.

The catalog is laid out as ``<root>/<env>/<version>/manifest.json``. Scanning
is tolerant: a version directory whose manifest fails to load is logged and
skipped, and the rest of the catalog is still returned.
"""

from collections.abc import Iterable, Sequence
from pathlib import Path

from firmflash.core.errors import CatalogNotFoundError, ManifestParseError
from firmflash.core.structlog_logger import get_struct_logger
from firmflash.firmware.manifest import MANIFEST_FILENAME, load_manifest
from firmflash.firmware.models import FirmwareInfo


logger = get_struct_logger(__name__)


def default_catalog_candidates(
    cwd: Path | None = None,
    extra: Iterable[Path] | None = None,
) -> list[Path]:
    """Build the ordered list of directories that may hold the catalog.

    Args:
        cwd: Base directory for the relative defaults (current directory if None)
        extra: User-configured directories, searched first

    Returns:
        Candidate roots in search order
    """
    base = cwd or Path.cwd()
    candidates = [Path(p).expanduser() for p in (extra or [])]
    candidates.append(base / "resources" / "firmware")
    candidates.append(base / "firmware")
    return candidates


def discover_catalog(candidates: Sequence[Path]) -> Path:
    """Return the first existing directory among ``candidates``.

    Raises:
        CatalogNotFoundError: If none of the candidates is a directory
    """
    for candidate in candidates:
        if candidate.is_dir():
            logger.debug("catalog_root_found", root=str(candidate))
            return candidate
    raise CatalogNotFoundError(list(candidates))


def _subdirectories(path: Path) -> list[Path]:
    return sorted((p for p in path.iterdir() if p.is_dir()), key=lambda p: p.name)


def scan_catalog(root: Path) -> list[FirmwareInfo]:
    """Collect a FirmwareInfo for every loadable manifest under ``root``.

    Args:
        root: Catalog root directory

    Returns:
        Catalog entries ordered by environment then version name
    """
    firmware_list: list[FirmwareInfo] = []

    for env_dir in _subdirectories(root):
        for version_dir in _subdirectories(env_dir):
            manifest_path = version_dir / MANIFEST_FILENAME
            if not manifest_path.is_file():
                continue

            try:
                manifest = load_manifest(manifest_path)
            except ManifestParseError as e:
                logger.warning(
                    "manifest_skipped", path=str(manifest_path), error=e.reason
                )
                continue

            firmware_list.append(
                FirmwareInfo(
                    env=env_dir.name,
                    version=version_dir.name,
                    name=manifest.name,
                    chip=manifest.chip,
                    flash_size=manifest.flash_size,
                    path=version_dir.resolve(),
                )
            )

    logger.info("catalog_scanned", root=str(root), entries=len(firmware_list))
    return firmware_list
