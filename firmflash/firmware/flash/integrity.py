"""Content digest verification for firmware binaries."""

import hashlib
from pathlib import Path

from firmflash.core.errors import IntegrityMismatchError


_CHUNK_SIZE = 1024 * 1024


def calculate_sha256(file_path: Path) -> str:
    """Return the lowercase hex SHA-256 digest of a file's contents."""
    digest = hashlib.sha256()
    with file_path.open("rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def verify_file_integrity(file_path: Path, expected_sha256: str | None) -> None:
    """Compare a file against its expected digest, case-insensitively.

    Does nothing when no digest is expected.

    Raises:
        IntegrityMismatchError: If the digests differ
    """
    if not expected_sha256:
        return
    actual = calculate_sha256(file_path)
    if actual.lower() != expected_sha256.strip().lower():
        raise IntegrityMismatchError(file_path, expected_sha256, actual)
