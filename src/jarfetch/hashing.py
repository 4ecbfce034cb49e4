"""SHA-1 helpers for artifact verification."""

from __future__ import annotations

import hashlib
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

SHA1_HEX_LENGTH = 40

_SHA1_PATTERN = re.compile(r"[0-9a-f]{40}")


def compute_file_sha1(filepath: Path, *, chunk_size: int = 65536) -> str:
    """Compute SHA-1 hash of a file.

    Args:
        filepath: Path to file.
        chunk_size: Bytes per read.

    Returns:
        Lowercase hex-encoded SHA-1 hash (40 chars).

    Raises:
        FileNotFoundError: If file doesn't exist.
        OSError: If file can't be read.
    """
    hasher = hashlib.sha1()  # noqa: S324 - digest algorithm fixed by the catalog
    with filepath.open("rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def normalize_digest(value: str) -> str:
    """Return value as a lowercase SHA-1 hex digest.

    Raises:
        ValueError: If value is not 40 hex characters.
    """
    digest = value.strip().lower()
    if not _SHA1_PATTERN.fullmatch(digest):
        msg = f"Not a SHA-1 hex digest: {value!r}"
        raise ValueError(msg)
    return digest


def digests_match(expected: str, actual: str) -> bool:
    """Compare two hex digests, ignoring case only."""
    return expected.strip().lower() == actual.strip().lower()
