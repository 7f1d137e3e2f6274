# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""SHA-256 digest helpers for manifest file references."""

from __future__ import annotations

import hashlib
from enum import Enum
from pathlib import Path
from typing import Final

_CHUNK_SIZE: Final[int] = 1024 * 1024


class DigestStatus(str, Enum):
    """Outcome of comparing a file against its declared digest."""

    MATCH = "match"
    MISMATCH = "mismatch"
    MISSING = "missing"


def digest_of(path: Path) -> str:
    """Calculate the SHA-256 digest of the file at ``path``.

    Args:
        path: Regular file whose full content is hashed.

    Returns:
        str: Lowercase hex-encoded SHA-256 digest.

    Raises:
        OSError: If the file cannot be read.
    """
    hasher = hashlib.sha256()
    with path.open("rb") as stream:
        for chunk in iter(lambda: stream.read(_CHUNK_SIZE), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def check_digest(path: Path, expected: str) -> DigestStatus:
    """Compare the digest of ``path`` with ``expected`` case-insensitively.

    A missing path or a path that is not a regular file yields
    :attr:`DigestStatus.MISSING`, never :attr:`DigestStatus.MISMATCH`.

    Raises:
        OSError: If the file exists but cannot be read.
    """
    if not path.is_file():
        return DigestStatus.MISSING
    if digest_of(path) == expected.strip().lower():
        return DigestStatus.MATCH
    return DigestStatus.MISMATCH


def verify_digest(path: Path, expected: str) -> bool:
    """Return ``True`` when ``path`` exists and its digest equals ``expected``."""

    return check_digest(path, expected) is DigestStatus.MATCH


__all__ = ["DigestStatus", "check_digest", "digest_of", "verify_digest"]
