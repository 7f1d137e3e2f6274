# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Identifier, digest and path guards for third-party supplied content."""

from __future__ import annotations

import posixpath
import re
from pathlib import Path
from typing import Final

MAX_IDENTIFIER_LENGTH: Final[int] = 64

_SLUG_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-z0-9][a-z0-9-]*$")
_UUID_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
_HEX64_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[0-9a-fA-F]{64}$")
_HEX_COLOR_PATTERN: Final[re.Pattern[str]] = re.compile(r"^#[0-9a-fA-F]{6}$")


def is_valid_slug_or_publisher(value: object) -> bool:
    """Return ``True`` for URL-friendly publisher or slug identifiers.

    Identifiers are 1-64 characters of lowercase letters, digits and hyphens
    and must not start with a hyphen.
    """

    if not isinstance(value, str):
        return False
    if not value or len(value) > MAX_IDENTIFIER_LENGTH:
        return False
    return _SLUG_PATTERN.fullmatch(value) is not None


def normalize_pack_id(pack_id: object) -> str:
    """Return the identity key for case-insensitive packId comparisons.

    The key is only used to compare identifiers (duplicate detection,
    catalog/disk reconciliation). Never display or store it.
    """

    if not isinstance(pack_id, str):
        return ""
    return pack_id.strip().lower()


def expected_pack_id(publisher: str, slug: str) -> str:
    return f"{publisher}.{slug}"


def is_uuid(value: object) -> bool:
    """Return ``True`` for canonical RFC 4122 UUID text (versions 1-5)."""

    if not isinstance(value, str):
        return False
    return _UUID_PATTERN.fullmatch(value.strip()) is not None


def is_hex64(value: object) -> bool:
    """Return ``True`` when ``value`` is a 64 character hex digest (any case)."""

    return isinstance(value, str) and _HEX64_PATTERN.fullmatch(value) is not None


def is_hex_color(value: object) -> bool:
    """Return ``True`` for ``#rrggbb`` colour strings."""

    return isinstance(value, str) and _HEX_COLOR_PATTERN.fullmatch(value) is not None


def is_safe_relative_path(relative: object) -> bool:
    """Return ``True`` when ``relative`` cannot escape its base directory.

    Manifests are contributed by third parties, so any reference that could
    resolve outside the version directory is rejected: empty values, null
    bytes, backslashes, absolute paths, and paths whose POSIX-normalised form
    is ``.``, starts with ``..`` or contains a ``..`` segment.

    Args:
        relative: Candidate forward-slash relative path.

    Returns:
        bool: ``True`` when the path is safe to join onto a version directory.
    """

    if not isinstance(relative, str):
        return False
    raw = relative.strip()
    if not raw:
        return False
    if "\x00" in raw or "\\" in raw:
        return False
    if raw.startswith("/") or _has_drive_prefix(raw):
        return False
    normalized = posixpath.normpath(raw)
    if normalized == "." or normalized.startswith(".."):
        return False
    if normalized.startswith("/"):
        return False
    return ".." not in normalized.split("/")


def is_plain_name(name: object) -> bool:
    """Return ``True`` for a single safe path segment, such as a pack or version directory name."""

    return is_safe_relative_path(name) and "/" not in str(name).strip()


def resolves_within(path: Path, root: Path) -> bool:
    """Return ``True`` when ``path`` stays under ``root`` after symlinks are resolved.

    Paths that cannot be resolved, such as symlink loops, count as outside.
    """

    try:
        return path.resolve().is_relative_to(root.resolve())
    except (OSError, RuntimeError):
        return False


def _has_drive_prefix(raw: str) -> bool:
    return len(raw) >= 2 and raw[1] == ":" and raw[0].isalpha()


__all__ = [
    "MAX_IDENTIFIER_LENGTH",
    "expected_pack_id",
    "is_hex64",
    "is_hex_color",
    "is_plain_name",
    "is_safe_relative_path",
    "is_uuid",
    "is_valid_slug_or_publisher",
    "normalize_pack_id",
    "resolves_within",
]
