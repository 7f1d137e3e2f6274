# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared type aliases and constants for marketplace documents."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Final, TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | Sequence["JSONValue"] | Mapping[str, "JSONValue"]

CATALOG_RELATIVE_PATH: Final[str] = "catalog/index.v1.json"
PACKS_DIRNAME: Final[str] = "packs"
VERSIONS_DIRNAME: Final[str] = "versions"
PACK_METADATA_FILENAME: Final[str] = "pack.json"
MANIFEST_FILENAME: Final[str] = "manifest.v1.json"
DEFAULT_PROFILE_FILENAME: Final[str] = "profile.json"

OS_ARTIFACT_FILENAMES: Final[tuple[str, ...]] = (".DS_Store", "Thumbs.db", "desktop.ini")

__all__ = [
    "CATALOG_RELATIVE_PATH",
    "DEFAULT_PROFILE_FILENAME",
    "JSONPrimitive",
    "JSONValue",
    "MANIFEST_FILENAME",
    "OS_ARTIFACT_FILENAMES",
    "PACKS_DIRNAME",
    "PACK_METADATA_FILENAME",
    "VERSIONS_DIRNAME",
]
