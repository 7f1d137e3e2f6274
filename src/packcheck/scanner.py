# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Filesystem scanning utilities for the marketplace tree."""

from __future__ import annotations

from collections.abc import Collection, Iterable
from dataclasses import dataclass
from pathlib import Path

from .types import MANIFEST_FILENAME, PACK_METADATA_FILENAME, PACKS_DIRNAME, VERSIONS_DIRNAME


@dataclass(slots=True)
class MarketplaceScanner:
    """Scan the marketplace tree for pack, version and content files.

    All listings are sorted so that issue output is deterministic.
    """

    root: Path
    packs_dirname: str = PACKS_DIRNAME

    @property
    def packs_root(self) -> Path:
        return self.root / self.packs_dirname

    def pack_dir(self, pack_id: str) -> Path:
        return self.packs_root / pack_id

    def pack_metadata_path(self, pack_id: str) -> Path:
        return self.pack_dir(pack_id) / PACK_METADATA_FILENAME

    def versions_dir(self, pack_id: str) -> Path:
        return self.pack_dir(pack_id) / VERSIONS_DIRNAME

    def version_dir(self, pack_id: str, version: str) -> Path:
        return self.versions_dir(pack_id) / version

    def pack_directories(self) -> tuple[str, ...]:
        """Return the names of every directory directly under the packs root."""

        return _child_directories(self.packs_root)

    def disk_pack_ids(self) -> tuple[str, ...]:
        """Return pack directory names that contain a ``pack.json`` file.

        Returns:
            tuple[str, ...]: Sorted pack identifiers present on disk.
        """
        return tuple(name for name in self.pack_directories() if self.pack_metadata_path(name).is_file())

    def version_names(self, pack_id: str) -> tuple[str, ...]:
        """Return the version directory names of ``pack_id``."""

        return _child_directories(self.versions_dir(pack_id))

    def version_files(
        self,
        version_dir: Path,
        *,
        ignored_names: Collection[str] = (),
    ) -> tuple[str, ...]:
        """Return every file under ``version_dir`` as a POSIX relative path.

        The manifest itself and files whose basename is listed in
        ``ignored_names`` are excluded.

        Raises:
            OSError: If the directory tree cannot be listed.
        """
        files: list[str] = []
        for path in _walk_files(version_dir):
            relative = path.relative_to(version_dir).as_posix()
            if relative == MANIFEST_FILENAME or path.name in ignored_names:
                continue
            files.append(relative)
        return tuple(sorted(files))


def _child_directories(parent: Path) -> tuple[str, ...]:
    if not parent.is_dir():
        return ()
    return tuple(sorted(child.name for child in parent.iterdir() if child.is_dir()))


def _walk_files(root: Path) -> Iterable[Path]:
    for child in sorted(root.iterdir()):
        if child.is_dir() and not child.is_symlink():
            yield from _walk_files(child)
        elif child.is_file():
            yield child


__all__ = ["MarketplaceScanner"]
