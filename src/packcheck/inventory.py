# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Read-only listings of catalog and on-disk pack inventory."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from .catalog import catalog_sort_key
from .errors import PackcheckError
from .identifiers import is_plain_name, is_safe_relative_path, normalize_pack_id, resolves_within
from .io import load_document, try_load_document
from .models import Catalog, FileRef, Profile, VersionManifest
from .reconcile import catalog_missing_on_disk
from .scanner import MarketplaceScanner
from .types import DEFAULT_PROFILE_FILENAME, MANIFEST_FILENAME, JSONValue

LOGGER = logging.getLogger(__name__)

STATUS_LISTED = "listed"
STATUS_ORPHAN = "delisted/orphan"
STATUS_MISSING_METADATA = "missing pack.json"


class _Row(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_json(self) -> dict[str, JSONValue]:
        return self.model_dump(mode="json", by_alias=True)


class CatalogRow(_Row):
    """Catalog listing entry."""

    pack_id: str = Field(alias="packId")
    latest_version: str = Field(alias="latestVersion")
    display_name: str = Field(alias="displayName")


class DiskRow(_Row):
    """Pack directory found on disk."""

    pack_id: str = Field(alias="packId")
    latest_version: str = Field(alias="latestVersion")
    versions: tuple[str, ...] = ()
    status: str


class DiskScan(_Row):
    """Disk packs plus catalog entries with no ``pack.json`` on disk."""

    catalog: str
    disk: tuple[DiskRow, ...] = ()
    catalog_missing_on_disk: tuple[str, ...] = Field(default=(), alias="catalogMissingOnDisk")


class PackStats(_Row):
    """Size and content counts for the latest version of one catalog pack."""

    pack_id: str = Field(alias="packId")
    latest_version: str = Field(alias="latestVersion")
    display_name: str = Field(alias="displayName")
    command_count: int = Field(default=0, alias="commandCount")
    unique_tags: int = Field(default=0, alias="uniqueTags")
    assets_count: int = Field(default=0, alias="assetsCount")
    graphs_count: int = Field(default=0, alias="graphsCount")
    profile_bytes: int = Field(default=0, alias="profileBytes")
    assets_bytes: int = Field(default=0, alias="assetsBytes")
    graphs_bytes: int = Field(default=0, alias="graphsBytes")
    total_bytes: int = Field(default=0, alias="totalBytes")
    status: str = "ok"
    error: str | None = None


def load_catalog(path: Path) -> Catalog:
    """Load the catalog at ``path`` for read-only listings.

    Raises:
        DocumentError: If the catalog is missing or not valid JSON.
        OSError: If the catalog cannot be read.
    """
    return Catalog.from_document(load_document(path))


def list_catalog(catalog: Catalog) -> list[CatalogRow]:
    """Return catalog entries sorted by packId."""

    rows = [
        CatalogRow(pack_id=entry.pack_id, latest_version=entry.latest_version, display_name=entry.display_name)
        for entry in catalog.packs
        if entry.pack_id
    ]
    return sorted(rows, key=lambda row: catalog_sort_key(row.pack_id))


def scan_disk(scanner: MarketplaceScanner, catalog_path: Path) -> DiskScan:
    """Describe every pack directory and its catalog listing status.

    A missing or unreadable catalog is treated as empty.

    Raises:
        PackcheckError: If the packs root directory does not exist.
    """
    if not scanner.packs_root.is_dir():
        raise PackcheckError(f"Missing {scanner.packs_dirname}/ directory.")
    document = try_load_document(catalog_path)
    catalog = Catalog.from_document(document)
    listed_ids = catalog.listed_pack_ids()
    listed = {normalize_pack_id(pack_id) for pack_id in listed_ids}

    rows: list[DiskRow] = []
    for name in sorted(scanner.pack_directories(), key=catalog_sort_key):
        versions = tuple(sorted(scanner.version_names(name), key=catalog_sort_key))
        metadata_path = scanner.pack_metadata_path(name)
        if not metadata_path.is_file():
            rows.append(DiskRow(pack_id=name, latest_version="-", versions=versions, status=STATUS_MISSING_METADATA))
            continue
        metadata = try_load_document(metadata_path)
        latest = metadata.get("latestVersion") if isinstance(metadata, Mapping) else None
        rows.append(
            DiskRow(
                pack_id=name,
                latest_version=latest.strip() if isinstance(latest, str) else "-",
                versions=versions,
                status=STATUS_LISTED if normalize_pack_id(name) in listed else STATUS_ORPHAN,
            ),
        )

    missing = sorted(catalog_missing_on_disk(listed_ids, scanner), key=catalog_sort_key)
    return DiskScan(catalog=str(catalog_path), disk=tuple(rows), catalog_missing_on_disk=tuple(missing))


def pack_stats(catalog: Catalog, scanner: MarketplaceScanner) -> list[PackStats]:
    """Return stats for the latest version of every catalog pack.

    A pack whose manifest or profile cannot be loaded is reported with
    ``status="error"``; the remaining packs are still measured.
    """
    rows: list[PackStats] = []
    for entry in catalog.packs:
        if not entry.pack_id or not entry.latest_version:
            continue
        try:
            rows.append(_measure(entry.pack_id, entry.latest_version, entry.display_name, scanner))
        except PackcheckError as exc:
            LOGGER.debug("stats failed for %s: %s", entry.pack_id, exc)
            rows.append(
                PackStats(
                    pack_id=entry.pack_id,
                    latest_version=entry.latest_version,
                    display_name=entry.display_name or entry.pack_id,
                    status="error",
                    error=str(exc),
                ),
            )
    return sorted(rows, key=lambda row: catalog_sort_key(row.pack_id))


def _measure(pack_id: str, version: str, display_name: str, scanner: MarketplaceScanner) -> PackStats:
    if not is_plain_name(pack_id):
        raise PackcheckError(f"Invalid pack id: {pack_id}")
    if not is_plain_name(version):
        raise PackcheckError(f"Invalid version directory name: {version}")
    version_dir = scanner.version_dir(pack_id, version)
    manifest_path = version_dir / MANIFEST_FILENAME
    document = try_load_document(manifest_path)
    if not isinstance(document, Mapping):
        raise PackcheckError(f"Missing or invalid manifest: {manifest_path}")
    manifest = VersionManifest.from_document(document)

    profile_rel = manifest.profile.file if manifest.profile is not None else DEFAULT_PROFILE_FILENAME
    profile_path = version_dir / profile_rel if _is_contained(version_dir, profile_rel) else None
    profile_document = try_load_document(profile_path) if profile_path is not None else None
    if profile_path is None or not isinstance(profile_document, list):
        raise PackcheckError(f"Missing or invalid profile: {profile_path or profile_rel}")
    profile = Profile.from_document(profile_document)

    profile_bytes = _size_of(profile_path)
    assets_bytes = sum(_ref_size(version_dir, ref) for ref in manifest.assets)
    graphs_bytes = sum(_ref_size(version_dir, graph.ref) for graph in manifest.graphs)
    return PackStats(
        pack_id=pack_id,
        latest_version=version,
        display_name=display_name or pack_id,
        command_count=len(profile_document),
        unique_tags=len(profile.unique_tags()),
        assets_count=len(manifest.assets),
        graphs_count=len(manifest.graphs),
        profile_bytes=profile_bytes,
        assets_bytes=assets_bytes,
        graphs_bytes=graphs_bytes,
        total_bytes=profile_bytes + assets_bytes + graphs_bytes,
    )


def _ref_size(version_dir: Path, ref: FileRef) -> int:
    if not _is_contained(version_dir, ref.file):
        return 0
    return _size_of(version_dir / ref.file)


def _is_contained(version_dir: Path, relative: str) -> bool:
    return is_safe_relative_path(relative) and resolves_within(version_dir / relative, version_dir)


def _size_of(path: Path) -> int:
    try:
        return path.stat().st_size
    except OSError:
        return 0


__all__ = [
    "CatalogRow",
    "DiskRow",
    "DiskScan",
    "PackStats",
    "STATUS_LISTED",
    "STATUS_MISSING_METADATA",
    "STATUS_ORPHAN",
    "list_catalog",
    "load_catalog",
    "pack_stats",
    "scan_disk",
]
