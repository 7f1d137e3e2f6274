# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Cross-document reconciliation between the catalog, pack metadata and disk."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .identifiers import is_plain_name, normalize_pack_id
from .issues import IssueReport
from .models import CatalogEntry, PackMetadata
from .scanner import MarketplaceScanner
from .semver import compare_semver, max_semver


def find_orphans(catalog_pack_ids: Iterable[str], disk_pack_ids: Iterable[str]) -> list[str]:
    """Return disk pack ids with no case-insensitive match in the catalog."""

    listed = {normalize_pack_id(pack_id) for pack_id in catalog_pack_ids}
    return [pack_id for pack_id in disk_pack_ids if normalize_pack_id(pack_id) not in listed]


def report_orphans(catalog_pack_ids: Iterable[str], disk_pack_ids: Iterable[str], report: IssueReport) -> list[str]:
    """Record one informational issue naming every delisted pack on disk.

    Staged content is legitimate, so orphans are always ``info``, strict
    mode included.
    """
    orphans = find_orphans(catalog_pack_ids, disk_pack_ids)
    if orphans:
        report.add_info(
            f"Found {len(orphans)} pack(s) on disk not present in catalog (delisted/orphan): {', '.join(orphans)}",
        )
    return orphans


def catalog_missing_on_disk(catalog_pack_ids: Iterable[str], scanner: MarketplaceScanner) -> list[str]:
    """Return catalog pack ids whose ``pack.json`` is absent on disk.

    Ids that are not a single safe directory name are never looked up and
    always count as missing.
    """
    return [
        pack_id
        for pack_id in catalog_pack_ids
        if not is_plain_name(pack_id) or not scanner.pack_metadata_path(pack_id).is_file()
    ]


def check_latest_on_disk(
    latest_version: str,
    version_names: Sequence[str],
    report: IssueReport,
    *,
    strict: bool,
) -> str | None:
    """Flag a ``latestVersion`` older than the greatest version directory.

    A pack may pin an older latest during a rollback, so the finding is
    advisory only.

    Returns:
        str | None: Greatest semver-valid version directory name, if any.
    """
    greatest = max_semver(version_names)
    if greatest is None or not latest_version:
        return greatest
    ordering = compare_semver(latest_version, greatest)
    if ordering is not None and ordering < 0:
        report.add_advisory(
            f"pack.json.latestVersion ({latest_version}) is behind the greatest version found on disk ({greatest}).",
            strict=strict,
        )
    return greatest


def check_catalog_latest(entry: CatalogEntry, metadata: PackMetadata, report: IssueReport) -> None:
    """Require the catalog entry and ``pack.json`` to agree on ``latestVersion``."""

    catalog_latest = entry.latest_version
    pack_latest = metadata.latest_version
    if catalog_latest and pack_latest and catalog_latest != pack_latest:
        report.add_error(
            f"Catalog latestVersion ({catalog_latest}) does not match pack.json latestVersion "
            f"({pack_latest}) for {entry.pack_id}.",
        )


__all__ = [
    "catalog_missing_on_disk",
    "check_catalog_latest",
    "check_latest_on_disk",
    "find_orphans",
    "report_orphans",
]
