# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for catalog listing, disk scans and pack stats."""

from __future__ import annotations

import pytest
from conftest import PACK_ID, MarketplaceFactory

from packcheck.errors import DocumentMissingError, PackcheckError
from packcheck.inventory import list_catalog, load_catalog, pack_stats, scan_disk
from packcheck.scanner import MarketplaceScanner


def test_list_catalog_sorts_by_pack_id(factory: MarketplaceFactory) -> None:
    factory.write_catalog(
        [
            factory.catalog_entry("zeta.kit", "2.0.0"),
            factory.catalog_entry("Beta.kit", publisher="beta"),
            factory.catalog_entry(),
        ],
    )
    rows = list_catalog(load_catalog(factory.catalog_path))
    assert [row.to_json() for row in rows] == [
        {"packId": PACK_ID, "latestVersion": "1.0.0", "displayName": "Tools Pack"},
        {"packId": "Beta.kit", "latestVersion": "1.0.0", "displayName": "Kit Pack"},
        {"packId": "zeta.kit", "latestVersion": "2.0.0", "displayName": "Kit Pack"},
    ]


def test_load_catalog_requires_file(factory: MarketplaceFactory) -> None:
    with pytest.raises(DocumentMissingError):
        load_catalog(factory.catalog_path)


def test_scan_disk_statuses(marketplace: MarketplaceFactory) -> None:
    marketplace.add_pack("beta.kit", versions=("0.1.0", "0.2.0"))
    marketplace.version_dir("ghost.pack", "0.1.0").mkdir(parents=True)
    marketplace.write_catalog([marketplace.catalog_entry(), marketplace.catalog_entry("zeta.kit")])

    scan = scan_disk(MarketplaceScanner(marketplace.root), marketplace.catalog_path)

    assert scan.to_json() == {
        "catalog": str(marketplace.catalog_path),
        "disk": [
            {"packId": PACK_ID, "latestVersion": "1.0.0", "versions": ["1.0.0"], "status": "listed"},
            {
                "packId": "beta.kit",
                "latestVersion": "0.2.0",
                "versions": ["0.1.0", "0.2.0"],
                "status": "delisted/orphan",
            },
            {"packId": "ghost.pack", "latestVersion": "-", "versions": ["0.1.0"], "status": "missing pack.json"},
        ],
        "catalogMissingOnDisk": ["zeta.kit"],
    }


def test_scan_disk_without_catalog_marks_everything_orphan(factory: MarketplaceFactory) -> None:
    factory.add_pack()
    scan = scan_disk(MarketplaceScanner(factory.root), factory.catalog_path)
    assert [row.status for row in scan.disk] == ["delisted/orphan"]
    assert scan.catalog_missing_on_disk == ()


def test_scan_disk_requires_packs_directory(factory: MarketplaceFactory) -> None:
    with pytest.raises(PackcheckError, match="Missing packs/ directory."):
        scan_disk(MarketplaceScanner(factory.root), factory.catalog_path)


def test_pack_stats_measures_latest_version(marketplace: MarketplaceFactory) -> None:
    marketplace.write_catalog([marketplace.catalog_entry("zeta.kit"), marketplace.catalog_entry()])
    version_dir = marketplace.version_dir()
    profile_bytes = (version_dir / "profile.json").stat().st_size
    graph_bytes = sum(path.stat().st_size for path in (version_dir / "graphs").iterdir())

    rows = pack_stats(load_catalog(marketplace.catalog_path), MarketplaceScanner(marketplace.root))

    acme, zeta = rows
    assert acme.to_json() == {
        "packId": PACK_ID,
        "latestVersion": "1.0.0",
        "displayName": "Tools Pack",
        "commandCount": 2,
        "uniqueTags": 1,
        "assetsCount": 1,
        "graphsCount": 1,
        "profileBytes": profile_bytes,
        "assetsBytes": 5,
        "graphsBytes": graph_bytes,
        "totalBytes": profile_bytes + 5 + graph_bytes,
        "status": "ok",
        "error": None,
    }
    assert zeta.status == "error"
    assert zeta.error == (
        f"Missing or invalid manifest: {marketplace.version_dir('zeta.kit') / 'manifest.v1.json'}"
    )


def test_pack_stats_reports_invalid_profile(marketplace: MarketplaceFactory) -> None:
    (marketplace.version_dir() / "profile.json").write_text("{}", encoding="utf-8")
    (row,) = pack_stats(load_catalog(marketplace.catalog_path), MarketplaceScanner(marketplace.root))
    assert row.status == "error"
    assert row.error == f"Missing or invalid profile: {marketplace.version_dir() / 'profile.json'}"


def test_pack_stats_rejects_ids_that_are_not_directory_names(marketplace: MarketplaceFactory) -> None:
    marketplace.write_catalog(
        [
            marketplace.catalog_entry("../../etc"),
            marketplace.catalog_entry(),
            marketplace.catalog_entry("zeta.kit", "../1.0.0"),
        ],
    )

    escaped, acme, zeta = pack_stats(load_catalog(marketplace.catalog_path), MarketplaceScanner(marketplace.root))

    assert (escaped.status, escaped.error) == ("error", "Invalid pack id: ../../etc")
    assert acme.status == "ok"
    assert (zeta.status, zeta.error) == ("error", "Invalid version directory name: ../1.0.0")


def test_scan_disk_counts_unsafe_catalog_ids_as_missing(marketplace: MarketplaceFactory) -> None:
    marketplace.write_catalog([marketplace.catalog_entry(), marketplace.catalog_entry("../packs")])
    scan = scan_disk(MarketplaceScanner(marketplace.root), marketplace.catalog_path)
    assert scan.catalog_missing_on_disk == ("../packs",)
    assert [row.status for row in scan.disk] == ["listed"]
