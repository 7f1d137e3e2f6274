# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for catalog index validation."""

from __future__ import annotations

from typing import Any

import pytest
from conftest import MarketplaceFactory

from packcheck.catalog import SORT_ADVISORY, catalog_sort_key, validate_catalog
from packcheck.issues import IssueReport
from packcheck.severity import IssueLevel


def _errors(report: IssueReport) -> list[str]:
    return [issue.message for issue in report.errors]


def _catalog(*entries: dict[str, Any], **overrides: Any) -> dict[str, Any]:
    document: dict[str, Any] = {"schemaVersion": 1, "generatedAt": "2025-01-01T00:00:00Z", "packs": list(entries)}
    document.update(overrides)
    return document


def test_valid_catalog_has_no_issues() -> None:
    document = _catalog(
        MarketplaceFactory.catalog_entry("acme.tools", minAppVersion="2.1.0", description="Tools"),
        MarketplaceFactory.catalog_entry("zeta.kit", "2.0.0-rc.1"),
    )
    assert validate_catalog(document, strict=True).issues == []


def test_case_insensitive_duplicate_pack_id_is_one_error() -> None:
    document = _catalog(
        MarketplaceFactory.catalog_entry("Pub.Slug", publisher="pub", slug="slug"),
        MarketplaceFactory.catalog_entry("pub.slug"),
    )
    duplicates = [message for message in _errors(validate_catalog(document)) if message.startswith("Duplicate")]
    assert duplicates == ['Duplicate packId (case-insensitive): "pub.slug" conflicts with "Pub.Slug".']


def test_root_must_be_an_object() -> None:
    assert _errors(validate_catalog([])) == ["catalog must be a JSON object."]


def test_top_level_shape() -> None:
    report = validate_catalog({"schemaVersion": "1", "packs": {}})
    assert _errors(report) == [
        "catalog.generatedAt is required.",
        "catalog.packs must be an array.",
        "catalog.schemaVersion must be a positive integer.",
    ]


def test_generated_at_must_parse() -> None:
    report = validate_catalog(_catalog(generatedAt="yesterday"))
    assert _errors(report) == ["catalog.generatedAt is not a parseable timestamp: yesterday"]


def test_entry_required_fields_and_shapes() -> None:
    entry = MarketplaceFactory.catalog_entry(tags=["ok", " "], description=7)
    del entry["displayName"]
    report = validate_catalog(_catalog(entry, "not-an-entry"))
    assert _errors(report) == [
        "catalog.packs[0].displayName is required.",
        "catalog.packs[0].description must be a string when present.",
        "catalog.packs[0].tags[1] must be a non-empty string.",
        "catalog.packs[1] must be an object.",
    ]


def test_identity_and_version_checks() -> None:
    entry = MarketplaceFactory.catalog_entry(
        "acme.tools",
        "1.0",
        publisher="Acme",
        slug="tools",
        minAppVersion="latest",
    )
    report = validate_catalog(_catalog(entry))
    assert _errors(report) == [
        "catalog.packs[0].publisher contains invalid characters: Acme",
        "catalog.packs[0].packId must equal publisher.slug (Acme.tools).",
        "catalog.packs[0].latestVersion must be valid semver (got 1.0).",
        "catalog.packs[0].minAppVersion must be valid semver (got latest).",
    ]


def test_manifest_url_must_parse() -> None:
    entry = MarketplaceFactory.catalog_entry(manifestUrl="packs/acme.tools/versions/1.0.0/manifest.v1.json")
    assert _errors(validate_catalog(_catalog(entry))) == ["catalog.packs[0].manifestUrl must be a valid URL."]


def test_manifest_url_tolerates_mirror_prefix_and_percent_encoding() -> None:
    entry = MarketplaceFactory.catalog_entry(
        "acme.tools",
        "1.0.0-rc.1",
        manifestUrl="https://mirror.example.org/cdn/v2/packs/acme.tools/versions/1.0.0%2Drc.1/manifest.v1.json",
    )
    assert validate_catalog(_catalog(entry), strict=True).issues == []


def test_manifest_url_accepts_local_file_mirror() -> None:
    entry = MarketplaceFactory.catalog_entry(
        "acme.tools",
        "1.0.0",
        manifestUrl="file:///srv/mirror/packs/acme.tools/versions/1.0.0/manifest.v1.json",
    )
    assert validate_catalog(_catalog(entry), strict=True).issues == []


@pytest.mark.parametrize(("strict", "level"), [(False, IssueLevel.INFO), (True, IssueLevel.WARN)])
def test_manifest_url_suffix_mismatch_is_advisory(strict: bool, level: IssueLevel) -> None:
    entry = MarketplaceFactory.catalog_entry(
        manifestUrl="https://cdn.example.com/packs/acme.tools/versions/0.9.0/manifest.v1.json",
    )
    report = validate_catalog(_catalog(entry), strict=strict)
    assert report.errors == []
    assert [(issue.level, issue.message) for issue in report.issues] == [
        (
            level,
            "catalog.packs[0].manifestUrl does not end with the expected path for packId/version "
            "(got /packs/acme.tools/versions/0.9.0/manifest.v1.json).",
        ),
    ]


@pytest.mark.parametrize(("strict", "level"), [(False, IssueLevel.INFO), (True, IssueLevel.WARN)])
def test_unsorted_catalog_is_advisory(strict: bool, level: IssueLevel) -> None:
    document = _catalog(MarketplaceFactory.catalog_entry("zeta.kit"), MarketplaceFactory.catalog_entry("acme.tools"))
    report = validate_catalog(document, strict=strict)
    assert [(issue.level, issue.message) for issue in report.issues] == [(level, SORT_ADVISORY)]


def test_sort_key_is_case_insensitive() -> None:
    assert sorted(["beta.b", "Alpha.a", "alpha.b"], key=catalog_sort_key) == ["Alpha.a", "alpha.b", "beta.b"]
    assert sorted(["Pub.x", "pub.x"], key=catalog_sort_key) == ["pub.x", "Pub.x"]


def test_validator_never_mutates_input() -> None:
    entry = MarketplaceFactory.catalog_entry("zeta.kit")
    document = _catalog(entry, MarketplaceFactory.catalog_entry("Zeta.Kit"))
    snapshot = repr(document)
    validate_catalog(document, strict=True)
    assert repr(document) == snapshot
