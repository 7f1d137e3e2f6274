# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Catalog index validation."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from urllib.parse import SplitResult, unquote, urlsplit

from .identifiers import expected_pack_id, is_valid_slug_or_publisher, normalize_pack_id
from .io import read_document
from .issues import IssueReport
from .models import as_sequence, optional_text_field, text_field
from .schema import SchemaRepository, default_repository, format_location
from .semver import is_semver
from .types import MANIFEST_FILENAME, PACKS_DIRNAME, VERSIONS_DIRNAME, JSONValue

LOGGER = logging.getLogger(__name__)

CATALOG_CONTEXT = "catalog"
SORT_ADVISORY = "Catalog packs are not sorted by packId. (Recommended for clean diffs.)"


def catalog_sort_key(pack_id: str) -> tuple[str, str]:
    """Return a locale-style ordering key: case-insensitive, lowercase first on ties."""

    return (pack_id.casefold(), pack_id.swapcase())


def expected_manifest_suffix(pack_id: str, version: str) -> str:
    return f"/{PACKS_DIRNAME}/{pack_id}/{VERSIONS_DIRNAME}/{version}/{MANIFEST_FILENAME}"


@dataclass(slots=True)
class CatalogValidator:
    """Validate the catalog document and every pack entry it lists."""

    strict: bool = False
    schemas: SchemaRepository = field(default_factory=default_repository)

    def validate(self, document: JSONValue, report: IssueReport | None = None) -> IssueReport:
        """Validate ``document`` and return the report holding every finding.

        Args:
            document: Parsed catalog payload.
            report: Optional report to append to; a new one is created otherwise.

        Returns:
            IssueReport: Report containing structural, identity and advisory issues.
        """
        report = report if report is not None else IssueReport()
        for message in self.schemas.structural_issues("catalog", document, context=CATALOG_CONTEXT):
            report.add_error(message)
        if not isinstance(document, Mapping):
            return report

        self._check_generated_at(document, report)
        packs = as_sequence(document.get("packs"))
        seen: dict[str, str] = {}
        for index, entry in enumerate(packs):
            if isinstance(entry, Mapping):
                self._check_entry(entry, format_location(CATALOG_CONTEXT, ["packs", index]), seen, report)
        self._check_sorted(packs, report)
        LOGGER.debug("catalog validated: %d entries, %d issues", len(packs), len(report.issues))
        return report

    def validate_file(self, path: Path, report: IssueReport | None = None) -> IssueReport:
        """Load the catalog at ``path`` and validate it."""

        report = report if report is not None else IssueReport()
        loaded = read_document(path, report, label="Catalog")
        if loaded is None:
            return report
        return self.validate(loaded.payload, report)

    # ------------------------------------------------------------------
    @staticmethod
    def _check_generated_at(document: Mapping[str, JSONValue], report: IssueReport) -> None:
        generated_at = text_field(document, "generatedAt")
        if not generated_at:
            return
        try:
            datetime.fromisoformat(generated_at)
        except ValueError:
            report.add_error(f"{CATALOG_CONTEXT}.generatedAt is not a parseable timestamp: {generated_at}")

    def _check_entry(
        self,
        entry: Mapping[str, JSONValue],
        prefix: str,
        seen: dict[str, str],
        report: IssueReport,
    ) -> None:
        pack_id = text_field(entry, "packId")
        publisher = text_field(entry, "publisher")
        slug = text_field(entry, "slug")
        latest_version = text_field(entry, "latestVersion")
        manifest_url = text_field(entry, "manifestUrl")

        if publisher and not is_valid_slug_or_publisher(publisher):
            report.add_error(f"{prefix}.publisher contains invalid characters: {publisher}")
        if slug and not is_valid_slug_or_publisher(slug):
            report.add_error(f"{prefix}.slug contains invalid characters: {slug}")
        if pack_id and publisher and slug:
            expected = expected_pack_id(publisher, slug)
            if pack_id != expected:
                report.add_error(f"{prefix}.packId must equal publisher.slug ({expected}).")

        if latest_version and not is_semver(latest_version):
            report.add_error(f"{prefix}.latestVersion must be valid semver (got {latest_version}).")
        min_app_version = optional_text_field(entry, "minAppVersion")
        if min_app_version and not is_semver(min_app_version):
            report.add_error(f"{prefix}.minAppVersion must be valid semver (got {min_app_version}).")

        if manifest_url:
            self._check_manifest_url(manifest_url, pack_id, latest_version, prefix, report)

        normalized = normalize_pack_id(pack_id)
        if not normalized:
            return
        existing = seen.get(normalized)
        if existing is not None:
            report.add_error(f'Duplicate packId (case-insensitive): "{pack_id}" conflicts with "{existing}".')
        else:
            seen[normalized] = pack_id

    def _check_manifest_url(
        self,
        manifest_url: str,
        pack_id: str,
        latest_version: str,
        prefix: str,
        report: IssueReport,
    ) -> None:
        parsed = _parse_url(manifest_url)
        if parsed is None:
            report.add_error(f"{prefix}.manifestUrl must be a valid URL.")
            return
        if not pack_id or not latest_version:
            return
        pathname = unquote(parsed.path)
        # Mirror and CDN prefixes are tolerated; only the trailing path is compared.
        if not pathname.endswith(expected_manifest_suffix(pack_id, latest_version)):
            report.add_advisory(
                f"{prefix}.manifestUrl does not end with the expected path for packId/version (got {pathname}).",
                strict=self.strict,
            )

    def _check_sorted(self, packs: Sequence[JSONValue], report: IssueReport) -> None:
        pack_ids = [text_field(entry, "packId") for entry in packs if isinstance(entry, Mapping)]
        pack_ids = [pack_id for pack_id in pack_ids if pack_id]
        if pack_ids != sorted(pack_ids, key=catalog_sort_key):
            report.add_advisory(SORT_ADVISORY, strict=self.strict)


def _parse_url(value: str) -> SplitResult | None:
    try:
        parsed = urlsplit(value)
    except ValueError:
        return None
    if not parsed.scheme or not (parsed.netloc or parsed.path):
        return None
    return parsed


def validate_catalog(document: JSONValue, *, strict: bool = False) -> IssueReport:
    """Validate a parsed catalog document with the bundled schemas."""

    return CatalogValidator(strict=strict).validate(document)


__all__ = [
    "CatalogValidator",
    "SORT_ADVISORY",
    "catalog_sort_key",
    "expected_manifest_suffix",
    "validate_catalog",
]
