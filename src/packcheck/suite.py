# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Batch validation runs over the catalog and the packs it lists.

A run never aborts on a single bad document: load and parse failures become
``error`` issues attributed to the pack concerned and the batch continues.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .catalog import CatalogValidator
from .identifiers import normalize_pack_id
from .io import read_document
from .issues import IssueReport
from .models import Catalog
from .packs import PackValidationOptions, PackValidator
from .reconcile import check_catalog_latest, report_orphans
from .scanner import MarketplaceScanner
from .schema import SchemaRepository, default_repository

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PackSelection:
    """Which packs a pack run validates.

    Attributes:
        all_packs: Validate every pack listed in the catalog and reconcile
            the catalog against disk.
        pack_id: Validate this single pack directory when ``all_packs`` is unset.
    """

    all_packs: bool = False
    pack_id: str | None = None


def run_catalog_validation(
    catalog_path: Path,
    *,
    strict: bool = False,
    schemas: SchemaRepository | None = None,
) -> IssueReport:
    """Validate the catalog stored at ``catalog_path``."""

    validator = CatalogValidator(strict=strict, schemas=schemas or default_repository())
    LOGGER.debug("validating catalog %s (strict=%s)", catalog_path, strict)
    return validator.validate_file(catalog_path)


@dataclass(slots=True)
class PackRun:
    """Validate a selection of packs and aggregate their issues."""

    scanner: MarketplaceScanner
    catalog_path: Path
    options: PackValidationOptions = field(default_factory=PackValidationOptions)
    schemas: SchemaRepository = field(default_factory=default_repository)

    def run(self, selection: PackSelection) -> IssueReport:
        """Execute the run described by ``selection``.

        Args:
            selection: Packs to validate.

        Returns:
            IssueReport: Combined issues; pack-specific issues carry their packId.
        """
        report = IssueReport()
        catalog: Catalog | None = None
        pack_ids: list[str] = []
        if selection.all_packs:
            catalog = self._load_catalog(report)
            if catalog is not None:
                pack_ids = list(catalog.listed_pack_ids())
                report_orphans(pack_ids, self.scanner.disk_pack_ids(), report)
        elif selection.pack_id and selection.pack_id.strip():
            pack_ids = [selection.pack_id.strip()]

        validator = PackValidator(scanner=self.scanner, options=self.options, schemas=self.schemas)
        for pack_id in pack_ids:
            result = validator.validate(pack_id)
            if catalog is not None and result.metadata is not None:
                entry = catalog.find(normalize_pack_id(pack_id))
                if entry is not None:
                    check_catalog_latest(entry, result.metadata, result.report)
            LOGGER.debug("%s: %d issue(s)", pack_id, len(result.report.issues))
            report.merge(result.report, pack=pack_id)
        return report

    def _load_catalog(self, report: IssueReport) -> Catalog | None:
        loaded = read_document(self.catalog_path, report, label="Catalog")
        if loaded is None:
            return None
        return Catalog.from_document(loaded.payload)


def run_pack_validation(
    scanner: MarketplaceScanner,
    selection: PackSelection,
    *,
    catalog_path: Path,
    options: PackValidationOptions | None = None,
) -> IssueReport:
    """Convenience wrapper building a :class:`PackRun` with bundled schemas."""

    run = PackRun(scanner=scanner, catalog_path=catalog_path, options=options or PackValidationOptions())
    return run.run(selection)


__all__ = ["PackRun", "PackSelection", "run_catalog_validation", "run_pack_validation"]
