# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Pack-level validation: ``pack.json``, version selection and manifests."""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from dataclasses import dataclass, field

from .identifiers import is_plain_name
from .io import read_document
from .issues import IssueReport
from .manifest import ManifestValidator
from .models import PackMetadata
from .reconcile import check_latest_on_disk
from .scanner import MarketplaceScanner
from .schema import SchemaRepository, default_repository
from .semver import is_semver, normalize_semver
from .types import MANIFEST_FILENAME, OS_ARTIFACT_FILENAMES, PACK_METADATA_FILENAME

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PackValidationOptions:
    """Options controlling which versions are validated and how strictly.

    Attributes:
        strict: Escalate advisory findings to warnings.
        version: Validate only this version directory.
        all_versions: Validate every version directory found on disk.
        ignored_names: Basenames excluded from unreferenced-file detection.
    """

    strict: bool = False
    version: str | None = None
    all_versions: bool = False
    ignored_names: Collection[str] = OS_ARTIFACT_FILENAMES


@dataclass(slots=True)
class PackResult:
    """Outcome of validating one pack directory."""

    pack_id: str
    report: IssueReport = field(default_factory=IssueReport)
    metadata: PackMetadata | None = None
    versions: tuple[str, ...] = ()


@dataclass(slots=True)
class PackValidator:
    """Validate packs stored under a marketplace root."""

    scanner: MarketplaceScanner
    options: PackValidationOptions = field(default_factory=PackValidationOptions)
    schemas: SchemaRepository = field(default_factory=default_repository)

    def validate(self, pack_id: str) -> PackResult:
        """Validate the pack stored in the directory named ``pack_id``.

        Args:
            pack_id: Pack directory name, expected to equal the declared packId.

        Returns:
            PackResult: Issues found plus the parsed ``pack.json`` when available.
        """
        result = PackResult(pack_id=pack_id)
        report = result.report
        if not is_plain_name(pack_id):
            report.add_error(f"Invalid pack id: {pack_id}")
            return result

        metadata_path = self.scanner.pack_metadata_path(pack_id)
        loaded = read_document(metadata_path, report, label=PACK_METADATA_FILENAME)
        if loaded is None:
            return result
        document = loaded.payload
        for message in self.schemas.structural_issues("pack", document, context=PACK_METADATA_FILENAME):
            report.add_error(message)
        if not isinstance(document, Mapping):
            return result

        metadata = PackMetadata.from_document(document)
        result.metadata = metadata
        if metadata is None:
            return result
        if metadata.pack_id and metadata.pack_id != pack_id:
            report.add_error(f"pack.json.packId must equal directory packId ({pack_id}).")
        self._check_latest_version(metadata.latest_version, report)

        versions_dir = self.scanner.versions_dir(pack_id)
        if not versions_dir.is_dir():
            report.add_error(f"Missing versions directory: {versions_dir}")
            return result
        version_names = self.scanner.version_names(pack_id)
        if not version_names:
            report.add_error(f"No versions found in {versions_dir}")
            return result

        result.versions = self._select_versions(metadata, version_names)
        LOGGER.debug("validating %s versions: %s", pack_id, ", ".join(result.versions) or "-")
        for version in result.versions:
            self._validate_version(pack_id, version, report)

        check_latest_on_disk(metadata.latest_version, version_names, report, strict=self.options.strict)
        return result

    # ------------------------------------------------------------------
    def _check_latest_version(self, latest_version: str, report: IssueReport) -> None:
        if not latest_version:
            return
        normalized = normalize_semver(latest_version)
        if not is_semver(normalized):
            report.add_error(f"pack.json.latestVersion must be valid semver (got {latest_version}).")
        if normalized != latest_version:
            report.add_advisory(
                f'pack.json.latestVersion includes a leading "v" (recommended to use strict semver): {latest_version}',
                strict=self.options.strict,
            )

    def _select_versions(self, metadata: PackMetadata, version_names: tuple[str, ...]) -> tuple[str, ...]:
        if self.options.version:
            return (self.options.version,)
        if self.options.all_versions:
            return version_names
        if metadata.latest_version:
            return (metadata.latest_version,)
        return ()

    def _validate_version(self, pack_id: str, version: str, report: IssueReport) -> None:
        if not is_plain_name(version):
            report.add_error(f"Invalid version directory name: {version}")
            return
        version_dir = self.scanner.version_dir(pack_id, version)
        if not version_dir.is_dir():
            report.add_error(f"Missing version directory: {version_dir}")
            return
        manifest_path = version_dir / MANIFEST_FILENAME
        if not manifest_path.is_file():
            report.add_error(f"Missing manifest: {manifest_path}")
            return

        validator = ManifestValidator(
            strict=self.options.strict,
            ignored_names=self.options.ignored_names,
            schemas=self.schemas,
        )
        manifest = validator.validate_file(version_dir, report)
        if manifest is None:
            return
        if manifest.pack_id is not None and manifest.pack_id != pack_id:
            report.add_error(f"manifest.packId mismatch for {pack_id}@{version} (got {manifest.pack_id}).")
        if manifest.version is not None and manifest.version != version:
            report.add_error(f"manifest.version mismatch for {pack_id}@{version} (got {manifest.version}).")


__all__ = ["PackResult", "PackValidationOptions", "PackValidator"]
