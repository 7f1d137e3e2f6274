# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Version manifest validation.

A manifest binds every file shipped by a pack version to a SHA-256 digest.
Validation collects every applicable issue in a single pass:

1. structural shape of the manifest document;
2. path safety of every declared file reference;
3. existence and digest match of every safely referenced file;
4. profile shape and command ids;
5. graph linkage to profile commands and graph payload shape;
6. files present in the version directory but not referenced.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from .errors import DocumentDecodeError, DocumentMissingError
from .hashing import DigestStatus, check_digest
from .identifiers import is_hex64, is_safe_relative_path, is_uuid, resolves_within
from .io import load_document, read_document
from .issues import IssueReport
from .models import FileRef, VersionManifest, as_sequence
from .profile import ProfileCheck, validate_profile
from .scanner import MarketplaceScanner
from .schema import SchemaRepository, default_repository, format_location
from .types import MANIFEST_FILENAME, OS_ARTIFACT_FILENAMES, JSONValue

LOGGER = logging.getLogger(__name__)

MANIFEST_CONTEXT = "manifest"
UNREFERENCED_PREVIEW_LIMIT = 5


@dataclass(slots=True)
class ManifestValidator:
    """Validate ``manifest.v1.json`` documents against their version directory."""

    strict: bool = False
    ignored_names: Collection[str] = OS_ARTIFACT_FILENAMES
    schemas: SchemaRepository = field(default_factory=default_repository)

    def validate_file(self, version_dir: Path, report: IssueReport) -> VersionManifest | None:
        """Load and validate the manifest stored in ``version_dir``.

        Returns:
            VersionManifest | None: Parsed manifest, or ``None`` when it could not
            be loaded or its root is not a JSON object.
        """
        loaded = read_document(version_dir / MANIFEST_FILENAME, report, label="Manifest")
        if loaded is None:
            return None
        return self.validate(loaded.payload, version_dir, report)

    def validate(self, document: JSONValue, version_dir: Path, report: IssueReport) -> VersionManifest | None:
        """Validate a parsed manifest ``document`` rooted at ``version_dir``.

        Args:
            document: Parsed manifest payload.
            version_dir: Absolute path of the containing version directory.
            report: Report receiving every finding.

        Returns:
            VersionManifest | None: Parsed manifest for pack-level cross-checks,
            or ``None`` when the root is not a JSON object.
        """
        for message in self.schemas.structural_issues("manifest", document, context=MANIFEST_CONTEXT):
            report.add_error(message)
        if not isinstance(document, Mapping):
            return None

        self._check_formats(document, report)
        manifest = VersionManifest.from_document(document)
        referenced = self._collect_safe_references(manifest, version_dir, report)
        for ref in manifest.file_refs():
            if _reference_key(ref.file) in referenced:
                self._check_reference(ref, version_dir, report)

        profile_check = self._check_profile(manifest, version_dir, referenced, report)
        self._check_graphs(manifest, version_dir, referenced, profile_check, report)
        self._check_unreferenced(version_dir, referenced, report)
        return manifest

    # ------------------------------------------------------------------
    def _check_formats(self, document: Mapping[str, JSONValue], report: IssueReport) -> None:
        profile = document.get("profile")
        if isinstance(profile, Mapping):
            self._check_digest_format(profile, report, location=f"{MANIFEST_CONTEXT}.profile")
        for index, asset in enumerate(as_sequence(document.get("assets"))):
            if isinstance(asset, Mapping):
                location = format_location(MANIFEST_CONTEXT, ["assets", index])
                self._check_digest_format(asset, report, location=location)
        for index, graph in enumerate(as_sequence(document.get("graphs"))):
            if not isinstance(graph, Mapping):
                continue
            location = format_location(MANIFEST_CONTEXT, ["graphs", index])
            self._check_digest_format(graph, report, location=location)
            command_id = graph.get("commandId")
            if isinstance(command_id, str) and not is_uuid(command_id):
                report.add_error(f"{location}.commandId must be a UUID string.")
            file = graph.get("file")
            if self.strict and isinstance(file, str) and file.strip() and is_uuid(command_id):
                stem = PurePosixPath(file.strip()).stem
                if stem != str(command_id).strip():
                    report.add_warning(
                        f"Graph filename should match commandId ({str(command_id).strip()}) but got {file.strip()}",
                    )

    @staticmethod
    def _check_digest_format(entry: Mapping[str, JSONValue], report: IssueReport, *, location: str) -> None:
        digest = entry.get("sha256")
        if isinstance(digest, str) and not is_hex64(digest.strip()):
            report.add_error(f"{location}.sha256 must be a 64-hex string.")

    @staticmethod
    def _collect_safe_references(
        manifest: VersionManifest,
        version_dir: Path,
        report: IssueReport,
    ) -> set[str]:
        referenced: set[str] = set()
        for ref in manifest.file_refs():
            if not is_safe_relative_path(ref.file):
                report.add_error(f"Unsafe referenced path in manifest ({ref.kind}): {ref.file}")
                continue
            if not resolves_within(version_dir / ref.file, version_dir):
                report.add_error(
                    f"Unsafe referenced path in manifest ({ref.kind}): {ref.file} resolves outside version directory",
                )
                continue
            referenced.add(_reference_key(ref.file))
        return referenced

    @staticmethod
    def _check_reference(ref: FileRef, version_dir: Path, report: IssueReport) -> None:
        path = version_dir / ref.file
        if not path.is_file():
            report.add_error(f"Manifest references missing {ref.kind} file: {path}")
            return
        if ref.sha256 is None or not is_hex64(ref.sha256):
            return
        try:
            status = check_digest(path, ref.sha256)
        except OSError as exc:
            report.add_error(f"Unable to read {ref.kind} file: {ref.file} ({exc.strerror or exc})")
            return
        LOGGER.debug("digest %s for %s", status.value, path)
        if status is DigestStatus.MISMATCH:
            report.add_error(f"SHA256 mismatch for {ref.kind} file: {ref.file}")

    def _check_profile(
        self,
        manifest: VersionManifest,
        version_dir: Path,
        referenced: set[str],
        report: IssueReport,
    ) -> ProfileCheck:
        ref = manifest.profile
        if ref is None or _reference_key(ref.file) not in referenced:
            return ProfileCheck()
        path = version_dir / ref.file
        if not path.is_file():
            return ProfileCheck()
        return validate_profile(path, report, schemas=self.schemas)

    @staticmethod
    def _check_graphs(
        manifest: VersionManifest,
        version_dir: Path,
        referenced: set[str],
        profile_check: ProfileCheck,
        report: IssueReport,
    ) -> None:
        for graph in manifest.graphs:
            command_id = graph.command_id
            if profile_check.profile is not None and command_id is not None and is_uuid(command_id):
                if command_id not in profile_check.command_ids:
                    report.add_error(f"Graph commandId not found in profile: {command_id}")
            if _reference_key(graph.file) not in referenced:
                continue
            path = version_dir / graph.file
            try:
                payload = load_document(path)
            except DocumentMissingError:
                continue
            except DocumentDecodeError:
                report.add_error(f"Graph payload is not valid JSON: {graph.file}")
                continue
            except OSError as exc:
                report.add_error(f"Unable to read graph file: {graph.file} ({exc.strerror or exc})")
                continue
            if not isinstance(payload, Mapping):
                report.add_error(f"Graph payload must be a JSON object: {graph.file}")

    def _check_unreferenced(self, version_dir: Path, referenced: set[str], report: IssueReport) -> None:
        scanner = MarketplaceScanner(version_dir)
        try:
            files = scanner.version_files(version_dir, ignored_names=self.ignored_names)
        except OSError as exc:
            report.add_error(f"Unable to list version directory: {version_dir} ({exc.strerror or exc})")
            return
        extras = [relative for relative in files if relative not in referenced]
        if not extras:
            return
        preview = ", ".join(extras[:UNREFERENCED_PREVIEW_LIMIT])
        if len(extras) > UNREFERENCED_PREVIEW_LIMIT:
            preview += ", ..."
        report.add_advisory(
            f"Version folder contains {len(extras)} unreferenced file(s): {preview}",
            strict=self.strict,
        )


def _reference_key(relative: str) -> str:
    return posixpath.normpath(relative.strip())


__all__ = ["ManifestValidator", "UNREFERENCED_PREVIEW_LIMIT"]
