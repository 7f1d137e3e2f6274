# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for version manifest validation."""

from __future__ import annotations

import json
import os
from pathlib import Path

from conftest import U1, U2, U3, MarketplaceFactory

from packcheck.issues import IssueReport
from packcheck.manifest import ManifestValidator
from packcheck.severity import IssueLevel


def _validate(version_dir: Path, *, strict: bool = False) -> IssueReport:
    report = IssueReport()
    ManifestValidator(strict=strict).validate_file(version_dir, report)
    return report


def _messages(report: IssueReport, level: IssueLevel = IssueLevel.ERROR) -> list[str]:
    return [issue.message for issue in report.issues if issue.level is level]


def test_valid_version_has_no_issues(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version()
    report = IssueReport()
    manifest = ManifestValidator(strict=True).validate_file(version_dir, report)
    assert report.issues == []
    assert manifest is not None
    assert manifest.pack_id == "acme.tools"
    assert [ref.file for ref in manifest.file_refs()] == ["profile.json", "assets/readme.txt", f"graphs/{U1}.json"]


def test_graph_with_unknown_command_id_is_one_referential_error(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version(command_ids=(U1, U2), graph_ids=(U3,))
    report = _validate(version_dir)
    assert [issue.message for issue in report.issues] == [f"Graph commandId not found in profile: {U3}"]


def test_hash_mismatch_is_reported_once_and_not_as_missing(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version()
    profile_path = version_dir / "profile.json"
    profile_path.write_text(json.dumps(json.loads(profile_path.read_text(encoding="utf-8")), indent=4), encoding="utf-8")

    report = _validate(version_dir)
    assert _messages(report) == ["SHA256 mismatch for profile file: profile.json"]
    assert not any("missing" in issue.message for issue in report.issues)


def test_missing_file_is_not_reported_as_mismatch(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version()
    (version_dir / "assets" / "readme.txt").unlink()

    errors = _messages(_validate(version_dir))
    assert len(errors) == 1
    assert errors[0].startswith("Manifest references missing asset file:")
    assert errors[0].endswith("readme.txt")


def test_uppercase_digest_matches(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version()
    manifest = factory.manifest(version_dir)
    manifest["profile"]["sha256"] = manifest["profile"]["sha256"].upper()
    factory.write_manifest(version_dir, manifest)
    assert _validate(version_dir).issues == []


def test_extra_file_is_info_by_default_and_warn_when_strict(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version()
    (version_dir / "notes.md").write_text("draft", encoding="utf-8")

    relaxed = _validate(version_dir)
    assert relaxed.errors == []
    assert _messages(relaxed, IssueLevel.INFO) == ["Version folder contains 1 unreferenced file(s): notes.md"]

    strict = _validate(version_dir, strict=True)
    assert strict.errors == []
    assert _messages(strict, IssueLevel.WARN) == ["Version folder contains 1 unreferenced file(s): notes.md"]


def test_unreferenced_listing_shows_first_five(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version()
    for index in range(7):
        (version_dir / "extra" / f"file{index}.txt").parent.mkdir(exist_ok=True)
        (version_dir / "extra" / f"file{index}.txt").write_text("x", encoding="utf-8")

    infos = _messages(_validate(version_dir), IssueLevel.INFO)
    assert infos == [
        "Version folder contains 7 unreferenced file(s): "
        "extra/file0.txt, extra/file1.txt, extra/file2.txt, extra/file3.txt, extra/file4.txt, ...",
    ]


def test_os_artifacts_are_not_unreferenced(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version()
    (version_dir / ".DS_Store").write_bytes(b"\x00")
    (version_dir / "assets" / "Thumbs.db").write_bytes(b"\x00")
    assert _validate(version_dir, strict=True).issues == []


def test_unsafe_reference_is_reported_and_never_read(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version()
    manifest = factory.manifest(version_dir)
    manifest["assets"].append({"file": "../../pack.json", "sha256": "0" * 64})
    factory.write_manifest(version_dir, manifest)

    errors = _messages(_validate(version_dir))
    assert errors == ["Unsafe referenced path in manifest (asset): ../../pack.json"]


def test_graph_payload_must_be_an_object(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version()
    graph_path = version_dir / "graphs" / f"{U1}.json"
    graph_path.write_text("[]", encoding="utf-8")
    manifest = factory.manifest(version_dir)
    manifest["graphs"][0]["sha256"] = factory.sha256(graph_path)
    factory.write_manifest(version_dir, manifest)

    assert _messages(_validate(version_dir)) == [f"Graph payload must be a JSON object: graphs/{U1}.json"]


def test_graph_payload_must_be_valid_json(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version()
    graph_path = version_dir / "graphs" / f"{U1}.json"
    graph_path.write_text("{nodes", encoding="utf-8")
    manifest = factory.manifest(version_dir)
    manifest["graphs"][0]["sha256"] = factory.sha256(graph_path)
    factory.write_manifest(version_dir, manifest)

    assert _messages(_validate(version_dir)) == [f"Graph payload is not valid JSON: graphs/{U1}.json"]


def test_graph_filename_mismatch_warns_only_in_strict_mode(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version()
    (version_dir / "graphs" / f"{U1}.json").rename(version_dir / "graphs" / "main.json")
    manifest = factory.manifest(version_dir)
    manifest["graphs"][0]["file"] = "graphs/main.json"
    factory.write_manifest(version_dir, manifest)

    assert _validate(version_dir).issues == []
    strict = _validate(version_dir, strict=True)
    assert strict.errors == []
    assert _messages(strict, IssueLevel.WARN) == [
        f"Graph filename should match commandId ({U1}) but got graphs/main.json",
    ]


def test_structural_errors_do_not_cascade(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version()
    manifest = factory.manifest(version_dir)
    del manifest["profile"]
    manifest["schemaVersion"] = 0
    factory.write_manifest(version_dir, manifest)

    report = _validate(version_dir)
    assert _messages(report) == [
        "manifest.profile is required.",
        "manifest.schemaVersion must be a positive integer.",
    ]
    assert _messages(report, IssueLevel.INFO) == ["Version folder contains 1 unreferenced file(s): profile.json"]


def test_digest_and_command_id_formats(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version()
    manifest = factory.manifest(version_dir)
    manifest["profile"]["sha256"] = "xyz"
    manifest["graphs"][0]["commandId"] = "not-a-uuid"
    factory.write_manifest(version_dir, manifest)

    assert _messages(_validate(version_dir)) == [
        "manifest.profile.sha256 must be a 64-hex string.",
        "manifest.graphs[0].commandId must be a UUID string.",
    ]


def test_profile_issues_are_collected(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version(command_ids=(U1, U1))
    assert _messages(_validate(version_dir)) == [f"Duplicate command id in profile: {U1}"]


def test_non_object_manifest_returns_none(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version()
    factory.write_manifest(version_dir, [])  # type: ignore[arg-type]
    report = IssueReport()
    assert ManifestValidator().validate_file(version_dir, report) is None
    assert _messages(report) == ["manifest root must be a JSON object."]


def test_unreadable_manifest_is_an_error(tmp_path: Path) -> None:
    report = IssueReport()
    assert ManifestValidator().validate_file(tmp_path, report) is None
    assert report.errors[0].message.startswith("Missing Manifest:")


def test_symlink_escaping_version_directory_is_unsafe(factory: MarketplaceFactory) -> None:
    outside = factory.root / "outside.txt"
    outside.write_text("not part of the pack", encoding="utf-8")
    version_dir = factory.add_version()
    os.symlink(outside, version_dir / "assets" / "leak.txt")
    manifest = factory.manifest(version_dir)
    manifest["assets"].append({"file": "assets/leak.txt", "sha256": factory.sha256(outside)})
    factory.write_manifest(version_dir, manifest)

    assert _messages(_validate(version_dir)) == [
        "Unsafe referenced path in manifest (asset): assets/leak.txt resolves outside version directory",
    ]


def test_symlinked_profile_outside_version_directory_is_never_loaded(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version()
    profile_path = version_dir / "profile.json"
    outside = factory.root / "shared-profile.json"
    outside.write_bytes(profile_path.read_bytes())
    profile_path.unlink()
    os.symlink(outside, profile_path)

    assert _messages(_validate(version_dir)) == [
        "Unsafe referenced path in manifest (profile): profile.json resolves outside version directory",
    ]


def test_symlink_within_version_directory_is_accepted(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version()
    os.symlink("readme.txt", version_dir / "assets" / "alias.txt")
    manifest = factory.manifest(version_dir)
    manifest["assets"].append({"file": "assets/alias.txt", "sha256": factory.sha256(version_dir / "assets" / "readme.txt")})
    factory.write_manifest(version_dir, manifest)

    assert _validate(version_dir, strict=True).issues == []


def test_deeply_nested_profile_is_a_decode_error(factory: MarketplaceFactory) -> None:
    version_dir = factory.add_version()
    profile_path = version_dir / "profile.json"
    profile_path.write_text("[" * 200_000 + "]" * 200_000, encoding="utf-8")
    manifest = factory.manifest(version_dir)
    manifest["profile"]["sha256"] = factory.sha256(profile_path)
    factory.write_manifest(version_dir, manifest)

    assert _messages(_validate(version_dir)) == [f"Profile is not valid JSON: {profile_path} (nesting too deep)"]
