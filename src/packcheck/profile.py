# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Profile loading and command validation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .identifiers import is_hex_color, is_uuid
from .io import read_document
from .issues import IssueReport
from .models import Profile
from .schema import SchemaRepository, default_repository, format_location
from .types import JSONValue


@dataclass(frozen=True, slots=True)
class ProfileCheck:
    """Outcome of validating one profile document.

    Attributes:
        profile: Materialised profile, or ``None`` when the file could not be read
            or is not a JSON array.
        command_ids: Distinct, valid UUID command ids declared by the profile.
    """

    profile: Profile | None = None
    command_ids: frozenset[str] = field(default_factory=frozenset)


def validate_profile(
    path: Path,
    report: IssueReport,
    *,
    schemas: SchemaRepository | None = None,
) -> ProfileCheck:
    """Load ``path`` as a command list and validate every command.

    Args:
        path: Absolute path of the profile file.
        report: Report receiving structural and duplicate-id issues.
        schemas: Optional schema repository override.

    Returns:
        ProfileCheck: Parsed profile and the set of command ids usable for graph linkage.
    """
    loaded = read_document(path, report, label="Profile")
    if loaded is None:
        return ProfileCheck()
    return check_profile_document(loaded.payload, report, context=path.name, schemas=schemas)


def check_profile_document(
    document: JSONValue,
    report: IssueReport,
    *,
    context: str,
    schemas: SchemaRepository | None = None,
) -> ProfileCheck:
    """Validate an already-parsed profile payload labelled ``context``."""

    repository = schemas or default_repository()
    for message in repository.structural_issues("profile", document, context=context):
        report.add_error(message)
    if not isinstance(document, list):
        return ProfileCheck()

    command_ids: set[str] = set()
    seen: set[str] = set()
    for index, entry in enumerate(document):
        if not isinstance(entry, Mapping):
            continue
        prefix = format_location(context, [index])
        _check_command_formats(entry, report, prefix=prefix)
        raw_id = entry.get("id")
        if not isinstance(raw_id, str):
            continue
        command_id = raw_id.strip()
        if command_id in seen:
            report.add_error(f"Duplicate command id in profile: {command_id}")
            continue
        seen.add(command_id)
        if is_uuid(command_id):
            command_ids.add(command_id)
    return ProfileCheck(profile=Profile.from_document(document), command_ids=frozenset(command_ids))


def _check_command_formats(entry: Mapping[str, JSONValue], report: IssueReport, *, prefix: str) -> None:
    command_id = entry.get("id")
    if isinstance(command_id, str) and not is_uuid(command_id):
        report.add_error(f"{prefix}.id must be a UUID string.")
    color = entry.get("color")
    if isinstance(color, str) and not is_hex_color(color):
        report.add_error(f"{prefix}.color must be a hex string like #3b82f6.")


__all__ = ["ProfileCheck", "check_profile_document", "validate_profile"]
