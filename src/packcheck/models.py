# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Typed record shapes materialised from marketplace JSON documents.

Builders are lenient: they keep every field whose JSON type is correct and
drop the rest. Validators report the dropped parts as issues, so downstream
code only ever sees well-typed values.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from .identifiers import normalize_pack_id
from .types import JSONValue


def as_mapping(value: JSONValue | None) -> Mapping[str, JSONValue] | None:
    return value if isinstance(value, Mapping) else None


def as_sequence(value: JSONValue | None) -> Sequence[JSONValue]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    return ()


def text_field(mapping: Mapping[str, JSONValue], key: str) -> str:
    """Return ``mapping[key]`` stripped when it is a string, otherwise ``""``."""

    value = mapping.get(key)
    return value.strip() if isinstance(value, str) else ""


def optional_text_field(mapping: Mapping[str, JSONValue], key: str) -> str | None:
    value = mapping.get(key)
    return value.strip() if isinstance(value, str) else None


def positive_int_field(mapping: Mapping[str, JSONValue], key: str) -> int | None:
    value = mapping.get(key)
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    return int(value) if value > 0 else None


@dataclass(frozen=True, slots=True)
class FileRef:
    """Manifest reference binding a relative file path to a declared digest."""

    file: str
    sha256: str | None
    kind: str
    index: int

    @classmethod
    def from_value(cls, value: JSONValue, *, kind: str, index: int) -> FileRef | None:
        mapping = as_mapping(value)
        if mapping is None:
            return None
        file = optional_text_field(mapping, "file")
        if not file:
            return None
        sha256 = mapping.get("sha256")
        return cls(
            file=file,
            sha256=sha256.strip() if isinstance(sha256, str) else None,
            kind=kind,
            index=index,
        )


@dataclass(frozen=True, slots=True)
class GraphRef:
    """Graph sidecar reference linked to a profile command."""

    ref: FileRef
    command_id: str | None

    @property
    def file(self) -> str:
        return self.ref.file

    @classmethod
    def from_value(cls, value: JSONValue, *, index: int) -> GraphRef | None:
        ref = FileRef.from_value(value, kind="graph", index=index)
        mapping = as_mapping(value)
        if ref is None or mapping is None:
            return None
        command_id = mapping.get("commandId")
        return cls(ref=ref, command_id=command_id.strip() if isinstance(command_id, str) else None)


@dataclass(frozen=True, slots=True)
class VersionManifest:
    """Materialised ``manifest.v1.json`` document."""

    schema_version: int | None
    pack_id: str | None
    version: str | None
    profile: FileRef | None
    assets: tuple[FileRef, ...]
    graphs: tuple[GraphRef, ...]

    @classmethod
    def from_document(cls, document: Mapping[str, JSONValue]) -> VersionManifest:
        assets = (
            FileRef.from_value(item, kind="asset", index=index)
            for index, item in enumerate(as_sequence(document.get("assets")))
        )
        graphs = (GraphRef.from_value(item, index=index) for index, item in enumerate(as_sequence(document.get("graphs"))))
        return cls(
            schema_version=positive_int_field(document, "schemaVersion"),
            pack_id=optional_text_field(document, "packId"),
            version=optional_text_field(document, "version"),
            profile=FileRef.from_value(document.get("profile"), kind="profile", index=0),
            assets=tuple(ref for ref in assets if ref is not None),
            graphs=tuple(ref for ref in graphs if ref is not None),
        )

    def file_refs(self) -> tuple[FileRef, ...]:
        """Return every declared file reference: profile, then assets, then graphs."""

        refs: list[FileRef] = [self.profile] if self.profile is not None else []
        refs.extend(self.assets)
        refs.extend(graph.ref for graph in self.graphs)
        return tuple(refs)


@dataclass(frozen=True, slots=True)
class Command:
    """Profile command entry."""

    id: str
    label: str
    command: str
    description: str
    tags: tuple[str, ...]
    color: str | None = None

    @classmethod
    def from_value(cls, value: JSONValue) -> Command | None:
        mapping = as_mapping(value)
        if mapping is None:
            return None
        command_id = optional_text_field(mapping, "id")
        if command_id is None:
            return None
        description = mapping.get("description")
        return cls(
            id=command_id,
            label=text_field(mapping, "label"),
            command=text_field(mapping, "command"),
            description=description if isinstance(description, str) else "",
            tags=tuple(tag for tag in as_sequence(mapping.get("tags")) if isinstance(tag, str)),
            color=optional_text_field(mapping, "color"),
        )


@dataclass(frozen=True, slots=True)
class Profile:
    """Ordered command list shipped by a pack version."""

    commands: tuple[Command, ...]

    @classmethod
    def from_document(cls, document: JSONValue) -> Profile:
        commands = (Command.from_value(item) for item in as_sequence(document))
        return cls(commands=tuple(command for command in commands if command is not None))

    @property
    def command_ids(self) -> frozenset[str]:
        return frozenset(command.id for command in self.commands)

    def unique_tags(self) -> frozenset[str]:
        return frozenset(tag.strip() for command in self.commands for tag in command.tags if tag.strip())


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """Catalog listing for one pack."""

    pack_id: str
    publisher: str
    slug: str
    display_name: str
    latest_version: str
    manifest_url: str
    min_app_version: str | None = None
    tags: tuple[str, ...] = ()
    description: str | None = None

    @classmethod
    def from_value(cls, value: JSONValue) -> CatalogEntry | None:
        mapping = as_mapping(value)
        if mapping is None:
            return None
        description = mapping.get("description")
        return cls(
            pack_id=text_field(mapping, "packId"),
            publisher=text_field(mapping, "publisher"),
            slug=text_field(mapping, "slug"),
            display_name=text_field(mapping, "displayName"),
            latest_version=text_field(mapping, "latestVersion"),
            manifest_url=text_field(mapping, "manifestUrl"),
            min_app_version=optional_text_field(mapping, "minAppVersion") or None,
            tags=tuple(tag for tag in as_sequence(mapping.get("tags")) if isinstance(tag, str)),
            description=description if isinstance(description, str) else None,
        )


@dataclass(frozen=True, slots=True)
class Catalog:
    """Top-level catalog index."""

    schema_version: int | None
    generated_at: str
    packs: tuple[CatalogEntry, ...]

    @classmethod
    def from_document(cls, document: JSONValue) -> Catalog:
        mapping = as_mapping(document) or {}
        entries = (CatalogEntry.from_value(item) for item in as_sequence(mapping.get("packs")))
        return cls(
            schema_version=positive_int_field(mapping, "schemaVersion"),
            generated_at=text_field(mapping, "generatedAt"),
            packs=tuple(entry for entry in entries if entry is not None),
        )

    def listed_pack_ids(self) -> tuple[str, ...]:
        """Return the non-empty packIds in catalog order."""

        return tuple(entry.pack_id for entry in self.packs if entry.pack_id)

    def find(self, normalized_id: str) -> CatalogEntry | None:
        """Return the first entry whose normalised packId equals ``normalized_id``."""

        for entry in self.packs:
            if normalize_pack_id(entry.pack_id) == normalized_id:
                return entry
        return None


@dataclass(frozen=True, slots=True)
class PackMetadata:
    """Materialised ``pack.json`` document."""

    pack_id: str
    publisher: str
    license: str
    latest_version: str

    @classmethod
    def from_document(cls, document: JSONValue) -> PackMetadata | None:
        mapping = as_mapping(document)
        if mapping is None:
            return None
        return cls(
            pack_id=text_field(mapping, "packId"),
            publisher=text_field(mapping, "publisher"),
            license=text_field(mapping, "license"),
            latest_version=text_field(mapping, "latestVersion"),
        )


__all__ = [
    "Catalog",
    "CatalogEntry",
    "Command",
    "FileRef",
    "GraphRef",
    "PackMetadata",
    "Profile",
    "VersionManifest",
    "as_mapping",
    "as_sequence",
    "optional_text_field",
    "positive_int_field",
    "text_field",
]
