# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures building marketplace trees on disk."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import pytest

PACK_ID = "acme.tools"
VERSION = "1.0.0"
U1 = "11111111-1111-4111-8111-111111111111"
U2 = "22222222-2222-4222-8222-222222222222"
U3 = "33333333-3333-4333-8333-333333333333"
GENERATED_AT = "2025-01-01T00:00:00Z"


def _write_json(path: Path, payload: object) -> None:
    """Serialize ``payload`` as formatted JSON into ``path``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def _sha256(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()


class MarketplaceFactory:
    """Write catalog, pack, version and manifest files under ``root``."""

    def __init__(self, root: Path) -> None:
        self.root = root

    @property
    def catalog_path(self) -> Path:
        return self.root / "catalog" / "index.v1.json"

    def pack_dir(self, pack_id: str = PACK_ID) -> Path:
        return self.root / "packs" / pack_id

    def version_dir(self, pack_id: str = PACK_ID, version: str = VERSION) -> Path:
        return self.pack_dir(pack_id) / "versions" / version

    def write_json(self, path: Path, payload: object) -> None:
        _write_json(path, payload)

    def sha256(self, path: Path) -> str:
        return _sha256(path)

    @staticmethod
    def command(command_id: str, **overrides: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": command_id,
            "label": f"Command {command_id[:4]}",
            "command": "echo hello",
            "description": "",
            "tags": ["demo"],
            "color": "#3b82f6",
        }
        payload.update(overrides)
        return payload

    def add_version(
        self,
        pack_id: str = PACK_ID,
        version: str = VERSION,
        *,
        command_ids: Iterable[str] = (U1, U2),
        graph_ids: Iterable[str] = (U1,),
        assets: Mapping[str, bytes] | None = None,
    ) -> Path:
        """Write a version directory whose manifest digests are all correct."""

        version_dir = self.version_dir(pack_id, version)
        profile_path = version_dir / "profile.json"
        _write_json(profile_path, [self.command(command_id) for command_id in command_ids])

        asset_refs = []
        for relative, content in (assets if assets is not None else {"assets/readme.txt": b"hello"}).items():
            asset_path = version_dir / relative
            asset_path.parent.mkdir(parents=True, exist_ok=True)
            asset_path.write_bytes(content)
            asset_refs.append({"file": relative, "sha256": _sha256(asset_path)})

        graph_refs = []
        for graph_id in graph_ids:
            graph_path = version_dir / "graphs" / f"{graph_id}.json"
            _write_json(graph_path, {"nodes": [], "edges": []})
            graph_refs.append({"commandId": graph_id, "file": f"graphs/{graph_id}.json", "sha256": _sha256(graph_path)})

        self.write_manifest(
            version_dir,
            {
                "schemaVersion": 1,
                "packId": pack_id,
                "version": version,
                "profile": {"file": "profile.json", "sha256": _sha256(profile_path)},
                "assets": asset_refs,
                "graphs": graph_refs,
            },
        )
        return version_dir

    def add_pack(
        self,
        pack_id: str = PACK_ID,
        *,
        versions: Iterable[str] = (VERSION,),
        latest: str | None = None,
    ) -> Path:
        versions = tuple(versions)
        publisher = pack_id.split(".", 1)[0]
        _write_json(
            self.pack_dir(pack_id) / "pack.json",
            {
                "packId": pack_id,
                "publisher": publisher,
                "license": "MIT",
                "latestVersion": latest if latest is not None else versions[-1],
            },
        )
        for version in versions:
            self.add_version(pack_id, version)
        return self.pack_dir(pack_id)

    @staticmethod
    def catalog_entry(pack_id: str = PACK_ID, version: str = VERSION, **overrides: Any) -> dict[str, Any]:
        publisher, _, slug = pack_id.partition(".")
        entry: dict[str, Any] = {
            "packId": pack_id,
            "publisher": publisher,
            "slug": slug,
            "displayName": f"{slug.title()} Pack",
            "latestVersion": version,
            "manifestUrl": f"https://cdn.example.com/packs/{pack_id}/versions/{version}/manifest.v1.json",
            "tags": ["demo"],
        }
        entry.update(overrides)
        return entry

    def catalog_document(self, entries: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
        return {"schemaVersion": 1, "generatedAt": GENERATED_AT, "packs": list(entries)}

    def write_catalog(self, entries: Iterable[Mapping[str, Any]]) -> Path:
        _write_json(self.catalog_path, self.catalog_document(entries))
        return self.catalog_path

    def manifest(self, version_dir: Path) -> dict[str, Any]:
        return json.loads((version_dir / "manifest.v1.json").read_text(encoding="utf-8"))

    def write_manifest(self, version_dir: Path, payload: Mapping[str, Any]) -> None:
        _write_json(version_dir / "manifest.v1.json", payload)


@pytest.fixture
def factory(tmp_path: Path) -> MarketplaceFactory:
    """Return a factory writing into an empty marketplace root."""

    return MarketplaceFactory(tmp_path)


@pytest.fixture
def marketplace(factory: MarketplaceFactory) -> MarketplaceFactory:
    """Return a valid marketplace listing ``acme.tools`` at version ``1.0.0``."""

    factory.add_pack()
    factory.write_catalog([factory.catalog_entry()])
    return factory
