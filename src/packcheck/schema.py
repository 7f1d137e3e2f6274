# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""JSON Schema checks for the structural shape of marketplace documents.

Schemas only describe shape (types, required keys, non-empty strings). Format
rules such as semver, UUIDs and digests are applied by the validators so that
each violation is reported exactly once with a specific message.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Final, Literal, cast

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from .errors import PackcheckError
from .io import load_document
from .types import JSONValue

DocumentKind = Literal["catalog", "pack", "manifest", "profile"]

SCHEMA_ROOT: Final[Path] = Path(__file__).resolve().parent / "schemas"
MESSAGE_KEY: Final[str] = "x-message"

_SCHEMA_FILES: Final[dict[DocumentKind, str]] = {
    "catalog": "catalog.schema.json",
    "pack": "pack.schema.json",
    "manifest": "manifest.schema.json",
    "profile": "profile.schema.json",
}


@dataclass(slots=True)
class SchemaRepository:
    """Hold one Draft 2020-12 validator per marketplace document kind."""

    schema_root: Path
    validators: Mapping[DocumentKind, Draft202012Validator]

    @classmethod
    def load(cls, schema_root: Path | None = None) -> SchemaRepository:
        """Load and check every document schema under ``schema_root``.

        Raises:
            PackcheckError: If a schema file is not a valid JSON Schema object.
        """
        root = schema_root or SCHEMA_ROOT
        validators: dict[DocumentKind, Draft202012Validator] = {}
        for kind, filename in _SCHEMA_FILES.items():
            schema = load_document(root / filename)
            if not isinstance(schema, Mapping):
                raise PackcheckError(f"{root / filename}: expected a JSON object")
            Draft202012Validator.check_schema(schema)
            validators[kind] = Draft202012Validator(schema)
        return cls(schema_root=root, validators=validators)

    def structural_issues(self, kind: DocumentKind, document: JSONValue, *, context: str) -> list[str]:
        """Return one message per structural violation found in ``document``.

        Args:
            kind: Document kind selecting the schema.
            document: Parsed JSON payload.
            context: Label prefixed to every location (e.g. ``catalog``).

        Returns:
            list[str]: Messages ordered by document location.
        """
        validator = self.validators[kind]
        errors = sorted(validator.iter_errors(document), key=_error_sort_key)
        return list(_describe_errors(errors, context=context))


@lru_cache(maxsize=1)
def default_repository() -> SchemaRepository:
    """Return the cached repository for the bundled schemas."""

    return SchemaRepository.load()


def _error_sort_key(error: ValidationError) -> tuple[str, ...]:
    return tuple(f"{part:>8}" if isinstance(part, int) else part for part in error.absolute_path)


def _describe_errors(errors: Iterable[ValidationError], *, context: str) -> Iterable[str]:
    seen_required: set[str] = set()
    for error in errors:
        location = format_location(context, error.absolute_path)
        if error.validator == "required":
            if location in seen_required:
                continue
            seen_required.add(location)
            instance = cast(Mapping[str, JSONValue], error.instance)
            for key in cast(list[str], error.validator_value):
                if key not in instance:
                    yield f"{location}.{key} is required."
            continue
        hint = error.schema.get(MESSAGE_KEY) if isinstance(error.schema, Mapping) else None
        if isinstance(hint, str):
            yield f"{location} {hint}"
        else:
            yield f"{location}: {error.message}"


def format_location(context: str, path: Iterable[str | int]) -> str:
    """Render a JSON path such as ``catalog.packs[0].packId``."""

    rendered = context
    for part in path:
        rendered += f"[{part}]" if isinstance(part, int) else f".{part}"
    return rendered


__all__ = ["DocumentKind", "SchemaRepository", "default_repository", "format_location"]
