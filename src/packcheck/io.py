# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""I/O helpers for reading marketplace JSON documents."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import cast

from .errors import DocumentDecodeError, DocumentMissingError
from .issues import IssueReport
from .types import JSONValue

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LoadedDocument:
    """Parsed JSON payload paired with the path it was read from."""

    path: Path
    payload: JSONValue


def load_document(path: Path) -> JSONValue:
    """Load a JSON document from disk.

    Args:
        path: Filesystem path to the JSON document.

    Returns:
        JSONValue: Parsed JSON value extracted from the document.

    Raises:
        DocumentMissingError: If the document is missing or not a regular file.
        DocumentDecodeError: If the document is not UTF-8 encoded JSON or nests
            deeper than the decoder supports.
        OSError: If the document exists but cannot be read.
    """
    if not path.is_file():
        raise DocumentMissingError(path)
    LOGGER.debug("loading %s", path)
    try:
        with path.open("r", encoding="utf-8") as stream:
            return cast(JSONValue, json.load(stream))
    except json.JSONDecodeError as exc:
        raise DocumentDecodeError(path, f"line {exc.lineno} column {exc.colno}: {exc.msg}") from exc
    except UnicodeDecodeError as exc:
        raise DocumentDecodeError(path, "not UTF-8 text") from exc
    except RecursionError as exc:
        raise DocumentDecodeError(path, "nesting too deep") from exc


def read_document(path: Path, report: IssueReport, *, label: str) -> LoadedDocument | None:
    """Load ``path`` and convert expected failures into a single error issue.

    Args:
        path: Filesystem path to the JSON document.
        report: Report receiving an error when the document cannot be loaded.
        label: Human-readable document name used in issue messages.

    Returns:
        LoadedDocument | None: Parsed document, or ``None`` after recording an issue.
    """
    try:
        return LoadedDocument(path=path, payload=load_document(path))
    except DocumentMissingError:
        report.add_error(f"Missing {label}: {path}")
    except DocumentDecodeError as exc:
        report.add_error(f"{label} is not valid JSON: {path} ({exc.detail})")
    except OSError as exc:
        report.add_error(f"Unable to read {label}: {path} ({exc.strerror or exc})")
    return None


def try_load_document(path: Path) -> JSONValue | None:
    """Return the parsed document or ``None`` when it cannot be loaded."""

    try:
        return load_document(path)
    except (DocumentMissingError, DocumentDecodeError, OSError) as exc:
        LOGGER.debug("ignoring unreadable document %s: %s", path, exc)
        return None


__all__ = ["LoadedDocument", "load_document", "read_document", "try_load_document"]
