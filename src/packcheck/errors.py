# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised by packcheck operations."""

from __future__ import annotations

from pathlib import Path


class PackcheckError(RuntimeError):
    """Base class for errors raised outside the issue-reporting flow."""


class DocumentError(PackcheckError):
    """Raised when a marketplace JSON document cannot be loaded."""

    def __init__(self, path: Path, message: str) -> None:
        """Record the offending ``path`` alongside a descriptive ``message``."""

        super().__init__(f"{message}: {path}")
        self.path = path


class DocumentMissingError(DocumentError):
    """Raised when a document does not exist or is not a regular file."""

    def __init__(self, path: Path) -> None:
        super().__init__(path, "document not found")


class DocumentDecodeError(DocumentError):
    """Raised when a document is not valid JSON."""

    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(path, f"invalid JSON ({detail})")
        self.detail = detail


class ConfigError(PackcheckError):
    """Raised when configuration input is invalid."""


__all__ = (
    "ConfigError",
    "DocumentDecodeError",
    "DocumentError",
    "DocumentMissingError",
    "PackcheckError",
)
