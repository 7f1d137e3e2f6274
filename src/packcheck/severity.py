# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Issue levels and the escalation policy shared by every validator."""

from __future__ import annotations

from enum import Enum
from typing import Final


class IssueLevel(str, Enum):
    """Severity levels attached to validation findings."""

    ERROR = "error"
    WARN = "warn"
    INFO = "info"


_LEVEL_LABELS: Final[dict[IssueLevel, str]] = {
    IssueLevel.ERROR: "ERROR",
    IssueLevel.WARN: "WARN",
    IssueLevel.INFO: "INFO",
}


def advisory_level(strict: bool) -> IssueLevel:
    """Return the level used for consistency-drift findings.

    Structural, referential and safety violations are always
    :attr:`IssueLevel.ERROR`. Drift findings (sort order, non-canonical
    versions, stale pointers, unreferenced files) become warnings in strict
    mode and informational notes otherwise.

    Args:
        strict: Whether the run escalates advisory findings.

    Returns:
        IssueLevel: ``WARN`` when ``strict`` is set, otherwise ``INFO``.
    """

    return IssueLevel.WARN if strict else IssueLevel.INFO


def level_label(level: IssueLevel) -> str:
    """Return the upper-case label rendered in tabular output."""

    return _LEVEL_LABELS[level]


__all__ = ["IssueLevel", "advisory_level", "level_label"]
