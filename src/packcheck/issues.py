# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Issue records and the per-run report that accumulates them."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from .severity import IssueLevel, advisory_level


class Issue(BaseModel):
    """Single validation finding. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    level: IssueLevel
    message: str
    pack: str | None = None


class IssueCounts(BaseModel):
    """Aggregate issue counts by level."""

    model_config = ConfigDict(frozen=True)

    errors: int = 0
    warnings: int = 0
    infos: int = 0


class IssueReport(BaseModel):
    """Aggregate issues collected during one validation pass."""

    model_config = ConfigDict(validate_assignment=True)

    issues: list[Issue] = Field(default_factory=list)

    def add(self, level: IssueLevel, message: str, *, pack: str | None = None) -> Issue:
        issue = Issue(level=level, message=message, pack=pack)
        self.issues.append(issue)
        return issue

    def add_error(self, message: str, *, pack: str | None = None) -> Issue:
        return self.add(IssueLevel.ERROR, message, pack=pack)

    def add_warning(self, message: str, *, pack: str | None = None) -> Issue:
        return self.add(IssueLevel.WARN, message, pack=pack)

    def add_info(self, message: str, *, pack: str | None = None) -> Issue:
        return self.add(IssueLevel.INFO, message, pack=pack)

    def add_advisory(self, message: str, *, strict: bool, pack: str | None = None) -> Issue:
        """Record a consistency-drift finding at the level dictated by ``strict``."""

        return self.add(advisory_level(strict), message, pack=pack)

    def extend(self, issues: Iterable[Issue], *, pack: str | None = None) -> None:
        """Append ``issues``, attributing them to ``pack`` when they carry none."""

        self.issues.extend(
            issue.model_copy(update={"pack": pack}) if pack is not None and issue.pack is None else issue
            for issue in list(issues)
        )

    def merge(self, other: IssueReport, *, pack: str | None = None) -> None:
        self.extend(other.issues, pack=pack)

    @property
    def errors(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.level is IssueLevel.ERROR]

    @property
    def warnings(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.level is IssueLevel.WARN]

    @property
    def infos(self) -> list[Issue]:
        return [issue for issue in self.issues if issue.level is IssueLevel.INFO]

    def counts(self) -> IssueCounts:
        return IssueCounts(
            errors=len(self.errors),
            warnings=len(self.warnings),
            infos=len(self.infos),
        )

    def exit_code(self, *, strict: bool = False) -> int:
        """Map the collected issues to a process exit status.

        Args:
            strict: Whether warnings also fail the run.

        Returns:
            int: ``1`` when any error exists (or any warning under strict mode), else ``0``.
        """

        if self.errors:
            return 1
        if strict and self.warnings:
            return 1
        return 0


__all__ = ["Issue", "IssueCounts", "IssueReport"]
