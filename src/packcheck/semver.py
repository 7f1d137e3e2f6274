# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Semantic version parsing, normalisation and precedence ordering.

Pack versions follow ``MAJOR.MINOR.PATCH[-prerelease][+build]``. A single
leading ``v``/``V`` is tolerated on input and stripped by :func:`normalize_semver`.
Build metadata is accepted by the grammar but never participates in ordering.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Final, Literal

SEMVER_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$",
)
_NUMERIC_IDENTIFIER: Final[re.Pattern[str]] = re.compile(r"^[0-9]+$")

Ordering = Literal[-1, 0, 1]


@dataclass(frozen=True, slots=True)
class SemVer:
    """Parsed semantic version."""

    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text


def normalize_semver(version: object) -> str:
    """Strip one leading ``v``/``V``; no other transformation is applied.

    Args:
        version: Candidate version value of any type.

    Returns:
        str: Normalised version text, or ``""`` for non-string or empty input.
    """

    if not isinstance(version, str) or not version:
        return ""
    if version[0] in {"v", "V"}:
        return version[1:]
    return version


def parse_semver(version: object) -> SemVer | None:
    """Return the parsed version or ``None`` when ``version`` is not semver."""

    match = SEMVER_PATTERN.fullmatch(normalize_semver(version))
    if match is None:
        return None
    major, minor, patch, prerelease, build = match.groups()
    return SemVer(
        major=int(major),
        minor=int(minor),
        patch=int(patch),
        prerelease=tuple(prerelease.split(".")) if prerelease else (),
        build=tuple(build.split(".")) if build else (),
    )


def is_semver(version: object) -> bool:
    """Return ``True`` when ``version`` normalises to a valid semantic version."""

    return parse_semver(version) is not None


def _sign(value: int) -> Ordering:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def _compare_identifiers(left: str, right: str) -> Ordering:
    left_numeric = bool(_NUMERIC_IDENTIFIER.match(left))
    right_numeric = bool(_NUMERIC_IDENTIFIER.match(right))
    if left_numeric and right_numeric:
        return _sign(int(left) - int(right))
    # Numeric identifiers always have lower precedence than alphanumeric ones.
    if left_numeric:
        return -1
    if right_numeric:
        return 1
    if left == right:
        return 0
    return 1 if left > right else -1


def _compare_prerelease(left: tuple[str, ...], right: tuple[str, ...]) -> Ordering:
    if not left and not right:
        return 0
    if not left:
        return 1
    if not right:
        return -1
    for left_id, right_id in zip(left, right):
        result = _compare_identifiers(left_id, right_id)
        if result:
            return result
    return _sign(len(left) - len(right))


def compare_parsed(left: SemVer, right: SemVer) -> Ordering:
    """Compare two parsed versions by semver precedence."""

    for left_part, right_part in (
        (left.major, right.major),
        (left.minor, right.minor),
        (left.patch, right.patch),
    ):
        if left_part != right_part:
            return _sign(left_part - right_part)
    return _compare_prerelease(left.prerelease, right.prerelease)


def compare_semver(left: object, right: object) -> Ordering | None:
    """Compare two version strings by semver precedence.

    Args:
        left: First version string.
        right: Second version string.

    Returns:
        Ordering | None: ``-1``, ``0`` or ``1``; ``None`` when either input is
        not a valid semantic version and the pair is therefore incomparable.
    """

    parsed_left = parse_semver(left)
    parsed_right = parse_semver(right)
    if parsed_left is None or parsed_right is None:
        return None
    return compare_parsed(parsed_left, parsed_right)


def max_semver(versions: Iterable[str]) -> str | None:
    """Return the raw string of the greatest valid version in ``versions``.

    Invalid entries are skipped. The first of several equal-precedence
    versions wins. Returns ``None`` when nothing parses.
    """

    best: str | None = None
    best_parsed: SemVer | None = None
    for candidate in versions:
        parsed = parse_semver(candidate)
        if parsed is None:
            continue
        if best_parsed is None or compare_parsed(parsed, best_parsed) > 0:
            best, best_parsed = candidate, parsed
    return best


__all__ = [
    "Ordering",
    "SEMVER_PATTERN",
    "SemVer",
    "compare_parsed",
    "compare_semver",
    "is_semver",
    "max_semver",
    "normalize_semver",
    "parse_semver",
]
