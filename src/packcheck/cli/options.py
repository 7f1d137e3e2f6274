# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared Typer options and settings resolution for packcheck commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

import typer

from ..config import PackcheckConfig, load_config
from ..errors import ConfigError
from ..logging import configure_verbose_logging, fail
from ..scanner import MarketplaceScanner

ROOT_OPTION = Annotated[
    Path,
    typer.Option("--root", "-r", help="Marketplace root directory.", file_okay=False),
]
STRICT_OPTION = Annotated[
    bool | None,
    typer.Option("--strict/--no-strict", help="Escalate advisory findings and fail on warnings."),
]
JSON_OPTION = Annotated[
    bool,
    typer.Option("--json", help="Print machine-readable JSON instead of a table."),
]
EMOJI_OPTION = Annotated[
    bool | None,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji in console output."),
]
COLOR_OPTION = Annotated[
    bool | None,
    typer.Option("--color/--no-color", help="Toggle coloured console output."),
]
VERBOSE_OPTION = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Stream debug logging to stderr."),
]
CATALOG_OPTION = Annotated[
    Path | None,
    typer.Option("--catalog", help="Catalog path (default: catalog/index.v1.json under the root)."),
]
FILE_OPTION = Annotated[
    Path | None,
    typer.Option("--file", "-f", help="Catalog path (default: catalog/index.v1.json under the root)."),
]


@dataclass(slots=True)
class CommandSettings:
    """Resolved configuration and output preferences for one command."""

    config: PackcheckConfig
    json_output: bool

    @property
    def strict(self) -> bool:
        return self.config.strict

    @property
    def use_emoji(self) -> bool:
        return self.config.emoji

    @property
    def use_color(self) -> bool:
        return self.config.color

    def scanner(self) -> MarketplaceScanner:
        return MarketplaceScanner(self.config.root, packs_dirname=self.config.packs_dir)

    def catalog_path(self, override: Path | None = None) -> Path:
        return override if override is not None else self.config.catalog_path


def resolve_settings(
    *,
    root: Path,
    json_output: bool = False,
    strict: bool | None = None,
    emoji: bool | None = None,
    color: bool | None = None,
    verbose: bool = False,
) -> CommandSettings:
    """Merge configuration files with command-line flags.

    Exits with status ``1`` when configuration files are invalid.
    """

    if verbose:
        configure_verbose_logging()
    overrides: dict[str, Any] = {"strict": strict, "emoji": emoji, "color": color}
    try:
        config = load_config(root.resolve(), overrides=overrides)
    except ConfigError as exc:
        fail(str(exc), use_emoji=emoji is not False, use_color=color)
        raise typer.Exit(code=1) from exc
    return CommandSettings(config=config, json_output=json_output)


__all__ = [
    "CATALOG_OPTION",
    "COLOR_OPTION",
    "CommandSettings",
    "EMOJI_OPTION",
    "FILE_OPTION",
    "JSON_OPTION",
    "ROOT_OPTION",
    "STRICT_OPTION",
    "VERBOSE_OPTION",
    "resolve_settings",
]
