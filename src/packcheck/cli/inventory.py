# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Read-only catalog listing, disk scan and stats commands."""

from __future__ import annotations

from pathlib import Path

import typer

from ..errors import PackcheckError
from ..inventory import list_catalog, load_catalog, pack_stats, scan_disk
from ..logging import fail
from ..models import Catalog
from ..reporting import emit_json, render_catalog_rows, render_disk_scan, render_pack_stats
from .options import (
    CATALOG_OPTION,
    COLOR_OPTION,
    EMOJI_OPTION,
    FILE_OPTION,
    JSON_OPTION,
    ROOT_OPTION,
    VERBOSE_OPTION,
    CommandSettings,
    resolve_settings,
)


def list_command(
    root: ROOT_OPTION = Path("."),
    file: FILE_OPTION = None,
    json_output: JSON_OPTION = False,
    emoji: EMOJI_OPTION = None,
    color: COLOR_OPTION = None,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """List catalog packs sorted by packId."""

    settings = resolve_settings(root=root, json_output=json_output, emoji=emoji, color=color, verbose=verbose)
    rows = list_catalog(_load_catalog_or_exit(settings, settings.catalog_path(file)))
    if settings.json_output:
        emit_json([row.to_json() for row in rows])
        return
    render_catalog_rows(rows, color=settings.use_color, emoji=settings.use_emoji)


def scan_command(
    root: ROOT_OPTION = Path("."),
    catalog: CATALOG_OPTION = None,
    json_output: JSON_OPTION = False,
    emoji: EMOJI_OPTION = None,
    color: COLOR_OPTION = None,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Compare pack directories on disk with the catalog listing."""

    settings = resolve_settings(root=root, json_output=json_output, emoji=emoji, color=color, verbose=verbose)
    try:
        scan = scan_disk(settings.scanner(), settings.catalog_path(catalog))
    except PackcheckError as exc:
        fail(str(exc), use_emoji=settings.use_emoji, use_color=settings.use_color)
        raise typer.Exit(code=1) from exc
    if settings.json_output:
        emit_json(scan.to_json())
        return
    render_disk_scan(scan, color=settings.use_color, emoji=settings.use_emoji)


def stats_command(
    root: ROOT_OPTION = Path("."),
    catalog: CATALOG_OPTION = None,
    json_output: JSON_OPTION = False,
    emoji: EMOJI_OPTION = None,
    color: COLOR_OPTION = None,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Report command, asset and size statistics for each catalog pack."""

    settings = resolve_settings(root=root, json_output=json_output, emoji=emoji, color=color, verbose=verbose)
    catalog_model = _load_catalog_or_exit(settings, settings.catalog_path(catalog))
    rows = pack_stats(catalog_model, settings.scanner())
    if settings.json_output:
        emit_json([row.to_json() for row in rows])
        return
    render_pack_stats(rows, color=settings.use_color, emoji=settings.use_emoji)


def _load_catalog_or_exit(settings: CommandSettings, path: Path) -> Catalog:
    try:
        return load_catalog(path)
    except (PackcheckError, OSError) as exc:
        fail(f"Unable to load catalog: {exc}", use_emoji=settings.use_emoji, use_color=settings.use_color)
        raise typer.Exit(code=1) from exc


__all__ = ["list_command", "scan_command", "stats_command"]
