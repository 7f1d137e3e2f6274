# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Table and JSON rendering for issue reports and inventory listings."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Final

import typer
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from .inventory import CatalogRow, DiskScan, PackStats
from .issues import IssueReport
from .logging import fail, get_console, info, ok, warn
from .severity import IssueLevel, level_label

MESSAGE_WIDTH: Final[int] = 160
_BYTE_UNITS: Final[tuple[str, ...]] = ("B", "KB", "MB", "GB", "TB")
_LEVEL_STYLES: Final[dict[IssueLevel, str]] = {
    IssueLevel.ERROR: "bold red",
    IssueLevel.WARN: "yellow",
    IssueLevel.INFO: "cyan",
}


def truncate(value: object, limit: int) -> str:
    """Shorten ``value`` to ``limit`` characters, ending with ``...`` when cut."""

    text = str(value)
    if len(text) <= limit:
        return text
    if limit <= 3:
        return text[:limit]
    return f"{text[: limit - 3]}..."


def format_bytes(size: float) -> str:
    """Render ``size`` with a binary unit suffix (``B`` through ``TB``).

    Bytes are shown without decimals; larger units use one decimal from 10
    upwards and two below.
    """

    if size <= 0:
        return "0 B"
    value = float(size)
    index = 0
    while value >= 1024 and index < len(_BYTE_UNITS) - 1:
        value /= 1024
        index += 1
    decimals = 0 if index == 0 else 1 if value >= 10 else 2
    return f"{value:.{decimals}f} {_BYTE_UNITS[index]}"


def summary_line(report: IssueReport) -> str:
    counts = report.counts()
    return f"Summary: {counts.errors} errors, {counts.warnings} warnings, {counts.infos} info"


def issue_payload(report: IssueReport, **parameters: Any) -> dict[str, Any]:
    """Return the machine-readable form of ``report`` prefixed by run ``parameters``."""

    counts = report.counts()
    return {
        **{key: _jsonable(value) for key, value in parameters.items()},
        "errors": counts.errors,
        "warnings": counts.warnings,
        "infos": counts.infos,
        "issues": [issue.model_dump(mode="json") for issue in report.issues],
    }


def emit_json(payload: Mapping[str, Any] | Sequence[Any]) -> None:
    typer.echo(json.dumps(payload, indent=2))


def render_issue_report(
    report: IssueReport,
    *,
    title: str,
    show_pack: bool = False,
    color: bool = True,
    emoji: bool = True,
) -> None:
    """Print ``report`` as a titled issue table followed by its summary line.

    Args:
        report: Issues to render in collection order.
        title: Heading printed above the table.
        show_pack: Include a PACK column for pack-attributed issues.
        color: Enable Rich styling when attached to a terminal.
        emoji: Enable emoji rendering.
    """

    console = get_console(color=color, emoji=emoji)
    console.print(Text(title))
    console.print()
    if not report.issues:
        ok("OK: no issues found.", use_emoji=emoji, use_color=color)
    else:
        console.print(_issue_table(report, show_pack=show_pack))
    console.print()
    counts = report.counts()
    if counts.errors:
        fail(summary_line(report), use_emoji=emoji, use_color=color)
    elif counts.warnings:
        warn(summary_line(report), use_emoji=emoji, use_color=color)
    else:
        info(summary_line(report), use_emoji=emoji, use_color=color)


def _issue_table(report: IssueReport, *, show_pack: bool) -> Table:
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("LEVEL", no_wrap=True)
    if show_pack:
        table.add_column("PACK", overflow="fold")
    table.add_column("MESSAGE", overflow="fold")
    for issue in report.issues:
        cells = [Text(level_label(issue.level), style=_LEVEL_STYLES[issue.level])]
        if show_pack:
            cells.append(Text(issue.pack or "-"))
        cells.append(Text(truncate(issue.message, MESSAGE_WIDTH)))
        table.add_row(*cells)
    return table


def render_catalog_rows(rows: Sequence[CatalogRow], *, color: bool = True, emoji: bool = True) -> None:
    console = get_console(color=color, emoji=emoji)
    console.print(Text(f"Marketplace packs ({len(rows)})"))
    console.print()
    table = _table(("PACK", "LATEST", "DISPLAY"))
    for row in rows:
        table.add_row(*_cells((row.pack_id, row.latest_version or "-", truncate(row.display_name or "-", 60))))
    console.print(table)


def render_disk_scan(scan: DiskScan, *, color: bool = True, emoji: bool = True) -> None:
    """Print disk pack rows and the list of catalog packs missing on disk."""

    console = get_console(color=color, emoji=emoji)
    console.print(Text(f"Disk packs ({len(scan.disk)})"))
    console.print()
    table = _table(("PACK", "LATEST", "VERSIONS", "STATUS"))
    for row in scan.disk:
        versions = ", ".join(row.versions) if row.versions else "-"
        table.add_row(*_cells((row.pack_id, row.latest_version, versions, row.status)))
    console.print(table)
    _print_missing(console, scan.catalog_missing_on_disk)


def _print_missing(console: Console, missing: Sequence[str]) -> None:
    if not missing:
        console.print(Text("Catalog packs missing on disk: none"))
        return
    console.print(Text(f"Catalog packs missing on disk ({len(missing)}):"))
    for pack_id in missing:
        console.print(Text(f"- {pack_id}"))


def render_pack_stats(rows: Sequence[PackStats], *, color: bool = True, emoji: bool = True) -> None:
    console = get_console(color=color, emoji=emoji)
    console.print(Text(f"Pack stats ({len(rows)})"))
    console.print()
    table = _table(("PACK", "VER", "CMD", "TAGS", "ASSET", "GRAPH", "SIZE", "STATUS"))
    for row in rows:
        status = "ok" if row.status == "ok" else f"error: {row.error or 'unknown'}"
        table.add_row(
            *_cells(
                (
                    row.pack_id,
                    row.latest_version,
                    str(row.command_count),
                    str(row.unique_tags),
                    str(row.assets_count),
                    str(row.graphs_count),
                    format_bytes(row.total_bytes),
                    truncate(status, 80),
                ),
            ),
        )
    console.print(table)


def _table(headers: Iterable[str]) -> Table:
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    for header in headers:
        table.add_column(header, overflow="fold")
    return table


def _cells(values: Iterable[str]) -> list[Text]:
    return [Text(value) for value in values]


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


__all__ = [
    "MESSAGE_WIDTH",
    "emit_json",
    "format_bytes",
    "issue_payload",
    "render_catalog_rows",
    "render_disk_scan",
    "render_issue_report",
    "render_pack_stats",
    "summary_line",
    "truncate",
]
