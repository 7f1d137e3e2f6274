# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring packcheck commands."""

from __future__ import annotations

import click
import typer
from typer.core import TyperCommand

from .inventory import list_command, scan_command, stats_command
from .validate import validate_catalog_command, validate_pack_command


class PackcheckCommand(TyperCommand):
    """Command whose help lists options alphabetically by their long flag."""

    def format_options(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        records: list[tuple[str, tuple[str, str]]] = []
        for param in self.get_params(ctx):
            record = param.get_help_record(ctx)
            if record is not None:
                records.append((_flag_sort_key(param), record))
        if records:
            with formatter.section("Options"):
                formatter.write_dl([record for _, record in sorted(records, key=lambda item: item[0])])


def _flag_sort_key(param: click.Parameter) -> str:
    flags = [*param.opts, *param.secondary_opts]
    long_flags = [flag for flag in flags if flag.startswith("--")]
    return (long_flags or flags or [param.name or ""])[0].lstrip("-").lower()


app = typer.Typer(
    name="packcheck",
    help="Integrity validation for versioned pack marketplaces.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode=None,
)

app.command("validate-catalog", cls=PackcheckCommand)(validate_catalog_command)
app.command("validate-pack", cls=PackcheckCommand)(validate_pack_command)
app.command("list", cls=PackcheckCommand)(list_command)
app.command("scan", cls=PackcheckCommand)(scan_command)
app.command("stats", cls=PackcheckCommand)(stats_command)

__all__ = ["PackcheckCommand", "app"]
