# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Catalog and pack validation CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..packs import PackValidationOptions
from ..reporting import emit_json, issue_payload, render_issue_report
from ..suite import PackSelection, run_catalog_validation, run_pack_validation
from .options import (
    CATALOG_OPTION,
    COLOR_OPTION,
    EMOJI_OPTION,
    FILE_OPTION,
    JSON_OPTION,
    ROOT_OPTION,
    STRICT_OPTION,
    VERBOSE_OPTION,
    resolve_settings,
)

ALL_OPTION = Annotated[bool, typer.Option("--all", help="Validate every pack listed in the catalog.")]
PACK_ID_OPTION = Annotated[
    str | None,
    typer.Option("--pack-id", help="Validate one pack by id (publisher.slug)."),
]
VERSION_OPTION = Annotated[
    str | None,
    typer.Option("--version", help="Validate one specific version folder."),
]
ALL_VERSIONS_OPTION = Annotated[
    bool,
    typer.Option("--all-versions", help="Validate every version found on disk for each pack."),
]


def validate_catalog_command(
    root: ROOT_OPTION = Path("."),
    file: FILE_OPTION = None,
    strict: STRICT_OPTION = None,
    json_output: JSON_OPTION = False,
    emoji: EMOJI_OPTION = None,
    color: COLOR_OPTION = None,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Validate the catalog index."""

    settings = resolve_settings(
        root=root,
        json_output=json_output,
        strict=strict,
        emoji=emoji,
        color=color,
        verbose=verbose,
    )
    catalog_path = settings.catalog_path(file)
    report = run_catalog_validation(catalog_path, strict=settings.strict)
    if settings.json_output:
        emit_json(issue_payload(report, file=str(catalog_path), strict=settings.strict))
    else:
        render_issue_report(
            report,
            title=f"Catalog validation: {catalog_path}",
            color=settings.use_color,
            emoji=settings.use_emoji,
        )
    raise typer.Exit(code=report.exit_code(strict=settings.strict))


def validate_pack_command(
    root: ROOT_OPTION = Path("."),
    all_packs: ALL_OPTION = False,
    pack_id: PACK_ID_OPTION = None,
    version: VERSION_OPTION = None,
    all_versions: ALL_VERSIONS_OPTION = False,
    catalog: CATALOG_OPTION = None,
    strict: STRICT_OPTION = None,
    json_output: JSON_OPTION = False,
    emoji: EMOJI_OPTION = None,
    color: COLOR_OPTION = None,
    verbose: VERBOSE_OPTION = False,
) -> None:
    """Validate pack metadata, manifests, hashes and profile linkage."""

    if not all_packs and not (pack_id and pack_id.strip()):
        raise typer.BadParameter("Missing required --all or --pack-id.", param_hint="--all / --pack-id")
    settings = resolve_settings(
        root=root,
        json_output=json_output,
        strict=strict,
        emoji=emoji,
        color=color,
        verbose=verbose,
    )
    options = PackValidationOptions(
        strict=settings.strict,
        version=version.strip() if version and version.strip() else None,
        all_versions=all_versions,
        ignored_names=settings.config.ignored_files,
    )
    report = run_pack_validation(
        settings.scanner(),
        PackSelection(all_packs=all_packs, pack_id=pack_id),
        catalog_path=settings.catalog_path(catalog),
        options=options,
    )
    if settings.json_output:
        emit_json(
            issue_payload(
                report,
                strict=settings.strict,
                all=all_packs,
                packId=pack_id,
                version=version,
            ),
        )
    else:
        render_issue_report(
            report,
            title="Pack validation",
            show_pack=True,
            color=settings.use_color,
            emoji=settings.use_emoji,
        )
    raise typer.Exit(code=report.exit_code(strict=settings.strict))


__all__ = ["validate_catalog_command", "validate_pack_command"]
