# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command-line entry point for composing a bundle catalog."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .compose import CatalogComposer, write_catalog
from .config import ConfigError, load_config
from .errors import CompositionError
from .logging import fail, ok

app = typer.Typer(
    name="catalog-compose",
    help="Compose a validated file-based catalog that installs one operator bundle.",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main() -> None:
    """Compose file-based catalogs for single operator bundles."""


@app.command()
def compose(
    bundle_image: Annotated[str, typer.Argument(help="Bundle image reference to make installable.")],
    index_image: Annotated[
        str | None,
        typer.Option("--index-image", help="Index image in which to inject the bundle."),
    ] = None,
    description_file: Annotated[
        Path | None,
        typer.Option("--description-file", exists=True, dir_okay=False, help="Package description for new catalogs."),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", dir_okay=False, help="Write the catalog here instead of stdout."),
    ] = None,
    dedup: Annotated[
        str | None,
        typer.Option("--dedup", help="Package de-duplication policy: 'exact' or 'name'."),
    ] = None,
    container_tool: Annotated[
        str | None,
        typer.Option("--container-tool", help="Tool used to read image labels: 'docker' or 'podman'."),
    ] = None,
    opm_binary: Annotated[str | None, typer.Option("--opm", help="Path to the opm binary.")] = None,
    parallel: Annotated[
        bool,
        typer.Option("--parallel", help="Render index and bundle images concurrently."),
    ] = False,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", exists=True, dir_okay=False, help="TOML or pyproject.toml configuration file."),
    ] = None,
    emoji: Annotated[
        bool | None,
        typer.Option("--emoji/--no-emoji", help="Toggle emoji in diagnostics.", show_default=False),
    ] = None,
) -> None:
    """Render, merge or build, validate, and print the catalog for BUNDLE_IMAGE."""

    try:
        settings = load_config(
            config_file,
            {
                "index_image": index_image,
                "dedup_policy": dedup,
                "container_tool": container_tool,
                "opm_binary": opm_binary,
                "parallel_render": True if parallel else None,
                "use_emoji": emoji,
            },
        )
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc

    composer = CatalogComposer.from_config(settings)
    try:
        if description_file is not None:
            with description_file.open("rb") as stream:
                result = composer.compose(bundle_image, description=stream)
        else:
            result = composer.compose(bundle_image)
    except CompositionError as exc:
        raise typer.Exit(code=1) from exc

    if output is None:
        typer.echo(result.content, nl=False)
        return
    try:
        written = write_catalog(result, output)
    except OSError as exc:
        fail(f"error writing catalog to {output}: {exc}", use_emoji=settings.use_emoji, use_color=settings.use_color)
        raise typer.Exit(code=1) from exc
    ok(
        f"Wrote catalog for package {result.package_name} ({result.starting_csv}) to {written}",
        use_emoji=settings.use_emoji,
        use_color=settings.use_color,
    )


__all__ = ["app"]
