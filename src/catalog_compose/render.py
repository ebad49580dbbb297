# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Render image references into declarative configs."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from .encoding import read_json
from .errors import DeclarativeConfigError, RenderError, UnexpectedBundleCount
from .models import DeclarativeConfig
from .process_utils import CommandExecutionError, run_command


@runtime_checkable
class CatalogRenderer(Protocol):
    """Resolve a catalog or bundle image reference into a declarative config."""

    def render(self, reference: str) -> DeclarativeConfig:
        """Return the snapshot described by ``reference``.

        Raises:
            RenderError: When the reference cannot be resolved or decoded.
        """


@dataclass(frozen=True, slots=True)
class OpmRenderer:
    """Renderer backed by the ``opm render`` command."""

    binary: str = "opm"
    timeout: float | None = None
    skip_tls_verify: bool = False
    use_http: bool = False

    def command(self, reference: str) -> list[str]:
        """Return the argument vector used to render ``reference``."""

        args = [self.binary, "render", reference, "--output", "json"]
        if self.skip_tls_verify:
            args.append("--skip-tls-verify")
        if self.use_http:
            args.append("--use-http")
        return args

    def render(self, reference: str) -> DeclarativeConfig:
        """Run ``opm render`` for ``reference`` and decode its JSON stream.

        Raises:
            RenderError: When ``opm`` is missing, fails, or prints malformed output.
        """

        try:
            completed = run_command(self.command(reference), timeout=self.timeout)
        except (CommandExecutionError, FileNotFoundError) as exc:
            raise RenderError(f"render {reference}: {exc}") from exc
        try:
            return read_json(completed.stdout)
        except DeclarativeConfigError as exc:
            raise RenderError(f"render {reference}: {exc}") from exc


def require_single_bundle(config: DeclarativeConfig, *, reference: str) -> DeclarativeConfig:
    """Return ``config`` when it holds exactly one bundle.

    Raises:
        UnexpectedBundleCount: When the render produced zero or several bundles.
    """

    if len(config.bundles) != 1:
        raise UnexpectedBundleCount(reference, len(config.bundles))
    return config


def render_bundle(renderer: CatalogRenderer, reference: str) -> DeclarativeConfig:
    """Render a bundle image and enforce the single-bundle contract.

    Args:
        renderer: Renderer used to resolve the image.
        reference: Bundle image reference.

    Returns:
        DeclarativeConfig: Snapshot containing exactly one bundle.

    Raises:
        RenderError: When rendering fails.
        UnexpectedBundleCount: When the render does not yield exactly one bundle.
    """

    return require_single_bundle(renderer.render(reference), reference=reference)


def render_pair(
    renderer: CatalogRenderer,
    index_image: str,
    bundle_image: str,
    *,
    parallel: bool = False,
) -> tuple[DeclarativeConfig, DeclarativeConfig]:
    """Render an index image and a bundle image, joining both before returning.

    Args:
        renderer: Renderer used to resolve both images.
        index_image: Catalog image reference.
        bundle_image: Bundle image reference.
        parallel: Run the two renders on worker threads when ``True``.

    Returns:
        tuple[DeclarativeConfig, DeclarativeConfig]: Index snapshot and single-bundle snapshot.
    """

    if not parallel:
        return renderer.render(index_image), render_bundle(renderer, bundle_image)
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="catalog-render") as executor:
        index_future = executor.submit(renderer.render, index_image)
        bundle_future = executor.submit(render_bundle, renderer, bundle_image)
        return index_future.result(), bundle_future.result()


__all__ = [
    "CatalogRenderer",
    "OpmRenderer",
    "render_bundle",
    "render_pair",
    "require_single_bundle",
]
