# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Build a standalone catalog around a single bundle."""

from __future__ import annotations

from typing import IO

from .models import Channel, ChannelEntry, DeclarativeConfig
from .package_init import PackageInitializer, init_package
from .render import CatalogRenderer, render_bundle
from .types import SCHEMA_CHANNEL


def build_minimal_catalog(
    renderer: CatalogRenderer,
    bundle_image: str,
    package_name: str,
    channel_name: str,
    description: IO[str] | IO[bytes] | None = None,
    *,
    initializer: PackageInitializer = init_package,
) -> DeclarativeConfig:
    """Render ``bundle_image`` and wrap it in one package and one channel.

    The channel holds a single entry named after the rendered bundle, with no
    ``replaces`` or ``skips`` edge. Passthrough blobs of the render are dropped.

    Args:
        renderer: Renderer used to resolve the bundle image.
        bundle_image: Bundle image reference.
        package_name: Package name from the bundle labels.
        channel_name: Channel name, also used as the package default channel.
        description: Optional stream providing the package description.
        initializer: Package record factory.

    Returns:
        DeclarativeConfig: Snapshot with exactly one package, channel, and bundle.

    Raises:
        RenderError: When rendering fails.
        UnexpectedBundleCount: When the render does not yield exactly one bundle.
        InitError: When the package record cannot be synthesized.
    """

    rendered = render_bundle(renderer, bundle_image)
    bundle = rendered.bundles[0]
    package = initializer(package_name, channel_name, description)
    channel = Channel(
        schema=SCHEMA_CHANNEL,
        name=channel_name,
        package=package_name,
        entries=(ChannelEntry(name=bundle.name),),
    )
    return DeclarativeConfig(packages=(package,), channels=(channel,), bundles=(bundle,))


__all__ = ["build_minimal_catalog"]
