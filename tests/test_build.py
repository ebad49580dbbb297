# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the minimal catalog builder."""

from __future__ import annotations

import io

import pytest

from catalog_compose.build import build_minimal_catalog
from catalog_compose.errors import InitError, RenderError, UnexpectedBundleCount
from catalog_compose.models import ChannelEntry, DeclarativeConfig, Other, Package
from catalog_compose.validate import validate_catalog


def test_build_wraps_bundle_in_package_and_channel(fake_renderer, make_snapshot) -> None:
    rendered = make_snapshot()
    fake_renderer.add("bundle:v1", rendered)

    config = build_minimal_catalog(fake_renderer, "bundle:v1", "foo", "stable")

    assert config.packages == (Package(name="foo", default_channel="stable"),)
    assert len(config.channels) == 1
    channel = config.channels[0]
    assert (channel.schema, channel.name, channel.package) == ("olm.channel", "stable", "foo")
    assert channel.entries == (ChannelEntry(name="foo.v1.0.0"),)
    assert config.bundles == rendered.bundles
    assert config.others == ()
    validate_catalog(config)


def test_build_attaches_description(fake_renderer, make_snapshot) -> None:
    fake_renderer.add("bundle:v1", make_snapshot())

    config = build_minimal_catalog(fake_renderer, "bundle:v1", "foo", "stable", io.StringIO("Foo operator"))

    assert config.packages[0].description == "Foo operator"


def test_build_drops_render_passthrough_blobs(fake_renderer, make_snapshot) -> None:
    rendered = make_snapshot().with_appended(others=(Other.from_mapping({"schema": "x.y", "package": "foo"}),))
    fake_renderer.add("bundle:v1", rendered)

    assert build_minimal_catalog(fake_renderer, "bundle:v1", "foo", "stable").others == ()


def test_build_uses_injected_initializer(fake_renderer, make_snapshot) -> None:
    fake_renderer.add("bundle:v1", make_snapshot())
    calls: list[tuple[str, str]] = []

    def _initializer(name: str, default_channel: str, description=None) -> Package:
        calls.append((name, default_channel))
        return Package(name=name, default_channel=default_channel, description="injected")

    config = build_minimal_catalog(fake_renderer, "bundle:v1", "foo", "alpha", initializer=_initializer)

    assert calls == [("foo", "alpha")]
    assert config.packages[0].description == "injected"


def test_build_requires_exactly_one_bundle(fake_renderer) -> None:
    fake_renderer.add("bundle:v1", DeclarativeConfig())

    with pytest.raises(UnexpectedBundleCount):
        build_minimal_catalog(fake_renderer, "bundle:v1", "foo", "stable")


def test_build_propagates_render_and_init_errors(fake_renderer, make_snapshot) -> None:
    with pytest.raises(RenderError):
        build_minimal_catalog(fake_renderer, "bundle:missing", "foo", "stable")

    fake_renderer.add("bundle:v1", make_snapshot())
    with pytest.raises(InitError):
        build_minimal_catalog(fake_renderer, "bundle:v1", "", "stable")
