# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures: in-memory image collaborators and record builders."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

import pytest

from catalog_compose.console import get_console_manager
from catalog_compose.errors import LabelError, RenderError
from catalog_compose.models import Bundle, Channel, ChannelEntry, DeclarativeConfig, Package, Property
from catalog_compose.types import (
    CHANNELS_LABEL,
    PACKAGE_LABEL,
    PROPERTY_CSV_METADATA,
    PROPERTY_PACKAGE,
)

BundleFactory = Callable[..., Bundle]
SnapshotFactory = Callable[..., DeclarativeConfig]


@dataclass
class FakeRenderer:
    """Renderer returning canned snapshots keyed by image reference."""

    snapshots: dict[str, DeclarativeConfig] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    def add(self, reference: str, config: DeclarativeConfig) -> None:
        self.snapshots[reference] = config

    def render(self, reference: str) -> DeclarativeConfig:
        self.calls.append(reference)
        try:
            return self.snapshots[reference]
        except KeyError as exc:
            raise RenderError(f"render {reference}: image not found") from exc


@dataclass
class FakeLabelReader:
    """Label reader returning canned labels keyed by image reference."""

    labels_by_ref: dict[str, Mapping[str, str]] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    def add(self, reference: str, labels: Mapping[str, str]) -> None:
        self.labels_by_ref[reference] = labels

    def labels(self, reference: str) -> Mapping[str, str]:
        self.calls.append(reference)
        try:
            return self.labels_by_ref[reference]
        except KeyError as exc:
            raise LabelError(f"get image labels for {reference}: manifest unknown") from exc


@pytest.fixture(autouse=True)
def _fresh_consoles() -> None:
    """Rebind Rich consoles to the stderr stream captured by the current test."""

    get_console_manager().clear()


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def fake_labels() -> FakeLabelReader:
    return FakeLabelReader()


@pytest.fixture
def make_bundle() -> BundleFactory:
    """Return a factory for bundle records carrying a matching ``olm.package`` property."""

    def _make(
        name: str = "foo.v1.0.0",
        package: str = "foo",
        version: str = "1.0.0",
        install_modes: Mapping[str, bool] | None = None,
    ) -> Bundle:
        properties = [Property(type=PROPERTY_PACKAGE, value={"packageName": package, "version": version})]
        if install_modes is not None:
            properties.append(
                Property(
                    type=PROPERTY_CSV_METADATA,
                    value={
                        "installModes": [
                            {"type": mode, "supported": supported} for mode, supported in install_modes.items()
                        ],
                    },
                ),
            )
        return Bundle(
            name=name,
            package=package,
            image=f"quay.io/example/{package}-bundle:v{version}",
            properties=tuple(properties),
        )

    return _make


@pytest.fixture
def make_snapshot(make_bundle: BundleFactory) -> SnapshotFactory:
    """Return a factory for one-package snapshots (package, channel, bundle)."""

    def _make(
        package: str = "foo",
        version: str = "1.0.0",
        channel: str = "stable",
        description: str | None = None,
        install_modes: Mapping[str, bool] | None = None,
    ) -> DeclarativeConfig:
        bundle = make_bundle(
            name=f"{package}.v{version}",
            package=package,
            version=version,
            install_modes=install_modes,
        )
        return DeclarativeConfig(
            packages=(Package(name=package, default_channel=channel, description=description),),
            channels=(Channel(name=channel, package=package, entries=(ChannelEntry(name=bundle.name),)),),
            bundles=(bundle,),
        )

    return _make


@pytest.fixture
def bundle_labels() -> dict[str, str]:
    return {PACKAGE_LABEL: "foo", CHANNELS_LABEL: "stable,beta"}
