# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Structural model conversion and integrity checks for composed catalogs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .errors import ValidationError
from .models import Bundle, Channel, ChannelEntry, DeclarativeConfig, Package
from .schema import SchemaRepository, default_repository
from .types import PROPERTY_PACKAGE


@dataclass(slots=True)
class ModelBundle:
    """Bundle resolved against its package and the channels listing it."""

    record: Bundle
    package: ModelPackage
    channels: list[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        """Return the bundle name."""

        return self.record.name

    def validate(self) -> None:
        """Check the bundle's ``olm.package`` property.

        Raises:
            ValidationError: When the property is missing, repeated, or names another package.
        """

        context = f"package {self.package.name!r}, bundle {self.name!r}"
        if not self.channels:
            raise ValidationError(f"{context}: not found in any channel entries")
        declared = self.record.properties_of_type(PROPERTY_PACKAGE)
        if len(declared) != 1:
            raise ValidationError(
                f"{context}: must be exactly one property with type {PROPERTY_PACKAGE!r}, found {len(declared)}",
            )
        value = declared[0].value
        package_name = value.get("packageName") if isinstance(value, Mapping) else None
        if package_name != self.package.name:
            raise ValidationError(
                f"{context}: {PROPERTY_PACKAGE!r} property names package {package_name!r}",
            )


@dataclass(slots=True)
class ModelChannel:
    """Channel with entries resolved to bundles of the owning package."""

    record: Channel
    package: ModelPackage
    bundles: dict[str, ModelBundle] = field(default_factory=dict)

    @property
    def name(self) -> str:
        """Return the channel name."""

        return self.record.name

    def head(self) -> ChannelEntry:
        """Return the single entry not replaced or skipped by any other entry.

        Raises:
            ValidationError: When the channel has zero or several heads.
        """

        superseded: set[str] = set()
        for entry in self.record.entries:
            if entry.replaces:
                superseded.add(entry.replaces)
            superseded.update(entry.skips)
        heads = [entry for entry in self.record.entries if entry.name not in superseded]
        context = f"package {self.package.name!r}, channel {self.name!r}"
        if not heads:
            raise ValidationError(f"{context}: no channel head found in graph")
        if len(heads) > 1:
            names = ", ".join(sorted(entry.name for entry in heads))
            raise ValidationError(f"{context}: multiple channel heads found in graph: {names}")
        return heads[0]

    def validate(self) -> None:
        """Check that the channel has entries, one head, and an acyclic replaces chain.

        Raises:
            ValidationError: On the first violation found.
        """

        context = f"package {self.package.name!r}, channel {self.name!r}"
        if not self.record.entries:
            raise ValidationError(f"{context}: channel must contain at least one bundle")
        head = self.head()
        replaces = {entry.name: entry.replaces for entry in self.record.entries}
        seen: set[str] = set()
        current: str | None = head.name
        while current is not None and current in replaces:
            if current in seen:
                raise ValidationError(f"{context}: detected cycle in replaces chain at {current!r}")
            seen.add(current)
            current = replaces[current]


@dataclass(slots=True)
class ModelPackage:
    """Package with its channels and bundles resolved by name."""

    record: Package
    channels: dict[str, ModelChannel] = field(default_factory=dict)
    bundles: dict[str, ModelBundle] = field(default_factory=dict)

    @property
    def name(self) -> str:
        """Return the package name."""

        return self.record.name

    def validate(self) -> None:
        """Validate the package and everything it owns.

        Raises:
            ValidationError: On the first violation found.
        """

        if not self.record.default_channel:
            raise ValidationError(f"package {self.name!r}: default channel must be set")
        if not self.channels:
            raise ValidationError(f"package {self.name!r}: package must contain at least one channel")
        for channel in self.channels.values():
            channel.validate()
        for bundle in self.bundles.values():
            bundle.validate()


@dataclass(slots=True)
class Model:
    """Normalised structural model of a declarative config."""

    packages: dict[str, ModelPackage] = field(default_factory=dict)

    def validate(self) -> None:
        """Validate every package in name order.

        Raises:
            ValidationError: On the first violation found.
        """

        for name in sorted(self.packages):
            self.packages[name].validate()


def convert_to_model(config: DeclarativeConfig) -> Model:
    """Resolve name references between packages, channels, and bundles.

    Args:
        config: Snapshot to convert.

    Returns:
        Model: Structural model with every reference resolved.

    Raises:
        ValidationError: When a name is missing, duplicated, or dangling.
    """

    model = Model()
    for package in config.packages:
        if not package.name:
            raise ValidationError("config contains package with no name")
        if package.name in model.packages:
            raise ValidationError(f"duplicate package {package.name!r}")
        model.packages[package.name] = ModelPackage(record=package)

    for channel in config.channels:
        if not channel.package:
            raise ValidationError(f"channel {channel.name!r}: package name must be set")
        owner = model.packages.get(channel.package)
        if owner is None:
            raise ValidationError(f"unknown package {channel.package!r} for channel {channel.name!r}")
        if not channel.name:
            raise ValidationError(f"package {channel.package!r}: channel has no name")
        if channel.name in owner.channels:
            raise ValidationError(f"package {channel.package!r} contains duplicate channel {channel.name!r}")
        entry_names: set[str] = set()
        for entry in channel.entries:
            if entry.name in entry_names:
                raise ValidationError(
                    f"invalid package {channel.package!r}, channel {channel.name!r}: duplicate entry {entry.name!r}",
                )
            entry_names.add(entry.name)
        owner.channels[channel.name] = ModelChannel(record=channel, package=owner)

    for bundle in config.bundles:
        owner = model.packages.get(bundle.package)
        if owner is None:
            raise ValidationError(f"unknown package {bundle.package!r} for bundle {bundle.name!r}")
        if bundle.name in owner.bundles:
            raise ValidationError(f"package {bundle.package!r} has duplicate bundle {bundle.name!r}")
        owner.bundles[bundle.name] = ModelBundle(record=bundle, package=owner)

    for package in model.packages.values():
        for channel in package.channels.values():
            for entry in channel.record.entries:
                resolved = package.bundles.get(entry.name)
                if resolved is None:
                    raise ValidationError(
                        f"package {package.name!r}, channel {channel.name!r}: "
                        f"entry {entry.name!r} has no corresponding bundle",
                    )
                resolved.channels.append(channel.name)
                channel.bundles[entry.name] = resolved
        default_channel = package.record.default_channel
        if default_channel and default_channel not in package.channels:
            raise ValidationError(
                f"package {package.name!r}: default channel {default_channel!r} not found in channels list",
            )
    return model


def validate_catalog(config: DeclarativeConfig, *, schemas: SchemaRepository | None = None) -> Model:
    """Schema-check every blob, convert to the structural model, and validate it.

    Args:
        config: Snapshot produced by the merger or the minimal builder.
        schemas: Optional schema repository; the packaged schemas are used by default.

    Returns:
        Model: Validated structural model.

    Raises:
        ValidationError: Carrying the first violation found.
    """

    repository = schemas or default_repository()
    records = (*config.packages, *config.channels, *config.bundles)
    for index, record in enumerate(records):
        repository.validate_blob(record.to_dict(), context=f"{record.schema} {record.name!r} (#{index})")
    model = convert_to_model(config)
    model.validate()
    return model


__all__ = [
    "Model",
    "ModelBundle",
    "ModelChannel",
    "ModelPackage",
    "convert_to_model",
    "validate_catalog",
]
