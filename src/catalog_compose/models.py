# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Immutable declarative config records and the snapshot aggregate."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import cast

from .errors import DeclarativeConfigError
from .types import SCHEMA_BUNDLE, SCHEMA_CHANNEL, SCHEMA_PACKAGE, JSONValue
from .utils import (
    expect_mapping,
    expect_string,
    freeze_json_mapping,
    freeze_json_value,
    mapping_array,
    optional_string,
    string_array,
    thaw_json_value,
)


@dataclass(frozen=True, slots=True)
class Property:
    """Typed property attached to packages, channels, and bundles."""

    type: str
    value: JSONValue

    def __post_init__(self) -> None:
        """Freeze ``value`` so equality does not depend on list or tuple containers."""

        object.__setattr__(self, "value", freeze_json_value(self.value, context=f"property {self.type}"))

    @staticmethod
    def from_mapping(data: Mapping[str, JSONValue], *, context: str) -> Property:
        """Create a property from its JSON object form.

        Args:
            data: Mapping with ``type`` and ``value`` keys.
            context: Human-readable context used in error messages.

        Returns:
            Property: Property with a frozen ``value``.
        """

        if "value" not in data:
            raise DeclarativeConfigError(f"{context}: property is missing 'value'")
        return Property(
            type=expect_string(data.get("type"), key="type", context=context),
            value=data["value"],
        )

    def to_dict(self) -> dict[str, JSONValue]:
        """Return the JSON object form of the property."""

        return {"type": self.type, "value": thaw_json_value(self.value)}


@dataclass(frozen=True, slots=True)
class Icon:
    """Package icon payload."""

    base64data: str
    mediatype: str

    def to_dict(self) -> dict[str, JSONValue]:
        """Return the JSON object form of the icon."""

        return {"base64data": self.base64data, "mediatype": self.mediatype}


@dataclass(frozen=True, slots=True)
class Package:
    """``olm.package`` record describing one installable package."""

    name: str
    default_channel: str | None = None
    icon: Icon | None = None
    description: str | None = None
    properties: tuple[Property, ...] = ()
    schema: str = SCHEMA_PACKAGE

    @staticmethod
    def from_mapping(data: Mapping[str, JSONValue], *, context: str = SCHEMA_PACKAGE) -> Package:
        """Create a package record from its JSON blob.

        Args:
            data: Decoded ``olm.package`` blob.
            context: Human-readable context used in error messages.

        Returns:
            Package: Package record.

        Raises:
            DeclarativeConfigError: If a field has the wrong type.
        """

        icon: Icon | None = None
        raw_icon = data.get("icon")
        if raw_icon is not None:
            icon_mapping = expect_mapping(raw_icon, key="icon", context=context)
            icon = Icon(
                base64data=expect_string(icon_mapping.get("base64data"), key="icon.base64data", context=context),
                mediatype=expect_string(icon_mapping.get("mediatype"), key="icon.mediatype", context=context),
            )
        return Package(
            name=expect_string(data.get("name"), key="name", context=context),
            default_channel=optional_string(data.get("defaultChannel"), key="defaultChannel", context=context),
            icon=icon,
            description=optional_string(data.get("description"), key="description", context=context),
            properties=_properties(data.get("properties"), context=context),
        )

    def to_dict(self) -> dict[str, JSONValue]:
        """Return the ``olm.package`` blob, omitting empty optional fields."""

        payload: dict[str, JSONValue] = {"schema": self.schema, "name": self.name}
        if self.default_channel:
            payload["defaultChannel"] = self.default_channel
        if self.icon is not None:
            payload["icon"] = self.icon.to_dict()
        if self.description:
            payload["description"] = self.description
        if self.properties:
            payload["properties"] = [item.to_dict() for item in self.properties]
        return payload


@dataclass(frozen=True, slots=True)
class ChannelEntry:
    """Placement of one bundle within a channel's upgrade graph."""

    name: str
    replaces: str | None = None
    skips: tuple[str, ...] = ()
    skip_range: str | None = None

    @staticmethod
    def from_mapping(data: Mapping[str, JSONValue], *, context: str) -> ChannelEntry:
        """Create a channel entry from its JSON object form."""

        return ChannelEntry(
            name=expect_string(data.get("name"), key="name", context=context),
            replaces=optional_string(data.get("replaces"), key="replaces", context=context),
            skips=string_array(data.get("skips"), key="skips", context=context),
            skip_range=optional_string(data.get("skipRange"), key="skipRange", context=context),
        )

    def to_dict(self) -> dict[str, JSONValue]:
        """Return the JSON object form of the entry."""

        payload: dict[str, JSONValue] = {"name": self.name}
        if self.replaces:
            payload["replaces"] = self.replaces
        if self.skips:
            payload["skips"] = list(self.skips)
        if self.skip_range:
            payload["skipRange"] = self.skip_range
        return payload


@dataclass(frozen=True, slots=True)
class Channel:
    """``olm.channel`` record: a named update stream of one package."""

    name: str
    package: str
    entries: tuple[ChannelEntry, ...] = ()
    properties: tuple[Property, ...] = ()
    schema: str = SCHEMA_CHANNEL

    @staticmethod
    def from_mapping(data: Mapping[str, JSONValue], *, context: str = SCHEMA_CHANNEL) -> Channel:
        """Create a channel record from its JSON blob."""

        entries = tuple(
            ChannelEntry.from_mapping(item, context=f"{context}.entries[{index}]")
            for index, item in enumerate(mapping_array(data.get("entries"), key="entries", context=context))
        )
        return Channel(
            name=expect_string(data.get("name"), key="name", context=context),
            package=expect_string(data.get("package"), key="package", context=context),
            entries=entries,
            properties=_properties(data.get("properties"), context=context),
        )

    def to_dict(self) -> dict[str, JSONValue]:
        """Return the ``olm.channel`` blob."""

        payload: dict[str, JSONValue] = {
            "schema": self.schema,
            "name": self.name,
            "package": self.package,
            "entries": [entry.to_dict() for entry in self.entries],
        }
        if self.properties:
            payload["properties"] = [item.to_dict() for item in self.properties]
        return payload


@dataclass(frozen=True, slots=True)
class RelatedImage:
    """Image referenced by a bundle's manifests."""

    name: str
    image: str

    def to_dict(self) -> dict[str, JSONValue]:
        """Return the JSON object form of the related image."""

        return {"name": self.name, "image": self.image}


@dataclass(frozen=True, slots=True)
class Bundle:
    """``olm.bundle`` record: the rendered content of one operator version."""

    name: str
    package: str
    image: str = ""
    properties: tuple[Property, ...] = ()
    related_images: tuple[RelatedImage, ...] = ()
    schema: str = SCHEMA_BUNDLE

    @staticmethod
    def from_mapping(data: Mapping[str, JSONValue], *, context: str = SCHEMA_BUNDLE) -> Bundle:
        """Create a bundle record from its JSON blob."""

        related = tuple(
            RelatedImage(
                name=optional_string(item.get("name"), key="relatedImages.name", context=context) or "",
                image=expect_string(item.get("image"), key="relatedImages.image", context=context),
            )
            for item in mapping_array(data.get("relatedImages"), key="relatedImages", context=context)
        )
        return Bundle(
            name=expect_string(data.get("name"), key="name", context=context),
            package=expect_string(data.get("package"), key="package", context=context),
            image=optional_string(data.get("image"), key="image", context=context) or "",
            properties=_properties(data.get("properties"), context=context),
            related_images=related,
        )

    def properties_of_type(self, property_type: str) -> tuple[Property, ...]:
        """Return the bundle properties whose type equals ``property_type``."""

        return tuple(item for item in self.properties if item.type == property_type)

    def to_dict(self) -> dict[str, JSONValue]:
        """Return the ``olm.bundle`` blob."""

        payload: dict[str, JSONValue] = {
            "schema": self.schema,
            "name": self.name,
            "package": self.package,
            "image": self.image,
        }
        if self.properties:
            payload["properties"] = [item.to_dict() for item in self.properties]
        if self.related_images:
            payload["relatedImages"] = [item.to_dict() for item in self.related_images]
        return payload


@dataclass(frozen=True, slots=True)
class Other:
    """Blob of a schema the structural model does not type; kept verbatim."""

    schema: str
    blob: Mapping[str, JSONValue] = field(repr=False)
    package: str | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        """Freeze ``blob`` so it is preserved verbatim."""

        object.__setattr__(self, "blob", freeze_json_mapping(self.blob, context=f"<{self.schema}>"))

    @staticmethod
    def from_mapping(data: Mapping[str, JSONValue], *, context: str = "<other>") -> Other:
        """Wrap ``data`` without interpreting anything beyond its identity keys."""

        return Other(
            schema=expect_string(data.get("schema"), key="schema", context=context),
            blob=data,
            package=optional_string(data.get("package"), key="package", context=context),
            name=optional_string(data.get("name"), key="name", context=context),
        )

    def to_dict(self) -> dict[str, JSONValue]:
        """Return the original blob."""

        return cast(dict[str, JSONValue], thaw_json_value(self.blob))


@dataclass(frozen=True, slots=True)
class DeclarativeConfig:
    """Snapshot of a catalog: packages, channels, bundles, and passthrough blobs."""

    packages: tuple[Package, ...] = ()
    channels: tuple[Channel, ...] = ()
    bundles: tuple[Bundle, ...] = ()
    others: tuple[Other, ...] = ()

    @classmethod
    def from_blobs(cls, blobs: Iterable[Mapping[str, JSONValue]]) -> DeclarativeConfig:
        """Build a snapshot from decoded blobs, dispatching on their ``schema`` key.

        Args:
            blobs: Decoded JSON objects in document order.

        Returns:
            DeclarativeConfig: Snapshot preserving the order of ``blobs`` per record type.

        Raises:
            DeclarativeConfigError: If a blob lacks a schema or has malformed fields.
        """

        packages: list[Package] = []
        channels: list[Channel] = []
        bundles: list[Bundle] = []
        others: list[Other] = []
        for index, blob in enumerate(blobs):
            context = f"blob[{index}]"
            schema = expect_string(blob.get("schema"), key="schema", context=context)
            if schema == SCHEMA_PACKAGE:
                packages.append(Package.from_mapping(blob, context=context))
            elif schema == SCHEMA_CHANNEL:
                channels.append(Channel.from_mapping(blob, context=context))
            elif schema == SCHEMA_BUNDLE:
                bundles.append(Bundle.from_mapping(blob, context=context))
            else:
                others.append(Other.from_mapping(blob, context=context))
        return cls(
            packages=tuple(packages),
            channels=tuple(channels),
            bundles=tuple(bundles),
            others=tuple(others),
        )

    def with_appended(
        self,
        *,
        packages: Iterable[Package] = (),
        channels: Iterable[Channel] = (),
        bundles: Iterable[Bundle] = (),
        others: Iterable[Other] = (),
    ) -> DeclarativeConfig:
        """Return a copy of the snapshot with records appended to each sequence."""

        return replace(
            self,
            packages=(*self.packages, *packages),
            channels=(*self.channels, *channels),
            bundles=(*self.bundles, *bundles),
            others=(*self.others, *others),
        )


def _properties(value: JSONValue | None, *, context: str) -> tuple[Property, ...]:
    return tuple(
        Property.from_mapping(item, context=f"{context}.properties[{index}]")
        for index, item in enumerate(mapping_array(value, key="properties", context=context))
    )


__all__ = [
    "Bundle",
    "Channel",
    "ChannelEntry",
    "DeclarativeConfig",
    "Icon",
    "Other",
    "Package",
    "Property",
    "RelatedImage",
]
