# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Classify index images and choose between the merge and minimal-build paths."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

from .errors import LabelError, UnknownCatalogFormatError
from .types import (
    CHANNELS_LABEL,
    CONFIGS_LOCATION_LABEL,
    DB_LOCATION_LABEL,
    DEFAULT_INDEX_IMAGE,
    PACKAGE_LABEL,
)


class CatalogFormat(str, Enum):
    """Enumerate the physical representations of an index image."""

    LEGACY_DATABASE = "legacy-database"
    FILE_BASED = "file-based"
    UNKNOWN = "unknown"

    @property
    def has_catalog_content(self) -> bool:
        """Return ``True`` when the image carries structured catalog content."""

        return self is not CatalogFormat.UNKNOWN


def classify_catalog(labels: Mapping[str, str]) -> CatalogFormat:
    """Return the catalog format advertised by an index image's labels.

    The configs label wins when both labels are present.

    Args:
        labels: Configuration labels of the index image.

    Returns:
        CatalogFormat: Detected representation.
    """

    if CONFIGS_LOCATION_LABEL in labels:
        return CatalogFormat.FILE_BASED
    if DB_LOCATION_LABEL in labels:
        return CatalogFormat.LEGACY_DATABASE
    return CatalogFormat.UNKNOWN


@dataclass(frozen=True, slots=True)
class BundleLabels:
    """Package and channel names advertised by a bundle image."""

    package: str
    channels: tuple[str, ...]

    @property
    def channel(self) -> str:
        """Return the first advertised channel, used as the default channel."""

        return self.channels[0]

    @classmethod
    def from_labels(cls, labels: Mapping[str, str], *, reference: str) -> BundleLabels:
        """Extract bundle names from image ``labels``.

        Raises:
            LabelError: When the package or channels label is missing or empty.
        """

        package = labels.get(PACKAGE_LABEL, "").strip()
        if not package:
            raise LabelError(f"{reference}: bundle image is missing label {PACKAGE_LABEL!r}")
        channels = tuple(item.strip() for item in labels.get(CHANNELS_LABEL, "").split(",") if item.strip())
        if not channels:
            raise LabelError(f"{reference}: bundle image is missing label {CHANNELS_LABEL!r}")
        return cls(package=package, channels=channels)


@dataclass(frozen=True, slots=True)
class MergePlan:
    """Merge a rendered bundle into the rendered index image."""

    index_image: str
    bundle_image: str
    format: CatalogFormat


@dataclass(frozen=True, slots=True)
class BuildPlan:
    """Synthesize a standalone catalog around a single bundle."""

    bundle_image: str
    package_name: str
    channel_name: str


CompositionPlan: TypeAlias = MergePlan | BuildPlan


def plan_composition(
    *,
    index_image: str,
    bundle_image: str,
    index_labels: Mapping[str, str],
    bundle: BundleLabels,
    default_index_image: str = DEFAULT_INDEX_IMAGE,
) -> CompositionPlan:
    """Pick the composition path for ``bundle_image``.

    Args:
        index_image: Index image reference selected by the caller.
        bundle_image: Bundle image reference.
        index_labels: Labels of ``index_image``.
        bundle: Names extracted from the bundle image labels.
        default_index_image: Reference that stands for "no index supplied".

    Returns:
        CompositionPlan: ``BuildPlan`` for the default index, otherwise ``MergePlan``.

    Raises:
        UnknownCatalogFormatError: When a supplied index image carries no catalog labels.
    """

    if index_image == default_index_image:
        return BuildPlan(bundle_image=bundle_image, package_name=bundle.package, channel_name=bundle.channel)
    catalog_format = classify_catalog(index_labels)
    if not catalog_format.has_catalog_content:
        raise UnknownCatalogFormatError(
            f"index image {index_image} has neither {DB_LOCATION_LABEL!r} nor {CONFIGS_LOCATION_LABEL!r} label",
        )
    return MergePlan(index_image=index_image, bundle_image=bundle_image, format=catalog_format)


__all__ = [
    "BuildPlan",
    "BundleLabels",
    "CatalogFormat",
    "CompositionPlan",
    "MergePlan",
    "classify_catalog",
    "plan_composition",
]
