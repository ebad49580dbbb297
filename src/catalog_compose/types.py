# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared type aliases and constants for declarative catalogs."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Final, TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | Sequence["JSONValue"] | Mapping[str, "JSONValue"]

SCHEMA_PACKAGE: Final[str] = "olm.package"
SCHEMA_CHANNEL: Final[str] = "olm.channel"
SCHEMA_BUNDLE: Final[str] = "olm.bundle"

PROPERTY_PACKAGE: Final[str] = "olm.package"
PROPERTY_CSV_METADATA: Final[str] = "olm.csv.metadata"
PROPERTY_BUNDLE_OBJECT: Final[str] = "olm.bundle.object"

DB_LOCATION_LABEL: Final[str] = "operators.operatorframework.io.index.database.v1"
CONFIGS_LOCATION_LABEL: Final[str] = "operators.operatorframework.io.index.configs.v1"
PACKAGE_LABEL: Final[str] = "operators.operatorframework.io.bundle.package.v1"
CHANNELS_LABEL: Final[str] = "operators.operatorframework.io.bundle.channels.v1"

DEFAULT_INDEX_IMAGE: Final[str] = "quay.io/operator-framework/opm:latest"

__all__ = [
    "CHANNELS_LABEL",
    "CONFIGS_LOCATION_LABEL",
    "DB_LOCATION_LABEL",
    "DEFAULT_INDEX_IMAGE",
    "JSONPrimitive",
    "JSONValue",
    "PACKAGE_LABEL",
    "PROPERTY_BUNDLE_OBJECT",
    "PROPERTY_CSV_METADATA",
    "PROPERTY_PACKAGE",
    "SCHEMA_BUNDLE",
    "SCHEMA_CHANNEL",
    "SCHEMA_PACKAGE",
]
