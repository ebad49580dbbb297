# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Public export surface for single-bundle catalog composition."""

from __future__ import annotations

from typing import Final

from .build import build_minimal_catalog
from .classify import BuildPlan, BundleLabels, CatalogFormat, MergePlan, classify_catalog, plan_composition
from .compose import CatalogComposer, CompositionResult, write_catalog
from .config import ComposeConfig, ConfigError, load_config
from .encoding import read_json, write_json
from .errors import (
    CompositionError,
    DeclarativeConfigError,
    EmptyOutput,
    EncodingError,
    IncompleteRenderError,
    InitError,
    LabelError,
    PackageConflictError,
    RenderError,
    UnexpectedBundleCount,
    UnknownCatalogFormatError,
    ValidationError,
)
from .merge import ExactMatchPolicy, NameMatchPolicy, add_bundle_to_index, merge_bundle
from .models import Bundle, Channel, ChannelEntry, DeclarativeConfig, Other, Package, Property
from .package_init import init_package
from .render import CatalogRenderer, OpmRenderer, render_bundle
from .validate import convert_to_model, validate_catalog

__all__: Final[tuple[str, ...]] = (
    "BuildPlan",
    "Bundle",
    "BundleLabels",
    "CatalogComposer",
    "CatalogFormat",
    "CatalogRenderer",
    "Channel",
    "ChannelEntry",
    "ComposeConfig",
    "CompositionError",
    "CompositionResult",
    "ConfigError",
    "DeclarativeConfig",
    "DeclarativeConfigError",
    "EmptyOutput",
    "EncodingError",
    "ExactMatchPolicy",
    "IncompleteRenderError",
    "InitError",
    "LabelError",
    "MergePlan",
    "NameMatchPolicy",
    "OpmRenderer",
    "Other",
    "Package",
    "PackageConflictError",
    "Property",
    "RenderError",
    "UnexpectedBundleCount",
    "UnknownCatalogFormatError",
    "ValidationError",
    "add_bundle_to_index",
    "build_minimal_catalog",
    "classify_catalog",
    "convert_to_model",
    "init_package",
    "load_config",
    "merge_bundle",
    "plan_composition",
    "read_json",
    "render_bundle",
    "validate_catalog",
    "write_catalog",
    "write_json",
)
