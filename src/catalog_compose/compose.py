# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""End-to-end composition of a validated file-based catalog for one bundle."""

from __future__ import annotations

import base64
import binascii
import json
import tempfile
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Final, TypeVar

from .build import build_minimal_catalog
from .classify import BuildPlan, BundleLabels, CatalogFormat, CompositionPlan, MergePlan, plan_composition
from .config import ComposeConfig
from .encoding import write_json
from .errors import CompositionError, EmptyOutput
from .labels import ContainerToolLabelReader, LabelReader
from .logging import fail, info, ok, warn
from .merge import DedupPolicy, merge_bundle, policy_for
from .models import Bundle, DeclarativeConfig
from .package_init import PackageInitializer, init_package
from .render import CatalogRenderer, OpmRenderer, render_pair
from .types import PROPERTY_BUNDLE_OBJECT, PROPERTY_CSV_METADATA, JSONValue
from .validate import validate_catalog

FBC_FILE_NAME: Final[str] = "testFBC"
CATALOG_SUFFIX: Final[str] = "-catalog"

_T = TypeVar("_T")


@dataclass(frozen=True, slots=True)
class CompositionResult:
    """Validated catalog text and the fields the installer derives from it."""

    content: str
    package_name: str
    starting_csv: str
    channel: str
    supported_install_modes: frozenset[str]
    plan: CompositionPlan
    config: DeclarativeConfig = field(repr=False)

    @property
    def catalog_source_name(self) -> str:
        """Return the catalog source name derived from the package name."""

        return catalog_name_for_package(self.package_name)

    @property
    def format(self) -> CatalogFormat | None:
        """Return the index format on the merge path, ``None`` for a minimal build."""

        return self.plan.format if isinstance(self.plan, MergePlan) else None

    @property
    def fbc_dir(self) -> Path:
        """Return the transient working directory for the catalog file."""

        return Path(tempfile.gettempdir()) / f"{self.starting_csv.split('.')[0]}-index"

    @property
    def fbc_file(self) -> Path:
        """Return the transient catalog file path."""

        return self.fbc_dir / FBC_FILE_NAME


def catalog_name_for_package(package_name: str) -> str:
    """Return the catalog source name used for ``package_name``."""

    return f"{package_name}{CATALOG_SUFFIX}"


def write_catalog(result: CompositionResult, path: Path | None = None) -> Path:
    """Write ``result.content`` to ``path`` or the transient working path.

    Returns:
        Path: File that received the catalog.
    """

    target = path or result.fbc_file
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(result.content, encoding="utf-8")
    return target


@dataclass(slots=True)
class CatalogComposer:
    """Compose, validate, and serialize the catalog installing one bundle."""

    renderer: CatalogRenderer
    label_reader: LabelReader
    settings: ComposeConfig = field(default_factory=ComposeConfig)
    initializer: PackageInitializer = init_package
    policy: DedupPolicy | None = None

    @classmethod
    def from_config(cls, settings: ComposeConfig) -> CatalogComposer:
        """Build a composer wired to ``opm`` and the configured container tool."""

        return cls(
            renderer=OpmRenderer(
                binary=settings.opm_binary,
                timeout=settings.render_timeout,
                skip_tls_verify=settings.skip_tls_verify,
                use_http=settings.use_http,
            ),
            label_reader=ContainerToolLabelReader(tool=settings.container_tool, timeout=settings.render_timeout),
            settings=settings,
            policy=policy_for(settings.dedup_policy),
        )

    def compose(
        self,
        bundle_image: str,
        *,
        description: IO[str] | IO[bytes] | None = None,
    ) -> CompositionResult:
        """Run the full pipeline for ``bundle_image``.

        Labels are read first, so a ``LabelError`` aborts before any render.

        Args:
            bundle_image: Bundle image reference.
            description: Optional package description stream for the minimal path.

        Returns:
            CompositionResult: Catalog text plus installer hand-off fields.

        Raises:
            CompositionError: Any failure, already reported on the console; no
                partial catalog is returned.
        """

        bundle_labels, plan = self._run_stage("error reading image labels", lambda: self._plan(bundle_image))
        if isinstance(plan, MergePlan):
            config, bundle = self._merge(plan)
        else:
            config, bundle = self._build(plan, description)

        self._run_stage("error validating the generated FBC", lambda: validate_catalog(config))
        content = self._run_stage("error converting declarative config to string", lambda: _serialize(config))
        self._ok("Generated a valid File-Based Catalog")

        return CompositionResult(
            content=content,
            package_name=bundle_labels.package,
            starting_csv=bundle.name,
            channel=bundle_labels.channel,
            supported_install_modes=supported_install_modes(bundle),
            plan=plan,
            config=config,
        )

    def _plan(self, bundle_image: str) -> tuple[BundleLabels, CompositionPlan]:
        settings = self.settings
        bundle_labels = BundleLabels.from_labels(self.label_reader.labels(bundle_image), reference=bundle_image)
        index_labels = self.label_reader.labels(settings.index_image)
        plan = plan_composition(
            index_image=settings.index_image,
            bundle_image=bundle_image,
            index_labels=index_labels,
            bundle=bundle_labels,
            default_index_image=settings.default_index_image,
        )
        return bundle_labels, plan

    def _merge(self, plan: MergePlan) -> tuple[DeclarativeConfig, Bundle]:
        self._info("Rendering a File-Based Catalog of the Index Image")

        def _render_and_merge() -> tuple[DeclarativeConfig, Bundle]:
            index_config, bundle_config = render_pair(
                self.renderer,
                plan.index_image,
                plan.bundle_image,
                parallel=self.settings.parallel_render,
            )
            if len(bundle_config.channels) > 1 or len(bundle_config.others) > 1:
                self._warn(
                    f"Bundle render produced {len(bundle_config.channels)} channels and "
                    f"{len(bundle_config.others)} other blobs; only the first of each is merged",
                )
            merged = merge_bundle(index_config, bundle_config, policy=self.policy)
            return merged, bundle_config.bundles[0]

        result = self._run_stage("error in rendering index image", _render_and_merge)
        self._info("Rendered a File-Based Catalog of the Index Image")
        return result

    def _build(
        self,
        plan: BuildPlan,
        description: IO[str] | IO[bytes] | None,
    ) -> tuple[DeclarativeConfig, Bundle]:
        self._info("Generating a File-Based Catalog")
        config = self._run_stage(
            "error creating a minimal FBC",
            lambda: build_minimal_catalog(
                self.renderer,
                plan.bundle_image,
                plan.package_name,
                plan.channel_name,
                description,
                initializer=self.initializer,
            ),
        )
        return config, config.bundles[0]

    def _run_stage(self, failure: str, stage: Callable[[], _T]) -> _T:
        try:
            return stage()
        except CompositionError as exc:
            fail(f"{failure}: {exc}", use_emoji=self.settings.use_emoji, use_color=self.settings.use_color)
            raise

    def _info(self, message: str) -> None:
        info(message, use_emoji=self.settings.use_emoji, use_color=self.settings.use_color)

    def _ok(self, message: str) -> None:
        ok(message, use_emoji=self.settings.use_emoji, use_color=self.settings.use_color)

    def _warn(self, message: str) -> None:
        warn(message, use_emoji=self.settings.use_emoji, use_color=self.settings.use_color)


def _serialize(config: DeclarativeConfig) -> str:
    content = write_json(config)
    if not content:
        raise EmptyOutput()
    return content


def supported_install_modes(bundle: Bundle) -> frozenset[str]:
    """Return the install mode types a bundle's CSV marks as supported.

    ``olm.csv.metadata`` is consulted first; otherwise the embedded
    ClusterServiceVersion in ``olm.bundle.object`` properties is decoded.
    Bundles exposing neither yield an empty set.
    """

    for item in bundle.properties_of_type(PROPERTY_CSV_METADATA):
        if isinstance(item.value, Mapping):
            return _modes_from(item.value.get("installModes"))
    for item in bundle.properties_of_type(PROPERTY_BUNDLE_OBJECT):
        manifest = _decode_bundle_object(item.value)
        if manifest is None or manifest.get("kind") != "ClusterServiceVersion":
            continue
        spec = manifest.get("spec")
        if isinstance(spec, Mapping):
            return _modes_from(spec.get("installModes"))
    return frozenset()


def _modes_from(value: JSONValue | None) -> frozenset[str]:
    if not isinstance(value, (list, tuple)):
        return frozenset()
    modes: set[str] = set()
    for mode in value:
        if isinstance(mode, Mapping) and mode.get("supported") is True and isinstance(mode.get("type"), str):
            modes.add(mode["type"])
    return frozenset(modes)


def _decode_bundle_object(value: JSONValue) -> Mapping[str, JSONValue] | None:
    if not isinstance(value, Mapping):
        return None
    data = value.get("data")
    if not isinstance(data, str):
        return None
    try:
        manifest = json.loads(base64.b64decode(data, validate=True))
    except (binascii.Error, ValueError):
        return None
    return manifest if isinstance(manifest, Mapping) else None


__all__ = [
    "CatalogComposer",
    "CompositionResult",
    "catalog_name_for_package",
    "supported_install_modes",
    "write_catalog",
]
