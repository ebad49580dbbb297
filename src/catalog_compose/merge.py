# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Merge a rendered bundle into a rendered index snapshot."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final, Literal, Protocol

from .errors import IncompleteRenderError, PackageConflictError, UnexpectedBundleCount
from .models import DeclarativeConfig, Package
from .render import CatalogRenderer, render_pair

DedupPolicyName = Literal["exact", "name"]


class DedupPolicy(Protocol):
    """Decide whether a bundle's package is already present in an index."""

    name: str

    def is_present(self, packages: Sequence[Package], candidate: Package) -> bool:
        """Return ``True`` when ``candidate`` needs no merge.

        Raises:
            PackageConflictError: When the policy treats a partial match as a conflict.
        """


@dataclass(frozen=True, slots=True)
class ExactMatchPolicy:
    """Present only when an index package deep-equals the candidate.

    A same-name package whose metadata differs is reported absent, so the
    merge appends a second record of that name and validation rejects it.
    """

    name: str = "exact"

    def is_present(self, packages: Sequence[Package], candidate: Package) -> bool:
        """Return ``True`` if some package equals ``candidate`` field by field."""

        return any(package == candidate for package in packages)


@dataclass(frozen=True, slots=True)
class NameMatchPolicy:
    """Present when an index package has the candidate's name; metadata must agree."""

    name: str = "name"

    def is_present(self, packages: Sequence[Package], candidate: Package) -> bool:
        """Return ``True`` if a package of the same name exists.

        Raises:
            PackageConflictError: When that package's metadata differs from ``candidate``.
        """

        for package in packages:
            if package.name != candidate.name:
                continue
            if package != candidate:
                raise PackageConflictError(
                    f"package {candidate.name!r} already exists in the index with different metadata",
                )
            return True
        return False


POLICIES: Final[dict[str, DedupPolicy]] = {
    "exact": ExactMatchPolicy(),
    "name": NameMatchPolicy(),
}


def policy_for(name: DedupPolicyName | str) -> DedupPolicy:
    """Return the dedup policy registered under ``name``.

    Raises:
        ValueError: If ``name`` is unknown.
    """

    try:
        return POLICIES[name]
    except KeyError as exc:
        raise ValueError(f"unknown dedup policy '{name}'") from exc


def merge_bundle(
    target: DeclarativeConfig,
    source: DeclarativeConfig,
    *,
    policy: DedupPolicy | None = None,
) -> DeclarativeConfig:
    """Return ``target`` extended with the first records of ``source``.

    Only the first package, bundle, channel and passthrough blob of ``source``
    are appended.

    Args:
        target: Rendered index snapshot.
        source: Single-bundle render of the bundle image.
        policy: Presence policy; :class:`ExactMatchPolicy` by default.

    Returns:
        DeclarativeConfig: ``target`` itself when nothing is merged, else a new snapshot.

    Raises:
        PackageConflictError: When the policy reports a conflicting package.
        UnexpectedBundleCount: When ``source`` has a package but no bundle.
        IncompleteRenderError: When ``source`` has a bundle but no channel.
    """

    if not source.packages:
        return target
    active_policy = policy or POLICIES["exact"]
    candidate = source.packages[0]
    if active_policy.is_present(target.packages, candidate):
        return target
    if not source.bundles:
        raise UnexpectedBundleCount(candidate.name, 0)
    if not source.channels:
        raise IncompleteRenderError(
            f"bundle {source.bundles[0].name!r} of package {candidate.name!r} rendered without a channel",
        )
    return target.with_appended(
        packages=(candidate,),
        bundles=source.bundles[:1],
        channels=source.channels[:1],
        others=source.others[:1],
    )


def add_bundle_to_index(
    renderer: CatalogRenderer,
    index_image: str,
    bundle_image: str,
    *,
    policy: DedupPolicy | None = None,
    parallel: bool = False,
) -> DeclarativeConfig:
    """Render ``index_image`` and ``bundle_image`` and merge the bundle into the index.

    Raises:
        RenderError: When either render fails.
        UnexpectedBundleCount: When the bundle render is not a single bundle.
    """

    index_config, bundle_config = render_pair(renderer, index_image, bundle_image, parallel=parallel)
    return merge_bundle(index_config, bundle_config, policy=policy)


__all__ = [
    "POLICIES",
    "DedupPolicy",
    "DedupPolicyName",
    "ExactMatchPolicy",
    "NameMatchPolicy",
    "add_bundle_to_index",
    "merge_bundle",
    "policy_for",
]
