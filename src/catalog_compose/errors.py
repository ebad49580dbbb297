# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised while composing a file-based catalog."""

from __future__ import annotations


class CompositionError(RuntimeError):
    """Base class for every failure surfaced by the composition pipeline."""


class DeclarativeConfigError(ValueError):
    """Raised when a declarative config blob cannot be decoded."""


class LabelError(CompositionError):
    """Raised when image labels cannot be read or lack required values."""


class RenderError(CompositionError):
    """Raised when an image reference cannot be rendered into a declarative config."""


class UnexpectedBundleCount(CompositionError):
    """Raised when a bundle render yields anything but exactly one bundle."""

    def __init__(self, reference: str, count: int) -> None:
        """Record the offending ``reference`` and the observed bundle ``count``.

        Args:
            reference: Image reference that was rendered.
            count: Number of bundles the render produced.
        """

        super().__init__(f"{reference}: expected exactly 1 bundle, rendered {count}")
        self.reference = reference
        self.count = count


class IncompleteRenderError(CompositionError):
    """Raised when a bundle render lacks the channel required to merge it."""


class InitError(CompositionError):
    """Raised when a package record cannot be synthesized."""


class PackageConflictError(CompositionError):
    """Raised when a package of the same name but different metadata already exists."""


class UnknownCatalogFormatError(CompositionError):
    """Raised when a non-default index image carries no catalog labels."""


class ValidationError(CompositionError):
    """Raised when a composed catalog fails structural or referential checks."""


class EncodingError(CompositionError):
    """Raised when a catalog cannot be encoded into its textual form."""


class EmptyOutput(CompositionError):
    """Raised when a validated catalog serializes to empty text."""

    def __init__(self, message: str | None = None) -> None:
        """Create the error with an optional ``message``."""

        super().__init__(message or "File-Based Catalog contents cannot be empty")


__all__ = (
    "CompositionError",
    "DeclarativeConfigError",
    "EmptyOutput",
    "EncodingError",
    "IncompleteRenderError",
    "InitError",
    "LabelError",
    "PackageConflictError",
    "RenderError",
    "UnexpectedBundleCount",
    "UnknownCatalogFormatError",
    "ValidationError",
)
