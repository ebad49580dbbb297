# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Synthesize ``olm.package`` records for the minimal catalog path."""

from __future__ import annotations

from typing import IO, Protocol

from .errors import InitError
from .models import Package


class PackageInitializer(Protocol):
    """Callable building a package record from names and a description stream."""

    def __call__(
        self,
        name: str,
        default_channel: str,
        description: IO[str] | IO[bytes] | None = None,
    ) -> Package:
        """Return the synthesized package."""


def init_package(
    name: str,
    default_channel: str,
    description: IO[str] | IO[bytes] | None = None,
) -> Package:
    """Build a package record, reading its description from ``description``.

    Args:
        name: Package name.
        default_channel: Channel installed when none is requested.
        description: Optional text or binary stream; binary content must be UTF-8.

    Returns:
        Package: Package record with the description attached.

    Raises:
        InitError: When a name is empty or the description cannot be read or decoded.
    """

    if not name:
        raise InitError("package name must be set")
    if not default_channel:
        raise InitError(f"package {name!r}: default channel must be set")
    text: str | None = None
    if description is not None:
        try:
            raw = description.read()
        except OSError as exc:
            raise InitError(f"package {name!r}: read description: {exc}") from exc
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise InitError(f"package {name!r}: description is not valid UTF-8") from exc
        text = raw or None
    return Package(name=name, default_channel=default_channel, description=text)


__all__ = ["PackageInitializer", "init_package"]
