# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Canonical JSON stream encoding and decoding of declarative configs."""

from __future__ import annotations

import json
from collections import defaultdict
from collections.abc import Iterator, Mapping
from typing import Final

from .errors import DeclarativeConfigError, EncodingError
from .models import Bundle, Channel, DeclarativeConfig, Other, Package
from .types import JSONValue

JSON_INDENT: Final[int] = 4

_DECODER: Final[json.JSONDecoder] = json.JSONDecoder()


def write_json(config: DeclarativeConfig) -> str:
    """Encode ``config`` as a deterministic stream of indented JSON blobs.

    Blobs are grouped by package name in sorted order. Within a package the
    package records come first, then channels and bundles sorted by name,
    then passthrough blobs stable-sorted by schema. Blobs that belong to no
    package are written last.

    Args:
        config: Snapshot to encode.

    Returns:
        str: Newline-terminated JSON blobs.

    Raises:
        EncodingError: If a blob cannot be represented as JSON.
    """

    chunks: list[str] = []
    try:
        for blob in _ordered_blobs(config):
            chunks.append(json.dumps(blob, indent=JSON_INDENT, ensure_ascii=False, allow_nan=False))
            chunks.append("\n")
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"error writing to JSON encoder: {exc}") from exc
    return "".join(chunks)


def read_json(text: str) -> DeclarativeConfig:
    """Decode a stream of concatenated JSON blobs into a snapshot.

    Args:
        text: Output of :func:`write_json` or ``opm render -o json``.

    Returns:
        DeclarativeConfig: Decoded snapshot.

    Raises:
        DeclarativeConfigError: If the stream is not a sequence of JSON objects.
    """

    return DeclarativeConfig.from_blobs(iter_blobs(text))


def iter_blobs(text: str) -> Iterator[Mapping[str, JSONValue]]:
    """Yield each top-level JSON object contained in ``text``.

    Raises:
        DeclarativeConfigError: On malformed JSON or a non-object top-level value.
    """

    position = 0
    length = len(text)
    while True:
        while position < length and text[position].isspace():
            position += 1
        if position >= length:
            return
        try:
            value, position = _DECODER.raw_decode(text, position)
        except json.JSONDecodeError as exc:
            raise DeclarativeConfigError(f"failed to parse catalog JSON: {exc}") from exc
        if not isinstance(value, Mapping):
            raise DeclarativeConfigError("failed to parse catalog JSON: expected a JSON object")
        yield value


def _ordered_blobs(config: DeclarativeConfig) -> Iterator[dict[str, JSONValue]]:
    package_names: set[str] = set()
    packages: defaultdict[str, list[Package]] = defaultdict(list)
    channels: defaultdict[str, list[Channel]] = defaultdict(list)
    bundles: defaultdict[str, list[Bundle]] = defaultdict(list)
    others: defaultdict[str, list[Other]] = defaultdict(list)
    for package in config.packages:
        package_names.add(package.name)
        packages[package.name].append(package)
    for channel in config.channels:
        package_names.add(channel.package)
        channels[channel.package].append(channel)
    for bundle in config.bundles:
        package_names.add(bundle.package)
        bundles[bundle.package].append(bundle)
    for other in config.others:
        package_name = other.package or ""
        package_names.add(package_name)
        others[package_name].append(other)

    for name in sorted(package_names):
        if not name:
            continue
        for package in packages[name]:
            yield package.to_dict()
        for channel in sorted(channels[name], key=lambda item: item.name):
            yield channel.to_dict()
        for bundle in sorted(bundles[name], key=lambda item: item.name):
            yield bundle.to_dict()
        for other in sorted(others[name], key=lambda item: item.schema):
            yield other.to_dict()
    for other in sorted(others[""], key=lambda item: item.schema):
        yield other.to_dict()


__all__ = ["JSON_INDENT", "iter_blobs", "read_json", "write_json"]
