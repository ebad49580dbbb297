# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Field extraction and immutability helpers for declarative config blobs.

Every extractor takes the raw JSON ``value``, the blob ``key`` it came from,
and a ``context`` prefix (for example ``blob[3]`` or ``olm.channel``) that is
echoed in :class:`DeclarativeConfigError` messages so a malformed field can be
traced back to its position in an ``opm render`` stream.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import TypeGuard

from .errors import DeclarativeConfigError
from .types import JSONValue


def _is_array(value: JSONValue | None) -> TypeGuard[Sequence[JSONValue]]:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def expect_string(value: JSONValue | None, *, key: str, context: str) -> str:
    """Return ``value`` when it is a string.

    Raises:
        DeclarativeConfigError: If ``value`` is missing or not a string.
    """

    if isinstance(value, str):
        return value
    raise DeclarativeConfigError(f"{context}: '{key}' must be a string")


def optional_string(value: JSONValue | None, *, key: str, context: str) -> str | None:
    """Return ``value`` as a string, mapping absent and empty values to ``None``."""

    if value is None or value == "":
        return None
    return expect_string(value, key=key, context=context)


def string_array(value: JSONValue | None, *, key: str, context: str) -> tuple[str, ...]:
    """Return the strings of a JSON array such as an entry's ``skips``.

    An absent array yields an empty tuple.

    Raises:
        DeclarativeConfigError: If ``value`` is not an array or holds a non-string.
    """

    if value is None:
        return ()
    if not _is_array(value):
        raise DeclarativeConfigError(f"{context}: '{key}' must be an array of strings")
    return tuple(expect_string(item, key=f"{key}[{index}]", context=context) for index, item in enumerate(value))


def expect_mapping(value: JSONValue | None, *, key: str, context: str) -> Mapping[str, JSONValue]:
    """Return ``value`` when it is a JSON object.

    Raises:
        DeclarativeConfigError: Otherwise.
    """

    if isinstance(value, Mapping):
        return value
    raise DeclarativeConfigError(f"{context}: '{key}' must be an object")


def mapping_array(value: JSONValue | None, *, key: str, context: str) -> tuple[Mapping[str, JSONValue], ...]:
    """Return the objects of a JSON array such as ``entries`` or ``properties``."""

    if value is None:
        return ()
    if not _is_array(value):
        raise DeclarativeConfigError(f"{context}: '{key}' must be an array of objects")
    return tuple(expect_mapping(item, key=f"{key}[{index}]", context=context) for index, item in enumerate(value))


def freeze_json_value(value: JSONValue, *, context: str) -> JSONValue:
    """Return ``value`` with objects turned into mapping proxies and arrays into tuples.

    Frozen values compare equal regardless of whether they were built from
    lists or tuples, which keeps record equality structural.

    Args:
        value: Decoded JSON value, possibly already frozen.
        context: Prefix used in error messages.

    Returns:
        JSONValue: Immutable equivalent of ``value``.

    Raises:
        DeclarativeConfigError: If ``value`` contains a non-JSON type or a non-string key.
    """

    if isinstance(value, Mapping):
        return freeze_json_mapping(value, context=context)
    if _is_array(value):
        return tuple(freeze_json_value(item, context=context) for item in value)
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    raise DeclarativeConfigError(f"{context}: {type(value).__name__} is not a JSON value")


def freeze_json_mapping(value: Mapping[str, JSONValue], *, context: str) -> Mapping[str, JSONValue]:
    """Return a read-only copy of a JSON object, freezing nested values."""

    frozen: dict[str, JSONValue] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            raise DeclarativeConfigError(f"{context}: object keys must be strings")
        frozen[key] = freeze_json_value(item, context=f"{context}.{key}")
    return MappingProxyType(frozen)


def thaw_json_value(value: JSONValue) -> JSONValue:
    """Return a ``dict``/``list`` copy of a frozen value, ready for ``json.dumps``."""

    if isinstance(value, Mapping):
        return {str(key): thaw_json_value(item) for key, item in value.items()}
    if isinstance(value, (tuple, list)):
        return [thaw_json_value(item) for item in value]
    return value


__all__ = [
    "expect_mapping",
    "expect_string",
    "freeze_json_mapping",
    "freeze_json_value",
    "mapping_array",
    "optional_string",
    "string_array",
    "thaw_json_value",
]
