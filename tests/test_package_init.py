# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for package record synthesis."""

from __future__ import annotations

import io

import pytest

from catalog_compose.errors import InitError
from catalog_compose.package_init import init_package


def test_init_package_without_description() -> None:
    package = init_package("foo", "stable")

    assert package.name == "foo"
    assert package.default_channel == "stable"
    assert package.description is None
    assert package.to_dict() == {"schema": "olm.package", "name": "foo", "defaultChannel": "stable"}


@pytest.mark.parametrize("stream", [io.StringIO("Foo operator"), io.BytesIO("Foo operator".encode())])
def test_init_package_reads_text_and_binary_streams(stream: io.IOBase) -> None:
    package = init_package("foo", "stable", stream)

    assert package.description == "Foo operator"


def test_init_package_treats_empty_description_as_absent() -> None:
    assert init_package("foo", "stable", io.StringIO("")).description is None


@pytest.mark.parametrize(("name", "channel"), [("", "stable"), ("foo", "")])
def test_init_package_requires_names(name: str, channel: str) -> None:
    with pytest.raises(InitError, match="must be set"):
        init_package(name, channel)


def test_init_package_rejects_non_utf8_bytes() -> None:
    with pytest.raises(InitError, match="UTF-8"):
        init_package("foo", "stable", io.BytesIO(b"\xff\xfe"))


def test_init_package_wraps_read_failures() -> None:
    class _BrokenStream(io.StringIO):
        def read(self, size: int | None = -1) -> str:
            raise OSError("device not ready")

    with pytest.raises(InitError, match="device not ready"):
        init_package("foo", "stable", _BrokenStream())
