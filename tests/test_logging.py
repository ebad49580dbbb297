# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for diagnostic logging helpers."""

from __future__ import annotations

import pytest

from catalog_compose.console import get_console_manager
from catalog_compose.logging import fail, info, ok, warn


@pytest.mark.parametrize(
    ("emit", "glyph"),
    [(info, "ℹ️"), (ok, "✅"), (warn, "⚠️"), (fail, "❌")],
)
def test_messages_go_to_stderr_with_optional_emoji(emit, glyph: str, capsys) -> None:
    emit("catalog ready", use_emoji=True, use_color=False)
    emit("catalog ready", use_emoji=False, use_color=False)

    captured = capsys.readouterr()
    assert captured.out == ""
    lines = captured.err.splitlines()
    assert lines[0].startswith(glyph)
    assert lines[1] == "catalog ready"


def test_console_manager_caches_per_preference() -> None:
    manager = get_console_manager()

    first = manager.get(color=False, emoji=True)

    assert manager.get(color=False, emoji=True) is first
    assert manager.get(color=False, emoji=False) is not first
    manager.clear()
    assert manager.get(color=False, emoji=True) is not first
