# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Pipeline diagnostics: one stderr line per event, with optional emoji and colour."""

from __future__ import annotations

from typing import Final, NamedTuple

from rich.text import Text

from .console import detect_tty, get_console_manager


class _Level(NamedTuple):
    glyph: str
    style: str


_INFO: Final = _Level("ℹ️", "cyan")
_OK: Final = _Level("✅", "green")
_WARN: Final = _Level("⚠️", "yellow")
_FAIL: Final = _Level("❌", "red")


def _emit(level: _Level, msg: str, *, use_emoji: bool, use_color: bool | None) -> None:
    color = detect_tty() if use_color is None else use_color
    text = Text(f"{level.glyph} {msg}" if use_emoji else msg)
    if color:
        text.stylize(level.style)
    get_console_manager().get(color=color, emoji=use_emoji).print(text)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Report pipeline progress, such as the branch being taken."""

    _emit(_INFO, msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Report a completed step."""

    _emit(_OK, msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Report input that was dropped or tolerated."""

    _emit(_WARN, msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Report the failure that aborts composition.

    Args:
        msg: Stage description followed by the underlying error.
        use_emoji: Prefix the line with a cross mark.
        use_color: Force colour on or off; ``None`` follows TTY detection.
    """

    _emit(_FAIL, msg, use_emoji=use_emoji, use_color=use_color)


__all__ = ["fail", "info", "ok", "warn"]
