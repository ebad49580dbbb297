# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Rich consoles bound to stderr so catalog text on stdout stays clean."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from functools import lru_cache
from typing import NamedTuple

from rich.console import Console


def detect_tty() -> bool:
    """Return ``True`` when stderr is attached to a terminal."""

    isatty = getattr(sys.stderr, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:
        return False


class ConsoleKey(NamedTuple):
    """Presentation flags a cached console was built for."""

    color: bool
    emoji: bool
    tty: bool


@dataclass(slots=True)
class RichConsoleManager:
    """Hand out one stderr :class:`Console` per colour/emoji/TTY combination."""

    consoles: dict[ConsoleKey, Console] = field(default_factory=dict)

    def get(self, *, color: bool, emoji: bool) -> Console:
        """Return the console for the requested presentation.

        Colour is only emitted when requested and stderr is a terminal.

        Args:
            color: Whether ANSI styling is wanted.
            emoji: Whether Rich should keep emoji glyphs.

        Returns:
            Console: Cached console writing to the current ``sys.stderr``.
        """

        key = ConsoleKey(color=color, emoji=emoji, tty=detect_tty())
        console = self.consoles.get(key)
        if console is None:
            styled = key.color and key.tty
            console = Console(
                stderr=True,
                color_system="auto" if styled else None,
                force_terminal=key.tty,
                no_color=not styled,
                emoji=key.emoji,
                soft_wrap=True,
            )
            self.consoles[key] = console
        return console

    def clear(self) -> None:
        """Forget cached consoles."""

        self.consoles.clear()


@lru_cache(maxsize=1)
def get_console_manager() -> RichConsoleManager:
    """Return the process-wide console manager."""

    return RichConsoleManager()


__all__ = ["ConsoleKey", "RichConsoleManager", "detect_tty", "get_console_manager"]
