# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution of ``opm`` and container tools."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional; arguments are passed as lists
# without ``shell=True``.
import subprocess  # nosec B404
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from subprocess import CompletedProcess as _CompletedProcess  # nosec B404


class CommandExecutionError(RuntimeError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str | None) -> None:
        detail = (stderr or "").strip() or "<none>"
        super().__init__(f"Command '{Path(command[0]).name}' exited with status {returncode}. stderr: {detail}")
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr


def resolve_executable(args: Sequence[str]) -> list[str]:
    """Return ``args`` with the executable resolved against ``PATH``.

    Raises:
        ValueError: If ``args`` is empty.
        FileNotFoundError: If the executable cannot be found.
    """

    if not args:
        raise ValueError("subprocess command requires at least one argument")
    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]
    resolved = shutil.which(head)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    timeout: float | None = None,
) -> _CompletedProcess[str]:
    """Execute ``args`` capturing text output.

    Args:
        args: Command and arguments.
        timeout: Optional limit in seconds; expiry is reported as exit status 124.

    Returns:
        CompletedProcess[str]: Completed process with captured ``stdout``/``stderr``.

    Raises:
        CommandExecutionError: If the command exits with a non-zero status.
    """

    normalized = resolve_executable(args)
    try:
        completed: _CompletedProcess[str] = subprocess.run(  # nosec B603
            normalized,
            check=False,
            capture_output=True,
            text=True,
            timeout=timeout,
            stdin=subprocess.DEVNULL,
        )
    except subprocess.TimeoutExpired as exc:
        raise CommandExecutionError(normalized, 124, f"Command timed out after {timeout:.1f}s") from exc
    if completed.returncode != 0:
        raise CommandExecutionError(normalized, completed.returncode, completed.stderr)
    return completed


__all__ = ["CommandExecutionError", "resolve_executable", "run_command"]
