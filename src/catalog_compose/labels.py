# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Read image configuration labels through a container tool."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final, Literal, Protocol, runtime_checkable

from .errors import LabelError
from .process_utils import CommandExecutionError, run_command

ContainerTool = Literal["docker", "podman"]
LABELS_TEMPLATE: Final[str] = "{{json .Config.Labels}}"


@runtime_checkable
class LabelReader(Protocol):
    """Return the configuration labels of an image reference."""

    def labels(self, reference: str) -> Mapping[str, str]:
        """Return labels for ``reference``.

        Raises:
            LabelError: When the image metadata cannot be read.
        """


@dataclass(frozen=True, slots=True)
class ContainerToolLabelReader:
    """Label reader that pulls and inspects images with ``docker`` or ``podman``."""

    tool: ContainerTool = "docker"
    timeout: float | None = None
    pull: bool = True

    def labels(self, reference: str) -> Mapping[str, str]:
        """Pull ``reference`` (unless disabled) and return its labels.

        Raises:
            LabelError: When the tool fails or prints something other than a label object.
        """

        try:
            if self.pull:
                run_command([self.tool, "pull", reference], timeout=self.timeout)
            completed = run_command(
                [self.tool, "image", "inspect", "--format", LABELS_TEMPLATE, reference],
                timeout=self.timeout,
            )
        except (CommandExecutionError, FileNotFoundError) as exc:
            raise LabelError(f"get image labels for {reference}: {exc}") from exc
        return parse_labels(completed.stdout, reference=reference)


def parse_labels(text: str, *, reference: str) -> Mapping[str, str]:
    """Decode the JSON label object printed by ``image inspect``.

    An image without labels prints ``null``, which yields an empty mapping.

    Raises:
        LabelError: When ``text`` is not a JSON object of strings.
    """

    try:
        payload = json.loads(text.strip() or "null")
    except json.JSONDecodeError as exc:
        raise LabelError(f"get image labels for {reference}: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise LabelError(f"get image labels for {reference}: expected a JSON object")
    labels: dict[str, str] = {}
    for key, value in payload.items():
        if not isinstance(value, str):
            raise LabelError(f"get image labels for {reference}: label {key!r} is not a string")
        labels[str(key)] = value
    return labels


__all__ = ["ContainerTool", "ContainerToolLabelReader", "LabelReader", "parse_labels"]
