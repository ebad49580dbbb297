# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for container-tool label inspection."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence

import pytest

from catalog_compose import labels as labels_module
from catalog_compose.errors import LabelError
from catalog_compose.labels import ContainerToolLabelReader, parse_labels
from catalog_compose.process_utils import CommandExecutionError


def test_reader_pulls_then_inspects(monkeypatch: pytest.MonkeyPatch) -> None:
    commands: list[list[str]] = []

    def fake_run(args: Sequence[str], *, timeout: float | None = None) -> subprocess.CompletedProcess[str]:
        commands.append(list(args))
        return subprocess.CompletedProcess(list(args), 0, stdout='{"a": "b"}\n', stderr="")

    monkeypatch.setattr(labels_module, "run_command", fake_run)

    labels = ContainerToolLabelReader(tool="podman").labels("example/index:v1")

    assert labels == {"a": "b"}
    assert commands == [
        ["podman", "pull", "example/index:v1"],
        ["podman", "image", "inspect", "--format", "{{json .Config.Labels}}", "example/index:v1"],
    ]


def test_reader_can_skip_pull(monkeypatch: pytest.MonkeyPatch) -> None:
    commands: list[list[str]] = []

    def fake_run(args: Sequence[str], *, timeout: float | None = None) -> subprocess.CompletedProcess[str]:
        commands.append(list(args))
        return subprocess.CompletedProcess(list(args), 0, stdout="null\n", stderr="")

    monkeypatch.setattr(labels_module, "run_command", fake_run)

    assert ContainerToolLabelReader(pull=False).labels("example/index:v1") == {}
    assert [command[1] for command in commands] == ["image"]


def test_reader_wraps_tool_failures(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(args: Sequence[str], *, timeout: float | None = None) -> subprocess.CompletedProcess[str]:
        raise CommandExecutionError(args, 125, "manifest unknown")

    monkeypatch.setattr(labels_module, "run_command", fake_run)

    with pytest.raises(LabelError, match="manifest unknown"):
        ContainerToolLabelReader().labels("example/missing:v1")


@pytest.mark.parametrize("payload", ["[1, 2]", '{"a": 1}', "{broken"])
def test_parse_labels_rejects_unexpected_payloads(payload: str) -> None:
    with pytest.raises(LabelError, match="example/index:v1"):
        parse_labels(payload, reference="example/index:v1")
