# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI tests for the compose command."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from catalog_compose.cli import app
from catalog_compose.compose import CatalogComposer
from catalog_compose.config import ComposeConfig
from catalog_compose.encoding import read_json
from catalog_compose.types import CONFIGS_LOCATION_LABEL, DEFAULT_INDEX_IMAGE

BUNDLE = "quay.io/example/foo-bundle:v1.0.0"
INDEX = "quay.io/example/index:v1"


@pytest.fixture
def captured_settings(
    monkeypatch: pytest.MonkeyPatch,
    fake_renderer,
    fake_labels,
    make_snapshot,
    bundle_labels,
) -> list[ComposeConfig]:
    fake_labels.add(BUNDLE, bundle_labels)
    fake_labels.add(INDEX, {CONFIGS_LOCATION_LABEL: "/configs"})
    fake_labels.add(DEFAULT_INDEX_IMAGE, {})
    fake_renderer.add(INDEX, make_snapshot(package="bar"))
    fake_renderer.add(BUNDLE, make_snapshot(package="foo"))
    seen: list[ComposeConfig] = []

    def fake_from_config(settings: ComposeConfig) -> CatalogComposer:
        seen.append(settings)
        return CatalogComposer(renderer=fake_renderer, label_reader=fake_labels, settings=settings)

    monkeypatch.setattr("catalog_compose.cli.CatalogComposer.from_config", fake_from_config)
    return seen


def test_compose_prints_catalog(captured_settings: list[ComposeConfig]) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["compose", BUNDLE, "--index-image", INDEX, "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert '"name": "foo.v1.0.0"' in result.stdout
    assert '"name": "bar"' in result.stdout
    assert captured_settings[0].index_image == INDEX
    assert captured_settings[0].use_emoji is False
    assert "✅" not in result.output


def test_compose_writes_output_file(captured_settings: list[ComposeConfig], tmp_path: Path) -> None:
    runner = CliRunner()
    description = tmp_path / "description.md"
    description.write_text("Foo operator", encoding="utf-8")
    target = tmp_path / "catalog.json"

    result = runner.invoke(
        app,
        ["compose", BUNDLE, "--description-file", str(description), "--output", str(target), "--parallel"],
    )

    assert result.exit_code == 0, result.output
    config = read_json(target.read_text(encoding="utf-8"))
    assert [package.description for package in config.packages] == ["Foo operator"]
    assert "Wrote catalog for package foo (foo.v1.0.0)" in result.output
    assert captured_settings[0].parallel_render is True


def test_compose_passes_config_file_and_overrides(captured_settings: list[ComposeConfig], tmp_path: Path) -> None:
    runner = CliRunner()
    config_file = tmp_path / "compose.toml"
    config_file.write_text(f'index_image = "{INDEX}"\ncontainer_tool = "podman"\n', encoding="utf-8")

    result = runner.invoke(
        app,
        ["compose", BUNDLE, "--config", str(config_file), "--dedup", "name", "--opm", "/opt/opm"],
    )

    assert result.exit_code == 0, result.output
    settings = captured_settings[0]
    assert (settings.index_image, settings.container_tool) == (INDEX, "podman")
    assert (settings.dedup_policy, settings.opm_binary) == ("name", "/opt/opm")
    assert settings.parallel_render is False


def test_compose_rejects_invalid_option(captured_settings: list[ComposeConfig]) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["compose", BUNDLE, "--dedup", "fuzzy"])

    assert result.exit_code == 2
    assert captured_settings == []


def test_compose_failure_exits_non_zero(captured_settings: list[ComposeConfig]) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["compose", "quay.io/example/unknown:v1", "--no-emoji"])

    assert result.exit_code == 1
    assert result.output.count("get image labels for quay.io/example/unknown:v1") == 1
    assert "error reading image labels" in result.output
    assert '"schema"' not in result.output


def test_compose_reports_stage_failure_once(captured_settings: list[ComposeConfig], fake_renderer) -> None:
    runner = CliRunner()
    del fake_renderer.snapshots[INDEX]

    result = runner.invoke(app, ["compose", BUNDLE, "--index-image", INDEX, "--no-emoji"])

    assert result.exit_code == 1
    assert result.output.count(f"render {INDEX}: image not found") == 1
    assert "error in rendering index image" in result.output


def test_compose_emoji_setting_comes_from_config_file(
    captured_settings: list[ComposeConfig],
    tmp_path: Path,
) -> None:
    runner = CliRunner()
    config_file = tmp_path / "compose.toml"
    config_file.write_text("use_emoji = false\n", encoding="utf-8")

    result = runner.invoke(app, ["compose", BUNDLE, "--config", str(config_file)])

    assert result.exit_code == 0, result.output
    assert captured_settings[0].use_emoji is False
    assert "✅" not in result.output


def test_compose_emoji_flag_overrides_config_file(
    captured_settings: list[ComposeConfig],
    tmp_path: Path,
) -> None:
    runner = CliRunner()
    config_file = tmp_path / "compose.toml"
    config_file.write_text("use_emoji = false\n", encoding="utf-8")

    result = runner.invoke(app, ["compose", BUNDLE, "--config", str(config_file), "--emoji"])

    assert result.exit_code == 0, result.output
    assert captured_settings[0].use_emoji is True


def test_compose_reports_unwritable_output(captured_settings: list[ComposeConfig], tmp_path: Path) -> None:
    runner = CliRunner()
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("", encoding="utf-8")

    result = runner.invoke(app, ["compose", BUNDLE, "--output", str(blocker / "catalog.json"), "--no-emoji"])

    assert result.exit_code == 1
    assert "error writing catalog to" in result.output
    assert not isinstance(result.exception, OSError)
