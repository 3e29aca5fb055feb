"""Smoke tests for the Typer-based closuretree CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from closuretree.cli.common import merge_overrides, parse_override
from closuretree.cli.main import app


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def cli_env(tmp_path: Path) -> dict[str, str]:
    return {
        "CLOSURETREE_SETTINGS__PATHS__OUTPUT_DIR": str(tmp_path / "output"),
        "CLOSURETREE_SETTINGS__PATHS__LOGS_DIR": str(tmp_path / "logs"),
    }


@pytest.fixture()
def models_path(tmp_path: Path) -> Path:
    path = tmp_path / "models.yaml"
    path.write_text(
        yaml.safe_dump({"models": {"folder": {"hierarchy": True}, "document": {}}}),
        encoding="utf-8",
    )
    return path


def test_parse_override_builds_nested_mapping() -> None:
    override = parse_override("policies.materialization.indent=4")

    assert override == {"policies": {"materialization": {"indent": 4}}}


def test_merge_overrides_is_deep() -> None:
    merged = merge_overrides(
        [
            parse_override("policies.hierarchy.children_as=kids"),
            parse_override("policies.hierarchy.as=up"),
        ]
    )

    assert merged == {"policies": {"hierarchy": {"children_as": "kids", "as": "up"}}}


def test_materialize_command_writes_tree(
    runner: CliRunner, cli_env: dict[str, str], tmp_path: Path, models_path: Path
) -> None:
    rows = tmp_path / "rows.json"
    rows.write_text(
        json.dumps([{"id": 1, "parentId": None}, {"id": 2, "parentId": 1}]),
        encoding="utf-8",
    )
    output = tmp_path / "tree.json"

    result = runner.invoke(
        app,
        [
            "tree",
            "materialize",
            "--rows",
            str(rows),
            "--models",
            str(models_path),
            "--output",
            str(output),
        ],
        env=cli_env,
    )

    assert result.exit_code == 0, result.output
    assert "Nodes" in result.output
    tree = json.loads(output.read_text(encoding="utf-8"))
    assert tree == [{"id": 1, "parentId": None, "children": [{"id": 2, "parentId": 1}]}]


def test_materialize_command_reports_orphans(
    runner: CliRunner, cli_env: dict[str, str], tmp_path: Path, models_path: Path
) -> None:
    rows = tmp_path / "rows.json"
    rows.write_text(json.dumps([{"id": 1, "parentId": 5}]), encoding="utf-8")

    result = runner.invoke(
        app,
        ["tree", "materialize", "--rows", str(rows), "--models", str(models_path)],
        env=cli_env,
    )

    assert result.exit_code == 2
    assert "Parent ID 5 not found" in result.output


def test_validate_command(
    runner: CliRunner, cli_env: dict[str, str], tmp_path: Path, models_path: Path
) -> None:
    plan = tmp_path / "plan.yaml"
    plan.write_text(
        yaml.safe_dump({"include": [{"model": "folder", "as": "descendents", "hierarchy": True}]}),
        encoding="utf-8",
    )

    result = runner.invoke(
        app,
        ["tree", "validate", "--models", str(models_path), "--plan", str(plan), "--model", "folder"],
        env=cli_env,
    )

    assert result.exit_code == 0, result.output
    assert "requests hierarchy expansion" in result.output


def test_validate_command_rejects_illegal_plan(
    runner: CliRunner, cli_env: dict[str, str], tmp_path: Path, models_path: Path
) -> None:
    plan = tmp_path / "plan.yaml"
    plan.write_text(yaml.safe_dump({"hierarchy": True}), encoding="utf-8")

    result = runner.invoke(
        app,
        ["tree", "validate", "--models", str(models_path), "--plan", str(plan), "--model", "document"],
        env=cli_env,
    )

    assert result.exit_code == 2
    assert "not hierarchical" in result.output


def test_missing_input_path_is_reported(
    runner: CliRunner, cli_env: dict[str, str], tmp_path: Path
) -> None:
    result = runner.invoke(
        app,
        ["tree", "validate", "--models", str(tmp_path / "absent.yaml")],
        env=cli_env,
    )

    assert result.exit_code == 2
    assert "Path does not exist" in result.output
