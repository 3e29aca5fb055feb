"""Tests for configuration loading and validation."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
import yaml
from loguru import logger

from closuretree.config.policies import Policies, load_policies
from closuretree.config.settings import Settings
from closuretree.utils.logging import configure_logging, get_logger


@pytest.fixture
def minimal_policy_dict() -> dict:
    return {
        "policy_version": "test-version",
        "hierarchy": {"as": "up", "children_as": "kids"},
        "materialization": {"validate_plan": False, "indent": 4},
    }


def test_load_policies_from_dict(minimal_policy_dict: dict) -> None:
    policies = load_policies(minimal_policy_dict)
    assert isinstance(policies, Policies)
    assert policies.hierarchy.as_ == "up"
    assert policies.hierarchy.children_as == "kids"
    assert policies.hierarchy.descendants_as == "descendents"
    assert policies.materialization.validate_plan is False


def test_load_policies_from_yaml_with_env_override(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, minimal_policy_dict: dict
) -> None:
    path = tmp_path / "policies.yaml"
    path.write_text(yaml.safe_dump(minimal_policy_dict), encoding="utf-8")
    monkeypatch.setenv("CLOSURETREE_POLICY__MATERIALIZATION__INDENT", "0")

    policies = load_policies(path)

    assert policies.materialization.indent == 0


def test_load_policies_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_policies(tmp_path / "absent.yaml")


def test_template_requires_model_placeholder() -> None:
    with pytest.raises(ValueError):
        load_policies({"hierarchy": {"through_as_template": "closure"}})


def test_settings_environment_override(tmp_path: Path, minimal_policy_dict: dict) -> None:
    default_yaml = {
        "environment": "development",
        "paths": {"output_dir": "output", "logs_dir": "logs"},
        "policies": minimal_policy_dict,
    }
    testing_yaml = {"policies": {"policy_version": "testing"}}
    (tmp_path / "default.yaml").write_text(yaml.safe_dump(default_yaml), encoding="utf-8")
    (tmp_path / "testing.yaml").write_text(yaml.safe_dump(testing_yaml), encoding="utf-8")

    settings = Settings(config_dir=tmp_path, environment="testing")
    assert settings.policy_version == "testing"
    assert settings.policies.hierarchy.children_as == "kids"


def test_settings_env_override(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    logs_dir = tmp_path / "custom-logs"
    monkeypatch.setenv("CLOSURETREE_SETTINGS__PATHS__LOGS_DIR", str(logs_dir))

    settings = Settings(config_dir=tmp_path)

    assert settings.paths.logs_dir == logs_dir
    assert settings.log_file == logs_dir / "closuretree.log"


def test_settings_create_dirs(tmp_path: Path) -> None:
    output_dir = tmp_path / "out"
    logs_dir = tmp_path / "logs"

    Settings(
        config_dir=tmp_path,
        create_dirs=True,
        paths={"output_dir": output_dir, "logs_dir": logs_dir},
    )

    assert output_dir.is_dir()
    assert logs_dir.is_dir()


@pytest.fixture
def restore_logging():
    yield
    logger.remove()
    logger.configure(patcher=lambda record: None)
    logger.add(sys.stderr)


def test_configure_logging_writes_file_sink(tmp_path: Path, restore_logging) -> None:
    logs_dir = tmp_path / "logs"
    settings = Settings(
        config_dir=tmp_path,
        paths={"logs_dir": logs_dir},
        logging={"level": "info", "file_sink": True},
    )

    configure_logging(settings)
    get_logger(module="tests.config").info("Converted hierarchy", model="folder", top_level=2)
    logger.remove()

    written = settings.log_file.read_text(encoding="utf-8")
    assert "INFO" in written
    assert "tests.config" in written
    assert "Converted hierarchy | model='folder' top_level=2" in written


def test_configure_logging_level_and_disabled_file_sink(tmp_path: Path, restore_logging) -> None:
    logs_dir = tmp_path / "logs"
    settings = Settings(
        config_dir=tmp_path,
        paths={"logs_dir": logs_dir},
        logging={"level": "INFO", "file_sink": False},
    )

    configure_logging(settings, level="debug")
    get_logger(module="tests.config").debug("Validated include tree")

    assert settings.logging.level == "INFO"
    assert not logs_dir.exists()
