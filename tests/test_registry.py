"""Tests for model definitions and hierarchy declaration."""

from __future__ import annotations

import pytest

from closuretree.config.policies import HierarchyDefaultsPolicy
from closuretree.errors import ClosureTreeError, HierarchyError
from closuretree.registry import ModelRegistry, deduce_parent_accessor


def test_model_options_apply_defaults() -> None:
    registry = ModelRegistry()
    folder = registry.define("folder", hierarchy=True)

    hierarchy = folder.hierarchy
    assert hierarchy is not None
    assert hierarchy.primary_key == "id"
    assert hierarchy.as_ == "parent"
    assert hierarchy.foreign_key == "parentId"
    assert hierarchy.children_as == "children"
    assert hierarchy.descendants_as == "descendents"
    assert hierarchy.through_as == "folderancestor"
    assert hierarchy.through_key == "folderId"
    assert hierarchy.through_foreign_key == "ancestorId"


def test_plain_model_has_no_hierarchy() -> None:
    registry = ModelRegistry()

    assert registry.define("document", hierarchy=False).hierarchy is None
    assert "document" in registry


@pytest.mark.parametrize(
    ("field_name", "expected"),
    [("parentId", "parent"), ("parent_id", "parent"), ("ownerFolder", "ownerFolder"), ("Id", "Id")],
)
def test_deduce_parent_accessor(field_name: str, expected: str) -> None:
    assert deduce_parent_accessor(field_name, "id") == expected


def test_field_declaration_sets_foreign_key_and_accessor() -> None:
    registry = ModelRegistry()
    node = registry.define(
        "node",
        {"name": {"type": "string"}, "owner_id": {"type": "integer", "hierarchy": True}},
    )

    assert node.hierarchy.foreign_key == "owner_id"
    assert node.hierarchy.as_ == "owner"


def test_field_declaration_with_overrides() -> None:
    registry = ModelRegistry()
    node = registry.define(
        "node",
        {"boss": {"hierarchy": {"as": "manager", "children_as": "reports"}}},
    )

    assert node.hierarchy.foreign_key == "boss"
    assert node.hierarchy.as_ == "manager"
    assert node.hierarchy.children_as == "reports"


def test_two_hierarchy_fields_conflict() -> None:
    registry = ModelRegistry()

    with pytest.raises(HierarchyError, match="two attributes"):
        registry.define(
            "node",
            {"parentId": {"hierarchy": True}, "otherId": {"hierarchy": True}},
        )


def test_field_and_model_options_conflict() -> None:
    registry = ModelRegistry()

    with pytest.raises(HierarchyError, match="in 'node'"):
        registry.define("node", {"parentId": {"hierarchy": True}}, hierarchy=True)


def test_clashing_accessors_are_rejected() -> None:
    registry = ModelRegistry()

    with pytest.raises(HierarchyError, match="invalid hierarchy definition"):
        registry.define("node", hierarchy={"children_as": "descendents"})


def test_policy_defaults_are_used() -> None:
    defaults = HierarchyDefaultsPolicy(children_as="kids", through_as_template="{model}_closure")
    registry = ModelRegistry(defaults)

    node = registry.define("node", hierarchy=True)

    assert node.hierarchy.children_as == "kids"
    assert node.hierarchy.through_as == "node_closure"


def test_duplicate_and_unknown_models() -> None:
    registry = ModelRegistry()
    registry.define("node")

    with pytest.raises(ClosureTreeError, match="already defined"):
        registry.define("node")
    with pytest.raises(ClosureTreeError, match="not defined"):
        registry.get("missing")
