"""I/O utilities for model definitions, inclusion plans, rows and trees."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml

from closuretree.config.policies import HierarchyDefaultsPolicy
from closuretree.entities.core import FindOptions, IncludeSpec
from closuretree.errors import ClosureTreeError
from closuretree.records import ModelInstance
from closuretree.registry import ModelRegistry
from closuretree.utils.helpers import serialize_json
from closuretree.utils.logging import get_logger

_LOGGER = get_logger(module=__name__)


def _read_document(path_like: str | Path) -> Any:
    path = Path(path_like)
    if not path.exists():
        raise FileNotFoundError(f"file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def load_models(
    source: str | Path | Mapping[str, Any],
    *,
    defaults: HierarchyDefaultsPolicy | None = None,
) -> ModelRegistry:
    """Define every model listed under ``models`` in a YAML or JSON document."""

    document = source if isinstance(source, Mapping) else _read_document(source)
    if not isinstance(document, Mapping) or not isinstance(document.get("models"), Mapping):
        raise ValueError("model definitions must contain a 'models' mapping")

    registry = ModelRegistry(defaults)
    for name, definition in document["models"].items():
        definition = definition or {}
        registry.define(
            name,
            definition.get("attributes"),
            primary_key=definition.get("primary_key", "id"),
            hierarchy=definition.get("hierarchy"),
        )
    _LOGGER.info("Loaded model definitions", total=len(registry))
    return registry


def _resolve_include(payload: Mapping[str, Any], registry: ModelRegistry) -> IncludeSpec:
    if "model" not in payload:
        raise ValueError("every include must name a 'model'")
    data: Dict[str, Any] = dict(payload)
    data["model"] = registry.get(payload["model"])
    data["include"] = [_resolve_include(item, registry) for item in payload.get("include") or []]
    return IncludeSpec.model_validate(data)


def load_find_options(
    source: str | Path | Mapping[str, Any],
    registry: ModelRegistry,
) -> FindOptions:
    """Load an inclusion plan, resolving model names through ``registry``."""

    document = source if isinstance(source, Mapping) else _read_document(source)
    document = document or {}
    if not isinstance(document, Mapping):
        raise ValueError("an inclusion plan must be a mapping")
    return FindOptions(
        hierarchy=bool(document.get("hierarchy", False)),
        where=document.get("where"),
        include=[_resolve_include(item, registry) for item in document.get("include") or []],
    )


def load_rows(path_like: str | Path, *, rich: bool = False, model_name: str = "record") -> Any:
    """Load a fetched result set: a list of records or a single record.

    With ``rich`` the top-level records are wrapped in :class:`ModelInstance`.
    """

    rows = _read_document(path_like)
    if rows is None:
        return None
    if isinstance(rows, Mapping):
        return ModelInstance(model_name, rows) if rich else dict(rows)
    if not isinstance(rows, list) or not all(isinstance(row, Mapping) for row in rows):
        raise ValueError("rows must be a record or a list of records")
    if rich:
        return [ModelInstance(model_name, row) for row in rows]
    return [dict(row) for row in rows]


def to_plain(value: Any) -> Any:
    """Convert records, including rich ones, into JSON-serialisable structures."""

    if isinstance(value, Mapping):
        return {key: to_plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [to_plain(item) for item in value]
    return value


def tree_statistics(tree: Any, children_as: str) -> Dict[str, int]:
    """Count roots, nodes and depth of a materialised tree."""

    roots: List[Any] = tree if isinstance(tree, list) else [tree] if tree is not None else []
    nodes = 0
    max_depth = 0
    stack = [(root, 1) for root in roots]
    while stack:
        node, depth = stack.pop()
        nodes += 1
        max_depth = max(max_depth, depth)
        for child in node.get(children_as) or []:
            stack.append((child, depth + 1))
    return {"roots": len(roots), "nodes": nodes, "max_depth": max_depth}


def write_tree(
    tree: Any,
    output_path: str | Path,
    *,
    indent: int = 2,
    sort_keys: bool = True,
) -> Path:
    path = serialize_json(to_plain(tree), output_path, indent=indent, sort_keys=sort_keys)
    _LOGGER.info("Wrote materialised tree", path=str(path))
    return path.resolve()


def resolve_model(registry: ModelRegistry, name: str | None) -> str:
    """Return ``name`` or the only hierarchical model when unambiguous."""

    if name:
        registry.get(name)
        return name
    hierarchical = [model.name for model in registry if model.is_hierarchy]
    if len(hierarchical) != 1:
        raise ClosureTreeError(
            "a root model must be given when definitions hold "
            f"{len(hierarchical)} hierarchical models"
        )
    return hierarchical[0]


__all__ = [
    "load_models",
    "load_find_options",
    "load_rows",
    "to_plain",
    "tree_statistics",
    "write_tree",
    "resolve_model",
]
