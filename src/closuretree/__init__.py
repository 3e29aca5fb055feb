"""Materialise closure-table row sets into nested hierarchy trees."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("closuretree")
except PackageNotFoundError:  # pragma: no cover - running from a source checkout
    __version__ = "0.1.0"

from .config.settings import Settings, get_settings
from .entities import FindOptions, HierarchyDescriptor, IncludeSpec, ModelDescriptor
from .errors import ClosureTreeError, HierarchyError
from .materialization import (
    HierarchyHooks,
    convert_hierarchies,
    convert_hierarchy,
    validate_include_tree,
)
from .records import ModelInstance, is_model_instance
from .registry import ModelRegistry

__all__ = [
    "__version__",
    "Settings",
    "get_settings",
    "ClosureTreeError",
    "HierarchyError",
    "HierarchyDescriptor",
    "ModelDescriptor",
    "IncludeSpec",
    "FindOptions",
    "ModelInstance",
    "is_model_instance",
    "ModelRegistry",
    "HierarchyHooks",
    "validate_include_tree",
    "convert_hierarchies",
    "convert_hierarchy",
]
