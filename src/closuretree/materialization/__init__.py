"""Hierarchical result materialisation public API."""

from __future__ import annotations

from .builder import ROOT_SENTINEL, convert_hierarchies, convert_hierarchy
from .hooks import HierarchyHooks
from .main import MaterializationResult, materialize_file, validate_plan_file
from .validator import check_hierarchy, validate_include_tree

__all__ = [
    "ROOT_SENTINEL",
    "check_hierarchy",
    "validate_include_tree",
    "convert_hierarchies",
    "convert_hierarchy",
    "HierarchyHooks",
    "MaterializationResult",
    "materialize_file",
    "validate_plan_file",
]
