"""Domain entities for hierarchical result materialisation."""

from .core import FindOptions, HierarchyDescriptor, IncludeSpec, ModelDescriptor

__all__ = [
    "HierarchyDescriptor",
    "ModelDescriptor",
    "IncludeSpec",
    "FindOptions",
]
