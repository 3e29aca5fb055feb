"""Configuration utilities for closuretree."""

from .policies import HierarchyDefaultsPolicy, MaterializationPolicy, Policies, load_policies
from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
    "Policies",
    "load_policies",
    "HierarchyDefaultsPolicy",
    "MaterializationPolicy",
]
