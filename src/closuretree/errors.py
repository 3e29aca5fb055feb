"""Exception types raised by the closuretree package."""

from __future__ import annotations


class ClosureTreeError(RuntimeError):
    """Base class for closuretree errors."""


class HierarchyError(ClosureTreeError):
    """Raised for illegal hierarchy requests and result-set integrity violations."""


__all__ = ["ClosureTreeError", "HierarchyError"]
