"""Find lifecycle integration: validate before the fetch, build trees after it."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from closuretree.entities.core import FindOptions, ModelDescriptor
from closuretree.errors import HierarchyError
from closuretree.utils.logging import get_logger

from .builder import Record, convert_hierarchies
from .validator import validate_include_tree

_LOGGER = get_logger(module=__name__)


class HierarchyHooks:
    """Hooks run around a find on ``model``."""

    def __init__(self, model: ModelDescriptor) -> None:
        self._model = model

    @property
    def model(self) -> ModelDescriptor:
        return self._model

    def before_find(self, options: FindOptions) -> bool:
        """Reject illegal hierarchy requests and record whether any exist."""

        options.hierarchy_exists = validate_include_tree(options, self._model)
        return options.hierarchy_exists

    def after_find(self, result: Any, options: FindOptions) -> None:
        """Convert hierarchical levels of ``result`` into trees, in place."""

        if result is None:
            return
        if not options.hierarchy_exists:
            return

        parent = self.descendants_parent(options)
        if parent is not None and not isinstance(result, list):
            raise HierarchyError(
                f"Descendants of '{self._model.name}' must be fetched as a list of records"
            )
        convert_hierarchies(result, options, self._model, parent)

        hierarchy = self._model.hierarchy
        if parent is not None and hierarchy is not None:
            children: List[Record] = parent[hierarchy.children_as]
            result[:] = children
            _LOGGER.debug(
                "Replaced descendants result with subtree",
                model=self._model.name,
                parent_id=parent[hierarchy.primary_key],
                top_level=len(children),
            )

    def descendants_parent(self, options: FindOptions) -> Dict[str, Any] | None:
        """Build a stand-in parent record when fetching descendants of a known id.

        The fetch marks this access pattern by filtering the closure-table
        include on its ancestor column; the filter value becomes the parent's
        primary key.
        """

        hierarchy = self._model.hierarchy
        if not options.hierarchy or hierarchy is None:
            return None

        through = options.include_map.get(hierarchy.through_as)
        if through is None or not through.where:
            return None
        ancestor_id = through.where.get(hierarchy.through_foreign_key)
        if ancestor_id is None:
            return None
        if isinstance(ancestor_id, (list, tuple, set, Mapping)):
            raise HierarchyError(
                f"Descendants of '{self._model.name}' can only be fetched for a single "
                f"'{hierarchy.through_foreign_key}' value"
            )
        return {hierarchy.primary_key: ancestor_id}


__all__ = ["HierarchyHooks"]
