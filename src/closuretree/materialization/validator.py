"""Pre-fetch validation of hierarchy requests in an inclusion plan."""

from __future__ import annotations

from typing import Union

from closuretree.entities.core import FindOptions, IncludeSpec, ModelDescriptor
from closuretree.errors import HierarchyError
from closuretree.utils.logging import get_logger

_LOGGER = get_logger(module=__name__)

PlanNode = Union[FindOptions, IncludeSpec]


def _not_hierarchical(model: ModelDescriptor) -> HierarchyError:
    return HierarchyError(f"You cannot get hierarchy of '{model.name}' - it is not hierarchical")


def check_hierarchy(options: PlanNode, model: ModelDescriptor) -> bool:
    """Walk nested includes depth first and reject illegal hierarchy requests.

    Returns whether any include below ``options`` requests hierarchy expansion.
    """

    hierarchy_exists = False
    for include in options.include:
        include_model = include.model

        if include.hierarchy:
            if include_model.hierarchy is None:
                raise _not_hierarchical(include_model)
            if include_model.name != model.name:
                raise HierarchyError(
                    f"You cannot get a hierarchy of '{include_model.name}' "
                    "without including it from a parent"
                )
            if model.hierarchy is None:
                raise _not_hierarchical(model)
            descendants_as = model.hierarchy.descendants_as
            if include.as_ != descendants_as:
                raise HierarchyError(
                    f"You cannot set hierarchy on '{model.name}' "
                    f"without using the '{descendants_as}' accessor"
                )
            hierarchy_exists = True

        if check_hierarchy(include, include_model):
            hierarchy_exists = True

    return hierarchy_exists


def validate_include_tree(
    options: PlanNode,
    model: ModelDescriptor,
    requested_hierarchy: bool | None = None,
) -> bool:
    """Validate a whole plan rooted at ``model``.

    ``requested_hierarchy`` defaults to the root node's own ``hierarchy`` flag.
    """

    if requested_hierarchy is None:
        requested_hierarchy = options.hierarchy

    hierarchy_exists = False
    if requested_hierarchy:
        if model.hierarchy is None:
            raise _not_hierarchical(model)
        hierarchy_exists = True

    nested = check_hierarchy(options, model)
    _LOGGER.debug(
        "Validated include tree",
        model=model.name,
        root_hierarchy=bool(requested_hierarchy),
        nested_hierarchy=nested,
    )
    return hierarchy_exists or nested


__all__ = ["check_hierarchy", "validate_include_tree", "PlanNode"]
