"""Post-fetch conversion of flat closure-table results into nested trees."""

from __future__ import annotations

from typing import Any, Dict, List, MutableMapping

from closuretree.entities.core import ModelDescriptor
from closuretree.errors import HierarchyError
from closuretree.records import record_access
from closuretree.utils.logging import get_logger

from .validator import PlanNode

_LOGGER = get_logger(module=__name__)

#: Foreign key value marking a record as top level when no parent is in scope.
ROOT_SENTINEL = None

Record = MutableMapping[str, Any]


def convert_hierarchies(
    results: Any,
    options: PlanNode,
    model: ModelDescriptor,
    parent: Record | None = None,
) -> None:
    """Convert every hierarchical level of a nested result set in place.

    Nested includes are converted before the current level so that the
    current level's conversion never removes an accessor a deeper level still
    has to read.
    """

    if results is None:
        return

    records = results if isinstance(results, list) else [results]

    for include in options.include:
        for record in records:
            convert_hierarchies(
                record_access(record).get(include.as_),
                include,
                include.model,
                record,
            )

    if options.hierarchy:
        convert_hierarchy(records, model, parent)


def convert_hierarchy(
    results: List[Record],
    model: ModelDescriptor,
    parent: Record | None = None,
) -> List[Record]:
    """Regroup one flat list of records into parent/children nesting.

    With ``parent`` given the top-level records are attached as the parent's
    children, replacing its descendants accessor. Without it ``results`` itself
    is emptied and refilled with the top-level records, so callers holding a
    reference to the list see the tree. Returns the list holding the top-level
    records.

    Parents are looked up by value, so foreign keys must have the same type as
    the primary keys they point at: a ``"1"`` foreign key does not match an
    ``id`` of ``1``.

    A :class:`HierarchyError` for an orphaned record leaves ``results`` partly
    regrouped, since the list is emptied before the orphan is reached.
    Callers that need the flat rows after a failure must keep their own copy.
    """

    hierarchy = model.hierarchy
    if hierarchy is None:
        raise HierarchyError(f"You cannot get hierarchy of '{model.name}' - it is not hierarchical")

    primary_key = hierarchy.primary_key
    foreign_key = hierarchy.foreign_key
    children_as = hierarchy.children_as

    output: List[Record]
    if parent is not None:
        parent_access = record_access(parent)
        parent_id = parent_access.get(primary_key)
        output = []
        parent_access.set(children_as, output)
        parent_access.delete(hierarchy.descendants_as)
        items = results
    else:
        parent_id = ROOT_SENTINEL
        output = results
        items = list(results)
        output.clear()

    references: Dict[Any, Record] = {}
    for item in items:
        references[record_access(item).get(primary_key)] = item

    for item in items:
        access = record_access(item)
        access.delete(hierarchy.through_as)

        this_parent_id = access.get(foreign_key)
        if this_parent_id == parent_id:
            output.append(item)
            continue

        item_parent = references.get(this_parent_id)
        if item_parent is None:
            raise HierarchyError(f"Parent ID {this_parent_id} not found in result set")

        parent_children_access = record_access(item_parent)
        children = parent_children_access.get(children_as)
        if children is None:
            children = []
            parent_children_access.set(children_as, children)
        children.append(item)

    _LOGGER.debug(
        "Converted hierarchy",
        model=model.name,
        parent_id=parent_id,
        records=len(items),
        top_level=len(output),
    )
    return output


__all__ = ["ROOT_SENTINEL", "convert_hierarchies", "convert_hierarchy"]
