"""Core domain entities describing hierarchical models and inclusion plans."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class HierarchyDescriptor(BaseModel):
    """Accessor and key names of a hierarchical model, fixed at definition time.

    ``through_as`` is the accessor under which the closure-table join row is
    attached to each fetched record; ``through_key`` and ``through_foreign_key``
    are the columns of that join row pointing at the descendant and the
    ancestor respectively.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    primary_key: str = Field(default="id", min_length=1)
    foreign_key: str = Field(default="parentId", min_length=1)
    as_: str = Field(default="parent", alias="as", min_length=1)
    children_as: str = Field(default="children", min_length=1)
    ancestors_as: str = Field(default="ancestors", min_length=1)
    descendants_as: str = Field(default="descendents", min_length=1)
    level_field_name: str = Field(default="hierarchyLevel", min_length=1)
    through_as: str = Field(..., min_length=1)
    through_key: str = Field(..., min_length=1)
    through_foreign_key: str = Field(default="ancestorId", min_length=1)

    @model_validator(mode="after")
    def _check_distinct_accessors(self) -> "HierarchyDescriptor":
        accessors = [self.children_as, self.descendants_as, self.through_as]
        if len(set(accessors)) != len(accessors):
            raise ValueError(
                "children_as, descendants_as and through_as must be distinct accessors"
            )
        return self


class ModelDescriptor(BaseModel):
    """A fetchable model: its logical name, key, and optional hierarchy."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    primary_key: str = Field(default="id", min_length=1)
    hierarchy: HierarchyDescriptor | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("model name must contain non-whitespace characters")
        return cleaned

    @property
    def is_hierarchy(self) -> bool:
        return self.hierarchy is not None


class IncludeSpec(BaseModel):
    """One node of a nested inclusion plan."""

    model_config = ConfigDict(populate_by_name=True)

    model: ModelDescriptor
    as_: str | None = Field(default=None, alias="as")
    hierarchy: bool = False
    include: List["IncludeSpec"] = Field(default_factory=list)
    where: Dict[str, Any] | None = None

    @model_validator(mode="after")
    def _default_accessor(self) -> "IncludeSpec":
        if self.as_ is None:
            self.as_ = self.model.name
        return self


class FindOptions(BaseModel):
    """Root of an inclusion plan, as handed to the find lifecycle."""

    hierarchy: bool = False
    include: List[IncludeSpec] = Field(default_factory=list)
    where: Dict[str, Any] | None = None
    hierarchy_exists: bool = Field(
        default=False,
        description="Set by the pre-fetch validation when any hierarchy expansion is requested.",
    )

    @property
    def include_map(self) -> Dict[str, IncludeSpec]:
        return {include.as_: include for include in self.include}


IncludeSpec.model_rebuild()


__all__ = ["HierarchyDescriptor", "ModelDescriptor", "IncludeSpec", "FindOptions"]
