"""Hierarchy declaration defaults."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class HierarchyDefaultsPolicy(BaseModel):
    """Default accessor names applied when a model is declared hierarchical.

    ``through_as_template`` and ``through_key_template`` are formatted with the
    model name to derive the closure-table accessor and its descendant column.
    """

    as_: str = Field(default="parent", alias="as", min_length=1)
    children_as: str = Field(default="children", min_length=1)
    ancestors_as: str = Field(default="ancestors", min_length=1)
    descendants_as: str = Field(default="descendents", min_length=1)
    level_field_name: str = Field(default="hierarchyLevel", min_length=1)
    through_as_template: str = Field(default="{model}ancestor", min_length=1)
    through_key_template: str = Field(default="{model}Id", min_length=1)
    through_foreign_key: str = Field(default="ancestorId", min_length=1)

    model_config = {"populate_by_name": True}

    @field_validator("through_as_template", "through_key_template")
    @classmethod
    def _require_model_placeholder(cls, value: str) -> str:
        if "{model}" not in value:
            raise ValueError("template must contain the '{model}' placeholder")
        return value
