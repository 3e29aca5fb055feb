"""Materialisation run policy."""

from __future__ import annotations

from pydantic import BaseModel, Field


class MaterializationPolicy(BaseModel):
    """Controls how file-based materialisation runs validate and write output."""

    validate_plan: bool = Field(
        default=True,
        description="Run the include-tree validation before building trees.",
    )
    sort_keys: bool = Field(default=True, description="Sort record keys in JSON output.")
    indent: int = Field(default=2, ge=0, le=8)
