"""Pydantic schemas for the course catalog."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Course(BaseModel):
    """Read-only catalog entry."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"), description="Course ID")
    name: str = Field(..., description="Course name")
    description: str = Field(default="", description="Course description")
