"""Template Schemas — Pydantic models for the template authoring surface.

Invariants:
    - title: 1-255 chars, stripped, non-empty
    - Attribute lists carry exactly 3 entries per axis (structural checks beyond
      counts happen in core Grid construction)
    - TemplateUpdate distinguishes "field omitted" from "field set to null" via
      model_fields_set (scheduled_date=null moves a template back to undated draft)
"""

from datetime import date

from pydantic import BaseModel, Field, field_validator

from dailygrid.core.domain_types import TemplateDifficulty
from dailygrid.core.grid import AXIS_SIZE
from dailygrid.schemas.grid import AttributeSchema


class TemplateCreate(BaseModel):
    """Template creation. Always starts as a draft."""
    title: str = Field(min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    difficulty: TemplateDifficulty = TemplateDifficulty.MEDIUM
    row_attributes: list[AttributeSchema] = Field(
        min_length=AXIS_SIZE, max_length=AXIS_SIZE,
    )
    col_attributes: list[AttributeSchema] = Field(
        min_length=AXIS_SIZE, max_length=AXIS_SIZE,
    )
    scheduled_date: date | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v


class TemplateUpdate(BaseModel):
    """Partial update of a draft template."""
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    difficulty: TemplateDifficulty | None = None
    row_attributes: list[AttributeSchema] | None = Field(
        None, min_length=AXIS_SIZE, max_length=AXIS_SIZE,
    )
    col_attributes: list[AttributeSchema] | None = Field(
        None, min_length=AXIS_SIZE, max_length=AXIS_SIZE,
    )
    scheduled_date: date | None = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v


class GridValidateRequest(BaseModel):
    """Standalone validation preview. Nothing is persisted."""
    row_attributes: list[AttributeSchema] = Field(
        min_length=AXIS_SIZE, max_length=AXIS_SIZE,
    )
    col_attributes: list[AttributeSchema] = Field(
        min_length=AXIS_SIZE, max_length=AXIS_SIZE,
    )
