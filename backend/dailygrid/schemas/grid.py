"""Grid Schemas — Pydantic models for attributes, grid payloads and cell checks.

Invariants:
    - AttributeSchema.id is derived from type + value; a supplied id must agree
    - GridPayload is the single response/caching shape of the resolution chain
    - title/description/template_id present for curated grids only
    - warning/impossible_cells present for degraded generated grids only

Design Decisions:
    - `type` field name kept for the attribute kind: matches the stored JSON shape
      produced by core Attribute.to_dict()
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from dailygrid.core.attribute import Attribute, attribute_id
from dailygrid.core.domain_types import AttributeKind, GridSource


class AttributeSchema(BaseModel):
    """Attribute at the API boundary."""
    type: AttributeKind
    value: str = Field(min_length=1, max_length=500)
    label: str = Field(min_length=1, max_length=200)
    description: str | None = Field(None, max_length=500)
    id: str | None = None

    @model_validator(mode="after")
    def derive_id(self):
        expected = attribute_id(self.type, self.value)
        if self.id is not None and self.id != expected:
            raise ValueError(f"attribute id must be '{expected}'")
        self.id = expected
        return self

    def to_attribute(self) -> Attribute:
        return Attribute(
            kind=self.type,
            value=self.value,
            label=self.label,
            description=self.description or self.label,
        )


class GridPayload(BaseModel):
    """Resolved grid for one date."""
    date: date
    source: GridSource
    rows: list[AttributeSchema]
    columns: list[AttributeSchema]
    generated_at: datetime | None = None

    # curated only
    template_id: UUID | None = None
    title: str | None = None
    description: str | None = None
    difficulty: str | None = None

    # generated only
    seed: int | None = None
    attempt_count: int | None = None
    warning: str | None = None
    impossible_cells: list[dict] | None = None


class CellCheckRequest(BaseModel):
    """A single (row, column) pair to evaluate."""
    row_attribute: AttributeSchema
    col_attribute: AttributeSchema


class GuessRequest(CellCheckRequest):
    """A player guess for one cell."""
    player_name: str = Field(min_length=1, max_length=200)
