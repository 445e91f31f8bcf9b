"""Records — plain data carried across the repository boundary (cache rows, templates).

Invariants:
    - CacheEntry.expires_at = generated_at + ttl; freshness is `now < expires_at`
    - TemplateRecord.row_attributes / col_attributes hold Attribute.to_dict() shapes
    - All datetimes are timezone-aware UTC (adapters normalise naive values)
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from uuid import UUID

from dailygrid.core.domain_types import CacheSourceKind

CACHE_TTL: timedelta = timedelta(hours=24)


@dataclass(frozen=True)
class CacheEntry:
    grid_date: date
    source_kind: CacheSourceKind
    payload: dict
    generated_at: datetime
    expires_at: datetime
    template_id: UUID | None = None

    def is_fresh(self, now: datetime) -> bool:
        return now < self.expires_at


def new_cache_entry(
    grid_date: date,
    source_kind: CacheSourceKind,
    payload: dict,
    now: datetime,
    template_id: UUID | None = None,
    ttl: timedelta = CACHE_TTL,
) -> CacheEntry:
    return CacheEntry(
        grid_date=grid_date,
        source_kind=source_kind,
        payload=payload,
        generated_at=now,
        expires_at=now + ttl,
        template_id=template_id,
    )


@dataclass
class TemplateRecord:
    id: UUID
    title: str
    row_attributes: list[dict]
    col_attributes: list[dict]
    description: str | None = None
    difficulty: str = "medium"
    scheduled_date: date | None = None
    published: bool = False
    validated_cell_count: int = 0
    min_cell_solutions: int | None = None
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "description": self.description,
            "difficulty": self.difficulty,
            "row_attributes": self.row_attributes,
            "col_attributes": self.col_attributes,
            "scheduled_date": (
                self.scheduled_date.isoformat() if self.scheduled_date else None
            ),
            "published": self.published,
            "validated_cell_count": self.validated_cell_count,
            "min_cell_solutions": self.min_cell_solutions,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
