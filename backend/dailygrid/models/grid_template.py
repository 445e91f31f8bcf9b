"""GridTemplate ORM — an admin-authored grid, draft or published for one date.

Invariants:
    - row_attributes / col_attributes: JSON lists of exactly 3 attribute dicts
    - scheduled_date NULL = undated draft
    - At most one published template per scheduled_date (partial unique index,
      also checked by TemplateService before the write)
    - 0 <= validated_cell_count <= 9

Design Decisions:
    - Partial unique index declared for both postgresql and sqlite so the test
      database enforces the same rule as production
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import (
    JSON, Boolean, CheckConstraint, Date, DateTime, Index, Integer, String, Text,
    text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from dailygrid.db.base import Base


class GridTemplate(Base):
    __tablename__ = "grid_templates"
    __table_args__ = (
        Index(
            "idx_grid_templates_unique_published_date",
            "scheduled_date",
            unique=True,
            postgresql_where=text("published = true AND scheduled_date IS NOT NULL"),
            sqlite_where=text("published = 1 AND scheduled_date IS NOT NULL"),
        ),
        CheckConstraint(
            "validated_cell_count >= 0 AND validated_cell_count <= 9",
            name="ck_grid_templates_validated_cells",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    difficulty: Mapped[str] = mapped_column(
        String(20), nullable=False, default="medium",
    )
    row_attributes: Mapped[list] = mapped_column(JSON, nullable=False)
    col_attributes: Mapped[list] = mapped_column(JSON, nullable=False)
    scheduled_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    published: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    validated_cell_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    min_cell_solutions: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
