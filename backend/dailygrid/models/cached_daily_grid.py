"""CachedDailyGrid ORM — the resolved grid for one date, with a 24h expiry.

Invariants:
    - date (grid_date) is UNIQUE: at most one cached grid per date (writes are upserts)
    - source_kind is "curated" | "generated"
    - template_id set only for curated rows; SET NULL if the template is deleted
    - payload holds the full response body served for that date

Design Decisions:
    - JSON payload over normalized columns: the cache serves the body verbatim
    - expires_at indexed for the sweep query
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import JSON, Date, DateTime, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from dailygrid.db.base import Base


class CachedDailyGrid(Base):
    __tablename__ = "cached_daily_grids"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    grid_date: Mapped[date] = mapped_column(
        "date", Date, nullable=False, unique=True,
    )
    source_kind: Mapped[str] = mapped_column(String(20), nullable=False)
    template_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("grid_templates.id", ondelete="SET NULL"),
        nullable=True,
    )
    payload: Mapped[dict] = mapped_column(JSON, nullable=False)
    generated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    expires_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True,
    )
