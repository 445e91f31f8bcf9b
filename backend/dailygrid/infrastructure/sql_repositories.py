"""SQL Repositories — CacheRepository and TemplateRepository over SQLAlchemy.

Invariants:
    - Every write commits its own transaction; a failure rolls back and surfaces
      as DatabaseError (or TemplateConflictError for the published-date index)
    - Cache writes are a single INSERT ... ON CONFLICT (date) DO UPDATE
    - set_published flips the flag and deletes the date's cache row in ONE commit
    - Datetimes leave this module timezone-aware (SQLite hands back naive values)

Design Decisions:
    - Dialect-specific insert picked from the bound engine: postgresql in production,
      sqlite in tests; both support ON CONFLICT DO UPDATE
"""

import logging
from datetime import date, datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy import case, delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dailygrid.core.domain_types import CacheSourceKind
from dailygrid.core.errors import (
    DatabaseError, ResourceNotFoundError, TemplateConflictError,
)
from dailygrid.core.records import CacheEntry, TemplateRecord
from dailygrid.models.cached_daily_grid import CachedDailyGrid
from dailygrid.models.grid_template import GridTemplate

logger = logging.getLogger(__name__)

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _aware(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _to_entry(row: CachedDailyGrid) -> CacheEntry:
    return CacheEntry(
        grid_date=row.grid_date,
        source_kind=CacheSourceKind(row.source_kind),
        payload=row.payload,
        generated_at=_aware(row.generated_at),
        expires_at=_aware(row.expires_at),
        template_id=row.template_id,
    )


def _to_record(row: GridTemplate) -> TemplateRecord:
    return TemplateRecord(
        id=row.id,
        title=row.title,
        description=row.description,
        difficulty=row.difficulty,
        row_attributes=row.row_attributes,
        col_attributes=row.col_attributes,
        scheduled_date=row.scheduled_date,
        published=row.published,
        validated_cell_count=row.validated_cell_count,
        min_cell_solutions=row.min_cell_solutions,
        created_by=row.created_by,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


async def _commit(db: AsyncSession, operation: str) -> None:
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"DB commit failed during {operation}: {e}")
        raise DatabaseError("Database write failed", operation) from e


# ─── Cache ──────────────────────────────────────────────────────

class SqlCacheRepository:
    """cached_daily_grids access. One row per date."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, grid_date: date) -> CacheEntry | None:
        try:
            result = await self.db.execute(
                select(CachedDailyGrid)
                .where(CachedDailyGrid.grid_date == grid_date)
                .execution_options(populate_existing=True),
            )
        except SQLAlchemyError as e:
            raise DatabaseError(f"Cache read failed: {e}", "cache_get") from e
        row = result.scalar_one_or_none()
        return _to_entry(row) if row is not None else None

    async def upsert(self, entry: CacheEntry) -> None:
        insert = _INSERTS.get(self.db.get_bind().dialect.name)
        if insert is None:
            raise DatabaseError(
                f"Upsert unsupported for dialect {self.db.get_bind().dialect.name}",
                "cache_upsert",
            )
        values = {
            "source_kind": entry.source_kind.value,
            "template_id": entry.template_id,
            "payload": entry.payload,
            "generated_at": entry.generated_at,
            "expires_at": entry.expires_at,
        }
        stmt = insert(CachedDailyGrid.__table__).values(
            id=uuid4(), date=entry.grid_date, **values,
        )
        stmt = stmt.on_conflict_do_update(index_elements=["date"], set_=values)
        try:
            await self.db.execute(stmt)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DatabaseError(f"Cache upsert failed: {e}", "cache_upsert") from e
        await _commit(self.db, "cache_upsert")

    async def delete_expired(self, now: datetime) -> int:
        result = await self.db.execute(
            delete(CachedDailyGrid).where(CachedDailyGrid.expires_at <= now),
        )
        await _commit(self.db, "cache_sweep")
        return result.rowcount or 0

    async def stats(self, now: datetime) -> list[dict]:
        active = func.sum(case((CachedDailyGrid.expires_at > now, 1), else_=0))
        result = await self.db.execute(
            select(
                CachedDailyGrid.source_kind,
                func.count(CachedDailyGrid.id),
                active,
                func.min(CachedDailyGrid.generated_at),
                func.max(CachedDailyGrid.generated_at),
            )
            .group_by(CachedDailyGrid.source_kind)
            .order_by(CachedDailyGrid.source_kind),
        )
        stats = []
        for source_kind, total, active_count, oldest, newest in result.all():
            active_count = int(active_count or 0)
            stats.append({
                "source_kind": source_kind,
                "total_cached": total,
                "active": active_count,
                "expired": total - active_count,
                "oldest": _aware(oldest).isoformat() if oldest else None,
                "newest": _aware(newest).isoformat() if newest else None,
            })
        return stats


# ─── Templates ──────────────────────────────────────────────────

class SqlTemplateRepository:
    """grid_templates access. Lifecycle rules live in TemplateService."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_row(self, template_id: UUID) -> GridTemplate:
        row = await self.db.get(GridTemplate, template_id)
        if row is None:
            raise ResourceNotFoundError("Template", str(template_id))
        return row

    async def create(self, fields: dict) -> TemplateRecord:
        row = GridTemplate(**fields)
        self.db.add(row)
        await _commit(self.db, "template_create")
        await self.db.refresh(row)
        return _to_record(row)

    async def get(self, template_id: UUID) -> TemplateRecord | None:
        row = await self.db.get(GridTemplate, template_id)
        return _to_record(row) if row is not None else None

    async def list_page(
        self, published: bool | None, limit: int, offset: int,
    ) -> tuple[list[TemplateRecord], int]:
        query = select(GridTemplate)
        count_query = select(func.count(GridTemplate.id))
        if published is not None:
            query = query.where(GridTemplate.published == published)
            count_query = count_query.where(GridTemplate.published == published)
        query = query.order_by(
            GridTemplate.created_at.desc(), GridTemplate.id,
        ).limit(limit).offset(offset)

        total = (await self.db.execute(count_query)).scalar_one()
        rows = (await self.db.execute(query)).scalars().all()
        return [_to_record(r) for r in rows], total

    async def update(self, template_id: UUID, fields: dict) -> TemplateRecord:
        row = await self._get_row(template_id)
        for key, value in fields.items():
            setattr(row, key, value)
        await _commit(self.db, "template_update")
        await self.db.refresh(row)
        return _to_record(row)

    async def delete(self, template_id: UUID) -> None:
        row = await self._get_row(template_id)
        await self.db.delete(row)
        await _commit(self.db, "template_delete")

    async def find_published_for_date(
        self, scheduled_date: date, exclude_id: UUID | None = None,
    ) -> TemplateRecord | None:
        query = select(GridTemplate).where(
            GridTemplate.scheduled_date == scheduled_date,
            GridTemplate.published.is_(True),
        )
        if exclude_id is not None:
            query = query.where(GridTemplate.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        row = result.scalar_one_or_none()
        return _to_record(row) if row is not None else None

    async def set_published(
        self, template_id: UUID, published: bool,
    ) -> TemplateRecord:
        """Flip the flag and drop the date's cached grid in one transaction."""
        row = await self._get_row(template_id)
        scheduled_date = row.scheduled_date
        row.published = published
        try:
            if scheduled_date is not None:
                await self.db.execute(
                    delete(CachedDailyGrid)
                    .where(CachedDailyGrid.grid_date == scheduled_date),
                )
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Concurrent publish for {scheduled_date}: {e}")
            winner = await self.find_published_for_date(
                scheduled_date, exclude_id=template_id,
            )
            raise TemplateConflictError(
                scheduled_date.isoformat(),
                winner.title if winner else "unknown",
                str(winner.id) if winner else "unknown",
            ) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DatabaseError("Database write failed", "template_publish") from e
        await self.db.refresh(row)
        return _to_record(row)
