"""Daily Grid Resolution — cache → published template → generated grid, written through.

Invariants:
    - Fresh cache hit (now < expires_at) is returned verbatim, never revalidated
    - Published template beats generation; cached with source_kind=curated + template_id
    - Generated grids are cached with source_kind=generated, including grids
      degraded after exhausting every attempt (a rerun selects the same grids)
    - force_refresh skips the cache READ only; every write is an upsert on date
    - Grids generated with skip_validation are never cached, nor are grids cut
      short by the generation time budget (they may be unvalidated)
    - After caching a generated grid the template store is re-checked: a publish that
      landed during generation overwrites the entry with the curated grid
    - A failed cache read is a miss; a failed cache write is logged. Neither fails
      the request

Design Decisions:
    - Base seed = YYYYMMDD as int: every server derives the same grid for a date
    - Clock injected (now callable) so expiry is testable without sleeping
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

from dailygrid.core.domain_types import CacheSourceKind, GridSource
from dailygrid.core.errors import DailyGridError
from dailygrid.core.grid import Grid
from dailygrid.core.records import CACHE_TTL, TemplateRecord, new_cache_entry
from dailygrid.core.repository_protocols import (
    CacheRepository, PlayerDataset, TemplateRepository,
)
from dailygrid.schemas.grid import GridPayload
from dailygrid.services.generation_loop import (
    MAX_ATTEMPTS, SEED_STEP, GenerationOutcome, run_generation,
)
from dailygrid.services.grid_validator import DEFAULT_SCAN_LIMIT, validate_grid
from dailygrid.services.pool_builder import load_attribute_pool

logger = logging.getLogger(__name__)

_CACHED_SOURCE = {
    CacheSourceKind.CURATED: GridSource.CACHED_CURATED,
    CacheSourceKind.GENERATED: GridSource.CACHED_GENERATED,
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def date_seed(grid_date: date) -> int:
    """2026-10-16 → 20261016."""
    return int(grid_date.strftime("%Y%m%d"))


def curated_payload(template: TemplateRecord, grid_date: date, now: datetime) -> GridPayload:
    grid = Grid.from_payload(template.row_attributes, template.col_attributes)
    return GridPayload(
        date=grid_date,
        source=GridSource.FRESH_CURATED,
        generated_at=now,
        template_id=template.id,
        title=template.title,
        description=template.description,
        difficulty=template.difficulty,
        **grid.to_payload(),
    )


def generated_payload(
    outcome: GenerationOutcome, grid_date: date, now: datetime,
) -> GridPayload:
    return GridPayload(
        date=grid_date,
        source=GridSource.FRESH_GENERATED,
        generated_at=now,
        seed=outcome.seed,
        attempt_count=outcome.attempt_count,
        warning=outcome.warning,
        impossible_cells=outcome.impossible_cells if outcome.degraded else None,
        **outcome.grid.to_payload(),
    )


class DailyGridResolver:
    """Three-tier resolution for a requested date."""

    def __init__(
        self,
        dataset: PlayerDataset,
        cache: CacheRepository,
        templates: TemplateRepository,
        *,
        scan_limit: int = DEFAULT_SCAN_LIMIT,
        max_attempts: int = MAX_ATTEMPTS,
        seed_step: int = SEED_STEP,
        timeout_seconds: float | None = None,
        cache_ttl: timedelta = CACHE_TTL,
        now: Callable[[], datetime] = utc_now,
    ):
        self.dataset = dataset
        self.cache = cache
        self.templates = templates
        self.scan_limit = scan_limit
        self.max_attempts = max_attempts
        self.seed_step = seed_step
        self.timeout_seconds = timeout_seconds
        self.cache_ttl = cache_ttl
        self._now = now

    async def get_grid_for_date(
        self,
        grid_date: date,
        force_refresh: bool = False,
        skip_validation: bool = False,
    ) -> GridPayload:
        if not force_refresh:
            cached = await self._read_cache(grid_date)
            if cached is not None:
                return cached

        template = await self.templates.find_published_for_date(grid_date)
        if template is not None:
            return await self._serve_curated(template, grid_date)

        payload, cacheable = await self._generate(grid_date, skip_validation)
        if not cacheable:
            return payload
        await self._write_cache(grid_date, CacheSourceKind.GENERATED, payload)

        late_template = await self.templates.find_published_for_date(grid_date)
        if late_template is not None:
            logger.warning(
                f"Template published during generation for {grid_date}; "
                "replacing generated cache entry",
                extra={"grid_date": str(grid_date), "template_id": str(late_template.id)},
            )
            return await self._serve_curated(late_template, grid_date)
        return payload

    async def _read_cache(self, grid_date: date) -> GridPayload | None:
        try:
            entry = await self.cache.get(grid_date)
        except DailyGridError as e:
            logger.warning(
                f"Cache read failed for {grid_date}, treating as miss: {e.message}",
                extra={"grid_date": str(grid_date), "error_code": e.code},
            )
            return None
        if entry is None:
            logger.info(f"Cache miss for {grid_date}", extra={"grid_date": str(grid_date)})
            return None
        if not entry.is_fresh(self._now()):
            logger.info(
                f"Cache entry for {grid_date} expired at {entry.expires_at.isoformat()}",
                extra={"grid_date": str(grid_date)},
            )
            return None
        logger.info(
            f"Cache hit for {grid_date} ({entry.source_kind.value})",
            extra={"grid_date": str(grid_date)},
        )
        payload = GridPayload.model_validate(entry.payload)
        return payload.model_copy(update={"source": _CACHED_SOURCE[entry.source_kind]})

    async def _serve_curated(self, template: TemplateRecord, grid_date: date) -> GridPayload:
        logger.info(
            f'Serving curated template "{template.title}" for {grid_date}',
            extra={"grid_date": str(grid_date), "template_id": str(template.id)},
        )
        payload = curated_payload(template, grid_date, self._now())
        await self._write_cache(
            grid_date, CacheSourceKind.CURATED, payload, template_id=template.id,
        )
        return payload

    async def _generate(
        self, grid_date: date, skip_validation: bool,
    ) -> tuple[GridPayload, bool]:
        """Generated payload, and whether it may be cached."""
        pool = await load_attribute_pool(self.dataset)
        base_seed = date_seed(grid_date)
        logger.info(
            f"Generating grid for {grid_date} (base seed {base_seed})",
            extra={"grid_date": str(grid_date), "seed": base_seed},
        )

        async def validate(grid: Grid):
            return await validate_grid(self.dataset, grid, self.scan_limit)

        outcome = await run_generation(
            pool, base_seed, validate,
            max_attempts=self.max_attempts,
            seed_step=self.seed_step,
            skip_validation=skip_validation,
            timeout_seconds=self.timeout_seconds,
        )
        payload = generated_payload(outcome, grid_date, self._now())
        if outcome.timed_out:
            logger.warning(
                f"Generation for {grid_date} hit the time budget; not caching",
                extra={"grid_date": str(grid_date), "attempt": outcome.attempt_count},
            )
        return payload, not (skip_validation or outcome.timed_out)

    async def _write_cache(
        self,
        grid_date: date,
        source_kind: CacheSourceKind,
        payload: GridPayload,
        template_id: UUID | None = None,
    ) -> None:
        entry = new_cache_entry(
            grid_date, source_kind, payload.model_dump(mode="json"),
            self._now(), template_id=template_id, ttl=self.cache_ttl,
        )
        try:
            await self.cache.upsert(entry)
        except DailyGridError as e:
            logger.error(
                f"Failed to cache grid for {grid_date}: {e.message}",
                extra={"grid_date": str(grid_date), "error_code": e.code},
            )
