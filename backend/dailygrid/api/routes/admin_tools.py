"""Admin Tools — grid suggestions for template authors and cache housekeeping.

Invariants:
    - Every route requires require_admin
    - seed defaults to today's date seed, so the primary suggestion is the grid the
      generator would try first today
"""

from fastapi import APIRouter, Depends, Query

from dailygrid.api.dependencies import (
    get_cache_repository, get_player_dataset, require_admin,
)
from dailygrid.config import Settings, get_settings
from dailygrid.core.repository_protocols import CacheRepository, PlayerDataset
from dailygrid.services.cache_housekeeping import cache_stats, sweep_expired
from dailygrid.services.pool_builder import load_attribute_pool
from dailygrid.services.resolve_daily_grid import date_seed, utc_now
from dailygrid.services.suggest_grids import suggest_grids

router = APIRouter(
    prefix="/api/v1/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.get("/suggestions")
async def get_suggestions(
    seed: int | None = Query(None),
    count: int = Query(3, ge=0, le=10),
    dataset: PlayerDataset = Depends(get_player_dataset),
    settings: Settings = Depends(get_settings),
):
    pool = await load_attribute_pool(dataset)
    base_seed = seed if seed is not None else date_seed(utc_now().date())
    return suggest_grids(pool, base_seed, count, settings.suggestion_seed_step)


@router.post("/cache/sweep")
async def sweep_cache(cache: CacheRepository = Depends(get_cache_repository)):
    return await sweep_expired(cache, utc_now())


@router.get("/cache/stats")
async def get_cache_stats(cache: CacheRepository = Depends(get_cache_repository)):
    return await cache_stats(cache, utc_now())
