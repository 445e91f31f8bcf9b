"""Daily Grid — public endpoint resolving the grid for a date.

Invariants:
    - date defaults to today (UTC)
    - Optional fields that do not apply to the grid's source are omitted from the body
"""

from datetime import date as date_type

from fastapi import APIRouter, Depends, Query

from dailygrid.api.dependencies import get_resolver
from dailygrid.schemas.grid import GridPayload
from dailygrid.services.resolve_daily_grid import DailyGridResolver, utc_now

router = APIRouter(prefix="/api/v1/daily-grid", tags=["daily-grid"])


@router.get("", response_model=GridPayload, response_model_exclude_none=True)
async def get_daily_grid(
    date: date_type | None = Query(None),
    force_refresh: bool = Query(False),
    skip_validation: bool = Query(False),
    resolver: DailyGridResolver = Depends(get_resolver),
):
    """Today's (or the requested date's) grid: cache, then template, then generator."""
    grid_date = date or utc_now().date()
    return await resolver.get_grid_for_date(
        grid_date,
        force_refresh=force_refresh,
        skip_validation=skip_validation,
    )
