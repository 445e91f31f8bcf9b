"""API Dependencies — wires settings, sessions and adapters into services per request.

Invariants:
    - Repositories share the request's AsyncSession (get_db)
    - The player dataset opens its own short sessions from db_manager, because the
      validator queries it concurrently
    - Admin routes depend on require_admin; an empty ADMIN_API_KEYS disables the check

Design Decisions:
    - Plain FastAPI Depends factories instead of a container: every route shows
      exactly what it is built from
    - get_player_dataset is a separate dependency so tests override it with an
      in-memory fake
"""

import hashlib
import logging
import secrets
from datetime import timedelta

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from dailygrid.config import Settings, get_settings
from dailygrid.core.errors import AdminAccessError
from dailygrid.core.repository_protocols import PlayerDataset
from dailygrid.infrastructure.database import get_db, get_db_manager
from dailygrid.infrastructure.sql_dataset import SqlPlayerDataset
from dailygrid.infrastructure.sql_repositories import (
    SqlCacheRepository, SqlTemplateRepository,
)
from dailygrid.services.resolve_daily_grid import DailyGridResolver
from dailygrid.services.template_service import TemplateService

logger = logging.getLogger(__name__)


def get_player_dataset() -> PlayerDataset:
    return SqlPlayerDataset(get_db_manager().session)


def get_cache_repository(db: AsyncSession = Depends(get_db)) -> SqlCacheRepository:
    return SqlCacheRepository(db)


def get_template_repository(
    db: AsyncSession = Depends(get_db),
) -> SqlTemplateRepository:
    return SqlTemplateRepository(db)


def get_resolver(
    dataset: PlayerDataset = Depends(get_player_dataset),
    cache: SqlCacheRepository = Depends(get_cache_repository),
    templates: SqlTemplateRepository = Depends(get_template_repository),
    settings: Settings = Depends(get_settings),
) -> DailyGridResolver:
    return DailyGridResolver(
        dataset, cache, templates,
        scan_limit=settings.cell_scan_limit,
        max_attempts=settings.max_generation_attempts,
        seed_step=settings.generation_seed_step,
        timeout_seconds=settings.generation_timeout_seconds or None,
        cache_ttl=timedelta(hours=settings.cache_ttl_hours),
    )


def get_template_service(
    templates: SqlTemplateRepository = Depends(get_template_repository),
    dataset: PlayerDataset = Depends(get_player_dataset),
    settings: Settings = Depends(get_settings),
) -> TemplateService:
    return TemplateService(templates, dataset, settings.cell_scan_limit)


def admin_identity(key: str) -> str:
    return f"admin:{hashlib.sha256(key.encode()).hexdigest()[:12]}"


async def require_admin(
    x_admin_key: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> str | None:
    """Return the caller identity or raise AdminAccessError.

    The identity is a digest prefix of the matched key, so stored `created_by`
    values never reveal key material.
    """
    if not settings.admin_api_keys:
        return None
    if x_admin_key and any(
        secrets.compare_digest(x_admin_key, key) for key in settings.admin_api_keys
    ):
        return admin_identity(x_admin_key)
    logger.warning("Rejected admin request with missing or unknown key")
    raise AdminAccessError()
