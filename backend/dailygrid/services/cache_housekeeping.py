"""Cache Housekeeping — sweep expired grids and report per-source cache stats.

Invariants:
    - Sweep deletes only entries with expires_at <= now; fresh entries are untouched
    - Expired entries are already treated as misses by resolution, so sweeping is
      storage hygiene, never a correctness requirement
"""

import logging
from datetime import datetime

from dailygrid.core.repository_protocols import CacheRepository

logger = logging.getLogger(__name__)


async def sweep_expired(cache: CacheRepository, now: datetime) -> dict:
    deleted = await cache.delete_expired(now)
    logger.info(f"Cache sweep removed {deleted} expired grid(s)")
    return {"deleted": deleted, "swept_at": now.isoformat()}


async def cache_stats(cache: CacheRepository, now: datetime) -> dict:
    by_source = await cache.stats(now)
    return {
        "sources": by_source,
        "total_cached": sum(s["total_cached"] for s in by_source),
        "active": sum(s["active"] for s in by_source),
        "expired": sum(s["expired"] for s in by_source),
        "as_of": now.isoformat(),
    }
