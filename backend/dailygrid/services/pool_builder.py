"""Pool Builder — fetches raw dataset facts and projects them into the attribute pool.

Invariants:
    - The three dataset queries run concurrently
    - Any dataset failure propagates as DatasetUnavailableError (an empty pool
      cannot produce a grid, so there is nothing to fail open to)
    - Projection itself is delegated to core.attribute_pool (pure)
"""

import asyncio
import logging

from dailygrid.core.attribute import Attribute
from dailygrid.core.attribute_pool import (
    ACHIEVEMENT_CAP, POOL_EVENT_TIERS, build_attribute_pool, pool_breakdown,
)
from dailygrid.core.errors import DailyGridError, DatasetUnavailableError
from dailygrid.core.repository_protocols import PlayerDataset

logger = logging.getLogger(__name__)


async def load_attribute_pool(dataset: PlayerDataset) -> list[Attribute]:
    """Query the dataset and build the full candidate pool."""
    try:
        country_counts, catalog, achievements = await asyncio.gather(
            dataset.count_players_by_country(),
            dataset.list_event_catalog(POOL_EVENT_TIERS),
            dataset.list_achievement_types(ACHIEVEMENT_CAP),
        )
    except DailyGridError:
        raise
    except Exception as e:
        logger.error(f"Attribute pool query failed: {e}", exc_info=True)
        raise DatasetUnavailableError(str(e), "pool_query") from e

    pool = build_attribute_pool(country_counts, catalog, achievements)
    logger.info(
        f"Attribute pool built: {len(pool)} attributes {pool_breakdown(pool)}",
    )
    return pool
