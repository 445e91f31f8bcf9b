"""SQL Player Dataset — PlayerDataset over the players/tournaments/achievements tables.

Invariants:
    - Read-only: never adds, flushes or commits
    - One short-lived session per call: callers (grid validator, pool builder) run
      several queries concurrently and an AsyncSession cannot be shared that way
    - fetch_player_batch returns players in ascending id order, so a bounded scan
      sees the same window on every call
    - ORM rows are converted to core Player snapshots before leaving this module
"""

from contextlib import AbstractAsyncContextManager
from typing import Callable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dailygrid.core.attribute_pool import CatalogEvent
from dailygrid.core.player import EventResult, Player
from dailygrid.models.player import Player as PlayerModel
from dailygrid.models.player_achievement import PlayerAchievement
from dailygrid.models.tournament import Tournament

SessionProvider = Callable[[], AbstractAsyncContextManager[AsyncSession]]


def to_player(row: PlayerModel) -> Player:
    """ORM row (achievements + rankings loaded) → core snapshot."""
    return Player(
        id=str(row.id),
        name=row.name,
        nationality=row.nationality,
        turned_pro=row.turned_pro,
        retired=row.retired,
        plays_hand=row.plays_hand,
        results=tuple(
            EventResult(
                event_name=a.tournament.short_name if a.tournament else None,
                outcome=a.result,
                achievement_type=a.achievement_type,
            )
            for a in row.achievements
        ),
        rankings=tuple(
            r.singles_ranking for r in row.rankings
            if r.singles_ranking is not None
        ),
    )


class SqlPlayerDataset:
    """PlayerDataset backed by the relational player tables."""

    def __init__(self, session_provider: SessionProvider):
        self._session = session_provider

    async def count_players_by_country(self) -> dict[str, int]:
        async with self._session() as db:
            result = await db.execute(
                select(PlayerModel.nationality, func.count(PlayerModel.id))
                .where(PlayerModel.nationality.is_not(None))
                .group_by(PlayerModel.nationality),
            )
            return {nationality: count for nationality, count in result.all()}

    async def list_event_catalog(self, tiers: tuple[str, ...]) -> list[CatalogEvent]:
        async with self._session() as db:
            result = await db.execute(
                select(Tournament)
                .where(Tournament.level.in_(tiers))
                .order_by(Tournament.id),
            )
            return [
                CatalogEvent(short_name=t.short_name, name=t.name, tier=t.level)
                for t in result.scalars().all()
            ]

    async def list_achievement_types(self, cap: int) -> list[str]:
        async with self._session() as db:
            result = await db.execute(
                select(PlayerAchievement.achievement_type)
                .where(PlayerAchievement.achievement_type.is_not(None))
                .distinct()
                .order_by(PlayerAchievement.achievement_type)
                .limit(cap),
            )
            return list(result.scalars().all())

    async def fetch_player_batch(self, limit: int) -> list[Player]:
        async with self._session() as db:
            result = await db.execute(
                select(PlayerModel).order_by(PlayerModel.id).limit(limit),
            )
            return [to_player(row) for row in result.scalars().all()]

    async def find_player_by_name(self, name: str) -> Player | None:
        """Case-insensitive exact match; lowest id wins on duplicates."""
        async with self._session() as db:
            result = await db.execute(
                select(PlayerModel)
                .where(func.lower(PlayerModel.name) == name.lower())
                .order_by(PlayerModel.id)
                .limit(1),
            )
            row = result.scalar_one_or_none()
            return to_player(row) if row is not None else None
