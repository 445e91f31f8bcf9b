"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
    - PlayerDataset is read-only; fetch_player_batch returns a stable id order
    - TemplateRepository.set_published flips the flag AND drops the cached grid
      for the template's date in one transaction

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO, while the pure core functions that
      consume their results (pool projection, selection, predicates) stay sync
"""

from datetime import date, datetime
from typing import Protocol
from uuid import UUID

from dailygrid.core.attribute_pool import CatalogEvent
from dailygrid.core.player import Player
from dailygrid.core.records import CacheEntry, TemplateRecord


class PlayerDataset(Protocol):
    """Contract for the external player dataset, implemented by the shell."""
    async def count_players_by_country(self) -> dict[str, int]: ...
    async def list_event_catalog(self, tiers: tuple[str, ...]) -> list[CatalogEvent]: ...
    async def list_achievement_types(self, cap: int) -> list[str]: ...
    async def fetch_player_batch(self, limit: int) -> list[Player]: ...
    async def find_player_by_name(self, name: str) -> Player | None: ...


class CacheRepository(Protocol):
    """Contract for cached daily grids: at most one row per date."""
    async def get(self, grid_date: date) -> CacheEntry | None: ...
    async def upsert(self, entry: CacheEntry) -> None: ...
    async def delete_expired(self, now: datetime) -> int: ...
    async def stats(self, now: datetime) -> list[dict]: ...


class TemplateRepository(Protocol):
    """Contract for curated templates: at most one published per date."""
    async def create(self, fields: dict) -> TemplateRecord: ...
    async def get(self, template_id: UUID) -> TemplateRecord | None: ...
    async def list_page(
        self, published: bool | None, limit: int, offset: int,
    ) -> tuple[list[TemplateRecord], int]: ...
    async def update(self, template_id: UUID, fields: dict) -> TemplateRecord: ...
    async def delete(self, template_id: UUID) -> None: ...
    async def find_published_for_date(
        self, scheduled_date: date, exclude_id: UUID | None = None,
    ) -> TemplateRecord | None: ...
    async def set_published(
        self, template_id: UUID, published: bool,
    ) -> TemplateRecord: ...
