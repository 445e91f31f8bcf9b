"""Attribute Predicates — does a player satisfy an attribute? Pure functions of player fields.

Invariants:
    - matches_attribute is pure: same (player, attribute, current_year) → same answer
    - country: nationality equality
    - tournament: some result for that event with outcome "winner"
    - era: active period [turned_pro or 1990, retired or current_year] overlaps the band
    - style: plays_hand equality
    - ranking: any observed ranking <= threshold; world_no1 also accepts the
      "Year-End #1" milestone result
    - achievement: some result tagged with that achievement type
    - Unknown values evaluate to False (never raise for a well-formed attribute)

Design Decisions:
    - Dispatch table over if/elif chain: every kind → predicate mapping visible in one place
    - Era JSON form ({"active_years": {...}}) accepted for curated custom bands
"""

import json
from typing import Callable

from dailygrid.core.attribute import Attribute
from dailygrid.core.domain_types import AttributeKind
from dailygrid.core.player import Player

WINNER_OUTCOME = "winner"
YEAR_END_NO1_EVENT = "Year-End #1"
DEFAULT_CAREER_START = 1990

ERA_BANDS: dict[str, tuple[int, int | None]] = {
    "2020s": (2020, None),
    "2010s": (2010, 2019),
    "2000s": (2000, 2009),
    "1990s": (1990, 1999),
}

RANKING_THRESHOLDS: dict[str, int] = {
    "world_no1": 1,
    "top10": 10,
}


def matches_attribute(player: Player, attribute: Attribute, current_year: int) -> bool:
    """Evaluate one attribute against one player."""
    predicate = _PREDICATES.get(attribute.kind)
    if predicate is None:
        return False
    return predicate(player, attribute.value, current_year)


def matches_cell(
    player: Player, row: Attribute, col: Attribute, current_year: int,
) -> bool:
    return (
        matches_attribute(player, row, current_year)
        and matches_attribute(player, col, current_year)
    )


def _country(player: Player, value: str, current_year: int) -> bool:
    return player.nationality == value


def _tournament(player: Player, value: str, current_year: int) -> bool:
    return any(
        r.event_name == value and r.outcome == WINNER_OUTCOME
        for r in player.results
    )


def _era(player: Player, value: str, current_year: int) -> bool:
    band = parse_era_band(value)
    if band is None:
        return False
    start, end = band
    career_start = player.turned_pro or DEFAULT_CAREER_START
    career_end = player.retired or current_year
    if end is None:
        return career_end >= start
    return career_start <= end and career_end >= start


def _style(player: Player, value: str, current_year: int) -> bool:
    return player.plays_hand == value


def _ranking(player: Player, value: str, current_year: int) -> bool:
    threshold = RANKING_THRESHOLDS.get(value)
    if threshold is None:
        return False
    if any(rank <= threshold for rank in player.rankings):
        return True
    if threshold == 1:
        return any(r.event_name == YEAR_END_NO1_EVENT for r in player.results)
    return False


def _achievement(player: Player, value: str, current_year: int) -> bool:
    return any(r.achievement_type == value for r in player.results)


def parse_era_band(value: str) -> tuple[int, int | None] | None:
    """Resolve an era value to (start, end); end None = open-ended. None if unknown."""
    if value.startswith("{"):
        try:
            years = json.loads(value)["active_years"]
            return int(years["start"]), int(years["end"])
        except (ValueError, KeyError, TypeError):
            return None
    return ERA_BANDS.get(value)


_PREDICATES: dict[AttributeKind, Callable[[Player, str, int], bool]] = {
    AttributeKind.COUNTRY: _country,
    AttributeKind.TOURNAMENT: _tournament,
    AttributeKind.ERA: _era,
    AttributeKind.STYLE: _style,
    AttributeKind.RANKING: _ranking,
    AttributeKind.ACHIEVEMENT: _achievement,
}
