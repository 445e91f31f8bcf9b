"""Attribute Pool — pure projection of raw dataset facts into Attribute descriptors.

Invariants:
    - Pure: no IO, no randomness; same inputs always give the same ordered pool
    - Countries need MIN_COUNTRY_POPULATION players (below that "safe" means nothing)
    - Tournaments whose name mentions the excluded circuit are dropped before creation
    - Fixed kinds (era, style, ranking) are enumerated here, not read from data
    - Pool order is deterministic: the selector's seed → grid mapping depends on it

Design Decisions:
    - Inputs are plain mappings/lists so the shell owns every query
      (ADR: impureim sandwich, shell fetches and core projects)
    - ATP 500 and achievement tails capped to bound pool size
"""

from dataclasses import dataclass

from dailygrid.core.attribute import Attribute
from dailygrid.core.domain_types import AttributeKind


MIN_COUNTRY_POPULATION: int = 3
ATP_500_CAP: int = 10
ACHIEVEMENT_CAP: int = 20
EXCLUDED_CIRCUIT_MARKER: str = "WTA"

GRAND_SLAM = "grand_slam"
MASTERS_1000 = "atp_masters_1000"
ATP_500 = "atp_500"
POOL_EVENT_TIERS: tuple[str, ...] = (GRAND_SLAM, MASTERS_1000, ATP_500)

ERAS: tuple[tuple[str, str, str], ...] = (
    ("2020s", "2020s", "Active in 2020s"),
    ("2010s", "2010s", "Active in 2010s"),
    ("2000s", "2000s", "Active in 2000s"),
    ("1990s", "1990s", "Active in 1990s"),
)

STYLES: tuple[tuple[str, str, str], ...] = (
    ("left", "Left-Handed", "Plays left-handed"),
    ("right", "Right-Handed", "Plays right-handed"),
)

RANKINGS: tuple[tuple[str, str, str], ...] = (
    ("world_no1", "World #1", "Former World #1"),
    ("top10", "Top 10", "Reached Top 10"),
)

COUNTRY_NAMES: dict[str, str] = {
    "USA": "USA", "ESP": "Spain", "SRB": "Serbia", "SUI": "Switzerland",
    "GBR": "Great Britain", "FRA": "France", "GER": "Germany", "AUS": "Australia",
    "ITA": "Italy", "ARG": "Argentina", "RUS": "Russia", "CAN": "Canada",
    "CRO": "Croatia", "AUT": "Austria", "BEL": "Belgium", "NED": "Netherlands",
}


@dataclass(frozen=True)
class CatalogEvent:
    """One tournament from the dataset catalog."""
    short_name: str
    name: str | None
    tier: str


def country_name(code: str) -> str:
    return COUNTRY_NAMES.get(code, code)


def format_achievement_label(achievement: str) -> str:
    """'career_grand_slam' → 'Career Grand Slam'."""
    return " ".join(w[:1].upper() + w[1:] for w in achievement.split("_"))


def is_excluded_event(event: CatalogEvent) -> bool:
    return (
        EXCLUDED_CIRCUIT_MARKER in event.short_name
        or EXCLUDED_CIRCUIT_MARKER in (event.name or "")
    )


def build_attribute_pool(
    country_counts: dict[str, int],
    event_catalog: list[CatalogEvent],
    achievement_types: list[str],
) -> list[Attribute]:
    """Assemble the full candidate pool. Pure, deterministic ordering."""
    pool: list[Attribute] = []
    pool.extend(_country_attributes(country_counts))
    pool.extend(_tournament_attributes(event_catalog))
    pool.extend(_fixed(AttributeKind.ERA, ERAS))
    pool.extend(_fixed(AttributeKind.STYLE, STYLES))
    pool.extend(_fixed(AttributeKind.RANKING, RANKINGS))
    pool.extend(_achievement_attributes(achievement_types))
    return _dedupe(pool)


def pool_breakdown(pool: list[Attribute]) -> dict[str, int]:
    """Count attributes per kind (debug output for suggestions/generation)."""
    counts = {kind.value: 0 for kind in AttributeKind}
    for attr in pool:
        counts[attr.kind.value] += 1
    return counts


def _country_attributes(country_counts: dict[str, int]) -> list[Attribute]:
    viable = sorted(
        code for code, count in country_counts.items()
        if code and count >= MIN_COUNTRY_POPULATION
    )
    return [
        Attribute(
            AttributeKind.COUNTRY, code, country_name(code),
            f"From {country_name(code)}",
        )
        for code in viable
    ]


def _tournament_attributes(event_catalog: list[CatalogEvent]) -> list[Attribute]:
    eligible = [e for e in event_catalog if not is_excluded_event(e)]
    by_tier = {
        tier: [e for e in eligible if e.tier == tier] for tier in POOL_EVENT_TIERS
    }
    chosen = (
        by_tier[GRAND_SLAM] + by_tier[MASTERS_1000] + by_tier[ATP_500][:ATP_500_CAP]
    )
    return [
        Attribute(
            AttributeKind.TOURNAMENT, e.short_name, e.short_name,
            f"Won {e.short_name}",
        )
        for e in chosen
    ]


def _fixed(
    kind: AttributeKind, entries: tuple[tuple[str, str, str], ...],
) -> list[Attribute]:
    return [Attribute(kind, value, label, desc) for value, label, desc in entries]


def _achievement_attributes(achievement_types: list[str]) -> list[Attribute]:
    distinct: list[str] = []
    for a in achievement_types:
        if a and a not in distinct:
            distinct.append(a)
    return [
        Attribute(
            AttributeKind.ACHIEVEMENT, a, format_achievement_label(a),
            format_achievement_label(a),
        )
        for a in distinct[:ACHIEVEMENT_CAP]
    ]


def _dedupe(pool: list[Attribute]) -> list[Attribute]:
    """Drop repeated ids (same tournament listed twice), keeping first occurrence."""
    seen: set[str] = set()
    unique: list[Attribute] = []
    for attr in pool:
        if attr.id not in seen:
            seen.add(attr.id)
            unique.append(attr)
    return unique
