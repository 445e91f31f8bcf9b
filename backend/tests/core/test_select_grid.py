"""Grid Selector — tests for deterministic, constraint-respecting selection.

Tests cover:
    - Same (pool, seed) gives the same selection; different seeds usually differ
    - Six distinct ids and at most one country per axis, across many seeds
    - First two slots of each axis come from the safe partition when it is large enough
    - Empty safe partition widens to the full pool
    - Two-country pool (A..F) never stacks both countries on one axis and never raises
    - Pool too small leaves the selection incomplete instead of raising
    - pseudo_random_index stays in range and rejects empty ranges
"""

import pytest

from dailygrid.core.attribute import Attribute
from dailygrid.core.attribute_pool import (
    CatalogEvent, build_attribute_pool,
)
from dailygrid.core.domain_types import AttributeKind
from dailygrid.core.select_grid import (
    SAFE_SLOTS_PER_AXIS,
    is_safe_attribute,
    partition_pool,
    pseudo_random_index,
    select_grid,
)


def _pool() -> list[Attribute]:
    return build_attribute_pool(
        {"USA": 40, "ESP": 30, "SRB": 10, "NOR": 5, "CHI": 4, "BOL": 1},
        [
            CatalogEvent("Wimbledon", "Wimbledon", "grand_slam"),
            CatalogEvent("US Open", "US Open", "grand_slam"),
            CatalogEvent("French Open", "Roland Garros", "grand_slam"),
            CatalogEvent("Australian Open", "Australian Open", "grand_slam"),
            CatalogEvent("Indian Wells", "BNP Paribas Open", "atp_masters_1000"),
            CatalogEvent("Miami", "Miami Open", "atp_masters_1000"),
            CatalogEvent("Basel", "Swiss Indoors", "atp_500"),
        ],
        ["career_grand_slam", "olympic_gold"],
    )


def _attr(kind: AttributeKind, value: str) -> Attribute:
    return Attribute(kind, value, value, value)


# ─── Determinism ─────────────────────────────────────────────────

def test_same_seed_same_selection():
    pool = _pool()
    assert select_grid(pool, 20261016) == select_grid(pool, 20261016)


def test_different_seeds_produce_some_variety():
    pool = _pool()
    selections = {
        tuple(a.id for a in select_grid(pool, seed).rows)
        for seed in range(20260101, 20260131)
    }
    assert len(selections) > 1


# ─── Structural constraints ─────────────────────────────────────

@pytest.mark.parametrize("seed", range(1000, 1200, 7))
def test_six_distinct_ids_and_axis_country_exclusivity(seed):
    selection = select_grid(_pool(), seed)
    assert selection.is_complete
    ids = [a.id for a in selection.rows + selection.columns]
    assert len(set(ids)) == 6
    assert sum(a.is_country for a in selection.rows) <= 1
    assert sum(a.is_country for a in selection.columns) <= 1


@pytest.mark.parametrize("seed", [1, 42, 7919, 20261016])
def test_first_slots_of_each_axis_are_safe(seed):
    selection = select_grid(_pool(), seed)
    for axis in (selection.rows, selection.columns):
        assert all(is_safe_attribute(a) for a in axis[:SAFE_SLOTS_PER_AXIS])


def test_empty_safe_partition_widens_to_full_pool():
    pool = [
        _attr(AttributeKind.STYLE, "left"),
        _attr(AttributeKind.STYLE, "right"),
        _attr(AttributeKind.ACHIEVEMENT, "a1"),
        _attr(AttributeKind.ACHIEVEMENT, "a2"),
        _attr(AttributeKind.ACHIEVEMENT, "a3"),
        _attr(AttributeKind.ACHIEVEMENT, "a4"),
    ]
    safe, risky = partition_pool(pool)
    assert safe == []
    selection = select_grid(pool, 99)
    assert selection.is_complete
    assert {a.id for a in selection.rows + selection.columns} == {a.id for a in pool}


# ─── Small pools ─────────────────────────────────────────────────

def _two_country_pool() -> list[Attribute]:
    return [
        Attribute(AttributeKind.COUNTRY, "X", "X", "From X"),
        Attribute(AttributeKind.COUNTRY, "Y", "Y", "From Y"),
        Attribute(AttributeKind.TOURNAMENT, "Z", "Z", "Won Z"),
        Attribute(AttributeKind.ERA, "1990s", "1990s", "Active in 1990s"),
        Attribute(AttributeKind.RANKING, "top10", "Top 10", "Reached Top 10"),
        Attribute(AttributeKind.ACHIEVEMENT, "T1", "T1", "T1"),
    ]


def test_two_country_pool_never_puts_both_countries_on_one_axis():
    selection = select_grid(_two_country_pool(), 42)
    for axis in (selection.rows, selection.columns):
        assert sum(a.is_country for a in axis) <= 1
    ids = [a.id for a in selection.rows + selection.columns]
    assert len(ids) == len(set(ids))


@pytest.mark.parametrize("seed", range(0, 60))
def test_two_country_pool_holds_exclusivity_for_any_seed(seed):
    selection = select_grid(_two_country_pool(), seed)
    for axis in (selection.rows, selection.columns):
        assert sum(a.is_country for a in axis) <= 1


def test_pool_too_small_leaves_selection_incomplete():
    pool = _two_country_pool()[:4]
    selection = select_grid(pool, 42)
    assert not selection.is_complete
    assert len(selection.rows) + len(selection.columns) == 4


def test_empty_pool_yields_empty_selection():
    selection = select_grid([], 1)
    assert selection.rows == ()
    assert selection.columns == ()


# ─── pseudo_random_index ─────────────────────────────────────────

@pytest.mark.parametrize("size", [1, 2, 3, 17, 100])
def test_pseudo_random_index_in_range(size):
    for offset in range(0, 600, 37):
        assert 0 <= pseudo_random_index(20261016, offset, size) < size


def test_pseudo_random_index_is_deterministic():
    assert pseudo_random_index(5, 101, 13) == pseudo_random_index(5, 101, 13)


def test_pseudo_random_index_rejects_empty_range():
    with pytest.raises(ValueError):
        pseudo_random_index(1, 0, 0)


# ─── Safe partition ──────────────────────────────────────────────

def test_safe_partition_membership():
    assert is_safe_attribute(_attr(AttributeKind.COUNTRY, "SRB"))
    assert not is_safe_attribute(_attr(AttributeKind.COUNTRY, "NOR"))
    assert is_safe_attribute(
        Attribute(AttributeKind.TOURNAMENT, "Wimbledon", "Wimbledon", "Won Wimbledon"),
    )
    assert not is_safe_attribute(
        Attribute(AttributeKind.TOURNAMENT, "Miami", "Miami", "Won Miami"),
    )
    assert is_safe_attribute(_attr(AttributeKind.ERA, "2000s"))
    assert is_safe_attribute(_attr(AttributeKind.RANKING, "top10"))
    assert not is_safe_attribute(_attr(AttributeKind.STYLE, "left"))
    assert not is_safe_attribute(_attr(AttributeKind.ACHIEVEMENT, "olympic_gold"))
