"""SqlPlayerDataset — PlayerDataset queries against the relational player tables.

Tests cover:
    - Country counts skip NULL nationality
    - Event catalog filters by tier, in id order
    - Achievement types are distinct, sorted and capped
    - Player batch is id-ordered and limited, with results and rankings attached
    - Name lookup is case-insensitive and exact
"""

import pytest

from dailygrid.infrastructure.sql_dataset import SqlPlayerDataset
from dailygrid.models.player import Player
from dailygrid.models.player_achievement import PlayerAchievement
from dailygrid.models.player_ranking import PlayerRanking
from dailygrid.models.tournament import Tournament


@pytest.fixture
async def seeded(test_db, test_session_factory):
    test_db.add_all([
        Tournament(id=1, short_name="Wimbledon", name="Wimbledon Championships",
                   level="grand_slam"),
        Tournament(id=2, short_name="Madrid", name="Mutua Madrid Open",
                   level="atp_masters_1000"),
        Tournament(id=3, short_name="Year-End #1", name=None, level="achievement"),
        Player(id=1, name="Rafael Nadal", nationality="ESP", turned_pro=2001,
               retired=2024, plays_hand="left"),
        Player(id=2, name="Carlos Alcaraz", nationality="ESP", turned_pro=2018,
               plays_hand="right"),
        Player(id=3, name="Unknown Qualifier", nationality=None),
    ])
    await test_db.flush()
    test_db.add_all([
        PlayerAchievement(player_id=1, tournament_id=1, year=2008, result="winner"),
        PlayerAchievement(player_id=1, achievement_type="career_grand_slam"),
        PlayerAchievement(player_id=2, tournament_id=2, year=2022, result="winner"),
        PlayerAchievement(player_id=2, achievement_type="olympic_medal"),
        PlayerAchievement(player_id=1, achievement_type="olympic_medal"),
        PlayerRanking(player_id=1, singles_ranking=1),
        PlayerRanking(player_id=1, singles_ranking=None),
        PlayerRanking(player_id=2, singles_ranking=3),
    ])
    await test_db.commit()
    return SqlPlayerDataset(test_session_factory)


async def test_count_players_by_country(seeded):
    assert await seeded.count_players_by_country() == {"ESP": 2}


async def test_list_event_catalog_filters_tiers(seeded):
    events = await seeded.list_event_catalog(("grand_slam", "atp_masters_1000"))
    assert [e.short_name for e in events] == ["Wimbledon", "Madrid"]
    assert events[1].tier == "atp_masters_1000"


async def test_list_achievement_types_distinct_and_capped(seeded):
    assert await seeded.list_achievement_types(10) == [
        "career_grand_slam", "olympic_medal",
    ]
    assert await seeded.list_achievement_types(1) == ["career_grand_slam"]


async def test_fetch_player_batch(seeded):
    players = await seeded.fetch_player_batch(2)

    assert [p.id for p in players] == ["1", "2"]
    nadal = players[0]
    assert nadal.plays_hand == "left"
    assert nadal.rankings == (1,)
    events = {(r.event_name, r.outcome) for r in nadal.results}
    assert ("Wimbledon", "winner") in events
    assert {r.achievement_type for r in nadal.results} >= {
        "career_grand_slam", "olympic_medal",
    }


async def test_find_player_by_name_case_insensitive(seeded):
    player = await seeded.find_player_by_name("carlos ALCARAZ")
    assert player is not None
    assert player.id == "2"
    assert player.rankings == (3,)


async def test_find_player_by_name_is_exact(seeded):
    assert await seeded.find_player_by_name("Carlos") is None
