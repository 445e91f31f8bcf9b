"""Cell Checks — list a cell's solutions, and judge a single player guess.

Invariants:
    - Unlike the grid validator these fail CLOSED: a dataset error propagates as
      DatasetUnavailableError, since a caller asking "who fits?" needs a real answer
    - Guess lookup is case-insensitive on the full player name
    - An unknown player is a normal negative result, not an error
"""

import logging
from datetime import datetime, timezone

from dailygrid.core.attribute import Attribute
from dailygrid.core.errors import DailyGridError, DatasetUnavailableError
from dailygrid.core.predicates import matches_attribute
from dailygrid.core.repository_protocols import PlayerDataset

logger = logging.getLogger(__name__)

DEFAULT_SOLUTION_SCAN_LIMIT: int = 1000


async def find_cell_solutions(
    dataset: PlayerDataset,
    row_attr: Attribute,
    col_attr: Attribute,
    scan_limit: int = DEFAULT_SOLUTION_SCAN_LIMIT,
) -> dict:
    """Every player in the scan window satisfying both attributes."""
    year = datetime.now(timezone.utc).year
    try:
        players = await dataset.fetch_player_batch(scan_limit)
    except DailyGridError:
        raise
    except Exception as e:
        raise DatasetUnavailableError(str(e), "fetch_player_batch") from e

    solutions = [
        {"name": p.name, "nationality": p.nationality}
        for p in players
        if matches_attribute(p, row_attr, year) and matches_attribute(p, col_attr, year)
    ]
    logger.info(
        f"{len(solutions)} solution(s) for {row_attr.label} x {col_attr.label} "
        f"among {len(players)} players",
    )
    return {
        "solutions": solutions,
        "count": len(solutions),
        "scanned": len(players),
        "row_attribute": row_attr.label,
        "col_attribute": col_attr.label,
    }


async def check_guess(
    dataset: PlayerDataset,
    player_name: str,
    row_attr: Attribute,
    col_attr: Attribute,
) -> dict:
    """Does the named player satisfy both attributes of a cell?"""
    try:
        player = await dataset.find_player_by_name(player_name.strip())
    except DailyGridError:
        raise
    except Exception as e:
        raise DatasetUnavailableError(str(e), "find_player_by_name") from e

    if player is None:
        return {
            "valid": False,
            "player": None,
            "error": f'Player "{player_name}" not found',
        }

    year = datetime.now(timezone.utc).year
    row_match = matches_attribute(player, row_attr, year)
    col_match = matches_attribute(player, col_attr, year)
    valid = row_match and col_match
    return {
        "valid": valid,
        "player": {
            "id": player.id,
            "name": player.name,
            "nationality": player.nationality,
        },
        "row_match": row_match,
        "col_match": col_match,
        "error": None if valid else f"{player.name} doesn't match the criteria",
    }
