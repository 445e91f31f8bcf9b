"""Grid Validator — tests for concurrent per-cell counting and fail-open behaviour.

Tests cover:
    - All-safe dataset: 9 safe cells, status excellent, one fetch per cell
    - A single impossible pairing: exactly that cell impossible, status error
    - Fetch failure: every cell UNKNOWN, grid still playable (fail-open)
    - Scan window bounds the count (players beyond it are not seen)
    - Sample players capped
"""

from dailygrid.core.domain_types import CellTier, GridStatus
from dailygrid.core.grid import Grid
from dailygrid.core.validation_summary import SAMPLE_PLAYER_LIMIT
from dailygrid.services.grid_validator import validate_cell, validate_grid
from tests.fake_dataset import FakePlayerDataset, roster
from tests.services.grids import (
    ONE_IMPOSSIBLE_COLS, ONE_IMPOSSIBLE_ROWS, SAFE_COLS, SAFE_ROWS,
)

YEAR = 2026


async def test_all_safe_grid_is_excellent():
    dataset = FakePlayerDataset(roster())
    summary = await validate_grid(
        dataset, Grid.from_lists(SAFE_ROWS, SAFE_COLS), current_year=YEAR,
    )
    assert summary.safe == 9
    assert summary.impossible == 0
    assert summary.status == GridStatus.EXCELLENT
    assert summary.min_solutions == 5
    assert dataset.calls == 9


async def test_single_impossible_pairing_is_error():
    dataset = FakePlayerDataset(roster())
    summary = await validate_grid(
        dataset, Grid.from_lists(ONE_IMPOSSIBLE_ROWS, ONE_IMPOSSIBLE_COLS),
        current_year=YEAR,
    )
    assert summary.impossible == 1
    assert [(c.row, c.col) for c in summary.impossible_cells] == [(2, 0)]
    assert summary.status == GridStatus.ERROR
    assert not summary.is_playable


async def test_fetch_failure_fails_open():
    dataset = FakePlayerDataset(roster(), fail_fetch=True)
    summary = await validate_grid(
        dataset, Grid.from_lists(SAFE_ROWS, SAFE_COLS), current_year=YEAR,
    )
    assert summary.unknown == 9
    assert summary.impossible == 0
    assert summary.is_playable
    assert all(c.satisfying_count is None for c in summary.cells)


async def test_scan_window_bounds_the_count():
    dataset = FakePlayerDataset(roster())
    # Left-handed players have ids 6-9, outside a 5-player window
    cell = await validate_cell(
        dataset, ONE_IMPOSSIBLE_ROWS[2], ONE_IMPOSSIBLE_COLS[1], 2, 1,
        scan_limit=5, current_year=YEAR,
    )
    assert cell.satisfying_count == 0
    assert cell.tier == CellTier.IMPOSSIBLE

    wide = await validate_cell(
        dataset, ONE_IMPOSSIBLE_ROWS[2], ONE_IMPOSSIBLE_COLS[1], 2, 1,
        scan_limit=500, current_year=YEAR,
    )
    assert wide.satisfying_count == 4
    assert wide.tier == CellTier.SAFE


async def test_sample_players_capped():
    dataset = FakePlayerDataset(roster())
    cell = await validate_cell(
        dataset, SAFE_ROWS[0], SAFE_COLS[1], 0, 1, current_year=YEAR,
    )
    assert cell.satisfying_count == 9
    assert len(cell.sample_players) == SAMPLE_PLAYER_LIMIT
    assert cell.sample_players[0] == "Player 1"
