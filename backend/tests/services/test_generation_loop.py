"""Generation Loop — tests for retry, re-seeding, degradation and time budget.

Tests cover:
    - First playable grid wins; seed for attempt n is base + (n-1) * step
    - A pool that never validates runs exactly max_attempts and returns degraded
    - skip_validation accepts attempt 1 without calling the validator
    - Time budget exhaustion returns the grid in hand as degraded
    - A pool that can never form a grid raises MalformedGridError
"""

import asyncio

import pytest

from dailygrid.core.attribute_pool import CatalogEvent, build_attribute_pool
from dailygrid.core.domain_types import CellTier
from dailygrid.core.errors import MalformedGridError
from dailygrid.core.validation_summary import CellResult, summarize_cells
from dailygrid.services.generation_loop import (
    MAX_ATTEMPTS, SEED_STEP, attempt_seed, run_generation,
)
from tests.services.grids import SAFE_ROWS

BASE_SEED = 20261016


def _pool():
    return build_attribute_pool(
        {"USA": 10, "ESP": 8, "FRA": 6},
        [
            CatalogEvent("Wimbledon", "Wimbledon", "grand_slam"),
            CatalogEvent("US Open", "US Open", "grand_slam"),
        ],
        ["olympic_gold"],
    )


def _summary(impossible_at: set[tuple[int, int]]):
    cells = [
        CellResult(r, c, 0, CellTier.IMPOSSIBLE) if (r, c) in impossible_at
        else CellResult(r, c, 5, CellTier.SAFE)
        for r in range(3) for c in range(3)
    ]
    return summarize_cells(cells, elapsed_ms=1)


class _ScriptedValidator:
    """Returns playable once `fail_times` attempts have been rejected."""

    def __init__(self, fail_times: int):
        self.fail_times = fail_times
        self.grids = []

    async def __call__(self, grid):
        self.grids.append(grid)
        if len(self.grids) <= self.fail_times:
            return _summary({(0, 1)})
        return _summary(set())


def test_attempt_seed_progression():
    assert attempt_seed(BASE_SEED, 1) == BASE_SEED
    assert attempt_seed(BASE_SEED, 2) == BASE_SEED + SEED_STEP
    assert attempt_seed(BASE_SEED, 20) == BASE_SEED + 19 * SEED_STEP


async def test_first_playable_grid_wins():
    validator = _ScriptedValidator(fail_times=2)
    outcome = await run_generation(_pool(), BASE_SEED, validator)
    assert outcome.attempt_count == 3
    assert outcome.seed == BASE_SEED + 2 * SEED_STEP
    assert not outcome.degraded
    assert outcome.summary.is_playable
    assert len(validator.grids) == 3


async def test_never_valid_pool_runs_exactly_max_attempts():
    validator = _ScriptedValidator(fail_times=10_000)
    outcome = await run_generation(_pool(), BASE_SEED, validator)
    assert len(validator.grids) == MAX_ATTEMPTS
    assert outcome.attempt_count == MAX_ATTEMPTS
    assert outcome.degraded
    assert outcome.seed == BASE_SEED + (MAX_ATTEMPTS - 1) * SEED_STEP
    assert f"{MAX_ATTEMPTS} attempts" in outcome.warning
    assert len(outcome.impossible_cells) == 1
    cell = outcome.impossible_cells[0]
    assert (cell["row"], cell["col"]) == (0, 1)
    assert cell["row_label"] == outcome.grid.rows[0].label
    assert cell["col_label"] == outcome.grid.columns[1].label


async def test_same_base_seed_reproduces_the_same_grid():
    first = await run_generation(_pool(), BASE_SEED, _ScriptedValidator(0))
    second = await run_generation(_pool(), BASE_SEED, _ScriptedValidator(0))
    assert first.grid == second.grid


async def test_skip_validation_accepts_first_grid():
    validator = _ScriptedValidator(fail_times=10_000)
    outcome = await run_generation(
        _pool(), BASE_SEED, validator, skip_validation=True,
    )
    assert outcome.attempt_count == 1
    assert outcome.summary is None
    assert validator.grids == []


async def test_time_budget_returns_degraded_grid():
    async def slow_validator(grid):
        await asyncio.sleep(0.5)
        return _summary(set())

    outcome = await run_generation(
        _pool(), BASE_SEED, slow_validator, timeout_seconds=0.05,
    )
    assert outcome.degraded
    assert outcome.timed_out
    assert outcome.attempt_count == 1
    assert "time budget" in outcome.warning


async def test_pool_that_cannot_form_a_grid_raises():
    with pytest.raises(MalformedGridError):
        await run_generation(list(SAFE_ROWS), BASE_SEED, _ScriptedValidator(0))
