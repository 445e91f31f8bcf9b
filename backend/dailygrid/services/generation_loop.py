"""Generation Loop — select → validate → retry with deterministic re-seeding.

Invariants:
    - Attempt n uses seed = base_seed + (n - 1) * seed_step
    - Attempts are sequential; the first playable grid wins (SUCCESS)
    - After max_attempts without a playable grid the LAST grid is returned, flagged
      degraded with the impossible-cell diagnostics (never raises, never loops forever)
    - A selection that cannot form a well-formed Grid consumes an attempt
    - When the time budget runs out, no further attempt starts; the grid in hand
      is returned degraded and flagged timed_out
    - Raises MalformedGridError only when no attempt produced any grid at all

Design Decisions:
    - Validator injected as a callable: the loop is testable without a dataset
    - seed_step 7919 (prime) decorrelates consecutive attempts
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from dailygrid.core.attribute import Attribute
from dailygrid.core.errors import MalformedGridError
from dailygrid.core.grid import Grid
from dailygrid.core.select_grid import select_grid
from dailygrid.core.validation_summary import ValidationSummary

logger = logging.getLogger(__name__)

MAX_ATTEMPTS: int = 20
SEED_STEP: int = 7919

GridValidatorFn = Callable[[Grid], Awaitable[ValidationSummary]]


@dataclass
class GenerationOutcome:
    grid: Grid
    seed: int
    attempt_count: int
    summary: ValidationSummary | None = None
    degraded: bool = False
    timed_out: bool = False
    warning: str | None = None
    impossible_cells: list[dict] = field(default_factory=list)


def attempt_seed(base_seed: int, attempt: int, seed_step: int = SEED_STEP) -> int:
    return base_seed + (attempt - 1) * seed_step


async def run_generation(
    pool: list[Attribute],
    base_seed: int,
    validate: GridValidatorFn,
    max_attempts: int = MAX_ATTEMPTS,
    seed_step: int = SEED_STEP,
    skip_validation: bool = False,
    timeout_seconds: float | None = None,
) -> GenerationOutcome:
    """Run attempts until a playable grid appears or the budget is spent."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_seconds if timeout_seconds else None
    last: GenerationOutcome | None = None

    for attempt in range(1, max_attempts + 1):
        seed = attempt_seed(base_seed, attempt, seed_step)
        selection = select_grid(pool, seed)
        try:
            grid = Grid.from_lists(list(selection.rows), list(selection.columns))
        except MalformedGridError as e:
            logger.warning(
                f"Attempt {attempt}/{max_attempts} produced no grid: {e.message}",
                extra={"attempt": attempt, "seed": seed},
            )
            continue

        if skip_validation:
            logger.warning("Validation skipped; accepting first grid")
            return GenerationOutcome(grid=grid, seed=seed, attempt_count=attempt)

        remaining = deadline - loop.time() if deadline is not None else None
        if remaining is not None and remaining <= 0:
            return _degraded(
                last or GenerationOutcome(grid=grid, seed=seed, attempt_count=attempt),
                attempt, "Generation time budget exhausted", timed_out=True,
            )
        try:
            summary = await asyncio.wait_for(validate(grid), timeout=remaining)
        except asyncio.TimeoutError:
            logger.error(
                f"Attempt {attempt} validation timed out",
                extra={"attempt": attempt, "seed": seed},
            )
            return _degraded(
                last or GenerationOutcome(grid=grid, seed=seed, attempt_count=attempt),
                attempt, "Generation time budget exhausted", timed_out=True,
            )

        if summary.is_playable:
            logger.info(
                f"Attempt {attempt}/{max_attempts} succeeded",
                extra={"attempt": attempt, "seed": seed},
            )
            return GenerationOutcome(
                grid=grid, seed=seed, attempt_count=attempt, summary=summary,
            )

        logger.info(
            f"Attempt {attempt}/{max_attempts} failed: "
            f"{summary.impossible} impossible cell(s)",
            extra={"attempt": attempt, "seed": seed},
        )
        last = GenerationOutcome(
            grid=grid, seed=seed, attempt_count=attempt, summary=summary,
        )

    if last is None:
        raise MalformedGridError(
            f"Attribute pool ({len(pool)} attributes) cannot form a valid grid",
        )
    logger.error(f"No playable grid after {max_attempts} attempts")
    return _degraded(
        last, max_attempts, f"Validation failed after {max_attempts} attempts",
    )


def _degraded(
    outcome: GenerationOutcome,
    attempt_count: int,
    warning: str,
    timed_out: bool = False,
) -> GenerationOutcome:
    impossible = []
    if outcome.summary is not None:
        impossible = [
            {
                "row": c.row,
                "col": c.col,
                "row_label": outcome.grid.rows[c.row].label,
                "col_label": outcome.grid.columns[c.col].label,
            }
            for c in outcome.summary.impossible_cells
        ]
    return GenerationOutcome(
        grid=outcome.grid,
        seed=outcome.seed,
        attempt_count=attempt_count,
        summary=outcome.summary,
        degraded=True,
        timed_out=timed_out,
        warning=warning,
        impossible_cells=impossible,
    )
