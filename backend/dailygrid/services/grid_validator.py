"""Grid Validator — counts satisfying players for each of the nine cells, concurrently.

Invariants:
    - Each cell fetches its own bounded batch (scan_limit rows, stable id order);
      cells share no mutable state
    - The nine cells run concurrently via asyncio.gather
    - A fetch or predicate failure FAILS OPEN: the cell is UNKNOWN, never IMPOSSIBLE.
      A transient dataset hiccup must not block a grid
    - Grid is playable iff no cell is IMPOSSIBLE

Design Decisions:
    - Bounded scan over full-table scan: a 0 inside the window counts as impossible
      even when a match exists outside it (window size is Settings.cell_scan_limit)
    - Predicate evaluation delegated to core.predicates (pure)
"""

import asyncio
import logging
import time
from datetime import datetime, timezone

from dailygrid.core.attribute import Attribute
from dailygrid.core.domain_types import CellTier
from dailygrid.core.grid import Grid
from dailygrid.core.predicates import matches_cell
from dailygrid.core.repository_protocols import PlayerDataset
from dailygrid.core.validation_summary import (
    SAMPLE_PLAYER_LIMIT, CellResult, ValidationSummary, classify_count,
    summarize_cells,
)

logger = logging.getLogger(__name__)

DEFAULT_SCAN_LIMIT: int = 500


async def validate_cell(
    dataset: PlayerDataset,
    row_attr: Attribute,
    col_attr: Attribute,
    row: int,
    col: int,
    scan_limit: int = DEFAULT_SCAN_LIMIT,
    current_year: int | None = None,
) -> CellResult:
    """Count players satisfying both attributes within the scan window."""
    year = current_year or datetime.now(timezone.utc).year
    try:
        players = await dataset.fetch_player_batch(scan_limit)
        matching = [
            p.name for p in players if matches_cell(p, row_attr, col_attr, year)
        ]
    except Exception as e:
        logger.warning(
            f"Cell [{row},{col}] {row_attr.label} x {col_attr.label} "
            f"failed open: {e}",
        )
        return CellResult(row, col, None, CellTier.UNKNOWN)

    return CellResult(
        row, col, len(matching), classify_count(len(matching)),
        tuple(matching[:SAMPLE_PLAYER_LIMIT]),
    )


async def validate_grid(
    dataset: PlayerDataset,
    grid: Grid,
    scan_limit: int = DEFAULT_SCAN_LIMIT,
    current_year: int | None = None,
) -> ValidationSummary:
    """Validate all nine cells in parallel and reduce to a summary."""
    started = time.perf_counter()
    cells = await asyncio.gather(*(
        validate_cell(dataset, row_attr, col_attr, r, c, scan_limit, current_year)
        for r, c, row_attr, col_attr in grid.cells()
    ))
    elapsed_ms = int((time.perf_counter() - started) * 1000)
    summary = summarize_cells(list(cells), elapsed_ms)

    logger.info(
        f"Grid validated: {summary.safe} safe, {summary.risky} risky, "
        f"{summary.impossible} impossible, {summary.unknown} unknown",
        extra={"elapsed_ms": elapsed_ms},
    )
    for cell in summary.impossible_cells:
        logger.info(
            f"Impossible cell [{cell.row},{cell.col}]: "
            f"{grid.rows[cell.row].label} + {grid.columns[cell.col].label}",
        )
    return summary
