"""Validation Summary — pure reduction of nine CellResults into a grid verdict.

Invariants:
    - classify_count: 0 → impossible, 1..2 → risky, >= SAFE_MIN_PLAYERS → safe
    - Overall status: any impossible → error; > MAX_RISKY_FOR_GOOD risky → warning;
      any risky → good; otherwise excellent
    - UNKNOWN cells (fail-open) never count as impossible; they count as risky
      for the overall status and are excluded from min/max/avg
    - is_playable ⇔ impossible == 0

Design Decisions:
    - Frozen dataclasses with to_dict(): the same shape feeds API responses,
      template validation columns and degraded-generation diagnostics
"""

from dataclasses import dataclass, field

from dailygrid.core.domain_types import CellTier, GridStatus
from dailygrid.core.grid import TOTAL_CELLS

SAFE_MIN_PLAYERS: int = 3
MAX_RISKY_FOR_GOOD: int = 2
SAMPLE_PLAYER_LIMIT: int = 5


@dataclass(frozen=True)
class CellResult:
    row: int
    col: int
    satisfying_count: int | None
    tier: CellTier
    sample_players: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "row": self.row,
            "col": self.col,
            "satisfying_count": self.satisfying_count,
            "status": self.tier.value,
            "sample_players": list(self.sample_players),
        }


@dataclass(frozen=True)
class ValidationSummary:
    cells: tuple[CellResult, ...]
    safe: int
    risky: int
    impossible: int
    unknown: int
    min_solutions: int
    max_solutions: int
    avg_solutions: float
    elapsed_ms: int
    status: GridStatus

    @property
    def is_playable(self) -> bool:
        return self.impossible == 0

    @property
    def valid_cells(self) -> int:
        return TOTAL_CELLS - self.impossible

    @property
    def impossible_cells(self) -> list[CellResult]:
        return [c for c in self.cells if c.tier == CellTier.IMPOSSIBLE]

    def to_dict(self) -> dict:
        return {
            "cells": [c.to_dict() for c in self.cells],
            "summary": {
                "total_cells": TOTAL_CELLS,
                "valid_cells": self.valid_cells,
                "safe_cells": self.safe,
                "risky_cells": self.risky,
                "impossible_cells": self.impossible,
                "unknown_cells": self.unknown,
                "min_solutions": self.min_solutions,
                "max_solutions": self.max_solutions,
                "avg_solutions": self.avg_solutions,
                "validation_time_ms": self.elapsed_ms,
            },
            "status": self.status.value,
            "message": validation_message(self),
        }


def classify_count(count: int) -> CellTier:
    if count <= 0:
        return CellTier.IMPOSSIBLE
    if count < SAFE_MIN_PLAYERS:
        return CellTier.RISKY
    return CellTier.SAFE


def overall_status(impossible: int, risky: int) -> GridStatus:
    if impossible > 0:
        return GridStatus.ERROR
    if risky > MAX_RISKY_FOR_GOOD:
        return GridStatus.WARNING
    if risky > 0:
        return GridStatus.GOOD
    return GridStatus.EXCELLENT


def summarize_cells(cells: list[CellResult], elapsed_ms: int) -> ValidationSummary:
    """Reduce cell results to a summary. Pure."""
    ordered = tuple(sorted(cells, key=lambda c: (c.row, c.col)))
    tiers = [c.tier for c in ordered]
    safe = tiers.count(CellTier.SAFE)
    risky = tiers.count(CellTier.RISKY)
    impossible = tiers.count(CellTier.IMPOSSIBLE)
    unknown = tiers.count(CellTier.UNKNOWN)
    counts = [c.satisfying_count for c in ordered if c.satisfying_count is not None]
    return ValidationSummary(
        cells=ordered,
        safe=safe,
        risky=risky,
        impossible=impossible,
        unknown=unknown,
        min_solutions=min(counts) if counts else 0,
        max_solutions=max(counts) if counts else 0,
        avg_solutions=round(sum(counts) / len(counts), 2) if counts else 0.0,
        elapsed_ms=elapsed_ms,
        status=overall_status(impossible, risky + unknown),
    )


def validation_message(summary: ValidationSummary) -> str:
    if summary.status == GridStatus.EXCELLENT:
        return (
            f"Perfect! All cells have {SAFE_MIN_PLAYERS}+ valid players. "
            f"Minimum: {summary.min_solutions} players."
        )
    if summary.status == GridStatus.GOOD:
        return (
            f"Good grid! {summary.risky + summary.unknown} cell(s) have fewer than "
            f"{SAFE_MIN_PLAYERS} confirmed players. Minimum: {summary.min_solutions} players."
        )
    if summary.status == GridStatus.WARNING:
        return (
            f"Warning: {summary.risky + summary.unknown} cells have fewer than "
            f"{SAFE_MIN_PLAYERS} confirmed players. Consider adjusting attributes."
        )
    return (
        f"Error: {summary.impossible} cell(s) have no valid players. "
        "Please adjust your attributes."
    )
