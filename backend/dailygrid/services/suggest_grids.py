"""Grid Suggestions — selector output for template authors, primary + alternatives.

Invariants:
    - Same selector as daily generation: a suggestion for seed S is exactly the
      grid the generator would try first for base seed S
    - Alternative i uses base_seed + i * seed_step
    - Suggestions are not validated; authors run validate() on the one they pick
"""

from dailygrid.core.attribute import Attribute
from dailygrid.core.attribute_pool import pool_breakdown
from dailygrid.core.select_grid import GridSelection, select_grid

SUGGESTION_SEED_STEP: int = 10_000


def _selection_dict(selection: GridSelection) -> dict:
    return {
        "rows": [a.to_dict() for a in selection.rows],
        "columns": [a.to_dict() for a in selection.columns],
        "seed": selection.seed,
        "complete": selection.is_complete,
    }


def suggest_grids(
    pool: list[Attribute],
    base_seed: int,
    count: int,
    seed_step: int = SUGGESTION_SEED_STEP,
) -> dict:
    """Primary selection plus `count` alternatives. Pure."""
    primary = select_grid(pool, base_seed)
    alternatives = [
        select_grid(pool, base_seed + i * seed_step) for i in range(1, count + 1)
    ]
    return {
        "primary": _selection_dict(primary),
        "alternatives": [_selection_dict(s) for s in alternatives],
        "total_available_attributes": len(pool),
        "pool_breakdown": pool_breakdown(pool),
    }
