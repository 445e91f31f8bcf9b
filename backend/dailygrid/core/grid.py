"""Grid — 3 row + 3 column attributes, validated at construction time.

Invariants:
    - Exactly AXIS_SIZE rows and AXIS_SIZE columns
    - All 6 attribute ids pairwise distinct
    - At most one COUNTRY attribute per axis (a player has exactly one nationality)
    - A Grid instance that exists is always well-formed; MalformedGridError otherwise

Design Decisions:
    - Checks live in __post_init__ so templates, selector output and cached payloads
      all pass through the same gate (ADR: reject at the boundary, never in the validator)
"""

from dataclasses import dataclass

from dailygrid.core.attribute import Attribute
from dailygrid.core.errors import MalformedGridError

AXIS_SIZE: int = 3
TOTAL_CELLS: int = AXIS_SIZE * AXIS_SIZE


@dataclass(frozen=True)
class Grid:
    rows: tuple[Attribute, ...]
    columns: tuple[Attribute, ...]

    def __post_init__(self):
        problem = find_grid_problem(list(self.rows), list(self.columns))
        if problem:
            raise MalformedGridError(problem)

    @classmethod
    def from_lists(cls, rows: list[Attribute], columns: list[Attribute]) -> "Grid":
        return cls(rows=tuple(rows), columns=tuple(columns))

    @classmethod
    def from_payload(cls, rows: list[dict], columns: list[dict]) -> "Grid":
        try:
            return cls.from_lists(
                [Attribute.from_dict(a) for a in rows],
                [Attribute.from_dict(a) for a in columns],
            )
        except (KeyError, ValueError, TypeError) as e:
            raise MalformedGridError(f"Invalid attribute payload: {e}")

    def cells(self) -> list[tuple[int, int, Attribute, Attribute]]:
        """Row-major (row_index, col_index, row_attr, col_attr) for all nine cells."""
        return [
            (r, c, row, col)
            for r, row in enumerate(self.rows)
            for c, col in enumerate(self.columns)
        ]

    def to_payload(self) -> dict:
        return {
            "rows": [a.to_dict() for a in self.rows],
            "columns": [a.to_dict() for a in self.columns],
        }


def find_grid_problem(rows: list[Attribute], columns: list[Attribute]) -> str | None:
    """Return a description of the first structural problem, or None. Pure."""
    if len(rows) != AXIS_SIZE or len(columns) != AXIS_SIZE:
        return (
            f"Grid requires exactly {AXIS_SIZE} row and {AXIS_SIZE} column "
            f"attributes, got {len(rows)} and {len(columns)}"
        )
    ids = [a.id for a in rows + columns]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        return f"Attributes must be distinct across the grid: {', '.join(duplicates)}"
    for axis_name, axis in (("rows", rows), ("columns", columns)):
        countries = [a.label for a in axis if a.is_country]
        if len(countries) > 1:
            return (
                f"At most one country per axis; {axis_name} have "
                f"{', '.join(countries)}"
            )
    return None
