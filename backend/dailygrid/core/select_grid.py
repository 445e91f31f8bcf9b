"""Grid Selector — deterministic constrained pick of 3 row + 3 column attributes.

Invariants:
    - Deterministic: same (pool, seed) → same selection, bit for bit
    - Slots processed rows 0-2 then columns 0-2
    - First two slots of each axis draw from SAFE; third slot from SAFE ∪ RISKY
    - No attribute is used twice across the 6 slots
    - At most one COUNTRY per axis; this exclusion is NEVER relaxed
    - Empty filtered pool widens to every remaining attribute (minus the country rule)
    - Never raises: a slot with no candidate at all is left empty and the
      caller rejects the incomplete selection when building a Grid

Design Decisions:
    - splitmix64 hash of (seed, offset) instead of a floating-point sine trick:
      integer-only, platform independent, roughly uniform modulo small n
    - Per-axis "has country" flag carried in _AxisState, not module globals
"""

from dataclasses import dataclass, field

from dailygrid.core.attribute import Attribute
from dailygrid.core.domain_types import AttributeKind
from dailygrid.core.grid import AXIS_SIZE

SAFE_SLOTS_PER_AXIS: int = 2
MAX_INDEX_RETRIES: int = 100
SLOT_OFFSET_STRIDE: int = 100

POPULAR_COUNTRIES: frozenset[str] = frozenset({
    "USA", "ESP", "SRB", "SUI", "GBR", "FRA",
    "GER", "AUS", "ARG", "RUS", "ITA", "CRO",
})
MAJOR_TOURNAMENT_MARKERS: tuple[str, ...] = (
    "Wimbledon", "US Open", "French Open", "Australian Open",
)

_MASK64 = (1 << 64) - 1


@dataclass(frozen=True)
class GridSelection:
    """Selector output. May be incomplete when the pool is too small."""
    rows: tuple[Attribute, ...]
    columns: tuple[Attribute, ...]
    seed: int

    @property
    def is_complete(self) -> bool:
        return len(self.rows) == AXIS_SIZE and len(self.columns) == AXIS_SIZE


@dataclass
class _AxisState:
    chosen: list[Attribute] = field(default_factory=list)
    has_country: bool = False

    def admits(self, attr: Attribute) -> bool:
        return not (attr.is_country and self.has_country)

    def add(self, attr: Attribute) -> None:
        self.chosen.append(attr)
        if attr.is_country:
            self.has_country = True


def is_safe_attribute(attr: Attribute) -> bool:
    """Low-risk attributes: popular countries, majors, every era and ranking."""
    if attr.kind == AttributeKind.COUNTRY:
        return attr.value in POPULAR_COUNTRIES
    if attr.kind == AttributeKind.TOURNAMENT:
        return any(m in attr.label for m in MAJOR_TOURNAMENT_MARKERS)
    return attr.kind in (AttributeKind.ERA, AttributeKind.RANKING)


def partition_pool(pool: list[Attribute]) -> tuple[list[Attribute], list[Attribute]]:
    safe = [a for a in pool if is_safe_attribute(a)]
    risky = [a for a in pool if not is_safe_attribute(a)]
    return safe, risky


def pseudo_random_index(seed: int, offset: int, size: int) -> int:
    """Map (seed, offset) to [0, size) with splitmix64 mixing. Pure."""
    if size <= 0:
        raise ValueError("size must be positive")
    z = ((seed + offset) * 0x9E3779B97F4A7C15) & _MASK64
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & _MASK64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & _MASK64
    z ^= z >> 31
    return z % size


def select_grid(pool: list[Attribute], seed: int) -> GridSelection:
    """Pick rows then columns from pool. Pure and deterministic."""
    safe, risky = partition_pool(pool)
    used_ids: set[str] = set()
    rows, columns = _AxisState(), _AxisState()

    for slot in range(2 * AXIS_SIZE):
        axis = rows if slot < AXIS_SIZE else columns
        position = slot % AXIS_SIZE
        source = safe if position < SAFE_SLOTS_PER_AXIS else safe + risky
        candidates = _eligible(source, used_ids, axis)
        if not candidates:
            candidates = _eligible(pool, used_ids, axis)
        picked = _pick(candidates, used_ids, seed, slot)
        if picked is None:
            continue
        used_ids.add(picked.id)
        axis.add(picked)

    return GridSelection(
        rows=tuple(rows.chosen), columns=tuple(columns.chosen), seed=seed,
    )


def _eligible(
    source: list[Attribute], used_ids: set[str], axis: _AxisState,
) -> list[Attribute]:
    return [a for a in source if a.id not in used_ids and axis.admits(a)]


def _pick(
    candidates: list[Attribute], used_ids: set[str], seed: int, slot: int,
) -> Attribute | None:
    if not candidates:
        return None
    for attempt in range(MAX_INDEX_RETRIES):
        index = pseudo_random_index(
            seed, slot * SLOT_OFFSET_STRIDE + attempt, len(candidates),
        )
        candidate = candidates[index]
        if candidate.id not in used_ids:
            return candidate
    # Only reachable if the pool repeats ids; fall through to first unused
    return next((a for a in candidates if a.id not in used_ids), None)
