"""Player — read-only snapshot of one dataset entity, as seen by predicates.

Invariants:
    - Built by the dataset adapter; core never mutates or persists it
    - results carries both tournament wins (outcome) and free-form achievement tags
    - rankings holds every observed singles ranking (order irrelevant)
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EventResult:
    """One achievement row: a tournament outcome and/or an achievement tag."""
    event_name: str | None = None
    outcome: str | None = None
    achievement_type: str | None = None


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    nationality: str | None = None
    turned_pro: int | None = None
    retired: int | None = None
    plays_hand: str | None = None
    results: tuple[EventResult, ...] = field(default_factory=tuple)
    rankings: tuple[int, ...] = field(default_factory=tuple)
