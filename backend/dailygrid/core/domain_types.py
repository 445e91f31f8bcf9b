"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - TemplateId wraps UUID; never use a bare UUID in domain logic
    - All valid states encoded as Enums, no raw string matching
    - CellTier thresholds live in core/validation_summary.py, not here

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (ADR: grid payloads are stored as JSON)
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

TemplateId = NewType("TemplateId", UUID)
AttributeId = NewType("AttributeId", str)   # "{kind}_{value}"


# ─── Enums ───────────────────────────────────────────────────────

class AttributeKind(str, Enum):
    """Attribute kinds. COUNTRY is the identity group: one per player."""
    COUNTRY = "country"
    TOURNAMENT = "tournament"
    ERA = "era"
    STYLE = "style"
    RANKING = "ranking"
    ACHIEVEMENT = "achievement"


class CellTier(str, Enum):
    """Per-cell satisfiability tier. UNKNOWN = fetch failed, fail-open."""
    SAFE = "safe"
    RISKY = "risky"
    IMPOSSIBLE = "impossible"
    UNKNOWN = "unknown"


class GridStatus(str, Enum):
    """Overall grid verdict derived from the nine cell tiers."""
    EXCELLENT = "excellent"
    GOOD = "good"
    WARNING = "warning"
    ERROR = "error"


class CacheSourceKind(str, Enum):
    """Where a cached grid came from. Maps to the DB `source_kind` column."""
    CURATED = "curated"
    GENERATED = "generated"


class GridSource(str, Enum):
    """Source reported to callers of the resolution chain."""
    CACHED_CURATED = "cached-curated"
    CACHED_GENERATED = "cached-generated"
    FRESH_CURATED = "fresh-curated"
    FRESH_GENERATED = "fresh-generated"


class TemplateDifficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class TemplateStatusFilter(str, Enum):
    """List filter for the template authoring surface."""
    ALL = "all"
    DRAFT = "draft"
    PUBLISHED = "published"
