"""Attribute — immutable predicate descriptor usable as a row or column of the grid.

Invariants:
    - id is always derived from kind + value ("country_ESP"), never supplied freely
    - Attribute is frozen: the pool, selections and cached payloads share instances
    - to_dict()/from_dict() is the single JSON shape stored in templates and cache rows

Design Decisions:
    - Frozen dataclass over Pydantic model: core stays free of boundary validation,
      schemas/ converts at the API edge (ADR: core never imports from shell)
"""

from dataclasses import dataclass

from dailygrid.core.domain_types import AttributeKind


def attribute_id(kind: AttributeKind, value: str) -> str:
    """Stable attribute id: same kind+value always yields the same id."""
    return f"{kind.value}_{value}"


@dataclass(frozen=True)
class Attribute:
    kind: AttributeKind
    value: str
    label: str
    description: str

    @property
    def id(self) -> str:
        return attribute_id(self.kind, self.value)

    @property
    def is_country(self) -> bool:
        return self.kind == AttributeKind.COUNTRY

    def to_dict(self) -> dict:
        return {
            "type": self.kind.value,
            "id": self.id,
            "label": self.label,
            "description": self.description,
            "value": self.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Attribute":
        kind = AttributeKind(data["type"])
        label = data.get("label") or data["value"]
        return cls(
            kind=kind,
            value=str(data["value"]),
            label=label,
            description=data.get("description") or label,
        )
