"""Tournament ORM — event catalog entry (Grand Slam, Masters 1000, ATP 500, ...).

Invariants:
    - level "achievement" marks pseudo-events (e.g. "Year-End #1") that are not
      tournaments and never enter the attribute pool
    - short_name is the value tournament attributes match against
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from dailygrid.db.base import Base


class Tournament(Base):
    __tablename__ = "tournaments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    short_name: Mapped[str] = mapped_column(String(120), nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    level: Mapped[str | None] = mapped_column(String(40), nullable=True, index=True)
