"""Player ORM — read-only view of the external player dataset.

Invariants:
    - The grid service never writes to players, tournaments, achievements or rankings
    - nationality is an ISO-3 style code (e.g. "ESP"), nullable for incomplete rows
    - plays_hand is "left" | "right" | NULL

Design Decisions:
    - Integer primary key: the dataset is loaded by an external importer that owns ids
    - achievements/rankings eager-loaded with selectin: predicates read both for
      every scanned player, so one batch query beats N lazy loads in async
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dailygrid.db.base import Base


class Player(Base):
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    nationality: Mapped[str | None] = mapped_column(
        String(8), nullable=True, index=True,
    )
    turned_pro: Mapped[int | None] = mapped_column(Integer, nullable=True)
    retired: Mapped[int | None] = mapped_column(Integer, nullable=True)
    plays_hand: Mapped[str | None] = mapped_column(String(10), nullable=True)

    achievements: Mapped[list["PlayerAchievement"]] = relationship(
        "PlayerAchievement", back_populates="player", lazy="selectin",
    )
    rankings: Mapped[list["PlayerRanking"]] = relationship(
        "PlayerRanking", back_populates="player", lazy="selectin",
    )
