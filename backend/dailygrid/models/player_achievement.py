"""PlayerAchievement ORM — one result row: a tournament outcome and/or an achievement tag.

Invariants:
    - Always belongs to a Player (player_id FK)
    - result "winner" is what tournament attributes count
    - achievement_type is free-form; distinct values feed the achievement attributes
"""

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dailygrid.db.base import Base


class PlayerAchievement(Base):
    __tablename__ = "player_achievements"
    __table_args__ = (
        Index("idx_player_achievements_player_result", "player_id", "result"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    player_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("players.id"), nullable=False, index=True,
    )
    tournament_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("tournaments.id"), nullable=True,
    )
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    result: Mapped[str | None] = mapped_column(String(40), nullable=True)
    achievement_type: Mapped[str | None] = mapped_column(
        String(80), nullable=True, index=True,
    )

    player: Mapped["Player"] = relationship("Player", back_populates="achievements")
    tournament: Mapped["Tournament"] = relationship(
        "Tournament", lazy="selectin",
    )
