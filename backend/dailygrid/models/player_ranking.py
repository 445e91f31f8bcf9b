"""PlayerRanking ORM — one observed singles ranking for a player."""

from datetime import date

from sqlalchemy import Date, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dailygrid.db.base import Base


class PlayerRanking(Base):
    __tablename__ = "player_rankings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    player_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("players.id"), nullable=False, index=True,
    )
    singles_ranking: Mapped[int | None] = mapped_column(Integer, nullable=True)
    ranking_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    player: Mapped["Player"] = relationship("Player", back_populates="rankings")
