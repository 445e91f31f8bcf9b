"""Initial schema — player dataset tables, grid templates, cached daily grids.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-16

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ─── Player dataset (read-only for the service) ─────────────
    op.create_table(
        "players",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("nationality", sa.String(8), nullable=True),
        sa.Column("turned_pro", sa.Integer, nullable=True),
        sa.Column("retired", sa.Integer, nullable=True),
        sa.Column("plays_hand", sa.String(10), nullable=True),
    )
    op.create_index("ix_players_name", "players", ["name"])
    op.create_index("ix_players_nationality", "players", ["nationality"])

    op.create_table(
        "tournaments",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("short_name", sa.String(120), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("level", sa.String(40), nullable=True),
    )
    op.create_index("ix_tournaments_name", "tournaments", ["name"])
    op.create_index("ix_tournaments_level", "tournaments", ["level"])

    op.create_table(
        "player_achievements",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("player_id", sa.Integer, sa.ForeignKey("players.id"), nullable=False),
        sa.Column("tournament_id", sa.Integer, sa.ForeignKey("tournaments.id"), nullable=True),
        sa.Column("year", sa.Integer, nullable=True),
        sa.Column("result", sa.String(40), nullable=True),
        sa.Column("achievement_type", sa.String(80), nullable=True),
    )
    op.create_index("ix_player_achievements_player_id", "player_achievements", ["player_id"])
    op.create_index(
        "ix_player_achievements_achievement_type", "player_achievements", ["achievement_type"],
    )
    op.create_index(
        "idx_player_achievements_player_result", "player_achievements", ["player_id", "result"],
    )

    op.create_table(
        "player_rankings",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("player_id", sa.Integer, sa.ForeignKey("players.id"), nullable=False),
        sa.Column("singles_ranking", sa.Integer, nullable=True),
        sa.Column("ranking_date", sa.Date, nullable=True),
    )
    op.create_index("ix_player_rankings_player_id", "player_rankings", ["player_id"])

    # ─── Curated templates ──────────────────────────────────────
    op.create_table(
        "grid_templates",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("difficulty", sa.String(20), nullable=False, server_default="medium"),
        sa.Column("row_attributes", sa.JSON, nullable=False),
        sa.Column("col_attributes", sa.JSON, nullable=False),
        sa.Column("scheduled_date", sa.Date, nullable=True),
        sa.Column("published", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("validated_cell_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("min_cell_solutions", sa.Integer, nullable=True),
        sa.Column("created_by", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "validated_cell_count >= 0 AND validated_cell_count <= 9",
            name="ck_grid_templates_validated_cells",
        ),
    )
    op.create_index(
        "idx_grid_templates_unique_published_date",
        "grid_templates",
        ["scheduled_date"],
        unique=True,
        postgresql_where=sa.text("published = true AND scheduled_date IS NOT NULL"),
    )

    # ─── Cache ──────────────────────────────────────────────────
    op.create_table(
        "cached_daily_grids",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("date", sa.Date, nullable=False, unique=True),
        sa.Column("source_kind", sa.String(20), nullable=False),
        sa.Column(
            "template_id", UUID(as_uuid=True),
            sa.ForeignKey("grid_templates.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("payload", sa.JSON, nullable=False),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_cached_daily_grids_expires_at", "cached_daily_grids", ["expires_at"])


def downgrade() -> None:
    op.drop_table("cached_daily_grids")
    op.drop_index("idx_grid_templates_unique_published_date", table_name="grid_templates")
    op.drop_table("grid_templates")
    op.drop_table("player_rankings")
    op.drop_table("player_achievements")
    op.drop_table("tournaments")
    op.drop_table("players")
