"""contest schema: props, players, picks, game state, poll runs

Revision ID: 0001_initial_contest
Revises:
Create Date: 2026-02-01 12:00:00

"""

from typing import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_initial_contest"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "props",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("key", sa.String(length=64), nullable=False, unique=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, unique=True),
        sa.Column("category", sa.String(length=16), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("prop_type", sa.String(length=16), nullable=False),
        sa.Column("options", sa.JSON(), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("result", sa.Text(), nullable=True),
        sa.Column("resolution_criteria", sa.Text(), nullable=True),
        sa.Column("auto_resolve", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("rule_kind", sa.String(length=32), nullable=True),
        sa.Column("rule_params", sa.JSON(), nullable=True),
        sa.Column("threshold", sa.Numeric(10, 3), nullable=True),
        sa.Column("stat_key", sa.String(length=32), nullable=True),
        sa.Column("player_name", sa.Text(), nullable=True),
        sa.Column("current_value", sa.Numeric(10, 3), nullable=True),
        sa.Column("live_stats", sa.JSON(), nullable=True),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_props_status", "props", ["status"])

    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=64), nullable=False, unique=True),
        sa.Column("total_points", sa.Numeric(12, 6), nullable=False, server_default="0"),
        sa.Column("max_possible", sa.Numeric(12, 6), nullable=False, server_default="0"),
        sa.Column("picks_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("correct_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("resolved_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("rank", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "picks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("player_id", sa.Integer(), sa.ForeignKey("players.id", ondelete="CASCADE"), nullable=False),
        sa.Column("prop_id", sa.Integer(), sa.ForeignKey("props.id", ondelete="CASCADE"), nullable=False),
        sa.Column("selection", sa.Text(), nullable=False),
        sa.Column("is_correct", sa.Boolean(), nullable=True),
        sa.Column("points_earned", sa.Numeric(12, 6), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("player_id", "prop_id", name="uq_pick_player_prop"),
    )
    op.create_index("ix_picks_player_id", "picks", ["player_id"])
    op.create_index("ix_picks_prop_id", "picks", ["prop_id"])

    op.create_table(
        "game_state",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("home_team", sa.String(length=16), nullable=False, server_default=""),
        sa.Column("away_team", sa.String(length=16), nullable=False, server_default=""),
        sa.Column("home_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("away_score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("quarter", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("clock", sa.String(length=16), nullable=False, server_default="15:00"),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pre"),
        sa.Column("last_play", sa.Text(), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "poll_runs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("run_type", sa.String(length=16), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("stats_json", sa.Text(), nullable=False, server_default="{}"),
        sa.Column("error", sa.Text(), nullable=True),
    )
    op.create_index("ix_poll_runs_created_at", "poll_runs", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_poll_runs_created_at", table_name="poll_runs")
    op.drop_table("poll_runs")
    op.drop_table("game_state")
    op.drop_index("ix_picks_prop_id", table_name="picks")
    op.drop_index("ix_picks_player_id", table_name="picks")
    op.drop_table("picks")
    op.drop_table("players")
    op.drop_index("ix_props_status", table_name="props")
    op.drop_table("props")
