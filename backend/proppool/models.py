from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from proppool.domain.enums import GameStatus, PropCategory, PropStatus, PropType


class Base(DeclarativeBase):
    pass


class Prop(Base):
    __tablename__ = "props"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    key: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    category: Mapped[str] = mapped_column(String(16), nullable=False, default=PropCategory.GAME.value)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    prop_type: Mapped[str] = mapped_column(String(16), nullable=False, default=PropType.BINARY.value)
    options: Mapped[list[dict[str, object]]] = mapped_column(JSON, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=PropStatus.PENDING.value, index=True)
    result: Mapped[str | None] = mapped_column(Text, nullable=True)
    resolution_criteria: Mapped[str | None] = mapped_column(Text, nullable=True)
    auto_resolve: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rule_kind: Mapped[str | None] = mapped_column(String(32), nullable=True)
    rule_params: Mapped[dict[str, object] | None] = mapped_column(JSON, nullable=True)
    threshold: Mapped[Decimal | None] = mapped_column(Numeric(10, 3), nullable=True)
    stat_key: Mapped[str | None] = mapped_column(String(32), nullable=True)
    player_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    current_value: Mapped[Decimal | None] = mapped_column(Numeric(10, 3), nullable=True)
    live_stats: Mapped[dict[str, float] | None] = mapped_column(JSON, nullable=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    picks: Mapped[list[Pick]] = relationship(back_populates="prop")


class Player(Base):
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    total_points: Mapped[Decimal] = mapped_column(Numeric(12, 6), nullable=False, default=Decimal("0"))
    max_possible: Mapped[Decimal] = mapped_column(Numeric(12, 6), nullable=False, default=Decimal("0"))
    picks_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    correct_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    resolved_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rank: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    picks: Mapped[list[Pick]] = relationship(back_populates="player", cascade="all, delete-orphan")


class Pick(Base):
    __tablename__ = "picks"
    __table_args__ = (UniqueConstraint("player_id", "prop_id", name="uq_pick_player_prop"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    player_id: Mapped[int] = mapped_column(
        ForeignKey("players.id", ondelete="CASCADE"), nullable=False, index=True
    )
    prop_id: Mapped[int] = mapped_column(ForeignKey("props.id", ondelete="CASCADE"), nullable=False, index=True)
    selection: Mapped[str] = mapped_column(Text, nullable=False)
    is_correct: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    points_earned: Mapped[Decimal | None] = mapped_column(Numeric(12, 6), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    player: Mapped[Player] = relationship(back_populates="picks")
    prop: Mapped[Prop] = relationship(back_populates="picks")


class GameState(Base):
    __tablename__ = "game_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    home_team: Mapped[str] = mapped_column(String(16), nullable=False, default="")
    away_team: Mapped[str] = mapped_column(String(16), nullable=False, default="")
    home_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    away_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    quarter: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    clock: Mapped[str] = mapped_column(String(16), nullable=False, default="15:00")
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=GameStatus.PRE.value)
    last_play: Mapped[str | None] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


class PollRun(Base):
    __tablename__ = "poll_runs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    run_type: Mapped[str] = mapped_column(String(16), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    stats_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
