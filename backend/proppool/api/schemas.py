from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from proppool.domain.enums import GameStatus


class JoinRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=64)


class PickIn(BaseModel):
    prop_id: int
    selection: str = Field(..., min_length=1)


class SubmitPicksRequest(BaseModel):
    player_id: int
    picks: list[PickIn]
    lock_in: bool = False


class ResolveRequest(BaseModel):
    prop_id: int
    result: str = Field(..., min_length=1)


class UndoRequest(BaseModel):
    prop_id: int


class SeedRequest(BaseModel):
    force: bool = False
    source: Literal["curated", "odds"] = "curated"
    event_id: str | None = None


class PollRequest(BaseModel):
    snapshot: dict[str, Any] | None = None


class GameStatusRequest(BaseModel):
    status: GameStatus
