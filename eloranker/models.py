"""Data models for eloranker."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class Player(BaseModel):
    """A ranked player.

    The id never changes once registered. Ratings are replaced by
    copying the model, never by mutating it in place.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    rating: int


class MatchRecord(BaseModel):
    """A processed match in the match log.

    For draws the winner/loser labels are purely nominal.
    """

    model_config = ConfigDict(frozen=True)

    winner_id: str
    loser_id: str
    is_draw: bool = False
    timestamp: datetime


class MatchResult(BaseModel):
    """Both players after a match, with their updated ratings."""

    winner: Player
    loser: Player


class RankingUpdate(BaseModel):
    """Event pushed to live subscribers when a rating changes."""

    type: Literal["RankingUpdate"] = "RankingUpdate"
    player: Player


class MatchHistory(BaseModel):
    """The match log, oldest first."""

    count: int
    matches: list[MatchRecord]


class CreatePlayerRequest(BaseModel):
    """Body of POST /api/player."""

    model_config = ConfigDict(extra="forbid")

    id: str


class CreateMatchRequest(BaseModel):
    """Body of POST /api/match."""

    model_config = ConfigDict(extra="forbid")

    winner: str = Field(min_length=1)
    loser: str = Field(min_length=1)
    draw: bool = False
