"""Requests and Response models"""

from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.config import GameConfig
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import EndReason, Orientation, Phase

SeatId = str
PlayerName = str


class PositionSchema(BaseModel):
    row: int
    col: int


class WallSchema(BaseModel):
    row: int
    col: int
    orientation: Orientation
    owner_id: Optional[int] = None


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    player_name: str
    config: GameConfig = GameConfig()

    @field_validator("player_name")
    @classmethod
    def validate_player_name(cls, value: str) -> str:
        if not value.strip():
            raise InvalidRequestError("Player name cannot be empty.")
        return value


class JoinGameRequest(BaseModel):
    game_id: UUID
    player_name: str


class LegalMovesRequest(BaseModel):
    game_id: UUID
    player_name: str


class MoveRequest(BaseModel):
    game_id: UUID
    player_name: str
    row: int
    col: int

    @field_validator(*["row", "col"])
    @classmethod
    def validate_coordinate(cls, value: int) -> int:
        if value < 0:
            raise InvalidRequestError(f"Cell coordinates cannot be negative: {value}")
        return value


class PlaceWallRequest(BaseModel):
    game_id: UUID
    player_name: str
    row: int
    col: int
    orientation: Orientation


class TimeoutRequest(BaseModel):
    """The player holding the turn reports that its own turn clock ran out."""

    game_id: UUID
    player_name: str


class AiTurnRequest(BaseModel):
    game_id: UUID


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


# --- RESPONSE MODELS ---
class GameResponse(BaseModel):
    game_id: UUID
    status: Phase
    players: dict[SeatId, PlayerName]
    pawns: dict[SeatId, PositionSchema]
    walls_left: dict[SeatId, int]
    walls: list[WallSchema]
    current_player_id: int
    winner_id: Optional[int]
    end_reason: Optional[EndReason]
    game_clock_seconds: int
    turn_clock_seconds: int
    move_history: list[dict[str, Any]]
    last_rationale: Optional[str] = None


class OpenGamesResponse(BaseModel):
    games: list[GameResponse]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    player_name: str
    player_id: int
    legal_moves: list[PositionSchema]
