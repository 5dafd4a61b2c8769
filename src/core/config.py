"""Game configuration: the options a player picks in the menu before a game starts."""

from typing import Self

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import AiBackend, Difficulty, GameMode, StartPosition

BOARD_SIZE = 9
MIN_BOARD_SIZE = 3
WALLS_PER_PLAYER_RANGE = (5, 15)
TURN_DURATION_RANGE = (30, 120)
# The remote AI needs time to answer, so it raises the floor of the turn timer
REMOTE_AI_MIN_TURN_DURATION = 60


class GameConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    board_size: int = BOARD_SIZE
    walls_per_player: int = 10
    turn_duration_seconds: int = 60
    start_position: StartPosition = StartPosition.CENTER
    mode: GameMode = GameMode.PVP
    difficulty: Difficulty = Difficulty.MEDIUM
    ai_backend: AiBackend = AiBackend.LOCAL

    @field_validator("board_size")
    @classmethod
    def validate_board_size(cls, value: int) -> int:
        if value < MIN_BOARD_SIZE:
            raise InvalidRequestError(
                f"Board size must be at least {MIN_BOARD_SIZE}, got {value}."
            )
        return value

    @field_validator("walls_per_player")
    @classmethod
    def validate_walls_per_player(cls, value: int) -> int:
        low, high = WALLS_PER_PLAYER_RANGE
        if not low <= value <= high:
            raise InvalidRequestError(
                f"Walls per player must lie in [{low}, {high}], got {value}."
            )
        return value

    @field_validator("turn_duration_seconds")
    @classmethod
    def validate_turn_duration(cls, value: int) -> int:
        low, high = TURN_DURATION_RANGE
        if not low <= value <= high:
            raise InvalidRequestError(
                f"Turn duration must lie in [{low}, {high}] seconds, got {value}."
            )
        return value

    @model_validator(mode="after")
    def validate_remote_ai_turn_duration(self) -> Self:
        uses_remote_ai = (
            self.mode == GameMode.PVC and self.ai_backend == AiBackend.REMOTE
        )
        if uses_remote_ai and self.turn_duration_seconds < REMOTE_AI_MIN_TURN_DURATION:
            raise InvalidRequestError(
                f"Playing against the remote AI needs a turn duration of at least {REMOTE_AI_MIN_TURN_DURATION} seconds."
            )
        return self
