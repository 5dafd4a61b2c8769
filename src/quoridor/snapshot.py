"""
The complete, immutable game state at a point in time.

A new state is only ever produced by the reconciler (src/quoridor/reconciler.py) or by starting a new game.
Everything a UI wants to show (highlighted cells, wall preview) is derived from a snapshot, never stored next to it.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Optional

from src.core.config import GameConfig
from src.core.exceptions import GameStateError
from src.core.shared_types import EndReason, StartPosition
from src.quoridor.position import Position
from src.quoridor.walls import Wall

if TYPE_CHECKING:
    from src.quoridor.actions import Action

PLAYER_IDS = (1, 2)


@dataclass(frozen=True)
class Player:
    id: int
    position: Position
    walls_left: int
    goal_row: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Player:
        return cls(
            id=int(data["id"]),
            position=Position.from_dict(data["position"]),
            walls_left=int(data["wallsLeft"]),
            goal_row=int(data["goalRow"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "position": self.position.to_dict(),
            "wallsLeft": self.walls_left,
            "goalRow": self.goal_row,
        }

    def has_reached_goal(self) -> bool:
        return self.position.row == self.goal_row


@dataclass(frozen=True)
class GameSnapshot:
    players: dict[int, Player]
    walls: tuple[Wall, ...]
    current_player_id: int
    winner_id: Optional[int]
    game_clock_seconds: int
    turn_clock_seconds: int
    board_size: int
    turn_duration_seconds: int
    end_reason: Optional[EndReason] = None
    history: tuple[Action, ...] = field(default=())

    @property
    def is_terminal(self) -> bool:
        return self.winner_id is not None

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_id]

    @property
    def opponent_id(self) -> int:
        return other_player_id(self.current_player_id)

    def player(self, player_id: int) -> Player:
        return self.players[player_id]

    def opponent_of(self, player_id: int) -> Player:
        return self.players[other_player_id(player_id)]

    def with_player(self, player: Player) -> GameSnapshot:
        """Copy with one of the players replaced (the players dict is never mutated in place)"""
        return replace(self, players={**self.players, player.id: player})


def other_player_id(player_id: int) -> int:
    if player_id not in PLAYER_IDS:
        raise GameStateError(f"Unknown player id: {player_id}")
    return 2 if player_id == 1 else 1


def starting_columns(
    config: GameConfig, rng: Optional[random.Random] = None
) -> tuple[int, int]:
    """
    Columns of player 1 / player 2.

    Random starts are mirrored so neither player gets an advantage.
    """
    size = config.board_size
    if config.start_position == StartPosition.CENTER:
        return size // 2, size // 2
    rng = rng or random.Random()
    first = rng.randrange(size)
    return first, (size - 1) - first


def new_snapshot(
    config: GameConfig, rng: Optional[random.Random] = None
) -> GameSnapshot:
    """
    Fresh game: player 1 starts on the bottom row heading for row 0 and moves first,
    player 2 starts on the top row heading for the bottom row. Clocks reset.
    """
    size = config.board_size
    first_col, second_col = starting_columns(config, rng)
    players = {
        1: Player(
            id=1,
            position=Position(size - 1, first_col),
            walls_left=config.walls_per_player,
            goal_row=0,
        ),
        2: Player(
            id=2,
            position=Position(0, second_col),
            walls_left=config.walls_per_player,
            goal_row=size - 1,
        ),
    }
    return GameSnapshot(
        players=players,
        walls=(),
        current_player_id=1,
        winner_id=None,
        game_clock_seconds=0,
        turn_clock_seconds=config.turn_duration_seconds,
        board_size=size,
        turn_duration_seconds=config.turn_duration_seconds,
    )
