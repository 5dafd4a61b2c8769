"""
State Reconciler: (snapshot, action, actor) -> next snapshot.

The same pure function is used for local play and networked play. Networked play is just
"apply the same action after it arrived over the wire".

Anything that cannot be applied (terminal game, not the actor's turn, illegal move/wall) returns the snapshot unchanged.
The turn-gate (actor must hold the turn) is the only concurrency control between clients.
"""

import logging
from dataclasses import replace
from enum import StrEnum
from typing import Optional

from src.core.shared_types import EndReason
from src.quoridor.actions import (
    Action,
    MoveAction,
    PassAction,
    PlaceWallAction,
    TimeoutAction,
)
from src.quoridor.moves import compute_legal_moves
from src.quoridor.snapshot import GameSnapshot, other_player_id
from src.quoridor.wall_validator import WallRejection, placement_rejection

logger = logging.getLogger(__name__)


class ActionRejection(StrEnum):
    GAME_OVER = "the game is over"
    NOT_YOUR_TURN = "not your turn"
    ILLEGAL_MOVE = "not a legal destination"


def rejection_reason(
    snapshot: GameSnapshot, action: Action, actor_id: int
) -> Optional[ActionRejection | WallRejection]:
    """Why apply_action would ignore this action. None means it would be accepted."""
    if snapshot.is_terminal:
        return ActionRejection.GAME_OVER

    if actor_id != snapshot.current_player_id:
        return ActionRejection.NOT_YOUR_TURN

    match action:
        case MoveAction(to=to):
            mover = snapshot.current_player
            opponent = snapshot.opponent_of(actor_id)
            legal_moves = compute_legal_moves(
                mover.position, snapshot.walls, opponent.position, snapshot.board_size
            )
            return None if to in legal_moves else ActionRejection.ILLEGAL_MOVE
        case PlaceWallAction():
            return placement_rejection(
                action.as_wall(actor_id),
                snapshot.walls,
                snapshot.players,
                snapshot.board_size,
            )
        case TimeoutAction() | PassAction():
            return None


def apply_action(snapshot: GameSnapshot, action: Action, actor_id: int) -> GameSnapshot:
    """
    Commit a single action.
    ---

    * MOVE: move the pawn. Reaching the goal row wins the game, otherwise the turn passes on.
    * PLACE_WALL: append the wall (owned by the actor), one wall less in stock, turn passes on.
    * TIMEOUT: the actor ran out of time, the opponent wins.
    * PASS: forfeit the ply (a trapped pawn), turn passes on.

    Whenever the turn passes on, the turn clock is reset to the full turn duration.
    """
    reason = rejection_reason(snapshot, action, actor_id)
    if reason is not None:
        logger.debug(f"Ignoring {action.type} from player {actor_id}: {reason}")
        return snapshot

    match action:
        case MoveAction():
            next_snapshot = _apply_move(snapshot, action)
        case PlaceWallAction():
            next_snapshot = _apply_wall(snapshot, action)
        case TimeoutAction():
            next_snapshot = replace(
                snapshot,
                winner_id=other_player_id(actor_id),
                end_reason=EndReason.TIMEOUT,
                turn_clock_seconds=0,
            )
        case PassAction():
            next_snapshot = _next_turn(snapshot)

    return replace(next_snapshot, history=(*snapshot.history, action))


def advance_clock(snapshot: GameSnapshot, seconds: int = 1) -> GameSnapshot:
    """Real time passes: the game clock counts up, the turn clock counts down (never below zero). Frozen once the game ended."""
    if snapshot.is_terminal:
        return snapshot
    return replace(
        snapshot,
        game_clock_seconds=snapshot.game_clock_seconds + seconds,
        turn_clock_seconds=max(0, snapshot.turn_clock_seconds - seconds),
    )


# -- PRIVATE HELPERS ---
def _apply_move(snapshot: GameSnapshot, action: MoveAction) -> GameSnapshot:
    mover = replace(snapshot.current_player, position=action.to)
    moved = snapshot.with_player(mover)
    if mover.has_reached_goal():
        return replace(moved, winner_id=mover.id, end_reason=EndReason.GOAL_REACHED)
    return _next_turn(moved)


def _apply_wall(snapshot: GameSnapshot, action: PlaceWallAction) -> GameSnapshot:
    builder = snapshot.current_player
    wall = action.as_wall(builder.id)
    with_wall = replace(
        snapshot.with_player(replace(builder, walls_left=builder.walls_left - 1)),
        walls=(*snapshot.walls, wall),
    )
    return _next_turn(with_wall)


def _next_turn(snapshot: GameSnapshot) -> GameSnapshot:
    return replace(
        snapshot,
        current_player_id=snapshot.opponent_id,
        turn_clock_seconds=snapshot.turn_duration_seconds,
    )
