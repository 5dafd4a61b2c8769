"""
AI Strategy Engine: picks a move or a wall for the computer player.

Three tiers:

* EASY: always follow my own shortest (tactical) path.
* MEDIUM: follow my path, unless the opponent is strictly ahead. Then block the first step of their path if any wall there is legal.
* HARD: score walls along the first steps of the opponent's path by how much they slow the opponent down versus me,
  and only build when it pays off (any gain while losing, a decisive gain while winning).
"""

import logging
import math
from typing import Optional, Sequence

from src.core.config import BOARD_SIZE
from src.core.shared_types import Difficulty, Orientation
from src.quoridor.actions import Action, MoveAction, PassAction, PlaceWallAction
from src.quoridor.moves import compute_legal_moves
from src.quoridor.pathfinding import PathMode, find_path, path_length
from src.quoridor.position import Position
from src.quoridor.snapshot import Player
from src.quoridor.wall_validator import is_legal_placement
from src.quoridor.walls import Wall

logger = logging.getLogger(__name__)

HARD_EDGES_CONSIDERED = 4
# While winning, only spend a wall when it secures the lead
DECISIVE_BLOCK_SCORE = 3

MOVE_ALONG_PATH = "Moving along my shortest path."
JUMP_OVER_PAWN = "Jumping over your pawn."
FIND_A_WAY_AROUND = "My path is blocked, trying to find a way around."
BLOCK_YOUR_PATH = "Placing a wall to obstruct your path."
TRAPPED = "I am trapped and cannot move."


def choose_ai_action(
    me: Player,
    opponent: Player,
    walls: Sequence[Wall],
    difficulty: Difficulty,
    board_size: int = BOARD_SIZE,
) -> Action:
    """The AI's action for this ply, with a short rationale for the UI."""
    my_path = find_path(
        me.position, me.goal_row, walls, PathMode.TACTICAL, opponent.position, board_size
    )
    opponent_path = find_path(
        opponent.position,
        opponent.goal_row,
        walls,
        PathMode.TACTICAL,
        me.position,
        board_size,
    )
    move = candidate_move(me, opponent, walls, my_path, board_size)

    match difficulty:
        case Difficulty.EASY:
            return move
        case Difficulty.MEDIUM:
            return _medium(me, opponent, walls, my_path, opponent_path, board_size) or move
        case Difficulty.HARD:
            return _hard(me, opponent, walls, my_path, opponent_path, board_size) or move


def candidate_move(
    me: Player,
    opponent: Player,
    walls: Sequence[Wall],
    my_path: Optional[list[Position]],
    board_size: int = BOARD_SIZE,
) -> MoveAction | PassAction:
    """First step of my path, otherwise any legal move, otherwise I am trapped and pass."""
    if my_path is not None and len(my_path) > 1:
        step = my_path[1]
        is_jump = me.position.distance(step) > 1
        return MoveAction(step, JUMP_OVER_PAWN if is_jump else MOVE_ALONG_PATH)

    legal_moves = compute_legal_moves(
        me.position, walls, opponent.position, board_size
    )
    if legal_moves:
        return MoveAction(legal_moves[0], FIND_A_WAY_AROUND)
    return PassAction(TRAPPED)


def fallback_action(
    me: Player, opponent: Player, walls: Sequence[Wall], board_size: int = BOARD_SIZE
) -> MoveAction | PassAction:
    """Deterministic move used when a suggested action cannot be trusted: first step of the tactical path, or pass."""
    path = find_path(
        me.position, me.goal_row, walls, PathMode.TACTICAL, opponent.position, board_size
    )
    if path is not None and len(path) > 1:
        return MoveAction(path[1], MOVE_ALONG_PATH)
    return PassAction(TRAPPED)


def blocking_walls(p1: Position, p2: Position, owner_id: int) -> list[Wall]:
    """
    Walls crossing the step p1 -> p2 at its midpoint.
    ---

    The primary groove first, then the same groove shifted by one (the other half of the wall covers the step instead).
    Sideways steps are blocked by vertical walls, all other steps by horizontal walls.
    """
    if p1.row == p2.row:
        primary = Wall(p1.row, min(p1.col, p2.col) + 1, Orientation.VERTICAL, owner_id)
        shifted = Wall(primary.row - 1, primary.col, Orientation.VERTICAL, owner_id)
        can_shift = primary.row > 0
    else:
        primary = Wall(min(p1.row, p2.row) + 1, p1.col, Orientation.HORIZONTAL, owner_id)
        shifted = Wall(primary.row, primary.col - 1, Orientation.HORIZONTAL, owner_id)
        can_shift = primary.col > 0
    return [primary, shifted] if can_shift else [primary]


def score_wall(
    wall: Wall,
    me: Player,
    opponent: Player,
    walls: Sequence[Wall],
    my_length: float,
    opponent_length: float,
    board_size: int = BOARD_SIZE,
) -> Optional[float]:
    """
    (opponent's extra steps) - (my extra steps) after inserting the wall.
    None if the wall would leave me without a path (never trap yourself).
    """
    new_walls = [*walls, wall]
    new_my_length = path_length(
        find_path(
            me.position, me.goal_row, new_walls, PathMode.TACTICAL, opponent.position, board_size
        )
    )
    if math.isinf(new_my_length):
        return None
    new_opponent_length = path_length(
        find_path(
            opponent.position,
            opponent.goal_row,
            new_walls,
            PathMode.TACTICAL,
            me.position,
            board_size,
        )
    )
    return (new_opponent_length - opponent_length) - (new_my_length - my_length)


# -- DIFFICULTY TIERS ---
def _medium(
    me: Player,
    opponent: Player,
    walls: Sequence[Wall],
    my_path: Optional[list[Position]],
    opponent_path: Optional[list[Position]],
    board_size: int,
) -> Optional[PlaceWallAction]:
    """Block the first step of the opponent's path, but only when the opponent is strictly ahead."""
    if me.walls_left <= 0:
        return None
    if not path_length(opponent_path) < path_length(my_path):
        return None
    if opponent_path is None or len(opponent_path) < 2:
        return None

    players = {me.id: me, opponent.id: opponent}
    for wall in blocking_walls(opponent_path[0], opponent_path[1], me.id):
        if is_legal_placement(wall, walls, players, board_size):
            return PlaceWallAction.from_wall(wall, BLOCK_YOUR_PATH)
    return None


def _hard(
    me: Player,
    opponent: Player,
    walls: Sequence[Wall],
    my_path: Optional[list[Position]],
    opponent_path: Optional[list[Position]],
    board_size: int,
) -> Optional[PlaceWallAction]:
    """Best scoring wall along the first steps of the opponent's path, if building it beats moving."""
    if me.walls_left <= 0 or opponent_path is None or len(opponent_path) < 2:
        return None

    my_length = path_length(my_path)
    opponent_length = path_length(opponent_path)
    players = {me.id: me, opponent.id: opponent}

    best_wall: Optional[Wall] = None
    best_score = float("-inf")
    seen: list[Wall] = []
    edges = list(zip(opponent_path, opponent_path[1:]))[:HARD_EDGES_CONSIDERED]
    for p1, p2 in edges:
        for wall in blocking_walls(p1, p2, me.id):
            if wall in seen:
                continue
            seen.append(wall)
            if not is_legal_placement(wall, walls, players, board_size):
                continue
            score = score_wall(
                wall, me, opponent, walls, my_length, opponent_length, board_size
            )
            if score is not None and score > best_score:
                best_wall, best_score = wall, score

    if best_wall is None:
        return None

    is_losing_or_tied = my_length >= opponent_length
    worth_it = best_score > 0 if is_losing_or_tied else best_score >= DECISIVE_BLOCK_SCORE
    logger.debug(
        f"Best wall {best_wall} scores {best_score} (me: {my_length}, opponent: {opponent_length})"
    )
    if not worth_it:
        return None
    return PlaceWallAction.from_wall(best_wall, BLOCK_YOUR_PATH)
