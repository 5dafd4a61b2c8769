"""
Pawn movement rules (Move Resolver)

Key idea: a pawn steps to an orthogonal neighbor, unless a wall is in the way or the opponent stands there.
Standing next to the opponent turns that step into a jump:

* straight jump: land on the cell behind the opponent (if on the board and no wall behind the opponent)
* diagonal jump: ONLY when the straight jump is impossible, land on either side of the opponent instead

No recursion: a jump is resolved from the opponent's cell in a single step.
"""

from typing import Optional, Sequence

from src.core.config import BOARD_SIZE
from src.quoridor.position import Position
from src.quoridor.walls import Wall, is_move_blocked


def is_open_step(
    from_pos: Position, to_pos: Position, walls: Sequence[Wall], board_size: int
) -> bool:
    """A single orthogonal step that stays on the board and does not cross a wall"""
    return to_pos.is_within_bounds(board_size) and not is_move_blocked(
        from_pos, to_pos, walls
    )


def jump_destinations(
    pos: Position, opponent_pos: Position, walls: Sequence[Wall], board_size: int
) -> list[Position]:
    """Where can you land when jumping over the (orthogonally adjacent) opponent?"""
    dr = opponent_pos.row - pos.row
    dc = opponent_pos.col - pos.col

    # the reflection of pos through opponent_pos
    straight = opponent_pos.offset(dr, dc)
    if is_open_step(opponent_pos, straight, walls, board_size):
        return [straight]

    # perpendicular to the direction of travel
    if dr == 0:
        side_steps = [opponent_pos.offset(-1, 0), opponent_pos.offset(1, 0)]
    else:
        side_steps = [opponent_pos.offset(0, -1), opponent_pos.offset(0, 1)]
    return [
        cell
        for cell in side_steps
        if is_open_step(opponent_pos, cell, walls, board_size)
    ]


def step_destinations(
    pos: Position,
    walls: Sequence[Wall],
    obstacle: Optional[Position] = None,
    board_size: int = BOARD_SIZE,
) -> list[Position]:
    """
    Cells reachable in one ply.
    ---

    Without an obstacle this is just the open orthogonal neighbors. The obstacle (the opponent's pawn) can never be landed on,
    a neighbor occupied by it gets replaced by its jump destinations.
    Order follows the neighbor order: up, down, left, right.
    """
    destinations: list[Position] = []
    for neighbor in pos.neighbors():
        if not is_open_step(pos, neighbor, walls, board_size):
            continue

        if neighbor == obstacle:
            destinations.extend(jump_destinations(pos, neighbor, walls, board_size))
        else:
            destinations.append(neighbor)
    return destinations


def compute_legal_moves(
    pos: Position,
    walls: Sequence[Wall],
    opponent_pos: Position,
    board_size: int = BOARD_SIZE,
) -> list[Position]:
    """Legal destinations for the pawn on `pos`. No duplicates, deterministic order (used for tie-breaks downstream)."""
    return step_destinations(pos, walls, opponent_pos, board_size)
