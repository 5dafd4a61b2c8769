"""
Path Reachability Engine: breadth-first search from a cell to a goal row.

Two modes:

* TOPOLOGICAL: walls only. Pawns move, so they must never be used to justify whether a wall is legal.
* TACTICAL: walls + the opponent's pawn as a jumpable obstacle. The route a real game would take (AI heuristics, fallback moves).
"""

import math
from collections import deque
from enum import Enum, auto
from typing import Optional, Sequence

from src.core.config import BOARD_SIZE
from src.quoridor.moves import step_destinations
from src.quoridor.position import Position
from src.quoridor.walls import Wall


class PathMode(Enum):
    TOPOLOGICAL = auto()
    TACTICAL = auto()


def find_path(
    start: Position,
    goal_row: int,
    walls: Sequence[Wall],
    mode: PathMode = PathMode.TOPOLOGICAL,
    obstacle_pos: Optional[Position] = None,
    board_size: int = BOARD_SIZE,
) -> Optional[list[Position]]:
    """
    Shortest route from `start` to any cell on `goal_row`, both ends included.
    ---

    BFS visits cells by increasing hop count and never revisits, so the first path to reach the goal row is a shortest one.
    Ties are broken by discovery order (neighbors are expanded up, down, left, right).
    Returns None if the goal row cannot be reached.
    """
    obstacle = obstacle_pos if mode == PathMode.TACTICAL else None

    came_from: dict[Position, Optional[Position]] = {start: None}
    queue: deque[Position] = deque([start])
    while queue:
        current = queue.popleft()
        if current.row == goal_row:
            return _reconstruct(came_from, current)

        for neighbor in step_destinations(current, walls, obstacle, board_size):
            if neighbor in came_from:
                continue
            came_from[neighbor] = current
            queue.append(neighbor)
    return None


def path_length(path: Optional[Sequence[Position]]) -> float:
    """Number of plies along the path. No path at all counts as infinitely long."""
    if path is None:
        return math.inf
    return len(path) - 1


def has_path(
    start: Position,
    goal_row: int,
    walls: Sequence[Wall],
    board_size: int = BOARD_SIZE,
) -> bool:
    """Convenience method for the topological check used when validating walls"""
    return find_path(start, goal_row, walls, PathMode.TOPOLOGICAL, None, board_size) is not None


def _reconstruct(
    came_from: dict[Position, Optional[Position]], end: Position
) -> list[Position]:
    path: list[Position] = []
    cell: Optional[Position] = end
    while cell is not None:
        path.append(cell)
        cell = came_from[cell]
    path.reverse()
    return path
