"""
Wall placement rules (Wall Validator)

Checks short-circuit on the first failure, cheapest first:

1. owner still has walls left
2. wall lies strictly inside the board (never on the outer edge)
3. no collision with an existing wall: same groove, overlapping along the same line, or crossing ("+")
4. after (hypothetically) inserting the wall, every player can still reach its goal row

Nothing gets committed here. Appending the wall / decrementing wallsLeft happens in the reconciler.
"""

from enum import StrEnum
from typing import Mapping, Optional, Sequence

from src.core.config import BOARD_SIZE
from src.quoridor.pathfinding import has_path
from src.quoridor.snapshot import Player
from src.quoridor.walls import Wall


class WallRejection(StrEnum):
    """Why a wall was rejected. The UI picks its message from these."""

    NO_WALLS_LEFT = "no walls left"
    OUT_OF_BOUNDS = "out of bounds"
    COLLISION = "collides with an existing wall"
    ENCLOSES_PLAYER = "would fully enclose a player"


def is_within_grooves(wall: Wall, board_size: int = BOARD_SIZE) -> bool:
    """
    Horizontal: r in [1, N-1], c in [0, N-2]
    Vertical:   r in [0, N-2], c in [1, N-1]
    """
    if wall.is_horizontal:
        return 1 <= wall.row <= board_size - 1 and 0 <= wall.col <= board_size - 2
    return 0 <= wall.row <= board_size - 2 and 1 <= wall.col <= board_size - 1


def collides(wall: Wall, existing: Wall) -> bool:
    """Same groove, overlap along one line, or a perpendicular '+' crossing."""
    if wall.same_groove(existing):
        return True

    if wall.orientation == existing.orientation:
        if wall.is_horizontal:
            return wall.row == existing.row and abs(wall.col - existing.col) < 2
        return wall.col == existing.col and abs(wall.row - existing.row) < 2

    # crossing: both walls share their midpoint
    horizontal, vertical = (wall, existing) if wall.is_horizontal else (existing, wall)
    return vertical.row == horizontal.row - 1 and vertical.col == horizontal.col + 1


def placement_rejection(
    wall: Wall,
    walls: Sequence[Wall],
    players: Mapping[int, Player],
    board_size: int = BOARD_SIZE,
) -> Optional[WallRejection]:
    """The first rule the wall breaks, or None if the placement is legal."""
    owner = players.get(wall.owner_id) if wall.owner_id is not None else None
    if owner is None or owner.walls_left <= 0:
        return WallRejection.NO_WALLS_LEFT

    if not is_within_grooves(wall, board_size):
        return WallRejection.OUT_OF_BOUNDS

    if any(collides(wall, existing) for existing in walls):
        return WallRejection.COLLISION

    # topological check: pawns are ignored on purpose
    new_walls = [*walls, wall]
    for player in players.values():
        if not has_path(player.position, player.goal_row, new_walls, board_size):
            return WallRejection.ENCLOSES_PLAYER

    return None


def is_legal_placement(
    wall: Wall,
    walls: Sequence[Wall],
    players: Mapping[int, Player],
    board_size: int = BOARD_SIZE,
) -> bool:
    return placement_rejection(wall, walls, players, board_size) is None
