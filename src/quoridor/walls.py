"""
Walls and the grooves they occupy.

A wall is a 2-cell long segment in the groove between cells:

* horizontal wall at (r, c): blocks vertical travel between rows r-1 and r, in columns c and c+1
* vertical wall at (r, c): blocks horizontal travel between columns c-1 and c, in rows r and r+1

So the coordinates of a wall name the cell just below (horizontal) / just right of (vertical) its first half.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from src.core.exceptions import InvalidActionError
from src.core.shared_types import Orientation
from src.quoridor.position import Position


@dataclass(frozen=True)
class Wall:
    row: int
    col: int
    orientation: Orientation
    owner_id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Wall:
        """Wire format: {"r": row, "c": col, "orientation": "horizontal"|"vertical", "playerId": owner}"""
        try:
            orientation = Orientation(data["orientation"])
            owner = data.get("playerId")
            return cls(
                row=int(data["r"]),
                col=int(data["c"]),
                orientation=orientation,
                owner_id=int(owner) if owner is not None else None,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidActionError(f"Cannot read a wall from {data!r}") from exc

    def to_dict(self) -> dict[str, Any]:
        return {
            "r": self.row,
            "c": self.col,
            "orientation": self.orientation.value,
            "playerId": self.owner_id,
        }

    @property
    def is_horizontal(self) -> bool:
        return self.orientation == Orientation.HORIZONTAL

    def same_groove(self, other: Wall) -> bool:
        """Owner does not matter for collisions"""
        return (self.row, self.col, self.orientation) == (
            other.row,
            other.col,
            other.orientation,
        )

    def with_owner(self, owner_id: int) -> Wall:
        return Wall(self.row, self.col, self.orientation, owner_id)


def is_move_blocked(from_pos: Position, to_pos: Position, walls: Iterable[Wall]) -> bool:
    """
    Is travel between two orthogonally adjacent cells blocked by a wall?
    ---

    Only a wall perpendicular to the travel direction can block it, and only if its groove straddles the boundary between both cells.
    """
    if from_pos.row == to_pos.row:
        # sideways travel: vertical walls on the boundary column, covering this row with either half
        boundary_col = max(from_pos.col, to_pos.col)
        return any(
            not wall.is_horizontal
            and wall.col == boundary_col
            and wall.row in (from_pos.row, from_pos.row - 1)
            for wall in walls
        )

    # up/down travel: horizontal walls on the boundary row, covering this column with either half
    boundary_row = max(from_pos.row, to_pos.row)
    return any(
        wall.is_horizontal
        and wall.row == boundary_row
        and wall.col in (from_pos.col, from_pos.col - 1)
        for wall in walls
    )
