"""
A cell on the board (Board Geometry)

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from src.core.config import BOARD_SIZE
from src.core.exceptions import InvalidActionError

Vector = tuple[int, int]

# Fixed neighbor order: up, down, left, right. Path search and AI tie-breaks depend on it.
ORTHOGONAL_DIRECTIONS: tuple[Vector, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


@dataclass(frozen=True)
class Position:
    row: int
    col: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Position:
        """Wire format: {"r": row, "c": col}"""
        try:
            return cls(int(data["r"]), int(data["c"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidActionError(f"Cannot read a position from {data!r}") from exc

    def to_dict(self) -> dict[str, int]:
        return {"r": self.row, "c": self.col}

    def is_within_bounds(self, board_size: int = BOARD_SIZE) -> bool:
        return 0 <= self.row < board_size and 0 <= self.col < board_size

    def offset(self, dr: int, dc: int) -> Position:
        return Position(self.row + dr, self.col + dc)

    def neighbors(self) -> list[Position]:
        """The four orthogonal neighbors (may lie off the board), in the fixed order up, down, left, right."""
        return [self.offset(dr, dc) for dr, dc in ORTHOGONAL_DIRECTIONS]

    def distance(self, other: Position) -> int:
        """Manhattan distance"""
        return abs(self.row - other.row) + abs(self.col - other.col)
