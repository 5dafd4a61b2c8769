"""
The actions a player can take in a ply, as a closed tagged union.

Produced by human input, the AI engine or a timeout observer. Consumed only by the reconciler.
Every action may carry a short human readable rationale (shown next to AI moves). It is cosmetic: not part of equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.core.exceptions import InvalidActionError
from src.core.shared_types import ActionType, Orientation
from src.quoridor.position import Position
from src.quoridor.walls import Wall


@dataclass(frozen=True)
class MoveAction:
    to: Position
    rationale: str = field(default="", compare=False)

    @property
    def type(self) -> ActionType:
        return ActionType.MOVE


@dataclass(frozen=True)
class PlaceWallAction:
    """The wall without its owner: whoever gets to apply the action owns it."""

    row: int
    col: int
    orientation: Orientation
    rationale: str = field(default="", compare=False)

    @property
    def type(self) -> ActionType:
        return ActionType.PLACE_WALL

    @classmethod
    def from_wall(cls, wall: Wall, rationale: str = "") -> PlaceWallAction:
        return cls(wall.row, wall.col, wall.orientation, rationale)

    def as_wall(self, owner_id: int) -> Wall:
        return Wall(self.row, self.col, self.orientation, owner_id)


@dataclass(frozen=True)
class TimeoutAction:
    rationale: str = field(default="", compare=False)

    @property
    def type(self) -> ActionType:
        return ActionType.TIMEOUT


@dataclass(frozen=True)
class PassAction:
    rationale: str = field(default="", compare=False)

    @property
    def type(self) -> ActionType:
        return ActionType.PASS


Action = MoveAction | PlaceWallAction | TimeoutAction | PassAction


def action_to_dict(action: Action) -> dict[str, Any]:
    """
    Wire format
    ---

    * {"action": "MOVE", "position": {"r": 7, "c": 4}}
    * {"action": "PLACE_WALL", "position": {"r": 3, "c": 4}, "orientation": "horizontal"}
    * {"action": "TIMEOUT"} / {"action": "PASS"}

    plus "reasoning" when a rationale is attached.
    """
    data: dict[str, Any] = {"action": action.type.value}
    match action:
        case MoveAction(to=to):
            data["position"] = to.to_dict()
        case PlaceWallAction(row=row, col=col, orientation=orientation):
            data["position"] = {"r": row, "c": col}
            data["orientation"] = orientation.value
        case TimeoutAction() | PassAction():
            pass
    if action.rationale:
        data["reasoning"] = action.rationale
    return data


def action_from_dict(data: dict[str, Any]) -> Action:
    """Reverse of action_to_dict. Raises InvalidActionError on anything malformed."""
    try:
        action_type = ActionType(data["action"])
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidActionError(f"Unknown action in {data!r}") from exc

    rationale = str(data.get("reasoning") or "")
    match action_type:
        case ActionType.MOVE:
            return MoveAction(_position(data), rationale)
        case ActionType.PLACE_WALL:
            position = _position(data)
            if not data.get("orientation"):
                raise InvalidActionError(
                    f"Wall placement without an orientation: {data!r}"
                )
            try:
                orientation = Orientation(data["orientation"])
            except ValueError as exc:
                raise InvalidActionError(
                    f"Unknown wall orientation: {data['orientation']!r}"
                ) from exc
            return PlaceWallAction(position.row, position.col, orientation, rationale)
        case ActionType.TIMEOUT:
            return TimeoutAction(rationale)
        case ActionType.PASS:
            return PassAction(rationale)


def _position(data: dict[str, Any]) -> Position:
    if "position" not in data:
        raise InvalidActionError(f"Action without a position: {data!r}")
    return Position.from_dict(data["position"])
