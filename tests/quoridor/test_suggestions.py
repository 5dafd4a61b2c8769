"""Unit tests for src/quoridor/suggestions.py"""

import pytest

from src.core.shared_types import Orientation
from src.quoridor.actions import MoveAction, PlaceWallAction
from src.quoridor.position import Position
from src.quoridor.suggestions import InvalidSuggestion, Suggested, parse_suggestion


def test_move_suggestion() -> None:
    result = parse_suggestion(
        {"action": "MOVE", "position": {"r": 1, "c": 4}, "reasoning": "Heading down."}
    )
    assert result == Suggested(MoveAction(Position(1, 4)))
    assert isinstance(result, Suggested)
    assert result.action.rationale == "Heading down."


def test_wall_suggestion() -> None:
    result = parse_suggestion(
        {"action": "PLACE_WALL", "position": {"r": 7, "c": 4}, "orientation": "vertical"}
    )
    assert result == Suggested(PlaceWallAction(7, 4, Orientation.VERTICAL))


@pytest.mark.parametrize(
    "payload",
    [
        {"action": "PLACE_WALL", "position": {"r": 7, "c": 4}},  # walls need an orientation
        {"action": "TIMEOUT", "position": {"r": 7, "c": 4}},  # a suggestion is a move or a wall
        {"action": "MOVE"},
        {"action": "MOVE", "position": {"r": "up", "c": 4}},
        {"action": "PLACE_WALL", "position": {"r": 7, "c": 4}, "orientation": "diagonal"},
        "MOVE to e4",
        None,
    ],
)
def test_invalid_suggestions(payload: object) -> None:
    assert isinstance(parse_suggestion(payload), InvalidSuggestion)
