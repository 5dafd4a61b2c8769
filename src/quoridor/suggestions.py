"""
Contract with a remote move-suggestion service (for instance an LLM asked to play the AI side).

The transport decides what went wrong and reports it as a typed result. Nobody sniffs error message text.
A suggestion is never trusted: the AI turn service re-validates it before committing anything.
"""

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional, Protocol, Sequence

from pydantic import BaseModel, ValidationError

from src.core.exceptions import InvalidActionError
from src.core.shared_types import Difficulty, Orientation
from src.quoridor.actions import Action, action_from_dict
from src.quoridor.snapshot import Player
from src.quoridor.walls import Wall


@dataclass(frozen=True)
class Suggested:
    action: Action


@dataclass(frozen=True)
class RateLimited:
    message: str = ""


@dataclass(frozen=True)
class InvalidSuggestion:
    reason: str


@dataclass(frozen=True)
class NetworkFailure:
    reason: str


SuggestionResult = Suggested | RateLimited | InvalidSuggestion | NetworkFailure


class MoveSuggestionService(Protocol):
    """Anything that can suggest the AI's next action"""

    async def suggest(
        self,
        players: Mapping[int, Player],
        ai_player_id: int,
        walls: Sequence[Wall],
        difficulty: Difficulty,
    ) -> SuggestionResult:
        """Suggested action, or why there is none."""
        ...


class SuggestedPosition(BaseModel):
    r: int
    c: int


class SuggestionPayload(BaseModel):
    """What a remote service is expected to answer with"""

    action: Literal["MOVE", "PLACE_WALL"]
    position: SuggestedPosition
    orientation: Optional[Orientation] = None
    reasoning: str = ""


def parse_suggestion(payload: Any) -> SuggestionResult:
    """Turn a raw answer of a suggestion service into a result (for use by transport implementations)."""
    try:
        suggestion = SuggestionPayload.model_validate(payload)
    except ValidationError as exc:
        return InvalidSuggestion(f"Malformed suggestion: {exc.error_count()} validation error(s)")

    try:
        action = action_from_dict(suggestion.model_dump(mode="json", exclude_none=True))
    except InvalidActionError as exc:
        return InvalidSuggestion(str(exc))
    return Suggested(action)
