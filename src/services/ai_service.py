"""Playing the AI side of a game: local heuristics, or a remote suggestion that gets re-validated with a local fallback."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from src.core.settings import settings
from src.core.shared_types import ActionType, AiBackend, Difficulty
from src.quoridor.actions import Action, PassAction
from src.quoridor.ai import choose_ai_action, fallback_action
from src.quoridor.reconciler import rejection_reason
from src.quoridor.snapshot import GameSnapshot
from src.quoridor.suggestions import (
    InvalidSuggestion,
    MoveSuggestionService,
    NetworkFailure,
    RateLimited,
    Suggested,
    SuggestionResult,
)
from src.quoridor.turn_controller import TurnController

logger = logging.getLogger(__name__)

RATE_LIMITED_NOTICE = "The remote AI is receiving too many requests. Consider switching to the local AI."
TRAPPED_NOTICE = "AI is trapped and must skip its turn."


@dataclass(frozen=True)
class AiTurnOutcome:
    """The action to commit, plus anything the UI should tell the user about how it was chosen"""

    action: Action
    notice: Optional[str] = None
    suggest_local_ai: bool = False


class AiTurnService:
    def __init__(
        self,
        suggestion_service: Optional[MoveSuggestionService] = None,
        delay_seconds: Optional[float] = None,
    ) -> None:
        self.suggestion_service = suggestion_service
        self.delay_seconds = (
            settings.ai_move_delay_seconds if delay_seconds is None else delay_seconds
        )

    async def choose_action(
        self,
        snapshot: GameSnapshot,
        ai_player_id: int,
        difficulty: Difficulty,
        backend: AiBackend = AiBackend.LOCAL,
    ) -> AiTurnOutcome:
        """
        Pick the AI's action. Never fails: whatever goes wrong remotely, a legal local action comes back.
        """
        # pacing only, the answer does not depend on it
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        if backend == AiBackend.LOCAL:
            me = snapshot.player(ai_player_id)
            opponent = snapshot.opponent_of(ai_player_id)
            action = choose_ai_action(
                me, opponent, snapshot.walls, difficulty, snapshot.board_size
            )
            return AiTurnOutcome(action)

        result = await self._ask_for_suggestion(snapshot, ai_player_id, difficulty)
        match result:
            case Suggested(action=action):
                if action.type not in (ActionType.MOVE, ActionType.PLACE_WALL):
                    return self._fallback(
                        snapshot,
                        ai_player_id,
                        f"AI returned an unknown action type: {action.type!r}.",
                    )
                reason = rejection_reason(snapshot, action, ai_player_id)
                if reason is not None:
                    return self._fallback(
                        snapshot,
                        ai_player_id,
                        f"AI suggested an invalid {action.type} ({reason}). Making a default move.",
                    )
                return AiTurnOutcome(action)
            case RateLimited():
                return self._fallback(
                    snapshot, ai_player_id, RATE_LIMITED_NOTICE, suggest_local_ai=True
                )
            case InvalidSuggestion(reason=reason):
                return self._fallback(snapshot, ai_player_id, f"{reason} Making a default move.")
            case NetworkFailure(reason=reason):
                return self._fallback(
                    snapshot,
                    ai_player_id,
                    f"Could not reach the remote AI ({reason}). Making a default move.",
                )

    async def play_turn(
        self,
        controller: TurnController,
        ai_player_id: int,
        difficulty: Difficulty,
        backend: AiBackend = AiBackend.LOCAL,
    ) -> Optional[AiTurnOutcome]:
        """Choose and commit the AI's action. None when it is not the AI's turn (nothing happens)."""
        snapshot = controller.snapshot
        if snapshot is None or snapshot.is_terminal or snapshot.current_player_id != ai_player_id:
            return None

        outcome = await self.choose_action(snapshot, ai_player_id, difficulty, backend)
        controller.submit(outcome.action, ai_player_id)
        return outcome

    # -- Internal helpers --
    async def _ask_for_suggestion(
        self, snapshot: GameSnapshot, ai_player_id: int, difficulty: Difficulty
    ) -> SuggestionResult:
        if self.suggestion_service is None:
            return NetworkFailure("no remote AI configured")
        try:
            return await self.suggestion_service.suggest(
                snapshot.players, ai_player_id, snapshot.walls, difficulty
            )
        except Exception as exc:
            # the transport should have reported a typed failure; never let it stall the turn
            logger.exception("Move suggestion service raised instead of reporting a failure")
            return NetworkFailure(str(exc) or type(exc).__name__)

    def _fallback(
        self,
        snapshot: GameSnapshot,
        ai_player_id: int,
        notice: str,
        suggest_local_ai: bool = False,
    ) -> AiTurnOutcome:
        """Deterministic local move: first step of the tactical path, or pass when trapped."""
        logger.warning(f"Falling back to the local move for player {ai_player_id}: {notice}")
        me = snapshot.player(ai_player_id)
        opponent = snapshot.opponent_of(ai_player_id)
        action = fallback_action(me, opponent, snapshot.walls, snapshot.board_size)
        if isinstance(action, PassAction):
            notice = f"{notice} {TRAPPED_NOTICE}"
        return AiTurnOutcome(action, notice, suggest_local_ai)
