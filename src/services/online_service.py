"""Orchestration of an online game for one client: matchmaking/joining with timeouts, local turn-gate, publish/subscribe."""

import asyncio
import logging
from typing import Optional

from src.core.config import GameConfig
from src.core.models import GameModel
from src.core.settings import settings
from src.core.shared_types import Phase
from src.online.channel import GameChannel, GameId, Unsubscribe
from src.quoridor.actions import Action
from src.quoridor.turn_controller import TurnController

logger = logging.getLogger(__name__)


class OnlineSession:
    """
    One client's view of an online game.
    ----

    Each client keeps its own copy of the game. A local action goes through the local turn-gate first,
    only then the full next state gets published. Received states replace the local copy.
    """

    def __init__(
        self,
        channel: GameChannel,
        config: GameConfig,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self.channel = channel
        self.controller = TurnController(config)
        self.timeout_seconds = (
            settings.matchmaking_timeout_seconds
            if timeout_seconds is None
            else timeout_seconds
        )
        self.game_id: Optional[GameId] = None
        self.seat: Optional[int] = None
        self.notice: Optional[str] = None  # user visible message of the last failed flow
        self._unsubscribe: Optional[Unsubscribe] = None
        self._started: Optional[asyncio.Event] = None

    # -- Flows --
    async def host(self, player: str) -> bool:
        """Create a game and wait (bounded) for an opponent to join."""
        self.notice = None
        self.controller.await_opponent()
        self._started = asyncio.Event()
        self.game_id = self.channel.create(player, self.controller.config)
        self.seat = 1
        self._subscribe(self.game_id)
        try:
            await asyncio.wait_for(self._started.wait(), self.timeout_seconds)
        except TimeoutError:
            self._abort("No opponent joined in time.")
            return False
        return True

    async def join(self, game_id: GameId, player: str) -> bool:
        """Take the free seat of an existing game, bounded by the matchmaking timeout."""
        self.notice = None
        try:
            joined = await asyncio.wait_for(
                self.channel.join(game_id, player), self.timeout_seconds
            )
        except TimeoutError:
            self._abort(f"Could not join game {game_id} in time.")
            return False
        if joined is None:
            self._abort(f"Could not join game {game_id}.")
            return False

        self.controller.adopt(joined)
        self.game_id = game_id
        self.seat = self.controller.seat_of(player)
        self._subscribe(game_id)
        return True

    async def find_match(self, player: str) -> bool:
        """Anonymous pairing, bounded by the matchmaking timeout."""
        self.notice = None
        self.controller.await_opponent()
        self._started = asyncio.Event()
        matched: list[tuple[GameId, int]] = []

        def on_matched(game_id: GameId, seat: int) -> None:
            matched.append((game_id, seat))
            if self._started is not None:
                self._started.set()

        self.channel.find_match(player, self.controller.config, on_matched)
        try:
            await asyncio.wait_for(self._started.wait(), self.timeout_seconds)
        except TimeoutError:
            self.channel.cancel_find_match()
            self._abort("No opponent found in time.")
            return False

        self.game_id, self.seat = matched[0]
        self._subscribe(self.game_id)
        return True

    def leave(self) -> None:
        if self.game_id is not None:
            self.channel.leave(self.game_id)
        self._release()
        self.controller.return_to_menu()
        self.game_id = None
        self.seat = None

    # -- Playing --
    def submit(self, action: Action) -> bool:
        """Apply a local action (only accepted for our own seat while it holds the turn), then publish the next state."""
        if self.game_id is None or self.seat is None:
            return False
        if not self.controller.submit(action, self.seat):
            return False
        self.channel.publish(self.game_id, self.controller.to_model())
        return True

    def tick(self, seconds: int = 1) -> Optional[Action]:
        """
        Advance the local clocks. Only the client holding the turn reports (and publishes) its own timeout.

        NOTE there is no independent time keeper: a disconnected client holding the turn never reports it.
        """
        snapshot = self.controller.snapshot
        holds_turn = snapshot is not None and snapshot.current_player_id == self.seat
        timeout = self.controller.tick(seconds, report_timeout=holds_turn)
        if timeout is not None and self.game_id is not None:
            self.channel.publish(self.game_id, self.controller.to_model())
        return timeout

    # -- Internal helpers --
    def _on_update(self, game: GameModel) -> None:
        self.controller.adopt(game)
        if self.controller.phase != Phase.AWAITING_OPPONENT and self._started is not None:
            self._started.set()

    def _subscribe(self, game_id: GameId) -> None:
        self._release()
        self._unsubscribe = self.channel.subscribe(game_id, self._on_update)

    def _release(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _abort(self, message: str) -> None:
        """Give up on the pending online flow: release the subscription, back to the menu, tell the user."""
        logger.warning(f"Online flow aborted: {message}")
        if self.game_id is not None:
            self.channel.leave(self.game_id)
        self._release()
        self.controller.return_to_menu()
        self.game_id = None
        self.seat = None
        self._started = None
        self.notice = message
