"""In-process implementation of the GameChannel. One InMemoryGameStore plays the server, every client gets its own InMemoryGameChannel."""

import logging
import random
from copy import deepcopy
from dataclasses import dataclass
from typing import Optional
from uuid import uuid4

from src.core.config import GameConfig
from src.core.exceptions import ChannelError, GameStateError
from src.core.models import GameModel
from src.core.shared_types import Phase
from src.online.channel import GameId, MatchedCallback, Unsubscribe, UpdateCallback
from src.quoridor.turn_controller import TurnController

logger = logging.getLogger(__name__)


@dataclass
class PendingMatch:
    player: str
    config: GameConfig
    on_matched: MatchedCallback


class InMemoryGameStore:
    """Holds the authoritative copy of every game and fans out updates. Everything handed out is a deep copy."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._games: dict[GameId, GameModel] = {}
        self._subscribers: dict[GameId, list[UpdateCallback]] = {}
        self._waiting: list[PendingMatch] = []
        self._rng = rng

    def create_game(self, initial_player: str, config: GameConfig) -> GameId:
        controller = TurnController(config)
        controller.open_for_opponent(initial_player, self._rng)
        game_id = str(uuid4())
        self._games[game_id] = controller.to_model()
        self._subscribers[game_id] = []
        logger.info(f"Created game {game_id} for {initial_player}")
        return game_id

    def join_game(self, game_id: GameId, player: str) -> Optional[GameModel]:
        stored = self._games.get(game_id)
        if stored is None:
            return None

        controller = TurnController.from_model(stored)
        try:
            controller.register_player(player)
        except GameStateError as exc:
            logger.info(f"{player} cannot join game {game_id}: {exc}")
            return None

        joined = controller.to_model()
        self.store(game_id, joined)
        return deepcopy(joined)

    def get_game(self, game_id: GameId) -> Optional[GameModel]:
        stored = self._games.get(game_id)
        return deepcopy(stored) if stored is not None else None

    def store(self, game_id: GameId, game: GameModel) -> None:
        if game_id not in self._games:
            raise ChannelError(f"Game with {game_id=} not found.")
        self._games[game_id] = deepcopy(game)
        for callback in list(self._subscribers[game_id]):
            callback(deepcopy(game))

    def add_subscriber(self, game_id: GameId, callback: UpdateCallback) -> None:
        if game_id not in self._games:
            raise ChannelError(f"Game with {game_id=} not found.")
        self._subscribers[game_id].append(callback)

    def remove_subscriber(self, game_id: GameId, callback: UpdateCallback) -> None:
        subscribers = self._subscribers.get(game_id, [])
        if callback in subscribers:
            subscribers.remove(callback)

    def discard_if_unstarted(self, game_id: GameId) -> None:
        """Nobody will ever join a game whose host left before it started"""
        stored = self._games.get(game_id)
        if stored is not None and stored.status == Phase.AWAITING_OPPONENT:
            del self._games[game_id]
            del self._subscribers[game_id]

    def enqueue(self, pending: PendingMatch) -> Optional[PendingMatch]:
        """Pair with the first waiting player using the same config, or wait in line. Returns the opponent when paired."""
        for waiting in self._waiting:
            if waiting.config == pending.config and waiting.player != pending.player:
                self._waiting.remove(waiting)
                return waiting
        self._waiting.append(pending)
        return None

    def dequeue(self, pending: PendingMatch) -> None:
        if pending in self._waiting:
            self._waiting.remove(pending)


class InMemoryGameChannel:
    """GameChannel for a single client"""

    def __init__(self, store: InMemoryGameStore) -> None:
        self.store = store
        self._subscriptions: dict[GameId, list[UpdateCallback]] = {}
        self._pending: Optional[PendingMatch] = None

    def create(self, initial_player: str, config: GameConfig) -> GameId:
        return self.store.create_game(initial_player, config)

    async def join(self, game_id: GameId, player: str) -> Optional[GameModel]:
        return self.store.join_game(game_id, player)

    def subscribe(self, game_id: GameId, on_update: UpdateCallback) -> Unsubscribe:
        """The current state is delivered right away, then every published state."""
        self.store.add_subscriber(game_id, on_update)
        self._subscriptions.setdefault(game_id, []).append(on_update)

        def unsubscribe() -> None:
            self.store.remove_subscriber(game_id, on_update)
            callbacks = self._subscriptions.get(game_id, [])
            if on_update in callbacks:
                callbacks.remove(on_update)

        current = self.store.get_game(game_id)
        if current is not None:
            on_update(current)
        return unsubscribe

    def publish(self, game_id: GameId, game: GameModel) -> None:
        self.store.store(game_id, game)

    def leave(self, game_id: GameId) -> None:
        for callback in self._subscriptions.pop(game_id, []):
            self.store.remove_subscriber(game_id, callback)
        self.store.discard_if_unstarted(game_id)

    def find_match(
        self, player: str, config: GameConfig, on_matched: MatchedCallback
    ) -> None:
        pending = PendingMatch(player, config, on_matched)
        opponent = self.store.enqueue(pending)
        if opponent is None:
            self._pending = pending
            return

        # whoever waited longest hosts (and moves first)
        game_id = self.store.create_game(opponent.player, config)
        self.store.join_game(game_id, player)
        opponent.on_matched(game_id, 1)
        on_matched(game_id, 2)

    def cancel_find_match(self) -> None:
        if self._pending is not None:
            self.store.dequeue(self._pending)
            self._pending = None
