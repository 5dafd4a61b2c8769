"""Protocol for the shared game-state channel used in online play (implement with any pub/sub backend)."""

from typing import Callable, Optional, Protocol

from src.core.config import GameConfig
from src.core.models import GameModel

GameId = str
UpdateCallback = Callable[[GameModel], None]
MatchedCallback = Callable[[GameId, int], None]  # (game id, seat you got)
Unsubscribe = Callable[[], None]


class GameChannel(Protocol):
    """
    Message passing between clients.

    A client only ever publishes a full next snapshot (after passing the turn-gate locally) and receives the authoritative snapshot
    through its subscription. Nobody mutates shared state in place.
    """

    def create(self, initial_player: str, config: GameConfig) -> GameId:
        """Open a new game with the initial player on seat 1."""
        ...

    async def join(self, game_id: GameId, player: str) -> Optional[GameModel]:
        """Take the free seat. None if the game does not exist, is full, or the name is already seated."""
        ...

    def subscribe(self, game_id: GameId, on_update: UpdateCallback) -> Unsubscribe:
        """Receive every published state of the game until the returned callable is invoked."""
        ...

    def publish(self, game_id: GameId, game: GameModel) -> None:
        """Broadcast the next state of the game."""
        ...

    def leave(self, game_id: GameId) -> None:
        """This client leaves the game."""
        ...

    def find_match(
        self, player: str, config: GameConfig, on_matched: MatchedCallback
    ) -> None:
        """Anonymous pairing with another player looking for a game with the same config."""
        ...

    def cancel_find_match(self) -> None:
        """Stop looking for an opponent."""
        ...
