"""Protocol repository for stored Quoridor games (SQLAlchemy implementation in sql_repository.py)"""

from typing import Protocol
from uuid import UUID

from src.core.models import GameModel


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Replace the stored state of a game after a ply / a join."""
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        ...

    def list_open_games(self) -> list[tuple[UUID, GameModel]]:
        """Games still waiting for a second player, oldest first."""
        ...
