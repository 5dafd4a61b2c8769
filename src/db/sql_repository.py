"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from copy import deepcopy
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import GameModel
from src.core.shared_types import Phase
from src.db.schema import DBGame

logger = logging.getLogger(__name__)


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(id=new_id)
        self._copy_into(game_db, game)
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        logger.debug(f"Stored new game {new_id}")
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        self._copy_into(game_db, game)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def list_open_games(self) -> list[tuple[UUID, GameModel]]:
        """Games still waiting for a second player, oldest first."""
        query = (
            select(DBGame)
            .where(DBGame.status == Phase.AWAITING_OPPONENT.value)
            .order_by(DBGame.created_at)
        )
        return [(game_db.id, self._to_model(game_db)) for game_db in self.db.scalars(query)]

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _copy_into(self, game_db: DBGame, game: GameModel) -> None:
        # JSON columns only notice re-assignment, never in-place mutation: always hand over fresh copies
        game_db.config = deepcopy(game.config)
        game_db.players = deepcopy(game.players)
        game_db.walls = deepcopy(game.walls)
        game_db.current_player_id = game.current_player_id
        game_db.winner_id = game.winner_id
        game_db.game_clock_seconds = game.game_clock_seconds
        game_db.turn_clock_seconds = game.turn_clock_seconds
        game_db.registered_players = dict(game.registered_players)
        game_db.status = game.status
        game_db.end_reason = game.end_reason
        game_db.history = deepcopy(game.history)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            config=deepcopy(game_db.config),
            players=deepcopy(game_db.players),
            walls=deepcopy(game_db.walls),
            current_player_id=game_db.current_player_id,
            winner_id=game_db.winner_id,
            game_clock_seconds=game_db.game_clock_seconds,
            turn_clock_seconds=game_db.turn_clock_seconds,
            registered_players=dict(game_db.registered_players),
            status=game_db.status,
            end_reason=game_db.end_reason,
            history=deepcopy(game_db.history),
        )
