"""Unit tests for src/services/quoridor_service.py"""

from typing import Generator
from uuid import UUID, uuid4

import pytest

from src.api.models import (
    AiTurnRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    JoinGameRequest,
    LegalMovesRequest,
    MoveRequest,
    PlaceWallRequest,
    PositionSchema,
    TimeoutRequest,
    WallSchema,
)
from src.core.config import GameConfig
from src.core.exceptions import (
    GameError,
    GameStateError,
    IllegalMoveError,
    IllegalWallError,
    RepositoryError,
    WallCollisionError,
    WallOutOfBoundsError,
)
from src.core.models import GameModel
from src.core.shared_types import AiBackend, Difficulty, EndReason, GameMode, Orientation, Phase
from src.quoridor.ai import MOVE_ALONG_PATH
from src.services.quoridor_service import QuoridorService

HOST = "Mocker M. Mockerson"
GUEST = "Mock McMock"


# --- MOCK DEPENDENCIES ----
class MockRepository:
    """Mock the GameRepository using a dictionary of game models."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        game_id = uuid4()
        self._games[game_id] = game
        return game, game_id

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        return self._games.get(game_id)

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        if game_id not in self._games:
            return None
        self._games[game_id] = game
        return game

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        return self._games.pop(game_id, None)

    def list_open_games(self) -> list[tuple[UUID, GameModel]]:
        """Games still waiting for a second player (insertion order)."""
        return [
            (game_id, game)
            for game_id, game in self._games.items()
            if game.status == Phase.AWAITING_OPPONENT
        ]

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._games.clear()


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository) -> QuoridorService:
    return QuoridorService(mock_repository)


@pytest.fixture
def running_game(service: QuoridorService) -> UUID:
    """Two human players, both seated: HOST (seat 1) is to move."""
    created = service.create_new_game(CreateGameRequest(player_name=HOST))
    service.join_game(JoinGameRequest(game_id=created.game_id, player_name=GUEST))
    return created.game_id


# --- SERVICE - CREATE NEW GAME ----
def test_create_a_new_game(service: QuoridorService, mock_repository: MockRepository) -> None:
    """Check that new game is created, persisted in repo, and return has the appropriate information."""
    response = service.create_new_game(CreateGameRequest(player_name=HOST))

    # Check response structure
    assert isinstance(response, GameResponse)
    assert isinstance(response.game_id, UUID)

    # Check response data
    assert response.status == Phase.AWAITING_OPPONENT
    assert response.players == {"1": HOST}
    assert response.pawns == {
        "1": PositionSchema(row=8, col=4),
        "2": PositionSchema(row=0, col=4),
    }
    assert response.walls_left == {"1": 10, "2": 10}
    assert response.walls == []
    assert response.current_player_id == 1
    assert response.winner_id is None
    assert response.move_history == []

    # Check persisted data
    stored_game = mock_repository.get_game(response.game_id)
    assert stored_game is not None
    assert stored_game.status == Phase.AWAITING_OPPONENT
    assert stored_game.registered_players == {"1": HOST}


def test_create_game_against_the_computer(service: QuoridorService) -> None:
    """Both seats are known, the game starts right away."""
    config = GameConfig(mode=GameMode.PVC, difficulty=Difficulty.HARD)
    response = service.create_new_game(CreateGameRequest(player_name=HOST, config=config))
    assert response.status == Phase.PLAYING
    assert response.players == {"1": HOST, "2": "Local AI"}


def test_create_game_with_custom_config(service: QuoridorService) -> None:
    config = GameConfig(board_size=7, walls_per_player=5)
    response = service.create_new_game(CreateGameRequest(player_name=HOST, config=config))
    assert response.pawns["1"] == PositionSchema(row=6, col=3)
    assert response.walls_left == {"1": 5, "2": 5}


# --- SERVICE - JOIN GAME ----
def test_second_player_joins_game(service: QuoridorService, mock_repository: MockRepository) -> None:
    created = service.create_new_game(CreateGameRequest(player_name=HOST))
    response = service.join_game(JoinGameRequest(game_id=created.game_id, player_name=GUEST))

    assert response.game_id == created.game_id
    assert response.status == Phase.PLAYING
    assert response.players == {"1": HOST, "2": GUEST}

    stored_game = mock_repository.get_game(created.game_id)
    assert stored_game is not None
    assert stored_game.status == Phase.PLAYING


def test_cannot_join_unknown_game(service: QuoridorService) -> None:
    with pytest.raises(RepositoryError):
        _ = service.join_game(JoinGameRequest(game_id=uuid4(), player_name=GUEST))


def test_cannot_join_with_the_host_name(service: QuoridorService, mock_repository: MockRepository) -> None:
    created = service.create_new_game(CreateGameRequest(player_name=HOST))
    with pytest.raises(GameStateError):
        _ = service.join_game(JoinGameRequest(game_id=created.game_id, player_name=HOST))

    stored_game = mock_repository.get_game(created.game_id)
    assert stored_game is not None
    assert stored_game.status == Phase.AWAITING_OPPONENT
    assert stored_game.registered_players == {"1": HOST}


def test_cannot_join_full_game(service: QuoridorService, running_game: UUID) -> None:
    with pytest.raises(GameStateError):
        _ = service.join_game(JoinGameRequest(game_id=running_game, player_name="third wheel"))


# --- SERVICE - GET GAME ----
def test_get_existing_game_state(service: QuoridorService, running_game: UUID) -> None:
    response = service.get_game_state(GetGameRequest(game_id=running_game))
    assert response.game_id == running_game
    assert response.players == {"1": HOST, "2": GUEST}


def test_attempt_to_find_unknown_game(service: QuoridorService) -> None:
    """Ensure exception is raised when trying to look up a game with an unknown ID."""
    with pytest.raises(GameError):
        _ = service.get_game_state(GetGameRequest(game_id=uuid4()))


# --- SERVICE - LEGAL MOVES ----
def test_legal_moves(service: QuoridorService, running_game: UUID) -> None:
    response = service.legal_moves(LegalMovesRequest(game_id=running_game, player_name=GUEST))
    assert response.player_id == 2
    assert response.legal_moves == [
        PositionSchema(row=1, col=4),
        PositionSchema(row=0, col=3),
        PositionSchema(row=0, col=5),
    ]


def test_legal_moves_before_game_started(service: QuoridorService) -> None:
    created = service.create_new_game(CreateGameRequest(player_name=HOST))
    with pytest.raises(GameStateError):
        _ = service.legal_moves(LegalMovesRequest(game_id=created.game_id, player_name=HOST))


# --- SERVICE - MOVES ----
def test_make_move(service: QuoridorService, running_game: UUID) -> None:
    response = service.make_move(MoveRequest(game_id=running_game, player_name=HOST, row=7, col=4))
    assert response.pawns["1"] == PositionSchema(row=7, col=4)
    assert response.current_player_id == 2
    assert response.move_history == [{"action": "MOVE", "position": {"r": 7, "c": 4}}]

    # persisted
    stored = service.get_game_state(GetGameRequest(game_id=running_game))
    assert stored == response


def test_move_out_of_turn_changes_nothing(service: QuoridorService, running_game: UUID) -> None:
    before = service.get_game_state(GetGameRequest(game_id=running_game))
    response = service.make_move(MoveRequest(game_id=running_game, player_name=GUEST, row=1, col=4))
    assert response == before


def test_illegal_move(service: QuoridorService, running_game: UUID) -> None:
    with pytest.raises(IllegalMoveError):
        _ = service.make_move(MoveRequest(game_id=running_game, player_name=HOST, row=6, col=4))


def test_move_by_a_stranger(service: QuoridorService, running_game: UUID) -> None:
    with pytest.raises(GameStateError):
        _ = service.make_move(MoveRequest(game_id=running_game, player_name="stranger", row=7, col=4))


def test_move_before_opponent_joined(service: QuoridorService) -> None:
    created = service.create_new_game(CreateGameRequest(player_name=HOST))
    with pytest.raises(GameStateError):
        _ = service.make_move(MoveRequest(game_id=created.game_id, player_name=HOST, row=7, col=4))


# --- SERVICE - WALLS ----
def test_place_wall(service: QuoridorService, running_game: UUID) -> None:
    response = service.place_wall(
        PlaceWallRequest(
            game_id=running_game,
            player_name=HOST,
            row=4,
            col=4,
            orientation=Orientation.HORIZONTAL,
        )
    )
    assert response.walls == [WallSchema(row=4, col=4, orientation=Orientation.HORIZONTAL, owner_id=1)]
    assert response.walls_left == {"1": 9, "2": 10}
    assert response.current_player_id == 2


def test_colliding_wall(service: QuoridorService, running_game: UUID) -> None:
    service.place_wall(
        PlaceWallRequest(game_id=running_game, player_name=HOST, row=4, col=4, orientation=Orientation.HORIZONTAL)
    )
    with pytest.raises(WallCollisionError):
        _ = service.place_wall(
            PlaceWallRequest(game_id=running_game, player_name=GUEST, row=4, col=5, orientation=Orientation.HORIZONTAL)
        )

    # nothing was stored, still the guest's turn
    state = service.get_game_state(GetGameRequest(game_id=running_game))
    assert len(state.walls) == 1
    assert state.current_player_id == 2


def test_wall_on_the_edge(service: QuoridorService, running_game: UUID) -> None:
    with pytest.raises(WallOutOfBoundsError):
        _ = service.place_wall(
            PlaceWallRequest(game_id=running_game, player_name=HOST, row=0, col=4, orientation=Orientation.HORIZONTAL)
        )


def test_wall_errors_share_a_base(service: QuoridorService, running_game: UUID) -> None:
    with pytest.raises(IllegalWallError):
        _ = service.place_wall(
            PlaceWallRequest(game_id=running_game, player_name=HOST, row=4, col=0, orientation=Orientation.VERTICAL)
        )


# --- SERVICE - TIMEOUT ----
def test_report_timeout(service: QuoridorService, running_game: UUID) -> None:
    response = service.report_timeout(TimeoutRequest(game_id=running_game, player_name=HOST))
    assert response.status == Phase.GAME_OVER
    assert response.winner_id == 2
    assert response.end_reason == EndReason.TIMEOUT
    assert response.last_rationale == "Ran out of time."

    with pytest.raises(GameStateError):
        _ = service.make_move(MoveRequest(game_id=running_game, player_name=GUEST, row=1, col=4))


def test_timeout_reported_by_the_waiting_player_is_ignored(service: QuoridorService, running_game: UUID) -> None:
    response = service.report_timeout(TimeoutRequest(game_id=running_game, player_name=GUEST))
    assert response.status == Phase.PLAYING
    assert response.winner_id is None


# --- SERVICE - AI TURN ----
def test_play_ai_turn(service: QuoridorService) -> None:
    config = GameConfig(mode=GameMode.PVC, difficulty=Difficulty.EASY)
    created = service.create_new_game(CreateGameRequest(player_name=HOST, config=config))

    # the human moves first: nothing to do for the AI yet
    waiting = service.play_ai_turn(AiTurnRequest(game_id=created.game_id))
    assert waiting == created

    service.make_move(MoveRequest(game_id=created.game_id, player_name=HOST, row=7, col=4))
    response = service.play_ai_turn(AiTurnRequest(game_id=created.game_id))
    assert response.pawns["2"] == PositionSchema(row=1, col=4)
    assert response.current_player_id == 1
    assert response.last_rationale == MOVE_ALONG_PATH


def test_no_ai_in_a_game_between_humans(service: QuoridorService, running_game: UUID) -> None:
    with pytest.raises(GameStateError):
        _ = service.play_ai_turn(AiTurnRequest(game_id=running_game))


def test_remote_ai_is_not_played_locally(service: QuoridorService) -> None:
    config = GameConfig(mode=GameMode.PVC, ai_backend=AiBackend.REMOTE)
    created = service.create_new_game(CreateGameRequest(player_name=HOST, config=config))
    assert created.players == {"1": HOST, "2": "Remote AI"}

    service.make_move(MoveRequest(game_id=created.game_id, player_name=HOST, row=7, col=4))
    with pytest.raises(GameStateError):
        _ = service.play_ai_turn(AiTurnRequest(game_id=created.game_id))
    unchanged = service.get_game_state(GetGameRequest(game_id=created.game_id))
    assert unchanged.current_player_id == 2
    assert unchanged.pawns["2"] == PositionSchema(row=0, col=4)


def test_player_cannot_take_the_ai_name(service: QuoridorService, mock_repository: MockRepository) -> None:
    config = GameConfig(mode=GameMode.PVC)
    with pytest.raises(GameStateError):
        _ = service.create_new_game(CreateGameRequest(player_name="Local AI", config=config))
    assert mock_repository._games == {}


# --- SERVICE - DELETE GAME ----
def test_delete_game(service: QuoridorService, running_game: UUID) -> None:
    service.delete_game(DeleteGameRequest(game_id=running_game))
    with pytest.raises(RepositoryError):
        _ = service.get_game_state(GetGameRequest(game_id=running_game))


# --- SERVICE - LOBBY ----
def test_list_open_games(service: QuoridorService, running_game: UUID) -> None:
    assert service.list_open_games().games == []

    first = service.create_new_game(CreateGameRequest(player_name="first"))
    second = service.create_new_game(CreateGameRequest(player_name="second"))
    service.create_new_game(
        CreateGameRequest(player_name="solo", config=GameConfig(mode=GameMode.PVC))
    )

    open_games = service.list_open_games().games
    assert [game.game_id for game in open_games] == [first.game_id, second.game_id]

    service.join_game(JoinGameRequest(game_id=first.game_id, player_name=GUEST))
    assert [game.game_id for game in service.list_open_games().games] == [second.game_id]
