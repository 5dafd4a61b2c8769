"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from uuid import UUID

from src.api.models import (
    AiTurnRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    JoinGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    OpenGamesResponse,
    PlaceWallRequest,
    PositionSchema,
    TimeoutRequest,
    WallSchema,
)
from src.core.exceptions import (
    GameError,
    GameStateError,
    IllegalMoveError,
    NoWallsLeftError,
    RepositoryError,
    WallCollisionError,
    WallEnclosesPlayerError,
    WallOutOfBoundsError,
)
from src.core.models import GameModel
from src.core.shared_types import AiBackend, GameMode, Phase
from src.db.repository import GameRepository
from src.quoridor.actions import Action, MoveAction, PlaceWallAction, TimeoutAction
from src.quoridor.ai import choose_ai_action
from src.quoridor.position import Position
from src.quoridor.reconciler import ActionRejection, rejection_reason
from src.quoridor.turn_controller import TurnController
from src.quoridor.wall_validator import WallRejection

logger = logging.getLogger(__name__)

AI_SEAT = 2
AI_PLAYER_NAMES: dict[AiBackend, str] = {
    AiBackend.LOCAL: "Local AI",
    AiBackend.REMOTE: "Remote AI",
}

# What the user gets to read when the active player requests something illegal
REJECTION_ERRORS: dict[ActionRejection | WallRejection, tuple[type[GameError], str]] = {
    ActionRejection.GAME_OVER: (GameStateError, "The game is already over."),
    ActionRejection.ILLEGAL_MOVE: (IllegalMoveError, "You cannot move there."),
    WallRejection.NO_WALLS_LEFT: (NoWallsLeftError, "You have no walls left."),
    WallRejection.OUT_OF_BOUNDS: (
        WallOutOfBoundsError,
        "Walls must be placed inside the board.",
    ),
    WallRejection.COLLISION: (
        WallCollisionError,
        "Invalid placement. Walls cannot overlap or cross another wall.",
    ),
    WallRejection.ENCLOSES_PLAYER: (
        WallEnclosesPlayerError,
        "Invalid placement. Walls cannot completely block a player.",
    ),
}


class QuoridorService:
    """Orchestration of layers for a Quoridor game."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """
        First player requested to create a new game.
        ----
        Against the computer both seats are known, so the game starts right away. Otherwise it waits for a second player.
        """
        controller = TurnController(request.config)
        if request.config.mode == GameMode.PVC:
            ai_name = AI_PLAYER_NAMES[request.config.ai_backend]
            controller.start_game({1: request.player_name, AI_SEAT: ai_name})
        else:
            controller.open_for_opponent(request.player_name)

        stored_game, game_id = self.repo.create_game(controller.to_model())
        logger.info(f"Created game {game_id} ({request.config.mode}) for {request.player_name}")
        return self._create_game_response(game_id, stored_game)

    def join_game(self, request: JoinGameRequest) -> GameResponse:
        """Second player requested to join a game."""
        controller = TurnController.from_model(self._fetch_game(request.game_id))
        controller.register_player(request.player_name)

        with_player_registered = controller.to_model()
        self.repo.update_game(request.game_id, with_player_registered)
        return self._create_game_response(request.game_id, with_player_registered)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game_model = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game_model)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Cells the player's pawn could move to (to highlight them)."""
        controller = TurnController.from_model(self._fetch_game(request.game_id))
        if controller.phase != Phase.PLAYING:
            raise GameStateError(f"Game is not in progress. status: {controller.phase}")

        seat = self._get_seat(controller, request.player_name)
        return LegalMovesResponse(
            game_id=request.game_id,
            player_name=request.player_name,
            player_id=seat,
            legal_moves=[
                PositionSchema(row=cell.row, col=cell.col)
                for cell in controller.legal_moves(seat)
            ],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Move attempt."""
        action = MoveAction(Position(request.row, request.col))
        return self._submit(request.game_id, request.player_name, action)

    def place_wall(self, request: PlaceWallRequest) -> GameResponse:
        """Wall placement attempt."""
        action = PlaceWallAction(request.row, request.col, request.orientation)
        return self._submit(request.game_id, request.player_name, action)

    def report_timeout(self, request: TimeoutRequest) -> GameResponse:
        """The player holding the turn ran out of time (self-reported, nobody else keeps time)."""
        action = TimeoutAction(rationale="Ran out of time.")
        return self._submit(request.game_id, request.player_name, action)

    def play_ai_turn(self, request: AiTurnRequest) -> GameResponse:
        """
        Let the local AI play its ply in a game against the computer.
        ---
        Remote suggestions are asynchronous and go through src/services/ai_service.py instead,
        so a game configured with the remote AI is refused here rather than played by the local heuristics.
        """
        stored_model = self._fetch_game(request.game_id)
        controller = TurnController.from_model(stored_model)
        if controller.config.mode != GameMode.PVC:
            raise GameStateError("There is no AI player in this game.")
        if controller.config.ai_backend != AiBackend.LOCAL:
            raise GameStateError("This game is played by the remote AI, use the AI turn service.")

        snapshot = controller.snapshot
        if controller.phase != Phase.PLAYING or snapshot is None:
            raise GameStateError(f"Game is not in progress. status: {controller.phase}")
        if snapshot.current_player_id != AI_SEAT:
            logger.info(f"Not the AI's turn in game {request.game_id}, nothing to do")
            return self._create_game_response(request.game_id, stored_model)

        action = choose_ai_action(
            snapshot.player(AI_SEAT),
            snapshot.opponent_of(AI_SEAT),
            snapshot.walls,
            controller.config.difficulty,
            snapshot.board_size,
        )
        controller.submit(action, AI_SEAT)
        after_turn = controller.to_model()
        self.repo.update_game(request.game_id, after_turn)
        return self._create_game_response(request.game_id, after_turn)

    def list_open_games(self) -> OpenGamesResponse:
        """Games a second player can still join (lobby)."""
        return OpenGamesResponse(
            games=[
                self._create_game_response(game_id, model)
                for game_id, model in self.repo.list_open_games()
            ]
        )

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        self.repo.delete_game(request.game_id)

    # -- Internal helpers --
    def _submit(self, game_id: UUID, player_name: str, action: Action) -> GameResponse:
        """
        Attempt an action for the player.
        ---

        * somebody else's turn: nothing happens, the current state comes back (no error, it is not a mistake of the user)
        * illegal: raise the matching error so the UI can tell the user what is wrong. Nothing gets stored.
        """
        stored_model = self._fetch_game(game_id)
        controller = TurnController.from_model(stored_model)
        if controller.phase != Phase.PLAYING or controller.snapshot is None:
            raise GameStateError(f"Game is not in progress. status: {controller.phase}")

        seat = self._get_seat(controller, player_name)
        reason = rejection_reason(controller.snapshot, action, seat)
        if reason == ActionRejection.NOT_YOUR_TURN:
            logger.info(f"Ignoring {action.type} from {player_name}: not their turn")
            return self._create_game_response(game_id, stored_model)
        if reason is not None:
            error, message = REJECTION_ERRORS[reason]
            raise error(message)

        controller.submit(action, seat)
        after_action = controller.to_model()
        self.repo.update_game(game_id, after_action)
        return self._create_game_response(game_id, after_action)

    def _get_seat(self, controller: TurnController, player_name: str) -> int:
        seat = controller.seat_of(player_name)
        if seat is None:
            raise GameStateError(f"{player_name} is not playing in this game.")
        return seat

    def _create_game_response(self, game_id: UUID, model: GameModel) -> GameResponse:
        """Convert info in GameModel to a GameResponse (for game with given ID.)"""
        last_rationale = model.history[-1].get("reasoning") if model.history else None
        return GameResponse(
            game_id=game_id,
            status=model.status,
            players=model.registered_players,
            pawns={
                seat: PositionSchema(
                    row=player["position"]["r"], col=player["position"]["c"]
                )
                for seat, player in model.players.items()
            },
            walls_left={seat: player["wallsLeft"] for seat, player in model.players.items()},
            walls=[
                WallSchema(
                    row=wall["r"],
                    col=wall["c"],
                    orientation=wall["orientation"],
                    owner_id=wall["playerId"],
                )
                for wall in model.walls
            ],
            current_player_id=model.current_player_id,
            winner_id=model.winner_id,
            end_reason=model.end_reason,
            game_clock_seconds=model.game_clock_seconds,
            turn_clock_seconds=model.turn_clock_seconds,
            move_history=model.history,
            last_rationale=last_rationale,
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model
