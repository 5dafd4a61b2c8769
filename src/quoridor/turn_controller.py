"""
The TurnController is the entrypoint into the domain layer for the service layer (and for a UI running a local game).
It is the authoritative state machine of a game:

    MENU -> (AWAITING_OPPONENT) -> PLAYING -> GAME_OVER

It owns the phase, the seat registry and the current snapshot. The actual rules live in the reconciler / validators,
the controller only decides WHEN an action may reach them.
"""

import logging
import random
from dataclasses import dataclass, field, replace
from typing import Optional, Self

from src.core.config import GameConfig
from src.core.exceptions import GameStateError
from src.core.models import GameModel
from src.core.shared_types import EndReason, Phase
from src.quoridor.actions import Action, TimeoutAction, action_from_dict, action_to_dict
from src.quoridor.moves import compute_legal_moves
from src.quoridor.position import Position
from src.quoridor.reconciler import advance_clock, apply_action
from src.quoridor.snapshot import (
    PLAYER_IDS,
    GameSnapshot,
    Player,
    new_snapshot,
    other_player_id,
)
from src.quoridor.walls import Wall

logger = logging.getLogger(__name__)


@dataclass
class TurnController:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    config: GameConfig
    phase: Phase = Phase.MENU
    snapshot: Optional[GameSnapshot] = None
    players: dict[int, str] = field(default_factory=dict)  # seat id -> display name

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a TurnController from the information the Service layer actually has"""

        # Validation
        if model.status not in [phase.value for phase in Phase]:
            raise GameStateError(
                f"Invalid status: {model.status!r}. \nPick one from {','.join([phase.value for phase in Phase])}"
            )
        phase = Phase(model.status)
        if phase == Phase.MENU:
            raise GameStateError("A stored game cannot be in the menu phase.")

        config = GameConfig.model_validate(model.config)
        snapshot = GameSnapshot(
            players={
                int(seat): Player.from_dict(data) for seat, data in model.players.items()
            },
            walls=tuple(Wall.from_dict(data) for data in model.walls),
            current_player_id=model.current_player_id,
            winner_id=model.winner_id,
            game_clock_seconds=model.game_clock_seconds,
            turn_clock_seconds=model.turn_clock_seconds,
            board_size=config.board_size,
            turn_duration_seconds=config.turn_duration_seconds,
            end_reason=EndReason(model.end_reason) if model.end_reason else None,
            history=tuple(action_from_dict(data) for data in model.history),
        )
        players = {int(seat): name for seat, name in model.registered_players.items()}
        return cls(config=config, phase=phase, snapshot=snapshot, players=players)

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        snapshot = self._require_snapshot()
        return GameModel(
            config=self.config.model_dump(mode="json"),
            players={
                str(seat): player.to_dict() for seat, player in snapshot.players.items()
            },
            walls=[wall.to_dict() for wall in snapshot.walls],
            current_player_id=snapshot.current_player_id,
            winner_id=snapshot.winner_id,
            game_clock_seconds=snapshot.game_clock_seconds,
            turn_clock_seconds=snapshot.turn_clock_seconds,
            registered_players={str(seat): name for seat, name in self.players.items()},
            status=self.phase.value,
            end_reason=snapshot.end_reason.value if snapshot.end_reason else None,
            history=[action_to_dict(action) for action in snapshot.history],
        )

    @property
    def winner(self) -> Optional[str]:
        """Name of the winning seat, once the game is over"""
        if self.snapshot is None or self.snapshot.winner_id is None:
            return None
        return self.players.get(self.snapshot.winner_id)

    # -- LIFECYCLE ---
    def start_game(
        self, players: dict[int, str], rng: Optional[random.Random] = None
    ) -> GameSnapshot:
        """Both seats are known up front (local play, or a game against the AI). Fully rebuilds the snapshot."""
        if set(players) != set(PLAYER_IDS):
            raise GameStateError(
                f"Need exactly the seats {PLAYER_IDS} to start, got {sorted(players)}."
            )
        if len(set(players.values())) != len(players):
            raise GameStateError("Both seats need different player names.")
        self.players = dict(players)
        self.snapshot = new_snapshot(self.config, rng)
        self._change_phase(Phase.PLAYING)
        return self.snapshot

    def open_for_opponent(
        self, host: str, rng: Optional[random.Random] = None
    ) -> GameSnapshot:
        """Online/two-step creation: the host takes seat 1 and waits for somebody to join."""
        if self.phase not in (Phase.MENU, Phase.GAME_OVER):
            raise GameStateError(
                f"Cannot open a new game while {self.phase.value}."
            )
        self.players = {1: host}
        self.snapshot = new_snapshot(self.config, rng)
        self._change_phase(Phase.AWAITING_OPPONENT)
        return self.snapshot

    def register_player(self, player: str) -> int:
        """Registering the 2nd player to an open game. Returns the seat the player got."""
        if self.phase != Phase.AWAITING_OPPONENT:
            raise GameStateError(
                f"Cannot join this game. Game is not accepting new players. status: {self.phase.value}"
            )
        if player in self.players.values():
            raise GameStateError(f"{player} is already seated in this game.")
        snapshot = self._require_snapshot()
        host_seat = next(iter(self.players))
        seat = other_player_id(host_seat)
        self.players[seat] = player

        # clocks only start running once both players are seated
        self.snapshot = replace(
            snapshot,
            game_clock_seconds=0,
            turn_clock_seconds=snapshot.turn_duration_seconds,
        )
        self._change_phase(Phase.PLAYING)
        return seat

    def await_opponent(self) -> None:
        """Matchmaking: no game yet, the state arrives once somebody pairs up with us."""
        if self.phase not in (Phase.MENU, Phase.GAME_OVER):
            raise GameStateError(f"Cannot look for an opponent while {self.phase.value}.")
        self.snapshot = None
        self.players = {}
        self._change_phase(Phase.AWAITING_OPPONENT)

    def return_to_menu(self) -> None:
        self.snapshot = None
        self.players = {}
        self._change_phase(Phase.MENU)

    def adopt(self, model: GameModel) -> None:
        """Replace local state with an authoritative state received from elsewhere (online play)."""
        received = self.from_model(model)
        self.config = received.config
        self.phase = received.phase
        self.snapshot = received.snapshot
        self.players = received.players

    # -- PLAYING ---
    def seat_of(self, player: str) -> Optional[int]:
        return next((seat for seat, name in self.players.items() if name == player), None)

    def legal_moves(self, player_id: int) -> list[Position]:
        """Cells to highlight for a player (derived from the snapshot, never stored)"""
        snapshot = self._require_snapshot()
        me = snapshot.player(player_id)
        opponent = snapshot.opponent_of(player_id)
        return compute_legal_moves(
            me.position, snapshot.walls, opponent.position, snapshot.board_size
        )

    def submit(self, action: Action, actor_id: int) -> bool:
        """
        Attempt a single action for the ply.
        ----

        Only while PLAYING. Anything the reconciler ignores (not your turn, illegal) leaves the state untouched and returns False.
        """
        if self.phase != Phase.PLAYING or self.snapshot is None:
            logger.info(
                f"Ignoring {action.type} from player {actor_id}: game is {self.phase.value}"
            )
            return False

        next_snapshot = apply_action(self.snapshot, action, actor_id)
        if next_snapshot is self.snapshot:
            return False

        self.snapshot = next_snapshot
        if next_snapshot.is_terminal:
            logger.info(
                f"Game over: player {next_snapshot.winner_id} wins ({next_snapshot.end_reason})"
            )
            self._change_phase(Phase.GAME_OVER)
        return True

    def tick(self, seconds: int = 1, report_timeout: bool = True) -> Optional[Action]:
        """
        Called once per real second while playing.
        ---

        When the turn clock runs out, a TIMEOUT is synthesized for the player holding the turn and applied right away.
        The synthesized action is returned so an online client can publish it.
        Online, only the client holding the turn reports its own timeout (report_timeout=False for the other one).
        """
        if self.phase != Phase.PLAYING or self.snapshot is None:
            return None

        self.snapshot = advance_clock(self.snapshot, seconds)
        if self.snapshot.turn_clock_seconds > 0 or not report_timeout:
            return None

        timeout = TimeoutAction(rationale="Ran out of time.")
        self.submit(timeout, self.snapshot.current_player_id)
        return timeout

    # -- PRIVATE HELPERS ---
    def _require_snapshot(self) -> GameSnapshot:
        if self.snapshot is None:
            raise GameStateError(f"No game in progress. status: {self.phase.value}")
        return self.snapshot

    def _change_phase(self, new_phase: Phase) -> None:
        self.phase = new_phase
