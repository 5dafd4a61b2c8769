"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import GameConfig
from src.db.schema import Base
from src.quoridor.position import Position
from src.quoridor.snapshot import GameSnapshot, Player
from src.quoridor.turn_controller import TurnController
from src.quoridor.walls import Wall

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        Base.metadata.drop_all(bind=engine)
        db.close()


# --- DOMAIN HELPERS ---
def make_snapshot(
    p1: Position,
    p2: Position,
    walls: tuple[Wall, ...] = (),
    current_player_id: int = 1,
    walls_left: tuple[int, int] = (10, 10),
    board_size: int = 9,
    turn_duration_seconds: int = 60,
) -> GameSnapshot:
    """Snapshot with player 1 heading for row 0 and player 2 heading for the last row."""
    return GameSnapshot(
        players={
            1: Player(1, p1, walls_left[0], 0),
            2: Player(2, p2, walls_left[1], board_size - 1),
        },
        walls=walls,
        current_player_id=current_player_id,
        winner_id=None,
        game_clock_seconds=0,
        turn_clock_seconds=turn_duration_seconds,
        board_size=board_size,
        turn_duration_seconds=turn_duration_seconds,
    )


@pytest.fixture
def snapshot_factory() -> Callable[..., GameSnapshot]:
    return make_snapshot


@pytest.fixture
def start_snapshot() -> GameSnapshot:
    """Standard 9x9 opening: player 1 on (8, 4), player 2 on (0, 4), player 1 to move."""
    return make_snapshot(Position(8, 4), Position(0, 4))


@pytest.fixture
def started_controller() -> TurnController:
    controller = TurnController(GameConfig(turn_duration_seconds=30))
    controller.start_game({1: "alice", 2: "bob"})
    return controller
