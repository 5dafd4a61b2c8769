"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, the API layer (higher), the domain/db layers (lower) and the online channel will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Any, Optional

# Type aliases to make GameModel easier to read
SeatId = str
PlayerName = str
JSONDict = dict[str, Any]


@dataclass
class GameModel:
    """Transport-safe representation of a Quoridor game used between API, Service, DB, channel and Game layers.

    Only JSON friendly types: seat ids are strings ("1", "2") so the dicts survive a JSON roundtrip unchanged.
    """

    config: JSONDict
    players: dict[SeatId, JSONDict]
    walls: list[JSONDict]
    current_player_id: int
    winner_id: Optional[int]
    game_clock_seconds: int
    turn_clock_seconds: int
    registered_players: dict[SeatId, PlayerName]
    status: str
    end_reason: Optional[str] = None
    history: list[JSONDict] = field(default_factory=list)
