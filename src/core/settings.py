"""Process wide settings, read from the environment (a local .env file is picked up as well)."""

import os
from dataclasses import dataclass
from typing import Self

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///quoridor.db"
    log_level: str = "INFO"
    # UX pacing only: the AI answers instantly, but an instant answer feels odd on screen
    ai_move_delay_seconds: float = 1.0
    matchmaking_timeout_seconds: float = 120.0

    @classmethod
    def from_env(cls) -> Self:
        defaults = cls()
        return cls(
            database_url=os.getenv("QUORIDOR_DATABASE_URL", defaults.database_url),
            log_level=os.getenv("QUORIDOR_LOG_LEVEL", defaults.log_level).upper(),
            ai_move_delay_seconds=float(
                os.getenv("QUORIDOR_AI_DELAY_SECONDS", defaults.ai_move_delay_seconds)
            ),
            matchmaking_timeout_seconds=float(
                os.getenv(
                    "QUORIDOR_MATCHMAKING_TIMEOUT_SECONDS",
                    defaults.matchmaking_timeout_seconds,
                )
            ),
        )


settings = Settings.from_env()
