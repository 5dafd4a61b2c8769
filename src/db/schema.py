"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    config: Mapped[dict[str, Any]] = mapped_column(JSON)
    players: Mapped[dict[str, Any]] = mapped_column(JSON)
    walls: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    current_player_id: Mapped[int]
    winner_id: Mapped[Optional[int]]
    game_clock_seconds: Mapped[int] = mapped_column(default=0)
    turn_clock_seconds: Mapped[int]
    registered_players: Mapped[dict[str, str]] = mapped_column(JSON)
    status: Mapped[str]
    end_reason: Mapped[Optional[str]]
    history: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
