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


class DBMatch(Base):
    __tablename__ = "matches"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    room_id: Mapped[str] = mapped_column(index=True)
    room_name: Mapped[str]
    players: Mapped[dict[str, str]] = mapped_column(JSON)
    winner: Mapped[Optional[str]]
    status: Mapped[str]
    current_player: Mapped[str]
    final_position: Mapped[dict[str, str]] = mapped_column(JSON)
    captured_pieces: Mapped[dict[str, list[str]]] = mapped_column(JSON)
    players_in_check: Mapped[list[str]] = mapped_column(JSON, default=list)
    eliminated_players: Mapped[list[str]] = mapped_column(JSON, default=list)
    moves: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
