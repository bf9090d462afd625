"""Implementation of MatchArchive using SQLAlchemy"""

from dataclasses import asdict
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from src.core.exceptions import RepositoryError
from src.core.models import ArchivedMatch, MatchModel, MoveModel
from src.db.schema import DBMatch


class SQLMatchArchive:
    """
    Data stored using SQL / methods implemented using SQLAlchemy

    The archive outlives any single request, so every operation opens (and closes) its own session.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    def record_match(self, match: ArchivedMatch) -> tuple[ArchivedMatch, UUID]:
        """Store a finished match and return the stored data + newly created record ID."""
        new_id = uuid4()
        model = match.match
        match_db = DBMatch(
            id=new_id,
            room_id=match.room_id,
            room_name=match.room_name,
            players=match.players,
            winner=model.winner,
            status=model.status,
            current_player=model.current_player,
            final_position=model.position,
            captured_pieces=model.captured_pieces,
            players_in_check=model.players_in_check,
            eliminated_players=model.eliminated_players,
            moves=[_move_to_json(move) for move in model.moves],
        )
        with self.session_factory() as db:
            try:
                db.add(match_db)
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise RepositoryError(
                    f"Could not archive match of room {match.room_id}"
                ) from exc
            db.refresh(match_db)
            return self._to_model(match_db), new_id

    def get_match(self, match_id: UUID) -> ArchivedMatch | None:
        """Get a match by ID, if record exists."""
        with self.session_factory() as db:
            match_db = self._fetch_match(db, match_id)
            if match_db:
                return self._to_model(match_db)
            return None

    def list_matches(self, room_id: str) -> list[ArchivedMatch]:
        """All finished matches played in one room, oldest first."""
        query = (
            select(DBMatch)
            .where(DBMatch.room_id == room_id)
            .order_by(DBMatch.created_at)
        )
        with self.session_factory() as db:
            return [self._to_model(match_db) for match_db in db.scalars(query)]

    def delete_match(self, match_id: UUID) -> ArchivedMatch | None:
        """Remove a match record."""
        with self.session_factory() as db:
            match_db = self._fetch_match(db, match_id)
            if not match_db:
                return None
            match = self._to_model(match_db)
            db.delete(match_db)
            db.commit()
            return match

    def _fetch_match(self, db: Session, match_id: UUID) -> DBMatch | None:
        query = select(DBMatch).where(DBMatch.id == match_id)
        return db.scalar(query)

    def _to_model(self, match_db: DBMatch) -> ArchivedMatch:
        """Convert SQLAlchemy model to data transfer model."""
        return ArchivedMatch(
            room_id=match_db.room_id,
            room_name=match_db.room_name,
            players=match_db.players,
            match=MatchModel(
                position=match_db.final_position,
                current_player=match_db.current_player,
                captured_pieces=match_db.captured_pieces,
                players_in_check=match_db.players_in_check,
                eliminated_players=match_db.eliminated_players,
                winner=match_db.winner,
                moves=[_move_from_json(move) for move in match_db.moves],
                status=match_db.status,
            ),
        )


def _move_to_json(move: MoveModel) -> dict[str, Any]:
    """JSON columns cannot hold datetimes: store the timestamp as ISO string"""
    data = asdict(move)
    data["timestamp"] = move.timestamp.isoformat()
    return data


def _move_from_json(data: dict[str, Any]) -> MoveModel:
    return MoveModel(**{**data, "timestamp": datetime.fromisoformat(data["timestamp"])})
