"""Unit tests for src/db/sql_repository.py"""

from datetime import datetime, timezone
from unittest.mock import Mock, patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from src.core.exceptions import RepositoryError
from src.core.models import ArchivedMatch, MatchModel, MoveModel
from src.db.sql_repository import SQLMatchArchive


@pytest.fixture
def finished_match() -> ArchivedMatch:
    """Mock data of a (very short) finished match"""
    moves = [
        MoveModel(
            from_square="5,3",
            to_square="0,3",
            piece="gR",
            captured="yN",
            color="green",
            move_number=1,
            timestamp=datetime(2024, 5, 1, 20, 15, tzinfo=timezone.utc),
            eliminated_after=["red", "blue", "yellow"],
        )
    ]
    return ArchivedMatch(
        room_id="ABC123",
        room_name="Friday night",
        players={"red": "Kim", "green": "Sam"},
        match=MatchModel(
            position={"0,3": "gR", "9,13": "gK"},
            current_player="green",
            captured_pieces={"red": [], "blue": [], "yellow": [], "green": ["yN"]},
            players_in_check=[],
            eliminated_players=["red", "blue", "yellow"],
            winner="green",
            moves=moves,
            status="finished",
        ),
    )


def test_record_match(
    db_session_factory: sessionmaker[Session], finished_match: ArchivedMatch
) -> None:
    """Conversion from an ArchivedMatch to DBMatch and back."""
    archive = SQLMatchArchive(db_session_factory)
    record_in_db, _ = archive.record_match(finished_match)
    assert isinstance(record_in_db, ArchivedMatch)
    assert record_in_db == finished_match


def test_get_match_by_id(
    db_session_factory: sessionmaker[Session], finished_match: ArchivedMatch
) -> None:
    archive = SQLMatchArchive(db_session_factory)
    expected, match_id = archive.record_match(finished_match)
    found = archive.get_match(match_id)
    assert found == expected
    assert found.match.moves[0].timestamp == finished_match.match.moves[0].timestamp


def test_get_unknown_match(
    db_session_factory: sessionmaker[Session], finished_match: ArchivedMatch
) -> None:
    """
    Should return None if ID does not match anything in database.

    NOTE with an empty database, any id is a valid test case.
    """
    archive = SQLMatchArchive(db_session_factory)
    assert archive.get_match(uuid4()) is None

    archive.record_match(finished_match)
    assert archive.get_match(uuid4()) is None


def test_list_matches_of_a_room(
    db_session_factory: sessionmaker[Session], finished_match: ArchivedMatch
) -> None:
    archive = SQLMatchArchive(db_session_factory)
    archive.record_match(finished_match)
    archive.record_match(finished_match)
    other_room = ArchivedMatch(
        room_id="XYZ789",
        room_name="Other",
        players=finished_match.players,
        match=finished_match.match,
    )
    archive.record_match(other_room)

    assert len(archive.list_matches("ABC123")) == 2
    assert archive.list_matches("XYZ789") == [other_room]
    assert archive.list_matches("NOPE00") == []


def test_delete_match(
    db_session_factory: sessionmaker[Session], finished_match: ArchivedMatch
) -> None:
    archive = SQLMatchArchive(db_session_factory)
    _, match_id = archive.record_match(finished_match)

    deleted = archive.delete_match(match_id)
    assert deleted == finished_match
    assert archive.get_match(match_id) is None
    assert archive.delete_match(match_id) is None


def test_failed_commit_raises_repository_error(
    db_session_factory: sessionmaker[Session], finished_match: ArchivedMatch
) -> None:
    archive = SQLMatchArchive(db_session_factory)
    with patch.object(Session, "commit", side_effect=SQLAlchemyError("disk full")):
        with pytest.raises(RepositoryError):
            archive.record_match(finished_match)
    assert archive.list_matches(finished_match.room_id) == []


def test_every_operation_uses_its_own_session(
    db_session_factory: sessionmaker[Session], finished_match: ArchivedMatch
) -> None:
    """The archive lives as long as the service: it must not hold on to a single session."""
    factory = Mock(wraps=db_session_factory)
    archive = SQLMatchArchive(factory)

    _, match_id = archive.record_match(finished_match)
    assert archive.get_match(match_id) == finished_match
    assert factory.call_count == 2
