"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.crosschess.board import Board

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

# Kings only, placed so that none of them stands on the same row/column/diagonal as a square used in the tests
# (red and yellow do share column 7, keep that column clear of sliding pieces).
SPARSE_KINGS: dict[tuple[int, int], str] = {
    (13, 7): "rK",
    (0, 7): "yK",
    (4, 0): "bK",
    (9, 13): "gK",
}


@pytest.fixture
def db_session_factory() -> Generator[sessionmaker[Session], None, None]:
    """Sessions on a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    from src.db.schema import Base

    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def kings_only_board() -> Board:
    """
    Board with only the four kings.
    Because making a move involves inferring if a king is under attack, moves cannot be played on a board without the kings.
    """
    return Board.from_codes(SPARSE_KINGS)
