"""Generate database session"""

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.settings import Settings
from src.db.schema import Base


def create_session_factory(settings: Settings) -> sessionmaker[Session]:
    """Engine + session factory for the configured database. Ensures all tables are created."""
    engine = create_engine(settings.database_url, echo=settings.database_echo)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine)
