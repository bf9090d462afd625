"""Wire the service together from the settings: logging, archive database and the asyncio scheduler."""

from typing import Optional

from src.core.log_config import setup_logging
from src.core.settings import Settings, get_settings
from src.db.database import create_session_factory
from src.db.sql_repository import SQLMatchArchive
from src.services.auto_player import AsyncioMoveScheduler
from src.services.match_service import MatchService, RoomNotifier


def build_match_service(
    settings: Optional[Settings] = None, notifier: Optional[RoomNotifier] = None
) -> MatchService:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    session_factory = create_session_factory(settings)
    archive = SQLMatchArchive(session_factory)
    return MatchService(
        scheduler=AsyncioMoveScheduler(),
        settings=settings,
        archive=archive,
        notifier=notifier,
    )
