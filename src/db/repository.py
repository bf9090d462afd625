"""Protocol repository (implemented with SQLAlchemy, but the service only knows this contract)"""

from typing import Protocol
from uuid import UUID

from src.core.models import ArchivedMatch


class MatchArchive(Protocol):
    """Persistence of finished matches. Running matches live in memory only."""

    def record_match(self, match: ArchivedMatch) -> tuple[ArchivedMatch, UUID]:
        """Store a finished match and return the stored data + newly created record ID."""
        ...

    def get_match(self, match_id: UUID) -> ArchivedMatch | None:
        """Get a match by ID, if record exists."""
        ...

    def list_matches(self, room_id: str) -> list[ArchivedMatch]:
        """All finished matches played in one room, oldest first."""
        ...

    def delete_match(self, match_id: UUID) -> ArchivedMatch | None:
        """Remove a match record."""
        ...
