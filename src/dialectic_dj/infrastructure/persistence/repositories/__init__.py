"""SQLite repository implementations."""

from dialectic_dj.infrastructure.persistence.repositories.session_repository import (
    SQLiteSessionRepository,
)
from dialectic_dj.infrastructure.persistence.repositories.track_repository import (
    SQLiteTrackStore,
)

__all__ = [
    "SQLiteTrackStore",
    "SQLiteSessionRepository",
]
