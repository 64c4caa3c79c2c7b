"""aiosqlite-backed persistence: database manager and repositories."""

from dialectic_dj.infrastructure.persistence.database import Database

__all__ = ["Database"]
