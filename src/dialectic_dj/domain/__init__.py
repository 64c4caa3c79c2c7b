# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting types, constants and exceptions
- music/: Tracks, queue and playback reports
- auth/: OAuth tokens and play sessions
"""

from dialectic_dj.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
