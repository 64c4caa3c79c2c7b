"""
Auth Bounded Context

OAuth tokens, play sessions and the session repository contract.
"""

from dialectic_dj.domain.auth.entities import OAuthToken, PlaySession
from dialectic_dj.domain.auth.repository import SessionRepository

__all__ = [
    "OAuthToken",
    "PlaySession",
    "SessionRepository",
]
