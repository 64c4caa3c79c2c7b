"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters.
"""

from dialectic_dj.application.interfaces.music_service import MusicService
from dialectic_dj.application.interfaces.token_refresher import TokenRefresher

__all__ = [
    "MusicService",
    "TokenRefresher",
]
