"""
Application Services

The credential provider and the player orchestrator with its commander facade.
"""

from dialectic_dj.application.services.credential_provider import CredentialProvider
from dialectic_dj.application.services.player_service import PlayerCommander, PlayerOrchestrator

__all__ = [
    "CredentialProvider",
    "PlayerOrchestrator",
    "PlayerCommander",
]
