"""
Application Commands

Command messages for the player orchestrator's channel.
"""

from dialectic_dj.application.commands.player_commands import (
    AddTrackCommand,
    GetCurrentTrackCommand,
    GetTrackQueueCommand,
    PlayerCommand,
    StartCommand,
    WakeCommand,
)

__all__ = [
    "PlayerCommand",
    # Fire-and-forget
    "StartCommand",
    "WakeCommand",
    # With reply
    "AddTrackCommand",
    "GetCurrentTrackCommand",
    "GetTrackQueueCommand",
]
