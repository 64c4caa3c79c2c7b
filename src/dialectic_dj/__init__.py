"""Dialectic DJ: a shared Spotify play queue driven by a single playback orchestrator."""

__version__ = "0.1.0"
