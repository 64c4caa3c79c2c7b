"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (aiosqlite database and repositories)
- Spotify (Web API client and token refresher over httpx)
"""
