"""
Scenes
"""

from arcade_invaders.scenes.invaders import (
    GameState,
    GameStats,
    Intent,
    InvadersScene,
    InvadersWorld,
    Session,
)

__all__ = [
    "GameState",
    "GameStats",
    "Intent",
    "InvadersScene",
    "InvadersWorld",
    "Session",
]
