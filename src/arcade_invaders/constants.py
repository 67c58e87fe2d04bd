"""
Constants for the game.
"""

from __future__ import annotations

FPS = 60
WINDOW_SIZE = (800, 600)
TITLE = "Arcade Invaders"

BACKGROUND_COLOR = (0, 0, 0)

PLAYER_WIDTH = 50
PLAYER_HEIGHT = 30
PLAYER_SPEED = 5.0
PLAYER_BOOST_SPEED = 8.0
PLAYER_COOLDOWN = 250.0  # ms
PLAYER_MARGIN = 10

ENEMY_WIDTH = 40
ENEMY_HEIGHT = 30
ENEMY_COLS = 8
ENEMY_GAP = 20
FORMATION_ORIGIN = (50, 50)
DESCENT_STEP = 20.0

BULLET_WIDTH = 3
BULLET_HEIGHT = 15
BULLET_SPEED = 7.0

BONUS_SHIP_WIDTH = 60
BONUS_SHIP_HEIGHT = 20
BONUS_SHIP_CHANCE = 0.001
BONUS_DURATION = 10000.0  # ms

ENEMY_POINTS = 10
LIVES = 3

POWERUP_SIZE = 20
POWERUP_SPEED = 2.0
POWERUP_DROP_CHANCE = 0.05
