import random

import pytest

from arcade_invaders.config import GameSettings, LevelSettings
from arcade_invaders.constants import PLAYER_HEIGHT, PLAYER_WIDTH
from arcade_invaders.entities import Ship, ShipKind
from arcade_invaders.scenes.invaders import InvadersScene


class FixedRandom(random.Random):
    """
    Replays the given values from ``random()``; afterwards it never
    passes a probability check.
    """

    def __init__(self, values=()):
        super().__init__(0)
        self._values = list(values)

    def random(self):
        if self._values:
            return self._values.pop(0)
        return 0.999999


def make_player(x=375.0, y=560.0, speed=5.0, cooldown=250.0, **kwargs):
    return Ship(
        kind=ShipKind.PLAYER,
        x=x,
        y=y,
        width=PLAYER_WIDTH,
        height=PLAYER_HEIGHT,
        speed=speed,
        cooldown=cooldown,
        **kwargs,
    )


def make_enemy(x, y, speed=1.0, **kwargs):
    return Ship(
        kind=ShipKind.ENEMY,
        x=x,
        y=y,
        width=40,
        height=30,
        speed=speed,
        **kwargs,
    )


@pytest.fixture
def quiet_settings():
    """One enemy, no random fire, no bonus ships, no drops."""
    return GameSettings(
        enemy_cols=1,
        bonus_ship_chance=0.0,
        powerup_drop_chance=0.0,
        levels=(LevelSettings(rows=1, enemy_speed=1.0, fire_chance=0.0),),
    )


@pytest.fixture
def scene(quiet_settings):
    game = InvadersScene(quiet_settings, rng=random.Random(1))
    game.start()
    return game
