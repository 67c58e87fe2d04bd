from collections import defaultdict

import pygame
import pytest

from arcade_invaders.app import (
    handle_event,
    held_direction,
    parse_args,
    settings_from_args,
)
from arcade_invaders.entities import Bullet
from arcade_invaders.scenes.invaders import Intent


def keydown(key):
    return pygame.event.Event(pygame.KEYDOWN, key=key)


def test_cli_settings():
    settings = settings_from_args(parse_args(["--lives", "5", "--fps", "30"]))
    assert settings.lives == 5
    assert settings.fps == 30


def test_cli_rejects_bad_values():
    with pytest.raises(ValueError):
        settings_from_args(parse_args(["--fps", "0"]))


def test_quit_events():
    assert handle_event(None, pygame.event.Event(pygame.QUIT)) is False
    assert handle_event(None, keydown(pygame.K_ESCAPE)) is False


def test_space_fires(scene):
    assert handle_event(scene, keydown(pygame.K_SPACE)) is True

    scene.tick(16)

    assert len(scene.world.player.bullets) == 1


def test_restart_key_only_after_the_end(scene):
    handle_event(scene, keydown(pygame.K_r))
    assert scene.session.stats.time_played == 0

    scene.tick(16)
    scene.world.player.bullets = [Bullet.vertical(70, 72, -1)]
    scene.tick(16)
    assert scene.finished

    handle_event(scene, keydown(pygame.K_r))

    assert scene.running
    assert scene.session.score == 0


def test_held_direction():
    pressed = defaultdict(bool)
    assert held_direction(pressed) is Intent.STOP
    pressed[pygame.K_RIGHT] = True
    assert held_direction(pressed) is Intent.MOVE_RIGHT
    pressed[pygame.K_LEFT] = True
    assert held_direction(pressed) is Intent.MOVE_LEFT
