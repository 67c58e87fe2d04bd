"""
Main application for Arcade Invaders using pygame.
"""

from __future__ import annotations

import argparse
import random
from typing import Sequence

import pygame

from arcade_invaders.config import GameSettings
from arcade_invaders.constants import FPS, LIVES, TITLE, WINDOW_SIZE
from arcade_invaders.render import PygameRenderer, render_frame, set_screen
from arcade_invaders.scenes.invaders import Intent, InvadersScene
from arcade_invaders.utils import configure_logging, logger

KEY_INTENTS = {
    pygame.K_LEFT: Intent.MOVE_LEFT,
    pygame.K_RIGHT: Intent.MOVE_RIGHT,
    pygame.K_SPACE: Intent.FIRE,
    pygame.K_p: Intent.PAUSE,
}


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="arcade-invaders", description=TITLE)
    parser.add_argument(
        "--seed", type=int, default=None, help="seed for enemy fire and bonuses"
    )
    parser.add_argument("--fps", type=int, default=FPS)
    parser.add_argument("--lives", type=int, default=LIVES)
    parser.add_argument(
        "--debug", action="store_true", help="log game events"
    )
    return parser.parse_args(argv)


def settings_from_args(args: argparse.Namespace) -> GameSettings:
    """
    :raises ValueError: If the resulting settings are invalid.
    """
    w_width, w_height = WINDOW_SIZE
    settings_data = {
        "window": {
            "width": w_width,
            "height": w_height,
            "title": TITLE,
            "fps": args.fps,
        },
        "rules": {"lives": args.lives},
    }
    return GameSettings.from_dict(settings_data)


def held_direction(pressed: Sequence[bool]) -> Intent:
    """Intent matching the arrow keys still held down."""
    if pressed[pygame.K_LEFT]:
        return Intent.MOVE_LEFT
    if pressed[pygame.K_RIGHT]:
        return Intent.MOVE_RIGHT
    return Intent.STOP


def handle_event(scene: InvadersScene, event: pygame.event.Event) -> bool:
    """
    Turn one pygame event into scene intents.

    :return: False when the player asked to quit
    :rtype: bool
    """
    if event.type == pygame.QUIT:
        logger.debug("Quitting the game")
        return False

    if event.type == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            logger.debug("Quitting the game")
            return False
        if event.key == pygame.K_r and scene.finished:
            logger.info("Restarting")
            scene.restart()
            return True
        intent = KEY_INTENTS.get(event.key)
        if intent is not None:
            scene.post(intent)
    elif event.type == pygame.KEYUP and event.key in (
        pygame.K_LEFT,
        pygame.K_RIGHT,
    ):
        scene.post(held_direction(pygame.key.get_pressed()))

    return True


def run(argv: Sequence[str] | None = None):
    """
    Main entry point for Arcade Invaders.

    - Builds the settings from the command line.
    - Opens the window and loads the default font.
    - Ticks the scene once per frame until it is won or lost,
      rendering every frame until the window is closed.
    """
    args = parse_args(argv)
    configure_logging(args.debug)

    try:
        settings = settings_from_args(args)
        pygame.init()
        screen = set_screen(settings.title, settings.width, settings.height)
        font = pygame.font.Font(None, 28)
    except (pygame.error, ValueError) as e:
        logger.error(f"Failed to initialize game: {e}")
        pygame.quit()
        raise SystemExit(1) from e

    scene = InvadersScene(settings, rng=random.Random(args.seed))
    renderer = PygameRenderer(screen, font)
    clock = pygame.time.Clock()

    logger.info("Starting Arcade Invaders...")
    logger.info(settings.to_dict())
    scene.start()

    carry_on = True
    while carry_on:
        dt = clock.tick(settings.fps)
        for event in pygame.event.get():
            if not handle_event(scene, event):
                carry_on = False

        if not scene.finished:
            scene.tick(dt)

        render_frame(renderer, scene)
        pygame.display.flip()

    pygame.quit()


if __name__ == "__main__":
    run()
