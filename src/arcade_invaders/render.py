"""
Drawing of the invaders scene on a pygame surface.
"""

from __future__ import annotations

from typing import Protocol, Sequence, Tuple

import pygame

from arcade_invaders.constants import BACKGROUND_COLOR
from arcade_invaders.entities import BonusType, EnemyType, Ship
from arcade_invaders.scenes.invaders import GameState, InvadersScene

Color = Tuple[int, int, int]
Point = Tuple[float, float]

WHITE = (255, 255, 255)
YELLOW = (255, 255, 0)
RED = (255, 0, 0)
MAGENTA = (255, 0, 255)
GREEN = (0, 255, 0)

BONUS_COLORS = {
    BonusType.RAPID_FIRE: (255, 136, 0),
    BonusType.MULTI_SHOT: (0, 255, 255),
    BonusType.BULLET_SHIELD: (68, 136, 255),
    BonusType.EXTRA_LIFE: (255, 68, 136),
    BonusType.SPEED_BOOST: (255, 255, 0),
}


class Renderer(Protocol):
    """
    Draw primitives in playfield coordinates.
    """

    def clear(self, color: Color) -> None: ...

    def draw_rect(
        self, x: float, y: float, width: float, height: float, color: Color
    ) -> None: ...

    def draw_polygon(self, points: Sequence[Point], color: Color) -> None: ...

    def draw_text(
        self, text: str, x: float, y: float, color: Color, center: bool = False
    ) -> None: ...


class PygameRenderer:
    """
    Renderer backed by a pygame surface.
    """

    def __init__(
        self, surface: pygame.Surface, font: pygame.font.Font | None = None
    ):
        """
        :param surface: Target surface, usually the display
        :type surface: pygame.Surface

        :param font: Font for text; without one text is skipped
        :type font: pygame.font.Font | None
        """
        self.surface = surface
        self.font = font

    def clear(self, color: Color) -> None:
        self.surface.fill(color)

    def draw_rect(
        self, x: float, y: float, width: float, height: float, color: Color
    ) -> None:
        pygame.draw.rect(
            self.surface,
            color,
            pygame.Rect(int(x), int(y), int(width), int(height)),
        )

    def draw_polygon(self, points: Sequence[Point], color: Color) -> None:
        pygame.draw.polygon(
            self.surface, color, [(int(px), int(py)) for px, py in points]
        )

    def draw_text(
        self, text: str, x: float, y: float, color: Color, center: bool = False
    ) -> None:
        if self.font is None:
            return
        image = self.font.render(text, True, color)
        rect = image.get_rect()
        if center:
            rect.center = (int(x), int(y))
        else:
            rect.topleft = (int(x), int(y))
        self.surface.blit(image, rect)


class Drawable(Protocol):
    def draw(self, renderer: Renderer, scene: InvadersScene) -> None: ...


class DrawPlayer:
    """
    Drawable Player
    """

    def draw(self, renderer: Renderer, scene: InvadersScene):
        ship = scene.world.player
        color = GREEN
        if ship.bonus is not None:
            color = BONUS_COLORS[ship.bonus]
        elif ship.has_bonus(BonusType.SPEED_BOOST):
            color = BONUS_COLORS[BonusType.SPEED_BOOST]

        renderer.draw_polygon(
            [
                (ship.center_x, ship.y),
                (ship.x + ship.width, ship.y + ship.height),
                (ship.x, ship.y + ship.height),
            ],
            color,
        )


class DrawEnemies:
    """
    Drawable Enemies
    """

    def draw(self, renderer: Renderer, scene: InvadersScene):
        for enemy in scene.world.enemies:
            if enemy.enemy_type is EnemyType.ADVANCED:
                self._saucer(renderer, enemy)
            elif enemy.enemy_type is EnemyType.BOSS:
                self._mothership(renderer, enemy)
            else:
                renderer.draw_rect(
                    enemy.x, enemy.y, enemy.width, enemy.height, RED
                )

    def _saucer(self, renderer: Renderer, e: Ship):
        renderer.draw_polygon(
            [
                (e.x, e.y + e.height * 0.6),
                (e.x + e.width * 0.3, e.y + e.height * 0.2),
                (e.x + e.width * 0.7, e.y + e.height * 0.2),
                (e.x + e.width, e.y + e.height * 0.6),
                (e.x + e.width * 0.7, e.y + e.height * 0.8),
                (e.x + e.width * 0.3, e.y + e.height * 0.8),
            ],
            MAGENTA,
        )

    def _mothership(self, renderer: Renderer, e: Ship):
        renderer.draw_polygon(
            [
                (e.x, e.y + e.height * 0.5),
                (e.x + e.width * 0.2, e.y + e.height * 0.3),
                (e.x + e.width * 0.8, e.y + e.height * 0.3),
                (e.x + e.width, e.y + e.height * 0.5),
                (e.x + e.width * 0.8, e.y + e.height * 0.7),
                (e.x + e.width * 0.2, e.y + e.height * 0.7),
            ],
            RED,
        )
        # weapon ports
        for port in (0.3, 0.6):
            renderer.draw_rect(
                e.x + e.width * port,
                e.y + e.height * 0.6,
                e.width * 0.1,
                e.height * 0.1,
                YELLOW,
            )


class DrawBonusShip:
    """
    Drawable Bonus Ship
    """

    def draw(self, renderer: Renderer, scene: InvadersScene):
        ship = scene.world.bonus_ship
        if ship is None:
            return
        color = BONUS_COLORS.get(ship.payload, WHITE)
        renderer.draw_polygon(
            [
                (ship.x, ship.y + ship.height * 0.7),
                (ship.x + ship.width * 0.25, ship.y),
                (ship.x + ship.width * 0.75, ship.y),
                (ship.x + ship.width, ship.y + ship.height * 0.7),
                (ship.x + ship.width * 0.5, ship.y + ship.height),
            ],
            color,
        )


class DrawBullets:
    """
    Drawable Bullets
    """

    def draw(self, renderer: Renderer, scene: InvadersScene):
        for b in scene.world.player.bullets:
            renderer.draw_rect(b.x, b.y, b.width, b.height, WHITE)
        for b in scene.world.enemy_bullets():
            renderer.draw_rect(b.x, b.y, b.width, b.height, YELLOW)


class DrawPowerUps:
    """
    Drawable Power-Ups
    """

    def draw(self, renderer: Renderer, scene: InvadersScene):
        for drop in scene.world.drops:
            renderer.draw_rect(
                drop.x,
                drop.y,
                drop.width,
                drop.height,
                BONUS_COLORS[drop.payload],
            )


class DrawHud:
    """
    Score, lives and level along the top edge.
    """

    def draw(self, renderer: Renderer, scene: InvadersScene):
        session = scene.session
        vw, _ = scene.world.viewport
        renderer.draw_text(f"Score: {session.score}", 10, 10, WHITE)
        renderer.draw_text(f"Level: {session.level}", vw / 2 - 40, 10, WHITE)
        renderer.draw_text(f"Lives: {session.lives}", vw - 110, 10, WHITE)


class DrawBanner:
    """
    Centered message for paused and finished games.
    """

    MESSAGES = {
        GameState.PAUSED: "PAUSED",
        GameState.WON: "YOU WIN! Press R to play again",
        GameState.LOST: "GAME OVER - Press R to play again",
    }

    def draw(self, renderer: Renderer, scene: InvadersScene):
        message = self.MESSAGES.get(scene.state)
        if message is None:
            return
        vw, vh = scene.world.viewport
        renderer.draw_text(message, vw / 2, vh / 2, WHITE, center=True)
        if scene.finished:
            stats = scene.session.stats
            renderer.draw_text(
                f"Score {scene.session.score} - "
                f"accuracy {stats.accuracy()}%",
                vw / 2,
                vh / 2 + 40,
                WHITE,
                center=True,
            )


DRAW_OPS: tuple[Drawable, ...] = (
    DrawEnemies(),
    DrawBonusShip(),
    DrawPowerUps(),
    DrawBullets(),
    DrawPlayer(),
    DrawHud(),
    DrawBanner(),
)


def render_frame(
    renderer: Renderer,
    scene: InvadersScene,
    background: Color = BACKGROUND_COLOR,
) -> None:
    """Clear the frame, then draw every visible entity."""
    renderer.clear(background)
    for op in DRAW_OPS:
        op.draw(renderer, scene)


def set_screen(caption: str, width: int, height: int) -> pygame.Surface:
    """
    Set the screen

    :param caption: Caption of the screen
    :type caption: str

    :param width: Width of the screen
    :type width: int

    :param height: Height of the screen
    :type height: int

    :return: pygame.Surface
    """

    screen = pygame.display.set_mode((width, height))
    pygame.display.set_caption(caption)

    return screen
