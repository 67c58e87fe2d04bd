"""
Entities
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Literal

from arcade_invaders.constants import (
    BULLET_HEIGHT,
    BULLET_SPEED,
    BULLET_WIDTH,
    PLAYER_BOOST_SPEED,
    POWERUP_SIZE,
    POWERUP_SPEED,
)
from arcade_invaders.utils import clamp, logger

BulletOwner = Literal["player", "enemy"]

# spread of the two side bullets of a multi-shot, in radians
MULTI_SHOT_SPREAD = 0.15


class ShipKind(str, Enum):
    PLAYER = "player"
    ENEMY = "enemy"
    BONUS = "bonus"


class EnemyType(str, Enum):
    BASIC = "basic"
    ADVANCED = "advanced"
    BOSS = "boss"


class BonusType(str, Enum):
    RAPID_FIRE = "rapid_fire"
    MULTI_SHOT = "multi_shot"
    BULLET_SHIELD = "bullet_shield"
    EXTRA_LIFE = "extra_life"
    SPEED_BOOST = "speed_boost"


@dataclass(frozen=True)
class BoundingBox:
    """
    Axis-aligned rectangle, top-left origin.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def intersects(self, other: BoundingBox) -> bool:
        """
        Strict overlap test; boxes sharing only an edge do not intersect.
        """
        return (
            self.x < other.x + other.width
            and self.x + self.width > other.x
            and self.y < other.y + other.height
            and self.y + self.height > other.y
        )


@dataclass
class Bullet:
    """
    Bullet entity
    """

    x: float
    y: float
    vx: float
    vy: float
    owner: BulletOwner
    width: float = BULLET_WIDTH
    height: float = BULLET_HEIGHT
    alive: bool = True

    @classmethod
    def vertical(
        cls,
        x: float,
        y: float,
        direction: int,
        speed: float = BULLET_SPEED,
        owner: BulletOwner = "player",
    ) -> Bullet:
        """
        Straight bullet; ``direction`` is -1 for up and +1 for down.
        """
        return cls(x=x, y=y, vx=0.0, vy=direction * speed, owner=owner)

    @classmethod
    def angled(
        cls,
        x: float,
        y: float,
        angle: float,
        speed: float = BULLET_SPEED,
        owner: BulletOwner = "player",
    ) -> Bullet:
        """
        Bullet travelling along ``angle`` (radians, y axis pointing down).
        """
        return cls(
            x=x,
            y=y,
            vx=math.cos(angle) * speed,
            vy=math.sin(angle) * speed,
            owner=owner,
        )

    @property
    def box(self) -> BoundingBox:
        return BoundingBox(self.x, self.y, self.width, self.height)

    def advance(self) -> None:
        self.x += self.vx
        self.y += self.vy

    def has_left(self, width: float, height: float) -> bool:
        """
        True once the bullet is past the playfield edge it travels towards.
        """
        if self.x + self.width < 0 or self.x > width:
            return True
        if self.vy < 0:
            return self.y <= 0
        if self.vy > 0:
            return self.y >= height
        return False


@dataclass
class PowerUpDrop:
    """
    Bonus dropped by a destroyed enemy, falling towards the player.
    """

    x: float
    y: float
    payload: BonusType
    width: float = POWERUP_SIZE
    height: float = POWERUP_SIZE
    speed: float = POWERUP_SPEED
    alive: bool = True

    @property
    def box(self) -> BoundingBox:
        return BoundingBox(self.x, self.y, self.width, self.height)

    def advance(self) -> None:
        self.y += self.speed

    def has_left(self, height: float) -> bool:
        return self.y > height


# pylint: disable=too-many-instance-attributes
@dataclass
class Ship:
    """
    Ship entity. Player, enemy and bonus ship share this type and
    differ by ``kind``.
    """

    kind: ShipKind
    x: float
    y: float
    width: float
    height: float
    speed: float
    bullets: list[Bullet] = field(default_factory=list)
    alive: bool = True

    # fire control
    cooldown: float = 0.0
    shot_clock: float = math.inf  # ms since last shot
    bullet_speed: float = BULLET_SPEED
    fire_chance: float = 0.0

    # -1, 0 or +1; held input for the player, travel direction for bonus ships
    heading: int = 0
    enemy_type: EnemyType = EnemyType.BASIC
    payload: BonusType | None = None

    # player bonuses
    base_speed: float = 0.0
    boost_speed: float = PLAYER_BOOST_SPEED
    bonus: BonusType | None = None
    bonus_timer: float = 0.0
    boost_timer: float = 0.0

    def __post_init__(self):
        if not self.base_speed:
            self.base_speed = self.speed

    @property
    def box(self) -> BoundingBox:
        return BoundingBox(self.x, self.y, self.width, self.height)

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def fire_delay(self) -> float:
        if self.bonus is BonusType.RAPID_FIRE:
            return self.cooldown / 3
        return self.cooldown

    def has_bonus(self, bonus: BonusType) -> bool:
        if bonus is BonusType.SPEED_BOOST:
            return self.boost_timer > 0
        return self.bonus is bonus

    def move(self, direction: float, playfield_width: float) -> None:
        """
        Move horizontally by ``direction * speed``.

        :param direction: -1 (left), 0 or +1 (right)
        :type direction: float

        :param playfield_width: Width used to clamp the player
        :type playfield_width: float
        """
        _MOVES[self.kind](self, direction, playfield_width)

    def shoot(self, rng: random.Random | None = None) -> list[Bullet]:
        """
        Fire according to the ship's fire policy.

        New bullets are added to ``bullets`` and returned. An empty list
        means the ship did not fire this time.

        :param rng: Source of the enemy fire roll
        :type rng: random.Random | None
        """
        fired = _SHOTS[self.kind](self, rng)
        self.bullets.extend(fired)
        return fired

    def update(
        self, dt: float, playfield_width: float, playfield_height: float
    ) -> None:
        """
        Advance clocks and owned bullets, dropping the ones that are gone.

        :param dt: Elapsed time in ms
        :type dt: float
        """
        self.shot_clock += dt
        if self.kind is ShipKind.PLAYER:
            self._tick_bonuses(dt)

        if not self.bullets:
            return

        for bullet in self.bullets:
            bullet.advance()
            if bullet.has_left(playfield_width, playfield_height):
                bullet.alive = False

        self.bullets = [b for b in self.bullets if b.alive]

    def apply_bonus(self, bonus: BonusType, duration: float) -> None:
        """
        Start a timed bonus. Extra lives are not a ship concern.
        """
        if bonus is BonusType.EXTRA_LIFE:
            return
        if bonus is BonusType.SPEED_BOOST:
            self.speed = max(self.base_speed, self.boost_speed)
            self.boost_timer = duration
        else:
            self.bonus = bonus
            self.bonus_timer = duration
        logger.debug(f"Bonus {bonus.value} active for {duration} ms")

    def _tick_bonuses(self, dt: float) -> None:
        if self.bonus is not None:
            self.bonus_timer -= dt
            if self.bonus_timer <= 0:
                logger.debug(f"Bonus {self.bonus.value} expired")
                self.bonus = None
                self.bonus_timer = 0.0

        if self.boost_timer > 0:
            self.boost_timer -= dt
            if self.boost_timer <= 0:
                self.boost_timer = 0.0
                self.speed = self.base_speed


def _clamped_move(ship: Ship, direction: float, playfield_width: float):
    limit = max(0.0, playfield_width - ship.width)
    ship.x = clamp(ship.x + direction * ship.speed, 0.0, limit)


def _translate(ship: Ship, direction: float, _playfield_width: float):
    ship.x += direction * ship.speed


def _player_shot(ship: Ship, _rng: random.Random | None) -> list[Bullet]:
    if ship.shot_clock < ship.fire_delay:
        return []
    ship.shot_clock = 0.0

    # spawn at top-center of the ship
    bx = ship.center_x - BULLET_WIDTH / 2
    by = ship.y - BULLET_HEIGHT
    bullets = [Bullet.vertical(bx, by, -1, ship.bullet_speed, "player")]

    if ship.bonus is BonusType.MULTI_SHOT:
        side_y = ship.y + ship.height / 3 - BULLET_HEIGHT
        up = -math.pi / 2
        bullets.append(
            Bullet.angled(
                ship.x + ship.width / 4 - BULLET_WIDTH / 2,
                side_y,
                up - MULTI_SHOT_SPREAD,
                ship.bullet_speed,
                "player",
            )
        )
        bullets.append(
            Bullet.angled(
                ship.x + 3 * ship.width / 4 - BULLET_WIDTH / 2,
                side_y,
                up + MULTI_SHOT_SPREAD,
                ship.bullet_speed,
                "player",
            )
        )

    logger.debug(f"Shooting {len(bullets)} bullet(s) at ({bx:.0f}, {by:.0f})")
    return bullets


def _enemy_shot(ship: Ship, rng: random.Random | None) -> list[Bullet]:
    if rng is None or rng.random() >= ship.fire_chance:
        return []
    ship.shot_clock = 0.0

    # spawn at bottom-center of the enemy
    bx = ship.center_x - BULLET_WIDTH / 2
    by = ship.y + ship.height
    return [Bullet.vertical(bx, by, 1, ship.bullet_speed, "enemy")]


def _no_shot(_ship: Ship, _rng: random.Random | None) -> list[Bullet]:
    return []


_MOVES: dict[ShipKind, Callable[[Ship, float, float], None]] = {
    ShipKind.PLAYER: _clamped_move,
    ShipKind.ENEMY: _translate,
    ShipKind.BONUS: _translate,
}

_SHOTS: dict[
    ShipKind, Callable[[Ship, random.Random | None], list[Bullet]]
] = {
    ShipKind.PLAYER: _player_shot,
    ShipKind.ENEMY: _enemy_shot,
    ShipKind.BONUS: _no_shot,
}
