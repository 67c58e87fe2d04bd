"""
Invaders Scene
"""

from __future__ import annotations

import math
import random
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Protocol, Sequence, TypeVar

from arcade_invaders.config import GameSettings, LevelSettings
from arcade_invaders.constants import (
    BONUS_SHIP_HEIGHT,
    BONUS_SHIP_WIDTH,
    ENEMY_GAP,
    ENEMY_HEIGHT,
    ENEMY_WIDTH,
    FORMATION_ORIGIN,
    PLAYER_HEIGHT,
    PLAYER_MARGIN,
    PLAYER_WIDTH,
)
from arcade_invaders.entities import (
    BonusType,
    BoundingBox,
    Bullet,
    PowerUpDrop,
    Ship,
    ShipKind,
)
from arcade_invaders.utils import logger


class GameState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    PAUSED = "paused"
    WON = "won"
    LOST = "lost"


TERMINAL_STATES = frozenset({GameState.WON, GameState.LOST})


class Intent(str, Enum):
    """
    Discrete player inputs, posted asynchronously and drained at tick start.
    """

    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    STOP = "stop"
    FIRE = "fire"
    PAUSE = "pause"


@dataclass
class GameStats:
    shots_fired: int = 0
    shots_hit: int = 0
    enemies_destroyed: int = 0
    powerups_collected: int = 0
    time_played: float = 0.0  # ms

    def accuracy(self) -> int:
        """Hit rate as a floored percentage."""
        if self.shots_fired <= 0:
            return 0
        return math.floor(self.shots_hit / self.shots_fired * 100)


@dataclass
class Session:
    """
    Score, lives and progress of one game.
    """

    lives: int
    score: int = 0
    level: int = 1
    state: GameState = GameState.NOT_STARTED
    stats: GameStats = field(default_factory=GameStats)

    def lose_life(self) -> None:
        self.lives = max(0, self.lives - 1)


@dataclass
class InvadersWorld:
    """
    Invaders World
    """

    viewport: tuple[float, float]
    player: Ship
    enemies: list[Ship] = field(default_factory=list)
    bonus_ship: Ship | None = None
    drops: list[PowerUpDrop] = field(default_factory=list)
    direction: float = 1.0  # 1 for right, -1 for left

    def enemy_bullets(self) -> Iterable[Bullet]:
        for enemy in self.enemies:
            yield from enemy.bullets


@dataclass
class InvadersTickContext:
    """
    Everything a system may read or mutate during one tick.
    """

    world: InvadersWorld
    session: Session
    settings: GameSettings
    rng: random.Random
    dt: float
    intents: list[Intent] = field(default_factory=list)
    fire: bool = False


class System(Protocol):
    name: str
    order: int

    def step(self, ctx: InvadersTickContext) -> None: ...


def spawn_player(settings: GameSettings) -> Ship:
    return Ship(
        kind=ShipKind.PLAYER,
        x=settings.width / 2 - PLAYER_WIDTH / 2,
        y=settings.height - PLAYER_HEIGHT - PLAYER_MARGIN,
        width=PLAYER_WIDTH,
        height=PLAYER_HEIGHT,
        speed=settings.player_speed,
        boost_speed=settings.player_boost_speed,
        cooldown=settings.player_cooldown,
        bullet_speed=settings.bullet_speed,
    )


def spawn_enemy(
    x: float, y: float, level: LevelSettings, settings: GameSettings
) -> Ship:
    return Ship(
        kind=ShipKind.ENEMY,
        x=x,
        y=y,
        width=ENEMY_WIDTH,
        height=ENEMY_HEIGHT,
        speed=level.enemy_speed,
        bullet_speed=settings.bullet_speed,
        fire_chance=level.fire_chance,
        enemy_type=level.enemy_type,
    )


def spawn_formation(level: LevelSettings, settings: GameSettings) -> list[Ship]:
    """
    Lay out a ``rows x enemy_cols`` grid from the formation origin.
    """
    ox, oy = FORMATION_ORIGIN
    return [
        spawn_enemy(
            col * (ENEMY_WIDTH + ENEMY_GAP) + ox,
            row * (ENEMY_HEIGHT + ENEMY_GAP) + oy,
            level,
            settings,
        )
        for row in range(level.rows)
        for col in range(settings.enemy_cols)
    ]


def spawn_bonus_ship(rng: random.Random, settings: GameSettings) -> Ship:
    """
    Bonus ship entering from a random side, carrying a random bonus.
    """
    heading = 1 if rng.random() > 0.5 else -1
    return Ship(
        kind=ShipKind.BONUS,
        x=-BONUS_SHIP_WIDTH if heading > 0 else settings.width,
        y=30 + rng.random() * 80,
        width=BONUS_SHIP_WIDTH,
        height=BONUS_SHIP_HEIGHT,
        speed=2 + rng.random() * 2,
        heading=heading,
        payload=rng.choice(list(BonusType)),
    )


def spawn_drop(enemy: Ship, rng: random.Random) -> PowerUpDrop:
    """
    Power-up centered on a destroyed enemy, carrying a random bonus.
    """
    drop = PowerUpDrop(x=0.0, y=0.0, payload=rng.choice(list(BonusType)))
    drop.x = enemy.center_x - drop.width / 2
    drop.y = enemy.y + enemy.height / 2 - drop.height / 2
    return drop


def march_formation(
    enemies: list[Ship],
    direction: float,
    playfield_width: float,
    descent_step: float,
) -> float:
    """
    Move every enemy by the shared direction, then bounce the whole
    formation once if any enemy reached the wall it is heading for.

    :return: The direction for the next tick.
    """
    if not enemies:
        return direction

    for enemy in enemies:
        enemy.move(direction, playfield_width)

    hit_wall = any(
        (direction < 0 and enemy.x <= 0)
        or (direction > 0 and enemy.x + enemy.width >= playfield_width)
        for enemy in enemies
    )
    if not hit_wall:
        return direction

    for enemy in enemies:
        enemy.y += descent_step
    return -direction


class Collidable(Protocol):
    alive: bool

    @property
    def box(self) -> BoundingBox: ...


T = TypeVar("T", bound=Collidable)


def find_hits(
    bullets: Iterable[Bullet], targets: Sequence[T]
) -> list[tuple[Bullet, T]]:
    """
    Pair each live bullet with the first live target it overlaps.

    Both sides of a hit are marked dead; removing them from their
    collections is left to the caller, after the scan.
    """
    hits = []
    for bullet in bullets:
        if not bullet.alive:
            continue
        for target in targets:
            if target.alive and bullet.box.intersects(target.box):
                bullet.alive = False
                target.alive = False
                hits.append((bullet, target))
                break
    return hits


@dataclass
class InputSystem:
    """
    Fold the drained intents into the player's heading and fire request.
    """

    name: str = "invaders_input"
    order: int = 10

    def step(self, ctx: InvadersTickContext):
        player = ctx.world.player
        for intent in ctx.intents:
            if intent is Intent.MOVE_LEFT:
                player.heading = -1
            elif intent is Intent.MOVE_RIGHT:
                player.heading = 1
            elif intent is Intent.STOP:
                player.heading = 0
            elif intent is Intent.FIRE:
                ctx.fire = True


@dataclass
class PlayerSystem:
    """
    Move the player, fire if requested, advance its bullets.
    """

    name: str = "invaders_player"
    order: int = 20

    def step(self, ctx: InvadersTickContext):
        vw, vh = ctx.world.viewport
        player = ctx.world.player

        if player.heading:
            player.move(player.heading, vw)

        if ctx.fire:
            fired = player.shoot()
            ctx.session.stats.shots_fired += len(fired)

        player.update(ctx.dt, vw, vh)


@dataclass
class EnemySystem:
    """
    Advance enemy bullets and roll each enemy's fire chance.
    """

    name: str = "invaders_enemies"
    order: int = 30

    def step(self, ctx: InvadersTickContext):
        vw, vh = ctx.world.viewport
        for enemy in ctx.world.enemies:
            enemy.update(ctx.dt, vw, vh)
            enemy.shoot(ctx.rng)


@dataclass
class FormationSystem:
    """
    Move aliens as a formation:
    - Move horizontally
    - If any hits wall -> reverse direction and drop down
    """

    name: str = "invaders_formation"
    order: int = 40

    def step(self, ctx: InvadersTickContext):
        vw, _ = ctx.world.viewport
        before = ctx.world.direction
        ctx.world.direction = march_formation(
            ctx.world.enemies, before, vw, ctx.settings.descent_step
        )
        if ctx.world.direction != before:
            logger.debug(f"Formation bounced, heading {ctx.world.direction:+.0f}")


@dataclass
class BonusShipSystem:
    """
    Fly the bonus ship across the top, or roll for a new one.
    """

    name: str = "invaders_bonus_ship"
    order: int = 45

    def step(self, ctx: InvadersTickContext):
        w = ctx.world
        vw, _ = w.viewport
        ship = w.bonus_ship

        if ship is not None:
            ship.move(ship.heading, vw)
            if (ship.heading > 0 and ship.x > vw) or (
                ship.heading < 0 and ship.x < -ship.width
            ):
                logger.debug("Bonus ship escaped")
                w.bonus_ship = None
            return

        if ctx.rng.random() < ctx.settings.bonus_ship_chance:
            w.bonus_ship = spawn_bonus_ship(ctx.rng, ctx.settings)
            logger.debug(f"Bonus ship carrying {w.bonus_ship.payload.value}")


@dataclass
class PowerUpSystem:
    """
    Let dropped power-ups fall; forget those past the bottom edge.
    """

    name: str = "invaders_powerups"
    order: int = 47

    def step(self, ctx: InvadersTickContext):
        w = ctx.world
        _, vh = w.viewport
        for drop in w.drops:
            drop.advance()
        w.drops = [d for d in w.drops if not d.has_left(vh)]


@dataclass
class CollisionSystem:
    """
    Resolve bullet hits and pickups, then compact every collection once.
    """

    name: str = "invaders_collision"
    order: int = 50

    def step(self, ctx: InvadersTickContext):
        w = ctx.world
        session = ctx.session
        player = w.player

        clashes = find_hits(player.bullets, list(w.enemy_bullets()))
        if clashes:
            logger.debug(f"{len(clashes)} bullets cancelled out")

        if w.bonus_ship is not None:
            for _, ship in find_hits(player.bullets, [w.bonus_ship]):
                self._collect(ctx, ship.payload)
                w.bonus_ship = None

        hits = find_hits(player.bullets, w.enemies)
        for _, enemy in hits:
            session.score += ctx.settings.enemy_points
            session.stats.shots_hit += 1
            session.stats.enemies_destroyed += 1
            if ctx.rng.random() < ctx.settings.powerup_drop_chance:
                w.drops.append(spawn_drop(enemy, ctx.rng))
        if hits:
            logger.debug(f"Hit {len(hits)} enemies, score {session.score}")

        for drop in w.drops:
            if drop.alive and drop.box.intersects(player.box):
                drop.alive = False
                self._collect(ctx, drop.payload)

        shielded = player.has_bonus(BonusType.BULLET_SHIELD)
        for bullet in w.enemy_bullets():
            if bullet.alive and bullet.box.intersects(player.box):
                bullet.alive = False
                if shielded:
                    continue
                session.lose_life()
                logger.debug(f"Player hit, {session.lives} lives left")

        player.bullets = [b for b in player.bullets if b.alive]
        w.enemies = [e for e in w.enemies if e.alive]
        for enemy in w.enemies:
            enemy.bullets = [b for b in enemy.bullets if b.alive]
        w.drops = [d for d in w.drops if d.alive]

    def _collect(self, ctx: InvadersTickContext, bonus: BonusType | None):
        if bonus is None:
            return
        if bonus is BonusType.EXTRA_LIFE:
            ctx.session.lives += 1
        else:
            ctx.world.player.apply_bonus(bonus, ctx.settings.bonus_duration)
        ctx.session.stats.powerups_collected += 1
        logger.debug(f"Collected {bonus.value}")


@dataclass
class OutcomeSystem:
    """
    Decide whether the game goes on, moves to the next level or ends.
    """

    name: str = "invaders_outcome"
    order: int = 60

    def step(self, ctx: InvadersTickContext):
        w = ctx.world
        session = ctx.session
        session.stats.time_played += ctx.dt

        if session.lives <= 0:
            self._finish(session, GameState.LOST, "out of lives")
            return

        if any(e.box.bottom >= w.player.y for e in w.enemies):
            self._finish(session, GameState.LOST, "aliens reached your ship")
            return

        if w.enemies:
            return

        if session.level >= len(ctx.settings.levels):
            self._finish(session, GameState.WON, "formation destroyed")
            return

        self._next_level(ctx)

    def _finish(self, session: Session, state: GameState, reason: str):
        session.state = state
        logger.info(
            f"You {state.value}: {reason} "
            f"(score {session.score}, accuracy {session.stats.accuracy()}%)"
        )

    def _next_level(self, ctx: InvadersTickContext):
        session = ctx.session
        w = ctx.world
        session.level += 1
        session.lives += 1

        level = ctx.settings.level(session.level)
        w.enemies = spawn_formation(level, ctx.settings)
        w.direction = 1.0
        w.bonus_ship = None
        w.drops = []
        w.player.bullets = []
        logger.info(f"Level {session.level}, +1 life ({session.lives})")


@dataclass
class SystemPipeline:
    """
    Runs systems in ascending ``order``.
    """

    systems: list[System] = field(default_factory=list)

    def __post_init__(self):
        self.systems.sort(key=lambda s: s.order)

    def step(self, ctx: InvadersTickContext) -> None:
        for system in self.systems:
            system.step(ctx)


class InvadersScene:
    """
    One game session: the world, its score and the per-tick pipeline.

    ``tick`` only advances the world while the game is running; once it
    is won or lost nothing changes until ``restart``.
    """

    def __init__(
        self,
        settings: GameSettings | None = None,
        rng: random.Random | None = None,
    ):
        self.settings = settings or GameSettings()
        self.settings.validate()
        self.rng = rng or random.Random()
        self._intents: deque[Intent] = deque()
        self._input = InputSystem()
        self.pipeline = SystemPipeline(
            [
                self._input,
                PlayerSystem(),
                EnemySystem(),
                FormationSystem(),
                BonusShipSystem(),
                PowerUpSystem(),
                CollisionSystem(),
                OutcomeSystem(),
            ]
        )
        self.session, self.world = self._new_game()

    def _new_game(self) -> tuple[Session, InvadersWorld]:
        vw, vh = self.settings.width, self.settings.height
        session = Session(lives=self.settings.lives)
        world = InvadersWorld(
            viewport=(vw, vh),
            player=spawn_player(self.settings),
            enemies=spawn_formation(self.settings.level(1), self.settings),
        )
        logger.debug(f"New game with {len(world.enemies)} enemies")
        return session, world

    @property
    def state(self) -> GameState:
        return self.session.state

    @property
    def running(self) -> bool:
        return self.session.state is GameState.RUNNING

    @property
    def finished(self) -> bool:
        return self.session.state in TERMINAL_STATES

    def start(self) -> None:
        if self.session.state is not GameState.NOT_STARTED:
            return
        self.session.state = GameState.RUNNING
        logger.info("Game started")

    def restart(self) -> None:
        self._intents.clear()
        self.session, self.world = self._new_game()
        self.start()

    def post(self, intent: Intent) -> None:
        """
        Queue an input; it is applied at the start of the next tick.
        Finished games ignore input until they are restarted.
        """
        if self.finished:
            return
        self._intents.append(intent)

    def tick(self, dt: float) -> Session:
        """
        Advance the game by one frame.

        :param dt: Elapsed time in ms since the previous tick
        :type dt: float

        :return: The session after this tick
        """
        intents = list(self._intents)
        self._intents.clear()

        for _ in range(intents.count(Intent.PAUSE)):
            self._toggle_pause()
        intents = [i for i in intents if i is not Intent.PAUSE]

        ctx = InvadersTickContext(
            world=self.world,
            session=self.session,
            settings=self.settings,
            rng=self.rng,
            dt=dt,
            intents=intents,
        )

        if self.session.state is GameState.PAUSED:
            # keep held direction current, but nothing moves or fires
            self._input.step(ctx)
            return self.session

        if not self.running:
            return self.session

        self.pipeline.step(ctx)
        return self.session

    def _toggle_pause(self) -> None:
        if self.session.state is GameState.RUNNING:
            self.session.state = GameState.PAUSED
            logger.debug("Paused")
        elif self.session.state is GameState.PAUSED:
            self.session.state = GameState.RUNNING
            logger.debug("Resumed")
