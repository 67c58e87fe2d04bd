"""
Game settings.
"""

from __future__ import annotations

from dataclasses import MISSING, asdict, dataclass, field, fields
from typing import Any, Callable, Mapping

from arcade_invaders.constants import (
    BONUS_DURATION,
    BONUS_SHIP_CHANCE,
    BULLET_SPEED,
    DESCENT_STEP,
    ENEMY_COLS,
    ENEMY_POINTS,
    FPS,
    LIVES,
    PLAYER_BOOST_SPEED,
    PLAYER_COOLDOWN,
    PLAYER_SPEED,
    POWERUP_DROP_CHANCE,
    TITLE,
    WINDOW_SIZE,
)
from arcade_invaders.entities import EnemyType

WINDOW_KEYS = ("width", "height", "title", "fps")


@dataclass(frozen=True)
class LevelSettings:
    """
    One wave of the formation.
    """

    rows: int
    enemy_speed: float
    enemy_type: EnemyType = EnemyType.BASIC
    fire_chance: float = 0.001

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LevelSettings:
        """
        Build a level from its dictionary form.

        :raises ValueError: On unknown keys, wrong types or out-of-range
            values.
        """
        data = _section(data, "level")
        _reject_unknown(cls, data, "level")
        missing = {"rows", "enemy_speed"} - set(data)
        if missing:
            raise ValueError(f"missing level keys: {sorted(missing)}")
        level = cls(
            rows=_coerce("rows", data["rows"], int),
            enemy_speed=_coerce("enemy_speed", data["enemy_speed"], float),
            enemy_type=_coerce(
                "enemy_type",
                data.get("enemy_type", EnemyType.BASIC),
                EnemyType,
            ),
            fire_chance=_coerce(
                "fire_chance", data.get("fire_chance", 0.001), float
            ),
        )
        if level.rows < 1:
            raise ValueError(f"level rows must be >= 1, got {level.rows}")
        if level.enemy_speed <= 0:
            raise ValueError(
                f"level enemy_speed must be > 0, got {level.enemy_speed}"
            )
        if not 0.0 <= level.fire_chance <= 1.0:
            raise ValueError(
                f"level fire_chance must be in [0, 1], got {level.fire_chance}"
            )
        return level

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["enemy_type"] = self.enemy_type.value
        return data


def default_levels() -> tuple[LevelSettings, ...]:
    return (
        LevelSettings(rows=3, enemy_speed=1.0, fire_chance=0.001),
        LevelSettings(
            rows=4,
            enemy_speed=1.2,
            enemy_type=EnemyType.ADVANCED,
            fire_chance=0.002,
        ),
        LevelSettings(
            rows=5,
            enemy_speed=1.5,
            enemy_type=EnemyType.BOSS,
            fire_chance=0.003,
        ),
    )


# pylint: disable=too-many-instance-attributes
@dataclass(frozen=True)
class GameSettings:
    """
    Every tunable of a game session.
    """

    width: int = WINDOW_SIZE[0]
    height: int = WINDOW_SIZE[1]
    title: str = TITLE
    fps: int = FPS

    lives: int = LIVES
    player_speed: float = PLAYER_SPEED
    player_boost_speed: float = PLAYER_BOOST_SPEED
    player_cooldown: float = PLAYER_COOLDOWN
    bullet_speed: float = BULLET_SPEED
    descent_step: float = DESCENT_STEP
    enemy_points: int = ENEMY_POINTS
    enemy_cols: int = ENEMY_COLS
    bonus_ship_chance: float = BONUS_SHIP_CHANCE
    bonus_duration: float = BONUS_DURATION
    powerup_drop_chance: float = POWERUP_DROP_CHANCE

    levels: tuple[LevelSettings, ...] = field(default_factory=default_levels)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GameSettings:
        """
        Build settings from the nested layout used by the app::

            {
                "window": {"width": 800, "height": 600, "fps": 60},
                "rules": {"lives": 3, "player_cooldown": 250},
                "levels": [{"rows": 3, "enemy_speed": 1.0}],
            }

        Missing sections and keys keep their defaults. Values are
        converted to the type of the field they set.

        :raises ValueError: On unknown keys, wrong types or out-of-range
            values.
        """
        data = _section(data, "settings")
        unknown = set(data) - {"window", "rules", "levels"}
        if unknown:
            raise ValueError(f"unknown settings sections: {sorted(unknown)}")

        window = _section(data.get("window", {}), "window")
        rules = _section(data.get("rules", {}), "rules")

        if set(window) - set(WINDOW_KEYS):
            raise ValueError(
                f"unknown window keys: {sorted(set(window) - set(WINDOW_KEYS))}"
            )

        # every plain field's type is the type of its default value
        converters: dict[str, Callable[[Any], Any]] = {
            f.name: type(f.default) for f in fields(cls) if f.default is not MISSING
        }
        allowed_rules = set(converters) - set(WINDOW_KEYS)
        if set(rules) - allowed_rules:
            raise ValueError(
                f"unknown rules keys: {sorted(set(rules) - allowed_rules)}"
            )

        kwargs: dict[str, Any] = {
            key: _coerce(key, value, converters[key])
            for key, value in {**window, **rules}.items()
        }
        if "levels" in data:
            levels = data["levels"]
            if not isinstance(levels, (list, tuple)):
                raise ValueError(
                    f"levels must be a list, got {type(levels).__name__}"
                )
            kwargs["levels"] = tuple(
                LevelSettings.from_dict(level) for level in levels
            )

        settings = cls(**kwargs)
        settings.validate()
        return settings

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        levels = [level.to_dict() for level in self.levels]
        window = {key: data.pop(key) for key in WINDOW_KEYS}
        data.pop("levels")
        return {"window": window, "rules": data, "levels": levels}

    def validate(self) -> None:
        """
        :raises ValueError: If any value is out of range.
        """
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"window size must be positive, got {self.width}x{self.height}"
            )
        if self.fps <= 0:
            raise ValueError(f"fps must be > 0, got {self.fps}")
        if self.lives < 1:
            raise ValueError(f"lives must be >= 1, got {self.lives}")
        if self.player_cooldown < 0:
            raise ValueError(
                f"player_cooldown must be >= 0, got {self.player_cooldown}"
            )
        if self.enemy_cols < 1:
            raise ValueError(f"enemy_cols must be >= 1, got {self.enemy_cols}")
        for name in ("bonus_ship_chance", "powerup_drop_chance"):
            chance = getattr(self, name)
            if not 0.0 <= chance <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {chance}")
        if not self.levels:
            raise ValueError("at least one level is required")

    def level(self, number: int) -> LevelSettings:
        """Settings of the 1-based level ``number``, clamped to the last one."""
        index = max(1, min(number, len(self.levels))) - 1
        return self.levels[index]


def _section(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"{what} must be a mapping, got {type(data).__name__}")
    return data


def _coerce(name: str, value: Any, kind: Callable[[Any], Any]) -> Any:
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid value for {name}: {value!r}") from e


def _reject_unknown(cls: type, data: Mapping[str, Any], what: str) -> None:
    unknown = set(data) - {f.name for f in fields(cls)}
    if unknown:
        raise ValueError(f"unknown {what} keys: {sorted(unknown)}")
