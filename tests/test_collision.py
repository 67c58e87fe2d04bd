from dataclasses import replace

from arcade_invaders.entities import (
    BonusType,
    Bullet,
    PowerUpDrop,
    Ship,
    ShipKind,
)
from arcade_invaders.scenes.invaders import find_hits
from tests.conftest import make_enemy


def test_first_match_in_iteration_order():
    first = make_enemy(100, 50)
    second = make_enemy(110, 50)
    bullet = Bullet.vertical(115, 60, -1)

    hits = find_hits([bullet], [first, second])

    assert hits == [(bullet, first)]
    assert not first.alive
    assert second.alive
    assert not bullet.alive


def test_one_enemy_consumes_one_bullet():
    enemy = make_enemy(100, 50)
    a = Bullet.vertical(110, 60, -1)
    b = Bullet.vertical(120, 60, -1)

    hits = find_hits([a, b], [enemy])

    assert hits == [(a, enemy)]
    assert b.alive


def test_scan_leaves_collections_intact():
    enemies = [make_enemy(100, 50), make_enemy(160, 50)]
    bullets = [Bullet.vertical(110, 60, -1), Bullet.vertical(170, 60, -1)]

    hits = find_hits(bullets, enemies)

    assert len(hits) == 2
    assert len(enemies) == 2
    assert len(bullets) == 2


def test_adjacent_hits_are_all_removed(scene):
    scene.world.enemies = [make_enemy(100, 50), make_enemy(160, 50)]
    scene.world.enemies.append(make_enemy(400, 50))
    scene.world.player.bullets = [
        Bullet.vertical(110, 67, -1),
        Bullet.vertical(170, 67, -1),
    ]

    session = scene.tick(16)

    assert [e.x for e in scene.world.enemies] == [401]
    assert scene.world.player.bullets == []
    assert session.score == 20
    assert session.stats.enemies_destroyed == 2
    assert session.stats.shots_hit == 2


def test_enemy_bullet_costs_a_life(scene):
    player = scene.world.player
    enemy = scene.world.enemies[0]
    enemy.bullets.append(
        Bullet.vertical(player.x + 10, player.y, 1, owner="enemy")
    )

    session = scene.tick(16)

    assert session.lives == 2
    assert enemy.bullets == []


def test_bullet_shield_absorbs_hits(scene):
    player = scene.world.player
    player.apply_bonus(BonusType.BULLET_SHIELD, 10000)
    enemy = scene.world.enemies[0]
    enemy.bullets.append(
        Bullet.vertical(player.x + 10, player.y, 1, owner="enemy")
    )

    session = scene.tick(16)

    assert session.lives == 3
    assert enemy.bullets == []


def _bonus_ship(payload):
    return Ship(
        kind=ShipKind.BONUS,
        x=300,
        y=40,
        width=60,
        height=20,
        speed=2,
        heading=1,
        payload=payload,
    )


def test_shooting_the_bonus_ship_grants_a_life(scene):
    scene.world.bonus_ship = _bonus_ship(BonusType.EXTRA_LIFE)
    scene.world.player.bullets = [Bullet.vertical(320, 52, -1)]

    session = scene.tick(16)

    assert scene.world.bonus_ship is None
    assert session.lives == 4
    assert session.stats.powerups_collected == 1
    assert session.score == 0


def test_shooting_the_bonus_ship_arms_the_player(scene):
    scene.world.bonus_ship = _bonus_ship(BonusType.MULTI_SHOT)
    scene.world.player.bullets = [Bullet.vertical(320, 52, -1)]

    scene.tick(16)

    assert scene.world.player.has_bonus(BonusType.MULTI_SHOT)


def test_crossing_bullets_destroy_each_other(scene):
    enemy = scene.world.enemies[0]
    enemy.bullets.append(Bullet.vertical(200, 300, 1, owner="enemy"))
    scene.world.player.bullets = [Bullet.vertical(200, 320, -1)]

    session = scene.tick(16)

    assert scene.world.player.bullets == []
    assert enemy.bullets == []
    assert session.lives == 3
    assert session.score == 0


def test_clash_pairs_one_bullet_with_one_bullet():
    ours = [Bullet.vertical(200, 300, -1), Bullet.vertical(202, 305, -1)]
    theirs = [Bullet.vertical(201, 310, 1, owner="enemy")]

    hits = find_hits(ours, theirs)

    assert hits == [(ours[0], theirs[0])]
    assert ours[1].alive


def test_destroyed_enemy_may_drop_a_power_up(scene):
    scene.settings = replace(scene.settings, powerup_drop_chance=1.0)
    scene.world.enemies = [make_enemy(100, 50), make_enemy(400, 50)]
    scene.world.player.bullets = [Bullet.vertical(110, 67, -1)]

    scene.tick(16)

    assert len(scene.world.drops) == 1
    drop = scene.world.drops[0]
    assert (drop.x, drop.y) == (111, 55)
    assert drop.payload in BonusType


def test_no_drop_when_the_roll_fails(scene):
    scene.world.enemies = [make_enemy(100, 50), make_enemy(400, 50)]
    scene.world.player.bullets = [Bullet.vertical(110, 67, -1)]

    scene.tick(16)

    assert scene.world.drops == []


def test_touching_a_drop_applies_its_bonus(scene):
    player = scene.world.player
    scene.world.drops = [
        PowerUpDrop(player.x + 10, player.y - 21, BonusType.MULTI_SHOT)
    ]

    session = scene.tick(16)

    assert scene.world.drops == []
    assert player.has_bonus(BonusType.MULTI_SHOT)
    assert session.stats.powerups_collected == 1


def test_extra_life_drop(scene):
    player = scene.world.player
    scene.world.drops = [
        PowerUpDrop(player.x, player.y, BonusType.EXTRA_LIFE)
    ]

    session = scene.tick(16)

    assert session.lives == 4
    assert session.stats.powerups_collected == 1


def test_missed_drops_fall_off_the_playfield(scene):
    drop = PowerUpDrop(10, 599, BonusType.RAPID_FIRE)
    scene.world.drops = [drop]

    scene.tick(16)

    assert scene.world.drops == []
    assert scene.session.stats.powerups_collected == 0
