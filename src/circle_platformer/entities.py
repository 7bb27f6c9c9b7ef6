"""Coin and enemy interactions with the player.

Enemies are an arena of immutable records addressed by their index in the
level's spawn list; killing one replaces the record with a dead copy.
Coins are never mutated: collection is a set of indices held by the session.
"""

from dataclasses import dataclass, replace
from typing import Tuple, FrozenSet, Sequence

from .config import PhysicsConfig, EntityConfig
from .levels import Level
from .physics import PlayerState


@dataclass(frozen=True)
class Box:
    """Axis-aligned box in screen coordinates (y down)."""
    x: float
    y: float
    width: float
    height: float

    def overlaps(self, other: "Box") -> bool:
        """Strict overlap; touching edges do not count."""
        return (
            self.x < other.x + other.width
            and self.x + self.width > other.x
            and self.y < other.y + other.height
            and self.y + self.height > other.y
        )


@dataclass(frozen=True)
class Enemy:
    """Runtime enemy spawned from a level definition."""
    x: float
    y: float
    alive: bool = True

    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y

    def stomped(self) -> "Enemy":
        return replace(self, alive=False)

    def box(self, size: float) -> Box:
        return Box(self.x, self.y, size, size)


def spawn_enemies(level: Level) -> Tuple[Enemy, ...]:
    """All of the level's enemies, alive, in spawn-list order."""
    return tuple(Enemy(float(x), float(y)) for x, y in level.enemies)


def player_box(player: PlayerState, size: float) -> Box:
    return Box(player.x, player.y, size, size)


@dataclass(frozen=True)
class EntityOutcome:
    """Result of resolving one tick of coin/enemy contacts."""
    player: PlayerState
    collected: FrozenSet[int]
    enemies: Tuple[Enemy, ...]
    lives: int
    new_coins: Tuple[int, ...] = ()
    stomped: Tuple[int, ...] = ()
    hits: int = 0

    @property
    def game_over(self) -> bool:
        return self.lives <= 0


def collect_coins(
    player: PlayerState,
    level: Level,
    collected: FrozenSet[int],
    physics: PhysicsConfig,
    entities: EntityConfig,
) -> Tuple[int, ...]:
    """Indices of uncollected coins the player touches this tick."""
    box = player_box(player, physics.player_size)
    touched = []
    for i, (cx, cy) in enumerate(level.coins):
        if i in collected:
            continue
        if box.overlaps(Box(cx, cy, entities.coin_size, entities.coin_size)):
            touched.append(i)
    return tuple(touched)


def is_stomp(
    player: PlayerState, enemy: Enemy, physics: PhysicsConfig, entities: EntityConfig
) -> bool:
    """Falling onto the enemy from (nearly) above."""
    _, _, _, bottom = player.bounds(physics.player_size)
    return player.vy > 0 and bottom <= enemy.y + entities.stomp_tolerance


def resolve_enemies(
    player: PlayerState,
    enemies: Sequence[Enemy],
    lives: int,
    physics: PhysicsConfig,
    entities: EntityConfig,
) -> Tuple[PlayerState, Tuple[Enemy, ...], int, Tuple[int, ...], int]:
    """Stomp or take damage from every living enemy the player touches.

    Every enemy is tested against the player as it was when resolution
    started, so two simultaneous side contacts cost two lives even though
    the first one already sent the player back to the start point. Writes
    to the player happen in list order; the last one wins.

    Returns (player, enemies, lives, stomped indices, hits taken).
    """
    contact = player  # frozen view used for every test
    box = player_box(contact, physics.player_size)
    result = player
    updated = list(enemies)
    stomped = []
    hits = 0

    for i, enemy in enumerate(enemies):
        if not enemy.alive:
            continue
        if not box.overlaps(enemy.box(entities.enemy_size)):
            continue

        if is_stomp(contact, enemy, physics, entities):
            updated[i] = enemy.stomped()
            stomped.append(i)
            result = replace(result, vy=physics.stomp_bounce)
        else:
            hits += 1
            lives = max(lives - 1, 0)
            sx, sy = entities.player_start
            result = replace(result, x=float(sx), y=float(sy), vx=0.0, vy=0.0)

    return result, tuple(updated), lives, tuple(stomped), hits


def resolve_entities(
    player: PlayerState,
    level: Level,
    collected: FrozenSet[int],
    enemies: Sequence[Enemy],
    lives: int,
    physics: PhysicsConfig,
    entities: EntityConfig,
) -> EntityOutcome:
    """Resolve coin pickups, then enemy contacts, for the post-physics player."""
    new_coins = collect_coins(player, level, collected, physics, entities)
    collected = collected | frozenset(new_coins)

    player, enemies, lives, stomped, hits = resolve_enemies(
        player, enemies, lives, physics, entities,
    )

    return EntityOutcome(
        player=player,
        collected=collected,
        enemies=enemies,
        lives=lives,
        new_coins=new_coins,
        stomped=stomped,
        hits=hits,
    )
