"""Player physics: velocity integration and platform collision resolution.

One call to ``step_player`` advances the player by one tick:

1. horizontal velocity is set straight from the held direction
2. gravity is added to vertical velocity, then replaced by the jump
   velocity when jumping from the ground
3. explicit Euler step, horizontal clamp to the world
4. landing/ceiling resolution against every platform, in level order
5. world floor clamp, ceiling bump cancels vertical velocity

Collision compares the previous frame's edges with the candidate ones, so a
thin platform can be skipped by a fast enough horizontal move.
"""

from dataclasses import dataclass
from typing import Tuple, Sequence

from .config import PhysicsConfig
from .input_state import InputIntent
from .levels import Level, Platform


@dataclass(frozen=True)
class PlayerState:
    """Kinematic state of the player for one tick."""
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    grounded: bool = False

    @classmethod
    def spawn(cls, start: Tuple[float, float]) -> "PlayerState":
        """Fresh player at rest, airborne, at the given start point."""
        return cls(x=float(start[0]), y=float(start[1]))

    @property
    def position(self) -> Tuple[float, float]:
        return self.x, self.y

    @property
    def velocity(self) -> Tuple[float, float]:
        return self.vx, self.vy

    def bounds(self, size: float) -> Tuple[float, float, float, float]:
        """Get (left, top, right, bottom) bounds."""
        return self.x, self.y, self.x + size, self.y + size


@dataclass(frozen=True)
class PhysicsStep:
    """Outcome of one physics tick."""
    player: PlayerState
    jumped: bool = False
    hit_ceiling: bool = False


def apply_intent(
    player: PlayerState, intent: InputIntent, physics: PhysicsConfig
) -> Tuple[float, float, bool]:
    """Compute the new (vx, vy) and whether a jump started this tick."""
    vx = intent.direction * physics.move_speed
    vy = player.vy + physics.gravity

    jumped = False
    if intent.jump and player.grounded:
        vy = physics.jump_velocity
        jumped = True

    return vx, vy, jumped


def clamp_x(x: float, level: Level, size: float) -> float:
    """Keep the player's box inside the level horizontally."""
    if x < 0:
        x = 0.0
    if x > level.width - size:
        x = level.width - size
    return x


def resolve_platforms(
    prev_y: float,
    x: float,
    y: float,
    vy: float,
    platforms: Sequence[Platform],
    size: float,
    ceiling_offset: float,
) -> Tuple[float, bool, bool]:
    """Resolve the candidate position against platforms.

    Returns (y, grounded, hit_ceiling). Platforms are visited in order and
    each test sees the y left by the previous one, so the last matching
    platform wins.
    """
    grounded = False
    hit_ceiling = False

    for plat in platforms:
        if not (x + size > plat.left and x < plat.right):
            continue

        # Landing on top: was above, now at or below the top, moving down
        if prev_y + size <= plat.top and y + size >= plat.top and vy >= 0:
            y = plat.top - size
            grounded = True
            hit_ceiling = False
        # Head bump: was below the bottom, now at or above it, moving up
        elif prev_y >= plat.bottom and y <= plat.bottom and vy < 0:
            y = plat.bottom + ceiling_offset
            hit_ceiling = True

    return y, grounded, hit_ceiling


def step_player(
    player: PlayerState,
    intent: InputIntent,
    level: Level,
    physics: PhysicsConfig,
) -> PhysicsStep:
    """Advance the player by one tick against the level's solids."""
    size = physics.player_size
    vx, vy, jumped = apply_intent(player, intent, physics)

    x = clamp_x(player.x + vx, level, size)
    y = player.y + vy

    y, grounded, hit_ceiling = resolve_platforms(
        player.y, x, y, vy, level.platforms, size, physics.ceiling_offset,
    )

    # World floor overrides any ceiling result
    floor = level.height - size
    if y > floor:
        y = floor
        grounded = True
        hit_ceiling = False

    if hit_ceiling:
        vy = 0.0

    return PhysicsStep(
        player=PlayerState(x=x, y=y, vx=vx, vy=vy, grounded=grounded),
        jumped=jumped,
        hit_ceiling=hit_ceiling,
    )
