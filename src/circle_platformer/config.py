"""Configuration system for the circle platformer.

All tunable constants live in immutable dataclasses that are handed to the
simulation when it is built, instead of being read from module globals:

- PhysicsConfig: per-tick movement constants (units are pixels and ticks)
- EntityConfig: coin/enemy hitboxes, stomp tolerance, lives and spawn point
- GameConfig: both of the above plus the level catalog and display settings
"""

from dataclasses import dataclass, field
from typing import Tuple, Dict, Any, ClassVar, Optional
import random

from .levels import LevelCatalog, default_catalog


@dataclass(frozen=True)
class PhysicsConfig:
    """Per-tick physics constants.

    The simulation uses a fixed implicit timestep of one frame, so velocities
    are in pixels/tick and gravity in pixels/tick².
    """

    gravity: float = 0.8  # Added to vertical velocity every tick (y grows downwards)
    jump_velocity: float = -15.0  # Vertical velocity set on a grounded jump
    move_speed: float = 6.0  # Horizontal speed while left/right is held
    player_size: float = 30.0  # Side of the player's square bounding box
    ceiling_offset: float = 0.5  # Gap left below a platform after a head bump

    # Sampling ranges for domain randomization
    GRAVITY_RANGE: ClassVar[Tuple[float, float]] = (0.4, 1.4)
    JUMP_VELOCITY_RANGE: ClassVar[Tuple[float, float]] = (-20.0, -10.0)
    MOVE_SPEED_RANGE: ClassVar[Tuple[float, float]] = (3.0, 10.0)

    def __post_init__(self):
        if self.gravity <= 0:
            raise ValueError(f"gravity must be positive (y grows downwards), got {self.gravity}")
        if self.player_size <= 0:
            raise ValueError(f"player_size must be positive, got {self.player_size}")

    @classmethod
    def sample(cls, rng: Optional[random.Random] = None) -> "PhysicsConfig":
        """Sample gravity, jump velocity and move speed; sizes stay fixed."""
        rng = rng or random
        return cls(
            gravity=rng.uniform(*cls.GRAVITY_RANGE),
            jump_velocity=rng.uniform(*cls.JUMP_VELOCITY_RANGE),
            move_speed=rng.uniform(*cls.MOVE_SPEED_RANGE),
        )

    @property
    def stomp_bounce(self) -> float:
        """Vertical velocity after stomping an enemy (half a jump)."""
        return self.jump_velocity / 2

    def to_dict(self) -> Dict[str, float]:
        return {
            "gravity": self.gravity,
            "jump_velocity": self.jump_velocity,
            "move_speed": self.move_speed,
            "player_size": self.player_size,
            "ceiling_offset": self.ceiling_offset,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, float]) -> "PhysicsConfig":
        return cls(
            gravity=d.get("gravity", 0.8),
            jump_velocity=d.get("jump_velocity", -15.0),
            move_speed=d.get("move_speed", 6.0),
            player_size=d.get("player_size", 30.0),
            ceiling_offset=d.get("ceiling_offset", 0.5),
        )


@dataclass(frozen=True)
class EntityConfig:
    """Coin/enemy interaction constants and per-session player defaults."""

    coin_size: float = 20.0  # Coin hitbox side
    enemy_size: float = 30.0  # Enemy hitbox side
    stomp_tolerance: float = 10.0  # How far below an enemy's top a stomp still counts
    starting_lives: int = 3
    player_start: Tuple[float, float] = (50.0, 0.0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coin_size": self.coin_size,
            "enemy_size": self.enemy_size,
            "stomp_tolerance": self.stomp_tolerance,
            "starting_lives": self.starting_lives,
            "player_start": list(self.player_start),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "EntityConfig":
        return cls(
            coin_size=d.get("coin_size", 20.0),
            enemy_size=d.get("enemy_size", 30.0),
            stomp_tolerance=d.get("stomp_tolerance", 10.0),
            starting_lives=d.get("starting_lives", 3),
            player_start=tuple(d.get("player_start", (50.0, 0.0))),
        )


@dataclass(frozen=True)
class GameConfig:
    """Complete game configuration combining all parameter groups."""
    physics: PhysicsConfig = field(default_factory=PhysicsConfig)
    entities: EntityConfig = field(default_factory=EntityConfig)
    levels: LevelCatalog = field(default_factory=default_catalog)

    # Display settings (not used by the simulation)
    screen_width: int = 800
    screen_height: int = 440
    hud_height: int = 40
    fps: int = 60

    def to_dict(self) -> Dict[str, Any]:
        """Convert to nested dictionary."""
        return {
            "physics": self.physics.to_dict(),
            "entities": self.entities.to_dict(),
            "levels": self.levels.to_list(),
            "screen_width": self.screen_width,
            "screen_height": self.screen_height,
            "hud_height": self.hud_height,
            "fps": self.fps,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GameConfig":
        levels = d.get("levels")
        return cls(
            physics=PhysicsConfig.from_dict(d.get("physics", {})),
            entities=EntityConfig.from_dict(d.get("entities", {})),
            levels=LevelCatalog.from_list(levels) if levels else default_catalog(),
            screen_width=d.get("screen_width", 800),
            screen_height=d.get("screen_height", 440),
            hud_height=d.get("hud_height", 40),
            fps=d.get("fps", 60),
        )


# Predefined configurations
CONFIGS = {
    # Standard feel
    "default": GameConfig(),

    # Low gravity, long hang time
    "moon": GameConfig(physics=PhysicsConfig(gravity=0.3, jump_velocity=-10.0)),

    # Fast fall, short hops
    "heavy": GameConfig(physics=PhysicsConfig(gravity=1.4, jump_velocity=-18.0)),

    # Quick horizontal movement, one extra life
    "sprint": GameConfig(
        physics=PhysicsConfig(move_speed=10.0),
        entities=EntityConfig(starting_lives=4),
    ),
}
