"""circle-platformer: 2D platformer with a deterministic per-frame simulation core.

A player-controlled circle runs and jumps across static platforms, collecting
coins and stomping enemies. The simulation is a pure tick function over
immutable state snapshots; pygame supplies the window and keyboard, and a
Gymnasium environment exposes the same core for automated play.
"""

from .config import PhysicsConfig, EntityConfig, GameConfig, CONFIGS
from .levels import Platform, Level, LevelCatalog, LEVELS, default_catalog
from .input_state import InputIntent, InputState
from .physics import PlayerState, step_player
from .entities import Enemy, resolve_entities
from .progression import Mode, GameState, Session
from .simulation import Simulation, FrameState, TickEvents, tick

__all__ = [
    "PhysicsConfig",
    "EntityConfig",
    "GameConfig",
    "CONFIGS",
    "Platform",
    "Level",
    "LevelCatalog",
    "LEVELS",
    "default_catalog",
    "InputIntent",
    "InputState",
    "PlayerState",
    "step_player",
    "Enemy",
    "resolve_entities",
    "Mode",
    "GameState",
    "Session",
    "Simulation",
    "FrameState",
    "TickEvents",
    "tick",
]
