"""Pytest configuration and shared fixtures."""

import os

# Ensure headless pygame for all tests
os.environ['SDL_VIDEODRIVER'] = 'dummy'

import pytest

from circle_platformer.config import GameConfig
from circle_platformer.physics import PlayerState
from circle_platformer.entities import spawn_enemies
from circle_platformer.progression import Mode, GameState, Session


@pytest.fixture
def game_config():
    """Default game configuration."""
    return GameConfig()


@pytest.fixture
def level1(game_config):
    return game_config.levels.get(1)


@pytest.fixture
def level2(game_config):
    return game_config.levels.get(2)


@pytest.fixture
def playing_state(game_config):
    """Factory for a PLAYING state with a hand-placed player."""

    def make(level_id=1, player=None, lives=3, collected=frozenset(), enemies=None, unlocked=(1,)):
        level = game_config.levels.get(level_id)
        session = Session(
            level=level,
            player=player or PlayerState(50.0, 0.0),
            lives=lives,
            collected=frozenset(collected),
            enemies=spawn_enemies(level) if enemies is None else tuple(enemies),
        )
        return GameState(
            mode=Mode.PLAYING,
            unlocked=frozenset(unlocked),
            level_id=level_id,
            session=session,
        )

    return make
