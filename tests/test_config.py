"""Tests for configuration system."""

import random

import pytest

from circle_platformer.config import PhysicsConfig, EntityConfig, GameConfig, CONFIGS


class TestPhysicsConfig:
    def test_defaults(self):
        config = PhysicsConfig()
        assert config.gravity == 0.8
        assert config.jump_velocity == -15.0
        assert config.move_speed == 6.0
        assert config.player_size == 30.0
        assert config.ceiling_offset == 0.5

    def test_stomp_bounce_is_half_jump(self):
        assert PhysicsConfig().stomp_bounce == pytest.approx(-7.5)

    @pytest.mark.parametrize("gravity", [0.0, -0.8])
    def test_rejects_non_positive_gravity(self, gravity):
        with pytest.raises(ValueError):
            PhysicsConfig(gravity=gravity)

    def test_rejects_non_positive_player_size(self):
        with pytest.raises(ValueError):
            PhysicsConfig(player_size=0.0)

    def test_from_dict_validates(self):
        with pytest.raises(ValueError):
            PhysicsConfig.from_dict({"gravity": -1.0})

    def test_sample_within_ranges(self):
        rng = random.Random(0)
        for _ in range(20):
            config = PhysicsConfig.sample(rng)
            assert PhysicsConfig.GRAVITY_RANGE[0] <= config.gravity <= PhysicsConfig.GRAVITY_RANGE[1]
            assert PhysicsConfig.JUMP_VELOCITY_RANGE[0] <= config.jump_velocity <= PhysicsConfig.JUMP_VELOCITY_RANGE[1]
            assert PhysicsConfig.MOVE_SPEED_RANGE[0] <= config.move_speed <= PhysicsConfig.MOVE_SPEED_RANGE[1]
            # Hitbox is not randomized
            assert config.player_size == 30.0

    def test_frozen(self):
        config = PhysicsConfig()
        with pytest.raises(Exception):
            config.gravity = 2.0

    def test_from_dict_fills_defaults(self):
        config = PhysicsConfig.from_dict({"gravity": 1.0})
        assert config.gravity == 1.0
        assert config.jump_velocity == -15.0


class TestEntityConfig:
    def test_defaults(self):
        config = EntityConfig()
        assert config.coin_size == 20.0
        assert config.enemy_size == 30.0
        assert config.stomp_tolerance == 10.0
        assert config.starting_lives == 3
        assert config.player_start == (50.0, 0.0)

    def test_dict_round_trip(self):
        config = EntityConfig(starting_lives=5, player_start=(10.0, 20.0))
        assert EntityConfig.from_dict(config.to_dict()) == config


class TestGameConfig:
    def test_default_catalog(self):
        config = GameConfig()
        assert config.levels.ids == (1, 2)
        assert config.fps == 60

    def test_to_dict(self):
        d = GameConfig().to_dict()
        assert d["physics"]["gravity"] == 0.8
        assert d["entities"]["starting_lives"] == 3
        assert [lvl["id"] for lvl in d["levels"]] == [1, 2]

    def test_from_dict(self):
        config = GameConfig.from_dict({"physics": {"move_speed": 9.0}, "fps": 30})
        assert config.physics.move_speed == 9.0
        assert config.fps == 30
        assert config.levels.ids == (1, 2)


class TestPresets:
    def test_default_preset(self):
        assert CONFIGS["default"].physics == PhysicsConfig()

    def test_presets_differ(self):
        assert CONFIGS["moon"].physics.gravity < CONFIGS["heavy"].physics.gravity
        assert CONFIGS["sprint"].entities.starting_lives == 4
