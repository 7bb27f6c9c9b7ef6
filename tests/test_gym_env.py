"""Tests for Gymnasium environment wrapper."""

import numpy as np
import pytest

from circle_platformer.config import GameConfig, PhysicsConfig, CONFIGS
from circle_platformer.gym_env import CirclePlatformerEnv, STATE_SIZE
from circle_platformer.levels import Level, LevelCatalog, Platform


def idle_action():
    return {"move_x": np.array([0.0], dtype=np.float32), "jump": 0}


def right_action(jump=0):
    return {"move_x": np.array([1.0], dtype=np.float32), "jump": jump}


@pytest.fixture
def env():
    e = CirclePlatformerEnv()
    yield e
    e.close()


class TestCirclePlatformerEnvCreation:
    def test_create_default(self, env):
        assert env.observation_space is not None
        assert env.action_space is not None
        assert env.level_id == 1

    def test_create_with_config(self):
        env = CirclePlatformerEnv(config=CONFIGS["moon"])
        assert env.config.physics.gravity == 0.3
        env.close()

    def test_custom_resolution(self):
        env = CirclePlatformerEnv(obs_resolution=(64, 64))
        obs, _ = env.reset(seed=42)
        assert obs["rgb"].shape == (64, 64, 3)
        env.close()

    def test_action_space_sample_is_accepted(self, env):
        env.reset(seed=0)
        env.action_space.seed(0)
        obs, reward, terminated, truncated, info = env.step(env.action_space.sample())
        assert env.observation_space.contains(obs)


class TestCirclePlatformerEnvReset:
    def test_reset_returns_obs_and_info(self, env):
        obs, info = env.reset(seed=42)
        assert "rgb" in obs
        assert "state" in obs
        assert info["mode"] == "playing"
        assert info["episode_steps"] == 0
        assert info["lives"] == 3

    def test_obs_shapes(self, env):
        obs, _ = env.reset(seed=42)
        assert obs["rgb"].shape == (128, 256, 3)
        assert obs["rgb"].dtype == np.uint8
        assert obs["state"].shape == (STATE_SIZE,)
        assert obs["state"].dtype == np.float32

    def test_obs_in_observation_space(self, env):
        obs, _ = env.reset(seed=42)
        assert env.observation_space.contains(obs)

    def test_initial_state_vector(self, env):
        obs, _ = env.reset(seed=42)
        state = obs["state"]
        assert state[0] == pytest.approx(50.0)
        assert state[1] == pytest.approx(0.0)
        assert state[4] == 0.0  # spawns airborne
        assert state[5] == 3.0
        assert state[6] == 0.0
        assert state[7] == 3.0
        assert state[8] == 1.0
        assert state[9] == 1.0
        assert state[10] == 0.0
        assert state[11] == 1.0
        assert state[12] == 0.0
        assert state[13] == 0.0
        # Enemy at x=450, nearest coin at (200, 300)
        assert state[14] == pytest.approx(400.0)
        assert state[15] == pytest.approx(150.0)
        assert state[16] == pytest.approx(300.0)

    def test_level_option(self, env):
        obs, info = env.reset(seed=0, options={"level_id": 2})
        assert obs["state"][9] == 2.0
        assert obs["state"][8] == 2.0
        assert info["level_id"] == 2

    def test_unknown_level(self, env):
        with pytest.raises(ValueError):
            env.reset(options={"level_id": 99})

    def test_step_before_reset(self, env):
        with pytest.raises(AssertionError):
            env.step(idle_action())


class TestCirclePlatformerEnvStep:
    def test_step_returns_correct_types(self, env):
        env.reset(seed=42)
        obs, reward, terminated, truncated, info = env.step(idle_action())
        assert isinstance(reward, float)
        assert isinstance(terminated, bool)
        assert isinstance(truncated, bool)
        assert "reward_signals" in info
        assert "events" in info

    def test_idle_reward_is_step_penalty(self, env):
        env.reset(seed=42)
        _, reward, _, _, info = env.step(idle_action())
        assert info["reward_signals"]["step"] == 1.0
        assert reward == pytest.approx(-0.01)

    def test_player_lands(self, env):
        env.reset(seed=42)
        for _ in range(60):
            obs, _, _, _, _ = env.step(idle_action())
        assert obs["state"][1] == pytest.approx(350.0)
        assert obs["state"][4] == 1.0

    def test_move_dead_zone(self, env):
        env.reset(seed=42)
        action = {"move_x": np.array([0.005], dtype=np.float32), "jump": 0}
        obs, _, _, _, _ = env.step(action)
        assert obs["state"][0] == pytest.approx(50.0)

    def test_truncation(self):
        env = CirclePlatformerEnv(max_episode_steps=10)
        env.reset(seed=42)
        for _ in range(10):
            _, _, terminated, truncated, _ = env.step(idle_action())
        assert truncated
        assert not terminated
        env.close()

    def test_walking_into_enemy_ends_in_game_over(self, env):
        env.reset(seed=42)
        total_hits = 0.0
        total_reward = 0.0
        for _ in range(1000):
            obs, reward, terminated, truncated, info = env.step(right_action())
            total_hits += info["reward_signals"]["hit"]
            total_reward += reward
            if terminated or truncated:
                break

        assert terminated
        assert info["mode"] == "game-over"
        assert info["reward_signals"]["game_over"] == 1.0
        assert total_hits == 3.0
        assert total_reward < 0
        # Terminal observation reflects the tick that ended the level
        assert info["lives"] == 0
        assert info["game_over"]
        assert not info["level_complete"]
        assert obs["state"][5] == 0.0
        assert obs["state"][11] == 0.0
        assert obs["state"][13] == 1.0

    def test_clearing_level_reports_final_coin(self):
        """One coin just above the ground is picked up on the way down."""
        tiny = Level(
            id=1, name="Tiny", width=800, height=400,
            platforms=[Platform(0, 380, 800, 20)],
            coins=[(50, 340)],
        )
        config = GameConfig(levels=LevelCatalog([tiny]))
        env = CirclePlatformerEnv(config=config)
        env.reset(seed=0)
        for _ in range(100):
            obs, _, terminated, truncated, info = env.step(idle_action())
            if terminated or truncated:
                break

        assert terminated
        assert info["episode_steps"] == 28
        assert info["mode"] == "level-select"
        assert info["level_complete"]
        assert not info["game_over"]
        assert info["coins_collected"] == 1
        assert info["reward_signals"]["complete"] == 1.0
        state = obs["state"]
        assert state[6] == 1.0
        assert state[7] == 1.0
        assert state[11] == 0.0
        assert state[12] == 1.0
        assert state[15] == 0.0
        env.close()

    def test_episode_progress(self):
        env = CirclePlatformerEnv(max_episode_steps=100)
        env.reset(seed=42)
        for _ in range(25):
            obs, _, _, _, _ = env.step(idle_action())
        assert obs["state"][10] == pytest.approx(0.25)
        env.close()


class TestCirclePlatformerEnvRender:
    def test_rgb_array_mode(self):
        env = CirclePlatformerEnv(render_mode="rgb_array")
        obs, _ = env.reset(seed=42)
        assert obs["rgb"].max() > 0
        frame = env.render()
        assert frame.shape == (128, 256, 3)
        env.close()

    def test_no_render_mode_gives_blank_rgb(self, env):
        obs, _ = env.reset(seed=42)
        assert obs["rgb"].max() == 0


class TestRandomizedPhysics:
    def test_physics_within_ranges(self):
        env = CirclePlatformerEnv(randomize_physics=True)
        for seed in range(5):
            _, info = env.reset(seed=seed)
            physics = info["physics"]
            assert PhysicsConfig.GRAVITY_RANGE[0] <= physics["gravity"] <= PhysicsConfig.GRAVITY_RANGE[1]
            assert PhysicsConfig.MOVE_SPEED_RANGE[0] <= physics["move_speed"] <= PhysicsConfig.MOVE_SPEED_RANGE[1]
        env.close()

    def test_same_seed_same_physics(self):
        env = CirclePlatformerEnv(randomize_physics=True)
        _, info1 = env.reset(seed=7)
        _, info2 = env.reset(seed=7)
        assert info1["physics"] == info2["physics"]
        env.close()

    def test_fixed_physics_by_default(self, env):
        _, info = env.reset(seed=3)
        assert info["physics"] == GameConfig().physics.to_dict()
