"""Gymnasium environment wrapper for the circle platformer.

Provides standard Gym API for scripted play, RL training and data collection.
Observations include both RGB frames and a structured state vector.
"""

import random
from dataclasses import replace
from typing import Optional, Dict, Any, Tuple

import numpy as np
import gymnasium
from gymnasium import spaces

import pygame

from .config import GameConfig, PhysicsConfig
from .input_state import InputIntent
from .render import Renderer, follow_camera
from .simulation import Simulation, FrameState, TickEvents


# |move_x| below this is treated as no horizontal input
MOVE_DEAD_ZONE = 0.01

STATE_SIZE = 17


class CirclePlatformerEnv(gymnasium.Env):
    """Gymnasium wrapper for the platformer.

    Observation space (Dict):
        'rgb': uint8 array of shape (H, W, 3) - rendered frame (no HUD)
        'state': float32 array of shape (17,) - state vector containing:
            [0-1] player position (x, y)
            [2-3] player velocity (vx, vy)
            [4]   player grounded (0/1)
            [5]   lives
            [6]   coins collected
            [7]   coins in level
            [8]   enemies alive
            [9]   level id
            [10]  episode progress (steps / max_steps)
            [11]  playing (0 once the level is cleared or lost)
            [12]  level cleared on this step (0/1)
            [13]  game over on this step (0/1)
            [14]  x offset to the nearest living enemy (0 if none)
            [15]  x offset to the nearest uncollected coin (0 if none)
            [16]  y offset to that coin (negative is above the player)

    The observation on the terminating step shows the level as that step
    left it (final lives, coins and enemy flags), with the playing flag
    cleared and the outcome flag set.

    Action space (Dict):
        'move_x': float in [-1, 1] - sign picks left/right, dead zone near 0
        'jump':   int in {0, 1} - jump held

    Reward = weighted sum of raw signals (stored in info['reward_signals']):
        coin:      coins picked up this tick
        stomp:     enemies stomped this tick
        hit:       lives lost this tick
        complete:  1.0 when the level is cleared
        game_over: 1.0 when the last life is lost
        step:      1.0 every step
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
        obs_resolution: Tuple[int, int] = (128, 256),
        max_episode_steps: int = 2000,
        reward_weights: Optional[Dict[str, float]] = None,
        level_id: int = 1,
        randomize_physics: bool = False,
    ):
        super().__init__()

        self.config = config or GameConfig()
        self.render_mode = render_mode
        self.obs_height, self.obs_width = obs_resolution
        self.max_episode_steps = max_episode_steps
        self.level_id = level_id
        self.randomize_physics = randomize_physics

        self.reward_weights = reward_weights or {
            "coin": 10.0,
            "stomp": 5.0,
            "hit": -20.0,
            "complete": 100.0,
            "game_over": -50.0,
            "step": -0.01,
        }

        # Action space: hybrid continuous + discrete
        self.action_space = spaces.Dict({
            "move_x": spaces.Box(
                low=-1.0, high=1.0, shape=(1,), dtype=np.float32,
            ),
            "jump": spaces.Discrete(2),
        })

        # Observation space
        self.observation_space = spaces.Dict({
            "rgb": spaces.Box(
                low=0, high=255,
                shape=(self.obs_height, self.obs_width, 3),
                dtype=np.uint8,
            ),
            "state": spaces.Box(
                low=-np.inf, high=np.inf,
                shape=(STATE_SIZE,),
                dtype=np.float32,
            ),
        })

        # Initialize pygame (caller sets SDL_VIDEODRIVER for headless)
        if not pygame.get_init():
            pygame.init()

        # Offscreen render surface (native resolution)
        self._surface = pygame.Surface(
            (self.config.screen_width, self.config.screen_height)
        )

        # Display for human render mode
        self._display = None
        if render_mode == "human":
            self._display = pygame.display.set_mode(
                (self.config.screen_width, self.config.screen_height)
            )
            pygame.display.set_caption("CirclePlatformerEnv")

        # Game state (populated on reset)
        self._game_config: GameConfig = self.config
        self._renderer = Renderer(self.config)
        self._sim: Optional[Simulation] = None
        self._frame: Optional[FrameState] = None
        self._events = TickEvents()
        self._episode_steps = 0
        self._camera_x = 0.0

    def reset(self, *, seed=None, options=None):
        super().reset(seed=seed)
        options = options or {}
        level_id = options.get("level_id", self.level_id)

        config = self.config
        if self.randomize_physics:
            rng = random.Random(int(self.np_random.integers(0, 2**31)))
            config = replace(config, physics=PhysicsConfig.sample(rng))
        self._game_config = config
        self._renderer = Renderer(config)

        # Every catalog level is playable from the first episode
        self._sim = Simulation(config, unlocked=config.levels.ids)
        if not self._sim.select_level(level_id):
            raise ValueError(f"Unknown level id: {level_id}")

        self._frame = self._sim.last_frame
        self._events = TickEvents()
        self._episode_steps = 0
        self._camera_x = 0.0

        obs = self._get_obs()
        info = self._get_info()
        return obs, info

    def step(self, action):
        assert self._sim is not None, "Must call reset() before step()"

        intent = self._action_to_intent(action)
        events = self._sim.step(intent)
        self._episode_steps += 1

        self._frame = self._sim.last_frame
        self._events = events
        if self._sim.running:
            self._update_camera()

        # Compute reward
        reward_signals = self._compute_rewards(events)
        reward = sum(
            self.reward_weights.get(k, 0.0) * v
            for k, v in reward_signals.items()
        )

        terminated = not self._sim.running
        truncated = self._episode_steps >= self.max_episode_steps

        obs = self._get_obs()
        info = self._get_info()
        info["reward_signals"] = reward_signals
        info["events"] = events

        if self.render_mode == "human":
            self.render()

        return obs, float(reward), terminated, truncated, info

    # ------------------------------------------------------------------
    # Action handling
    # ------------------------------------------------------------------

    def _action_to_intent(self, action) -> InputIntent:
        move_x = action["move_x"]
        if isinstance(move_x, np.ndarray):
            move_x = float(move_x.item())
        move_x = float(move_x)

        jump = action["jump"]
        if isinstance(jump, np.ndarray):
            jump = int(jump.item())
        jump = int(jump)

        return InputIntent(
            left=move_x < -MOVE_DEAD_ZONE,
            right=move_x > MOVE_DEAD_ZONE,
            jump_space=bool(jump),
        )

    def _update_camera(self):
        level = self._sim.level
        px, _ = self._frame.player_position
        self._camera_x = follow_camera(
            self._camera_x, px, level.width, self._game_config.screen_width,
        )

    # ------------------------------------------------------------------
    # Reward computation
    # ------------------------------------------------------------------

    def _compute_rewards(self, events: TickEvents) -> Dict[str, float]:
        return {
            "coin": float(len(events.coins)),
            "stomp": float(len(events.stomped)),
            "hit": float(events.hits),
            "complete": 1.0 if events.completed_level is not None else 0.0,
            "game_over": 1.0 if events.game_over else 0.0,
            "step": 1.0,
        }

    # ------------------------------------------------------------------
    # Observations
    # ------------------------------------------------------------------

    def _get_obs(self):
        # Only render RGB when someone will actually use it
        if self.render_mode in ("rgb_array", "human"):
            rgb = self._render_frame()
        else:
            rgb = np.zeros(
                (self.obs_height, self.obs_width, 3), dtype=np.uint8
            )
        state = self._get_state_vector()
        return {"rgb": rgb, "state": state}

    def _get_state_vector(self):
        state = np.zeros(STATE_SIZE, dtype=np.float32)
        frame = self._frame
        if frame is None:
            return state

        px, py = frame.player_position
        vx, vy = frame.player_velocity
        state[0] = px
        state[1] = py
        state[2] = vx
        state[3] = vy
        state[4] = float(frame.grounded)
        state[5] = float(frame.lives)
        state[6] = float(frame.coins_collected)
        state[7] = float(frame.coins_total)
        state[8] = float(frame.enemies_alive)
        state[9] = float(frame.level_id or 0)
        state[10] = float(self._episode_steps) / max(self.max_episode_steps, 1)
        state[11] = float(self._sim is not None and self._sim.running)
        state[12] = float(self._events.completed_level is not None)
        state[13] = float(self._events.game_over)

        # Nearest targets, measured between top-left corners
        living = [ex - px for ex, _, alive in frame.enemies if alive]
        if living:
            state[14] = min(living, key=abs)

        coins = []
        level = self._game_config.levels.get(frame.level_id)
        if level is not None:
            coins = [
                (cx - px, cy - py)
                for (cx, cy), visible in zip(level.coins, frame.coins_visible)
                if visible
            ]
        if coins:
            state[15], state[16] = min(coins, key=lambda c: abs(c[0]))
        return state

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render_frame(self):
        """Render current state to numpy array (H, W, 3) uint8."""
        if self._frame is None:
            self._surface.fill((0, 0, 0))
        else:
            self._renderer.draw(
                self._surface, self._frame, camera_x=self._camera_x, show_text=False,
            )

        # Scale to observation resolution
        scaled = pygame.transform.scale(
            self._surface, (self.obs_width, self.obs_height)
        )
        # surfarray gives (W, H, 3); transpose to (H, W, 3)
        array = pygame.surfarray.array3d(scaled)
        return np.transpose(array, (1, 0, 2)).astype(np.uint8)

    def render(self):
        if self.render_mode == "rgb_array":
            return self._render_frame()
        elif self.render_mode == "human" and self._display:
            # Render at native resolution with the HUD
            if self._frame is not None:
                self._renderer.draw(self._display, self._frame, camera_x=self._camera_x)
            pygame.display.flip()

    def _get_info(self) -> Dict[str, Any]:
        info = {
            "episode_steps": self._episode_steps,
            "mode": self._sim.mode.value if self._sim else None,
            "physics": self._game_config.physics.to_dict(),
            "level_complete": self._events.completed_level is not None,
            "game_over": self._events.game_over,
        }
        if self._frame is not None:
            info["level_id"] = self._frame.level_id
            info["lives"] = self._frame.lives
            info["coins_collected"] = self._frame.coins_collected
            info["player_position"] = self._frame.player_position
        return info

    def close(self):
        if self._display:
            pygame.display.quit()
            self._display = None
