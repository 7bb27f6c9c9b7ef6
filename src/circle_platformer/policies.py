"""Scripted players for CirclePlatformerEnv.

A policy maps an observation to an action dict. Each one is written in
terms of the keyboard it stands in for: a held direction (-1, 0, 1) and
whether a jump key is down this tick.

State vector indices read here (see CirclePlatformerEnv):
    4 grounded, 6/7 coins collected/total, 8 enemies alive,
    14 nearest enemy dx, 15/16 nearest coin dx/dy
"""

import numpy as np
from typing import Dict, Any, Optional, Tuple

GROUNDED = 4
COINS_COLLECTED = 6
COINS_TOTAL = 7
ENEMIES_ALIVE = 8
ENEMY_DX = 14
COIN_DX = 15
COIN_DY = 16


class BasePolicy:
    """Base class for scripted policies."""

    name: str = "base"

    def __call__(self, obs: Dict[str, np.ndarray]) -> Dict[str, Any]:
        direction, jump = self.decide(obs["state"])
        return self._keys_to_action(direction, jump)

    def decide(self, state: np.ndarray) -> Tuple[int, bool]:
        """Return (held direction, jump key down) for this tick."""
        raise NotImplementedError

    def reset(self):
        """Called at the start of each episode."""
        pass

    @staticmethod
    def _keys_to_action(direction: int, jump: bool) -> Dict[str, Any]:
        return {
            "move_x": np.array([float(np.sign(direction))], dtype=np.float32),
            "jump": int(jump),
        }


class RandomPolicy(BasePolicy):
    """Key masher: holds a random direction for a random number of ticks.

    Jump is pressed independently each tick with probability ``jump_prob``.
    """

    name = "random"

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        jump_prob: float = 0.1,
        max_hold: int = 30,
    ):
        self.rng = rng or np.random.default_rng()
        self.jump_prob = jump_prob
        self.max_hold = max_hold
        self._direction = 0
        self._hold = 0

    def reset(self):
        self._direction = 0
        self._hold = 0

    def decide(self, state):
        if self._hold <= 0:
            self._direction = int(self.rng.integers(-1, 2))
            self._hold = int(self.rng.integers(1, self.max_hold + 1))
        self._hold -= 1
        return self._direction, bool(self.rng.random() < self.jump_prob)


class RushPolicy(BasePolicy):
    """Holds right and jumps from the ground every ``jump_interval`` ticks.

    Ignores coins and enemies, so it mostly walks into the first enemy.
    """

    name = "rush"

    def __init__(self, jump_interval: int = 25):
        self.jump_interval = jump_interval
        self._tick = 0

    def reset(self):
        self._tick = 0

    def decide(self, state):
        self._tick += 1
        grounded = state[GROUNDED] > 0.5
        return 1, grounded and self._tick % self.jump_interval == 0


class StompPolicy(BasePolicy):
    """Clears enemies first, then collects the remaining coins.

    With default physics a jump from the ground covers about 220px before
    the player comes back down to enemy height, so the policy walks towards
    the nearest enemy and jumps once it is ``stomp_range`` ahead. With no
    enemies left it walks to the nearest coin and jumps when the coin is
    overhead.
    """

    name = "stomp"

    def __init__(
        self,
        stomp_range: Tuple[float, float] = (200.0, 240.0),
        reach: float = 40.0,
        arrive: float = 4.0,
    ):
        self.stomp_range = stomp_range
        self.reach = reach
        self.arrive = arrive

    def decide(self, state):
        grounded = state[GROUNDED] > 0.5

        if state[ENEMIES_ALIVE] > 0:
            dx = float(state[ENEMY_DX])
            low, high = self.stomp_range
            # Mirror the range for enemies behind the player
            in_range = low <= abs(dx) <= high
            return int(np.sign(dx)) or 1, grounded and in_range

        if state[COINS_COLLECTED] < state[COINS_TOTAL]:
            dx = float(state[COIN_DX])
            dy = float(state[COIN_DY])
            direction = 0 if abs(dx) <= self.arrive else int(np.sign(dx))
            overhead = abs(dx) <= self.reach and dy < 0
            return direction, grounded and overhead

        return 0, False


POLICIES = {
    "random": RandomPolicy,
    "rush": RushPolicy,
    "stomp": StompPolicy,
}
