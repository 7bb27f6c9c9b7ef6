"""Held-key intent shared between the keyboard collaborator and the simulation.

The keyboard side writes into an InputState whenever events arrive. The
simulation never reads it directly: once per tick it takes a frozen
InputIntent snapshot so a key change mid-tick cannot be observed.
"""

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class InputIntent:
    """Snapshot of the four held intents for one tick."""
    left: bool = False
    right: bool = False
    jump_space: bool = False
    jump_up: bool = False

    @property
    def jump(self) -> bool:
        """Either jump binding is held."""
        return self.jump_space or self.jump_up

    @property
    def direction(self) -> int:
        """-1, 0 or +1. Left wins when both directions are held."""
        if self.left:
            return -1
        elif self.right:
            return 1
        return 0


IDLE = InputIntent()


class InputState:
    """Mutable held-intent flags, written between ticks."""

    INTENTS: Tuple[str, ...] = ("left", "right", "jump_space", "jump_up")

    def __init__(self):
        self._held: Dict[str, bool] = {name: False for name in self.INTENTS}

    def set(self, intent: str, held: bool) -> None:
        """Record an intent as held or released."""
        if intent not in self._held:
            raise ValueError(f"Unknown intent: {intent}")
        self._held[intent] = held

    def press(self, intent: str) -> None:
        self.set(intent, True)

    def release(self, intent: str) -> None:
        self.set(intent, False)

    def is_held(self, intent: str) -> bool:
        return self._held[intent]

    def clear(self) -> None:
        """Release everything (e.g. when the window loses focus)."""
        for name in self._held:
            self._held[name] = False

    def snapshot(self) -> InputIntent:
        """Consistent copy of the current intents for one tick."""
        return InputIntent(**self._held)
