"""Desktop game engine: pygame window, keyboard input and frame pacing.

Wraps a Simulation with the collaborators it needs to be playable:
keyboard events become held intents, the menu keys drive mode transitions,
and ``pygame.time.Clock`` paces one simulation tick per frame.
"""

import pygame
from typing import Optional, Dict, Any

from .config import GameConfig
from .input_state import InputState
from .progression import Mode
from .render import Renderer, follow_camera
from .simulation import Simulation, TickEvents


# Held keys -> intent names
KEY_BINDINGS: Dict[int, str] = {
    pygame.K_LEFT: "left",
    pygame.K_RIGHT: "right",
    pygame.K_SPACE: "jump_space",
    pygame.K_UP: "jump_up",
}

# Number keys pick a level on the select screen
LEVEL_KEYS: Dict[int, int] = {
    getattr(pygame, f"K_{n}"): n for n in range(1, 10)
}


class PlatformerEngine:
    """Main game engine coordinating input, simulation and rendering.

    Handles:
    - Game loop with one tick per frame
    - Keyboard input (held intents and menu keys)
    - Pygame rendering
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """Initialize game engine.

        Args:
            config: Game configuration. Uses defaults if None.
        """
        self.config = config or GameConfig()

        # Initialize pygame
        pygame.init()
        self.screen = pygame.display.set_mode(
            (self.config.screen_width, self.config.screen_height)
        )
        pygame.display.set_caption("Circle Platformer")
        self.clock = pygame.time.Clock()

        self.simulation = Simulation(self.config)
        self.input = InputState()
        self.renderer = Renderer(self.config)

        self.running = False

        # Camera state (for levels wider than the screen)
        self.camera_x = 0.0

    def start_level(self, level_id: int) -> bool:
        """Enter a level from the select screen."""
        if self.simulation.mode is not Mode.LEVEL_SELECT:
            return False
        if level_id not in self.simulation.state.unlocked:
            print(f"LOCKED: level {level_id} is not unlocked yet")
            return False

        started = self.simulation.select_level(level_id)
        if started:
            self._begin_session()
        else:
            print(f"UNKNOWN LEVEL: {level_id}, back to level select")
        return started

    def restart_level(self) -> bool:
        """Replay the level after a game over."""
        started = self.simulation.restart_level()
        if started:
            self._begin_session()
        return started

    def back_to_level_select(self) -> None:
        self.simulation.back_to_level_select()

    def _begin_session(self) -> None:
        self.input.clear()
        self.camera_x = 0.0
        level = self.simulation.level
        print(f"START: {level.name} | coins={level.coin_count} enemies={level.enemy_count}")

    def handle_key(self, key: int, pressed: bool) -> None:
        """Route one key press/release to intents or menu actions."""
        if key in KEY_BINDINGS:
            self.input.set(KEY_BINDINGS[key], pressed)
            return
        if not pressed:
            return

        if key == pygame.K_ESCAPE:
            self.running = False
        elif self.simulation.mode is Mode.LEVEL_SELECT and key in LEVEL_KEYS:
            self.start_level(LEVEL_KEYS[key])
        elif self.simulation.mode is Mode.GAME_OVER:
            if key == pygame.K_r:
                self.restart_level()
            elif key == pygame.K_l:
                self.back_to_level_select()

    def handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self.handle_key(event.key, True)
            elif event.type == pygame.KEYUP:
                self.handle_key(event.key, False)
            elif event.type == pygame.WINDOWFOCUSLOST:
                # Key-up events are lost while unfocused
                self.input.clear()

    def update(self) -> Optional[TickEvents]:
        """Run one simulation tick if a level is being played."""
        if not self.simulation.running:
            return None

        level = self.simulation.level
        events = self.simulation.step(self.input.snapshot())
        self._report(events, level.name)

        if self.simulation.running:
            px, _ = self.simulation.session.player.position
            self.camera_x = follow_camera(
                self.camera_x, px, level.width, self.config.screen_width,
            )
        return events

    def _report(self, events: TickEvents, level_name: str) -> None:
        """Console status lines for notable events."""
        if events.hits:
            lives = self.simulation.session.lives if self.simulation.session else 0
            print(f"HIT: lost {events.hits} life(s) | lives={lives}")
        if events.game_over:
            print(f"GAME OVER: {level_name}")
        if events.completed_level is not None:
            print(f"LEVEL COMPLETE: {level_name}")
        if events.unlocked_level is not None:
            print(f"UNLOCKED: level {events.unlocked_level}")

    def render(self) -> None:
        """Render current game state."""
        last_level = None
        if self.simulation.mode is Mode.GAME_OVER:
            last_level = self.config.levels.get(self.simulation.state.level_id)

        self.renderer.draw(
            self.screen,
            self.simulation.frame(),
            camera_x=self.camera_x,
            last_level=last_level,
        )
        pygame.display.flip()

    def run(self) -> None:
        """Main game loop."""
        self.running = True

        while self.running:
            self.handle_events()
            self.update()
            self.render()
            self.clock.tick(self.config.fps)

        pygame.quit()

    def get_state(self) -> Dict[str, Any]:
        """Get current frame state for observation/logging."""
        return self.simulation.frame().to_dict()


def main() -> None:
    PlatformerEngine().run()
