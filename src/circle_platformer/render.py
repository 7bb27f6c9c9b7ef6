"""Pygame drawing of frame-state snapshots.

The renderer never touches simulation state: it draws whatever FrameState
it is given. Screen layout is a HUD strip on top and the level below it,
scrolled horizontally by a camera that follows the player.
"""

import pygame
from typing import Optional, Tuple, Dict

from .config import GameConfig
from .levels import Level
from .progression import Mode
from .simulation import FrameState


# Colors (RGB)
COLOR_BG = (40, 44, 52)
COLOR_HUD = (30, 33, 39)
COLOR_PLAYER = (97, 175, 239)
COLOR_PLATFORM = (152, 195, 121)
COLOR_ENEMY = (224, 108, 117)
COLOR_COIN = (255, 215, 0)
COLOR_TEXT = (255, 255, 255)
COLOR_LOCKED = (120, 120, 120)


def follow_camera(
    camera_x: float,
    player_x: float,
    level_width: float,
    screen_width: float,
    offset: float = 0.3,
    smoothing: float = 0.1,
) -> float:
    """Ease the camera towards the player, never showing past the level edges."""
    target_x = player_x - screen_width * offset
    camera_x += (target_x - camera_x) * smoothing
    max_x = max(0.0, level_width - screen_width)
    return min(max(camera_x, 0.0), max_x)


def world_to_screen(x: float, y: float, camera_x: float, hud_height: int) -> Tuple[int, int]:
    """Level coordinates are already y-down; shift by camera and HUD strip."""
    return int(x - camera_x), int(y + hud_height)


class Renderer:
    """Draws level geometry, entities, HUD and menus onto a surface."""

    def __init__(self, config: GameConfig):
        self.config = config
        self._fonts: Dict[int, pygame.font.Font] = {}

    def _font(self, size: int) -> pygame.font.Font:
        if size not in self._fonts:
            self._fonts[size] = pygame.font.Font(None, size)
        return self._fonts[size]

    def draw(
        self,
        surface: pygame.Surface,
        frame: FrameState,
        camera_x: float = 0.0,
        last_level: Optional[Level] = None,
        show_text: bool = True,
    ) -> None:
        """Draw one frame for whatever mode the snapshot is in.

        Args:
            surface: Target surface.
            frame: Snapshot to draw.
            camera_x: Horizontal scroll in level coordinates.
            last_level: Level that was just failed (shown on the game over screen).
            show_text: Skip fonts entirely when False (observation frames).
        """
        surface.fill(COLOR_BG)

        # A final in-level frame keeps its level after the mode has moved on
        level = self.config.levels.get(frame.level_id)
        if level is not None:
            self.draw_world(surface, level, frame, camera_x)

        if not show_text:
            return
        if frame.mode is Mode.PLAYING:
            if level is not None:
                self.draw_hud(surface, frame)
        elif frame.mode is Mode.LEVEL_SELECT:
            self.draw_level_select(surface, frame)
        elif frame.mode is Mode.GAME_OVER:
            self.draw_game_over(surface, last_level)

    def draw_world(self, surface: pygame.Surface, level: Level, frame: FrameState, camera_x: float) -> None:
        hud = self.config.hud_height

        for plat in level.platforms:
            sx, sy = world_to_screen(plat.x, plat.y, camera_x, hud)
            pygame.draw.rect(surface, COLOR_PLATFORM, (sx, sy, int(plat.width), int(plat.height)))

        coin_size = self.config.entities.coin_size
        for (cx, cy), visible in zip(level.coins, frame.coins_visible):
            if not visible:
                continue
            sx, sy = world_to_screen(cx + coin_size / 2, cy + coin_size / 2, camera_x, hud)
            pygame.draw.circle(surface, COLOR_COIN, (sx, sy), int(coin_size / 2))

        enemy_size = int(self.config.entities.enemy_size)
        for ex, ey, alive in frame.enemies:
            if not alive:
                continue
            sx, sy = world_to_screen(ex, ey, camera_x, hud)
            pygame.draw.rect(surface, COLOR_ENEMY, (sx, sy, enemy_size, enemy_size))

        # Player is a circle inscribed in its square hitbox
        size = self.config.physics.player_size
        px, py = frame.player_position
        sx, sy = world_to_screen(px + size / 2, py + size / 2, camera_x, hud)
        pygame.draw.circle(surface, COLOR_PLAYER, (sx, sy), int(size / 2))

    def draw_hud(self, surface: pygame.Surface, frame: FrameState) -> None:
        width = surface.get_width()
        pygame.draw.rect(surface, COLOR_HUD, (0, 0, width, self.config.hud_height))

        font = self._font(28)
        lives = font.render(f"Lives: {frame.lives}", True, COLOR_TEXT)
        surface.blit(lives, (10, 10))

        enemies = font.render(f"Enemies: {frame.enemies_alive}", True, COLOR_ENEMY)
        surface.blit(enemies, enemies.get_rect(midtop=(width // 2, 10)))

        coins = font.render(
            f"Coins: {frame.coins_collected} / {frame.coins_total}", True, COLOR_COIN
        )
        surface.blit(coins, coins.get_rect(topright=(width - 10, 10)))

    def draw_level_select(self, surface: pygame.Surface, frame: FrameState) -> None:
        cx = surface.get_width() // 2
        title = self._font(48).render("Circle Platformer - Select Level", True, COLOR_TEXT)
        surface.blit(title, title.get_rect(center=(cx, 60)))

        font = self._font(32)
        y = 130
        for level in self.config.levels:
            unlocked = level.id in frame.unlocked
            label = f"{level.id}: {level.name}" + ("" if unlocked else " (Locked)")
            text = font.render(label, True, COLOR_TEXT if unlocked else COLOR_LOCKED)
            surface.blit(text, text.get_rect(center=(cx, y)))
            y += 40

        hint = self._font(24).render("Press a level number to play, Esc to quit", True, COLOR_LOCKED)
        surface.blit(hint, hint.get_rect(center=(cx, surface.get_height() - 30)))

    def draw_game_over(self, surface: pygame.Surface, last_level: Optional[Level]) -> None:
        cx = surface.get_width() // 2
        cy = surface.get_height() // 2

        title = self._font(64).render("Game Over", True, COLOR_ENEMY)
        surface.blit(title, title.get_rect(center=(cx, cy - 50)))

        if last_level is not None:
            name = self._font(32).render(last_level.name, True, COLOR_TEXT)
            surface.blit(name, name.get_rect(center=(cx, cy)))

        options = self._font(28).render(
            "R = Restart Level    L = Back to Level Select", True, COLOR_TEXT
        )
        surface.blit(options, options.get_rect(center=(cx, cy + 50)))
