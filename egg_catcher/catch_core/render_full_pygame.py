"""
Full Pygame Renderer
====================

Pygame renderer that doubles as the game's presenter: it receives catch,
crazy-mode and terminal notifications from the core and turns them into
floating labels, background tint, screen shake and sounds.
The death sound plays after a short delay so it lands under the game-over
banner, and an optional looping "bgm" track follows pause and game over.
Supports both display mode (human play) and headless RGB output.
"""

from __future__ import annotations

import math
import os
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

import numpy as np

from egg_catcher.catch_core.collaborators import SOUND_DEATH, Presenter
from egg_catcher.catch_core.config_loader import GameConfig, get_config
from egg_catcher.catch_core.item_catalog import ItemKind


@dataclass
class FloatingLabel:
    """Catch effect text rising from the catch point."""
    text: str
    color: Tuple[int, int, int]
    x: float
    y: float
    frames_left: int = 40


class PygameRenderer(Presenter):
    """
    Renderer and presenter using pygame.

    Supports:
    - Falling items drawn as shaded eggs / bombs / nuggets
    - Score and countdown HUD
    - Catch labels, crazy-mode tint, bomb shake and blackout flash
    - Optional sounds loaded from a directory of <effect>.wav files,
      with a delayed death sound and a looping "bgm" track
    - Final score counting up on the game-over banner
    - Screen display for human mode and RGB array output for agents
    """

    NORMAL_BG = (135, 214, 138)      # Farm green
    CRAZY_BG = (255, 140, 105)       # Warning red
    BASKET_COLOR = (160, 110, 60)
    TEXT_COLOR = (255, 255, 255)

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        sound_dir: Optional[str] = None,
        now_fn: Optional[Callable[[], float]] = None
    ):
        """
        Initialize renderer.

        Args:
            config: Game configuration.
            sound_dir: Directory with <effect>.wav files. Silent if None.
            now_fn: Millisecond clock for delayed sounds. pygame.time.get_ticks if None.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for PygameRenderer")

        if config is None:
            config = get_config()

        self._config = config

        if not pygame.get_init():
            pygame.init()

        # Display surface (created on demand)
        self._screen: Optional[pygame.Surface] = None
        self._screen_size: Optional[Tuple[int, int]] = None

        # Fonts
        pygame.font.init()
        self._font = pygame.font.Font(None, 32)
        self._font_large = pygame.font.Font(None, 64)
        self._font_small = pygame.font.Font(None, 24)

        # Effect state
        self._labels: List[FloatingLabel] = []
        self._crazy = False
        self._shake_frames = 0
        self._shake_amplitude = 0.0
        self._blackout_frames = 0
        self._terminal: Optional[Tuple[str, int]] = None
        self._shown_score: Optional[float] = None

        self._sounds: Dict[str, Any] = {}
        self._pending_sounds: List[Tuple[float, str]] = []
        self._music_channel: Any = None
        self._now = now_fn if now_fn is not None else pygame.time.get_ticks
        if sound_dir is not None:
            self._load_sounds(sound_dir)
        self.start_music()

    def _load_sounds(self, sound_dir: str) -> None:
        """Load every <name>.wav in sound_dir; audio problems leave the game silent."""
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
            pygame.mixer.set_num_channels(self._config.audio.max_concurrent)
        except pygame.error:
            return

        for filename in os.listdir(sound_dir):
            name, ext = os.path.splitext(filename)
            if ext.lower() not in (".wav", ".ogg"):
                continue
            try:
                self._sounds[name] = pygame.mixer.Sound(os.path.join(sound_dir, filename))
            except pygame.error:
                continue

    # ------------------------------------------------------------------
    # Presenter interface
    # ------------------------------------------------------------------

    def notify_catch(self, position, label, color, kind) -> None:
        x, y = position
        self._labels.append(FloatingLabel(text=label, color=tuple(color), x=x, y=y))
        if kind == ItemKind.BOMB:
            self._shake_frames = 24
            self._shake_amplitude = 24.0
            self._blackout_frames = 8

    def notify_crazy_mode_entered(self) -> None:
        self._crazy = True

    def notify_terminal(self, reason: str, final_score: int) -> None:
        self._crazy = False
        self._shake_frames = 0
        self._terminal = (reason, final_score)
        self._shown_score = 0.0
        self.stop_music()

    def request_sound(self, effect_name: str) -> None:
        delay = self._config.audio.death_sound_delay_ms
        if effect_name == SOUND_DEATH and delay > 0:
            self._pending_sounds.append((self._now() + delay, effect_name))
            return
        self._play(effect_name)

    def notify_paused(self, paused: bool) -> None:
        if self._music_channel is None:
            return
        if paused:
            self._music_channel.pause()
        else:
            self._music_channel.unpause()

    # ------------------------------------------------------------------
    # Audio
    # ------------------------------------------------------------------

    def _play(self, effect_name: str) -> Any:
        sound = self._sounds.get(effect_name)
        if sound is None:
            return None
        return sound.play()

    def update_audio(self) -> None:
        """Play delayed sounds whose time has come."""
        if not self._pending_sounds:
            return
        now = self._now()
        waiting = []
        for due, effect_name in self._pending_sounds:
            if due <= now:
                self._play(effect_name)
            else:
                waiting.append((due, effect_name))
        self._pending_sounds = waiting

    def start_music(self) -> None:
        """Loop the "bgm" sound if one was loaded and it is not already playing."""
        music = self._sounds.get("bgm")
        if music is None or self._music_channel is not None:
            return
        self._music_channel = music.play(loops=-1)

    def stop_music(self) -> None:
        if self._music_channel is not None:
            self._music_channel.stop()
            self._music_channel = None

    def reset_effects(self) -> None:
        """Clear effect state for a new session."""
        self._labels = []
        self._crazy = False
        self._shake_frames = 0
        self._blackout_frames = 0
        self._terminal = None
        self._shown_score = None
        self._pending_sounds = []
        self.start_music()

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render to RGB array (for agent observation).

        Args:
            render_data: Data from CoreGame.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        surface = pygame.Surface((width, height))
        self._render_to_surface(surface, render_data)
        array = pygame.surfarray.array3d(surface)
        return np.transpose(array, (1, 0, 2))

    def render_to_screen(
        self,
        render_data: Dict[str, Any],
        window_width: Optional[int] = None,
        window_height: Optional[int] = None
    ) -> None:
        """
        Render to pygame window.

        Args:
            render_data: Data from CoreGame.get_render_data().
            window_width: Window width. Screen width from render data if None.
            window_height: Window height. Screen height from render data if None.
        """
        window_width = int(window_width or render_data["screen_width"])
        window_height = int(window_height or render_data["screen_height"])
        if self._screen is None or self._screen_size != (window_width, window_height):
            self._screen = pygame.display.set_mode((window_width, window_height))
            self._screen_size = (window_width, window_height)
            pygame.display.set_caption("Egg Catcher")

        self._render_to_surface(self._screen, render_data)
        pygame.display.flip()

    def _render_to_surface(
        self,
        surface: pygame.Surface,
        render_data: Dict[str, Any]
    ) -> None:
        """Render game state to a pygame surface."""
        self.update_audio()

        width, height = surface.get_size()
        scale_x = width / render_data["screen_width"]
        scale_y = height / render_data["screen_height"]

        offset_x, offset_y = self._shake_offset(render_data)

        def to_screen(x: float, y: float) -> Tuple[int, int]:
            return (int(x * scale_x + offset_x), int(y * scale_y + offset_y))

        surface.fill(self.CRAZY_BG if self._crazy else self.NORMAL_BG)

        for obj in render_data["objects"]:
            self._draw_item(surface, obj, to_screen(obj["x"], obj["y"]), scale_x)

        self._draw_basket(surface, render_data, to_screen, scale_x)
        self._draw_labels(surface, to_screen)
        self._draw_hud(surface, render_data)

        if self._blackout_frames > 0:
            self._blackout_frames -= 1
            surface.fill((0, 0, 0))

        if render_data.get("paused"):
            self._draw_banner(surface, "PAUSED", "Esc to resume")
        elif self._terminal is not None:
            reason, final_score = self._terminal
            title = "GAME OVER" if reason == "death" else "TIME UP"
            shown = self._count_up(final_score)
            self._draw_banner(surface, title, f"Final score: {shown}   R to restart")

    def _count_up(self, final_score: int) -> int:
        """Step the banner score toward the final score, reaching it in about a second."""
        if self._shown_score is None:
            return final_score
        step = max(1.0, abs(final_score) / 60.0)
        if final_score >= self._shown_score:
            self._shown_score = min(float(final_score), self._shown_score + step)
        else:
            self._shown_score = max(float(final_score), self._shown_score - step)
        return int(self._shown_score)

    def _shake_offset(self, render_data: Dict[str, Any]) -> Tuple[float, float]:
        if render_data.get("paused"):
            return (0.0, 0.0)
        if self._shake_frames > 0:
            self._shake_frames -= 1
            amp = self._shake_amplitude * (self._shake_frames / 24.0)
            return ((random.random() - 0.5) * 2 * amp, (random.random() - 0.5) * 2 * amp)
        if self._crazy:
            return ((random.random() - 0.5) * 3, (random.random() - 0.5) * 3)
        return (0.0, 0.0)

    def _draw_item(
        self,
        surface: pygame.Surface,
        obj: Dict[str, Any],
        center: Tuple[int, int],
        scale: float
    ) -> None:
        """Draw a single falling item."""
        cx, cy = center
        color = obj["color"]
        kind = obj["kind"]

        if kind == ItemKind.BOMB:
            radius = max(4, int(18 * scale))
            pygame.draw.circle(surface, (30, 30, 30), (cx, cy), radius)
            angle = obj.get("rotation", 0.0)
            fuse_end = (
                cx + int(math.cos(angle - math.pi / 2) * radius * 1.5),
                cy + int(math.sin(angle - math.pi / 2) * radius * 1.5),
            )
            pygame.draw.line(surface, (120, 90, 40), (cx, cy - radius), fuse_end, 3)
            pygame.draw.circle(surface, color, fuse_end, max(2, radius // 4))
            return

        if kind == ItemKind.GOLD:
            w, h = max(6, int(36 * scale)), max(4, int(20 * scale))
            rect = pygame.Rect(cx - w // 2, cy - h // 2, w, h)
            pygame.draw.rect(surface, color, rect, border_radius=4)
            pygame.draw.rect(surface, (200, 150, 0), rect, 2, border_radius=4)
            return

        # Eggs: ellipse with a highlight
        fill = (250, 245, 230) if kind == ItemKind.EGG else (140, 120, 70)
        w, h = max(6, int(28 * scale)), max(8, int(36 * scale))
        rect = pygame.Rect(cx - w // 2, cy - h // 2, w, h)
        pygame.draw.ellipse(surface, fill, rect)
        pygame.draw.ellipse(surface, color, rect, 2)
        highlight = pygame.Rect(cx - w // 4, cy - h // 3, max(2, w // 4), max(2, h // 4))
        pygame.draw.ellipse(surface, (255, 255, 255), highlight)

    def _draw_basket(self, surface, render_data, to_screen, scale: float) -> None:
        bx, by = to_screen(render_data["basket_x"], render_data["basket_y"])
        half_w = int(render_data["basket_width"] * scale / 2)
        tilt = render_data["basket_rotation"]
        dy = int(math.sin(tilt) * half_w)
        points = [
            (bx - half_w, by - 20 - dy),
            (bx + half_w, by - 20 + dy),
            (bx + int(half_w * 0.75), by + 20 + dy),
            (bx - int(half_w * 0.75), by + 20 - dy),
        ]
        pygame.draw.polygon(surface, self.BASKET_COLOR, points)
        pygame.draw.polygon(surface, (90, 60, 30), points, 3)

    def _draw_labels(self, surface, to_screen) -> None:
        alive = []
        for label in self._labels:
            label.y -= 1.5
            label.frames_left -= 1
            text = self._font.render(label.text, True, label.color)
            surface.blit(text, text.get_rect(center=to_screen(label.x, label.y)))
            if label.frames_left > 0:
                alive.append(label)
        self._labels = alive

    def _draw_hud(self, surface: pygame.Surface, render_data: Dict[str, Any]) -> None:
        """Draw score and countdown."""
        score = self._font.render(f"Score: {render_data['score']}", True, self.TEXT_COLOR)
        surface.blit(score, (20, 20))

        timer = self._font.render(render_data["remaining_label"], True, self.TEXT_COLOR)
        surface.blit(timer, (surface.get_width() - timer.get_width() - 20, 20))

        if render_data.get("crazy_mode"):
            crazy = self._font_small.render("CRAZY MODE!", True, (255, 255, 0))
            surface.blit(crazy, ((surface.get_width() - crazy.get_width()) // 2, 24))

    def _draw_banner(self, surface: pygame.Surface, title: str, subtitle: str) -> None:
        overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 170))
        surface.blit(overlay, (0, 0))

        cx, cy = surface.get_width() // 2, surface.get_height() // 2
        title_surface = self._font_large.render(title, True, self.TEXT_COLOR)
        surface.blit(title_surface, title_surface.get_rect(center=(cx, cy - 30)))
        sub_surface = self._font.render(subtitle, True, (220, 220, 220))
        surface.blit(sub_surface, sub_surface.get_rect(center=(cx, cy + 20)))

    def handle_events(self) -> bool:
        """Handle pygame events. Returns False if quit requested."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
        return True

    def close(self) -> None:
        """Clean up pygame resources."""
        self._labels = []
        self._pending_sounds = []
        self.stop_music()
        if self._screen is not None:
            self._screen = None
