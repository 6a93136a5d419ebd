"""
Human Play Mode
================

Play Egg Catcher interactively with the keyboard.

Controls:
    - A / Left arrow: Move basket left
    - D / Right arrow: Move basket right
    - Esc: Pause / resume
    - R: Restart game
    - Q or window close: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--sounds DIR] [--debug]
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from egg_catcher.catch_core.config_loader import load_config, GameConfig
from egg_catcher.catch_core.game import CoreGame

LEFT_KEYS = ("K_a", "K_LEFT")
RIGHT_KEYS = ("K_d", "K_RIGHT")


class HumanPlayer:
    """
    Keyboard-driven game loop.

    Pygame's clock provides the variable frame delta, converted to nominal
    frames before being handed to the game's ticker.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        target_fps: int = 60,
        sound_dir: Optional[str] = None
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        from egg_catcher.catch_core.render_full_pygame import PygameRenderer

        self._config = config
        self._seed = seed
        self._target_fps = target_fps

        pygame.init()
        self._clock = pygame.time.Clock()
        self._renderer = PygameRenderer(config, sound_dir=sound_dir)
        self._game = CoreGame(config=config, seed=seed, presenter=self._renderer)
        self._game.start(seed=seed)

        self._left_keys = {getattr(pygame, name) for name in LEFT_KEYS}
        self._right_keys = {getattr(pygame, name) for name in RIGHT_KEYS}
        self._running = True

    def run(self) -> int:
        """Run the game loop. Returns final score."""
        print("=== Egg Catcher ===")
        print("A/D or arrows to move, Esc to pause, R to restart, Q to quit")
        print()

        nominal_ms = 1000.0 / self._config.timing.fps
        while self._running:
            self._handle_events()
            self._update_direction()

            elapsed_ms = self._clock.tick(self._target_fps)
            # Clamp long stalls (window drag, breakpoint) to a few frames
            delta = min(elapsed_ms / nominal_ms, 4.0)
            self._game.ticker.tick(delta)

            self._renderer.render_to_screen(self._game.get_render_data())

        pygame.quit()
        return self._game.score

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_q:
                    self._running = False
                elif event.key == pygame.K_ESCAPE:
                    self._game.toggle_pause()
                elif event.key == pygame.K_r:
                    self._restart()

    def _update_direction(self) -> None:
        pressed = pygame.key.get_pressed()
        left = any(pressed[key] for key in self._left_keys)
        right = any(pressed[key] for key in self._right_keys)
        if left and not right:
            self._game.on_basket_move(-1)
        elif right and not left:
            self._game.on_basket_move(1)
        else:
            self._game.on_basket_move(0)

    def _restart(self) -> None:
        """Restart the game."""
        self._renderer.reset_effects()
        self._game.start()
        print("\n=== Game Restarted ===\n")


def main():
    parser = argparse.ArgumentParser(description="Play Egg Catcher interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")
    parser.add_argument("--sounds", type=str, default=None, help="Directory of <effect>.wav files")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        config = load_config(args.config)
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            target_fps=args.fps,
            sound_dir=args.sounds
        )
        score = player.run()
        print(f"\nFinal Score: {score}")
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
