"""
Basket
======

Keyboard-driven basket: held direction, eased tilt and screen clamping.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from egg_catcher.catch_core.config_loader import GameConfig, get_config


@dataclass
class BasketState:
    """Basket pose read by the catch test."""
    x: float
    y: float
    rotation: float = 0.0
    direction: int = 0


class Basket:
    """Moves the basket from the held input direction each frame."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._cfg = config.basket
        self._screen_width = float(config.screen.width)
        self._screen_height = float(config.screen.height)
        self.state = BasketState(x=self._screen_width / 2, y=self._floor_y())

    def _floor_y(self) -> float:
        return self._screen_height - self._cfg.bottom_offset

    @property
    def width(self) -> float:
        return self._cfg.width

    @property
    def x(self) -> float:
        return self.state.x

    @property
    def y(self) -> float:
        return self.state.y

    def set_direction(self, direction: float) -> None:
        """Hold left (-1), right (+1) or nothing (0); other values reduce to their sign."""
        if direction > 0:
            self.state.direction = 1
        elif direction < 0:
            self.state.direction = -1
        else:
            self.state.direction = 0

    def update(self, delta: float) -> None:
        """Move, tilt toward the travel direction, and clamp on screen."""
        cfg = self._cfg
        state = self.state

        state.x += cfg.speed * delta * state.direction
        target_rotation = cfg.tilt * state.direction
        state.rotation += (target_rotation - state.rotation) * cfg.tilt_easing
        self._clamp()

    def _clamp(self) -> None:
        half_width = self._cfg.width / 2
        self.state.x = max(half_width, min(self._screen_width - half_width, self.state.x))

    def resize(self, width: float, height: float) -> None:
        """Re-anchor to a new screen size."""
        self._screen_width = float(width)
        self._screen_height = float(height)
        self.state.y = self._floor_y()
        self._clamp()

    def reset(self) -> None:
        self.state = BasketState(x=self._screen_width / 2, y=self._floor_y())
