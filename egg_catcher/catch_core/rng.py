"""
RNG - Seedable Random Source and Kind Selection
===============================================

Every random draw in the simulation (kind selection, fall speed, placement,
rotation, crazy-mode jitter) goes through a RandomSource so a seed fully
determines a session.
"""

from __future__ import annotations

import random
from typing import Any, Optional, Tuple

from egg_catcher.catch_core.config_loader import GameConfig, get_config
from egg_catcher.catch_core.item_catalog import ItemKind


class RandomSource:
    """Thin wrapper around random.Random with the draws the game needs."""

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize random source.

        Args:
            seed: Random seed for reproducibility. Random if None.
        """
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def random(self) -> float:
        """Uniform draw in [0, 1)."""
        return self._rng.random()

    def uniform(self, low: float, high: float) -> float:
        """Uniform draw in [low, high)."""
        return low + self.random() * (high - low)

    def centered(self) -> float:
        """Uniform draw in [-0.5, 0.5)."""
        return self.random() - 0.5

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reset the generator.

        Args:
            seed: New random seed. Keeps current if None.
        """
        if seed is not None:
            self._seed = seed
        self._rng = random.Random(self._seed)

    def get_state(self) -> Tuple[Any, ...]:
        """Get generator state for checkpointing."""
        return self._rng.getstate()

    def set_state(self, state: Tuple[Any, ...]) -> None:
        """Restore generator state."""
        self._rng.setstate(state)


def kind_for_draw(r: float, thresholds: Tuple[float, float, float]) -> ItemKind:
    """
    Map a uniform draw to an item kind.

    Thresholds are cumulative upper bounds for (bomb, bad egg, egg);
    anything at or above the last one is gold.
    """
    bomb_max, bad_egg_max, egg_max = thresholds
    if r < bomb_max:
        return ItemKind.BOMB
    if r < bad_egg_max:
        return ItemKind.BAD_EGG
    if r < egg_max:
        return ItemKind.EGG
    return ItemKind.GOLD


class KindPicker:
    """Draws item kinds with phase-dependent weighting."""

    def __init__(
        self,
        rng: RandomSource,
        config: Optional[GameConfig] = None
    ):
        if config is None:
            config = get_config()

        self._rng = rng
        self._normal = config.spawn.normal_thresholds
        self._crazy = config.spawn.crazy_thresholds

    def thresholds(self, crazy: bool) -> Tuple[float, float, float]:
        return self._crazy if crazy else self._normal

    def pick(self, crazy: bool) -> ItemKind:
        """Draw one kind for the current mode."""
        return kind_for_draw(self._rng.random(), self.thresholds(crazy))
