"""
Difficulty Scheduler
====================

Maps elapsed session time to a fall-speed multiplier and a spawn interval.

Two regimes:
- a continuous ramp: flat during the easy phase, then linear up to the end
  of the session;
- a discrete crazy-mode override, entered once when the final
  crazy_mode_time seconds begin, which pins speed and interval until reset.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from egg_catcher.catch_core.config_loader import SPAWN_INTERVAL_FLOOR, GameConfig, get_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DifficultyState:
    """Derived per-frame difficulty values."""
    speed_multiplier: float
    spawn_interval_frames: float


class DifficultyScheduler:
    """Computes difficulty and owns the one-shot crazy-mode latch."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._timing = config.timing
        self._diff = config.difficulty
        self._interval_floor = max(SPAWN_INTERVAL_FLOOR, config.difficulty.min_spawn_interval)
        self._crazy_activated: bool = False

    @property
    def crazy_activated(self) -> bool:
        return self._crazy_activated

    @property
    def crazy_state(self) -> DifficultyState:
        """Forced values while crazy mode is active."""
        diff = self._diff
        interval = max(diff.crazy_min_spawn_interval, diff.base_spawn_interval / 2)
        return DifficultyState(
            speed_multiplier=diff.crazy_speed_multiplier,
            spawn_interval_frames=max(self._interval_floor, interval)
        )

    def ramp_fraction(self, elapsed: float) -> float:
        """Linear ramp fraction k in [0, 1]; 0 during the easy phase."""
        easy = self._timing.easy_phase
        if elapsed < easy:
            return 0.0
        total_ramp = self._timing.game_duration - easy
        return min(1.0, (elapsed - easy) / total_ramp)

    def compute(self, elapsed: float) -> DifficultyState:
        """
        Pure ramp difficulty for an elapsed time, ignoring crazy mode.

        Args:
            elapsed: Elapsed session seconds.

        Returns:
            DifficultyState for that instant.
        """
        diff = self._diff
        base = diff.base_spawn_interval

        if elapsed < self._timing.easy_phase:
            speed = diff.easy_speed_multiplier
            interval = base * diff.easy_spawn_factor
        else:
            k = self.ramp_fraction(elapsed)
            speed = diff.easy_speed_multiplier + k * (
                diff.max_speed_multiplier - diff.easy_speed_multiplier
            )
            min_rate = max(diff.min_spawn_interval, base * diff.min_spawn_fraction)
            interval = base - (base - min_rate) * k

        return DifficultyState(
            speed_multiplier=speed,
            spawn_interval_frames=max(self._interval_floor, interval)
        )

    def update(self, elapsed: float) -> Tuple[DifficultyState, bool]:
        """
        Recompute difficulty for this frame.

        Latches crazy mode the first time elapsed reaches the crazy start.

        Returns:
            Tuple of (state, entered_crazy) where entered_crazy is True only
            on the frame the transition fires.
        """
        entered = False
        if not self._crazy_activated and elapsed >= self._timing.crazy_start:
            self._crazy_activated = True
            entered = True
            logger.info("Crazy mode entered at %.2fs", elapsed)

        if self._crazy_activated:
            return self.crazy_state, entered
        return self.compute(elapsed), entered

    def reset(self) -> None:
        self._crazy_activated = False
