"""
Game Clock
==========

Tracks elapsed session time from per-tick frame deltas and derives the
current difficulty phase.
"""

from __future__ import annotations

import enum
from typing import Optional

from egg_catcher.catch_core.config_loader import GameConfig, get_config


class Phase(enum.IntEnum):
    """Difficulty phase of a session."""
    EASY = 0
    RAMP = 1
    CRAZY = 2


class GameClock:
    """
    Session clock driven by frame deltas.

    A delta of 1.0 is one nominal frame at config.timing.fps, so elapsed
    seconds are the cumulative delta divided by fps.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._fps = config.timing.fps
        self._duration = config.timing.game_duration
        self._easy_phase = config.timing.easy_phase
        self._frames: float = 0.0

    @property
    def elapsed_seconds(self) -> float:
        return self._frames / self._fps

    @property
    def elapsed_frames(self) -> float:
        return self._frames

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def remaining_seconds(self) -> float:
        return max(0.0, self._duration - self.elapsed_seconds)

    @property
    def expired(self) -> bool:
        return self.elapsed_seconds >= self._duration

    def advance(self, delta_frames: float) -> float:
        """
        Advance the clock.

        Negative deltas are ignored and elapsed time is clamped to the
        session duration.

        Returns:
            New elapsed seconds.
        """
        if delta_frames > 0:
            self._frames = min(self._duration * self._fps, self._frames + delta_frames)
        return self.elapsed_seconds

    def phase(self, crazy: bool = False) -> Phase:
        """Current phase; crazy mode overrides the time-based phases."""
        if crazy:
            return Phase.CRAZY
        if self.elapsed_seconds < self._easy_phase:
            return Phase.EASY
        return Phase.RAMP

    def format_remaining(self) -> str:
        """Countdown label, e.g. '1:05'."""
        remaining = int(self.remaining_seconds)
        minutes, seconds = divmod(remaining, 60)
        return f"{minutes}:{seconds:02d}"

    def reset(self) -> None:
        self._frames = 0.0
