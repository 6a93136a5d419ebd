"""
Game Rules
==========

Handles the basket hitbox, floor exit and termination conditions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from egg_catcher.catch_core.config_loader import GameConfig, get_config
from egg_catcher.catch_core.basket import BasketState
from egg_catcher.catch_core.object_world import FallingObject


REASON_DEATH = "death"
REASON_TIME = "time"


@dataclass
class TerminationResult:
    """Result of termination check."""
    terminated: bool
    reason: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, "")

    @staticmethod
    def game_over(reason: str) -> "TerminationResult":
        return TerminationResult(True, reason)


class CatchRules:
    """
    Basket hitbox.

    An object is caught when its y lies in the band just above the basket
    and its horizontal distance to the basket centre is within half the
    basket width plus some slack.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        basket = config.basket
        self._band_above = basket.catch_band_above
        self._band_below = basket.catch_band_below
        self._half_reach = basket.width / 2 + basket.catch_slack
        self._floor_margin = config.rules.floor_exit_margin

    @property
    def floor_exit_margin(self) -> float:
        return self._floor_margin

    def in_catch_band(self, obj: FallingObject, basket: BasketState) -> bool:
        return basket.y - self._band_above <= obj.y <= basket.y + self._band_below

    def is_caught(self, obj: FallingObject, basket: BasketState) -> bool:
        """True if the object intersects the basket's hitbox band."""
        if not self.in_catch_band(obj, basket):
            return False
        return abs(obj.x - basket.x) < self._half_reach


class TerminationRules:
    """
    Handles game termination conditions.

    - Death: score collapsed to the death threshold
    - Time: session duration elapsed
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize termination rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._death_score = config.rules.death_score
        self._duration = config.timing.game_duration

    @property
    def death_score(self) -> int:
        return self._death_score

    def check_termination(self, score: int, elapsed: float) -> TerminationResult:
        """
        Check all termination conditions, death first.

        Args:
            score: Current score.
            elapsed: Elapsed session seconds.

        Returns:
            TerminationResult indicating game state.
        """
        if score <= self._death_score:
            return TerminationResult.game_over(REASON_DEATH)

        if elapsed >= self._duration:
            return TerminationResult.game_over(REASON_TIME)

        return TerminationResult.none()


class GameRules:
    """
    Combined interface for all game rules.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize game rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self.catch = CatchRules(config)
        self.termination = TerminationRules(config)
