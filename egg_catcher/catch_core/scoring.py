"""
Scoring System
==============

Applies catch score deltas and keeps per-kind tallies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from egg_catcher.catch_core.config_loader import GameConfig, get_config
from egg_catcher.catch_core.item_catalog import ItemCatalog, ItemKind


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    kind: ItemKind
    score_after: int

    def __repr__(self) -> str:
        return f"ScoreEvent({self.kind.name}={self.points:+d}, total={self.score_after})"


class ScoreTracker:
    """
    Tracks the session score. Score may go negative; the death threshold
    is owned here so the catch sweep can stop the moment it is crossed.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._catalog = ItemCatalog(config)
        self._death_score = config.rules.death_score
        self._score: int = 0
        self._catches: Dict[ItemKind, int] = {kind: 0 for kind in ItemKind}
        self._misses: int = 0

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    @property
    def catches(self) -> Dict[ItemKind, int]:
        """Catch counts per kind."""
        return dict(self._catches)

    @property
    def total_catches(self) -> int:
        return sum(self._catches.values())

    @property
    def misses(self) -> int:
        """Objects that fell past the floor."""
        return self._misses

    @property
    def is_dead(self) -> bool:
        """True once the score has collapsed to the death threshold."""
        return self._score <= self._death_score

    def get_catch_score(self, kind: ItemKind) -> int:
        """Score delta for catching an item kind."""
        return self._catalog[kind].score

    def apply_catch(self, kind: ItemKind) -> ScoreEvent:
        """
        Apply the score for a caught item.

        Returns:
            ScoreEvent describing the points awarded.
        """
        points = self.get_catch_score(kind)
        self._score += points
        self._catches[kind] += 1
        return ScoreEvent(points=points, kind=kind, score_after=self._score)

    def record_miss(self) -> None:
        self._misses += 1

    def reset(self) -> None:
        """Reset score and tallies."""
        self._score = 0
        self._catches = {kind: 0 for kind in ItemKind}
        self._misses = 0
