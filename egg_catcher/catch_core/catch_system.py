"""
Catch System
============

Per-frame lifecycle sweep over the live objects: move, jitter, catch test,
floor exit, removal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from egg_catcher.catch_core.basket import BasketState
from egg_catcher.catch_core.config_loader import GameConfig, get_config
from egg_catcher.catch_core.item_catalog import ItemKind
from egg_catcher.catch_core.object_world import ObjectWorld
from egg_catcher.catch_core.rng import RandomSource
from egg_catcher.catch_core.rules import CatchRules
from egg_catcher.catch_core.scoring import ScoreEvent, ScoreTracker


@dataclass
class CatchResult:
    """A single caught object."""
    uid: int
    kind: ItemKind
    position: Tuple[float, float]
    score_event: ScoreEvent


@dataclass
class SweepResult:
    """Outcome of one frame's sweep."""
    catches: List[CatchResult] = field(default_factory=list)
    missed_uids: List[int] = field(default_factory=list)
    stopped_early: bool = False  # Death threshold crossed mid-sweep

    @property
    def delta_score(self) -> int:
        return sum(c.score_event.points for c in self.catches)


class CatchSystem:
    """
    Resolves catches and floor exits.

    Objects are visited newest first. Each object gets exactly one outcome
    per frame, catch taking precedence over floor exit. If a catch drops the
    score to the death threshold the sweep stops at once: objects already
    visited keep their effects, the rest are left untouched for the frame.
    """

    def __init__(
        self,
        world: ObjectWorld,
        scorer: ScoreTracker,
        rng: RandomSource,
        config: Optional[GameConfig] = None
    ):
        if config is None:
            config = get_config()

        self._world = world
        self._scorer = scorer
        self._rng = rng
        self._rules = CatchRules(config)

    @property
    def rules(self) -> CatchRules:
        return self._rules

    def resolve(
        self,
        delta: float,
        speed_multiplier: float,
        crazy: bool,
        basket: BasketState
    ) -> SweepResult:
        """
        Run one frame of the object lifecycle.

        Args:
            delta: Frame delta.
            speed_multiplier: Current difficulty speed multiplier.
            crazy: Apply crazy-mode jitter.
            basket: Basket pose for the catch test.

        Returns:
            SweepResult with catches and misses for this frame.
        """
        result = SweepResult()
        doomed: List[int] = []

        for obj in reversed(list(self._world.objects)):
            self._world.advance(obj, delta, speed_multiplier)
            if crazy:
                self._world.jitter(obj, delta, self._rng)

            if self._rules.is_caught(obj, basket):
                event = self._scorer.apply_catch(obj.kind)
                result.catches.append(CatchResult(
                    uid=obj.uid,
                    kind=obj.kind,
                    position=obj.position,
                    score_event=event
                ))
                doomed.append(obj.uid)
                if self._scorer.is_dead:
                    result.stopped_early = True
                    break
            elif self._world.is_below_floor(obj, self._rules.floor_exit_margin):
                self._scorer.record_miss()
                result.missed_uids.append(obj.uid)
                doomed.append(obj.uid)

        self._world.remove(doomed)
        return result
