"""
Spawner
=======

Accumulates the spawn timer and emits batches of falling objects.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from egg_catcher.catch_core.config_loader import GameConfig, get_config
from egg_catcher.catch_core.item_catalog import ItemCatalog, ItemKind
from egg_catcher.catch_core.object_world import FallingObject, ObjectWorld
from egg_catcher.catch_core.rng import KindPicker, RandomSource

logger = logging.getLogger(__name__)


class Spawner:
    """
    Frame-driven spawner.

    When the accumulated timer reaches the current spawn interval it resets
    to zero and a batch is emitted; batch size depends on the phase.
    """

    def __init__(
        self,
        world: ObjectWorld,
        rng: RandomSource,
        config: Optional[GameConfig] = None
    ):
        if config is None:
            config = get_config()

        self._config = config
        self._spawn = config.spawn
        self._easy_phase = config.timing.easy_phase
        self._world = world
        self._rng = rng
        self._catalog = ItemCatalog(config)
        self._picker = KindPicker(rng, config)
        self._timer: float = 0.0

    @property
    def timer(self) -> float:
        return self._timer

    def batch_size(self, elapsed: float, crazy: bool) -> int:
        """Objects per batch: crazy overrides, otherwise easy vs ramp."""
        if crazy:
            return self._spawn.crazy_count
        if elapsed < self._easy_phase:
            return self._spawn.easy_count
        return self._spawn.ramp_count

    def try_spawn(
        self,
        delta_frames: float,
        elapsed: float,
        crazy: bool,
        spawn_interval: float
    ) -> List[FallingObject]:
        """
        Advance the spawn timer and emit a batch if the interval is reached.

        Args:
            delta_frames: Frame delta for this tick.
            elapsed: Elapsed session seconds.
            crazy: Whether crazy mode is active.
            spawn_interval: Current interval in frames.

        Returns:
            Newly created objects (empty if no batch fired).
        """
        self._timer += delta_frames
        if self._timer < spawn_interval:
            return []

        self._timer = 0.0
        count = self.batch_size(elapsed, crazy)
        spawned = [self.spawn_one(crazy) for _ in range(count)]
        logger.debug(
            "Spawned %d objects at %.2fs: %s",
            count, elapsed, [obj.kind.name for obj in spawned]
        )
        return spawned

    def spawn_one(self, crazy: bool, kind: Optional[ItemKind] = None) -> FallingObject:
        """Create one object above the screen at a random x."""
        if kind is None:
            kind = self._picker.pick(crazy)
        item = self._catalog[kind]

        speed = item.base_speed
        if item.speed_jitter > 0:
            speed += self._rng.random() * item.speed_jitter

        margin = self._spawn.margin
        x = margin + self._rng.random() * (self._world.screen_width - margin * 2)
        rotation_speed = self._rng.centered() * self._spawn.rotation_speed_range

        return self._world.add(
            kind=kind,
            x=x,
            y=self._spawn.start_y,
            vertical_speed=speed,
            rotation_speed=rotation_speed
        )

    def reset(self) -> None:
        self._timer = 0.0
