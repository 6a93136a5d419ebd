"""
Object World
============

Owns the live falling objects and moves them each frame.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from egg_catcher.catch_core.config_loader import GameConfig, get_config
from egg_catcher.catch_core.item_catalog import ItemKind
from egg_catcher.catch_core.rng import RandomSource


@dataclass
class FallingObject:
    """A single falling item."""
    uid: int
    kind: ItemKind
    x: float
    y: float
    vertical_speed: float
    rotation: float = 0.0
    rotation_speed: float = 0.0

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)


class ObjectWorld:
    """
    Live object collection in spawn order.

    Objects are only removed in bulk via remove(), after a frame's sweep.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._screen_width = config.screen.width
        self._screen_height = config.screen.height
        self._crazy = config.crazy
        self._objects: List[FallingObject] = []
        self._next_uid: int = 0

    @property
    def objects(self) -> List[FallingObject]:
        return self._objects

    @property
    def object_count(self) -> int:
        return len(self._objects)

    @property
    def screen_width(self) -> float:
        return self._screen_width

    @property
    def screen_height(self) -> float:
        return self._screen_height

    def __iter__(self) -> Iterator[FallingObject]:
        return iter(self._objects)

    def __len__(self) -> int:
        return len(self._objects)

    def resize(self, width: float, height: float) -> None:
        self._screen_width = width
        self._screen_height = height

    def add(
        self,
        kind: ItemKind,
        x: float,
        y: float,
        vertical_speed: float,
        rotation_speed: float = 0.0
    ) -> FallingObject:
        """Create and register a new falling object."""
        obj = FallingObject(
            uid=self._next_uid,
            kind=kind,
            x=x,
            y=y,
            vertical_speed=vertical_speed,
            rotation_speed=rotation_speed
        )
        self._next_uid += 1
        self._objects.append(obj)
        return obj

    def advance(
        self,
        obj: FallingObject,
        delta: float,
        speed_multiplier: float
    ) -> None:
        """Apply one frame of fall and spin."""
        obj.y += obj.vertical_speed * delta * speed_multiplier
        obj.rotation += obj.rotation_speed * delta

    def jitter(
        self,
        obj: FallingObject,
        delta: float,
        rng: RandomSource
    ) -> None:
        """Crazy-mode drift: random nudge on x, y and rotation, x kept on screen."""
        crazy = self._crazy
        obj.x += rng.centered() * crazy.jitter_x * delta
        obj.y += rng.centered() * crazy.jitter_y * delta
        obj.rotation += rng.centered() * crazy.jitter_rotation * delta

        min_x = crazy.edge_clamp
        max_x = self._screen_width - crazy.edge_clamp
        obj.x = max(min_x, min(max_x, obj.x))

    def is_below_floor(self, obj: FallingObject, margin: float) -> bool:
        return obj.y > self._screen_height + margin

    def remove(self, uids: List[int]) -> List[FallingObject]:
        """Remove objects by uid; returns the removed objects."""
        if not uids:
            return []
        doomed = set(uids)
        removed = [obj for obj in self._objects if obj.uid in doomed]
        self._objects = [obj for obj in self._objects if obj.uid not in doomed]
        return removed

    def clear(self) -> None:
        self._objects = []

    def counts_by_kind(self) -> Dict[ItemKind, int]:
        counts = {kind: 0 for kind in ItemKind}
        for obj in self._objects:
            counts[obj.kind] += 1
        return counts
