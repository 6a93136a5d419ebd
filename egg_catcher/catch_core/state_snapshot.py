"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING
import numpy as np

from egg_catcher.catch_core.config_loader import GameConfig, get_config

if TYPE_CHECKING:
    from egg_catcher.catch_core.game import CoreGame


@dataclass
class GameSnapshot:
    """
    Game state snapshot.

    Object arrays are fixed-size with a mask for the variable object count.
    Objects are ordered lowest on screen first; past max_objects the highest
    ones are dropped.
    """
    # Core state
    basket_x: float
    basket_y: float
    score: int
    elapsed_seconds: float
    remaining_seconds: float
    speed_multiplier: float
    spawn_interval: float
    crazy_mode: bool
    phase: int
    objects_count: int

    # Board info (for normalization)
    screen_width: float
    screen_height: float

    # Object arrays (fixed size, padded)
    obj_kind: np.ndarray              # (MAX_OBJ,) int8, -1 for padding
    obj_x: np.ndarray                 # (MAX_OBJ,) float32
    obj_y: np.ndarray                 # (MAX_OBJ,) float32
    obj_vy: np.ndarray                # (MAX_OBJ,) float32
    obj_mask: np.ndarray              # (MAX_OBJ,) bool

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            "basket_x": np.array(self.basket_x, dtype=np.float32),
            "basket_y": np.array(self.basket_y, dtype=np.float32),
            "score": np.array(self.score, dtype=np.int64),
            "elapsed_seconds": np.array(self.elapsed_seconds, dtype=np.float32),
            "remaining_seconds": np.array(self.remaining_seconds, dtype=np.float32),
            "speed_multiplier": np.array(self.speed_multiplier, dtype=np.float32),
            "spawn_interval": np.array(self.spawn_interval, dtype=np.float32),
            "crazy_mode": np.array(int(self.crazy_mode), dtype=np.int8),
            "phase": np.array(self.phase, dtype=np.int8),
            "objects_count": np.array(self.objects_count, dtype=np.int32),
            "screen_width": np.array(self.screen_width, dtype=np.float32),
            "screen_height": np.array(self.screen_height, dtype=np.float32),
            "obj_kind": self.obj_kind,
            "obj_x": self.obj_x,
            "obj_y": self.obj_y,
            "obj_vy": self.obj_vy,
            "obj_mask": self.obj_mask,
        }


class SnapshotBuilder:
    """Builds game state snapshots with fixed-size arrays."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_obj = config.observation.max_objects

    @property
    def max_objects(self) -> int:
        return self._max_obj

    def build(self, game: "CoreGame") -> GameSnapshot:
        """
        Build a snapshot of the current game state.

        Args:
            game: The game to snapshot.

        Returns:
            GameSnapshot with padded object arrays.
        """
        n = self._max_obj
        obj_kind = np.full(n, -1, dtype=np.int8)
        obj_x = np.zeros(n, dtype=np.float32)
        obj_y = np.zeros(n, dtype=np.float32)
        obj_vy = np.zeros(n, dtype=np.float32)
        obj_mask = np.zeros(n, dtype=bool)

        speed = game.difficulty.speed_multiplier
        objects = sorted(game.objects, key=lambda o: o.y, reverse=True)[:n]
        for i, obj in enumerate(objects):
            obj_kind[i] = int(obj.kind)
            obj_x[i] = obj.x
            obj_y[i] = obj.y
            obj_vy[i] = obj.vertical_speed * speed
            obj_mask[i] = True

        basket = game.basket
        return GameSnapshot(
            basket_x=basket.x,
            basket_y=basket.y,
            score=game.score,
            elapsed_seconds=game.elapsed_seconds,
            remaining_seconds=game.remaining_seconds,
            speed_multiplier=speed,
            spawn_interval=game.difficulty.spawn_interval_frames,
            crazy_mode=game.crazy_mode,
            phase=int(game.phase),
            objects_count=len(game.objects),
            screen_width=game.world.screen_width,
            screen_height=game.world.screen_height,
            obj_kind=obj_kind,
            obj_x=obj_x,
            obj_y=obj_y,
            obj_vy=obj_vy,
            obj_mask=obj_mask,
        )
