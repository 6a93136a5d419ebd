"""
Team Template Agent
===================

Copy this directory, rename it, and replace `act()` with your strategy.
The evaluator loads `create_agent()`, a `CatcherAgent` class, or a
module-level `act(obs)` function, in that order.

Actions:
    0 = move left, 1 = stay, 2 = move right.
    The direction is held for frame_skip frames (4 by default).

Observation keys (numpy arrays):
    basket_x, basket_y        Basket centre in pixels (basket is 100px wide)
    score                     Current score; the session dies at -100
    elapsed_seconds           Time played, out of 120
    remaining_seconds         Countdown shown on the HUD
    speed_multiplier          Current fall speed scale
    spawn_interval            Frames between spawn batches
    crazy_mode, phase         1 / 2 once the final 30 seconds start
    objects_count             Live objects, may exceed the array size

    obj_kind   (N,) int8      0 egg (+10), 1 bad egg (-10), 2 bomb (-50),
                              3 gold (+100), -1 padding
    obj_x, obj_y (N,) float32 Object centres; lowest on screen first
    obj_vy     (N,) float32   Fall speed in pixels per frame
    obj_mask   (N,) bool      True for real entries
"""

from __future__ import annotations

from typing import Dict
import numpy as np

LEFT, STAY, RIGHT = 0, 1, 2


class CatcherAgent:
    """Example: drift toward the lowest egg, otherwise wander."""

    def __init__(self):
        self.rng = np.random.default_rng()

    def act(self, obs: Dict[str, np.ndarray]) -> int:
        mask = obs["obj_mask"].astype(bool)
        eggs = mask & (obs["obj_kind"] == 0)

        if not eggs.any():
            return int(self.rng.integers(LEFT, RIGHT + 1))

        # Arrays are sorted lowest first, so the first egg is the nearest
        target_x = float(obs["obj_x"][np.argmax(eggs)])
        offset = target_x - float(obs["basket_x"])
        if abs(offset) < 8:
            return STAY
        return RIGHT if offset > 0 else LEFT

    def reset(self) -> None:
        """Called between episodes if you keep state (optional)."""
        pass


def create_agent() -> CatcherAgent:
    return CatcherAgent()
