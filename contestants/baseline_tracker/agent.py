"""
Baseline Tracker Agent - Chases the most valuable item it can reach.

This is a simple heuristic agent that reads the padded object arrays and
moves the basket under the best good item while keeping clear of bombs and
bad eggs that are about to land.

This serves as:
1. A working example of how to read observations and return actions
2. A baseline benchmark for teams to compare against
3. A verification that the environment API works correctly

Strategy:
- Estimate frames until each item reaches the basket line
- Keep the items the basket can still get under in time
- Value them (gold > egg) and prefer the ones landing soonest
- Veto the move if a harmful item will land on the basket's next position
"""

import numpy as np
from typing import Any, Dict, Optional


# Matches egg_catcher.catch_core.item_catalog.ItemKind
EGG, BAD_EGG, BOMB, GOLD = 0, 1, 2, 3
ITEM_VALUE = {EGG: 10.0, GOLD: 100.0}

BASKET_SPEED = 8.0       # Pixels per frame, from game_config.yaml
CATCH_REACH = 60.0       # Half basket width + slack
DANGER_FRAMES = 20.0     # Harmful items closer than this are avoided
DEADZONE = 6.0

LEFT, STAY, RIGHT = 0, 1, 2


class CatcherAgent:
    """Greedy basket controller."""

    def __init__(self, debug: bool = False):
        """
        Initialize the agent.

        Args:
            debug: If True, print decisions to stdout.
        """
        self.debug = debug
        self._rng = np.random.default_rng()

    def reset(self, seed: Optional[int] = None) -> None:
        if seed is not None:
            self._rng = np.random.default_rng(seed)

    def act(self, observation: Dict[str, Any], debug: bool = False) -> int:
        """
        Choose a direction.

        Args:
            observation: Dict of numpy arrays from the environment.
            debug: If True, print debug info for this step.

        Returns:
            0 (left), 1 (stay) or 2 (right).
        """
        mask = observation["obj_mask"].astype(bool)
        kinds = observation["obj_kind"][mask]
        xs = observation["obj_x"][mask]
        ys = observation["obj_y"][mask]
        vys = observation["obj_vy"][mask]

        basket_x = float(observation["basket_x"])
        basket_y = float(observation["basket_y"])

        # Frames until each item reaches the basket line
        with np.errstate(divide="ignore", invalid="ignore"):
            eta = np.where(vys > 0, (basket_y - ys) / vys, np.inf)

        target_x = basket_x
        best = 0.0
        for kind, x, t in zip(kinds, xs, eta):
            value = ITEM_VALUE.get(int(kind))
            if value is None or t < 0:
                continue
            travel = max(0.0, abs(x - basket_x) - CATCH_REACH * 0.5)
            if travel / BASKET_SPEED > t:
                continue
            priority = value / (1.0 + t)
            if priority > best:
                best = priority
                target_x = float(x)

        offset = target_x - basket_x
        if offset > DEADZONE:
            action = RIGHT
        elif offset < -DEADZONE:
            action = LEFT
        else:
            action = STAY

        action = self._dodge(action, basket_x, kinds, xs, eta)

        if debug or self.debug:
            print(f"[Tracker Agent] basket={basket_x:.0f} target={target_x:.0f} "
                  f"items={int(mask.sum())} action={action}")

        return action

    def _dodge(self, action: int, basket_x: float, kinds, xs, eta) -> int:
        """Swap to the safest direction if the chosen one lands under a harmful item."""
        harmful = np.isin(kinds, (BAD_EGG, BOMB)) & (eta >= 0) & (eta < DANGER_FRAMES)
        if not harmful.any():
            return action

        danger_xs = xs[harmful]

        def exposure(a: int) -> int:
            x = basket_x + (a - 1) * BASKET_SPEED * 4
            return int(np.sum(np.abs(danger_xs - x) < CATCH_REACH))

        if exposure(action) == 0:
            return action
        return min((LEFT, STAY, RIGHT), key=exposure)


# Convenience function to create agent (used by evaluation harness)
def create_agent(**kwargs) -> CatcherAgent:
    """Factory function to create an agent instance."""
    return CatcherAgent(**kwargs)
