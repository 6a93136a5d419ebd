"""
Ticker
======

Frame callback driver. A stopped ticker never calls its callbacks, which is
how pausing works: the game tick is not skipped, it is simply not invoked.
"""

from __future__ import annotations

from typing import Callable, List

TickCallback = Callable[[float], None]


class Ticker:
    """Holds per-frame callbacks and calls them while started."""

    def __init__(self, autostart: bool = True):
        self._callbacks: List[TickCallback] = []
        self._started = autostart
        self._frames: int = 0

    @property
    def started(self) -> bool:
        return self._started

    @property
    def frames(self) -> int:
        """Ticks delivered to callbacks so far."""
        return self._frames

    def add(self, callback: TickCallback) -> None:
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def remove(self, callback: TickCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def start(self) -> None:
        self._started = True

    def stop(self) -> None:
        self._started = False

    def tick(self, delta_frames: float = 1.0) -> bool:
        """
        Deliver one frame.

        Returns:
            True if callbacks were invoked, False if the ticker is stopped.
        """
        if not self._started:
            return False
        self._frames += 1
        for callback in list(self._callbacks):
            callback(delta_frames)
        return True
