"""
Collaborator Boundary
=====================

The simulation core never draws or plays anything itself; it calls a
Presenter. Calls are fire-and-forget: SafePresenter swallows and logs any
exception so a broken renderer or audio device can never halt the frame
loop, and SoundGate drops rate-limited sound requests instead of queueing.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Optional, Tuple

from egg_catcher.catch_core.config_loader import GameConfig, get_config
from egg_catcher.catch_core.item_catalog import ItemKind

logger = logging.getLogger(__name__)

Position = Tuple[float, float]
Color = Tuple[int, int, int]

SOUND_BOMB_FALL = "bombFall"
SOUND_GAME_OVER = "gameOver"
SOUND_DEATH = "death"


class Presenter:
    """
    Presentation/audio collaborator interface.

    Every method is a no-op here, so this class doubles as the headless
    presenter. Subclasses override what they render.
    """

    def request_spawn_visual(
        self,
        kind: ItemKind,
        position: Position,
        velocity_hint: float
    ) -> None:
        pass

    def notify_catch(
        self,
        position: Position,
        label: str,
        color: Color,
        kind: ItemKind
    ) -> None:
        pass

    def notify_terminal(self, reason: str, final_score: int) -> None:
        pass

    def notify_crazy_mode_entered(self) -> None:
        pass

    def request_sound(self, effect_name: str) -> None:
        pass

    def update_hud(self, score: int, remaining_seconds: float) -> None:
        pass

    def notify_paused(self, paused: bool) -> None:
        pass


NullPresenter = Presenter


class SafePresenter(Presenter):
    """Forwards every call to a wrapped presenter, catching and logging failures."""

    def __init__(self, inner: Optional[Presenter] = None):
        self._inner = inner if inner is not None else NullPresenter()
        self._failures: int = 0

    @property
    def inner(self) -> Presenter:
        return self._inner

    @property
    def failures(self) -> int:
        """Number of collaborator calls that raised."""
        return self._failures

    def _dispatch(self, method: str, *args) -> None:
        try:
            getattr(self._inner, method)(*args)
        except Exception:
            self._failures += 1
            logger.warning("Presenter call %s failed; ignoring", method, exc_info=True)

    def request_spawn_visual(self, kind, position, velocity_hint) -> None:
        self._dispatch("request_spawn_visual", kind, position, velocity_hint)

    def notify_catch(self, position, label, color, kind) -> None:
        self._dispatch("notify_catch", position, label, color, kind)

    def notify_terminal(self, reason, final_score) -> None:
        self._dispatch("notify_terminal", reason, final_score)

    def notify_crazy_mode_entered(self) -> None:
        self._dispatch("notify_crazy_mode_entered")

    def request_sound(self, effect_name) -> None:
        self._dispatch("request_sound", effect_name)

    def update_hud(self, score, remaining_seconds) -> None:
        self._dispatch("update_hud", score, remaining_seconds)

    def notify_paused(self, paused) -> None:
        self._dispatch("notify_paused", paused)


class SoundGate:
    """
    Per-effect cooldowns for sound requests.

    Only the bomb-fall effect is throttled: once per bomb_fall_cooldown_ms in
    normal play, once per crazy_bomb_fall_cooldown_ms in crazy mode.
    Requests inside the cooldown are dropped.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        now_fn: Callable[[], float] = time.monotonic
    ):
        if config is None:
            config = get_config()

        self._audio = config.audio
        self._now = now_fn
        self._last_played: Dict[str, float] = {}
        self._dropped: int = 0

    @property
    def dropped(self) -> int:
        return self._dropped

    def cooldown_seconds(self, effect_name: str, crazy: bool) -> float:
        if effect_name != SOUND_BOMB_FALL:
            return 0.0
        if crazy:
            return self._audio.crazy_bomb_fall_cooldown_ms / 1000.0
        return self._audio.bomb_fall_cooldown_ms / 1000.0

    def allow(self, effect_name: str, crazy: bool = False) -> bool:
        """True if the effect may play now; records the play time if so."""
        cooldown = self.cooldown_seconds(effect_name, crazy)
        if cooldown <= 0:
            return True

        now = self._now()
        last = self._last_played.get(effect_name)
        if last is not None and now - last < cooldown:
            self._dropped += 1
            return False

        self._last_played[effect_name] = now
        return True

    def reset(self) -> None:
        self._last_played.clear()
        self._dropped = 0
