"""
Core Game
=========

Main game orchestrator combining clock, difficulty, spawning, catching,
scoring and rules.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from egg_catcher.catch_core.basket import Basket, BasketState
from egg_catcher.catch_core.catch_system import CatchResult, CatchSystem
from egg_catcher.catch_core.clock import GameClock, Phase
from egg_catcher.catch_core.collaborators import (
    SOUND_BOMB_FALL,
    SOUND_DEATH,
    SOUND_GAME_OVER,
    Presenter,
    SafePresenter,
    SoundGate,
)
from egg_catcher.catch_core.config_loader import GameConfig, get_config, validate_config
from egg_catcher.catch_core.difficulty import DifficultyScheduler, DifficultyState
from egg_catcher.catch_core.item_catalog import ItemCatalog, ItemKind
from egg_catcher.catch_core.object_world import FallingObject, ObjectWorld
from egg_catcher.catch_core.rng import RandomSource
from egg_catcher.catch_core.rules import REASON_DEATH, GameRules
from egg_catcher.catch_core.scoring import ScoreTracker
from egg_catcher.catch_core.spawner import Spawner
from egg_catcher.catch_core.state_snapshot import GameSnapshot, SnapshotBuilder
from egg_catcher.catch_core.ticker import Ticker

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Mutable state of the one active session."""
    score: int = 0
    elapsed_seconds: float = 0.0
    phase: Phase = Phase.EASY
    crazy_mode_activated: bool = False
    active: bool = False
    termination_reason: str = ""


@dataclass
class FrameResult:
    """Result of a single frame tick."""
    delta_score: int = 0
    spawned: List[FallingObject] = field(default_factory=list)
    catches: List[CatchResult] = field(default_factory=list)
    missed: int = 0
    entered_crazy: bool = False
    terminated: bool = False
    termination_reason: str = ""


class CoreGame:
    """
    Main game simulation class.

    Orchestrates, once per frame tick:
    - Basket movement
    - Clock advance
    - Difficulty update (and the one-shot crazy-mode entry)
    - Spawning
    - Object lifecycle sweep (move, catch, floor exit)
    - Termination check

    The tick is registered on a Ticker; pause() stops the ticker so the
    tick is not invoked at all while paused.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        presenter: Optional[Presenter] = None,
        ticker: Optional[Ticker] = None,
        sound_clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility.
            presenter: Render/audio collaborator. Headless if None.
            ticker: Frame driver. A new one is created if None.
            sound_clock: Monotonic time source for sound cooldowns.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._presenter = SafePresenter(presenter)
        self._ticker = ticker if ticker is not None else Ticker()
        self._ticker.add(self.tick)

        # Initialize subsystems
        self._rng = RandomSource(seed)
        self._catalog = ItemCatalog(config)
        self._clock = GameClock(config)
        self._difficulty = DifficultyScheduler(config)
        self._world = ObjectWorld(config)
        self._basket = Basket(config)
        self._scorer = ScoreTracker(config)
        self._spawner = Spawner(self._world, self._rng, config)
        self._catcher = CatchSystem(self._world, self._scorer, self._rng, config)
        self._rules = GameRules(config)
        self._sound_gate = SoundGate(config, now_fn=sound_clock)
        self._snapshot_builder = SnapshotBuilder(config)

        # Game state
        self._session = GameSession()
        self._difficulty_state: DifficultyState = self._difficulty.compute(0.0)
        self._paused: bool = False

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def session(self) -> GameSession:
        return self._session

    @property
    def ticker(self) -> Ticker:
        return self._ticker

    @property
    def presenter(self) -> SafePresenter:
        return self._presenter

    @property
    def score(self) -> int:
        """Current score."""
        return self._scorer.score

    @property
    def elapsed_seconds(self) -> float:
        return self._clock.elapsed_seconds

    @property
    def remaining_seconds(self) -> float:
        return self._clock.remaining_seconds

    @property
    def phase(self) -> Phase:
        return self._clock.phase(self._difficulty.crazy_activated)

    @property
    def crazy_mode(self) -> bool:
        return self._difficulty.crazy_activated

    @property
    def difficulty(self) -> DifficultyState:
        """Difficulty values used by the most recent frame."""
        return self._difficulty_state

    @property
    def is_active(self) -> bool:
        return self._session.active

    @property
    def is_over(self) -> bool:
        """True once a started session has terminated."""
        return bool(self._session.termination_reason)

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def termination_reason(self) -> str:
        """Reason for game end, or empty string."""
        return self._session.termination_reason

    @property
    def objects(self) -> List[FallingObject]:
        return self._world.objects

    @property
    def world(self) -> ObjectWorld:
        return self._world

    @property
    def basket(self) -> BasketState:
        return self._basket.state

    @property
    def scorer(self) -> ScoreTracker:
        return self._scorer

    @property
    def spawner(self) -> Spawner:
        return self._spawner

    @property
    def rng(self) -> RandomSource:
        return self._rng

    @property
    def clock(self) -> GameClock:
        return self._clock

    def start(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Start a fresh session, discarding any previous one.

        Args:
            seed: New random seed. Uses previous if None.

        Returns:
            Initial game snapshot.

        Raises:
            ConfigError: If the configuration is invalid.
        """
        validate_config(self._config)

        if seed is not None:
            self._seed = seed

        # Reset subsystems
        self._rng.reset(self._seed)
        self._clock.reset()
        self._difficulty.reset()
        self._world.clear()
        self._basket.reset()
        self._scorer.reset()
        self._spawner.reset()
        self._sound_gate.reset()

        # Reset state
        self._session = GameSession(active=True)
        self._difficulty_state = self._difficulty.compute(0.0)
        self._paused = False
        self._ticker.start()

        logger.info("Session started (seed=%s)", self._seed)
        self._presenter.update_hud(self.score, self.remaining_seconds)
        return self.build_snapshot()

    def tick(self, delta_frames: float = 1.0) -> FrameResult:
        """
        Advance the simulation by one frame.

        Args:
            delta_frames: Elapsed time since the previous tick, in nominal
                frames (1.0 == one frame at config.timing.fps).

        Returns:
            FrameResult describing what happened this frame.
        """
        if not self._session.active or self._paused:
            return FrameResult()

        delta = max(0.0, float(delta_frames))
        result = FrameResult()

        self._basket.update(delta)
        elapsed = self._clock.advance(delta)

        state, entered = self._difficulty.update(elapsed)
        self._difficulty_state = state
        crazy = self._difficulty.crazy_activated
        if entered:
            result.entered_crazy = True
            self._presenter.notify_crazy_mode_entered()

        result.spawned = self._spawner.try_spawn(
            delta, elapsed, crazy, state.spawn_interval_frames
        )
        for obj in result.spawned:
            self._presenter.request_spawn_visual(
                obj.kind, obj.position, obj.vertical_speed * state.speed_multiplier
            )
            if obj.kind == ItemKind.BOMB:
                self._request_sound(SOUND_BOMB_FALL)

        sweep = self._catcher.resolve(delta, state.speed_multiplier, crazy, self._basket.state)
        result.catches = sweep.catches
        result.missed = len(sweep.missed_uids)
        result.delta_score = sweep.delta_score
        for catch in sweep.catches:
            item = self._catalog[catch.kind]
            self._presenter.notify_catch(catch.position, item.label, item.color, catch.kind)
            self._request_sound(item.sound)

        self._sync_session()

        term = self._rules.termination.check_termination(self._scorer.score, elapsed)
        if term.terminated:
            self.terminate(term.reason)
            result.terminated = True
            result.termination_reason = term.reason
        else:
            self._presenter.update_hud(self._scorer.score, self._clock.remaining_seconds)

        return result

    def terminate(self, reason: str) -> bool:
        """
        End the session. Calling it on an inactive session is a no-op.

        Returns:
            True if this call ended the session.
        """
        if not self._session.active:
            return False

        self._sync_session()
        self._session.active = False
        self._session.termination_reason = reason
        self._paused = False

        final_score = self._scorer.score
        logger.info(
            "Session over: reason=%s score=%d elapsed=%.2fs",
            reason, final_score, self._clock.elapsed_seconds
        )
        self._presenter.notify_terminal(reason, final_score)
        self._presenter.request_sound(SOUND_DEATH if reason == REASON_DEATH else SOUND_GAME_OVER)
        return True

    def pause(self) -> bool:
        """Stop the ticker. Ignored when no session is running."""
        if not self._session.active or self._paused:
            return False
        self._paused = True
        self._ticker.stop()
        self._presenter.notify_paused(True)
        return True

    def resume(self) -> bool:
        """Restart the ticker after pause()."""
        if not self._session.active or not self._paused:
            return False
        self._paused = False
        self._ticker.start()
        self._presenter.notify_paused(False)
        return True

    def toggle_pause(self) -> bool:
        """Pause or resume; returns the new paused state."""
        if self._paused:
            self.resume()
        else:
            self.pause()
        return self._paused

    def on_basket_move(self, direction: float) -> None:
        """Set the held basket direction (-1 left, 0 none, +1 right)."""
        self._basket.set_direction(direction)

    def on_resize(self, width: float, height: float) -> None:
        self._world.resize(width, height)
        self._basket.resize(width, height)

    def _request_sound(self, effect_name: str) -> None:
        if self._sound_gate.allow(effect_name, self._difficulty.crazy_activated):
            self._presenter.request_sound(effect_name)

    def _sync_session(self) -> None:
        session = self._session
        session.score = self._scorer.score
        session.elapsed_seconds = self._clock.elapsed_seconds
        session.crazy_mode_activated = self._difficulty.crazy_activated
        session.phase = self.phase

    def build_snapshot(self) -> GameSnapshot:
        """Build current game state snapshot."""
        return self._snapshot_builder.build(self)

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        catches = self._scorer.catches
        return {
            "score": self._scorer.score,
            "elapsed_seconds": self._clock.elapsed_seconds,
            "remaining_seconds": self._clock.remaining_seconds,
            "phase": self.phase.name.lower(),
            "crazy_mode": self._difficulty.crazy_activated,
            "object_count": self._world.object_count,
            "catches": {kind.config_name: count for kind, count in catches.items()},
            "misses": self._scorer.misses,
            "terminated_reason": self._session.termination_reason,
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with object positions, basket pose and HUD values.
        """
        objects_data = []
        for obj in self._world.objects:
            item = self._catalog[obj.kind]
            objects_data.append({
                "uid": obj.uid,
                "kind": obj.kind,
                "x": obj.x,
                "y": obj.y,
                "rotation": obj.rotation,
                "color": item.color,
            })

        basket = self._basket.state
        return {
            "screen_width": self._world.screen_width,
            "screen_height": self._world.screen_height,
            "objects": objects_data,
            "basket_x": basket.x,
            "basket_y": basket.y,
            "basket_rotation": basket.rotation,
            "basket_width": self._basket.width,
            "score": self._scorer.score,
            "remaining_label": self._clock.format_remaining(),
            "crazy_mode": self._difficulty.crazy_activated,
            "paused": self._paused,
            "game_over": self.is_over,
            "termination_reason": self._session.termination_reason,
        }
