"""
Tests for the difficulty curve and crazy-mode latch.
"""

from dataclasses import replace

import pytest

from egg_catcher.catch_core.config_loader import load_config
from egg_catcher.catch_core.difficulty import DifficultyScheduler
from egg_catcher.catch_core.clock import GameClock, Phase


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def scheduler(config):
    return DifficultyScheduler(config)


class TestDifficultyCurve:
    """Test the continuous ramp."""

    def test_easy_phase_values(self, scheduler):
        """First 20 seconds use the reduced speed and the stretched interval."""
        for elapsed in (0.0, 5.0, 19.99):
            state = scheduler.compute(elapsed)
            assert state.speed_multiplier == pytest.approx(0.85)
            assert state.spawn_interval_frames == pytest.approx(72.0)

    def test_ramp_starts_from_easy_speed(self, scheduler):
        """Speed is continuous across the easy/ramp boundary."""
        before = scheduler.compute(19.999)
        at = scheduler.compute(20.0)

        assert at.speed_multiplier == pytest.approx(before.speed_multiplier)
        assert at.spawn_interval_frames == pytest.approx(60.0)

    def test_midpoint(self, scheduler):
        """Halfway through the ramp the values are halfway along."""
        state = scheduler.compute(70.0)

        assert state.speed_multiplier == pytest.approx(0.85 + 0.5 * 2.15)
        assert state.spawn_interval_frames == pytest.approx(60 - (60 - 24) * 0.5)

    def test_end_of_session(self, scheduler):
        """Ramp tops out at 3.0x speed and 40% of the base interval."""
        state = scheduler.compute(120.0)

        assert state.speed_multiplier == pytest.approx(3.0)
        assert state.spawn_interval_frames == pytest.approx(24.0)

    def test_speed_never_decreases(self, scheduler):
        """Speed multiplier is non-decreasing over the session."""
        speeds = [scheduler.compute(t / 4).speed_multiplier for t in range(0, 481)]
        assert all(b >= a for a, b in zip(speeds, speeds[1:]))

    def test_interval_floor(self, config):
        """Spawn interval never drops below the absolute floor."""
        small = replace(config, difficulty=replace(config.difficulty, base_spawn_interval=12))
        scheduler = DifficultyScheduler(small)

        for t in range(0, 121):
            assert scheduler.compute(float(t)).spawn_interval_frames >= 10.0

    def test_floor_holds_for_unvalidated_config(self, config):
        """A hand-built config with a tiny floor still never spawns faster than every 10 frames."""
        tiny = replace(config, difficulty=replace(
            config.difficulty,
            base_spawn_interval=8,
            min_spawn_interval=2,
            crazy_min_spawn_interval=3
        ))
        scheduler = DifficultyScheduler(tiny)

        for t in (0.0, 30.0, 60.0, 120.0):
            assert scheduler.compute(t).spawn_interval_frames >= 10.0
        assert scheduler.crazy_state.spawn_interval_frames >= 10.0


class TestCrazyMode:
    """Test the one-shot crazy override."""

    def test_not_active_before_threshold(self, scheduler):
        state, entered = scheduler.update(89.9)

        assert not entered
        assert not scheduler.crazy_activated
        assert state == scheduler.compute(89.9)

    def test_enters_once(self, scheduler):
        """Transition fires on the first frame at or past 90 seconds only."""
        _, first = scheduler.update(90.0)
        _, second = scheduler.update(91.0)
        _, third = scheduler.update(119.0)

        assert first
        assert not second
        assert not third
        assert scheduler.crazy_activated

    def test_override_values(self, scheduler):
        """Crazy mode pins speed to 2.0 and interval to max(15, base / 2)."""
        state, _ = scheduler.update(95.0)

        assert state.speed_multiplier == pytest.approx(2.0)
        assert state.spawn_interval_frames == pytest.approx(30.0)

    def test_override_holds_for_rest_of_session(self, scheduler):
        """The ramp does not resume once crazy mode is active."""
        scheduler.update(90.0)
        state, _ = scheduler.update(120.0)

        assert state == scheduler.crazy_state
        assert state.speed_multiplier != pytest.approx(scheduler.compute(120.0).speed_multiplier)

    def test_reset_clears_latch(self, scheduler):
        scheduler.update(100.0)
        scheduler.reset()

        assert not scheduler.crazy_activated
        _, entered = scheduler.update(100.0)
        assert entered


class TestGameClock:
    """Test elapsed time bookkeeping."""

    def test_frames_to_seconds(self, config):
        clock = GameClock(config)
        for _ in range(60):
            clock.advance(1.0)

        assert clock.elapsed_seconds == pytest.approx(1.0)
        assert clock.remaining_seconds == pytest.approx(119.0)

    def test_full_session_reaches_duration_exactly(self, config):
        """7200 one-frame ticks at 60 fps land exactly on 120 seconds."""
        clock = GameClock(config)
        for _ in range(7200):
            clock.advance(1.0)

        assert clock.elapsed_seconds == 120.0
        assert clock.expired

    def test_clamped_and_monotonic(self, config):
        clock = GameClock(config)
        clock.advance(10_000.0)
        assert clock.elapsed_seconds == 120.0

        clock.reset()
        clock.advance(30.0)
        clock.advance(-5.0)
        assert clock.elapsed_seconds == pytest.approx(0.5)

    def test_phase(self, config):
        clock = GameClock(config)
        assert clock.phase() == Phase.EASY

        clock.advance(20 * 60)
        assert clock.phase() == Phase.RAMP
        assert clock.phase(crazy=True) == Phase.CRAZY

    def test_format_remaining(self, config):
        clock = GameClock(config)
        assert clock.format_remaining() == "2:00"

        clock.advance(55 * 60)
        assert clock.format_remaining() == "1:05"
