"""
Tests for the catch sweep: hitbox, scoring, floor exits and death short-circuit.
"""

import pytest

from egg_catcher.catch_core.basket import BasketState
from egg_catcher.catch_core.catch_system import CatchSystem
from egg_catcher.catch_core.config_loader import load_config
from egg_catcher.catch_core.item_catalog import ItemKind
from egg_catcher.catch_core.object_world import ObjectWorld
from egg_catcher.catch_core.rng import RandomSource
from egg_catcher.catch_core.rules import REASON_DEATH, REASON_TIME, TerminationRules
from egg_catcher.catch_core.scoring import ScoreTracker


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def world(config):
    return ObjectWorld(config)


@pytest.fixture
def scorer(config):
    return ScoreTracker(config)


@pytest.fixture
def catcher(world, scorer, config):
    return CatchSystem(world, scorer, RandomSource(0), config)


@pytest.fixture
def basket():
    # Default layout: 800x600 screen, basket 80px above the bottom
    return BasketState(x=400.0, y=520.0)


def place(world, kind, x, y, speed=0.0):
    return world.add(kind=kind, x=x, y=y, vertical_speed=speed)


class TestCatchScoring:
    """Test score deltas from catches."""

    def test_egg_then_bomb(self, world, catcher, scorer, basket):
        """Egg gives +10, a bomb after it leaves -40."""
        place(world, ItemKind.EGG, 400, 500)
        result = catcher.resolve(1.0, 1.0, False, basket)

        assert result.delta_score == 10
        assert scorer.score == 10
        assert world.object_count == 0

        place(world, ItemKind.BOMB, 400, 500)
        catcher.resolve(1.0, 1.0, False, basket)

        assert scorer.score == -40

    @pytest.mark.parametrize("kind,points", [
        (ItemKind.EGG, 10),
        (ItemKind.BAD_EGG, -10),
        (ItemKind.BOMB, -50),
        (ItemKind.GOLD, 100),
    ])
    def test_points_per_kind(self, world, catcher, scorer, basket, kind, points):
        place(world, kind, 410, 490)
        result = catcher.resolve(1.0, 1.0, False, basket)

        assert len(result.catches) == 1
        assert result.catches[0].kind == kind
        assert result.catches[0].score_event.points == points
        assert scorer.catches[kind] == 1

    def test_no_catch_leaves_score(self, world, catcher, scorer, basket):
        """A frame without catches does not change the score."""
        obj = place(world, ItemKind.GOLD, 100, 200, speed=5.0)
        result = catcher.resolve(1.0, 1.0, False, basket)

        assert result.delta_score == 0
        assert scorer.score == 0
        assert world.object_count == 1
        assert obj.y == pytest.approx(205.0)

    def test_several_catches_same_frame(self, world, catcher, scorer, basket):
        place(world, ItemKind.EGG, 380, 500)
        place(world, ItemKind.GOLD, 420, 510)
        result = catcher.resolve(1.0, 1.0, False, basket)

        assert len(result.catches) == 2
        assert scorer.score == 110


class TestHitbox:
    """Test catch band and horizontal reach."""

    @pytest.mark.parametrize("y,caught", [
        (459.0, False),
        (460.0, True),
        (520.0, True),
        (525.0, True),
        (526.0, False),
    ])
    def test_vertical_band(self, world, catcher, basket, y, caught):
        place(world, ItemKind.EGG, 400, y)
        result = catcher.resolve(1.0, 1.0, False, basket)
        assert bool(result.catches) == caught

    @pytest.mark.parametrize("dx,caught", [
        (0.0, True),
        (59.0, True),
        (-59.0, True),
        (60.0, False),
        (-75.0, False),
    ])
    def test_horizontal_reach(self, world, catcher, basket, dx, caught):
        """Reach is half the basket width plus 10px of slack, exclusive."""
        place(world, ItemKind.EGG, 400 + dx, 500)
        result = catcher.resolve(1.0, 1.0, False, basket)
        assert bool(result.catches) == caught

    def test_fall_is_applied_before_catch_test(self, world, catcher, basket):
        """An object just above the band is caught after this frame's move."""
        place(world, ItemKind.EGG, 400, 455, speed=4.0)
        result = catcher.resolve(1.0, 2.0, False, basket)
        assert len(result.catches) == 1


class TestFloorExit:
    """Test removal of missed objects."""

    def test_removed_past_floor(self, world, catcher, scorer):
        basket = BasketState(x=100.0, y=520.0)
        place(world, ItemKind.EGG, 700, 621)
        result = catcher.resolve(1.0, 1.0, False, basket)

        assert len(result.missed_uids) == 1
        assert world.object_count == 0
        assert scorer.score == 0
        assert scorer.misses == 1

    def test_kept_at_margin(self, world, catcher):
        basket = BasketState(x=100.0, y=520.0)
        place(world, ItemKind.BOMB, 700, 620)
        result = catcher.resolve(1.0, 1.0, False, basket)

        assert result.missed_uids == []
        assert world.object_count == 1

    def test_catch_takes_precedence(self, world, catcher, scorer, basket):
        """An object both caught and past the floor counts as a catch only."""
        world.resize(800, 500)
        place(world, ItemKind.EGG, 400, 522)
        result = catcher.resolve(1.0, 1.0, False, basket)

        assert len(result.catches) == 1
        assert result.missed_uids == []
        assert scorer.misses == 0
        assert scorer.score == 10


class TestDeathShortCircuit:
    """Test the sweep stopping at the death threshold."""

    def test_sweep_stops_at_threshold(self, world, catcher, scorer, basket):
        """Objects not yet visited keep their state when the sweep stops."""
        scorer.apply_catch(ItemKind.BOMB)
        scorer.apply_catch(ItemKind.BAD_EGG)
        assert scorer.score == -60

        oldest = place(world, ItemKind.EGG, 100, 100, speed=1.0)
        middle = place(world, ItemKind.BOMB, 400, 500, speed=1.0)
        newest = place(world, ItemKind.BOMB, 400, 500, speed=1.0)

        result = catcher.resolve(1.0, 1.0, False, basket)

        assert result.stopped_early
        assert [c.uid for c in result.catches] == [newest.uid]
        assert scorer.score == -110
        assert scorer.is_dead
        assert oldest.y == 100
        assert middle.y == 500
        assert [o.uid for o in world.objects] == [oldest.uid, middle.uid]

    def test_termination_checks_death_first(self, config):
        rules = TerminationRules(config)

        assert rules.check_termination(-100, 120.0).reason == REASON_DEATH
        assert rules.check_termination(-99, 120.0).reason == REASON_TIME
        assert not rules.check_termination(-99, 119.9).terminated


class TestCrazyJitter:
    """Test crazy-mode drift."""

    def test_x_clamped_to_screen(self, world, catcher, basket):
        left = place(world, ItemKind.EGG, 20, 100)
        right = place(world, ItemKind.EGG, 780, 100)

        for _ in range(200):
            catcher.resolve(1.0, 0.0, True, basket)
            assert 20 <= left.x <= 780
            assert 20 <= right.x <= 780

    def test_no_jitter_outside_crazy(self, world, catcher, basket):
        obj = place(world, ItemKind.EGG, 300, 100)
        catcher.resolve(1.0, 0.0, False, basket)

        assert obj.x == 300
        assert obj.y == 100
