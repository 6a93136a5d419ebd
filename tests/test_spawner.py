"""
Tests for spawn timing, batch sizes and kind distribution.
"""

import random

import pytest

from egg_catcher.catch_core.config_loader import load_config
from egg_catcher.catch_core.item_catalog import ItemKind
from egg_catcher.catch_core.object_world import ObjectWorld
from egg_catcher.catch_core.rng import RandomSource, kind_for_draw
from egg_catcher.catch_core.spawner import Spawner


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def world(config):
    return ObjectWorld(config)


@pytest.fixture
def spawner(world, config):
    return Spawner(world, RandomSource(42), config)


class TestBatches:
    """Test spawn timer and batch sizes."""

    def test_batch_size_by_phase(self, spawner):
        assert spawner.batch_size(0.0, crazy=False) == 2
        assert spawner.batch_size(10.0, crazy=False) == 2
        assert spawner.batch_size(19.9, crazy=False) == 2
        assert spawner.batch_size(20.0, crazy=False) == 4
        assert spawner.batch_size(50.0, crazy=False) == 4
        assert spawner.batch_size(95.0, crazy=True) == 6

    def test_crazy_overrides_elapsed(self, spawner):
        """Crazy mode batch size wins even if elapsed says otherwise."""
        assert spawner.batch_size(5.0, crazy=True) == 6

    def test_fires_when_timer_reaches_interval(self, spawner, world):
        """Nothing spawns until the timer reaches the interval, then it resets."""
        for _ in range(71):
            assert spawner.try_spawn(1.0, 0.0, False, 72.0) == []

        batch = spawner.try_spawn(1.0, 0.0, False, 72.0)

        assert len(batch) == 2
        assert world.object_count == 2
        assert spawner.timer == 0.0

    def test_timer_resets_to_zero_not_remainder(self, spawner):
        """A late tick does not carry its overshoot into the next interval."""
        spawner.try_spawn(100.0, 0.0, False, 72.0)
        assert spawner.timer == 0.0

    def test_ramp_and_crazy_batches(self, spawner):
        assert len(spawner.try_spawn(60.0, 50.0, False, 60.0)) == 4
        assert len(spawner.try_spawn(30.0, 95.0, True, 30.0)) == 6


class TestSpawnPlacement:
    """Test per-object spawn values."""

    def test_position_within_margins(self, spawner, config):
        for _ in range(500):
            obj = spawner.spawn_one(crazy=False)
            assert 30 <= obj.x <= config.screen.width - 30
            assert obj.y == -50

    def test_speeds_by_kind(self, spawner):
        for _ in range(200):
            egg = spawner.spawn_one(False, ItemKind.EGG)
            bad = spawner.spawn_one(False, ItemKind.BAD_EGG)
            gold = spawner.spawn_one(False, ItemKind.GOLD)
            bomb = spawner.spawn_one(False, ItemKind.BOMB)

            assert 4.0 <= egg.vertical_speed < 6.0
            assert 4.0 <= bad.vertical_speed < 6.0
            assert 4.0 <= gold.vertical_speed < 5.5
            assert bomb.vertical_speed == 5.0

    def test_rotation_speed_range(self, spawner):
        for _ in range(200):
            obj = spawner.spawn_one(False)
            assert -0.05 <= obj.rotation_speed < 0.05
            assert obj.rotation == 0.0

    def test_uids_unique(self, spawner):
        uids = [spawner.spawn_one(False).uid for _ in range(100)]
        assert len(set(uids)) == 100

    def test_same_seed_same_batches(self, config):
        """Two spawners with the same seed produce identical objects."""
        a = Spawner(ObjectWorld(config), RandomSource(7), config)
        b = Spawner(ObjectWorld(config), RandomSource(7), config)

        for _ in range(50):
            batch_a = a.try_spawn(30.0, 50.0, False, 30.0)
            batch_b = b.try_spawn(30.0, 50.0, False, 30.0)
            assert [(o.kind, o.x, o.vertical_speed) for o in batch_a] == \
                   [(o.kind, o.x, o.vertical_speed) for o in batch_b]


class TestKindDistribution:
    """Test kind selection thresholds."""

    def test_threshold_boundaries(self, config):
        thresholds = config.spawn.normal_thresholds

        assert kind_for_draw(0.0, thresholds) == ItemKind.BOMB
        assert kind_for_draw(0.1499, thresholds) == ItemKind.BOMB
        assert kind_for_draw(0.15, thresholds) == ItemKind.BAD_EGG
        assert kind_for_draw(0.30, thresholds) == ItemKind.EGG
        assert kind_for_draw(0.8999, thresholds) == ItemKind.EGG
        assert kind_for_draw(0.90, thresholds) == ItemKind.GOLD

    @pytest.mark.parametrize("crazy,expected", [
        (False, {ItemKind.BOMB: 0.15, ItemKind.BAD_EGG: 0.15,
                 ItemKind.EGG: 0.60, ItemKind.GOLD: 0.10}),
        (True, {ItemKind.BOMB: 0.30, ItemKind.BAD_EGG: 0.30,
                ItemKind.EGG: 0.30, ItemKind.GOLD: 0.10}),
    ])
    def test_frequencies(self, config, crazy, expected):
        """Observed kind frequencies over 100k draws match the weights."""
        thresholds = config.spawn.crazy_thresholds if crazy else config.spawn.normal_thresholds
        rng = random.Random(1234)
        n = 100_000

        counts = {kind: 0 for kind in ItemKind}
        for _ in range(n):
            counts[kind_for_draw(rng.random(), thresholds)] += 1

        for kind, weight in expected.items():
            assert counts[kind] / n == pytest.approx(weight, abs=0.01)
