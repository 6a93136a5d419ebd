"""
Tests for Gymnasium environment API.
"""

import pytest
import numpy as np

from egg_catcher.catch_core.config_loader import load_config
from egg_catcher.catch_core.env_gym import EggCatcherEnv


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def env():
    env = EggCatcherEnv()
    yield env
    env.close()


class TestEggCatcherEnv:
    """Test single environment API."""

    def test_reset_returns_obs_and_info(self, env):
        """Reset should return (observation, info) tuple."""
        result = env.reset(seed=42)

        assert isinstance(result, tuple)
        assert len(result) == 2

        obs, info = result
        assert isinstance(obs, dict)
        assert isinstance(info, dict)
        assert info["score"] == 0
        assert info["terminated_reason"] == ""

    def test_observation_structure(self, env, config):
        """Observation should have expected keys and shapes."""
        obs, _ = env.reset(seed=42)
        max_obj = config.observation.max_objects

        for key in ("basket_x", "basket_y", "score", "elapsed_seconds",
                    "remaining_seconds", "speed_multiplier", "spawn_interval",
                    "crazy_mode", "phase", "objects_count"):
            assert key in obs
            assert obs[key].shape == ()

        for key in ("obj_kind", "obj_x", "obj_y", "obj_vy", "obj_mask"):
            assert obs[key].shape == (max_obj,)

    def test_observation_in_space(self, env):
        obs, _ = env.reset(seed=1)
        assert env.observation_space.contains(obs)

        for _ in range(50):
            obs, _, terminated, _, _ = env.step(env.action_space.sample())
            assert env.observation_space.contains(obs)
            if terminated:
                break

    def test_step_returns_five_tuple(self, env):
        env.reset(seed=42)
        result = env.step(1)

        assert len(result) == 5
        obs, reward, terminated, truncated, info = result
        assert isinstance(reward, float)
        assert isinstance(terminated, bool)
        assert truncated is False
        assert "delta_score" in info

    def test_step_advances_frame_skip_frames(self, config):
        env = EggCatcherEnv(frame_skip=6)
        env.reset(seed=0)
        _, _, _, _, info = env.step(1)
        env.close()

        assert info["elapsed_seconds"] == pytest.approx(6 / config.timing.fps)

    def test_reward_is_score_delta(self, env):
        obs, _ = env.reset(seed=7)
        previous = int(obs["score"])

        for _ in range(400):
            obs, reward, terminated, _, info = env.step(1)
            assert reward == info["delta_score"]
            assert int(obs["score"]) - previous == reward
            previous = int(obs["score"])
            if terminated:
                break

    def test_actions_move_basket(self, env):
        obs, _ = env.reset(seed=3)
        start_x = float(obs["basket_x"])

        obs, *_ = env.step(2)
        assert float(obs["basket_x"]) > start_x

        obs, *_ = env.step(0)
        obs, *_ = env.step(0)
        assert float(obs["basket_x"]) < start_x

    def test_invalid_action_raises(self, env):
        env.reset(seed=42)
        with pytest.raises(ValueError):
            env.step(3)
        with pytest.raises(ValueError):
            env.step(-1)

    def test_numpy_action_accepted(self, env):
        env.reset(seed=42)
        env.step(np.array(2))
        env.step(np.array([0]))

    def test_episode_terminates(self, env):
        """Holding still ends the episode by death or time."""
        env.reset(seed=42)

        terminated = False
        steps = 0
        while not terminated:
            _, _, terminated, _, info = env.step(1)
            steps += 1
            assert steps <= 1800

        assert info["terminated_reason"] in ("death", "time")

    def test_determinism(self):
        """Same seed and actions give identical trajectories."""
        actions = [i % 3 for i in range(300)]
        trajectories = []

        for _ in range(2):
            env = EggCatcherEnv()
            obs, _ = env.reset(seed=123)
            scores = [int(obs["score"])]
            for action in actions:
                obs, _, terminated, _, _ = env.step(action)
                scores.append(int(obs["score"]))
                if terminated:
                    break
            trajectories.append((scores, obs["obj_x"].copy()))
            env.close()

        assert trajectories[0][0] == trajectories[1][0]
        np.testing.assert_array_equal(trajectories[0][1], trajectories[1][1])

    def test_invalid_frame_skip(self):
        with pytest.raises(ValueError):
            EggCatcherEnv(frame_skip=0)
