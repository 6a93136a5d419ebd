"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the Egg Catcher game.
One step holds a basket direction for frame_skip frames.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from egg_catcher.catch_core.config_loader import GameConfig, load_config
from egg_catcher.catch_core.game import CoreGame
from egg_catcher.catch_core.item_catalog import ItemKind
from egg_catcher.catch_core.state_snapshot import GameSnapshot

# Discrete action -> basket direction
ACTION_DIRECTIONS = (-1, 0, 1)


class EggCatcherEnv(gym.Env):
    """
    Egg catching game as a Gymnasium environment.

    Action Space:
        Discrete(3): 0 = move left, 1 = stay, 2 = move right.

    Observation Space:
        Dict containing scalars and padded falling-object arrays.

    Reward:
        Score delta over the step.

    Info:
        Contains score, elapsed/remaining time, phase, catch counts,
        terminated_reason, etc.
    """

    metadata = {
        "render_modes": ["human", "rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        frame_skip: int = 4,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
        debug: bool = False,
    ):
        """
        Initialize environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "human" for window, "rgb_array" for numpy, None for headless.
            frame_skip: Frames simulated per step (each with delta 1.0).
            image_width: Override rgb_array width.
            image_height: Override rgb_array height.
            debug: If True, enables verbose debug output for agent development.
        """
        super().__init__()

        if frame_skip < 1:
            raise ValueError(f"frame_skip must be >= 1, got {frame_skip}")

        # Load config
        self._config = load_config(config_path)

        self.render_mode = render_mode
        self._frame_skip = frame_skip
        self._debug = debug

        self._img_width = image_width or self._config.screen.width
        self._img_height = image_height or self._config.screen.height

        # Renderer doubles as the presenter, so it must exist before the game
        self._renderer = None
        if render_mode in ("human", "rgb_array"):
            self._init_renderer()

        self._game = CoreGame(config=self._config, presenter=self._renderer)

        self.action_space = spaces.Discrete(len(ACTION_DIRECTIONS))
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] EggCatcherEnv initialized")
            print(f"[DEBUG]   Screen: {self._config.screen.width}x{self._config.screen.height}")
            print(f"[DEBUG]   Duration: {self._config.timing.game_duration}s, frame_skip={frame_skip}")
            print(f"[DEBUG]   Max objects: {self._config.observation.max_objects}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_obj = self._config.observation.max_objects
        screen = self._config.screen
        duration = self._config.timing.game_duration
        big = np.iinfo(np.int64).max

        return spaces.Dict({
            # Core state
            "basket_x": spaces.Box(low=0, high=screen.width, shape=(), dtype=np.float32),
            "basket_y": spaces.Box(low=0, high=screen.height, shape=(), dtype=np.float32),
            "score": spaces.Box(low=-big, high=big, shape=(), dtype=np.int64),
            "elapsed_seconds": spaces.Box(low=0, high=duration, shape=(), dtype=np.float32),
            "remaining_seconds": spaces.Box(low=0, high=duration, shape=(), dtype=np.float32),
            "speed_multiplier": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "spawn_interval": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "crazy_mode": spaces.Box(low=0, high=1, shape=(), dtype=np.int8),
            "phase": spaces.Box(low=0, high=2, shape=(), dtype=np.int8),
            "objects_count": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),

            # Board info
            "screen_width": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "screen_height": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),

            # Object arrays
            "obj_kind": spaces.Box(low=-1, high=len(ItemKind) - 1, shape=(max_obj,), dtype=np.int8),
            "obj_x": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_y": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_vy": spaces.Box(low=-np.inf, high=np.inf, shape=(max_obj,), dtype=np.float32),
            "obj_mask": spaces.MultiBinary(max_obj),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        if self._renderer is not None:
            self._renderer.reset_effects()

        snapshot = self._game.start(seed=seed)

        obs = self._snapshot_to_obs(snapshot)
        info = self._game.get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step.

        Args:
            action: 0 (left), 1 (stay) or 2 (right).

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item() if action.ndim == 0 else action[0])
        action = int(action)
        if not 0 <= action < len(ACTION_DIRECTIONS):
            raise ValueError(f"Invalid action {action}; expected 0, 1 or 2")

        self._game.on_basket_move(ACTION_DIRECTIONS[action])

        delta_score = 0
        caught = 0
        for _ in range(self._frame_skip):
            frame = self._game.tick(1.0)
            delta_score += frame.delta_score
            caught += len(frame.catches)
            if frame.terminated:
                break

        terminated = self._game.is_over
        obs = self._snapshot_to_obs(self._game.build_snapshot())

        info = self._game.get_info()
        info["delta_score"] = delta_score
        info["caught_this_step"] = caught

        if self._debug:
            print(f"[DEBUG] Step: action={action}, delta_score={delta_score}, "
                  f"objects={int(obs['objects_count'])}, t={info['elapsed_seconds']:.2f}")
            if terminated:
                print(f"[DEBUG] TERMINATED: {info.get('terminated_reason', 'unknown')}")

        if self.render_mode == "human":
            self.render()

        return obs, float(delta_score), terminated, False, info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        return snapshot.to_obs_dict()

    def _init_renderer(self) -> None:
        from egg_catcher.catch_core.render_full_pygame import PygameRenderer
        self._renderer = PygameRenderer(self._config)

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self._renderer is None:
            return None

        render_data = self._game.get_render_data()
        if self.render_mode == "rgb_array":
            return self._renderer.render(render_data, self._img_width, self._img_height)

        if self.render_mode == "human":
            self._renderer.render_to_screen(render_data)
            self._renderer.handle_events()

        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
