"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml


ITEM_KINDS = ("egg", "bad_egg", "bomb", "gold")

# Hard lower bound on frames between spawn batches
SPAWN_INTERVAL_FLOOR = 10


class ConfigError(ValueError):
    """Raised when configuration values would produce an undefined game."""


@dataclass(frozen=True)
class ScreenConfig:
    """Playfield size in pixels."""
    width: int
    height: int


@dataclass(frozen=True)
class TimingConfig:
    """Session clock parameters."""
    fps: int                # Nominal frames per second for delta conversion
    game_duration: float    # Session length in seconds
    easy_phase: float       # Seconds of reduced difficulty
    crazy_mode_time: float  # Crazy mode covers the final N seconds

    @property
    def crazy_start(self) -> float:
        """Elapsed seconds at which crazy mode begins."""
        return self.game_duration - self.crazy_mode_time


@dataclass(frozen=True)
class DifficultyConfig:
    """Speed and spawn-interval curve parameters."""
    base_spawn_interval: float
    easy_speed_multiplier: float
    easy_spawn_factor: float
    max_speed_multiplier: float
    min_spawn_fraction: float
    min_spawn_interval: float
    crazy_speed_multiplier: float
    crazy_min_spawn_interval: float


@dataclass(frozen=True)
class SpawnConfig:
    """Spawn batch and placement parameters."""
    easy_count: int
    ramp_count: int
    crazy_count: int
    margin: float
    start_y: float
    rotation_speed_range: float
    normal_thresholds: Tuple[float, float, float]
    crazy_thresholds: Tuple[float, float, float]


@dataclass(frozen=True)
class ItemConfig:
    """Configuration for a single falling item kind."""
    name: str
    base_speed: float
    speed_jitter: float
    score: int
    label: str
    color: Tuple[int, int, int]
    sound: str


@dataclass(frozen=True)
class BasketConfig:
    """Basket geometry, movement and catch band."""
    width: float
    bottom_offset: float
    speed: float
    tilt: float
    tilt_easing: float
    catch_band_above: float
    catch_band_below: float
    catch_slack: float


@dataclass(frozen=True)
class CrazyConfig:
    """Per-frame jitter amplitudes applied in crazy mode."""
    jitter_x: float
    jitter_y: float
    jitter_rotation: float
    edge_clamp: float


@dataclass(frozen=True)
class RulesConfig:
    """Removal and termination thresholds."""
    floor_exit_margin: float
    death_score: int


@dataclass(frozen=True)
class AudioConfig:
    """Sound request throttling."""
    bomb_fall_cooldown_ms: float
    crazy_bomb_fall_cooldown_ms: float
    max_concurrent: int
    death_sound_delay_ms: float = 1000.0


@dataclass(frozen=True)
class ObservationConfig:
    """Observation space parameters."""
    max_objects: int


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    screen: ScreenConfig
    timing: TimingConfig
    difficulty: DifficultyConfig
    spawn: SpawnConfig
    items: Tuple[ItemConfig, ...]
    basket: BasketConfig
    crazy: CrazyConfig
    rules: RulesConfig
    audio: AudioConfig
    observation: ObservationConfig

    def get_item(self, name: str) -> ItemConfig:
        """Get item config by kind name."""
        for item in self.items:
            if item.name == name:
                return item
        raise ValueError(f"Invalid item kind: {name}")


def _parse_color(color_data: List) -> Tuple[int, int, int]:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ConfigError(f"Color must have 3 values [R, G, B], got {color_data}")
    return (int(color_data[0]), int(color_data[1]), int(color_data[2]))


def _parse_thresholds(data: List, name: str) -> Tuple[float, float, float]:
    if len(data) != 3:
        raise ConfigError(f"{name} must have 3 values [bomb, bad_egg, egg], got {data}")
    return (float(data[0]), float(data[1]), float(data[2]))


def _parse_item(name: str, item_data: dict) -> ItemConfig:
    """Parse a single item configuration from YAML."""
    return ItemConfig(
        name=name,
        base_speed=float(item_data["base_speed"]),
        speed_jitter=float(item_data.get("speed_jitter", 0.0)),
        score=int(item_data["score"]),
        label=str(item_data.get("label", "")),
        color=_parse_color(item_data["color"]),
        sound=str(item_data.get("sound", "")),
    )


def validate_config(config: GameConfig) -> None:
    """
    Validate configuration consistency.

    Raises:
        ConfigError: If any value would produce an undefined difficulty curve.
    """
    timing = config.timing
    if timing.fps <= 0:
        raise ConfigError(f"timing.fps must be positive, got {timing.fps}")
    if timing.game_duration <= 0:
        raise ConfigError(f"timing.game_duration must be positive, got {timing.game_duration}")
    if timing.easy_phase < 0 or timing.easy_phase >= timing.game_duration:
        raise ConfigError(
            f"timing.easy_phase ({timing.easy_phase}) must be in "
            f"[0, game_duration={timing.game_duration})"
        )
    if timing.crazy_mode_time < 0 or timing.crazy_mode_time > timing.game_duration:
        raise ConfigError(
            f"timing.crazy_mode_time ({timing.crazy_mode_time}) must be in "
            f"[0, game_duration={timing.game_duration}]"
        )

    diff = config.difficulty
    if diff.base_spawn_interval <= 0:
        raise ConfigError(f"difficulty.base_spawn_interval must be positive, got {diff.base_spawn_interval}")
    if diff.min_spawn_interval < SPAWN_INTERVAL_FLOOR:
        raise ConfigError(
            f"difficulty.min_spawn_interval must be >= {SPAWN_INTERVAL_FLOOR}, "
            f"got {diff.min_spawn_interval}"
        )
    if diff.crazy_min_spawn_interval < diff.min_spawn_interval:
        raise ConfigError(
            f"difficulty.crazy_min_spawn_interval ({diff.crazy_min_spawn_interval}) must not be "
            f"below min_spawn_interval ({diff.min_spawn_interval})"
        )
    if not 0 < diff.min_spawn_fraction <= 1:
        raise ConfigError(f"difficulty.min_spawn_fraction must be in (0, 1], got {diff.min_spawn_fraction}")
    if diff.easy_spawn_factor <= 0:
        raise ConfigError(f"difficulty.easy_spawn_factor must be positive, got {diff.easy_spawn_factor}")
    if diff.easy_speed_multiplier <= 0 or diff.crazy_speed_multiplier <= 0:
        raise ConfigError("speed multipliers must be positive")
    if diff.max_speed_multiplier < diff.easy_speed_multiplier:
        raise ConfigError(
            f"difficulty.max_speed_multiplier ({diff.max_speed_multiplier}) must not be "
            f"below easy_speed_multiplier ({diff.easy_speed_multiplier})"
        )

    spawn = config.spawn
    for name in ("easy_count", "ramp_count", "crazy_count"):
        if getattr(spawn, name) < 0:
            raise ConfigError(f"spawn.{name} must not be negative")
    if spawn.margin < 0 or 2 * spawn.margin > config.screen.width:
        raise ConfigError(f"spawn.margin ({spawn.margin}) does not fit the screen width")
    for name in ("normal_thresholds", "crazy_thresholds"):
        values = getattr(spawn, name)
        bounded = [0.0, *values, 1.0]
        if any(b < a for a, b in zip(bounded, bounded[1:])):
            raise ConfigError(f"spawn.{name} must be non-decreasing within [0, 1], got {values}")

    if config.audio.death_sound_delay_ms < 0:
        raise ConfigError(f"audio.death_sound_delay_ms must not be negative, got {config.audio.death_sound_delay_ms}")

    if config.screen.width <= 0 or config.screen.height <= 0:
        raise ConfigError("screen dimensions must be positive")
    if config.basket.width <= 0 or config.basket.width > config.screen.width:
        raise ConfigError(f"basket.width ({config.basket.width}) does not fit the screen width")

    names = tuple(item.name for item in config.items)
    if sorted(names) != sorted(ITEM_KINDS):
        raise ConfigError(f"items must define exactly {ITEM_KINDS}, got {names}")

    if config.observation.max_objects <= 0:
        raise ConfigError("observation.max_objects must be positive")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    return config_from_dict(raw)


def config_from_dict(raw: Dict) -> GameConfig:
    """Build and validate a GameConfig from an already-parsed mapping."""
    screen_data = raw["screen"]
    screen = ScreenConfig(
        width=int(screen_data["width"]),
        height=int(screen_data["height"])
    )

    timing_data = raw["timing"]
    timing = TimingConfig(
        fps=int(timing_data.get("fps", 60)),
        game_duration=float(timing_data["game_duration"]),
        easy_phase=float(timing_data["easy_phase"]),
        crazy_mode_time=float(timing_data["crazy_mode_time"])
    )

    diff_data = raw["difficulty"]
    difficulty = DifficultyConfig(
        base_spawn_interval=float(diff_data["base_spawn_interval"]),
        easy_speed_multiplier=float(diff_data.get("easy_speed_multiplier", 0.85)),
        easy_spawn_factor=float(diff_data.get("easy_spawn_factor", 1.2)),
        max_speed_multiplier=float(diff_data.get("max_speed_multiplier", 3.0)),
        min_spawn_fraction=float(diff_data.get("min_spawn_fraction", 0.4)),
        min_spawn_interval=float(diff_data.get("min_spawn_interval", 10)),
        crazy_speed_multiplier=float(diff_data.get("crazy_speed_multiplier", 2.0)),
        crazy_min_spawn_interval=float(diff_data.get("crazy_min_spawn_interval", 15))
    )

    spawn_data = raw["spawn"]
    spawn = SpawnConfig(
        easy_count=int(spawn_data["easy_count"]),
        ramp_count=int(spawn_data["ramp_count"]),
        crazy_count=int(spawn_data["crazy_count"]),
        margin=float(spawn_data.get("margin", 30)),
        start_y=float(spawn_data.get("start_y", -50)),
        rotation_speed_range=float(spawn_data.get("rotation_speed_range", 0.1)),
        normal_thresholds=_parse_thresholds(spawn_data["normal_thresholds"], "spawn.normal_thresholds"),
        crazy_thresholds=_parse_thresholds(spawn_data["crazy_thresholds"], "spawn.crazy_thresholds")
    )

    items = tuple(
        _parse_item(name, item_data)
        for name, item_data in raw["items"].items()
    )

    basket_data = raw["basket"]
    basket = BasketConfig(
        width=float(basket_data["width"]),
        bottom_offset=float(basket_data.get("bottom_offset", 80)),
        speed=float(basket_data.get("speed", 8)),
        tilt=float(basket_data.get("tilt", 0.2)),
        tilt_easing=float(basket_data.get("tilt_easing", 0.1)),
        catch_band_above=float(basket_data.get("catch_band_above", 60)),
        catch_band_below=float(basket_data.get("catch_band_below", 5)),
        catch_slack=float(basket_data.get("catch_slack", 10))
    )

    crazy_data = raw.get("crazy", {})
    crazy = CrazyConfig(
        jitter_x=float(crazy_data.get("jitter_x", 28)),
        jitter_y=float(crazy_data.get("jitter_y", 10)),
        jitter_rotation=float(crazy_data.get("jitter_rotation", 0.6)),
        edge_clamp=float(crazy_data.get("edge_clamp", 20))
    )

    rules_data = raw.get("rules", {})
    rules = RulesConfig(
        floor_exit_margin=float(rules_data.get("floor_exit_margin", 20)),
        death_score=int(rules_data.get("death_score", -100))
    )

    audio_data = raw.get("audio", {})
    audio = AudioConfig(
        bomb_fall_cooldown_ms=float(audio_data.get("bomb_fall_cooldown_ms", 100)),
        crazy_bomb_fall_cooldown_ms=float(audio_data.get("crazy_bomb_fall_cooldown_ms", 500)),
        max_concurrent=int(audio_data.get("max_concurrent", 8)),
        death_sound_delay_ms=float(audio_data.get("death_sound_delay_ms", 1000))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_objects=int(obs_data.get("max_objects", 64))
    )

    config = GameConfig(
        screen=screen,
        timing=timing,
        difficulty=difficulty,
        spawn=spawn,
        items=items,
        basket=basket,
        crazy=crazy,
        rules=rules,
        audio=audio,
        observation=observation
    )

    validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
