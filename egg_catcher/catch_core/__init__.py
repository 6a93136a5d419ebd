"""
Catch Core - The heart of the game.

This module provides the frame-driven game simulation, the Gymnasium
environment wrapper, and all supporting systems (clock, difficulty,
spawning, catching, scoring, RNG).

Main exports:
- CoreGame: Frame-driven game simulation
- EggCatcherEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
- Presenter: Interface for render/audio collaborators
"""

from egg_catcher.catch_core.config_loader import ConfigError, GameConfig, load_config
from egg_catcher.catch_core.item_catalog import ItemKind, ItemCatalog
from egg_catcher.catch_core.clock import GameClock, Phase
from egg_catcher.catch_core.difficulty import DifficultyScheduler, DifficultyState
from egg_catcher.catch_core.collaborators import Presenter, SafePresenter, SoundGate
from egg_catcher.catch_core.ticker import Ticker
from egg_catcher.catch_core.game import CoreGame, FrameResult, GameSession
from egg_catcher.catch_core.env_gym import EggCatcherEnv

__all__ = [
    "ConfigError",
    "GameConfig",
    "load_config",
    "ItemKind",
    "ItemCatalog",
    "GameClock",
    "Phase",
    "DifficultyScheduler",
    "DifficultyState",
    "Presenter",
    "SafePresenter",
    "SoundGate",
    "Ticker",
    "CoreGame",
    "FrameResult",
    "GameSession",
    "EggCatcherEnv",
]
