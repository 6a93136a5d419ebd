"""
Item Catalog
============

Provides convenient access to falling item definitions loaded from config.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple

from egg_catcher.catch_core.config_loader import (
    GameConfig,
    ItemConfig,
    get_config
)


class ItemKind(enum.IntEnum):
    """Kinds of falling objects. Values double as observation IDs."""
    EGG = 0
    BAD_EGG = 1
    BOMB = 2
    GOLD = 3

    @property
    def config_name(self) -> str:
        return self.name.lower()


@dataclass
class ItemType:
    """
    Runtime representation of an item kind.

    Wraps ItemConfig with the kind enum and convenience properties.
    """
    kind: ItemKind
    config: ItemConfig

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def base_speed(self) -> float:
        return self.config.base_speed

    @property
    def speed_jitter(self) -> float:
        return self.config.speed_jitter

    @property
    def score(self) -> int:
        return self.config.score

    @property
    def label(self) -> str:
        return self.config.label

    @property
    def color(self) -> Tuple[int, int, int]:
        return self.config.color

    @property
    def sound(self) -> str:
        return self.config.sound

    @property
    def is_harmful(self) -> bool:
        """True if catching this item loses points."""
        return self.config.score < 0

    def __repr__(self) -> str:
        return f"ItemType({self.kind.name}: {self.score:+d})"


class ItemCatalog:
    """Collection of all item kinds, indexed by ItemKind."""

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize catalog from game config.

        Args:
            config: GameConfig instance. If None, loads from default location.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._types: Tuple[ItemType, ...] = tuple(
            ItemType(kind, config.get_item(kind.config_name)) for kind in ItemKind
        )

    def __len__(self) -> int:
        return len(self._types)

    def __getitem__(self, kind: ItemKind) -> ItemType:
        """Get item type by kind."""
        return self._types[int(kind)]

    def __iter__(self):
        return iter(self._types)

    @property
    def all_types(self) -> Tuple[ItemType, ...]:
        return self._types

    def get_by_name(self, name: str) -> Optional[ItemType]:
        """Get item type by config name (case-insensitive)."""
        name_lower = name.lower()
        for item_type in self._types:
            if item_type.name.lower() == name_lower:
                return item_type
        return None
