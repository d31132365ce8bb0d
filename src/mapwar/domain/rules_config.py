"""Declarative rule configuration for the mapwar domain."""

from __future__ import annotations

from dataclasses import dataclass, field

from mapwar.domain.enums import TerritorySort


@dataclass(frozen=True, slots=True)
class CombatRules:
    """Weights used to turn garrisons and orders into half-points."""

    defense_level_weight: int = 2
    attacking_garrison_weight: int = 1
    holding_garrison_weight: int = 2
    # Terrains not listed here add the garrison size once more.
    terrain_modifiers: dict[TerritorySort, int] = field(
        default_factory=lambda: {
            TerritorySort.SWAMP: -2,
            TerritorySort.FOREST: 2,
        }
    )
    fortify_bonus: int = 2
    roll_mask: int = 0x3  # each half-point rolls 0-3


@dataclass(frozen=True, slots=True)
class VisionRules:
    """Sight radii over the territory graph."""

    base_radius: int = 1
    tower_bonus: int = 1


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Aggregate of every rule section."""

    combat: CombatRules = field(default_factory=CombatRules)
    vision: VisionRules = field(default_factory=VisionRules)


DEFAULT_RULES = RulesConfig()
