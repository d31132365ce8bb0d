"""Construction of a ``GameState`` from a map layout and a player roster."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from mapwar.domain.enums import TerritorySort
from mapwar.domain.errors import LayoutError
from mapwar.domain.game import GameState
from mapwar.domain.models import (
    Garrison,
    PlayerIndex,
    PlayerState,
    PlayerToken,
    RenderInfo,
    Territory,
    TerritoryIndex,
)
from mapwar.domain.rules_config import DEFAULT_RULES, RulesConfig
from mapwar.utils.rng import Rng

logger = logging.getLogger(__name__)

RENDER_SPACING = 64

# Relative odds of each terrain on generated maps.
TERRAIN_WEIGHTS: tuple[tuple[TerritorySort, int], ...] = (
    (TerritorySort.LAND, 6),
    (TerritorySort.SWAMP, 1),
    (TerritorySort.FOREST, 2),
    (TerritorySort.TOWER, 1),
    (TerritorySort.GOLD, 1),
    (TerritorySort.LAB, 1),
)


@dataclass(slots=True)
class TerritorySpec:
    """Static description of one territory at match start."""

    sort: TerritorySort
    render_info: RenderInfo
    adjacent: Sequence[int] = ()
    owner: int | None = None
    units: int = 0


@dataclass(slots=True)
class PlayerSpec:
    """Roster entry for one player."""

    token: str
    defense_level: int = 0
    attack_level: int = 0
    vision_level: int = 0
    growth_level: int = 0


def build_game(
    territories: Sequence[TerritorySpec],
    players: Sequence[PlayerSpec],
    *,
    seed: int | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> GameState:
    """Create a validated ``GameState``.

    ``seed=None`` seeds the random source from live entropy.

    Raises:
        LayoutError: If the roster or map breaks a world invariant
    """
    _validate_roster(players)
    _validate_territories(territories, len(players))

    state = GameState.new(seed, rules=rules)
    for index, spec in enumerate(players):
        token = PlayerToken(spec.token)
        state.player_states.append(
            PlayerState(
                token=token,
                defense_level=spec.defense_level,
                attack_level=spec.attack_level,
                vision_level=spec.vision_level,
                growth_level=spec.growth_level,
            )
        )
        state.player_indices_by_token[token] = PlayerIndex(index)

    for spec in territories:
        contents = None
        if spec.owner is not None:
            contents = Garrison(owner=PlayerIndex(spec.owner), units=spec.units)
        state.territories.append(
            Territory(
                sort=spec.sort,
                render_info=spec.render_info,
                adjacent=[TerritoryIndex(n) for n in spec.adjacent],
                contents=contents,
            )
        )

    logger.debug(
        "built game with %d territories and %d players",
        len(state.territories),
        len(state.player_states),
    )
    return state


def _validate_roster(players: Sequence[PlayerSpec]) -> None:
    seen: set[str] = set()
    for spec in players:
        if spec.token in seen:
            raise LayoutError(f"duplicate player token {spec.token!r}")
        seen.add(spec.token)


def _validate_territories(territories: Sequence[TerritorySpec], player_count: int) -> None:
    count = len(territories)
    for index, spec in enumerate(territories):
        for neighbour in spec.adjacent:
            if not 0 <= neighbour < count:
                raise LayoutError(f"territory {index} lists unknown neighbour {neighbour}")
            if neighbour == index:
                raise LayoutError(f"territory {index} is adjacent to itself")
            if index not in territories[neighbour].adjacent:
                raise LayoutError(f"adjacency {index}->{neighbour} is not symmetric")
        if spec.owner is not None:
            if not 0 <= spec.owner < player_count:
                raise LayoutError(f"territory {index} owned by unknown player {spec.owner}")
            if spec.units < 0:
                raise LayoutError(f"territory {index} has negative units ({spec.units})")


def generate_grid_layout(
    width: int,
    height: int,
    player_count: int,
    *,
    starting_units: int = 10,
    seed: int = 0,
) -> list[TerritorySpec]:
    """Generate a rectangular map with four-neighbour adjacency.

    Terrain is drawn deterministically from ``seed``.  Starting garrisons are
    spread evenly over the cells in row-major order and always stand on land.

    Raises:
        LayoutError: If the grid cannot seat every player
    """
    if width <= 0 or height <= 0:
        raise LayoutError(f"grid must be at least 1x1, got {width}x{height}")
    cells = width * height
    if player_count > cells:
        raise LayoutError(f"{player_count} players do not fit on {cells} territories")

    rng = Rng(seed)
    total_weight = sum(weight for _, weight in TERRAIN_WEIGHTS)
    starts = {(i * cells) // player_count: i for i in range(player_count)}

    specs: list[TerritorySpec] = []
    for y in range(height):
        for x in range(width):
            index = y * width + x
            adjacent = []
            if y > 0:
                adjacent.append(index - width)
            if x > 0:
                adjacent.append(index - 1)
            if x < width - 1:
                adjacent.append(index + 1)
            if y < height - 1:
                adjacent.append(index + width)

            sort = _pick_terrain(rng.generate() % total_weight)
            owner = starts.get(index)
            if owner is not None:
                sort = TerritorySort.LAND
            specs.append(
                TerritorySpec(
                    sort=sort,
                    render_info=(x * RENDER_SPACING, y * RENDER_SPACING),
                    adjacent=adjacent,
                    owner=owner,
                    units=starting_units if owner is not None else 0,
                )
            )
    return specs


def _pick_terrain(roll: int) -> TerritorySort:
    for sort, weight in TERRAIN_WEIGHTS:
        if roll < weight:
            return sort
        roll -= weight
    return TerritorySort.LAND
