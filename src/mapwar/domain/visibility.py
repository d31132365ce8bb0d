"""Visibility domain logic for mapwar.

Pure functions computing which territories a player can currently see.
Sight spreads outward over the adjacency graph from every territory the
player occupies.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from mapwar.domain.enums import TerritorySort
from mapwar.domain.models import PlayerIndex
from mapwar.domain.rules_config import DEFAULT_RULES, RulesConfig

if TYPE_CHECKING:
    from mapwar.domain.game import GameState


def vision_radius(
    state: GameState,
    player_index: PlayerIndex,
    territory_index: int,
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    """Calculate how many hops a garrison can see.

    Base: 1 (the territory itself plus its neighbours).
    Vision level: +1 per level.
    Tower: +1.

    Args:
        state: Current world
        player_index: Owner of the garrison
        territory_index: Where the garrison stands
        rules: Rule constants

    Returns:
        Radius in graph hops (never negative)
    """
    radius = rules.vision.base_radius + state.player_states[player_index].vision_level
    if state.territories[territory_index].sort == TerritorySort.TOWER:
        radius += rules.vision.tower_bonus
    return max(0, radius)


def visible_territories(
    state: GameState,
    player_index: PlayerIndex,
    rules: RulesConfig = DEFAULT_RULES,
) -> set[int]:
    """Get every territory index ``player_index`` can see.

    Forests are only visible to a player occupying them or a neighbour of
    them.  Players who are no longer alive see nothing.

    Args:
        state: Current world
        player_index: Viewing player
        rules: Rule constants

    Returns:
        Set of territory indices
    """
    if not state.player_states[player_index].is_alive:
        return set()

    occupied = set(state.territories_owned_by(player_index))
    near: set[int] = set(occupied)
    for index in occupied:
        near.update(state.territories[index].adjacent)

    visible: set[int] = set()
    for origin in occupied:
        radius = vision_radius(state, player_index, origin, rules)
        visible.update(_within(state, origin, radius))

    return {
        index
        for index in visible
        if state.territories[index].sort != TerritorySort.FOREST or index in near
    }


def _within(state: GameState, origin: int, radius: int) -> set[int]:
    seen = {origin}
    frontier = deque([(origin, 0)])
    while frontier:
        index, distance = frontier.popleft()
        if distance == radius:
            continue
        for neighbour in state.territories[index].adjacent:
            if neighbour not in seen:
                seen.add(neighbour)
                frontier.append((neighbour, distance + 1))
    return seen
