"""Resolution of one discrete step of combat and movement."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mapwar.domain.models import (
    AnimationEvent,
    Attack,
    Death,
    Fortify,
    Movement,
    Territory,
    TerritoryIndex,
)
from mapwar.domain.rules_config import DEFAULT_RULES, CombatRules, RulesConfig

if TYPE_CHECKING:
    from mapwar.domain.game import GameState
    from mapwar.utils.rng import Rng

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IncomingEntry:
    """Best movement candidate seen so far for one empty target."""

    units: int = -1
    source_territory: TerritoryIndex | None = None
    competitor_count: int = 0


def step_time(
    state: GameState,
    *,
    rules: RulesConfig = DEFAULT_RULES,
) -> list[AnimationEvent]:
    """Advance the world by one step and return what happened.

    Phases run in a fixed order over the whole map: defense tally, attack
    tally, stochastic combat, then contested movement into empty territories.
    The order of random draws is part of the replay contract.
    """

    half_defense_points = defense_tally(state, rules.combat)
    incoming_half_attack_points = attack_tally(state, half_defense_points)

    events: list[AnimationEvent] = []
    events.extend(
        resolve_combat(state, half_defense_points, incoming_half_attack_points, rules.combat)
    )
    events.extend(resolve_movement(state))

    logger.debug(
        "step resolved: %d deaths, %d movements",
        sum(isinstance(event, Death) for event in events),
        sum(isinstance(event, Movement) for event in events),
    )
    return events


def half_defense(state: GameState, territory: Territory, combat: CombatRules) -> int:
    """Half-defense score of a single territory before reinforcements."""

    if territory.contents is None:
        return 0
    owner, units = territory.contents.owner, territory.contents.units

    score = combat.defense_level_weight * state.player_states[owner].defense_level
    if isinstance(territory.command, Attack):
        score += combat.attacking_garrison_weight * units
    else:
        score += combat.holding_garrison_weight * units
    score += combat.terrain_modifiers.get(territory.sort, units)
    if isinstance(territory.command, Fortify):
        score += combat.fortify_bonus
    return score


def defense_tally(state: GameState, combat: CombatRules = DEFAULT_RULES.combat) -> list[int]:
    return [half_defense(state, terr, combat) for terr in state.territories]


def attack_tally(state: GameState, half_defense_points: list[int]) -> list[int]:
    """Accumulate attacks; attacks on one's own ground reinforce it instead.

    ``half_defense_points`` is updated in place with reinforcements.
    """

    incoming = [0] * len(state.territories)
    for terr in state.territories:
        if terr.contents is None or not isinstance(terr.command, Attack):
            continue
        target = terr.command.target
        target_contents = state.territories[target].contents
        if target_contents is not None and target_contents.owner == terr.contents.owner:
            half_defense_points[target] += terr.contents.units
        else:
            incoming[target] += terr.contents.units
    return incoming


def roll_half_points(
    rng: Rng,
    half_points: int,
    mask: int = DEFAULT_RULES.combat.roll_mask,
) -> int:
    """Sum one masked draw per half-point."""

    return sum(rng.generate() & mask for _ in range(half_points))


def resolve_combat(
    state: GameState,
    half_defense_points: list[int],
    incoming_half_attack_points: list[int],
    combat: CombatRules = DEFAULT_RULES.combat,
) -> list[Death]:
    """Roll every territory in index order, defense draws before attack draws."""

    deaths: list[Death] = []
    for index, terr in enumerate(state.territories):
        defense_sum = roll_half_points(state.rng, half_defense_points[index], combat.roll_mask)
        attack_sum = roll_half_points(
            state.rng, incoming_half_attack_points[index], combat.roll_mask
        )
        # An empty territory has no units to lose, so it reports no Death.
        if attack_sum > defense_sum and terr.contents is not None:
            lost = terr.contents.units
            terr.clear()
            deaths.append(Death(render_info=terr.render_info, amount=lost))
    return deaths


def resolve_movement(state: GameState) -> list[Movement]:
    """Move the strongest attacker into each empty target.

    Ties are broken by reservoir sampling: the n-th equal candidate replaces
    the incumbent with probability 1/n, which picks uniformly among all ties.
    """

    best_incoming = [IncomingEntry() for _ in state.territories]
    for index, terr in enumerate(state.territories):
        if terr.contents is None or not isinstance(terr.command, Attack):
            continue
        target = terr.command.target
        if state.territories[target].contents is not None:
            continue

        entry = best_incoming[target]
        units = terr.contents.units
        if units > entry.units:
            entry.competitor_count = 1
            is_new_best = True
        elif units == entry.units:
            entry.competitor_count += 1
            is_new_best = state.rng.generate() % entry.competitor_count == 0
        else:
            is_new_best = False

        if is_new_best:
            entry.units = units
            entry.source_territory = TerritoryIndex(index)

    movements: list[Movement] = []
    for target_index, entry in enumerate(best_incoming):
        if entry.source_territory is None:
            continue
        source = state.territories[entry.source_territory]
        target = state.territories[target_index]
        contents = source.contents
        if contents is None:
            raise RuntimeError(f"movement source {entry.source_territory} emptied mid-step")
        target.contents = contents
        source.clear()
        movements.append(
            Movement(
                render_info_from=source.render_info,
                render_info_to=target.render_info,
                amount=contents.units,
            )
        )
    return movements
