"""Validation and commit of player actions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mapwar.domain.errors import (
    NotOwner,
    PlayerAlreadyDead,
    TargetNotAdjacent,
    TargetNotFound,
    TerritoryEmpty,
    TerritoryNotFound,
)
from mapwar.domain.models import Attack, GameAction, PlayerToken, Resign, SetCommand, Territory

if TYPE_CHECKING:
    from mapwar.domain.game import GameState

logger = logging.getLogger(__name__)


def process_action(state: GameState, player_token: PlayerToken, action: GameAction) -> None:
    """Apply ``action`` on behalf of ``player_token``.

    Every check runs before anything is written, so a raised
    ``GameActionError`` leaves ``state`` exactly as it was.
    """

    player_index = state.player_index(player_token)
    player = state.player_states[player_index]
    if not player.is_alive:
        raise PlayerAlreadyDead(f"player {player_token!r} is no longer in the game")

    if isinstance(action, Resign):
        player.is_alive = False
        logger.info("player %s resigned", player_index)
        return
    if not isinstance(action, SetCommand):
        raise TypeError(f"unsupported action: {action!r}")

    territory_index = action.territory
    command = action.command
    territory = _lookup(state, territory_index, TerritoryNotFound, "territory")
    if territory.contents is None:
        raise TerritoryEmpty(f"territory {territory_index} is empty")
    if territory.contents.owner != player_index:
        raise NotOwner(f"player {player_token!r} does not own territory {territory_index}")
    if isinstance(command, Attack):
        _lookup(state, command.target, TargetNotFound, "target territory")
        if command.target not in territory.adjacent:
            raise TargetNotAdjacent(
                f"territory {command.target} is not adjacent to {territory_index}"
            )

    territory.command = command
    logger.debug(
        "player %s set territory %s command to %s", player_index, territory_index, command
    )


def _lookup(
    state: GameState,
    index: int,
    error: type[Exception],
    label: str,
) -> Territory:
    # Negative indices are out of range, not offsets from the end.
    if not 0 <= index < len(state.territories):
        raise error(f"{label} {index} not found")
    return state.territories[index]
