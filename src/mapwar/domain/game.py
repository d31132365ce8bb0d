"""The ``GameState`` aggregate for a single running match."""

from __future__ import annotations

from dataclasses import dataclass, field

from mapwar.domain import actions, tick
from mapwar.domain.errors import PlayerNotFound
from mapwar.domain.models import (
    AnimationEvent,
    GameAction,
    PlayerIndex,
    PlayerState,
    PlayerToken,
    Territory,
)
from mapwar.domain.rules_config import DEFAULT_RULES, RulesConfig
from mapwar.utils.rng import Rng


@dataclass(slots=True)
class GameState:
    """Canonical world of one match.

    Owns its random source exclusively.  All mutation goes through
    :meth:`process_action` and :meth:`step_time`; callers serialise those
    calls per instance.
    """

    rng: Rng
    territories: list[Territory] = field(default_factory=list)
    player_states: list[PlayerState] = field(default_factory=list)
    player_indices_by_token: dict[PlayerToken, PlayerIndex] = field(default_factory=dict)
    rules: RulesConfig = DEFAULT_RULES
    steps_resolved: int = 0

    @classmethod
    def new(cls, seed: int | None = None, *, rules: RulesConfig = DEFAULT_RULES) -> GameState:
        """Create an empty world; ``seed=None`` seeds from live entropy."""

        rng = Rng.from_entropy() if seed is None else Rng(seed)
        return cls(rng=rng, rules=rules)

    def player_index(self, token: PlayerToken) -> PlayerIndex:
        try:
            return self.player_indices_by_token[token]
        except KeyError:
            raise PlayerNotFound(f"player {token!r} not found") from None

    def process_action(self, player_token: PlayerToken, action: GameAction) -> None:
        """Validate ``action`` and commit it, or raise ``GameActionError``."""

        actions.process_action(self, player_token, action)

    def step_time(self) -> list[AnimationEvent]:
        """Resolve one step of combat and movement."""

        events = tick.step_time(self, rules=self.rules)
        self.steps_resolved += 1
        return events

    def alive_players(self) -> list[PlayerIndex]:
        return [
            PlayerIndex(index)
            for index, player in enumerate(self.player_states)
            if player.is_alive
        ]

    def territories_owned_by(self, player: PlayerIndex) -> list[int]:
        return [
            index
            for index, terr in enumerate(self.territories)
            if terr.contents is not None and terr.contents.owner == player
        ]

    def winner(self) -> PlayerIndex | None:
        """Return the last living player still holding ground, if decided.

        A player counts as out once resigned or once they hold no territory.
        """

        if len(self.player_states) < 2:
            return None
        contenders = [
            index for index in self.alive_players() if self.territories_owned_by(index)
        ]
        if len(contenders) == 1:
            return contenders[0]
        return None
