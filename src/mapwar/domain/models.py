"""Dataclasses describing every mapwar game entity.

Territories and players live in dense lists and refer to each other by index.
Indices are handed out once when a match is built and never reused, so plain
integers are safe handles for the lifetime of a ``GameState``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NewType

from mapwar.domain.enums import TerritorySort

# --- Strongly typed identifiers -------------------------------------------------

PlayerToken = NewType("PlayerToken", str)
PlayerIndex = NewType("PlayerIndex", int)
TerritoryIndex = NewType("TerritoryIndex", int)

RenderInfo = tuple[int, int]


# --- Commands ---------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Attack:
    """Send the garrison against (or into) an adjacent territory."""

    target: TerritoryIndex


@dataclass(frozen=True, slots=True)
class Fortify:
    """Hold position with a defensive bonus."""


@dataclass(frozen=True, slots=True)
class Grow:
    """Default standing order."""


Command = Attack | Fortify | Grow


# --- Player actions ----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SetCommand:
    """Replace the pending command of a territory the player owns."""

    territory: TerritoryIndex
    command: Command


@dataclass(frozen=True, slots=True)
class Resign:
    """Leave the match; the player's garrisons stay where they are."""


GameAction = SetCommand | Resign


# --- World model -------------------------------------------------------------------


@dataclass(slots=True)
class PlayerState:
    """Skill levels and liveness of one player."""

    token: PlayerToken
    is_alive: bool = True
    defense_level: int = 0
    attack_level: int = 0
    vision_level: int = 0
    growth_level: int = 0


@dataclass(frozen=True, slots=True)
class Garrison:
    """Units occupying a territory."""

    owner: PlayerIndex
    units: int


@dataclass(slots=True)
class Territory:
    """Node of the map graph."""

    sort: TerritorySort
    render_info: RenderInfo
    adjacent: list[TerritoryIndex] = field(default_factory=list)
    contents: Garrison | None = None
    command: Command = field(default_factory=Grow)

    def clear(self) -> None:
        """Remove the garrison and fall back to the default order."""

        self.contents = None
        self.command = Grow()


# --- Output ------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Death:
    """A garrison was wiped out."""

    render_info: RenderInfo
    amount: int


@dataclass(frozen=True, slots=True)
class Movement:
    """A garrison moved into an empty neighbour."""

    render_info_from: RenderInfo
    render_info_to: RenderInfo
    amount: int


AnimationEvent = Death | Movement
