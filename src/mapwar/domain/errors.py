"""Exceptions raised by the mapwar domain."""

from __future__ import annotations

from typing import ClassVar

from mapwar.domain.enums import RejectionReason


class GameActionError(ValueError):
    """Raised when a player action fails validation.

    The world is never modified when this is raised.
    """

    reason: ClassVar[RejectionReason]


class PlayerNotFound(GameActionError):
    reason = RejectionReason.PLAYER_NOT_FOUND


class PlayerAlreadyDead(GameActionError):
    reason = RejectionReason.PLAYER_ALREADY_DEAD


class TerritoryNotFound(GameActionError):
    reason = RejectionReason.TERRITORY_NOT_FOUND


class TerritoryEmpty(GameActionError):
    reason = RejectionReason.TERRITORY_EMPTY


class NotOwner(GameActionError):
    reason = RejectionReason.NOT_OWNER


class TargetNotFound(GameActionError):
    reason = RejectionReason.TARGET_NOT_FOUND


class TargetNotAdjacent(GameActionError):
    reason = RejectionReason.TARGET_NOT_ADJACENT


class LayoutError(ValueError):
    """Raised when a map layout or roster breaks a world invariant."""
