"""Enumerations shared by the mapwar domain."""

from __future__ import annotations

from enum import StrEnum


class TerritorySort(StrEnum):
    """Terrain kinds a territory can have."""

    LAND = "land"
    # Defenders on swamp lose their terrain bonus and take a penalty.
    SWAMP = "swamp"
    # Defenders on forest get a flat bonus; contents hidden except from neighbours.
    FOREST = "forest"
    # Units on towers see one territory further.
    TOWER = "tower"
    GOLD = "gold"
    LAB = "lab"


class RejectionReason(StrEnum):
    """Why an action was refused by the validator."""

    PLAYER_NOT_FOUND = "playerNotFound"
    PLAYER_ALREADY_DEAD = "playerAlreadyDead"
    TERRITORY_NOT_FOUND = "territoryNotFound"
    TERRITORY_EMPTY = "territoryEmpty"
    NOT_OWNER = "notOwner"
    TARGET_NOT_FOUND = "targetNotFound"
    TARGET_NOT_ADJACENT = "targetNotAdjacent"
