"""Domain model and rules for mapwar matches.

This package hosts everything the simulation core needs and nothing else:

* Dataclasses describing the world (see :mod:`models`).
* Enumerations shared with the wire contract (see :mod:`enums`).
* Rule constants (see :mod:`rules_config`).
* The command validator (:mod:`actions`) and the turn resolver (:mod:`tick`).

Nothing in here performs I/O; transports drive a :class:`game.GameState`
through its two mutating entry points.
"""

from . import (
    actions,
    enums,
    errors,
    game,
    layout,
    models,
    rules_config,
    tick,
    visibility,
)

__all__ = [
    "actions",
    "enums",
    "errors",
    "game",
    "layout",
    "models",
    "rules_config",
    "tick",
    "visibility",
]
