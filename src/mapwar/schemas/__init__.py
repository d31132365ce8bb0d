from .action import (
    ActionPayload,
    AttackCommand,
    CommandPayload,
    FortifyCommand,
    GrowCommand,
    ResignAction,
    SetCommandAction,
    command_from_domain,
)
from .event import DeathEvent, EventPayload, MovementEvent, event_from_domain
from .match import (
    ActionRejected,
    ActionSubmit,
    MatchCreate,
    MatchRead,
    PlayerRead,
    ScheduleUpdate,
    StepResult,
    TerritoryRead,
)

__all__ = [
    "ActionPayload",
    "ActionRejected",
    "ActionSubmit",
    "AttackCommand",
    "CommandPayload",
    "DeathEvent",
    "EventPayload",
    "FortifyCommand",
    "GrowCommand",
    "MatchCreate",
    "MatchRead",
    "MovementEvent",
    "PlayerRead",
    "ResignAction",
    "ScheduleUpdate",
    "SetCommandAction",
    "StepResult",
    "TerritoryRead",
    "command_from_domain",
    "event_from_domain",
]
