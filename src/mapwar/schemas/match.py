from typing import Annotated

from pydantic import Field

from mapwar.domain.enums import RejectionReason, TerritorySort

from .action import ActionPayload, CommandPayload
from .base import WireModel
from .event import EventPayload

SeedInput = Annotated[int, Field(ge=0, lt=2**64)] | Annotated[str, Field(min_length=1)]


class TerritoryRead(WireModel):
    index: int
    sort: TerritorySort
    render_info: tuple[int, int]
    adjacent: list[int]
    visible: bool = Field(default=True, description="False when hidden by fog of war")
    owner: int | None = None
    units: int | None = None
    command: CommandPayload | None = None


class PlayerRead(WireModel):
    index: int
    is_alive: bool
    defense_level: int
    attack_level: int
    vision_level: int
    growth_level: int


class MatchRead(WireModel):
    token: str
    step: int
    ticking: bool
    winner: int | None
    viewer: int | None = Field(default=None, description="Player index the view is fogged for")
    territories: list[TerritoryRead]
    players: list[PlayerRead]


class MatchCreate(WireModel):
    players: list[str] = Field(..., min_length=2, description="Player tokens in index order")
    width: int = Field(default=6, gt=0, le=64)
    height: int = Field(default=6, gt=0, le=64)
    starting_units: int = Field(default=10, ge=0)
    seed: SeedInput | None = Field(
        default=None, description="Integer seed, or text hashed into one"
    )
    auto_tick: bool = False


class ActionSubmit(WireModel):
    player_token: str
    action: ActionPayload


class ActionRejected(WireModel):
    reason: RejectionReason
    message: str


class StepResult(WireModel):
    step: int
    events: list[EventPayload]
    winner: int | None = None


class ScheduleUpdate(WireModel):
    enabled: bool
