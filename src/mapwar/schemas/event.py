from typing import Annotated, Literal

from pydantic import Field

from mapwar.domain import models as dm

from .base import WireModel


class DeathEvent(WireModel):
    kind: Literal["death"] = "death"
    render_info: tuple[int, int]
    amount: int = Field(..., ge=0, description="Units lost")


class MovementEvent(WireModel):
    kind: Literal["movement"] = "movement"
    render_info_from: tuple[int, int]
    render_info_to: tuple[int, int]
    amount: int = Field(..., ge=0, description="Units moved")


EventPayload = Annotated[DeathEvent | MovementEvent, Field(discriminator="kind")]


def event_from_domain(event: dm.AnimationEvent) -> DeathEvent | MovementEvent:
    if isinstance(event, dm.Death):
        return DeathEvent(render_info=event.render_info, amount=event.amount)
    return MovementEvent(
        render_info_from=event.render_info_from,
        render_info_to=event.render_info_to,
        amount=event.amount,
    )
