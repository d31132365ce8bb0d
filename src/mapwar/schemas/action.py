from typing import Annotated, Literal

from pydantic import Field

from mapwar.domain import models as dm

from .base import WireModel


class AttackCommand(WireModel):
    kind: Literal["attack"] = "attack"
    target: int = Field(..., description="Index of the adjacent territory to attack")

    def to_domain(self) -> dm.Attack:
        return dm.Attack(target=dm.TerritoryIndex(self.target))


class FortifyCommand(WireModel):
    kind: Literal["fortify"] = "fortify"

    def to_domain(self) -> dm.Fortify:
        return dm.Fortify()


class GrowCommand(WireModel):
    kind: Literal["grow"] = "grow"

    def to_domain(self) -> dm.Grow:
        return dm.Grow()


CommandPayload = Annotated[
    AttackCommand | FortifyCommand | GrowCommand, Field(discriminator="kind")
]


class SetCommandAction(WireModel):
    kind: Literal["setCommand"] = "setCommand"
    territory: int
    command: CommandPayload

    def to_domain(self) -> dm.SetCommand:
        return dm.SetCommand(
            territory=dm.TerritoryIndex(self.territory),
            command=self.command.to_domain(),
        )


class ResignAction(WireModel):
    kind: Literal["resign"] = "resign"

    def to_domain(self) -> dm.Resign:
        return dm.Resign()


ActionPayload = Annotated[SetCommandAction | ResignAction, Field(discriminator="kind")]


def command_from_domain(command: dm.Command) -> AttackCommand | FortifyCommand | GrowCommand:
    if isinstance(command, dm.Attack):
        return AttackCommand(target=int(command.target))
    if isinstance(command, dm.Fortify):
        return FortifyCommand()
    return GrowCommand()
