"""Path command models.

Commands are immutable snapshots. Transforms build new commands with
``model_copy(update=...)`` or the constructors below; nothing is mutated
in place.
"""

from typing import Annotated, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from anchorpoint.types.geometry import Point


def new_command_id() -> str:
    """Generate a fresh opaque command id."""
    return uuid4().hex


class _BaseCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_command_id)

    @property
    def anchor(self) -> Point | None:
        return None


class MoveTo(_BaseCommand):
    """Start of a sub-path."""

    command: Literal["M"] = "M"
    x: float
    y: float

    @property
    def anchor(self) -> Point:
        return Point(x=self.x, y=self.y)


class LineTo(_BaseCommand):
    """Straight segment ending at (x, y)."""

    command: Literal["L"] = "L"
    x: float
    y: float

    @property
    def anchor(self) -> Point:
        return Point(x=self.x, y=self.y)


class CurveTo(_BaseCommand):
    """Cubic bezier segment.

    (x1, y1) is the outgoing control point of the previous anchor,
    (x2, y2) the incoming control point of this anchor and (x, y) the
    anchor itself.
    """

    command: Literal["C"] = "C"
    x1: float
    y1: float
    x2: float
    y2: float
    x: float
    y: float

    @property
    def anchor(self) -> Point:
        return Point(x=self.x, y=self.y)

    @property
    def control1(self) -> Point:
        return Point(x=self.x1, y=self.y1)

    @property
    def control2(self) -> Point:
        return Point(x=self.x2, y=self.y2)


class ClosePath(_BaseCommand):
    """Implicit line back to the sub-path's first anchor."""

    command: Literal["Z"] = "Z"


Command = Annotated[MoveTo | LineTo | CurveTo | ClosePath, Field(discriminator="command")]


def curve_from_points(
    control1: Point, control2: Point, anchor: Point, command_id: str | None = None
) -> CurveTo:
    """Build a CurveTo from point models."""
    return CurveTo(
        id=command_id or new_command_id(),
        x1=control1.x,
        y1=control1.y,
        x2=control2.x,
        y2=control2.y,
        x=anchor.x,
        y=anchor.y,
    )
