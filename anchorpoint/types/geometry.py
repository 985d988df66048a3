"""Core geometry types."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Point(BaseModel):
    """A 2D point."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class SegmentKind(str, Enum):
    """Kind of segment on one side of an anchor."""

    LINE = "line"
    CURVE = "curve"
    NONE = "none"

