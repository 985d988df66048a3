"""Anchor normalization action types."""

from enum import Enum

from pydantic import BaseModel

from anchorpoint.types.commands import Command
from anchorpoint.types.geometry import SegmentKind


class NormalizeActionType(str, Enum):
    """Operations the anchor normalizer can perform."""

    NORMALIZE_FROM_CURRENT = "normalize-from-current"
    NORMALIZE_FROM_OTHER = "normalize-from-other"
    CONVERT_AND_NORMALIZE = "convert-and-normalize"
    BREAK_CONTROL_POINTS = "break-control-points"


class NormalizeAction(BaseModel):
    """An action offered for the selected anchor."""

    type: NormalizeActionType
    label: str
    description: str


class AnchorInfo(BaseModel):
    """Local topology around a selected anchor.

    ``incoming`` classifies the segment ending at the anchor (the selected
    command itself) and ``outgoing`` the segment leaving it (the next
    command in the sub-path).
    """

    subpath_index: int = 0
    index: int
    command: Command
    prev_command: Command | None = None
    next_command: Command | None = None
    incoming: SegmentKind = SegmentKind.NONE
    outgoing: SegmentKind = SegmentKind.NONE


ACTION_CATALOG: dict[NormalizeActionType, NormalizeAction] = {
    NormalizeActionType.NORMALIZE_FROM_CURRENT: NormalizeAction(
        type=NormalizeActionType.NORMALIZE_FROM_CURRENT,
        label="Normalize",
        description="Mirror the incoming handle so both handles sit at 180°",
    ),
    NormalizeActionType.NORMALIZE_FROM_OTHER: NormalizeAction(
        type=NormalizeActionType.NORMALIZE_FROM_OTHER,
        label="Normalize from other side",
        description="Mirror the next curve's handle to align this anchor",
    ),
    NormalizeActionType.CONVERT_AND_NORMALIZE: NormalizeAction(
        type=NormalizeActionType.CONVERT_AND_NORMALIZE,
        label="Convert to curves",
        description="Turn adjacent lines into curves with aligned handles",
    ),
    NormalizeActionType.BREAK_CONTROL_POINTS: NormalizeAction(
        type=NormalizeActionType.BREAK_CONTROL_POINTS,
        label="Break control points",
        description="Rotate the handles apart to make a corner",
    ),
}
