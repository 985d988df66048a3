"""Type definitions for the path-geometry engine.

This package contains all type definitions organized into focused modules:
- geometry: Core geometry types (Point, SegmentKind)
- commands: Path command models (MoveTo, LineTo, CurveTo, ClosePath)
- actions: Anchor normalizer actions and anchor topology
"""

from anchorpoint.types.actions import (
    ACTION_CATALOG,
    AnchorInfo,
    NormalizeAction,
    NormalizeActionType,
)
from anchorpoint.types.commands import (
    ClosePath,
    Command,
    CurveTo,
    LineTo,
    MoveTo,
    curve_from_points,
    new_command_id,
)
from anchorpoint.types.geometry import Point, SegmentKind

__all__ = [
    # Geometry
    "Point",
    "SegmentKind",
    # Commands
    "ClosePath",
    "Command",
    "CurveTo",
    "LineTo",
    "MoveTo",
    "curve_from_points",
    "new_command_id",
    # Actions
    "ACTION_CATALOG",
    "AnchorInfo",
    "NormalizeAction",
    "NormalizeActionType",
]
