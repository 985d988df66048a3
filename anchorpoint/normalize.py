"""Anchor normalization: align, mirror or break the handles at one anchor.

The normalizer looks at the two segments meeting at a selected anchor,
offers the actions that make sense for that pair and applies them as a
patch on a new command list. An action either updates both handles of the
pair or leaves the sequence untouched.

Handle layout for an anchor A at ``commands[i]``:

- incoming handle: ``commands[i].x2/y2`` (A must be a CurveTo)
- outgoing handle: ``commands[i + 1].x1/y1`` (next must be a CurveTo)
"""

import logging
import math

from anchorpoint.config import settings
from anchorpoint.document import find_anchor, join_subpaths, split_subpaths
from anchorpoint.errors import UnknownAnchorError
from anchorpoint.fitting import line_control_points
from anchorpoint.geometry import (
    EPSILON,
    add,
    distance,
    is_finite,
    length,
    normalize,
    reflect,
    rotate_about,
    scale,
    subtract,
)
from anchorpoint.types import (
    ACTION_CATALOG,
    AnchorInfo,
    Command,
    CurveTo,
    LineTo,
    NormalizeAction,
    NormalizeActionType,
    Point,
    SegmentKind,
    curve_from_points,
)

logger = logging.getLogger(__name__)


def segment_kind(command: Command | None) -> SegmentKind:
    """Classify the segment a command draws."""
    match command:
        case LineTo():
            return SegmentKind.LINE
        case CurveTo():
            return SegmentKind.CURVE
        case _:
            return SegmentKind.NONE


def classify(commands: list[Command], index: int, subpath_index: int = 0) -> AnchorInfo:
    """Describe the segments meeting at commands[index]."""
    command = commands[index]
    prev_command = commands[index - 1] if index > 0 else None
    next_command = commands[index + 1] if index + 1 < len(commands) else None
    return AnchorInfo(
        subpath_index=subpath_index,
        index=index,
        command=command,
        prev_command=prev_command,
        next_command=next_command,
        incoming=segment_kind(command),
        outgoing=segment_kind(next_command),
    )


def actions_for(info: AnchorInfo, modifier_held: bool = False) -> list[NormalizeAction]:
    """Ordered actions offered for an anchor's classification."""
    match (info.incoming, info.outgoing):
        case (SegmentKind.CURVE, SegmentKind.CURVE):
            order = [
                NormalizeActionType.NORMALIZE_FROM_CURRENT,
                NormalizeActionType.NORMALIZE_FROM_OTHER,
            ]
            if modifier_held:
                order.insert(0, NormalizeActionType.BREAK_CONTROL_POINTS)
            else:
                order.append(NormalizeActionType.BREAK_CONTROL_POINTS)
        case (SegmentKind.LINE, SegmentKind.LINE | SegmentKind.CURVE) | (
            SegmentKind.CURVE,
            SegmentKind.LINE,
        ):
            order = [NormalizeActionType.CONVERT_AND_NORMALIZE]
        case _:
            order = []
    return [ACTION_CATALOG[action] for action in order]


def _curve_pair(commands: list[Command], index: int) -> tuple[CurveTo, CurveTo] | None:
    if not 0 <= index < len(commands) - 1:
        return None
    current, nxt = commands[index], commands[index + 1]
    if not isinstance(current, CurveTo) or not isinstance(nxt, CurveTo):
        return None
    if not is_finite(current.anchor, current.control2, nxt.control1, nxt.anchor):
        return None
    return current, nxt


def _with_handles(
    commands: list[Command],
    index: int,
    incoming: Point,
    outgoing: Point,
) -> list[Command]:
    """Write both handles of the anchor at index into a new list."""
    current = commands[index]
    nxt = commands[index + 1]
    result = list(commands)
    result[index] = current.model_copy(update={"x2": incoming.x, "y2": incoming.y})
    result[index + 1] = nxt.model_copy(update={"x1": outgoing.x, "y1": outgoing.y})
    return result


def normalize_from_current(commands: list[Command], index: int) -> list[Command]:
    """Mirror the incoming handle through the anchor to get the outgoing one."""
    pair = _curve_pair(commands, index)
    if pair is None:
        return list(commands)
    current, _ = pair
    anchor, incoming = current.anchor, current.control2
    if distance(anchor, incoming) < EPSILON:
        logger.debug(f"Incoming handle of {current.id} is collapsed, skipping normalize")
        return list(commands)
    return _with_handles(commands, index, incoming, reflect(incoming, anchor))


def normalize_from_other(commands: list[Command], index: int) -> list[Command]:
    """Use the next curve's handle at this anchor as the reference direction.

    The outgoing handle is kept and the incoming handle becomes its mirror.
    """
    pair = _curve_pair(commands, index)
    if pair is None:
        return list(commands)
    current, nxt = pair
    anchor, outgoing = current.anchor, nxt.control1
    if distance(anchor, outgoing) < EPSILON:
        logger.debug(f"Outgoing handle of {current.id} is collapsed, skipping normalize")
        return list(commands)
    return _with_handles(commands, index, reflect(outgoing, anchor), outgoing)


def align_tangents(
    commands: list[Command],
    index: int,
    max_handle: float | None = None,
    handle_ratio: float | None = None,
) -> list[Command]:
    """Align both handles along the bisector of the neighbouring chords.

    The tangent is the normalized sum of the incoming and outgoing unit
    chord directions (perpendicular to the incoming chord when they cancel).
    Each handle length is ``min(chord * handle_ratio, max_handle)``.
    """
    handles = _bisector_handles(commands, index, max_handle, handle_ratio)
    if handles is None:
        return list(commands)
    return _with_handles(commands, index, *handles)


def _bisector_handles(
    commands: list[Command],
    index: int,
    max_handle: float | None,
    handle_ratio: float | None,
) -> tuple[Point, Point] | None:
    max_handle = settings.max_handle_length if max_handle is None else max_handle
    handle_ratio = settings.handle_ratio if handle_ratio is None else handle_ratio

    pair = _curve_pair(commands, index)
    if pair is None or index < 1:
        return None
    prev_anchor = commands[index - 1].anchor
    if prev_anchor is None or not is_finite(prev_anchor):
        return None

    current, nxt = pair
    anchor, next_anchor = current.anchor, nxt.anchor
    incoming_dir = subtract(anchor, prev_anchor)
    outgoing_dir = subtract(next_anchor, anchor)
    incoming_len = length(incoming_dir)
    outgoing_len = length(outgoing_dir)
    if incoming_len < EPSILON or outgoing_len < EPSILON:
        logger.debug(f"Zero-length segment at {current.id}, skipping tangent alignment")
        return None

    incoming_unit = normalize(incoming_dir)
    tangent = normalize(add(incoming_unit, normalize(outgoing_dir)))
    if length(tangent) < EPSILON:
        tangent = Point(x=-incoming_unit.y, y=incoming_unit.x)

    incoming_handle = subtract(anchor, scale(tangent, min(incoming_len * handle_ratio, max_handle)))
    outgoing_handle = add(anchor, scale(tangent, min(outgoing_len * handle_ratio, max_handle)))
    return incoming_handle, outgoing_handle


def convert_and_normalize(
    commands: list[Command],
    index: int,
    max_handle: float | None = None,
    handle_ratio: float | None = None,
) -> list[Command]:
    """Turn the straight segments at an anchor into curves, then align them.

    Converted curves keep the id of the line they replace. Nothing changes
    if the follow-up alignment cannot be computed.
    """
    max_handle = settings.max_handle_length if max_handle is None else max_handle
    if not 0 < index < len(commands) - 1:
        return list(commands)

    converted = list(commands)
    for i in (index, index + 1):
        line = converted[i]
        start = converted[i - 1].anchor
        if not isinstance(line, LineTo):
            continue
        if start is None or not is_finite(start, line.anchor):
            return list(commands)
        fit = line_control_points(start, line.anchor, max_handle)
        converted[i] = curve_from_points(fit.cp1, fit.cp2, line.anchor, command_id=line.id)

    handles = _bisector_handles(converted, index, max_handle, handle_ratio)
    if handles is None:
        logger.debug(f"Could not align handles at {commands[index].id}, conversion dropped")
        return list(commands)
    return _with_handles(converted, index, *handles)


def break_control_points(
    commands: list[Command], index: int, angle_degrees: float | None = None
) -> list[Command]:
    """Rotate the two handles apart so they are no longer collinear.

    The incoming handle turns by +angle and the outgoing by -angle around
    the anchor; handle lengths are unchanged.
    """
    angle_degrees = settings.break_angle_degrees if angle_degrees is None else angle_degrees
    pair = _curve_pair(commands, index)
    if pair is None:
        return list(commands)
    current, nxt = pair
    anchor, incoming, outgoing = current.anchor, current.control2, nxt.control1
    if distance(anchor, incoming) < EPSILON or distance(anchor, outgoing) < EPSILON:
        logger.debug(f"Collapsed handle at {current.id}, skipping break")
        return list(commands)

    angle = math.radians(angle_degrees)
    return _with_handles(
        commands,
        index,
        rotate_about(incoming, anchor, angle),
        rotate_about(outgoing, anchor, -angle),
    )


class AnchorNormalizer:
    """Interactive normalizer for a single selected anchor.

    Holds the selection and the modifier key state between calls; the
    command sequence is always passed in and a new one returned.
    """

    def __init__(self) -> None:
        self.selected_anchor: str | None = None
        self.modifier_held: bool = False

    def select(self, anchor_id: str | None) -> None:
        self.selected_anchor = anchor_id

    def set_modifier(self, held: bool) -> bool:
        """Update the modifier state. Returns True if it changed."""
        if self.modifier_held == held:
            return False
        self.modifier_held = held
        return True

    def analyze(self, commands: list[Command], anchor_id: str | None = None) -> AnchorInfo | None:
        """Classify the selected (or given) anchor, None if it is not in commands."""
        anchor_id = anchor_id or self.selected_anchor
        if anchor_id is None:
            return None
        subpaths = split_subpaths(commands)
        location = find_anchor(subpaths, anchor_id)
        if location is None:
            return None
        sub_index, cmd_index = location
        return classify(subpaths[sub_index], cmd_index, sub_index)

    def available_actions(
        self, commands: list[Command], anchor_id: str | None = None
    ) -> list[NormalizeAction]:
        info = self.analyze(commands, anchor_id)
        if info is None:
            return []
        return actions_for(info, self.modifier_held)

    def execute(
        self,
        commands: list[Command],
        action: NormalizeActionType,
        anchor_id: str | None = None,
    ) -> list[Command]:
        """Apply an action and return the new command list.

        An action not offered for the anchor's classification is a no-op and
        returns an unchanged copy of commands.

        Raises:
            UnknownAnchorError: No anchor selected or id not in commands
        """
        anchor_id = anchor_id or self.selected_anchor
        info = self.analyze(commands, anchor_id)
        if info is None:
            raise UnknownAnchorError(anchor_id or "<none>")

        offered = {a.type for a in actions_for(info, self.modifier_held)}
        if action not in offered:
            logger.debug(
                f"{action.value} is not available for a "
                f"{info.incoming.value}/{info.outgoing.value} anchor, skipping"
            )
            return list(commands)

        subpaths = split_subpaths(commands)
        subpath = subpaths[info.subpath_index]
        match action:
            case NormalizeActionType.NORMALIZE_FROM_CURRENT:
                updated = normalize_from_current(subpath, info.index)
            case NormalizeActionType.NORMALIZE_FROM_OTHER:
                updated = normalize_from_other(subpath, info.index)
            case NormalizeActionType.CONVERT_AND_NORMALIZE:
                updated = convert_and_normalize(subpath, info.index)
            case NormalizeActionType.BREAK_CONTROL_POINTS:
                updated = break_control_points(subpath, info.index)

        if updated == subpath:
            logger.debug(f"{action.value} left anchor {anchor_id} unchanged")
        else:
            logger.debug(f"Applied {action.value} to anchor {anchor_id}")
        subpaths[info.subpath_index] = updated
        return join_subpaths(subpaths)
