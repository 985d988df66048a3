"""Conversions between command sequences and point lists.

Pure functions used by the simplifier and smoother to read anchors out of
a sub-path, flatten curves into polylines and quantize output coordinates.
"""

from collections.abc import Callable

from anchorpoint.geometry import cubic_bezier, distance, points_close
from anchorpoint.types import ClosePath, Command, CurveTo, LineTo, MoveTo, Point

Snap = Callable[[float], float]


def anchor_points(commands: list[Command]) -> list[Point]:
    """Return the anchor of every position-bearing command, in order."""
    return [cmd.anchor for cmd in commands if cmd.anchor is not None]


def ends_with_close(commands: list[Command]) -> bool:
    return bool(commands) and isinstance(commands[-1], ClosePath)


def flatten_commands(commands: list[Command], curve_samples: int = 16) -> list[Point]:
    """Flatten a sub-path into a polyline.

    Lines contribute their end anchor, each CurveTo is sampled into
    ``curve_samples`` equal-parameter segments and a trailing ClosePath adds
    the sub-path start unless the last point already sits on it.
    """
    points: list[Point] = []
    start: Point | None = None
    current: Point | None = None
    steps = max(1, curve_samples)

    for cmd in commands:
        match cmd:
            case MoveTo():
                start = current = cmd.anchor
                points.append(current)

            case LineTo():
                current = cmd.anchor
                points.append(current)

            case CurveTo():
                end = cmd.anchor
                if current is None:
                    points.append(end)
                else:
                    p1, p2 = cmd.control1, cmd.control2
                    points.extend(
                        cubic_bezier(current, p1, p2, end, i / steps) for i in range(1, steps + 1)
                    )
                current = end

            case ClosePath():
                if start is not None and current is not None and not points_close(current, start):
                    points.append(start)
                current = start

    return points


def dedupe_close_points(points: list[Point], min_distance: float = 1.5) -> list[Point]:
    """Drop points closer than min_distance to the last kept point.

    The first and last points are always preserved.
    """
    if len(points) <= 2:
        return list(points)

    result = [points[0]]
    for point in points[1:-1]:
        if distance(result[-1], point) >= min_distance:
            result.append(point)
    result.append(points[-1])
    return result


def snap_command(command: Command, snap: Snap) -> Command:
    """Quantize every coordinate of a command."""
    match command:
        case CurveTo():
            return command.model_copy(
                update={
                    "x1": snap(command.x1),
                    "y1": snap(command.y1),
                    "x2": snap(command.x2),
                    "y2": snap(command.y2),
                    "x": snap(command.x),
                    "y": snap(command.y),
                }
            )
        case MoveTo() | LineTo():
            return command.model_copy(update={"x": snap(command.x), "y": snap(command.y)})
        case _:
            return command


def snap_commands(commands: list[Command], snap: Snap | None) -> list[Command]:
    if snap is None:
        return commands
    return [snap_command(cmd, snap) for cmd in commands]
