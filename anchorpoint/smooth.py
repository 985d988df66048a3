"""Catmull-Rom smoothing of path command sequences.

Each anchor after the first becomes a cubic bezier whose control points
come from the Catmull-Rom to Bezier conversion over its neighbours:

    cp1 = p1 + (p2 - p0) / 6
    cp2 = p2 - (p3 - p1) / 6

The sequence is padded with ghost points so the endpoints have neighbours:
extrapolated for open paths, wrapped around for closed ones.
"""

import logging

from anchorpoint.config import settings
from anchorpoint.document import join_subpaths, split_subpaths
from anchorpoint.geometry import points_close
from anchorpoint.interpolation import Snap, anchor_points, ends_with_close, snap_commands
from anchorpoint.types import Command, CurveTo, LineTo, MoveTo, Point

logger = logging.getLogger(__name__)

MIN_SMOOTH_ANCHORS = 3


def close_to_line(commands: list[Command]) -> list[Command]:
    """Replace a trailing ClosePath with an explicit LineTo to the first anchor.

    If the last anchor already sits on the first one the ClosePath is just
    dropped, so the start point is never duplicated.
    """
    if not ends_with_close(commands):
        return commands
    anchors = anchor_points(commands)
    if not anchors:
        return commands
    start = anchors[0]
    if points_close(anchors[-1], start, settings.close_epsilon):
        return commands[:-1]
    return [*commands[:-1], LineTo(x=start.x, y=start.y)]


def ghost_points(points: list[Point], closed: bool) -> tuple[Point, Point]:
    """Synthetic neighbours before the first and after the last anchor.

    Closed paths repeat their start point at the end, so the wrap ghosts are
    the second-to-last and second anchors rather than the duplicated pair.
    """
    if closed:
        return points[-2], points[1]

    first, second = points[0], points[1]
    last, before_last = points[-1], points[-2]
    return (
        Point(x=2 * first.x - second.x, y=2 * first.y - second.y),
        Point(x=2 * last.x - before_last.x, y=2 * last.y - before_last.y),
    )


def catmull_rom_segment(p0: Point, p1: Point, p2: Point, p3: Point) -> CurveTo:
    """Cubic bezier from p1 to p2 with Catmull-Rom derived control points."""
    return CurveTo(
        x1=p1.x + (p2.x - p0.x) / 6,
        y1=p1.y + (p2.y - p0.y) / 6,
        x2=p2.x - (p3.x - p1.x) / 6,
        y2=p2.y - (p3.y - p1.y) / 6,
        x=p2.x,
        y=p2.y,
    )


def smooth(commands: list[Command], snap: Snap | None = None) -> list[Command]:
    """Fit a C1-continuous cubic spline through the anchors of each sub-path.

    Sub-paths with fewer than three anchors are returned unchanged. A closed
    input ends with an explicit LineTo back to the start only when the last
    smoothed anchor does not already coincide with it; ClosePath is never
    re-emitted.
    """
    return join_subpaths([_smooth_subpath(sub, snap) for sub in split_subpaths(commands)])


def _smooth_subpath(commands: list[Command], snap: Snap | None) -> list[Command]:
    anchor_count = len(anchor_points(commands))
    if anchor_count < MIN_SMOOTH_ANCHORS:
        logger.debug(f"Sub-path has {anchor_count} anchors, too few to smooth")
        return commands

    had_close = ends_with_close(commands)
    working = close_to_line(commands)
    points = anchor_points(working)

    closed = points_close(points[0], points[-1], settings.close_epsilon)
    ghost_start, ghost_end = ghost_points(points, closed)
    padded = [ghost_start, *points, ghost_end]

    first = working[0]
    if isinstance(first, MoveTo):
        result: list[Command] = [first]
    else:
        result = [MoveTo(x=points[0].x, y=points[0].y)]

    # padded[i + 1] is points[i]
    for i in range(1, len(points)):
        result.append(catmull_rom_segment(padded[i - 1], padded[i], padded[i + 1], padded[i + 2]))

    result = snap_commands(result, snap)

    if had_close:
        start = result[0].anchor
        end = result[-1].anchor
        if start is not None and end is not None and not points_close(
            start, end, settings.close_epsilon
        ):
            result.append(LineTo(x=start.x, y=start.y))

    logger.debug(
        f"Smoothed {len(points)} anchors",
        extra={"closed": closed, "had_close": had_close},
    )
    return result
