"""Single-segment cubic bezier fitting.

The fitter estimates end tangents from the first and last two points of a
run, places each control point a third of the chord away from its endpoint
and accepts the curve when the maximum sampling error stays within the
tolerance. The same one-third rule, with a length cap, turns a straight
line into a curve for the anchor normalizer.
"""

import logging

from pydantic import BaseModel

from anchorpoint.geometry import (
    EPSILON,
    add,
    cubic_bezier,
    distance,
    normalize,
    scale,
    subtract,
)
from anchorpoint.types import Command, CurveTo, LineTo, Point, curve_from_points

logger = logging.getLogger(__name__)


class FitResult(BaseModel):
    """Control points of a fitted cubic. The run's endpoints are the curve's endpoints."""

    cp1: Point
    cp2: Point


def _chord_parameters(points: list[Point]) -> list[float]:
    """Chord-length parameterization, uniform when the run has no length."""
    cumulative = [0.0]
    for i in range(1, len(points)):
        cumulative.append(cumulative[-1] + distance(points[i - 1], points[i]))
    total = cumulative[-1]
    if total < EPSILON:
        last = len(points) - 1
        return [i / last for i in range(len(points))]
    return [c / total for c in cumulative]


def fit_error(points: list[Point], cp1: Point, cp2: Point) -> float:
    """Maximum distance between interior points and the cubic through the run."""
    start, end = points[0], points[-1]
    params = _chord_parameters(points)
    max_error = 0.0
    for point, t in zip(points[1:-1], params[1:-1], strict=True):
        max_error = max(max_error, distance(point, cubic_bezier(start, cp1, cp2, end, t)))
    return max_error


def fit_cubic(points: list[Point], tolerance: float) -> FitResult | None:
    """Fit one cubic bezier to an ordered run of points.

    Returns None when the run has fewer than three points or the maximum
    error exceeds tolerance.
    """
    if len(points) < 3:
        return None

    start, end = points[0], points[-1]
    t1 = normalize(subtract(points[1], start))
    t2 = normalize(subtract(end, points[-2]))
    handle = distance(start, end) / 3

    cp1 = add(start, scale(t1, handle))
    cp2 = subtract(end, scale(t2, handle))

    if fit_error(points, cp1, cp2) > tolerance:
        return None
    return FitResult(cp1=cp1, cp2=cp2)


def line_control_points(start: Point, end: Point, max_handle: float = 30.0) -> FitResult:
    """Control points at 1/3 and 2/3 along a line, capped at max_handle.

    The resulting curve traces the original line exactly.
    """
    direction = normalize(subtract(end, start))
    handle = min(distance(start, end) / 3, max_handle)
    return FitResult(
        cp1=add(start, scale(direction, handle)),
        cp2=subtract(end, scale(direction, handle)),
    )


def fit_run(
    points: list[Point],
    tolerance: float,
    lookahead: int = 8,
    spans: list[list[Point]] | None = None,
) -> list[Command]:
    """Greedily cover a point list with fitted curves, falling back to lines.

    From each point the longest window (at most ``lookahead`` points ahead)
    whose fit is within tolerance becomes a CurveTo; otherwise a LineTo to
    the next point is emitted. When ``spans`` is given, ``spans[i]`` holds
    the original points between ``points[i]`` and ``points[i + 1]`` and the
    fit is measured against them instead of the reduced points.

    The returned commands do not include the leading MoveTo.
    """
    commands: list[Command] = []
    i = 0
    last = len(points) - 1

    while i < last:
        best: FitResult | None = None
        best_j = i + 1
        for j in range(min(i + lookahead, last), i + 1, -1):
            run = _window(points, spans, i, j)
            fit = fit_cubic(run, tolerance)
            if fit is not None:
                best, best_j = fit, j
                break

        if best is not None:
            commands.append(curve_from_points(best.cp1, best.cp2, points[best_j]))
            i = best_j
        else:
            nxt = points[i + 1]
            commands.append(LineTo(x=nxt.x, y=nxt.y))
            i += 1

    curves = sum(1 for cmd in commands if isinstance(cmd, CurveTo))
    lines = len(commands) - curves
    logger.debug(f"Fitted {len(points)} points into {curves} curves, {lines} lines")
    return commands


def _window(
    points: list[Point], spans: list[list[Point]] | None, i: int, j: int
) -> list[Point]:
    if spans is None:
        return points[i : j + 1]
    run = [points[i]]
    for k in range(i, j):
        run.extend(spans[k])
        run.append(points[k + 1])
    return run
