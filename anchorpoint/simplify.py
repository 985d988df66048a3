"""Polyline simplification for path command sequences.

Pipeline per sub-path:
1. Flatten curves into a single polyline.
2. Drop points closer than ``min_spacing`` to the last kept point.
3. Douglas-Peucker reduction against ``tolerance``.
4. Optionally re-fit the reduced runs as cubic curves (``optimize``).
"""

import logging

from anchorpoint.config import settings
from anchorpoint.document import ensure_move_first, join_subpaths, split_subpaths
from anchorpoint.errors import InvalidSubPathError
from anchorpoint.fitting import fit_run
from anchorpoint.geometry import point_segment_distance, points_close
from anchorpoint.interpolation import (
    Snap,
    anchor_points,
    dedupe_close_points,
    ends_with_close,
    flatten_commands,
    snap_commands,
)
from anchorpoint.types import ClosePath, Command, LineTo, MoveTo, Point

logger = logging.getLogger(__name__)


def douglas_peucker(points: list[Point], tolerance: float) -> list[int]:
    """Indices of the points kept by Douglas-Peucker reduction.

    For each run the point farthest from the chord between the run's
    endpoints is kept when its distance exceeds tolerance. The first point
    reaching the maximum wins ties. Endpoints are always kept.
    """
    if len(points) < 3:
        return list(range(len(points)))

    keep = [False] * len(points)
    keep[0] = keep[-1] = True
    stack = [(0, len(points) - 1)]

    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue

        max_dist = 0.0
        index = -1
        start, end = points[first], points[last]
        for i in range(first + 1, last):
            d = point_segment_distance(points[i], start, end)
            if d > max_dist:
                max_dist = d
                index = i

        if index != -1 and max_dist > tolerance:
            keep[index] = True
            stack.append((index, last))
            stack.append((first, index))

    return [i for i, kept in enumerate(keep) if kept]


def simplify(
    commands: list[Command],
    tolerance: float | None = None,
    min_spacing: float | None = None,
    *,
    fit_curves: bool = False,
    curve_samples: int | None = None,
    lookahead: int | None = None,
    snap: Snap | None = None,
) -> list[Command]:
    """Reduce a command sequence to the fewest anchors within tolerance.

    Args:
        commands: One or more sub-paths
        tolerance: Max perpendicular distance of dropped points
        min_spacing: Distance pre-filter applied before reduction
        fit_curves: Re-fit reduced runs as cubic curves where possible
        curve_samples: Line segments per flattened curve
        lookahead: Max reduced points spanned by one fitted curve
        snap: Optional coordinate quantizer applied to the output

    Returns:
        A new command list; the input when it has fewer than two anchors.
    """
    tolerance = settings.simplify_tolerance if tolerance is None else tolerance
    min_spacing = settings.simplify_min_spacing if min_spacing is None else min_spacing
    curve_samples = curve_samples or settings.curve_samples
    lookahead = lookahead or settings.fit_lookahead

    subpaths = split_subpaths(commands)
    result = [
        _simplify_subpath(
            subpath, tolerance, min_spacing, fit_curves, curve_samples, lookahead, snap
        )
        for subpath in subpaths
    ]
    return join_subpaths(result)


def optimize(
    commands: list[Command],
    tolerance: float | None = None,
    min_spacing: float | None = None,
    *,
    curve_samples: int | None = None,
    lookahead: int | None = None,
    snap: Snap | None = None,
) -> list[Command]:
    """Simplify and re-fit the result with cubic curves."""
    return simplify(
        commands,
        settings.curve_fit_tolerance if tolerance is None else tolerance,
        min_spacing,
        fit_curves=True,
        curve_samples=curve_samples,
        lookahead=lookahead,
        snap=snap,
    )


def _simplify_subpath(
    commands: list[Command],
    tolerance: float,
    min_spacing: float,
    fit_curves: bool,
    curve_samples: int,
    lookahead: int,
    snap: Snap | None,
) -> list[Command]:
    if len(anchor_points(commands)) < 2:
        logger.debug("Sub-path has fewer than 2 anchors, leaving unchanged")
        return commands

    closed = ends_with_close(commands)
    working = commands[:-1] if closed else commands
    try:
        working = ensure_move_first(working)
    except InvalidSubPathError:
        logger.debug("Sub-path has no starting position, leaving unchanged")
        return commands

    polyline = flatten_commands(
        [*working, ClosePath()] if closed else working, curve_samples
    )
    filtered = dedupe_close_points(polyline, min_spacing)
    kept = douglas_peucker(filtered, tolerance)
    reduced = [filtered[i] for i in kept]

    # The closing edge is implied by ClosePath
    if closed and len(reduced) > 1 and points_close(reduced[-1], reduced[0]):
        reduced.pop()
        kept.pop()

    start = reduced[0]
    result: list[Command] = [MoveTo(x=start.x, y=start.y)]
    if fit_curves:
        spans = [filtered[kept[k] + 1 : kept[k + 1]] for k in range(len(kept) - 1)]
        result.extend(fit_run(reduced, tolerance, lookahead, spans))
    else:
        result.extend(LineTo(x=p.x, y=p.y) for p in reduced[1:])
    if closed:
        result.append(ClosePath())

    logger.debug(
        f"Simplified {len(polyline)} points to {len(reduced)} anchors",
        extra={"tolerance": tolerance, "min_spacing": min_spacing, "fit_curves": fit_curves},
    )
    return snap_commands(result, snap)
