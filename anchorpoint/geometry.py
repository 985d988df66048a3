"""Pure geometry primitives.

Stateless 2D vector arithmetic on Point models. No side effects or I/O.
"""

import math
from collections.abc import Callable

from anchorpoint.types import Point

EPSILON = 1e-6


def add(a: Point, b: Point) -> Point:
    return Point(x=a.x + b.x, y=a.y + b.y)


def subtract(a: Point, b: Point) -> Point:
    return Point(x=a.x - b.x, y=a.y - b.y)


def scale(v: Point, factor: float) -> Point:
    return Point(x=v.x * factor, y=v.y * factor)


def length(v: Point) -> float:
    """Magnitude of a vector."""
    return math.hypot(v.x, v.y)


def distance(p1: Point, p2: Point) -> float:
    """Calculate Euclidean distance between two points."""
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


def normalize(v: Point) -> Point:
    """Unit vector in the direction of v.

    Returns the zero vector when v is shorter than EPSILON so callers never
    see NaN coordinates.
    """
    magnitude = length(v)
    if magnitude < EPSILON:
        return Point(x=0.0, y=0.0)
    return Point(x=v.x / magnitude, y=v.y / magnitude)


def rotate(v: Point, angle: float) -> Point:
    """Rotate a vector counter-clockwise by angle radians."""
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return Point(x=v.x * cos_a - v.y * sin_a, y=v.x * sin_a + v.y * cos_a)


def rotate_about(point: Point, origin: Point, angle: float) -> Point:
    """Rotate a point around origin by angle radians."""
    return add(origin, rotate(subtract(point, origin), angle))


def reflect(point: Point, anchor: Point) -> Point:
    """Mirror a point through an anchor: anchor - (point - anchor)."""
    return Point(x=2 * anchor.x - point.x, y=2 * anchor.y - point.y)


def points_close(p1: Point, p2: Point, tolerance: float = EPSILON) -> bool:
    """Whether two points coincide within an absolute per-axis tolerance."""
    return abs(p1.x - p2.x) < tolerance and abs(p1.y - p2.y) < tolerance


def is_finite(*points: Point) -> bool:
    """Whether every coordinate of every point is finite."""
    return all(math.isfinite(p.x) and math.isfinite(p.y) for p in points)


def point_segment_distance(point: Point, start: Point, end: Point) -> float:
    """Distance from point to the segment start-end.

    The projection is clamped to the segment. A zero-length segment falls
    back to the Euclidean distance to its start point.
    """
    dx = end.x - start.x
    dy = end.y - start.y
    length_sq = dx * dx + dy * dy
    if length_sq < EPSILON * EPSILON:
        return distance(point, start)

    t = ((point.x - start.x) * dx + (point.y - start.y) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    return math.hypot(point.x - (start.x + t * dx), point.y - (start.y + t * dy))


def cubic_bezier(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """Evaluate cubic bezier at t."""
    one_minus_t = 1 - t
    return Point(
        x=(
            one_minus_t**3 * p0.x
            + 3 * one_minus_t**2 * t * p1.x
            + 3 * one_minus_t * t**2 * p2.x
            + t**3 * p3.x
        ),
        y=(
            one_minus_t**3 * p0.y
            + 3 * one_minus_t**2 * t * p1.y
            + 3 * one_minus_t * t**2 * p2.y
            + t**3 * p3.y
        ),
    )


def grid_snapper(size: float) -> Callable[[float], float]:
    """Return a quantizer rounding values to multiples of size."""
    if size <= 0:
        raise ValueError(f"Grid size must be positive, got {size}")

    def snap(value: float) -> float:
        return round(value / size) * size

    return snap
