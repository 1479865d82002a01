# File: src/fence_layout/geometry/primitives.py

"""Planar vector math used across the layout engine.

Pure functions over Point values. No state and no failure modes beyond
NaN propagation on non-finite input, which callers guard upstream.
"""

import math
from typing import Iterable, Optional, Sequence

from ..core.fence_types import Point

TWO_PI = 2.0 * math.pi


def normalize(v: Point) -> Point:
    """Unit vector in the direction of v, or the zero vector for zero input."""
    mag = math.hypot(v.x, v.y)
    if mag == 0:
        return Point(0.0, 0.0)
    return Point(v.x / mag, v.y / mag)


def dot(a: Point, b: Point) -> float:
    return a.x * b.x + a.y * b.y


def cross(a: Point, b: Point) -> float:
    """Z component of the 3D cross product of two planar vectors."""
    return a.x * b.y - a.y * b.x


def clamp(x: float, lo: float, hi: float) -> float:
    return min(max(x, lo), hi)


def subtract(a: Point, b: Point) -> Point:
    return Point(a.x - b.x, a.y - b.y)


def distance(a: Point, b: Point) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


def is_finite_point(p: Point) -> bool:
    return math.isfinite(p.x) and math.isfinite(p.y)


def points_equal(a: Point, b: Point, tolerance: float) -> bool:
    """Check if two points match within tolerance on each axis."""
    return abs(a.x - b.x) < tolerance and abs(a.y - b.y) < tolerance


def angle_at_vertex(polygon: Sequence[Point], i: int) -> float:
    """Unsigned interior angle in degrees at polygon vertex i.

    The polygon is treated as closed. Returns 0.0 for fewer than 3 points.
    """
    n = len(polygon)
    if n < 3:
        return 0.0

    prev = polygon[(i - 1 + n) % n]
    curr = polygon[i % n]
    nxt = polygon[(i + 1) % n]

    v1 = normalize(subtract(prev, curr))
    v2 = normalize(subtract(nxt, curr))

    # Clamp guards acos against rounding just outside [-1, 1]
    theta = math.acos(clamp(dot(v1, v2), -1.0, 1.0))
    return math.degrees(theta)


def signed_angle_rad(from_v: Point, to_v: Point) -> float:
    """Signed rotation from one vector to another, in (-pi, pi]."""
    return math.atan2(cross(from_v, to_v), dot(from_v, to_v))


def rotate_point_around(p: Point, center: Point, angle_rad: float) -> Point:
    """Rotate p counter-clockwise about center."""
    s = math.sin(angle_rad)
    c = math.cos(angle_rad)

    dx = p.x - center.x
    dy = p.y - center.y

    return Point(
        center.x + dx * c - dy * s,
        center.y + dx * s + dy * c,
    )


def direction_angle(origin: Point, target: Point) -> float:
    """Direction from origin to target as an angle in [0, 2pi)."""
    angle = math.atan2(target.y - origin.y, target.x - origin.x)
    return (angle + TWO_PI) % TWO_PI


def junction_angle_deg(vertex: Point, prev: Point, nxt: Point) -> Optional[float]:
    """Deviation from a straight continuation at a vertex, in degrees.

    0 means prev, vertex and nxt are collinear with the vertex between them;
    90 means a right-angle corner. Returns None when either leg has zero
    length.
    """
    incoming = subtract(vertex, prev)
    outgoing = subtract(nxt, vertex)
    if math.hypot(incoming.x, incoming.y) == 0 or math.hypot(outgoing.x, outgoing.y) == 0:
        return None

    cos_angle = clamp(dot(normalize(incoming), normalize(outgoing)), -1.0, 1.0)
    return math.degrees(math.acos(cos_angle))


def lerp(a: Point, b: Point, t: float) -> Point:
    return Point(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)


# =============================================================================
# Drawing helpers
# =============================================================================


def snap_to_90(start: Point, end: Point) -> Point:
    """Move end onto the horizontal or vertical through start, whichever is nearer."""
    dx = end.x - start.x
    dy = end.y - start.y
    if abs(dx) > abs(dy):
        return Point(end.x, start.y)
    return Point(start.x, end.y)


def is_orthogonal(start: Point, end: Point, tolerance: float = 0.01) -> bool:
    """True when the segment is horizontal or vertical within tolerance."""
    return abs(end.x - start.x) < tolerance or abs(end.y - start.y) < tolerance


def find_snap_point(
    point: Point,
    candidates: Iterable[Point],
    tolerance: float = 40.0,
) -> Optional[Point]:
    """First candidate strictly closer than tolerance to point, or None.

    Non-finite points never snap.
    """
    if not is_finite_point(point):
        return None
    for candidate in candidates:
        if is_finite_point(candidate) and distance(point, candidate) < tolerance:
            return candidate
    return None
