# File: src/fence_layout/geometry/__init__.py
"""Planar geometry helpers."""

from .primitives import (
    normalize,
    dot,
    cross,
    clamp,
    subtract,
    distance,
    is_finite_point,
    points_equal,
    angle_at_vertex,
    signed_angle_rad,
    rotate_point_around,
    direction_angle,
    junction_angle_deg,
    lerp,
    snap_to_90,
    is_orthogonal,
    find_snap_point,
)

__all__ = [
    "normalize",
    "dot",
    "cross",
    "clamp",
    "subtract",
    "distance",
    "is_finite_point",
    "points_equal",
    "angle_at_vertex",
    "signed_angle_rad",
    "rotate_point_around",
    "direction_angle",
    "junction_angle_deg",
    "lerp",
    "snap_to_90",
    "is_orthogonal",
    "find_snap_point",
]
