# File: src/fence_layout/gates/gate_geometry.py

"""Gate width resolution and sliding return geometry.

The sliding return is drawn as a collinear extension: it starts at the
anchor endpoint of the gate run and continues along the run's own line,
pointing away from the opening, for the required return length. Geometry
queries return None for degenerate input instead of raising.
"""

import math
import logging
from dataclasses import dataclass
from typing import Optional, Union

from ..config.layout_config import LayoutConfig
from ..core.fence_types import (
    FenceLine,
    Gate,
    GateKind,
    Point,
    ResolutionStatus,
    ReturnDirection,
)
from ..geometry.primitives import is_finite_point, normalize, subtract

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WidthResolution:
    """Effective gate width, or why there is none."""

    status: ResolutionStatus
    width_mm: Optional[float] = None

    @property
    def resolved(self) -> bool:
        return self.status is ResolutionStatus.RESOLVED


@dataclass(frozen=True)
class SlidingReturn:
    """Centre line of a sliding gate return run, in drawing units.

    Attributes:
        start: Anchor endpoint on the gate run.
        end: Far end of the return.
        center: Midpoint of the return.
        direction: Unit vector from start to end.
        length: Return length in drawing units.
    """

    start: Point
    end: Point
    center: Point
    direction: Point
    length: float


@dataclass(frozen=True)
class ReturnRect:
    """Rotated rectangle for drawing a sliding return.

    Attributes:
        center: Rectangle centre.
        width: Extent along the return (drawing units).
        height: Drawn thickness (drawing units).
        rotation_deg: Rotation of the width axis from +x, in degrees.
        start: Anchor endpoint.
        end: Far end of the return.
    """

    center: Point
    width: float
    height: float
    rotation_deg: float
    start: Point
    end: Point

    def to_dict(self) -> dict:
        return {
            "center": self.center.to_dict(),
            "width": self.width,
            "height": self.height,
            "rotation_deg": self.rotation_deg,
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
        }


def resolve_gate_width(gate: Gate) -> WidthResolution:
    """Effective opening width of a gate.

    A positive opening_mm always wins over the type default. A custom
    opening without a positive width has no default to fall back on.
    """
    if gate.opening_mm is not None and math.isfinite(gate.opening_mm) and gate.opening_mm > 0:
        return WidthResolution(ResolutionStatus.RESOLVED, float(gate.opening_mm))

    default = gate.type.default_width_mm
    if default is None:
        logger.debug("Gate %s (%s) has no opening width", gate.id, gate.type.value)
        return WidthResolution(ResolutionStatus.NOT_FOUND)
    return WidthResolution(ResolutionStatus.RESOLVED, default)


def get_gate_width(gate: Gate) -> Optional[float]:
    """Effective opening width in mm, or None when it cannot be resolved."""
    return resolve_gate_width(gate).width_mm


def required_return_length(gate: Gate, config: Optional[LayoutConfig] = None) -> float:
    """Return space a sliding gate needs behind its opening (mm)."""
    if config is None:
        config = LayoutConfig()
    if gate.return_length_mm is not None:
        return gate.return_length_mm
    return config.default_return_length_mm


def compute_sliding_gate_return(
    line: FenceLine,
    side: Union[str, ReturnDirection],
    return_length: float,
) -> Optional[SlidingReturn]:
    """Collinear return run anchored at one end of a gate run.

    Args:
        line: The gate run.
        side: Anchor endpoint, "a" or "b", or the gate's ReturnDirection.
        return_length: Return length in drawing units.

    Returns:
        SlidingReturn, or None for an unknown side or for zero-length or
        non-finite input.
    """
    if not (is_finite_point(line.a) and is_finite_point(line.b)):
        return None
    if not math.isfinite(return_length) or return_length < 0:
        return None

    if isinstance(side, ReturnDirection):
        side = side.side
    if side == "a":
        anchor, opposite = line.a, line.b
    elif side == "b":
        anchor, opposite = line.b, line.a
    else:
        logger.debug("Unknown endpoint side %r for run %s", side, line.id)
        return None

    # Away from the opening: from the opposite end through the anchor
    direction = normalize(subtract(anchor, opposite))
    if direction.x == 0 and direction.y == 0:
        return None

    end = Point(anchor.x + direction.x * return_length, anchor.y + direction.y * return_length)
    center = Point((anchor.x + end.x) / 2, (anchor.y + end.y) / 2)
    return SlidingReturn(
        start=anchor,
        end=end,
        center=center,
        direction=direction,
        length=return_length,
    )


def get_sliding_return_rect(
    gate: Gate,
    line: FenceLine,
    mm_per_unit: float,
    config: Optional[LayoutConfig] = None,
) -> Optional[ReturnRect]:
    """Drawable rectangle for a sliding gate's return run.

    Returns None for non-sliding gates, a non-positive or non-finite scale,
    or a degenerate gate run.
    """
    if gate.kind is not GateKind.SLIDING:
        return None
    if mm_per_unit is None or not math.isfinite(mm_per_unit) or mm_per_unit <= 0:
        return None
    if config is None:
        config = LayoutConfig()

    length_units = required_return_length(gate, config) / mm_per_unit
    thickness_units = max(
        config.min_return_thickness_units,
        config.return_thickness_mm / mm_per_unit,
    )

    ret = compute_sliding_gate_return(line, gate.sliding_return_direction, length_units)
    if ret is None:
        return None

    rotation = math.degrees(math.atan2(ret.direction.y, ret.direction.x))
    return ReturnRect(
        center=ret.center,
        width=length_units,
        height=thickness_units,
        rotation_deg=rotation,
        start=ret.start,
        end=ret.end,
    )
