# File: src/fence_layout/gates/gate_validator.py

"""Sliding gate validation and catalogue width-range resolution.

Validation findings are plain messages and are aggregated, never raised.
Width-range resolution distinguishes "no matching bucket" from "several
overlapping buckets" so callers can report each case differently.
"""

import math
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..config.layout_config import LayoutConfig
from ..core.fence_types import (
    FenceLine,
    Gate,
    GateKind,
    ResolutionStatus,
    WarningMsg,
)
from ..geometry.primitives import points_equal
from .gate_geometry import get_gate_width, required_return_length

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RangeResolution:
    """Catalogue width-range bucket chosen for a sliding gate."""

    status: ResolutionStatus
    range: Optional[str] = None

    @property
    def ambiguous(self) -> bool:
        return self.status is ResolutionStatus.AMBIGUOUS


def validate_sliding_return(
    gate: Gate,
    line: FenceLine,
    all_lines: Sequence[FenceLine],
    config: Optional[LayoutConfig] = None,
) -> List[str]:
    """Check the runs next to a sliding gate leave room for its return.

    Every other run touching the anchor endpoint must be at least as long
    as the required return space. Each short run produces its own message.

    Args:
        gate: Gate to check; non-sliding gates always pass.
        line: The run the gate occupies.
        all_lines: All runs in the drawing.
        config: Layout configuration (uses defaults if not provided).

    Returns:
        Failure messages, empty when the gate passes.
    """
    if gate.kind is not GateKind.SLIDING:
        return []
    if config is None:
        config = LayoutConfig()

    required = required_return_length(gate, config)
    anchor = line.endpoint(gate.sliding_return_direction.side)

    messages = []
    for other in all_lines:
        if other.id == line.id:
            continue
        if not (
            points_equal(other.a, anchor, config.vertex_tolerance)
            or points_equal(other.b, anchor, config.vertex_tolerance)
        ):
            continue
        if other.length_mm < required:
            messages.append(
                f"Sliding gate requires {required / 1000:.1f}m return space. "
                f"Adjacent run is only {other.length_mm / 1000:.2f}m."
            )
    return messages


def validate_gates(
    gates: Sequence[Gate],
    lines: Sequence[FenceLine],
    config: Optional[LayoutConfig] = None,
) -> List[WarningMsg]:
    """Validate every gate in a drawing.

    Gates whose run no longer exists are skipped.
    """
    lines_by_id = {line.id: line for line in lines}
    warnings: List[WarningMsg] = []
    for gate in gates:
        line = lines_by_id.get(gate.run_id)
        if line is None:
            logger.warning("Gate %s refers to missing run %s, skipping", gate.id, gate.run_id)
            continue
        for i, text in enumerate(validate_sliding_return(gate, line, lines, config)):
            warnings.append(WarningMsg(id=f"{gate.id}_return_{i}", text=text, run_id=gate.run_id))
    return warnings


def parse_width_range(value: str) -> Optional[Tuple[float, float]]:
    """Parse a "min/max" range in metres. Bounds may be given in either order."""
    parts = value.split("/")
    if len(parts) != 2:
        return None
    try:
        bounds = [float(p) for p in parts]
    except ValueError:
        return None
    if not all(math.isfinite(b) for b in bounds):
        return None
    return (min(bounds), max(bounds))


def resolve_sliding_gate_range(
    width_m: float,
    width_ranges: Sequence[str],
) -> RangeResolution:
    """Pick the catalogue range bucket containing a width.

    Args:
        width_m: Gate width in metres.
        width_ranges: Configured "min/max" buckets. Unparseable entries are ignored.

    Returns:
        RESOLVED with the single matching bucket, AMBIGUOUS when several
        buckets match, NOT_FOUND otherwise.
    """
    if not width_ranges or width_m is None or not math.isfinite(width_m):
        return RangeResolution(ResolutionStatus.NOT_FOUND)

    matches = []
    for candidate in width_ranges:
        parsed = parse_width_range(candidate)
        if parsed is not None and parsed[0] <= width_m <= parsed[1]:
            matches.append(candidate)

    if len(matches) == 1:
        return RangeResolution(ResolutionStatus.RESOLVED, matches[0])
    if len(matches) > 1:
        logger.debug("Width %.3fm matches %d ranges: %s", width_m, len(matches), matches)
        return RangeResolution(ResolutionStatus.AMBIGUOUS)
    return RangeResolution(ResolutionStatus.NOT_FOUND)


def resolve_gate_width_range(
    gate: Gate,
    catalog_ranges: Sequence[str],
) -> RangeResolution:
    """Width-range bucket for a sliding gate.

    A range declared on the gate is used as is; otherwise the bucket is
    resolved from the gate's effective width. Non-sliding gates and gates
    without a resolvable width have no bucket.
    """
    if gate.kind is not GateKind.SLIDING:
        return RangeResolution(ResolutionStatus.NOT_FOUND)
    if gate.width_range:
        return RangeResolution(ResolutionStatus.RESOLVED, gate.width_range)

    width_mm = get_gate_width(gate)
    if width_mm is None:
        return RangeResolution(ResolutionStatus.NOT_FOUND)
    return resolve_sliding_gate_range(width_mm / 1000.0, catalog_ranges)
