# File: src/fence_layout/layout_engine.py

"""Full layout recalculation pass.

Runs the whole pipeline over a drawing in one atomic pass:
1. Allocate panels for every non-gate run, threading one leftover pool
2. Validate sliding gate return space
3. Rebuild posts from runs, gates and panel joints
4. Flag vertices where more than two runs meet
5. Compute sliding return geometry for drawing (when a scale is given)

Runs with non-finite coordinates are reported and left out of every
phase; runs shorter than the minimum line length get an advisory but are
still laid out.

The pass is pure: the caller's pool is not modified, and identical inputs
always give identical output.

Usage:
    from fence_layout.layout_engine import recalculate

    result = recalculate(lines, gates, pool)
    next_pool = result.pool
    layout_json = json.dumps(result.to_dict(), indent=2)
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .config.layout_config import LayoutConfig
from .core.fence_types import (
    FenceLine,
    Gate,
    LeftoverPool,
    PanelSegment,
    Post,
    WarningMsg,
)
from .gates.gate_geometry import ReturnRect, get_sliding_return_rect
from .gates.gate_validator import validate_gates
from .panels.panel_allocator import count_stock_panels, fit_panels, needs_auto_even_spacing
from .posts.line_graph import (
    build_line_graph,
    count_sections,
    has_finite_geometry,
    junction_vertices,
)
from .posts.post_classifier import count_posts_by_category, generate_posts

logger = logging.getLogger(__name__)

T_JUNCTION_WARNING = (
    "T-junction with more than 2 runs detected. "
    "This may require custom post configuration."
)


@dataclass
class LayoutResult:
    """Everything one recalculation pass produces.

    Attributes:
        segments: Panel segments for all runs, in run order.
        joint_positions: Run id -> run-local joint positions (mm).
        even_spaced_runs: Ids of runs laid out with even spacing.
        posts: Rebuilt post set.
        pool: Leftover pool after the pass.
        warnings: Advisory findings.
        gate_returns: Gate id -> drawable sliding return.
        sections: Number of disconnected fence sections.
    """
    segments: List[PanelSegment] = field(default_factory=list)
    joint_positions: Dict[str, List[float]] = field(default_factory=dict)
    even_spaced_runs: List[str] = field(default_factory=list)
    posts: List[Post] = field(default_factory=list)
    pool: LeftoverPool = field(default_factory=LeftoverPool)
    warnings: List[WarningMsg] = field(default_factory=list)
    gate_returns: Dict[str, ReturnRect] = field(default_factory=dict)
    sections: int = 0

    def segments_for_run(self, run_id: str) -> List[PanelSegment]:
        """Segments of one run, in order along the run."""
        return [seg for seg in self.segments if seg.run_id == run_id]

    def to_dict(self) -> Dict:
        """Serialize to JSON-compatible dictionary."""
        return {
            "version": "1.0",
            "segments": [seg.to_dict() for seg in self.segments],
            "joint_positions": {
                run_id: [round(p, 3) for p in positions]
                for run_id, positions in self.joint_positions.items()
            },
            "even_spaced_runs": list(self.even_spaced_runs),
            "posts": [post.to_dict() for post in self.posts],
            "leftovers": self.pool.to_dict(),
            "warnings": [w.to_dict() for w in self.warnings],
            "gate_returns": {
                gate_id: rect.to_dict() for gate_id, rect in self.gate_returns.items()
            },
            "summary": self._build_summary(),
        }

    def _build_summary(self) -> Dict:
        """Build summary counts for pricing and display."""
        available = self.pool.available()
        return {
            "segment_count": len(self.segments),
            "stock_panels": count_stock_panels(self.segments),
            "reused_offcuts": sum(1 for s in self.segments if s.uses_leftover_id),
            "posts": count_posts_by_category(self.posts),
            "total_posts": len(self.posts),
            "available_leftovers": len(available),
            "available_leftover_mm": round(sum(l.length_mm for l in available), 3),
            "warning_count": len(self.warnings),
            "sections": self.sections,
        }


def recalculate(
    lines: Sequence[FenceLine],
    gates: Sequence[Gate] = (),
    leftover_pool: Optional[LeftoverPool] = None,
    config: Optional[LayoutConfig] = None,
    mm_per_unit: Optional[float] = None,
) -> LayoutResult:
    """Recalculate the complete layout for a drawing.

    Runs are allocated in the given order; earlier runs get first pick of
    the leftover pool.

    Args:
        lines: All runs in drawing order.
        gates: All gates.
        leftover_pool: Offcut stock carried over from the session.
        config: Layout configuration (uses defaults if not provided).
        mm_per_unit: Drawing scale. Enables return geometry and makes joint
            posts interpolate against the drawn length.

    Returns:
        LayoutResult for the whole drawing.
    """
    if config is None:
        config = LayoutConfig()

    result = LayoutResult()
    pool = leftover_pool if leftover_pool is not None else LeftoverPool()
    run_warnings: List[WarningMsg] = []

    logger.info("Recalculating layout: %d runs, %d gates, %d offcuts available",
                len(lines), len(gates), len(pool.available()))

    # Phase 0: input checks
    usable_lines = []
    for line in lines:
        if not has_finite_geometry(line):
            logger.warning("Run %s has non-finite coordinates, skipping", line.id)
            run_warnings.append(WarningMsg(
                id="",
                text=f"Run {line.id} has non-finite coordinates and was skipped.",
                run_id=line.id,
            ))
            continue
        if 0 < line.length_mm < config.min_line_length_mm:
            run_warnings.append(WarningMsg(
                id="",
                text=(
                    f"Line too short ({line.length_mm / 1000:.2f}m). "
                    f"Minimum length is {config.min_line_length_mm / 1000:.1f}m."
                ),
                run_id=line.id,
            ))
        usable_lines.append(line)
    lines = usable_lines

    # Phase 1: panels
    gated_run_ids = {gate.run_id for gate in gates}
    for line in lines:
        if line.gate_id is not None or line.id in gated_run_ids:
            continue

        even = line.even_spacing
        if not even and config.auto_even_spacing and needs_auto_even_spacing(line.length_mm, config):
            logger.debug("Run %s: short remainder, switching to even spacing", line.id)
            even = True

        fit = fit_panels(line.id, line.length_mm, even, pool, config)
        pool = fit.pool
        result.segments.extend(fit.segments)
        result.joint_positions[line.id] = list(fit.joint_positions)
        if even:
            result.even_spaced_runs.append(line.id)
        for text in fit.warnings:
            run_warnings.append(WarningMsg(id="", text=text, run_id=line.id))

    result.pool = pool

    # Phase 2: gates
    run_warnings.extend(validate_gates(gates, lines, config))

    # Phase 3: posts
    result.posts = generate_posts(lines, gates, result.joint_positions, config, mm_per_unit)

    # Phase 4: junction advisories
    graph = build_line_graph(lines, config)
    result.sections = count_sections(graph)
    if config.warn_on_t_junctions:
        for _ in junction_vertices(graph, min_runs=3):
            run_warnings.append(WarningMsg(id="", text=T_JUNCTION_WARNING))

    # Phase 5: return geometry
    if mm_per_unit is not None:
        lines_by_id = {line.id: line for line in lines}
        for gate in gates:
            line = lines_by_id.get(gate.run_id)
            if line is None:
                continue
            rect = get_sliding_return_rect(gate, line, mm_per_unit, config)
            if rect is not None:
                result.gate_returns[gate.id] = rect

    result.warnings = [
        WarningMsg(id=f"warn_{i}", text=w.text, run_id=w.run_id)
        for i, w in enumerate(run_warnings)
    ]

    logger.info(
        "Layout: %d segments, %d posts, %d warnings, %d offcuts available",
        len(result.segments),
        len(result.posts),
        len(result.warnings),
        len(result.pool.available()),
    )
    return result
