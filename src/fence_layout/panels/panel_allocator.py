# File: src/fence_layout/panels/panel_allocator.py
"""
Panel allocation with offcut reuse.

Converts a run's length into cut segments taken from fixed-length stock
panels. Short pieces are sourced from the leftover pool where a large
enough offcut exists; otherwise a fresh panel is cut and the residual is
kept for later runs if it is long enough to be useful.

This is a greedy, deterministic heuristic: the largest qualifying offcut
is always taken, with ties broken by pool insertion order.

Example:
    >>> pool = LeftoverPool()
    >>> result = fit_panels("run_1", 2500.0, False, pool)
    >>> [s.length_mm for s in result.segments]
    [2390.0, 110.0]
    >>> [l.length_mm for l in result.pool.available()]
    [1980.0]
"""

import math
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from ..config.layout_config import LayoutConfig
from ..core.fence_types import Leftover, LeftoverPool, PanelSegment
from ..utils.logging_config import TRACE

logger = logging.getLogger(__name__)


@dataclass
class PanelFitResult:
    """Output of allocating one run.

    Attributes:
        segments: Cut pieces tiling [0, length_mm] in order.
        joint_positions: Run-local positions of interior panel joints (mm).
        new_leftovers: Offcuts registered while cutting this run.
        warnings: Advisory messages.
        pool: Updated leftover pool to pass to the next run.
    """
    segments: List[PanelSegment] = field(default_factory=list)
    joint_positions: List[float] = field(default_factory=list)
    new_leftovers: List[Leftover] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    pool: LeftoverPool = field(default_factory=LeftoverPool)


def find_leftover_for_cut(
    required_length: float,
    pool: LeftoverPool,
    config: Optional[LayoutConfig] = None,
) -> Optional[Leftover]:
    """Pick the largest available offcut that can yield the required piece.

    An offcut qualifies when it covers the piece plus the cutting buffer.
    Python's sort is stable, so equal lengths keep pool insertion order.

    Args:
        required_length: Length of the piece to cut (mm)
        pool: Leftover pool to search
        config: Layout configuration (uses defaults if not provided)

    Returns:
        The selected Leftover, or None if nothing qualifies
    """
    if config is None:
        config = LayoutConfig()

    candidates = sorted(pool.available(), key=lambda l: l.length_mm, reverse=True)
    for leftover in candidates:
        if leftover.length_mm >= required_length + config.cut_buffer_mm:
            return leftover
    return None


def _cut_piece(
    required_length: float,
    pool: LeftoverPool,
    new_leftovers: List[Leftover],
    config: LayoutConfig,
) -> Optional[str]:
    """Source one cut piece from the pool or from fresh stock.

    Consumes a qualifying offcut when there is one and registers the
    residual as a new offcut when it is at least min_leftover_mm long.
    New offcuts are collected in new_leftovers and only join the pool once
    the whole run has been cut.

    Returns:
        Id of the consumed offcut, or None for a fresh stock cut
    """
    leftover = find_leftover_for_cut(required_length, pool, config)
    if leftover is not None:
        pool.consume(leftover.id)
        source_length = leftover.length_mm
        used_id = leftover.id
    else:
        source_length = config.panel_length_mm
        used_id = None

    residual = source_length - required_length - config.cut_buffer_mm
    if residual >= config.min_leftover_mm:
        new_leftovers.append(Leftover(id=pool.next_id(), length_mm=residual))
        logger.log(
            TRACE,
            "Cut %.1fmm from %s (%.1fmm), kept %.1fmm offcut",
            required_length, used_id or "stock", source_length, residual,
        )
    else:
        logger.log(
            TRACE,
            "Cut %.1fmm from %s (%.1fmm), %.1fmm scrap",
            required_length, used_id or "stock", source_length, max(residual, 0.0),
        )

    return used_id


def _fit_fixed(
    run_id: str,
    length_mm: float,
    pool: LeftoverPool,
    result: PanelFitResult,
    config: LayoutConfig,
) -> None:
    """Full stock panels back to back, then one remainder piece."""
    panel = config.panel_length_mm
    num_panels = int(math.floor(length_mm / panel))
    remainder = length_mm - num_panels * panel
    if remainder < config.epsilon_mm:
        remainder = 0.0

    for i in range(num_panels):
        result.segments.append(PanelSegment(
            id=f"{run_id}_seg_{i}",
            run_id=run_id,
            start_mm=i * panel,
            end_mm=(i + 1) * panel,
            length_mm=panel,
        ))

    k = 1
    while k * panel < length_mm - config.epsilon_mm:
        result.joint_positions.append(k * panel)
        k += 1

    if remainder <= 0:
        return

    if remainder < config.min_leftover_mm:
        result.warnings.append(
            f"Short segment ({remainder / 1000:.2f}m) detected. "
            "Consider enabling even spacing or extending the run."
        )

    used_id = _cut_piece(remainder, pool, result.new_leftovers, config)
    result.segments.append(PanelSegment(
        id=f"{run_id}_seg_{num_panels}",
        run_id=run_id,
        start_mm=num_panels * panel,
        end_mm=length_mm,
        length_mm=remainder,
        uses_leftover_id=used_id,
        is_remainder=True,
    ))


def _fit_even(
    run_id: str,
    length_mm: float,
    pool: LeftoverPool,
    result: PanelFitResult,
    config: LayoutConfig,
) -> None:
    """Equal-width segments, each cut down from stock when shorter than a panel."""
    panel_count = max(1, int(math.ceil(length_mm / config.panel_length_mm)))
    spacing = length_mm / panel_count
    requires_cut = spacing < config.panel_length_mm

    for i in range(panel_count):
        used_id = None
        if requires_cut:
            used_id = _cut_piece(spacing, pool, result.new_leftovers, config)

        start = i * spacing
        end = length_mm if i == panel_count - 1 else (i + 1) * spacing
        result.segments.append(PanelSegment(
            id=f"{run_id}_seg_{i}",
            run_id=run_id,
            start_mm=start,
            end_mm=end,
            length_mm=spacing,
            uses_leftover_id=used_id,
        ))

        if i > 0:
            result.joint_positions.append(start)


def fit_panels(
    run_id: str,
    length_mm: float,
    even_spacing: bool,
    leftover_pool: Optional[LeftoverPool] = None,
    config: Optional[LayoutConfig] = None,
) -> PanelFitResult:
    """Allocate panel segments for one run.

    The supplied pool is not modified. The returned result carries the
    updated pool, with consumed offcuts flagged and this run's new offcuts
    appended, ready for the next run in the pass.

    Args:
        run_id: Identifier of the run being allocated
        length_mm: Run length (mm)
        even_spacing: Divide the run into equal segments instead of full
            panels plus a remainder
        leftover_pool: Offcut stock available to this run
        config: Layout configuration (uses defaults if not provided)

    Returns:
        PanelFitResult with segments, joints, new offcuts, warnings and pool
    """
    if config is None:
        config = LayoutConfig()

    pool = leftover_pool.copy() if leftover_pool is not None else LeftoverPool()
    result = PanelFitResult(pool=pool)

    if not math.isfinite(length_mm) or length_mm <= 0:
        logger.warning("Run %s has no usable length (%s), skipping", run_id, length_mm)
        result.warnings.append(f"Run {run_id} has no length; no panels placed.")
        return result

    if even_spacing:
        _fit_even(run_id, length_mm, pool, result, config)
    else:
        _fit_fixed(run_id, length_mm, pool, result, config)

    pool.extend(result.new_leftovers)

    logger.debug(
        "Run %s: %d segments over %.1fmm (%s), %d new offcuts",
        run_id,
        len(result.segments),
        length_mm,
        "even" if even_spacing else "fixed",
        len(result.new_leftovers),
    )

    return result


def fit_runs(
    runs: Iterable[Tuple[str, float, bool]],
    leftover_pool: Optional[LeftoverPool] = None,
    config: Optional[LayoutConfig] = None,
) -> Tuple[List[PanelFitResult], LeftoverPool]:
    """Allocate several runs in order, threading one pool through them.

    Args:
        runs: (run_id, length_mm, even_spacing) tuples, in allocation order
        leftover_pool: Starting offcut stock
        config: Layout configuration (uses defaults if not provided)

    Returns:
        Tuple of (per-run results, final pool)
    """
    pool = leftover_pool if leftover_pool is not None else LeftoverPool()
    results = []
    for run_id, length_mm, even_spacing in runs:
        result = fit_panels(run_id, length_mm, even_spacing, pool, config)
        results.append(result)
        pool = result.pool
    return results, pool


def needs_auto_even_spacing(length_mm: float, config: Optional[LayoutConfig] = None) -> bool:
    """True when fixed panels would leave a remainder too short to use."""
    if config is None:
        config = LayoutConfig()
    if not math.isfinite(length_mm) or length_mm <= 0:
        return False
    remainder = math.fmod(length_mm, config.panel_length_mm)
    if remainder < config.epsilon_mm:
        remainder = 0.0
    return 0 < remainder < config.min_leftover_mm


def count_stock_panels(segments: Iterable[PanelSegment]) -> int:
    """Number of segments that consume a fresh stock panel."""
    return sum(1 for seg in segments if seg.uses_leftover_id is None)
