# File: src/fence_layout/panels/__init__.py
"""
Panel allocation module.

Cuts fence runs into panel segments from fixed-length stock, reusing
offcuts from a leftover pool threaded through the whole pass:
- Fixed-length mode: full panels plus one remainder piece
- Even-spacing mode: equal segments along the run
- Greedy largest-first offcut matching

Example:
    >>> from fence_layout.panels import fit_panels
    >>> from fence_layout.core import LeftoverPool
    >>> result = fit_panels("run_1", 5000.0, False, LeftoverPool())
    >>> print(f"{len(result.segments)} segments, joints at {result.joint_positions}")
"""

from .panel_allocator import (
    PanelFitResult,
    fit_panels,
    fit_runs,
    find_leftover_for_cut,
    needs_auto_even_spacing,
    count_stock_panels,
)

__all__ = [
    "PanelFitResult",
    "fit_panels",
    "fit_runs",
    "find_leftover_for_cut",
    "needs_auto_even_spacing",
    "count_stock_panels",
]
