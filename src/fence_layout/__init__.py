# File: src/fence_layout/__init__.py

"""Fence run layout engine.

Plans fence construction from a set of straight runs:
- Panel allocation from fixed-length stock with offcut reuse
- Post topology classification (end / corner / line)
- Gate width resolution and sliding gate return checks

Usage:
    from fence_layout import recalculate, FenceLine, Point

    lines = [FenceLine("run_1", Point(0, 0), Point(5000, 0), length_mm=5000)]
    result = recalculate(lines)
    print(result.to_dict()["summary"])
"""

from .config.layout_config import LayoutConfig

from .core.fence_types import (
    PostCategory,
    GateKind,
    GateType,
    ReturnDirection,
    ResolutionStatus,
    Point,
    FenceLine,
    Gate,
    PanelSegment,
    Leftover,
    LeftoverPool,
    Post,
    WarningMsg,
)

from .panels.panel_allocator import PanelFitResult, fit_panels, fit_runs

from .posts.post_classifier import categorize_post, generate_posts

from .gates.gate_geometry import (
    resolve_gate_width,
    get_gate_width,
    compute_sliding_gate_return,
    get_sliding_return_rect,
)

from .gates.gate_validator import (
    validate_sliding_return,
    resolve_sliding_gate_range,
    resolve_gate_width_range,
)

from .layout_engine import LayoutResult, recalculate

__version__ = "0.1.0"

__all__ = [
    # Main entry point
    "recalculate",
    "LayoutResult",
    # Configuration
    "LayoutConfig",
    # Types
    "PostCategory",
    "GateKind",
    "GateType",
    "ReturnDirection",
    "ResolutionStatus",
    "Point",
    "FenceLine",
    "Gate",
    "PanelSegment",
    "Leftover",
    "LeftoverPool",
    "Post",
    "WarningMsg",
    # Panels
    "PanelFitResult",
    "fit_panels",
    "fit_runs",
    # Posts
    "categorize_post",
    "generate_posts",
    # Gates
    "resolve_gate_width",
    "get_gate_width",
    "compute_sliding_gate_return",
    "get_sliding_return_rect",
    "validate_sliding_return",
    "resolve_sliding_gate_range",
    "resolve_gate_width_range",
]
