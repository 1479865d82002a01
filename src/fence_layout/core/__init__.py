# File: src/fence_layout/core/__init__.py
"""
Core data model for the fence run layout engine.

All entities are plain values owned by the calling layer. The only state
carried between allocation calls is the LeftoverPool, which callers thread
explicitly from one call to the next.
"""

from .fence_types import (
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

__all__ = [
    # Enums
    "PostCategory",
    "GateKind",
    "GateType",
    "ReturnDirection",
    "ResolutionStatus",
    # Models
    "Point",
    "FenceLine",
    "Gate",
    "PanelSegment",
    "Leftover",
    "LeftoverPool",
    "Post",
    "WarningMsg",
]
