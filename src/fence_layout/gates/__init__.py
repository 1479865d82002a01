# File: src/fence_layout/gates/__init__.py

"""Gate width resolution, sliding return geometry and validation."""

from .gate_geometry import (
    WidthResolution,
    SlidingReturn,
    ReturnRect,
    resolve_gate_width,
    get_gate_width,
    required_return_length,
    compute_sliding_gate_return,
    get_sliding_return_rect,
)

from .gate_validator import (
    RangeResolution,
    validate_sliding_return,
    validate_gates,
    parse_width_range,
    resolve_sliding_gate_range,
    resolve_gate_width_range,
)

__all__ = [
    # Geometry
    "WidthResolution",
    "SlidingReturn",
    "ReturnRect",
    "resolve_gate_width",
    "get_gate_width",
    "required_return_length",
    "compute_sliding_gate_return",
    "get_sliding_return_rect",
    # Validation
    "RangeResolution",
    "validate_sliding_return",
    "validate_gates",
    "parse_width_range",
    "resolve_sliding_gate_range",
    "resolve_gate_width_range",
]
