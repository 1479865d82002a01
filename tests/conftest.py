# tests/conftest.py
import sys
import os

# Add src directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

import pytest
from typing import List

from fence_layout.config.layout_config import LayoutConfig
from fence_layout.core.fence_types import (
    FenceLine,
    Gate,
    GateType,
    Leftover,
    LeftoverPool,
    Point,
    ReturnDirection,
)


# =============================================================================
# Helpers
# =============================================================================


def make_line(
    line_id: str,
    a: tuple,
    b: tuple,
    length_mm: float = None,
    even_spacing: bool = False,
    gate_id: str = None,
) -> FenceLine:
    """Create a run; length defaults to the drawn distance (1 unit = 1 mm)."""
    if length_mm is None:
        length_mm = ((b[0] - a[0]) ** 2 + (b[1] - a[1]) ** 2) ** 0.5
    return FenceLine(
        id=line_id,
        a=Point(*a),
        b=Point(*b),
        length_mm=length_mm,
        even_spacing=even_spacing,
        gate_id=gate_id,
    )


def make_gate(
    gate_id: str,
    run_id: str,
    gate_type: str = "sliding_4800",
    opening_mm: float = 0.0,
    direction: str = "left",
    return_length_mm: float = None,
    width_range: str = None,
) -> Gate:
    return Gate(
        id=gate_id,
        type=GateType.parse(gate_type),
        opening_mm=opening_mm,
        run_id=run_id,
        sliding_return_direction=ReturnDirection(direction),
        return_length_mm=return_length_mm,
        width_range=width_range,
    )


def assert_tiles(segments, length_mm: float, tolerance: float = 0.5) -> None:
    """Segments partition [0, length_mm] with no gaps or overlaps."""
    assert segments, "expected at least one segment"
    assert abs(segments[0].start_mm) <= tolerance
    for prev, nxt in zip(segments, segments[1:]):
        assert abs(prev.end_mm - nxt.start_mm) <= tolerance
    assert abs(segments[-1].end_mm - length_mm) <= tolerance
    for seg in segments:
        assert seg.end_mm > seg.start_mm
        assert abs((seg.end_mm - seg.start_mm) - seg.length_mm) <= tolerance


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def config() -> LayoutConfig:
    return LayoutConfig()


@pytest.fixture
def empty_pool() -> LeftoverPool:
    return LeftoverPool()


@pytest.fixture
def l_corner_lines() -> List[FenceLine]:
    """Two runs meeting at a right angle at (5000, 0)."""
    return [
        make_line("run_1", (0, 0), (5000, 0)),
        make_line("run_2", (5000, 0), (5000, 3000)),
    ]


@pytest.fixture
def straight_lines() -> List[FenceLine]:
    """Two collinear runs continuing through (3000, 0)."""
    return [
        make_line("run_1", (0, 0), (3000, 0)),
        make_line("run_2", (3000, 0), (6000, 0)),
    ]


@pytest.fixture
def t_junction_lines() -> List[FenceLine]:
    """Three runs meeting at (3000, 0)."""
    return [
        make_line("run_1", (0, 0), (3000, 0)),
        make_line("run_2", (3000, 0), (6000, 0)),
        make_line("run_3", (3000, 0), (3000, 2000)),
    ]


@pytest.fixture
def sliding_gate_layout():
    """Sliding gate run from (0,0) to (4800,0) with a 3000mm run off its ``a`` end."""
    lines = [
        make_line("gate_run", (0, 0), (4800, 0), gate_id="gate_1"),
        make_line("return_run", (-3000, 0), (0, 0)),
    ]
    gates = [make_gate("gate_1", "gate_run", direction="left")]
    return lines, gates
