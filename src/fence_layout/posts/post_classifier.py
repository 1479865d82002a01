# File: src/fence_layout/posts/post_classifier.py

"""Post topology classification.

Infers the role of each post from the runs meeting at its position:

- END: a single run terminates here, or the post sits next to a gate
- LINE: two collinear runs continue through the post, or a panel joint
- CORNER: two runs meet at an angle, or three or more runs meet

Posts are derived data. generate_posts() rebuilds the full set from lines,
gates and panel joints every time; nothing is patched incrementally.
"""

import math
import logging
from collections import Counter
from typing import Dict, List, Mapping, Optional, Sequence

from ..config.layout_config import LayoutConfig
from ..core.fence_types import FenceLine, Gate, Point, Post, PostCategory
from ..geometry.primitives import direction_angle, distance, lerp, points_equal
from .line_graph import build_line_graph, has_finite_geometry, vertex_key

logger = logging.getLogger(__name__)


def incident_lines(
    pos: Point,
    lines: Sequence[FenceLine],
    tolerance: float,
) -> List[FenceLine]:
    """Runs with either endpoint at pos (per-axis tolerance).

    Runs with non-finite coordinates never match.
    """
    return [
        line for line in lines
        if has_finite_geometry(line)
        and (points_equal(line.a, pos, tolerance) or points_equal(line.b, pos, tolerance))
    ]


def _carries_gate(line: FenceLine, gated_run_ids: set) -> bool:
    return line.gate_id is not None or line.id in gated_run_ids


def categorize_post(
    pos: Point,
    lines: Sequence[FenceLine],
    gates: Sequence[Gate] = (),
    config: Optional[LayoutConfig] = None,
) -> PostCategory:
    """Classify the post at pos.

    Args:
        pos: Post position.
        lines: All runs in the drawing.
        gates: All gates; a run counts as gate-bearing if it has a gate_id
            or a gate refers to it.
        config: Layout configuration (uses defaults if not provided).

    Returns:
        The post category. Always definite, even for isolated points.
    """
    if config is None:
        config = LayoutConfig()

    connecting = incident_lines(pos, lines, config.vertex_tolerance)
    gated_run_ids = {gate.run_id for gate in gates}

    if len(connecting) == 1 or any(_carries_gate(l, gated_run_ids) for l in connecting):
        return PostCategory.END

    if not connecting:
        return PostCategory.LINE

    if len(connecting) > 2:
        # T-junctions and crossings are priced and built as corners
        return PostCategory.CORNER

    angles = []
    for line in connecting:
        other = line.b if points_equal(line.a, pos, config.vertex_tolerance) else line.a
        angles.append(direction_angle(pos, other))

    diff = abs(angles[0] - angles[1])
    diff = min(diff, 2 * math.pi - diff)
    tol = config.collinear_tolerance_rad
    if diff < tol or abs(diff - math.pi) < tol:
        return PostCategory.LINE
    return PostCategory.CORNER


def get_line_posts(
    line: FenceLine,
    joint_positions_mm: Sequence[float],
    mm_per_unit: Optional[float] = None,
) -> List[Point]:
    """World positions of interior joint posts along a run.

    Joint positions are run-local millimetres. They are mapped onto the
    drawn segment a->b by linear interpolation against the run length:
    ``line.length_mm`` by default, or the drawn length converted with
    ``mm_per_unit`` when a drawing scale is given. Positions at or beyond
    the run ends are dropped, as are all positions on a run with
    non-finite coordinates.
    """
    if not has_finite_geometry(line):
        return []
    if mm_per_unit is not None:
        if not math.isfinite(mm_per_unit) or mm_per_unit <= 0:
            return []
        run_length_mm = distance(line.a, line.b) * mm_per_unit
    else:
        run_length_mm = line.length_mm

    if not math.isfinite(run_length_mm) or run_length_mm <= 0:
        return []

    posts = []
    for pos_mm in joint_positions_mm:
        t = pos_mm / run_length_mm
        if 0 < t < 1:
            posts.append(lerp(line.a, line.b, t))
    return posts


def generate_posts(
    lines: Sequence[FenceLine],
    gates: Sequence[Gate] = (),
    joint_positions_per_line: Optional[Mapping[str, Sequence[float]]] = None,
    config: Optional[LayoutConfig] = None,
    mm_per_unit: Optional[float] = None,
) -> List[Post]:
    """Rebuild the full post set.

    One post per unique run endpoint, classified by categorize_post(), plus
    one LINE post per interior panel joint whose position is not already
    taken by an endpoint post.

    Args:
        lines: All runs.
        gates: All gates.
        joint_positions_per_line: Run id -> run-local joint positions (mm).
        config: Layout configuration (uses defaults if not provided).
        mm_per_unit: Drawing scale for joint interpolation (optional).

    Returns:
        Posts in discovery order with ids post_0, post_1, ...
    """
    if config is None:
        config = LayoutConfig()
    joint_positions_per_line = joint_positions_per_line or {}

    graph = build_line_graph(lines, config)
    posts: List[Post] = []

    for key, data in graph.nodes(data=True):
        category = categorize_post(data["pos"], lines, gates, config)
        posts.append(Post(id=f"post_{len(posts)}", pos=data["pos"], category=category))

    taken = set(graph.nodes)
    for line in lines:
        joints = joint_positions_per_line.get(line.id, ())
        for point in get_line_posts(line, joints, mm_per_unit):
            key = vertex_key(point, config.post_key_step)
            if key in taken:
                continue
            taken.add(key)
            posts.append(Post(id=f"post_{len(posts)}", pos=point, category=PostCategory.LINE))

    logger.debug("Generated %d posts from %d runs", len(posts), len(lines))
    return posts


def count_posts_by_category(posts: Sequence[Post]) -> Dict[str, int]:
    """Post counts per category, with every category present."""
    counts = Counter(post.category.value for post in posts)
    return {category.value: counts.get(category.value, 0) for category in PostCategory}
