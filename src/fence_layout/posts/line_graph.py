# File: src/fence_layout/posts/line_graph.py

"""Vertex graph of fence runs.

Builds a networkx MultiGraph with one node per deduplicated run endpoint
and one edge per run. Coincident duplicate runs become parallel edges and
zero-length runs become self loops, so degenerate drawings still produce a
well-formed graph. Runs with non-finite coordinates are left out.

Endpoints are merged with the same per-axis tolerance the post classifier
uses, so one physical vertex always yields one node.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import networkx as nx

from ..config.layout_config import LayoutConfig
from ..core.fence_types import FenceLine, Point
from ..geometry.primitives import find_snap_point, is_finite_point, points_equal

logger = logging.getLogger(__name__)

VertexKey = Tuple[int, int]


def vertex_key(point: Point, step: float = 1.0) -> VertexKey:
    """Grid key used to deduplicate post positions. Point must be finite."""
    return (round(point.x / step), round(point.y / step))


def has_finite_geometry(line: FenceLine) -> bool:
    return is_finite_point(line.a) and is_finite_point(line.b)


def line_endpoints(lines: Sequence[FenceLine]) -> List[Point]:
    """Both endpoints of every run with usable coordinates, in run order."""
    points = []
    for line in lines:
        if has_finite_geometry(line):
            points.extend((line.a, line.b))
    return points


def snap_to_endpoints(
    point: Point,
    lines: Sequence[FenceLine],
    config: Optional[LayoutConfig] = None,
) -> Optional[Point]:
    """Existing run endpoint a drawn point should snap to, or None."""
    if config is None:
        config = LayoutConfig()
    return find_snap_point(point, line_endpoints(lines), config.snap_tolerance)


def _node_for(graph: nx.MultiGraph, point: Point, config: LayoutConfig) -> VertexKey:
    key = vertex_key(point, config.post_key_step)
    if key in graph:
        return key
    for existing, pos in graph.nodes(data="pos"):
        if points_equal(pos, point, config.vertex_tolerance):
            return existing
    graph.add_node(key, pos=point)
    return key


def build_line_graph(
    lines: Sequence[FenceLine],
    config: Optional[LayoutConfig] = None,
) -> nx.MultiGraph:
    """Build the vertex graph for a set of runs.

    Node attributes:
        pos: First point seen at this vertex.
    Edge keys are run ids; edge attribute ``line`` holds the FenceLine.

    Args:
        lines: Fence runs.
        config: Layout configuration (uses defaults if not provided).

    Returns:
        networkx.MultiGraph keyed by vertex grid keys, in discovery order.
    """
    if config is None:
        config = LayoutConfig()

    graph = nx.MultiGraph()
    for line in lines:
        if not has_finite_geometry(line):
            logger.warning("Run %s has non-finite coordinates, leaving it out of the graph", line.id)
            continue
        a_key = _node_for(graph, line.a, config)
        b_key = _node_for(graph, line.b, config)
        graph.add_edge(a_key, b_key, key=line.id, line=line)

    logger.debug(
        "Line graph: %d vertices, %d runs, %d sections",
        graph.number_of_nodes(),
        graph.number_of_edges(),
        nx.number_connected_components(graph) if graph.number_of_nodes() else 0,
    )
    return graph


def runs_at_vertex(graph: nx.MultiGraph, key: VertexKey) -> List[str]:
    """Ids of the distinct runs touching a vertex, in edge order."""
    seen: Dict[str, None] = {}
    for _, _, run_id in graph.edges(key, keys=True):
        seen.setdefault(run_id, None)
    return list(seen)


def junction_vertices(graph: nx.MultiGraph, min_runs: int = 3) -> List[VertexKey]:
    """Vertices where at least ``min_runs`` distinct runs meet."""
    return [key for key in graph.nodes if len(runs_at_vertex(graph, key)) >= min_runs]


def count_sections(graph: nx.MultiGraph) -> int:
    """Number of disconnected fence sections."""
    if graph.number_of_nodes() == 0:
        return 0
    return nx.number_connected_components(graph)
