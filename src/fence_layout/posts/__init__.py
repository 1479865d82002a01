# File: src/fence_layout/posts/__init__.py

"""Post generation and topology classification.

Usage:
    from fence_layout.posts import generate_posts

    posts = generate_posts(lines, gates, joint_positions_per_line)
    corners = [p for p in posts if p.category is PostCategory.CORNER]
"""

from .line_graph import (
    build_line_graph,
    vertex_key,
    runs_at_vertex,
    junction_vertices,
    count_sections,
    has_finite_geometry,
    line_endpoints,
    snap_to_endpoints,
)

from .post_classifier import (
    incident_lines,
    categorize_post,
    get_line_posts,
    generate_posts,
    count_posts_by_category,
)

__all__ = [
    # Graph
    "build_line_graph",
    "vertex_key",
    "runs_at_vertex",
    "junction_vertices",
    "count_sections",
    "has_finite_geometry",
    "line_endpoints",
    "snap_to_endpoints",
    # Classifier
    "incident_lines",
    "categorize_post",
    "get_line_posts",
    "generate_posts",
    "count_posts_by_category",
]
