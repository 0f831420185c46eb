"""Local/world mapping, edge sampling and bounding boxes for figures."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set, Tuple

import numpy as np

from .config import get_kernel_config
from .geometry import Vec2, add, points_bounds, rotate, rotate_inv, sample_cubic, sub
from .model import Edge, EdgeKind, Figure, Node, build_adjacency

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in world pixels."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def padded(self, amount: float) -> "Rect":
        return Rect(self.x - amount, self.y - amount, self.width + 2 * amount, self.height + 2 * amount)

    def union(self, other: "Rect") -> "Rect":
        x = min(self.x, other.x)
        y = min(self.y, other.y)
        return Rect(x, y, max(self.right, other.right) - x, max(self.bottom, other.bottom) - y)

    def intersects(self, other: "Rect") -> bool:
        """Open-interval overlap test: rectangles that only touch do not intersect.

        A zero-width or zero-height extent (a straight horizontal or vertical
        figure) has no interior, so on that axis it counts when the other
        rectangle's closed range contains it. A line lying on a tile boundary
        therefore lands on both neighbouring tiles instead of on neither.
        """

        return _spans_overlap(self.x, self.right, other.x, other.right) and _spans_overlap(
            self.y, self.bottom, other.y, other.bottom
        )


def _spans_overlap(lo: float, hi: float, other_lo: float, other_hi: float) -> bool:
    if hi <= lo:
        return other_lo <= lo <= other_hi
    if other_hi <= other_lo:
        return lo <= other_lo <= hi
    return lo < other_hi and other_lo < hi


def local_to_world(figure: Figure, point: Vec2) -> Vec2:
    """Rotate ``point`` by ``figure.rotation`` degrees, then translate by ``(figure.x, figure.y)``."""

    return add(rotate(point, figure.rotation or 0.0), (figure.x, figure.y))


def world_to_local(figure: Figure, point: Vec2) -> Vec2:
    return rotate_inv(sub(point, (figure.x, figure.y)), figure.rotation or 0.0)


def edge_control_points(kind: EdgeKind, a: Node, b: Node) -> Tuple[Vec2, Vec2, Vec2, Vec2]:
    """Return ``(p0, p1, p2, p3)`` for an edge; lines are degenerate cubics.

    A missing handle falls back to its own endpoint.
    """

    p0 = a.point
    p3 = b.point
    if kind == "line":
        return p0, p0, p3, p3
    p1 = a.out_handle if a.out_handle is not None else p0
    p2 = b.in_handle if b.in_handle is not None else p3
    return p0, p1, p2, p3


def edge_local_points(figure: Figure, edge: Edge, steps: int) -> np.ndarray:
    """Sample ``edge`` in local space; empty when an endpoint is missing."""

    a = figure.node(edge.from_id)
    b = figure.node(edge.to_id)
    if a is None or b is None:
        logger.warning(
            "Edge %s of figure %s references a missing node (%s -> %s)",
            edge.id,
            figure.id,
            edge.from_id,
            edge.to_id,
        )
        return np.empty((0, 2), dtype=float)
    if edge.kind == "line":
        return np.asarray((a.point, b.point), dtype=float)
    return sample_cubic(*edge_control_points("cubic", a, b), steps)


def ordered_edges(figure: Figure) -> List[Edge]:
    """Return the edges as a walk that follows ``edge.to`` chains.

    Each chain starts at the first unvisited edge whose start node has no
    unvisited incoming edge (the open end of a path), or at the first unvisited
    edge when every remaining edge is part of a loop.
    """

    by_id = {edge.id: edge for edge in figure.edges}
    adjacency = build_adjacency(figure)
    visited: Set[str] = set()
    walk: List[Edge] = []

    def _pick_start() -> Optional[Edge]:
        remaining = [edge for edge in figure.edges if edge.id not in visited]
        if not remaining:
            return None
        targets = {edge.to_id for edge in remaining}
        for edge in remaining:
            if edge.from_id not in targets:
                return edge
        return remaining[0]

    start = _pick_start()
    while start is not None:
        current: Optional[Edge] = start
        while current is not None and current.id not in visited:
            visited.add(current.id)
            walk.append(current)
            current = next(
                (by_id[eid] for eid in adjacency.get(current.to_id, []) if eid not in visited),
                None,
            )
        start = _pick_start()
    return walk


def figure_local_polyline(figure: Figure, steps_per_curve: int = 30) -> np.ndarray:
    """Concatenate sampled edges in walk order, sharing the point at connected nodes."""

    chunks: List[np.ndarray] = []
    previous: Optional[Edge] = None
    for edge in ordered_edges(figure):
        pts = edge_local_points(figure, edge, steps_per_curve)
        if pts.shape[0] == 0:
            previous = None
            continue
        if chunks and previous is not None and previous.to_id == edge.from_id:
            pts = pts[1:]
        chunks.append(pts)
        previous = edge
    if not chunks:
        return np.empty((0, 2), dtype=float)
    return np.vstack(chunks)


def _to_world_array(figure: Figure, local: np.ndarray) -> np.ndarray:
    if local.shape[0] == 0:
        return local
    rad = np.radians(figure.rotation or 0.0)
    c = np.cos(rad)
    s = np.sin(rad)
    world = np.empty_like(local)
    world[:, 0] = local[:, 0] * c - local[:, 1] * s + figure.x
    world[:, 1] = local[:, 0] * s + local[:, 1] * c + figure.y
    return world


def figure_world_points(figure: Figure, steps_per_curve: int = 30) -> np.ndarray:
    return _to_world_array(figure, figure_local_polyline(figure, steps_per_curve))


def figure_world_polyline(figure: Figure, steps_per_curve: int = 30) -> List[Vec2]:
    """Return the figure outline as world-space points."""

    return [(float(x), float(y)) for x, y in figure_world_points(figure, steps_per_curve)]


def world_bounding_box(figure: Figure, steps_per_curve: Optional[int] = None) -> Optional[Rect]:
    """Axis-aligned bounds of the world polyline, or ``None`` for a figure without drawable edges."""

    steps = steps_per_curve if steps_per_curve is not None else get_kernel_config().bbox_cubic_steps
    bounds = points_bounds(figure_world_points(figure, steps))
    if bounds is None:
        return None
    min_x, min_y, max_x, max_y = bounds
    return Rect(min_x, min_y, max_x - min_x, max_y - min_y)


def union_bounding_box(figures: Iterable[Figure]) -> Optional[Rect]:
    total: Optional[Rect] = None
    for figure in figures:
        box = world_bounding_box(figure)
        if box is None:
            continue
        total = box if total is None else total.union(box)
    return total


def centroid_local(figure: Figure) -> Vec2:
    """Arithmetic mean of the node coordinates.

    This is a vertex average, not an area centroid: adequate for placing a
    label, not for anything that needs a physical centre of mass.
    """

    if not figure.nodes:
        return 0.0, 0.0
    count = len(figure.nodes)
    return (
        sum(node.x for node in figure.nodes) / count,
        sum(node.y for node in figure.nodes) / count,
    )


__all__ = [
    "Rect",
    "centroid_local",
    "edge_control_points",
    "edge_local_points",
    "figure_local_polyline",
    "figure_world_points",
    "figure_world_polyline",
    "local_to_world",
    "ordered_edges",
    "union_bounding_box",
    "world_bounding_box",
    "world_to_local",
]
