"""Builders for the figures the drawing tools produce."""

from __future__ import annotations

import math
from typing import Optional, Sequence

from .geometry import KAPPA, Vec2
from .model import Edge, Figure, Node


def _closed_edges(nodes: Sequence[Node], kind: str = "line") -> tuple:
    count = len(nodes)
    return tuple(
        Edge(f"e{i + 1}", nodes[i].id, nodes[(i + 1) % count].id, kind)  # type: ignore[arg-type]
        for i in range(count)
    )


def _open_edges(nodes: Sequence[Node], kind: str = "line") -> tuple:
    return tuple(
        Edge(f"e{i + 1}", nodes[i].id, nodes[i + 1].id, kind)  # type: ignore[arg-type]
        for i in range(len(nodes) - 1)
    )


def rectangle_figure(
    figure_id: str, width: float, height: float, *, x: float = 0.0, y: float = 0.0, rotation: float = 0.0
) -> Figure:
    """Closed four-node rectangle with its top-left corner at the local origin."""

    corners = [(0.0, 0.0), (width, 0.0), (width, height), (0.0, height)]
    nodes = tuple(Node(f"n{i + 1}", cx, cy) for i, (cx, cy) in enumerate(corners))
    return Figure(
        id=figure_id, tool="rectangle", nodes=nodes, edges=_closed_edges(nodes),
        x=x, y=y, rotation=rotation, closed=True,
    )


def polygon_circle_figure(
    figure_id: str, radius: float, segments: int = 32, *, x: float = 0.0, y: float = 0.0
) -> Figure:
    """Regular ``segments``-gon inscribed in a circle centred on the local origin."""

    count = max(3, int(segments))
    nodes = tuple(
        Node(
            f"n{i + 1}",
            radius * math.cos(2.0 * math.pi * i / count),
            radius * math.sin(2.0 * math.pi * i / count),
        )
        for i in range(count)
    )
    return Figure(id=figure_id, tool="circle", nodes=nodes, edges=_closed_edges(nodes), x=x, y=y, closed=True)


def cubic_ellipse_figure(figure_id: str, rx: float, ry: float, *, x: float = 0.0, y: float = 0.0) -> Figure:
    """Four smooth nodes on the axes with handles at ``KAPPA`` times the radii.

    Nodes run clockwise on screen: (rx, 0) -> (0, ry) -> (-rx, 0) -> (0, -ry).
    """

    rx = max(0.0, rx)
    ry = max(0.0, ry)
    hx = KAPPA * rx
    hy = KAPPA * ry
    nodes = (
        Node("n1", rx, 0.0, "smooth", in_handle=(rx, -hy), out_handle=(rx, hy)),
        Node("n2", 0.0, ry, "smooth", in_handle=(hx, ry), out_handle=(-hx, ry)),
        Node("n3", -rx, 0.0, "smooth", in_handle=(-rx, hy), out_handle=(-rx, -hy)),
        Node("n4", 0.0, -ry, "smooth", in_handle=(-hx, -ry), out_handle=(hx, -ry)),
    )
    return Figure(
        id=figure_id, tool="circle", nodes=nodes, edges=_closed_edges(nodes, "cubic"), x=x, y=y, closed=True
    )


def cubic_circle_figure(figure_id: str, radius: float, *, x: float = 0.0, y: float = 0.0) -> Figure:
    return cubic_ellipse_figure(figure_id, radius, radius, x=x, y=y)


def line_figure(figure_id: str, start: Vec2, end: Vec2) -> Figure:
    nodes = (Node("n1", *start), Node("n2", *end))
    return Figure(id=figure_id, tool="line", nodes=nodes, edges=_open_edges(nodes))


def curve_figure(
    figure_id: str,
    points: Sequence[Vec2],
    *,
    handles: Optional[Sequence[tuple]] = None,
    x: float = 0.0,
    y: float = 0.0,
) -> Figure:
    """Open cubic path through ``points``.

    ``handles`` optionally gives ``(in_handle, out_handle)`` per point; either
    entry may be ``None``.
    """

    nodes = []
    for i, (px, py) in enumerate(points):
        in_h, out_h = handles[i] if handles is not None else (None, None)
        mode = "smooth" if in_h is not None or out_h is not None else "corner"
        nodes.append(Node(f"n{i + 1}", px, py, mode, in_handle=in_h, out_handle=out_h))
    return Figure(id=figure_id, tool="curve", nodes=tuple(nodes), edges=_open_edges(nodes, "cubic"), x=x, y=y)


__all__ = [
    "cubic_circle_figure",
    "cubic_ellipse_figure",
    "curve_figure",
    "line_figure",
    "polygon_circle_figure",
    "rectangle_figure",
]
