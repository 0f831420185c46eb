"""Derived measurements: per-edge lengths and shape-specific summaries.

Measurements are advisory. Every block degrades by omission when the figure
does not have enough nodes or samples, so a half-drawn figure never stops a
commit.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import List, Optional

from .config import get_kernel_config
from .geometry import (
    angle_deg,
    circumradius,
    cubic_arc_length,
    ellipse_circumference,
    line_length,
    points_bounds,
    polyline_length,
)
from .model import CircleMeasure, CurveMeasure, EdgeMeasure, Figure, Measures, RectMeasure
from .transform import edge_control_points, figure_local_polyline

logger = logging.getLogger(__name__)


def _edge_measures(figure: Figure, cubic_steps: int) -> List[EdgeMeasure]:
    nodes = figure.node_map()
    measures: List[EdgeMeasure] = []
    for edge in figure.edges:
        a = nodes.get(edge.from_id)
        b = nodes.get(edge.to_id)
        if a is None or b is None:
            logger.warning("Skipping edge %s of figure %s: missing endpoint", edge.id, figure.id)
            continue
        if edge.kind == "line":
            length_px = line_length(a.point, b.point)
        else:
            length_px = cubic_arc_length(*edge_control_points("cubic", a, b), cubic_steps)
        measures.append(EdgeMeasure(edge.id, edge.kind, length_px, angle_deg(a.point, b.point)))
    return measures


def _node_extent(figure: Figure) -> Optional[tuple]:
    return points_bounds([node.point for node in figure.nodes])


def circle_measure(figure: Figure, tolerance: Optional[float] = None) -> Optional[CircleMeasure]:
    """Radii from the node bounding box; a circle when the radii agree within ``tolerance``."""

    bounds = _node_extent(figure)
    if bounds is None:
        return None
    tol = tolerance if tolerance is not None else get_kernel_config().circle_tolerance
    min_x, min_y, max_x, max_y = bounds
    rx = (max_x - min_x) / 2.0
    ry = (max_y - min_y) / 2.0
    largest = max(rx, ry)
    if largest <= 0.0 or abs(rx - ry) / largest <= tol:
        radius = (rx + ry) / 2.0
        return CircleMeasure(
            rx_px=rx,
            ry_px=ry,
            is_circle=True,
            circumference_px=2.0 * math.pi * radius,
            radius_px=radius,
            diameter_px=2.0 * radius,
        )
    return CircleMeasure(rx_px=rx, ry_px=ry, is_circle=False, circumference_px=ellipse_circumference(rx, ry))


def curve_measure(figure: Figure, steps: Optional[int] = None) -> Optional[CurveMeasure]:
    n = steps if steps is not None else get_kernel_config().curve_polyline_steps
    poly = figure_local_polyline(figure, n)
    if poly.shape[0] < 2:
        return None
    length_px = polyline_length(poly)
    if poly.shape[0] < 3:
        return CurveMeasure(length_px=length_px)

    count = poly.shape[0]
    mid = max(1, min(count - 2, count // 2))
    prev_pt = (float(poly[mid - 1, 0]), float(poly[mid - 1, 1]))
    mid_pt = (float(poly[mid, 0]), float(poly[mid, 1]))
    next_pt = (float(poly[mid + 1, 0]), float(poly[mid + 1, 1]))
    radius = circumradius(prev_pt, mid_pt, next_pt)
    return CurveMeasure(
        length_px=length_px,
        tangent_angle_deg_at_mid=angle_deg(prev_pt, next_pt),
        curvature_radius_px_at_mid=radius if math.isfinite(radius) else None,
    )


def rect_measure(figure: Figure) -> Optional[RectMeasure]:
    bounds = _node_extent(figure)
    if bounds is None:
        return None
    min_x, min_y, max_x, max_y = bounds
    return RectMeasure(width_px=max_x - min_x, height_px=max_y - min_y)


def compute_measures(figure: Figure, cubic_steps: Optional[int] = None) -> Measures:
    """Compute the measurement cache for ``figure`` from its nodes and edges."""

    steps = cubic_steps if cubic_steps is not None else get_kernel_config().measure_cubic_steps
    per_edge = _edge_measures(figure, steps)
    total = sum(item.length_px for item in per_edge)

    circle = circle_measure(figure) if figure.tool == "circle" else None
    rect = rect_measure(figure) if figure.tool == "rectangle" else None
    curve = None
    if figure.tool == "curve":
        curve = curve_measure(figure)
        if curve is not None:
            # A single high-resolution walk is steadier than summing per-edge samples.
            total = curve.length_px

    return Measures(
        total_length_px=total,
        per_edge=tuple(per_edge),
        circle=circle,
        curve=curve,
        rect=rect,
    )


def with_measures(figure: Figure) -> Figure:
    return replace(figure, measures=compute_measures(figure))


__all__ = [
    "circle_measure",
    "compute_measures",
    "curve_measure",
    "rect_measure",
    "with_measures",
]
