"""2D vector algebra, cubic Bézier sampling and polyline measurement.

All functions are pure and work in pixel units. Points are plain ``(x, y)``
tuples; sampling helpers return ``numpy`` arrays of shape ``(n, 2)``.

Degenerate-input policy: ``norm`` of a vector shorter than ``_NORM_EPS``
returns the unit x axis ``(1, 0)`` instead of dividing by zero, and
``circumradius`` of a collinear triple returns ``math.inf``. Neither raises,
since both situations occur routinely while a node is being dragged.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple, Union

import numpy as np

Vec2 = Tuple[float, float]
PointsLike = Union[np.ndarray, Sequence[Vec2]]

_NORM_EPS = 1e-9
_AREA_EPS = 1e-9

KAPPA = 0.5522847498307936


def add(a: Vec2, b: Vec2) -> Vec2:
    return a[0] + b[0], a[1] + b[1]


def sub(a: Vec2, b: Vec2) -> Vec2:
    return a[0] - b[0], a[1] - b[1]


def mul(a: Vec2, k: float) -> Vec2:
    return a[0] * k, a[1] * k


def dot(a: Vec2, b: Vec2) -> float:
    return a[0] * b[0] + a[1] * b[1]


def cross(a: Vec2, b: Vec2) -> float:
    return a[0] * b[1] - a[1] * b[0]


def length(v: Vec2) -> float:
    return math.hypot(v[0], v[1])


def dist(a: Vec2, b: Vec2) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def norm(v: Vec2) -> Vec2:
    """Return ``v`` scaled to unit length, or ``(1, 0)`` for a near-zero ``v``."""

    l = length(v)
    if l <= _NORM_EPS:
        return 1.0, 0.0
    return v[0] / l, v[1] / l


def lerp(a: Vec2, b: Vec2, t: float) -> Vec2:
    return a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def rotate(p: Vec2, degrees: float) -> Vec2:
    """Rotate ``p`` about the origin; positive angles turn clockwise on screen (y down)."""

    if not degrees:
        return p
    rad = math.radians(degrees)
    c = math.cos(rad)
    s = math.sin(rad)
    return p[0] * c - p[1] * s, p[0] * s + p[1] * c


def rotate_inv(p: Vec2, degrees: float) -> Vec2:
    if not degrees:
        return p
    return rotate(p, -degrees)


def angle_deg(a: Vec2, b: Vec2) -> float:
    return math.degrees(math.atan2(b[1] - a[1], b[0] - a[0]))


def normalize_upright_angle_deg(angle: float) -> float:
    """Map ``angle`` into ``[-90, 90]`` so text laid along it never reads upside down."""

    a = ((angle + 180.0) % 360.0) - 180.0
    if a > 90.0:
        a -= 180.0
    if a < -90.0:
        a += 180.0
    return a


def cubic_at(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, t: float) -> Vec2:
    mt = 1.0 - t
    a = mt * mt * mt
    b = 3.0 * mt * mt * t
    c = 3.0 * mt * t * t
    d = t * t * t
    return (
        a * p0[0] + b * p1[0] + c * p2[0] + d * p3[0],
        a * p0[1] + b * p1[1] + c * p2[1] + d * p3[1],
    )


def sample_cubic(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, steps: int) -> np.ndarray:
    """Evaluate the cubic at ``steps + 1`` uniformly spaced parameter values.

    The samples are uniform in ``t``, not in arc length; callers that need an
    accurate length raise ``steps``.
    """

    n = max(1, int(steps))
    t = np.linspace(0.0, 1.0, n + 1)[:, None]
    mt = 1.0 - t
    ctrl = np.asarray((p0, p1, p2, p3), dtype=float)
    return (
        (mt ** 3) * ctrl[0]
        + (3.0 * mt * mt * t) * ctrl[1]
        + (3.0 * mt * t * t) * ctrl[2]
        + (t ** 3) * ctrl[3]
    )


def polyline_length(points: PointsLike) -> float:
    pts = np.asarray(points, dtype=float)
    if pts.ndim != 2 or pts.shape[0] < 2:
        return 0.0
    deltas = np.diff(pts, axis=0)
    return float(np.hypot(deltas[:, 0], deltas[:, 1]).sum())


def line_length(a: Vec2, b: Vec2) -> float:
    return dist(a, b)


def cubic_arc_length(p0: Vec2, p1: Vec2, p2: Vec2, p3: Vec2, steps: int = 80) -> float:
    return polyline_length(sample_cubic(p0, p1, p2, p3, steps))


def mid_and_tangent(points: PointsLike) -> Optional[Tuple[Vec2, Vec2]]:
    pts = np.asarray(points, dtype=float)
    if pts.ndim != 2 or pts.shape[0] < 2:
        return None
    if pts.shape[0] == 2:
        a = (float(pts[0, 0]), float(pts[0, 1]))
        b = (float(pts[1, 0]), float(pts[1, 1]))
        return lerp(a, b, 0.5), sub(b, a)
    mid = (pts.shape[0] - 1) // 2
    prev = pts[max(0, mid - 1)]
    nxt = pts[min(pts.shape[0] - 1, mid + 1)]
    return (
        (float(pts[mid, 0]), float(pts[mid, 1])),
        (float(nxt[0] - prev[0]), float(nxt[1] - prev[1])),
    )


def polyline_point_at_distance(points: PointsLike, distance: float) -> Optional[Tuple[Vec2, Vec2]]:
    """Return ``(point, tangent)`` at ``distance`` along the polyline, clamped to its ends."""

    pts = [(float(p[0]), float(p[1])) for p in np.asarray(points, dtype=float)]
    if len(pts) < 2:
        return None
    total = polyline_length(pts)
    if total <= _NORM_EPS:
        return pts[0], sub(pts[-1], pts[0])

    d = clamp(distance, 0.0, total)
    walked = 0.0
    for a, b in zip(pts, pts[1:]):
        seg = dist(a, b)
        if seg <= _NORM_EPS:
            continue
        if walked + seg >= d:
            return lerp(a, b, (d - walked) / seg), sub(b, a)
        walked += seg
    return pts[-1], sub(pts[-1], pts[-2])


def point_to_segment_distance(p: Vec2, a: Vec2, b: Vec2) -> Tuple[float, float]:
    """Return ``(distance, t)`` where ``t`` is the clamped projection parameter on ``a-b``."""

    ab = sub(b, a)
    ab_len2 = dot(ab, ab)
    if ab_len2 <= _NORM_EPS:
        return dist(p, a), 0.0
    t = clamp(dot(sub(p, a), ab) / ab_len2, 0.0, 1.0)
    return dist(p, add(a, mul(ab, t))), t


def circumradius(a: Vec2, b: Vec2, c: Vec2) -> float:
    """Radius of the circle through ``a``, ``b``, ``c``; ``math.inf`` for collinear points."""

    area2 = abs(cross(sub(b, a), sub(c, a)))
    if not math.isfinite(area2) or area2 <= _AREA_EPS:
        return math.inf
    return (dist(a, b) * dist(b, c) * dist(c, a)) / (2.0 * area2)


def reflect(v: Vec2, u: Vec2) -> Vec2:
    """Reflect ``v`` across the line through the origin with direction ``u``."""

    unit = norm(u)
    proj = mul(unit, dot(v, unit))
    return 2.0 * proj[0] - v[0], 2.0 * proj[1] - v[1]


def reflect_point(p: Vec2, axis_point: Vec2, axis_dir: Vec2) -> Vec2:
    return add(axis_point, reflect(sub(p, axis_point), axis_dir))


def ellipse_circumference(rx: float, ry: float) -> float:
    """Ramanujan's second approximation of an ellipse perimeter."""

    a = abs(rx)
    b = abs(ry)
    if a + b <= 0.0:
        return 0.0
    h = ((a - b) ** 2) / ((a + b) ** 2)
    return math.pi * (a + b) * (1.0 + (3.0 * h) / (10.0 + math.sqrt(4.0 - 3.0 * h)))


def points_bounds(points: PointsLike) -> Optional[Tuple[float, float, float, float]]:
    """Return ``(min_x, min_y, max_x, max_y)`` or ``None`` for an empty input."""

    pts = np.asarray(points, dtype=float)
    if pts.ndim != 2 or pts.shape[0] == 0:
        return None
    mins = pts.min(axis=0)
    maxs = pts.max(axis=0)
    return float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1])


__all__ = [
    "KAPPA",
    "Vec2",
    "add",
    "angle_deg",
    "circumradius",
    "clamp",
    "cross",
    "cubic_arc_length",
    "cubic_at",
    "dist",
    "dot",
    "ellipse_circumference",
    "length",
    "lerp",
    "line_length",
    "mid_and_tangent",
    "mul",
    "norm",
    "normalize_upright_angle_deg",
    "point_to_segment_distance",
    "points_bounds",
    "polyline_length",
    "polyline_point_at_distance",
    "reflect",
    "reflect_point",
    "rotate",
    "rotate_inv",
    "sample_cubic",
]
