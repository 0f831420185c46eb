"""Set an edge to a target arc length by moving one or both endpoints.

Line edges are solved exactly. Cubic edges have no closed-form inverse for
arc length, so the endpoint is pushed along its end tangent and the
displacement is found by bracketing followed by bisection on the sampled
length. Midpoint-anchored cubic edits use a one-shot proportional chord
scaling instead; it is stable but only approximate on strongly curved edges.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Literal, Optional, Tuple

from scipy.optimize import bisect

from .config import KernelConfig, get_kernel_config
from .geometry import Vec2, add, clamp, cubic_arc_length, length, line_length, mul, norm, sub
from .logging_utils import apply_debug_logging
from .model import Edge, EdgeId, Figure, Node, NodeId
from .transform import edge_control_points

logger = logging.getLogger(__name__)

EdgeAnchor = Literal["start", "end", "mid"]
EDGE_ANCHORS = ("start", "end", "mid")

_TANGENT_EPS = 1e-6


@dataclass(frozen=True)
class _EndMove:
    start: Node
    end: Node
    moving_end: Literal["from", "to"]
    direction: Vec2


def _edge_length_at(move: _EndMove, s: float, steps: int) -> float:
    """Length of the edge after moving one endpoint (and its handle) by ``s`` along the direction."""

    delta = mul(move.direction, s)
    p0, p1, p2, p3 = edge_control_points("cubic", move.start, move.end)
    if move.moving_end == "from":
        p0 = add(p0, delta)
        p1 = add(p1, delta)
    else:
        p2 = add(p2, delta)
        p3 = add(p3, delta)
    return cubic_arc_length(p0, p1, p2, p3, steps)


def _solve_end_displacement(
    move: _EndMove,
    target_length_px: float,
    config: Optional[KernelConfig] = None,
) -> float:
    """Return the signed displacement along ``move.direction`` that reaches the target length."""

    cfg = config or get_kernel_config()
    steps = cfg.solver_cubic_steps
    target = max(cfg.min_edge_length_px, target_length_px)

    base_len = _edge_length_at(move, 0.0, steps)
    if base_len <= 1e-9:
        logger.debug("Edge is degenerate (length %.3g); leaving it in place", base_len)
        return 0.0

    want_increase = target > base_len

    def _residual(s: float) -> float:
        return _edge_length_at(move, s, steps) - target

    hi = base_len if want_increase else -base_len
    hi_len = _edge_length_at(move, hi, steps)

    def _crosses(value: float) -> bool:
        return value >= target if want_increase else value <= target

    for _ in range(cfg.solver_bracket_iterations):
        if _crosses(hi_len):
            break
        hi *= 2.0
        hi_len = _edge_length_at(move, hi, steps)

    if not _crosses(hi_len):
        fallback = clamp(target - base_len, -4.0 * base_len, 4.0 * base_len)
        logger.info(
            "Could not bracket target length %.4g (base %.4g); using proportional displacement %.4g",
            target,
            base_len,
            fallback,
        )
        return fallback

    lo, hi = sorted((0.0, hi))
    return float(
        bisect(
            _residual,
            lo,
            hi,
            xtol=1e-12,
            maxiter=cfg.solver_bisect_iterations,
            disp=False,
        )
    )


def _translate(nodes: Dict[NodeId, Node], node_id: NodeId, delta: Vec2) -> None:
    nodes[node_id] = nodes[node_id].translated(delta[0], delta[1])


def _resolve_edge(figure: Figure, edge_id: EdgeId) -> Optional[Tuple[Edge, Node, Node]]:
    edge = figure.edge(edge_id)
    if edge is None:
        logger.warning("Figure %s has no edge %s", figure.id, edge_id)
        return None
    a = figure.node(edge.from_id)
    b = figure.node(edge.to_id)
    if a is None or b is None:
        logger.warning("Edge %s of figure %s references a missing node", edge_id, figure.id)
        return None
    return edge, a, b


def set_edge_target_length(
    figure: Figure,
    edge_id: EdgeId,
    target_length_px: float,
    anchor: EdgeAnchor = "start",
    *,
    config: Optional[KernelConfig] = None,
) -> Optional[Figure]:
    """Return a copy of ``figure`` whose edge ``edge_id`` has arc length ``target_length_px``.

    ``anchor`` selects what stays put: ``"start"`` keeps the ``from`` node,
    ``"end"`` keeps the ``to`` node and ``"mid"`` keeps the chord midpoint.
    Handles move rigidly with their node. Returns ``None`` when the edge or one
    of its endpoints cannot be found.
    """

    if anchor not in EDGE_ANCHORS:
        raise ValueError(f"unknown edge anchor {anchor!r}")
    resolved = _resolve_edge(figure, edge_id)
    if resolved is None:
        return None
    edge, a, b = resolved
    cfg = config or get_kernel_config()
    desired = max(cfg.min_edge_length_px, target_length_px)

    chord = sub(b.point, a.point)
    chord_dir = norm(chord)
    nodes = figure.node_map()

    if edge.kind == "line":
        if anchor == "start":
            _translate(nodes, b.id, sub(add(a.point, mul(chord_dir, desired)), b.point))
        elif anchor == "end":
            _translate(nodes, a.id, sub(sub(b.point, mul(chord_dir, desired)), a.point))
        else:
            mid = mul(add(a.point, b.point), 0.5)
            half = mul(chord_dir, desired / 2.0)
            _translate(nodes, a.id, sub(sub(mid, half), a.point))
            _translate(nodes, b.id, sub(add(mid, half), b.point))
    elif anchor == "mid":
        base_len = cubic_arc_length(*edge_control_points("cubic", a, b), cfg.solver_cubic_steps)
        k = desired / base_len if base_len > _TANGENT_EPS else 1.0
        shift = (k - 1.0) * length(chord) / 2.0
        _translate(nodes, a.id, mul(chord_dir, -shift))
        _translate(nodes, b.id, mul(chord_dir, shift))
    else:
        p0, p1, p2, p3 = edge_control_points("cubic", a, b)
        if anchor == "start":
            tangent = sub(p3, p2)
            direction = norm(tangent if length(tangent) > _TANGENT_EPS else chord)
            move = _EndMove(a, b, "to", direction)
            moving = b.id
        else:
            # Outward tangent at the from end, mirroring p3 - p2 above; p1 - p0
            # points into the curve and bisects towards a looped edge.
            tangent = sub(p0, p1)
            direction = norm(tangent if length(tangent) > _TANGENT_EPS else mul(chord, -1.0))
            move = _EndMove(a, b, "from", direction)
            moving = a.id
        s = _solve_end_displacement(move, desired, cfg)
        _translate(nodes, moving, mul(direction, s))

    logger.debug(
        "Set edge %s of figure %s to %.4g px (anchor=%s, kind=%s)",
        edge_id,
        figure.id,
        desired,
        anchor,
        edge.kind,
    )
    return figure.with_nodes(nodes[node.id] for node in figure.nodes)


def edge_arc_length(figure: Figure, edge_id: EdgeId, steps: Optional[int] = None) -> Optional[float]:
    """Arc length of one edge: exact for lines, sampled for cubics."""

    resolved = _resolve_edge(figure, edge_id)
    if resolved is None:
        return None
    edge, a, b = resolved
    if edge.kind == "line":
        return line_length(a.point, b.point)
    n = steps if steps is not None else get_kernel_config().solver_cubic_steps
    return cubic_arc_length(*edge_control_points("cubic", a, b), n)


__all__ = [
    "EDGE_ANCHORS",
    "EdgeAnchor",
    "edge_arc_length",
    "set_edge_target_length",
]

apply_debug_logging(globals(), logger=logger)
