"""Switch an edge between straight and cubic without disturbing its neighbours.

A node carries one incoming and one outgoing handle shared by every edge on
that side, so a handle is only created or cleared when no other cubic edge
relies on it.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Tuple

from .geometry import add, clamp, length, mul, norm, sub
from .model import Edge, EdgeId, Figure, Node, NodeId

logger = logging.getLogger(__name__)


def _other_cubic_from(figure: Figure, node_id: NodeId, exclude: EdgeId) -> bool:
    return any(e.id != exclude and e.kind == "cubic" and e.from_id == node_id for e in figure.edges)


def _other_cubic_into(figure: Figure, node_id: NodeId, exclude: EdgeId) -> bool:
    return any(e.id != exclude and e.kind == "cubic" and e.to_id == node_id for e in figure.edges)


def _endpoints(figure: Figure, edge_id: EdgeId) -> Optional[Tuple[Edge, Node, Node]]:
    edge = figure.edge(edge_id)
    if edge is None:
        return None
    a = figure.node(edge.from_id)
    b = figure.node(edge.to_id)
    if a is None or b is None:
        logger.warning("Edge %s of figure %s references a missing node", edge_id, figure.id)
        return None
    return edge, a, b


def _rebuild(figure: Figure, edge: Edge, nodes: dict) -> Figure:
    return replace(
        figure,
        nodes=tuple(nodes.get(n.id, n) for n in figure.nodes),
        edges=tuple(edge if e.id == edge.id else e for e in figure.edges),
    )


def convert_edge_to_cubic(figure: Figure, edge_id: EdgeId) -> Figure:
    """Make ``edge_id`` cubic, seeding handles along the chord at a quarter of its length."""

    resolved = _endpoints(figure, edge_id)
    if resolved is None or resolved[0].kind == "cubic":
        return figure
    edge, a, b = resolved

    chord = sub(b.point, a.point)
    chord_len = length(chord)
    direction = norm(chord)
    handle_len = clamp(chord_len * 0.25, 8.0, chord_len * 0.45)
    out_handle = add(a.point, mul(direction, handle_len))
    in_handle = sub(b.point, mul(direction, handle_len))

    updated = {}
    if not _other_cubic_from(figure, a.id, edge_id):
        updated[a.id] = replace(a, mode="smooth", out_handle=out_handle)
    if not _other_cubic_into(figure, b.id, edge_id):
        current = updated.get(b.id, b)
        updated[b.id] = replace(current, mode="smooth", in_handle=in_handle)
    return _rebuild(figure, replace(edge, kind="cubic"), updated)


def convert_edge_to_line(figure: Figure, edge_id: EdgeId) -> Figure:
    """Make ``edge_id`` straight, clearing only the handles no other cubic edge uses."""

    resolved = _endpoints(figure, edge_id)
    if resolved is None or resolved[0].kind == "line":
        return figure
    edge, a, b = resolved

    def _settle(node: Node) -> Node:
        still_curved = _other_cubic_from(figure, node.id, edge_id) or _other_cubic_into(figure, node.id, edge_id)
        if not still_curved and node.in_handle is None and node.out_handle is None:
            return replace(node, mode="corner")
        return node

    updated = {}
    if not _other_cubic_from(figure, a.id, edge_id):
        updated[a.id] = _settle(replace(a, out_handle=None))
    if not _other_cubic_into(figure, b.id, edge_id):
        current = updated.get(b.id, b)
        updated[b.id] = _settle(replace(current, in_handle=None))
    return _rebuild(figure, replace(edge, kind="line"), updated)


__all__ = ["convert_edge_to_cubic", "convert_edge_to_line"]
