"""Core data structures for pattern figures."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Iterator, List, Literal, Mapping, Optional, Sequence, Tuple

from .geometry import Vec2

logger = logging.getLogger(__name__)

FigureId = str
NodeId = str
EdgeId = str

EdgeKind = Literal["line", "cubic"]
NodeMode = Literal["corner", "smooth"]
FigureKind = Literal["mold", "seam"]
MirrorRole = Literal["original", "mirror"]

EDGE_KINDS = ("line", "cubic")
NODE_MODES = ("corner", "smooth")
FIGURE_KINDS = ("mold", "seam")
MIRROR_ROLES = ("original", "mirror")


@dataclass(frozen=True)
class Node:
    """A point on a figure path in local coordinates, with optional Bézier handles."""

    id: NodeId
    x: float
    y: float
    mode: NodeMode = "corner"
    in_handle: Optional[Vec2] = None
    out_handle: Optional[Vec2] = None

    @property
    def point(self) -> Vec2:
        return (self.x, self.y)

    def translated(self, dx: float, dy: float) -> "Node":
        """Move the node and both handles by the same delta."""

        return replace(
            self,
            x=self.x + dx,
            y=self.y + dy,
            in_handle=None if self.in_handle is None else (self.in_handle[0] + dx, self.in_handle[1] + dy),
            out_handle=None if self.out_handle is None else (self.out_handle[0] + dx, self.out_handle[1] + dy),
        )


@dataclass(frozen=True)
class Edge:
    id: EdgeId
    from_id: NodeId
    to_id: NodeId
    kind: EdgeKind = "line"


@dataclass(frozen=True)
class MirrorLink:
    """One half of a symmetric original/mirror pairing."""

    role: MirrorRole
    other_id: FigureId
    pair_id: str
    sync: bool = True
    axis_point_world: Vec2 = (0.0, 0.0)
    axis_dir_world: Vec2 = (0.0, 1.0)


@dataclass(frozen=True)
class EdgeMeasure:
    edge_id: EdgeId
    kind: EdgeKind
    length_px: float
    angle_deg: Optional[float] = None


@dataclass(frozen=True)
class CircleMeasure:
    rx_px: float
    ry_px: float
    is_circle: bool
    circumference_px: float
    radius_px: Optional[float] = None
    diameter_px: Optional[float] = None


@dataclass(frozen=True)
class CurveMeasure:
    length_px: float
    tangent_angle_deg_at_mid: Optional[float] = None
    # None when the midpoint samples are collinear (infinite radius).
    curvature_radius_px_at_mid: Optional[float] = None


@dataclass(frozen=True)
class RectMeasure:
    width_px: float
    height_px: float


@dataclass(frozen=True)
class Measures:
    """Cached, derived statistics for one figure. Never authoritative."""

    total_length_px: float
    per_edge: Tuple[EdgeMeasure, ...] = ()
    circle: Optional[CircleMeasure] = None
    curve: Optional[CurveMeasure] = None
    rect: Optional[RectMeasure] = None
    version: int = 1


@dataclass(frozen=True)
class Figure:
    """Aggregate root: a path of nodes and edges placed in world space."""

    id: FigureId
    tool: str
    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0
    closed: bool = False
    kind: FigureKind = "mold"
    parent_id: Optional[FigureId] = None
    mirror_link: Optional[MirrorLink] = None
    measures: Optional[Measures] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        # Accept lists from callers but store tuples so figures stay hashable values.
        if not isinstance(self.nodes, tuple):
            object.__setattr__(self, "nodes", tuple(self.nodes))
        if not isinstance(self.edges, tuple):
            object.__setattr__(self, "edges", tuple(self.edges))

    @property
    def is_seam(self) -> bool:
        return self.kind == "seam"

    def node(self, node_id: NodeId) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def edge(self, edge_id: EdgeId) -> Optional[Edge]:
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        return None

    def node_map(self) -> Dict[NodeId, Node]:
        return {node.id: node for node in self.nodes}

    def with_nodes(self, nodes: Iterable[Node]) -> "Figure":
        return replace(self, nodes=tuple(nodes))


def _fmt(value: float) -> str:
    return repr(float(value))


def _fmt_point(point: Optional[Vec2]) -> str:
    if point is None:
        return "-"
    return f"{_fmt(point[0])},{_fmt(point[1])}"


def figure_signature(figure: Figure) -> str:
    """Return a content hash of the figure's geometry and placement.

    Cached measures and mirror-link metadata are excluded, so the signature only
    changes when something a reflection depends on changes.
    """

    parts: List[str] = [
        f"tool={figure.tool}",
        f"place={_fmt(figure.x)},{_fmt(figure.y)},{_fmt(figure.rotation)}",
        f"closed={int(figure.closed)}",
    ]
    for node in figure.nodes:
        parts.append(
            f"n:{node.id}:{_fmt(node.x)},{_fmt(node.y)}:{node.mode}"
            f":{_fmt_point(node.in_handle)}:{_fmt_point(node.out_handle)}"
        )
    for edge in figure.edges:
        parts.append(f"e:{edge.id}:{edge.from_id}>{edge.to_id}:{edge.kind}")
    return hashlib.sha256("|".join(parts).encode("utf8")).hexdigest()


def build_adjacency(figure: Figure) -> Dict[NodeId, List[EdgeId]]:
    """Map each node id to the ids of its outgoing edges, in edge order."""

    adjacency: Dict[NodeId, List[EdgeId]] = {}
    for edge in figure.edges:
        adjacency.setdefault(edge.from_id, []).append(edge.id)
    return adjacency


@dataclass
class FigureIndex:
    """Id lookup over a figure list, rebuilt once per commit."""

    figures: Sequence[Figure]
    by_id: Dict[FigureId, Figure] = field(init=False, default_factory=dict)

    def __post_init__(self) -> None:
        for figure in self.figures:
            if figure.id in self.by_id:
                logger.warning("Duplicate figure id %r; keeping the first occurrence", figure.id)
                continue
            self.by_id[figure.id] = figure

    def __contains__(self, figure_id: object) -> bool:
        return figure_id in self.by_id

    def __iter__(self) -> Iterator[Figure]:
        return iter(self.figures)

    def __len__(self) -> int:
        return len(self.figures)

    def get(self, figure_id: Optional[FigureId]) -> Optional[Figure]:
        if figure_id is None:
            return None
        return self.by_id.get(figure_id)

    def parent_of(self, figure: Figure) -> Optional[Figure]:
        return self.get(figure.parent_id) if figure.is_seam else None

    def seams_of(self, parent_id: FigureId) -> List[Figure]:
        return [fig for fig in self.figures if fig.is_seam and fig.parent_id == parent_id]


def cascade_delete(figures: Sequence[Figure], figure_id: FigureId) -> List[Figure]:
    """Return ``figures`` without ``figure_id`` and without the seams derived from it."""

    doomed = {figure_id}
    doomed.update(fig.id for fig in figures if fig.is_seam and fig.parent_id == figure_id)
    remaining = [fig for fig in figures if fig.id not in doomed]
    logger.info("Deleted %d figure(s) for %s", len(figures) - len(remaining), figure_id)
    return remaining


def replace_figures(figures: Sequence[Figure], updates: Mapping[FigureId, Figure]) -> List[Figure]:
    """Return ``figures`` with entries swapped for ``updates`` by id, keeping order."""

    return [updates.get(fig.id, fig) for fig in figures]


__all__ = [
    "EDGE_KINDS",
    "FIGURE_KINDS",
    "MIRROR_ROLES",
    "NODE_MODES",
    "CircleMeasure",
    "CurveMeasure",
    "Edge",
    "EdgeId",
    "EdgeKind",
    "EdgeMeasure",
    "Figure",
    "FigureId",
    "FigureIndex",
    "FigureKind",
    "Measures",
    "MirrorLink",
    "MirrorRole",
    "Node",
    "NodeId",
    "NodeMode",
    "RectMeasure",
    "build_adjacency",
    "cascade_delete",
    "figure_signature",
    "replace_figures",
]
