"""Point labels printed next to figure nodes on exported pages."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Literal, Sequence

from .geometry import Vec2, add, length, mul, norm, sub
from .model import Figure, FigureId, NodeId
from .transform import centroid_local, local_to_world

logger = logging.getLogger(__name__)

PointLabelsMode = Literal["off", "numGlobal", "numPerFigure", "alphaGlobal", "alphaPerFigure"]
POINT_LABELS_MODES = ("off", "numGlobal", "numPerFigure", "alphaGlobal", "alphaPerFigure")

LABEL_OFFSET_PX = 14.0
_FALLBACK_DIRECTION = (0.707106781, -0.707106781)

NodeLabels = Dict[FigureId, Dict[NodeId, str]]


@dataclass(frozen=True)
class NodeLabel:
    node_id: NodeId
    text: str
    position: Vec2
    align_right: bool


def cycle_point_labels_mode(mode: str) -> PointLabelsMode:
    """Next mode in the toolbar cycle; anything unknown goes back to ``"off"``."""

    if mode not in POINT_LABELS_MODES:
        return "off"
    index = POINT_LABELS_MODES.index(mode)
    return POINT_LABELS_MODES[(index + 1) % len(POINT_LABELS_MODES)]


def index_to_alpha_label(index: int) -> str:
    """Spreadsheet-style column name for a 1-based index: 1 -> A, 26 -> Z, 27 -> AA."""

    n = int(index)
    if n <= 0:
        return "A"
    out = ""
    while n > 0:
        n, rem = divmod(n - 1, 26)
        out = chr(ord("A") + rem) + out
    return out


def compute_node_labels(figures: Sequence[Figure], mode: str) -> NodeLabels:
    """Label every node of ``figures`` in list order.

    Global modes count across the whole list; per-figure modes restart at 1
    for each figure. ``"off"`` yields an empty mapping.
    """

    if mode not in POINT_LABELS_MODES:
        raise ValueError(f"unknown point labels mode {mode!r}")
    out: NodeLabels = {}
    if mode == "off":
        return out

    global_mode = mode in ("numGlobal", "alphaGlobal")
    numeric = mode in ("numGlobal", "numPerFigure")
    global_index = 1
    for figure in figures:
        per_figure_index = 1
        labels: Dict[NodeId, str] = {}
        for node in figure.nodes:
            if global_mode:
                index = global_index
                global_index += 1
            else:
                index = per_figure_index
                per_figure_index += 1
            labels[node.id] = str(index) if numeric else index_to_alpha_label(index)
        out[figure.id] = labels
    logger.debug("Labelled %d figure(s) in %s mode", len(out), mode)
    return out


def place_node_labels(figure: Figure, labels: Dict[NodeId, str], offset_px: float = LABEL_OFFSET_PX) -> List[NodeLabel]:
    """World positions for ``labels``, pushed ``offset_px`` away from the vertex centroid.

    A node sitting on the centroid is pushed up and to the right. Labels on
    the left of the centroid are flagged for right alignment so the text
    grows away from the outline.
    """

    centroid = centroid_local(figure)
    placed: List[NodeLabel] = []
    for node in figure.nodes:
        text = labels.get(node.id)
        if not text:
            continue
        away = sub(node.point, centroid)
        direction = norm(away) if length(away) > 1e-6 else _FALLBACK_DIRECTION
        position = local_to_world(figure, add(node.point, mul(direction, offset_px)))
        placed.append(NodeLabel(node.id, text.upper(), position, away[0] < 0))
    return placed


__all__ = [
    "LABEL_OFFSET_PX",
    "NodeLabel",
    "NodeLabels",
    "POINT_LABELS_MODES",
    "PointLabelsMode",
    "compute_node_labels",
    "cycle_point_labels_mode",
    "index_to_alpha_label",
    "place_node_labels",
]
