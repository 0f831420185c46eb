"""Read and write design documents (``version: 2`` JSON, camelCase keys)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .model import Edge, Figure, Measures, MirrorLink, Node
from .paper import ExportSettings, PageSettingsError, resolve_export_settings
from .validate import ValidationError

logger = logging.getLogger(__name__)

DESIGN_VERSION = 2


@dataclass
class Design:
    figures: List[Figure]
    page_settings: Optional[ExportSettings] = None
    meta: Dict[str, Any] = field(default_factory=dict)


def _point(value: Any) -> Optional[tuple]:
    if value is None:
        return None
    if isinstance(value, Mapping):
        return float(value["x"]), float(value["y"])
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return float(value[0]), float(value[1])
    raise ValidationError(f"expected a point, got {value!r}")


def _point_dict(value: Optional[tuple]) -> Optional[Dict[str, float]]:
    if value is None:
        return None
    return {"x": value[0], "y": value[1]}


def node_from_dict(data: Mapping[str, Any]) -> Node:
    return Node(
        id=str(data["id"]),
        x=float(data["x"]),
        y=float(data["y"]),
        mode=data.get("mode", "corner"),
        in_handle=_point(data.get("inHandle")),
        out_handle=_point(data.get("outHandle")),
    )


def edge_from_dict(data: Mapping[str, Any]) -> Edge:
    return Edge(id=str(data["id"]), from_id=str(data["from"]), to_id=str(data["to"]), kind=data.get("kind", "line"))


def mirror_link_from_dict(data: Mapping[str, Any]) -> MirrorLink:
    return MirrorLink(
        role=data["role"],
        other_id=str(data["otherId"]),
        pair_id=str(data["pairId"]),
        sync=bool(data.get("sync", True)),
        axis_point_world=_point(data.get("axisPointWorld")) or (0.0, 0.0),
        axis_dir_world=_point(data.get("axisDirWorld")) or (0.0, 1.0),
    )


def figure_from_dict(data: Mapping[str, Any]) -> Figure:
    """Build a figure from its persisted form; cached measures are not read back."""

    try:
        link = data.get("mirrorLink")
        return Figure(
            id=str(data["id"]),
            tool=str(data.get("tool", "line")),
            nodes=tuple(node_from_dict(n) for n in data.get("nodes", [])),
            edges=tuple(edge_from_dict(e) for e in data.get("edges", [])),
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            rotation=float(data.get("rotation") or 0.0),
            closed=bool(data.get("closed", False)),
            kind=data.get("kind") or "mold",
            parent_id=data.get("parentId"),
            mirror_link=mirror_link_from_dict(link) if link else None,
            name=data.get("name"),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationError(f"malformed figure {data.get('id', '?')!r}: {exc}") from exc


def measures_to_dict(measures: Measures) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "version": measures.version,
        "figureLengthPx": measures.total_length_px,
        "perEdge": [
            {"edgeId": m.edge_id, "kind": m.kind, "lengthPx": m.length_px, "angleDeg": m.angle_deg}
            for m in measures.per_edge
        ],
    }
    if measures.circle is not None:
        c = measures.circle
        out["circle"] = {
            "rxPx": c.rx_px,
            "ryPx": c.ry_px,
            "isCircle": c.is_circle,
            "radiusPx": c.radius_px,
            "diameterPx": c.diameter_px,
            "circumferencePx": c.circumference_px,
        }
    if measures.curve is not None:
        out["curve"] = {
            "lengthPx": measures.curve.length_px,
            "tangentAngleDegAtMid": measures.curve.tangent_angle_deg_at_mid,
            "curvatureRadiusPxAtMid": measures.curve.curvature_radius_px_at_mid,
        }
    if measures.rect is not None:
        out["rect"] = {"widthPx": measures.rect.width_px, "heightPx": measures.rect.height_px}
    return out


def figure_to_dict(figure: Figure) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "id": figure.id,
        "tool": figure.tool,
        "x": figure.x,
        "y": figure.y,
        "rotation": figure.rotation,
        "closed": figure.closed,
        "nodes": [],
        "edges": [{"id": e.id, "from": e.from_id, "to": e.to_id, "kind": e.kind} for e in figure.edges],
    }
    for node in figure.nodes:
        entry: Dict[str, Any] = {"id": node.id, "x": node.x, "y": node.y, "mode": node.mode}
        if node.in_handle is not None:
            entry["inHandle"] = _point_dict(node.in_handle)
        if node.out_handle is not None:
            entry["outHandle"] = _point_dict(node.out_handle)
        out["nodes"].append(entry)
    if figure.is_seam:
        out["kind"] = "seam"
        out["parentId"] = figure.parent_id
    if figure.name:
        out["name"] = figure.name
    link = figure.mirror_link
    if link is not None:
        out["mirrorLink"] = {
            "role": link.role,
            "otherId": link.other_id,
            "pairId": link.pair_id,
            "sync": link.sync,
            "axisPointWorld": _point_dict(link.axis_point_world),
            "axisDirWorld": _point_dict(link.axis_dir_world),
        }
    if figure.measures is not None:
        out["measures"] = measures_to_dict(figure.measures)
    return out


def design_from_dict(data: Mapping[str, Any]) -> Design:
    version = data.get("version", DESIGN_VERSION)
    if version != DESIGN_VERSION:
        raise ValidationError(f"unsupported design version {version!r}")
    figures = [figure_from_dict(item) for item in data.get("figures", [])]
    guide = data.get("pageGuideSettings")
    settings = None
    if guide:
        try:
            settings = resolve_export_settings(
                {
                    "paper_size": guide.get("paperSize", "A4"),
                    "orientation": guide.get("orientation", "portrait"),
                    "margin_cm": float(guide.get("marginCm", 1.0)),
                }
            )
        except (PageSettingsError, TypeError, ValueError) as exc:
            raise ValidationError(f"invalid pageGuideSettings: {exc}") from exc
    return Design(figures=figures, page_settings=settings, meta=dict(data.get("meta") or {}))


def design_to_dict(design: Design) -> Dict[str, Any]:
    out: Dict[str, Any] = {"version": DESIGN_VERSION, "figures": [figure_to_dict(f) for f in design.figures]}
    if design.page_settings is not None:
        out["pageGuideSettings"] = {
            "paperSize": design.page_settings.paper_size,
            "orientation": design.page_settings.orientation,
            "marginCm": design.page_settings.margin_cm,
        }
    if design.meta:
        out["meta"] = design.meta
    return out


def load_design(path: Union[str, Path]) -> Design:
    source = Path(path)
    logger.info("Loading design from %s", source)
    with source.open(encoding="utf-8") as fin:
        try:
            data = json.load(fin)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"{source} is not valid JSON: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ValidationError(f"{source} must hold a JSON object, got {type(data).__name__}")
    design = design_from_dict(data)
    logger.info("Loaded %d figure(s)", len(design.figures))
    return design


def dump_design(design: Design, path: Union[str, Path]) -> None:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(design_to_dict(design), indent=2), encoding="utf-8")
    logger.info("Wrote %d figure(s) to %s", len(design.figures), target)


__all__ = [
    "DESIGN_VERSION",
    "Design",
    "design_from_dict",
    "design_to_dict",
    "dump_design",
    "figure_from_dict",
    "figure_to_dict",
    "load_design",
    "measures_to_dict",
]
