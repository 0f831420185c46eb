"""Partition the drawing into printable page tiles.

The union bounding box of all figures is padded, then covered by a row-major
grid of tiles the size of the printable page area. Tiles that no figure
touches are dropped unless blank pages are requested. Nothing here draws:
the plan and the per-tile point lists are handed to whichever backend
produces the PDF, SVG or bitmap pages.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .config import get_kernel_config
from .geometry import Vec2
from .labels import NodeLabel, compute_node_labels, place_node_labels
from .logging_utils import apply_debug_logging
from .model import Figure, FigureId
from .paper import ExportSettings, PageSettingsError, safe_area_px
from .transform import Rect, figure_world_polyline, world_bounding_box

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TileDescriptor:
    offset_px: Vec2
    row: int
    col: int
    width_px: float
    height_px: float
    figures_in_tile: Tuple[FigureId, ...] = ()

    @property
    def rect(self) -> Rect:
        return Rect(self.offset_px[0], self.offset_px[1], self.width_px, self.height_px)

    @property
    def label(self) -> str:
        """Assembly label, e.g. ``"R1C2"`` for the first row, second column."""

        return f"R{self.row + 1}C{self.col + 1}"


@dataclass(frozen=True)
class TilePlan:
    export_area: Optional[Rect]
    rows: int
    cols: int
    tile_width_px: float
    tile_height_px: float
    tiles: Tuple[TileDescriptor, ...]

    @property
    def page_count(self) -> int:
        return len(self.tiles)


@dataclass(frozen=True)
class TileFigure:
    figure_id: FigureId
    points: List[Vec2]
    closed: bool
    labels: Tuple[NodeLabel, ...] = ()


@dataclass(frozen=True)
class TileContent:
    tile: TileDescriptor
    page_number: int
    figures: Tuple[TileFigure, ...]


def partition_tiles(
    figures: Sequence[Figure],
    tile_width_px: float,
    tile_height_px: float,
    *,
    include_blank_pages: bool = False,
    padding_px: Optional[float] = None,
) -> TilePlan:
    """Cover the padded union bounding box of ``figures`` with a row-major tile grid."""

    if tile_width_px <= 0 or tile_height_px <= 0:
        raise PageSettingsError(f"tile size must be positive, got {tile_width_px} x {tile_height_px}")
    padding = padding_px if padding_px is not None else get_kernel_config().tile_padding_px

    boxes: Dict[FigureId, Rect] = {}
    order: List[FigureId] = []
    for figure in figures:
        box = world_bounding_box(figure)
        if box is None:
            logger.debug("Figure %s has no drawable edges; excluded from tiling", figure.id)
            continue
        if figure.id not in boxes:
            order.append(figure.id)
        boxes[figure.id] = box

    if not boxes:
        logger.info("Nothing to tile: no figure has a bounding box")
        return TilePlan(None, 0, 0, tile_width_px, tile_height_px, ())

    union: Optional[Rect] = None
    for fid in order:
        union = boxes[fid] if union is None else union.union(boxes[fid])
    assert union is not None
    area = union.padded(padding)

    cols = max(1, math.ceil(area.width / tile_width_px))
    rows = max(1, math.ceil(area.height / tile_height_px))

    tiles: List[TileDescriptor] = []
    for row in range(rows):
        for col in range(cols):
            rect = Rect(area.x + col * tile_width_px, area.y + row * tile_height_px, tile_width_px, tile_height_px)
            inside = tuple(fid for fid in order if boxes[fid].intersects(rect))
            if not inside and not include_blank_pages:
                continue
            tiles.append(
                TileDescriptor(
                    offset_px=(rect.x, rect.y),
                    row=row,
                    col=col,
                    width_px=tile_width_px,
                    height_px=tile_height_px,
                    figures_in_tile=inside,
                )
            )

    logger.info(
        "Planned %d tile(s) on a %dx%d grid (tile %.1f x %.1f px)",
        len(tiles),
        rows,
        cols,
        tile_width_px,
        tile_height_px,
    )
    return TilePlan(area, rows, cols, tile_width_px, tile_height_px, tuple(tiles))


def plan_tile_grid(figures: Sequence[Figure], settings: ExportSettings) -> TilePlan:
    width_px, height_px = safe_area_px(settings)
    return partition_tiles(
        figures,
        width_px,
        height_px,
        include_blank_pages=settings.include_blank_pages,
    )


def plan_tiles(figures: Sequence[Figure], settings: ExportSettings) -> List[TileDescriptor]:
    """Return the non-empty (or all, with blank pages) tiles for ``settings``, row-major."""

    return list(plan_tile_grid(figures, settings).tiles)


def iter_tile_polylines(
    figures: Sequence[Figure],
    plan: TilePlan,
    steps_per_curve: int = 120,
    labels_mode: str = "off",
) -> Iterator[TileContent]:
    """Yield each tile's figures as point lists relative to the tile origin.

    With a ``labels_mode`` other than ``"off"`` every figure also carries its
    node labels, numbered across the whole figure list so a node keeps the
    same label on every page it appears on.

    One tile is produced per ``next()`` call, so a caller can interleave other
    work between pages or stop early to cancel an export.
    """

    by_id = {figure.id: figure for figure in figures}
    node_labels = compute_node_labels(figures, labels_mode)
    cache: Dict[FigureId, List[Vec2]] = {}
    label_cache: Dict[FigureId, List[NodeLabel]] = {}
    for page_number, tile in enumerate(plan.tiles, start=1):
        ox, oy = tile.offset_px
        content: List[TileFigure] = []
        for fid in tile.figures_in_tile:
            figure = by_id.get(fid)
            if figure is None:
                continue
            if fid not in cache:
                cache[fid] = figure_world_polyline(figure, steps_per_curve)
            shifted = [(x - ox, y - oy) for x, y in cache[fid]]
            if fid not in label_cache:
                label_cache[fid] = place_node_labels(figure, node_labels.get(fid, {}))
            labels = tuple(
                replace(label, position=(label.position[0] - ox, label.position[1] - oy)) for label in label_cache[fid]
            )
            content.append(TileFigure(fid, shifted, figure.closed, labels))
        yield TileContent(tile=tile, page_number=page_number, figures=tuple(content))


__all__ = [
    "TileContent",
    "TileDescriptor",
    "TileFigure",
    "TilePlan",
    "iter_tile_polylines",
    "partition_tiles",
    "plan_tile_grid",
    "plan_tiles",
]

apply_debug_logging(globals(), logger=logger, skip={"iter_tile_polylines"})
