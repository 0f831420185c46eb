"""Paper sizes, orientation and export settings for paginated output."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, Tuple

from .config import get_kernel_config
from .constants import PX_PER_CM
from .model import Figure

logger = logging.getLogger(__name__)

PaperOrientation = Literal["portrait", "landscape"]

# Portrait (width, height) in centimetres.
PAPER_SIZES_CM: Dict[str, Tuple[float, float]] = {
    "A5": (14.8, 21.0),
    "A4": (21.0, 29.7),
    "A3": (29.7, 42.0),
    "A2": (42.0, 59.4),
    "A1": (59.4, 84.1),
    "A0": (84.1, 118.9),
    "Letter": (21.59, 27.94),
    "Legal": (21.59, 35.56),
    "Tabloid": (27.94, 43.18),
}

PAPER_SIZES: List[str] = list(PAPER_SIZES_CM)
ORIENTATIONS = ("portrait", "landscape")
FILTERABLE_TOOLS = ("rectangle", "circle", "line", "curve", "dart", "text")


class PageSettingsError(ValueError):
    """Raised when page settings leave no printable area."""


def _default_tool_filter() -> Dict[str, bool]:
    return {tool: True for tool in FILTERABLE_TOOLS}


@dataclass(frozen=True)
class ExportSettings:
    paper_size: str = "A4"
    orientation: PaperOrientation = "portrait"
    margin_cm: float = 1.0
    include_blank_pages: bool = False
    dashed_lines: bool = False
    tool_filter: Mapping[str, bool] = field(default_factory=_default_tool_filter)


def resolve_export_settings(partial: Optional[Mapping[str, Any]] = None) -> ExportSettings:
    """Fill ``partial`` (snake_case keys) with defaults; tool filter entries merge individually."""

    defaults = ExportSettings()
    if not partial:
        return defaults
    known = {f.name for f in fields(ExportSettings)}
    unknown = set(partial) - known
    if unknown:
        raise PageSettingsError(f"unknown export setting(s): {', '.join(sorted(unknown))}")
    overrides = {key: value for key, value in partial.items() if key != "tool_filter"}
    merged_filter = dict(defaults.tool_filter)
    merged_filter.update(partial.get("tool_filter") or {})
    settings = replace(defaults, tool_filter=merged_filter, **overrides)
    if settings.paper_size not in PAPER_SIZES_CM:
        raise PageSettingsError(f"unknown paper size {settings.paper_size!r}")
    if settings.orientation not in ORIENTATIONS:
        raise PageSettingsError(f"unknown orientation {settings.orientation!r}")
    return settings


def paper_dimensions_cm(paper_size: str, orientation: PaperOrientation = "portrait") -> Tuple[float, float]:
    """Return ``(width_cm, height_cm)``; landscape swaps the portrait dimensions."""

    try:
        width, height = PAPER_SIZES_CM[paper_size]
    except KeyError as exc:
        raise PageSettingsError(f"unknown paper size {paper_size!r}") from exc
    if orientation == "landscape":
        return height, width
    return width, height


def safe_area_cm(settings: ExportSettings) -> Tuple[float, float]:
    """Printable ``(width_cm, height_cm)`` after margins on every side."""

    width, height = paper_dimensions_cm(settings.paper_size, settings.orientation)
    margin = max(0.0, min(settings.margin_cm, get_kernel_config().max_margin_cm))
    safe_width = width - 2 * margin
    safe_height = height - 2 * margin
    if safe_width <= 0 or safe_height <= 0:
        raise PageSettingsError(
            f"margins of {margin:g} cm leave no printable area on {settings.paper_size} "
            f"{settings.orientation} ({safe_width:.2f} x {safe_height:.2f} cm)"
        )
    return safe_width, safe_height


def safe_area_px(settings: ExportSettings) -> Tuple[float, float]:
    width_cm, height_cm = safe_area_cm(settings)
    return width_cm * PX_PER_CM, height_cm * PX_PER_CM


def filter_figures(figures: Sequence[Figure], settings: ExportSettings) -> List[Figure]:
    """Drop figures whose tool is switched off in ``settings.tool_filter``."""

    kept = [fig for fig in figures if settings.tool_filter.get(fig.tool, True) is not False]
    if len(kept) != len(figures):
        logger.info("Tool filter removed %d of %d figure(s)", len(figures) - len(kept), len(figures))
    return kept


__all__ = [
    "FILTERABLE_TOOLS",
    "ORIENTATIONS",
    "PAPER_SIZES",
    "PAPER_SIZES_CM",
    "ExportSettings",
    "PageSettingsError",
    "PaperOrientation",
    "filter_figures",
    "paper_dimensions_cm",
    "resolve_export_settings",
    "safe_area_cm",
    "safe_area_px",
]
