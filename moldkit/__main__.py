import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence

from moldkit import (
    PAPER_SIZES,
    PX_PER_CM,
    PageSettingsError,
    ValidationError,
    commit,
    compute_measures,
    dump_design,
    filter_figures,
    format_cm,
    load_design,
    plan_tile_grid,
    resolve_export_settings,
    validate_figures,
)
from moldkit.serialization import Design, design_to_dict, measures_to_dict

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _emit(payload: Dict[str, Any]) -> None:
    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")


def _run_measure(design: Design) -> None:
    rows: List[Dict[str, Any]] = []
    for figure in design.figures:
        measures = compute_measures(figure)
        logger.info(
            "Figure %s (%s): %s",
            figure.id,
            figure.tool,
            format_cm(measures.total_length_px / PX_PER_CM),
        )
        rows.append(
            {
                "id": figure.id,
                "tool": figure.tool,
                "totalLengthCm": measures.total_length_px / PX_PER_CM,
                "measures": measures_to_dict(measures),
            }
        )
    _emit({"figures": rows})


def _run_commit(design: Design, output: Optional[str]) -> None:
    result = commit(design.figures)
    committed = Design(figures=result.figures, page_settings=design.page_settings, meta=design.meta)
    if output:
        dump_design(committed, output)
    else:
        _emit(design_to_dict(committed))


def _run_plan(design: Design, args: argparse.Namespace) -> None:
    base = design.page_settings
    overrides: Dict[str, Any] = {
        "paper_size": args.paper or (base.paper_size if base else "A4"),
        "orientation": args.orientation or (base.orientation if base else "portrait"),
        "margin_cm": args.margin_cm if args.margin_cm is not None else (base.margin_cm if base else 1.0),
        "include_blank_pages": args.include_blank_pages,
    }
    settings = resolve_export_settings(overrides)
    figures = filter_figures(design.figures, settings)
    plan = plan_tile_grid(figures, settings)
    area = plan.export_area
    _emit(
        {
            "paperSize": settings.paper_size,
            "orientation": settings.orientation,
            "marginCm": settings.margin_cm,
            "rows": plan.rows,
            "cols": plan.cols,
            "pageCount": plan.page_count,
            "tileWidthPx": plan.tile_width_px,
            "tileHeightPx": plan.tile_height_px,
            "exportArea": None
            if area is None
            else {"x": area.x, "y": area.y, "width": area.width, "height": area.height},
            "tiles": [
                {
                    "label": tile.label,
                    "row": tile.row,
                    "col": tile.col,
                    "offsetPx": {"x": tile.offset_px[0], "y": tile.offset_px[1]},
                    "figures": list(tile.figures_in_tile),
                }
                for tile in plan.tiles
            ],
        }
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Measure, commit and paginate sewing pattern designs")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    measure_cmd = commands.add_parser("measure", help="Print derived measurements for every figure")
    measure_cmd.add_argument("path", help="Path to the design JSON document")

    commit_cmd = commands.add_parser("commit", help="Sync mirrors and refresh measurements")
    commit_cmd.add_argument("path", help="Path to the design JSON document")
    commit_cmd.add_argument("--output", help="Write the committed design here instead of stdout")

    plan_cmd = commands.add_parser("plan", help="Plan the printable page tiles")
    plan_cmd.add_argument("path", help="Path to the design JSON document")
    plan_cmd.add_argument("--paper", choices=PAPER_SIZES, help="Paper size (default: design setting or A4)")
    plan_cmd.add_argument(
        "--orientation",
        choices=["portrait", "landscape"],
        help="Page orientation (default: design setting or portrait)",
    )
    plan_cmd.add_argument("--margin-cm", type=float, help="Margin on every side in centimetres")
    plan_cmd.add_argument(
        "--include-blank-pages",
        action="store_true",
        help="Keep tiles that no figure touches",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    try:
        design = load_design(args.path)
        validate_figures(design.figures)
    except ValidationError as exc:
        logger.error("Invalid design: %s", exc)
        raise SystemExit(1)
    logger.info("Validation succeeded")

    if args.command == "measure":
        _run_measure(design)
    elif args.command == "commit":
        _run_commit(design, args.output)
    else:
        try:
            _run_plan(design, args)
        except PageSettingsError as exc:
            logger.error("Cannot plan pages: %s", exc)
            raise SystemExit(1)


if __name__ == "__main__":
    main()
