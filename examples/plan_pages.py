"""Example pipeline: tile a pattern onto A4 pages and list what each page prints."""

from moldkit import (
    PX_PER_CM,
    cubic_circle_figure,
    iter_tile_polylines,
    plan_tile_grid,
    rectangle_figure,
    resolve_export_settings,
)


def main() -> None:
    figures = [
        rectangle_figure("skirt", 60 * PX_PER_CM, 70 * PX_PER_CM),
        cubic_circle_figure("pocket", 8 * PX_PER_CM, x=80 * PX_PER_CM, y=20 * PX_PER_CM),
    ]
    settings = resolve_export_settings({"paper_size": "A4", "orientation": "portrait", "margin_cm": 1.0})
    plan = plan_tile_grid(figures, settings)
    print(f"Grid: {plan.rows} row(s) x {plan.cols} col(s), {plan.page_count} page(s)")

    for page in iter_tile_polylines(figures, plan):
        names = ", ".join(f"{fig.figure_id} ({len(fig.points)} pts)" for fig in page.figures)
        print(f"  page {page.page_number} [{page.tile.label}]: {names}")


if __name__ == "__main__":
    main()
