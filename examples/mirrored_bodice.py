"""Example pipeline: draft a panel, mirror it, edit an edge and commit."""

from moldkit import (
    PX_PER_CM,
    commit,
    convert_edge_to_cubic,
    create_mirror,
    format_cm,
    rectangle_figure,
    set_edge_target_length,
)


def main() -> None:
    # 20 x 45 cm panel placed 2 cm right of the centre-front fold.
    panel = rectangle_figure("front", 20 * PX_PER_CM, 45 * PX_PER_CM, x=2 * PX_PER_CM)
    panel = convert_edge_to_cubic(panel, "e3")
    original, mirror = create_mirror(panel, "front-mirror", (0.0, 0.0), (0.0, 1.0), pair_id="front")

    result = commit([original, mirror])
    print("Initial commit:")
    for figure in result.figures:
        print(f"  {figure.id}: {format_cm(figure.measures.total_length_px / PX_PER_CM)}")

    edited = set_edge_target_length(result.figures[0], "e2", 50 * PX_PER_CM, anchor="start")
    result = commit([edited, result.figures[1]], result.state)
    print("After lengthening the side seam to 50 cm:")
    for figure in result.figures:
        side = next(m for m in figure.measures.per_edge if m.edge_id == "e2")
        print(f"  {figure.id}: side {format_cm(side.length_px / PX_PER_CM)}")


if __name__ == "__main__":
    main()
