import math

import pytest

from moldkit.measures import circle_measure, compute_measures, curve_measure, rect_measure, with_measures
from moldkit.model import Edge, Figure, Node
from moldkit.shapes import (
    cubic_circle_figure,
    cubic_ellipse_figure,
    curve_figure,
    line_figure,
    polygon_circle_figure,
    rectangle_figure,
)


def test_rectangle_measures():
    m = compute_measures(rectangle_figure('r', 100.0, 40.0))

    assert m.total_length_px == pytest.approx(280.0)
    assert [e.length_px for e in m.per_edge] == pytest.approx([100.0, 40.0, 100.0, 40.0])
    assert [e.angle_deg for e in m.per_edge] == pytest.approx([0.0, 90.0, 180.0, -90.0])
    assert m.rect.width_px == pytest.approx(100.0)
    assert m.rect.height_px == pytest.approx(40.0)
    assert m.circle is None
    assert m.curve is None


def test_polygon_circle_is_detected_as_circle():
    m = compute_measures(polygon_circle_figure('c', 50.0, segments=32))

    assert m.circle.is_circle
    assert m.circle.radius_px == pytest.approx(50.0)
    assert m.circle.diameter_px == pytest.approx(100.0)
    assert m.circle.circumference_px == pytest.approx(2.0 * math.pi * 50.0)


def test_cubic_circle_measures_close_to_true_perimeter():
    m = compute_measures(cubic_circle_figure('c', 80.0))

    assert m.circle.is_circle
    assert m.total_length_px == pytest.approx(2.0 * math.pi * 80.0, rel=1e-3)


def test_radii_within_two_percent_still_count_as_circle():
    m = circle_measure(cubic_ellipse_figure('c', 100.0, 98.5))

    assert m.is_circle
    assert m.radius_px == pytest.approx(99.25)


def test_ellipse_uses_ramanujan_perimeter():
    m = circle_measure(cubic_ellipse_figure('e', 100.0, 50.0))

    assert not m.is_circle
    assert m.radius_px is None
    assert m.diameter_px is None
    assert m.rx_px == pytest.approx(100.0)
    assert m.ry_px == pytest.approx(50.0)
    assert m.circumference_px == pytest.approx(484.422, rel=1e-4)


def test_circle_tolerance_can_be_overridden():
    fig = cubic_ellipse_figure('c', 100.0, 98.5)

    assert not circle_measure(fig, tolerance=0.001).is_circle


def test_collapsed_circle_counts_as_circle_with_zero_radius():
    fig = Figure('c', 'circle', nodes=[Node('a', 5.0, 5.0)])

    m = circle_measure(fig)

    assert m.is_circle
    assert m.radius_px == 0.0
    assert m.circumference_px == 0.0


def test_circle_without_nodes_omits_block():
    m = compute_measures(Figure('c', 'circle'))

    assert m.circle is None
    assert m.total_length_px == 0.0
    assert m.per_edge == ()


def test_straight_curve_has_no_curvature_radius():
    fig = curve_figure('c', [(0.0, 0.0), (100.0, 0.0)])

    m = curve_measure(fig)

    assert m.length_px == pytest.approx(100.0)
    assert m.tangent_angle_deg_at_mid == pytest.approx(0.0)
    assert m.curvature_radius_px_at_mid is None


def test_arc_curve_reports_radius_and_total_from_polyline():
    r = 100.0
    k = 0.5522847498307936 * r
    fig = curve_figure(
        'c',
        [(r, 0.0), (0.0, r)],
        handles=[(None, (r, k)), ((k, r), None)],
    )

    m = compute_measures(fig)

    assert m.curve is not None
    assert m.curve.curvature_radius_px_at_mid == pytest.approx(r, rel=0.02)
    assert m.curve.tangent_angle_deg_at_mid == pytest.approx(135.0, abs=1.0)
    assert m.total_length_px == pytest.approx(m.curve.length_px)


def test_curve_with_single_node_omits_curve_block():
    fig = Figure('c', 'curve', nodes=[Node('a', 0.0, 0.0)])

    assert compute_measures(fig).curve is None


def test_dangling_edge_is_skipped_not_raised():
    fig = Figure(
        'f',
        'line',
        nodes=[Node('a', 0.0, 0.0), Node('b', 3.0, 4.0)],
        edges=[Edge('e1', 'a', 'b'), Edge('e2', 'b', 'ghost')],
    )

    m = compute_measures(fig)

    assert [e.edge_id for e in m.per_edge] == ['e1']
    assert m.total_length_px == pytest.approx(5.0)


def test_rect_measure_of_empty_figure_is_none():
    assert rect_measure(Figure('r', 'rectangle')) is None


def test_with_measures_attaches_cache():
    fig = line_figure('l', (0.0, 0.0), (6.0, 8.0))

    measured = with_measures(fig)

    assert fig.measures is None
    assert measured.measures.total_length_px == pytest.approx(10.0)
    assert measured.measures.version == 1
