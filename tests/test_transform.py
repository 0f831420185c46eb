import logging
from dataclasses import replace

import pytest

from moldkit.model import Edge, Figure, Node
from moldkit.shapes import cubic_circle_figure, line_figure, rectangle_figure
from moldkit.transform import (
    Rect,
    centroid_local,
    edge_control_points,
    edge_local_points,
    figure_local_polyline,
    figure_world_polyline,
    local_to_world,
    ordered_edges,
    union_bounding_box,
    world_bounding_box,
    world_to_local,
)


def _assert_rect(rect, x, y, width, height):
    assert rect is not None
    assert (rect.x, rect.y, rect.width, rect.height) == pytest.approx((x, y, width, height), abs=1e-9)


def test_local_to_world_rotates_then_translates():
    fig = rectangle_figure('r', 10.0, 10.0, x=5.0, y=5.0, rotation=90.0)

    assert local_to_world(fig, (10.0, 0.0)) == pytest.approx((5.0, 15.0))


@pytest.mark.parametrize('rotation', [0.0, 33.0, -120.0, 450.0])
def test_world_to_local_inverts_local_to_world(rotation):
    fig = rectangle_figure('r', 10.0, 10.0, x=-7.0, y=12.0, rotation=rotation)
    p = (3.5, -8.25)

    assert world_to_local(fig, local_to_world(fig, p)) == pytest.approx(p, abs=1e-9)


def test_rect_intersection_is_open_interval():
    a = Rect(0.0, 0.0, 10.0, 10.0)

    assert not a.intersects(Rect(10.0, 0.0, 5.0, 5.0))
    assert not a.intersects(Rect(0.0, 10.0, 5.0, 5.0))
    assert a.intersects(Rect(9.5, 9.5, 5.0, 5.0))
    assert a.intersects(Rect(2.0, 2.0, 1.0, 1.0))


def test_flat_rect_on_a_boundary_intersects_both_sides():
    flat = Rect(20.0, 90.0, 40.0, 0.0)

    assert flat.intersects(Rect(-10.0, -10.0, 100.0, 100.0))
    assert flat.intersects(Rect(-10.0, 90.0, 100.0, 100.0))
    assert not flat.intersects(Rect(-10.0, 95.0, 100.0, 100.0))
    assert not flat.intersects(Rect(60.0, 0.0, 100.0, 100.0))


def test_rect_union_and_padding():
    union = Rect(0.0, 0.0, 10.0, 10.0).union(Rect(20.0, -5.0, 5.0, 5.0))
    _assert_rect(union, 0.0, -5.0, 25.0, 15.0)
    _assert_rect(union.padded(2.0), -2.0, -7.0, 29.0, 19.0)
    assert union.right == 25.0
    assert union.bottom == 10.0


def test_line_control_points_are_degenerate_cubic():
    a = Node('a', 0.0, 0.0, out_handle=(5.0, 5.0))
    b = Node('b', 10.0, 0.0)

    assert edge_control_points('line', a, b) == ((0.0, 0.0), (0.0, 0.0), (10.0, 0.0), (10.0, 0.0))


def test_missing_handles_fall_back_to_endpoints():
    a = Node('a', 0.0, 0.0)
    b = Node('b', 10.0, 0.0, in_handle=(8.0, 3.0))

    assert edge_control_points('cubic', a, b) == ((0.0, 0.0), (0.0, 0.0), (8.0, 3.0), (10.0, 0.0))


def test_edge_with_missing_node_yields_no_points(caplog):
    fig = Figure('f', 'line', nodes=[Node('a', 0.0, 0.0)], edges=[Edge('e', 'a', 'ghost')])

    with caplog.at_level(logging.WARNING, logger='moldkit.transform'):
        pts = edge_local_points(fig, fig.edges[0], 10)

    assert pts.shape == (0, 2)
    assert 'missing node' in caplog.text


def test_ordered_edges_follows_chains_from_open_end():
    fig = Figure(
        'f',
        'pen',
        nodes=[Node('a', 0, 0), Node('b', 1, 0), Node('c', 2, 0), Node('d', 3, 0)],
        edges=[Edge('e3', 'c', 'd'), Edge('e2', 'b', 'c'), Edge('e1', 'a', 'b')],
    )

    assert [edge.id for edge in ordered_edges(fig)] == ['e1', 'e2', 'e3']


def test_ordered_edges_of_loop_starts_with_first_edge():
    fig = rectangle_figure('r', 4.0, 2.0)

    assert [edge.id for edge in ordered_edges(fig)] == ['e1', 'e2', 'e3', 'e4']


def test_closed_rectangle_polyline_shares_corner_points():
    poly = figure_local_polyline(rectangle_figure('r', 4.0, 2.0))

    assert poly.shape == (5, 2)
    assert tuple(poly[0]) == tuple(poly[-1]) == (0.0, 0.0)


def test_world_polyline_is_list_of_tuples():
    fig = line_figure('l', (0.0, 0.0), (3.0, 4.0))
    fig = replace(fig, x=1.0, y=1.0)

    assert figure_world_polyline(fig) == [(1.0, 1.0), (4.0, 5.0)]


def test_world_bounding_box_of_rotated_rectangle():
    fig = rectangle_figure('r', 100.0, 50.0, rotation=90.0)

    _assert_rect(world_bounding_box(fig), -50.0, 0.0, 50.0, 100.0)


@pytest.mark.parametrize('turns', [1, 2, -3])
def test_world_bounding_box_invariant_under_full_turns(turns):
    fig = cubic_circle_figure('c', 40.0, x=10.0, y=20.0)
    turned = replace(fig, rotation=360.0 * turns)

    base = world_bounding_box(fig)
    spun = world_bounding_box(turned)
    _assert_rect(spun, base.x, base.y, base.width, base.height)


def test_world_bounding_box_without_edges_is_none():
    fig = Figure('f', 'text', nodes=[Node('a', 1.0, 1.0)])

    assert world_bounding_box(fig) is None
    assert union_bounding_box([fig]) is None


def test_union_bounding_box_spans_all_figures():
    a = rectangle_figure('a', 10.0, 10.0)
    b = rectangle_figure('b', 10.0, 10.0, x=30.0, y=40.0)

    _assert_rect(union_bounding_box([a, b]), 0.0, 0.0, 40.0, 50.0)


def test_centroid_is_vertex_average():
    assert centroid_local(rectangle_figure('r', 10.0, 4.0)) == (5.0, 2.0)
    assert centroid_local(Figure('f', 'text')) == (0.0, 0.0)
