import logging
import math

import pytest

from moldkit.config import KernelConfig, get_kernel_config, set_kernel_config
from moldkit.edge_length import edge_arc_length, set_edge_target_length
from moldkit.model import Edge, Figure, Node
from moldkit.shapes import curve_figure, line_figure, rectangle_figure


def _gentle_cubic():
    # Single open cubic edge e1 from n1 (0, 0) to n2 (120, 0) with a mild bulge.
    return curve_figure(
        'c',
        [(0.0, 0.0), (120.0, 0.0)],
        handles=[(None, (40.0, 15.0)), ((80.0, 15.0), None)],
    )


def test_line_start_anchor_keeps_from_node():
    fig = line_figure('l', (0.0, 0.0), (30.0, 40.0))

    out = set_edge_target_length(fig, 'e1', 100.0, 'start')

    assert out.node('n1').point == (0.0, 0.0)
    assert out.node('n2').point == pytest.approx((60.0, 80.0))
    assert edge_arc_length(out, 'e1') == pytest.approx(100.0)


def test_line_end_anchor_keeps_to_node():
    fig = line_figure('l', (0.0, 0.0), (30.0, 40.0))

    out = set_edge_target_length(fig, 'e1', 100.0, 'end')

    assert out.node('n2').point == (30.0, 40.0)
    assert out.node('n1').point == pytest.approx((-30.0, -40.0))


def test_line_mid_anchor_keeps_midpoint():
    fig = line_figure('l', (0.0, 0.0), (30.0, 40.0))

    out = set_edge_target_length(fig, 'e1', 100.0, 'mid')

    assert out.node('n1').point == pytest.approx((-15.0, -20.0))
    assert out.node('n2').point == pytest.approx((45.0, 60.0))


@pytest.mark.parametrize('target', [0.0, -5.0])
def test_non_positive_target_is_clamped(target):
    fig = line_figure('l', (0.0, 0.0), (10.0, 0.0))

    out = set_edge_target_length(fig, 'e1', target, 'start')

    assert edge_arc_length(out, 'e1') == pytest.approx(1e-4)


def test_edit_in_closed_figure_only_moves_edge_endpoint():
    fig = rectangle_figure('r', 100.0, 50.0)

    out = set_edge_target_length(fig, 'e1', 150.0, 'start')

    assert out.node('n2').point == pytest.approx((150.0, 0.0))
    assert out.node('n3').point == fig.node('n3').point
    assert fig.node('n2').point == (100.0, 0.0)


@pytest.mark.parametrize('anchor', ['start', 'end'])
@pytest.mark.parametrize('scale', [0.95, 1.5, 4.0])
def test_cubic_end_anchors_reach_target(anchor, scale):
    fig = _gentle_cubic()
    base = edge_arc_length(fig, 'e1')
    target = base * scale

    out = set_edge_target_length(fig, 'e1', target, anchor)

    assert edge_arc_length(out, 'e1') == pytest.approx(target, rel=5e-3)


@pytest.mark.parametrize('target', [1000.0, 10000.0])
def test_cubic_start_anchor_long_targets(target):
    out = set_edge_target_length(_gentle_cubic(), 'e1', target, 'start')

    assert edge_arc_length(out, 'e1') == pytest.approx(target, rel=5e-3)


def test_cubic_start_anchor_moves_handle_with_node():
    fig = _gentle_cubic()

    out = set_edge_target_length(fig, 'e1', 300.0, 'start')
    before = fig.node('n2')
    after = out.node('n2')
    dx = after.x - before.x
    dy = after.y - before.y

    assert out.node('n1') == fig.node('n1')
    assert after.in_handle == pytest.approx((before.in_handle[0] + dx, before.in_handle[1] + dy))


def test_cubic_end_anchor_keeps_to_node():
    fig = _gentle_cubic()

    out = set_edge_target_length(fig, 'e1', 200.0, 'end')

    assert out.node('n2') == fig.node('n2')
    assert out.node('n1').x < 0.0


@pytest.mark.parametrize(
    'anchor, moving, tangent',
    [('start', 'n2', (40.0, -15.0)), ('end', 'n1', (-40.0, -15.0))],
)
def test_unreachable_cubic_target_uses_proportional_fallback(caplog, anchor, moving, tangent):
    # Rigid handles cannot shrink the bulged edge below roughly 70 px.
    fig = _gentle_cubic()
    base = edge_arc_length(fig, 'e1')
    scale = (60.0 - base) / math.hypot(*tangent)

    with caplog.at_level(logging.INFO, logger='moldkit.edge_length'):
        out = set_edge_target_length(fig, 'e1', 60.0, anchor)

    before = fig.node(moving).point
    assert out.node(moving).point == pytest.approx((before[0] + tangent[0] * scale, before[1] + tangent[1] * scale))
    assert edge_arc_length(out, 'e1') > 60.0
    assert 'Could not bracket target length' in caplog.text


@pytest.mark.parametrize('target', [150.0, 400.0, 2000.0])
def test_cubic_mid_anchor_on_straight_cubic(target):
    fig = curve_figure(
        'c',
        [(0.0, 0.0), (100.0, 0.0)],
        handles=[(None, (30.0, 0.0)), ((70.0, 0.0), None)],
    )

    out = set_edge_target_length(fig, 'e1', target, 'mid')

    assert edge_arc_length(out, 'e1') == pytest.approx(target, rel=5e-3)
    n1 = out.node('n1')
    n2 = out.node('n2')
    assert (n1.x + n2.x) / 2.0 == pytest.approx(50.0)


def test_unknown_edge_or_dangling_node_returns_none():
    fig = line_figure('l', (0.0, 0.0), (1.0, 0.0))
    broken = Figure('b', 'line', nodes=[Node('a', 0.0, 0.0)], edges=[Edge('e1', 'a', 'ghost')])

    assert set_edge_target_length(fig, 'nope', 5.0) is None
    assert set_edge_target_length(broken, 'e1', 5.0) is None
    assert edge_arc_length(broken, 'e1') is None


def test_unknown_anchor_is_rejected():
    with pytest.raises(ValueError):
        set_edge_target_length(line_figure('l', (0, 0), (1, 0)), 'e1', 5.0, 'middle')


def test_solver_resolution_comes_from_config():
    original = get_kernel_config()
    try:
        set_kernel_config(KernelConfig(solver_cubic_steps=20))
        out = set_edge_target_length(_gentle_cubic(), 'e1', 300.0, 'start')
        assert edge_arc_length(out, 'e1', steps=20) == pytest.approx(300.0, rel=1e-4)
    finally:
        set_kernel_config(original)
