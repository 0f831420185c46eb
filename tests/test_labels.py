import pytest

from moldkit.labels import (
    POINT_LABELS_MODES,
    compute_node_labels,
    cycle_point_labels_mode,
    index_to_alpha_label,
    place_node_labels,
)
from moldkit.shapes import line_figure, rectangle_figure
from moldkit.tiling import iter_tile_polylines, partition_tiles


@pytest.mark.parametrize(
    'index, expected',
    [(1, 'A'), (2, 'B'), (26, 'Z'), (27, 'AA'), (28, 'AB'), (52, 'AZ'), (53, 'BA'), (702, 'ZZ'), (703, 'AAA')],
)
def test_alpha_labels_count_like_spreadsheet_columns(index, expected):
    assert index_to_alpha_label(index) == expected


@pytest.mark.parametrize('index', [0, -3])
def test_non_positive_index_is_a(index):
    assert index_to_alpha_label(index) == 'A'


def test_cycle_visits_every_mode_then_turns_off():
    seen = ['off']
    for _ in range(len(POINT_LABELS_MODES)):
        seen.append(cycle_point_labels_mode(seen[-1]))

    assert seen == ['off', 'numGlobal', 'numPerFigure', 'alphaGlobal', 'alphaPerFigure', 'off']
    assert cycle_point_labels_mode('sideways') == 'off'


def _two_figures():
    return [rectangle_figure('a', 10.0, 10.0), line_figure('b', (0.0, 0.0), (5.0, 0.0))]


@pytest.mark.parametrize(
    'mode, expected',
    [
        ('numGlobal', {'a': ['1', '2', '3', '4'], 'b': ['5', '6']}),
        ('numPerFigure', {'a': ['1', '2', '3', '4'], 'b': ['1', '2']}),
        ('alphaGlobal', {'a': ['A', 'B', 'C', 'D'], 'b': ['E', 'F']}),
        ('alphaPerFigure', {'a': ['A', 'B', 'C', 'D'], 'b': ['A', 'B']}),
    ],
)
def test_compute_node_labels_modes(mode, expected):
    labels = compute_node_labels(_two_figures(), mode)

    assert {fid: list(by_node.values()) for fid, by_node in labels.items()} == expected
    assert list(labels['a']) == ['n1', 'n2', 'n3', 'n4']


def test_labels_off_is_empty_and_unknown_mode_rejected():
    assert compute_node_labels(_two_figures(), 'off') == {}
    with pytest.raises(ValueError):
        compute_node_labels(_two_figures(), 'roman')


def test_labels_are_pushed_away_from_the_centroid():
    fig = rectangle_figure('r', 20.0, 20.0, x=100.0, y=50.0)

    placed = place_node_labels(fig, {'n1': 'a', 'n3': 'c'}, offset_px=14.0)

    assert [label.node_id for label in placed] == ['n1', 'n3']
    assert placed[0].text == 'A'
    assert placed[0].position == pytest.approx((100.0 - 14.0 / 2 ** 0.5, 50.0 - 14.0 / 2 ** 0.5))
    assert placed[0].align_right
    assert placed[1].position == pytest.approx((120.0 + 14.0 / 2 ** 0.5, 70.0 + 14.0 / 2 ** 0.5))
    assert not placed[1].align_right


def test_tiles_carry_labels_relative_to_the_tile():
    figures = [rectangle_figure('r', 400.0, 600.0)]
    plan = partition_tiles(figures, 500.0, 700.0)

    plain = next(iter_tile_polylines(figures, plan))
    labelled = next(iter_tile_polylines(figures, plan, labels_mode='alphaGlobal'))

    assert plain.figures[0].labels == ()
    labels = labelled.figures[0].labels
    assert [label.text for label in labels] == ['A', 'B', 'C', 'D']
    offset = 14.0 / (1.0 + (600.0 / 400.0) ** 2) ** 0.5
    assert labels[0].position[0] == pytest.approx(10.0 - offset)
