import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from csv_codec import parse
from render_sampler import decimate, display_rows, nearest_row, timeline_position
from sample_exports import make_export, make_line, row_values, simple_export


def _rows(count=23):
    return parse(simple_export(count)).rows


def test_decimate_keeps_multiples_in_order_without_mutating():
    rows = _rows()
    original = list(rows)

    sampled = decimate(rows, 5)

    assert [row.sequence_number for row in sampled] == [0, 5, 10, 15, 20]
    assert rows == original
    assert sampled[1] is rows[5]


def test_decimate_uses_sequence_number_not_position():
    lines = [make_line(row_values(sequence)) for sequence in (3, 4, 5, 9, 10, 12)]
    rows = parse(make_export(lines)).rows

    assert [row.sequence_number for row in decimate(rows, 5)] == [5, 10]


def test_decimate_rejects_non_positive_stride():
    with pytest.raises(ValueError):
        decimate(_rows(), 0)


def test_display_rows_only_decimates_in_performance_mode():
    rows = _rows(12)

    assert len(display_rows(rows, performance_mode=False)) == 12
    assert [row.sequence_number for row in display_rows(rows, performance_mode=True)] == [0, 5, 10]


@pytest.mark.parametrize(
    "time, expected",
    [
        (0.0, 0),
        (7.4, 1),
        (7.5, 2),
        (12.5, 3),
        (13.0, 3),
        (2.4, 0),
    ],
)
def test_nearest_row_snaps_to_five_second_grid(time, expected):
    row = nearest_row(_rows(), time)

    assert row is not None
    assert row.sequence_number == expected


def test_nearest_row_outside_data_is_none():
    assert nearest_row(_rows(4), 400.0) is None


def test_nearest_row_off_grid_data_is_none():
    lines = [make_line(row_values(sequence, timestamp=sequence * 3.0)) for sequence in range(5)]
    rows = parse(make_export(lines)).rows

    assert nearest_row(rows, 3.0) is None
    assert nearest_row(rows, 0.0).sequence_number == 0


def test_nearest_row_returns_first_match():
    lines = [
        make_line(row_values(0, timestamp=0.0)),
        make_line(row_values(1, timestamp=5.0)),
        make_line(row_values(2, timestamp=5.0)),
    ]
    rows = parse(make_export(lines)).rows

    assert nearest_row(rows, 4.0).sequence_number == 1


def test_timeline_position_keeps_hover_x():
    position = timeline_position(_rows(), 11.0)

    assert position.x == 11.0
    assert position.row.sequence_number == 2
    assert timeline_position(_rows(2), 50.0) is None
