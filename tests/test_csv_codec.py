import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from csv_codec import MalformedDocument, parse, serialize
from sample_exports import HEADERS, PREAMBLE, make_export, make_line, row_values, simple_export
from timeline_row import PredictionMode, PredictionState, PredictionType, Sensor


def test_parse_reads_preamble_headers_and_rows():
    document = parse(simple_export(3))

    assert document.preamble_text == PREAMBLE
    assert document.column_headers == HEADERS
    assert [row.sequence_number for row in document.rows] == [0, 1, 2]

    row = document.rows[1]
    assert row.timestamp == 5.0
    assert row.session_id == "6C1E4B2A"
    assert row.t1.celsius == pytest.approx(38.25)
    assert row.virtual_core.celsius == pytest.approx(40.5)
    assert row.virtual_core.fahrenheit == pytest.approx(104.9)
    assert row.prediction_set_point == pytest.approx(54.0)
    assert row.virtual_core_sensor is Sensor.T2
    assert row.virtual_ambient_sensor is Sensor.T8
    assert row.prediction_state is PredictionState.COOKING
    assert row.prediction_mode is PredictionMode.TIME_TO_REMOVAL
    assert row.prediction_type is PredictionType.REMOVAL
    assert row.prediction_value_seconds == 1800
    assert row.note is None


def test_parse_accepts_windows_line_endings():
    unix = parse(simple_export(3))
    windows = parse(simple_export(3, line_ending="\r\n"))

    assert windows == unix


def test_parse_skips_trailing_blank_line():
    document = parse(simple_export(2) + "\n")

    assert len(document) == 2


def test_parse_appends_notes_column_when_missing():
    headers = HEADERS[:-1]
    lines = [make_line(row_values(sequence), headers) for sequence in range(2)]

    document = parse(make_export(lines, headers=headers))

    assert document.column_headers == HEADERS
    assert all(row.note is None for row in document.rows)

    text = serialize(document)
    header_line = text.split("\n\n", 1)[1].split("\n")[0]
    assert header_line.endswith(",Notes")
    assert text.split("\n")[-1].endswith(",")


def test_parse_without_separator_raises_malformed_document():
    text = "\n".join([",".join(HEADERS), make_line(row_values(0))])

    with pytest.raises(MalformedDocument):
        parse(text)


def test_parse_with_empty_table_raises_malformed_document():
    with pytest.raises(MalformedDocument):
        parse(PREAMBLE + "\n\n")


def test_malformed_document_is_a_value_error():
    with pytest.raises(ValueError):
        parse("just one line")


def test_row_with_bad_numeric_value_is_dropped():
    lines = [make_line(row_values(sequence)) for sequence in range(5)]
    bad = row_values(2)
    bad["T3"] = "n/a"
    lines[2] = make_line(bad)

    document = parse(make_export(lines))

    assert len(document) == 4
    assert [row.sequence_number for row in document.rows] == [0, 1, 3, 4]
    assert document.rows[2] == parse(make_export([lines[3]])).rows[0]


@pytest.mark.parametrize(
    "header, value",
    [
        ("PredictionState", "probe not inserted"),
        ("VirtualCoreSensor", "T9"),
        ("SequenceNumber", "3.0"),
        ("PredictionValueSeconds", ""),
        ("Timestamp", " 5.0"),
        ("T1", "1_000"),
        ("T2", "nan"),
    ],
)
def test_rows_with_invalid_required_fields_are_dropped(header, value):
    values = row_values(1)
    values[header] = value
    lines = [make_line(row_values(0)), make_line(values)]

    document = parse(make_export(lines))

    assert [row.sequence_number for row in document.rows] == [0]


def test_short_line_missing_required_fields_is_dropped():
    truncated = ",".join(make_line(row_values(1)).split(",")[:10])
    lines = [make_line(row_values(0)), truncated]

    document = parse(make_export(lines))

    assert len(document) == 1


def test_short_line_missing_only_notes_is_kept():
    line = ",".join(make_line(row_values(0)).split(",")[:-1])

    document = parse(make_export([line]))

    assert len(document) == 1
    assert document.rows[0].note is None


def test_extra_fields_beyond_headers_are_ignored():
    line = make_line(row_values(0)) + ",unexpected,values"

    document = parse(make_export([line]))

    assert len(document) == 1
    assert document.rows[0].extras == {}


def test_serialize_reproduces_canonical_export_exactly():
    lines = [
        make_line(row_values(0, state="Probe Not Inserted")),
        make_line(row_values(1, note="Seared both sides")),
        make_line(row_values(2, core=41.75)),
    ]
    text = make_export(lines)

    assert serialize(parse(text)) == text


def test_round_trip_preserves_document():
    document = parse(simple_export(6, line_ending="\r\n"))

    assert parse(serialize(document)) == document


def test_round_trip_keeps_float32_text_stable():
    values = row_values(0)
    values["T4"] = "23.1"
    values["PredictionSetPoint"] = "57.3"

    text = serialize(parse(make_export([make_line(values)])))

    row_line = text.split("\n")[-1].split(",")
    assert row_line[HEADERS.index("T4")] == "23.1"
    assert row_line[HEADERS.index("PredictionSetPoint")] == "57.3"


def test_serialize_uses_captured_header_order():
    headers = ["SequenceNumber", "Timestamp"] + HEADERS[3:] + ["SessionID"]
    line = make_line(row_values(7), headers)

    document = parse(make_export([line], headers=headers))
    text = serialize(document)

    assert document.column_headers == headers
    assert text.split("\n")[-2] == ",".join(headers)
    assert text.split("\n")[-1] == line


def test_unknown_columns_survive_round_trip():
    headers = HEADERS[:-1] + ["Battery", "Notes"]
    values = row_values(0, note="Flipped")
    values["Battery"] = "OK"
    line = make_line(values, headers)

    document = parse(make_export([line], headers=headers))

    assert document.rows[0].extras == {"Battery": "OK"}
    assert serialize(document).split("\n")[-1] == line


def test_duplicate_header_last_column_wins():
    headers = HEADERS + ["T1"]
    values = row_values(0)
    line = make_line(values, HEADERS) + ",99.5"

    document = parse(make_export([line], headers=headers))

    assert document.column_headers == headers
    assert document.rows[0].t1.celsius == pytest.approx(99.5)
    fields = serialize(document).split("\n")[-1].split(",")
    assert fields[HEADERS.index("T1")] == "99.5"
    assert fields[-1] == "99.5"


def test_serialize_without_rows_keeps_preamble_and_headers():
    document = parse(make_export([]) + "\n")

    assert len(document) == 0
    assert serialize(document) == make_export([])
