"""Tests for input classification and series normalisation."""

from __future__ import annotations

import pytest

from charts.series import (
    EMPTY_SERIES,
    MappingInput,
    NumberArray,
    PairArray,
    RecordArray,
    Series,
    StringArray,
    Unrecognized,
    classify,
    format_number,
    normalize,
    parse_number,
)

pytestmark = [pytest.mark.unit]


def test_mapping_keeps_insertion_order() -> None:
    """Use mapping keys as labels and values as data."""

    series = normalize({"a": 1, "b": 2})

    assert series.labels == ("a", "b")
    assert series.data == (1.0, 2.0)


def test_string_array_is_a_first_seen_histogram() -> None:
    """Count repeated strings in the order they first appear."""

    series = normalize(["x", "x", "y"])

    assert series.labels == ("x", "y")
    assert series.data == (2.0, 1.0)


def test_number_array_gets_one_based_labels() -> None:
    """Label bare numbers 1..n."""

    series = normalize([3, 1, 4])

    assert series.labels == ("1", "2", "3")
    assert series.data == (3.0, 1.0, 4.0)


def test_record_array_reads_label_and_value() -> None:
    """Take label/value from each record and coerce bad values to 0."""

    series = normalize([
        {"label": "a", "value": "5"},
        {"label": "b"},
        {"value": 2},
        {"label": "c", "value": float("nan")},
    ])

    assert series.labels == ("a", "b", "", "c")
    assert series.data == (5.0, 0.0, 2.0, 0.0)


def test_normalizing_canonical_records_is_idempotent() -> None:
    """Normalise canonical records twice and get the same series."""

    records = [{"label": "a", "value": 1.5}, {"label": "b", "value": 2}]

    first = normalize(records)
    second = normalize(first.as_records())

    assert first == second
    assert normalize(first) == first


def test_pair_array_uses_first_two_columns() -> None:
    """Read [label, value] rows, defaulting a missing value to 0."""

    series = normalize([["a", 1], ("b", "2.5"), ["c"]])

    assert series.labels == ("a", "b", "c")
    assert series.data == (1.0, 2.5, 0.0)


@pytest.mark.parametrize("values", [[], {}, None, "abc", b"abc", 42, [None, 1], [object()]])
def test_unrecognised_inputs_give_empty_series(values) -> None:
    """Fall back to the empty series instead of raising."""

    series = normalize(values)

    assert len(series) == len(series.labels)
    if not isinstance(values, dict):
        assert series == EMPTY_SERIES


def test_empty_mapping_is_an_empty_series() -> None:
    """Normalise an empty mapping to zero points."""

    assert len(normalize({})) == 0


@pytest.mark.parametrize(
    ("values", "shape"),
    [
        ({"a": 1}, MappingInput),
        ([{"label": "a", "value": 1}], RecordArray),
        ([1, 2], NumberArray),
        ([1.5, "x"], NumberArray),
        (["a", 1], StringArray),
        ([["a", 1]], PairArray),
        ([True, False], Unrecognized),
        ([], Unrecognized),
    ],
)
def test_classify_dispatches_on_first_element(values, shape) -> None:
    """Pick the input shape from the container and its first element."""

    assert isinstance(classify(values), shape)


def test_series_rejects_mismatched_lengths() -> None:
    """Refuse to build a series whose labels and data differ in length."""

    with pytest.raises(ValueError):
        Series(("a", "b"), (1.0,))


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (3, 3.0),
        ("  4.5 ", 4.5),
        ("", 0.0),
        ("1e3", 1000.0),
        ("abc", None),
        ("1_000", None),
        (None, None),
        (float("inf"), None),
        ("nan", None),
        (True, 1.0),
    ],
)
def test_parse_number(raw, expected) -> None:
    """Parse finite numbers and reject everything else."""

    assert parse_number(raw) == expected


def test_format_number_drops_trailing_zero() -> None:
    """Show integral floats without a decimal point."""

    assert format_number(5.0) == "5"
    assert format_number(2.5) == "2.5"
    assert format_number(-0.125) == "-0.125"
