"""Tests for source reading, format resolution and the safe_load boundary."""

from __future__ import annotations

import logging

import pytest
import requests

from ingest import pipeline
from ingest.errors import FetchError, ParseError
from ingest.pipeline import (
    Blob,
    fetch_text,
    load,
    outcome_payload,
    resolve_format,
    safe_load,
    safe_load_ping_log,
)

pytestmark = [pytest.mark.unit]


@pytest.mark.parametrize(
    ("source", "declared", "expected"),
    [
        ("data/a.json", None, "json"),
        ("data/a.TSV", None, "tsv"),
        ("data/a.csv", None, "csv"),
        ("data/a.dat", None, "csv"),
        ("https://host/x.json?v=2", None, "json"),
        (Blob(b"", "application/json"), None, "json"),
        (Blob(b"", "text/tab-separated-values"), None, "tsv"),
        (Blob(b"", "text/plain"), None, "csv"),
        ("data/a.csv", "json", "json"),
        ("data/a.csv", ".TXT", "log"),
    ],
)
def test_resolve_format(source, declared, expected) -> None:
    """Prefer the declared format, then MIME type, then extension."""

    assert resolve_format(source, declared) == expected


def test_resolve_format_rejects_unknown_declared_format() -> None:
    """Fail parsing for a declared format the pipeline cannot read."""

    with pytest.raises(ParseError):
        resolve_format("a.csv", "xml")


def test_csv_with_label_value_header(tmp_path) -> None:
    """Pick the label and value columns by header name."""

    path = tmp_path / "latency.csv"
    path.write_text("value,label\n120,/login\n340,/search\n")

    result = load(path)

    assert result.fmt == "csv"
    assert result.values == [
        {"label": "/login", "value": 120.0},
        {"label": "/search", "value": 340.0},
    ]
    assert result.report.header == ["value", "label"]


def test_csv_without_header_uses_first_two_columns() -> None:
    """Read column 0 as label and column 1 as value when there is no header."""

    result = load(Blob("a,1\nb,2\n", "text/csv"))

    assert result.values == [{"label": "a", "value": 1.0}, {"label": "b", "value": 2.0}]
    assert result.report.header is None


def test_explicit_has_header_overrides_heuristic() -> None:
    """Keep an all-text first row as data when has_header is False."""

    result = load(Blob("apples,3\npears,4\n", "text/csv"), has_header=False)
    guessed = load(Blob("apples,pears\nfigs,4\n", "text/csv"))

    assert [v["label"] for v in result.values] == ["apples", "pears"]
    assert [v["label"] for v in guessed.values] == ["figs"]


def test_tsv_blob_with_quotes_and_bom() -> None:
    """Decode a BOM-prefixed TSV upload with quoted tabs."""

    blob = Blob("\ufefflabel\tvalue\n\"a\tb\"\t5\n".encode("utf-8"), "text/tab-separated-values")

    assert load(blob).values == [{"label": "a\tb", "value": 5.0}]


def test_malformed_and_blank_rows_are_counted(caplog) -> None:
    """Chart bad values as 0 and count blank and malformed rows."""

    caplog.set_level(logging.DEBUG, logger="ingest.pipeline")
    result = load(Blob("label,value\na,1\n,\nb,oops\nc\n", "text/csv"))

    assert result.values == [
        {"label": "a", "value": 1.0},
        {"label": "b", "value": 0.0},
        {"label": "c", "value": 0.0},
    ]
    assert result.report.blank == 1
    assert result.report.malformed == 2
    assert result.report.accepted == 3


def test_empty_lines_are_counted_as_blank() -> None:
    """Count fully blank lines without charting them."""

    result = load(Blob("a,1\n\n\nb,2\n", "text/csv"))

    assert result.values == [{"label": "a", "value": 1.0}, {"label": "b", "value": 2.0}]
    assert result.report.rows == 4
    assert result.report.blank == 2


def test_json_array_and_object() -> None:
    """Pass JSON arrays and objects through as chart values."""

    assert load(Blob('[{"label": "a", "value": 1}]', "application/json")).values == [
        {"label": "a", "value": 1}
    ]
    assert load(Blob('{"a": 1}', "application/json")).values == {"a": 1}
    assert load(Blob("42", "application/json")).values == []


def test_empty_csv_becomes_a_note_not_an_exception() -> None:
    """Surface an empty table as a note at the boundary."""

    outcome = safe_load(Blob("", "text/csv"))

    assert not outcome.ok
    assert outcome.note == "chartfile: Empty file"
    assert outcome.values is None


def test_whitespace_only_csv_is_empty() -> None:
    """Treat a table of blank rows as empty."""

    outcome = safe_load(Blob(" , \n\t\n", "text/csv"))

    assert outcome.note == "chartfile: Empty file"


def test_invalid_json_becomes_a_note() -> None:
    """Report malformed JSON as a parse failure note."""

    outcome = safe_load(Blob("{nope", "application/json"))

    assert outcome.note.startswith("chartfile: invalid JSON")


def test_missing_file_becomes_a_note(tmp_path) -> None:
    """Report an unreadable path as a fetch failure note."""

    outcome = safe_load(tmp_path / "missing.csv")

    assert outcome.note.startswith("chartfile: cannot read")


def test_fetch_sends_no_store_and_returns_body(stub_session, make_response) -> None:
    """GET with Cache-Control: no-store and return the response text."""

    url = "https://host/data.csv"
    stub_session.responses[url] = make_response("a,1\n")

    assert fetch_text(url, session=stub_session) == "a,1\n"
    assert stub_session.calls[0]["headers"] == {"Cache-Control": "no-store"}


def test_non_2xx_response_raises_fetch_error(stub_session) -> None:
    """Turn any status outside 200-299 into a FetchError."""

    with pytest.raises(FetchError) as excinfo:
        fetch_text("https://host/missing.csv", session=stub_session)

    assert excinfo.value.status == 404
    assert str(excinfo.value) == "HTTP 404"


def test_http_error_status_becomes_note(stub_session, make_response) -> None:
    """Show the HTTP status in the note instead of raising."""

    url = "https://host/data.json"
    stub_session.responses[url] = make_response("oops", 503)

    outcome = safe_load(url, session=stub_session)

    assert outcome.note == "chartfile: HTTP 503"


def test_connection_error_becomes_fetch_error(monkeypatch) -> None:
    """Wrap requests exceptions in FetchError using the module-level client."""

    def refuse(url, headers=None, timeout=None):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(pipeline.requests, "get", refuse)

    with pytest.raises(FetchError):
        fetch_text("https://host/data.csv")
    assert "connection refused" in safe_load("https://host/data.csv").note


def test_url_json_is_fetched_through_requests(monkeypatch, make_response) -> None:
    """Load a JSON URL through requests.get by default."""

    calls = []

    def fake_get(url, headers=None, timeout=None):
        calls.append(url)
        return make_response('{"a": 2}')

    monkeypatch.setattr(pipeline.requests, "get", fake_get)

    outcome = safe_load("https://host/data.json")

    assert outcome.ok
    assert outcome.values == {"a": 2}
    assert calls == ["https://host/data.json"]


def test_ping_log_boundary_note_for_no_pairs() -> None:
    """Report a ping log without host:value pairs as a semantic note."""

    outcome = safe_load_ping_log(Blob("10:00:01 nothing here\n", "text/plain"))

    assert outcome.note == "pinglog: no host:value pairs found"


def test_unexpected_errors_are_still_contained(monkeypatch, caplog) -> None:
    """Catch even non-ingest exceptions at the boundary and log them."""

    def explode(*args, **kwargs):
        raise KeyError("boom")

    monkeypatch.setattr(pipeline, "read_text", explode)

    outcome = safe_load("a.csv")

    assert outcome.note.startswith("chartfile: ")
    assert "failed unexpectedly" in caplog.text


def test_outcome_payload_shape() -> None:
    """Build the event-bus payload from an outcome."""

    outcome = safe_load(Blob("a,1\n", "text/csv"))
    payload = outcome_payload(outcome, "files.a")

    assert payload["_source"] == "files.a"
    assert payload["fmt"] == "csv"
    assert payload["note"] is None
    assert payload["values"] == [{"label": "a", "value": 1.0}]
    assert payload["report"].accepted == 1
