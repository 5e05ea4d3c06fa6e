"""Tests for file routing and headless PNG rendering."""

from __future__ import annotations

import pytest
from PIL import Image

import main
from charts import mount
from charts.export import render_file, render_png
from charts.mount import ImageContainer, add_chart_file, add_ping_log_chart
from config import CHART_DEFAULTS, PING_LOG_DEFAULTS
from ingest.pipeline import Blob
from ingest.route import preview_note, route_file

pytestmark = [pytest.mark.unit]

PING = "10:00:01 gw:3 dns:9\n10:00:02 gw:5 dns:11\n"


@pytest.mark.parametrize(
    ("name", "text", "expected"),
    [
        ("data.json", None, "chart"),
        ("DATA.CSV", None, "chart"),
        ("data.tsv", None, "chart"),
        ("ping.txt", PING, "pinglog"),
        ("readme.txt", "hello\nworld", "note"),
        ("data.xlsx", None, "chart"),
        ("", None, "chart"),
    ],
)
def test_route_file(name, text, expected) -> None:
    """Route by extension, and .txt files by content."""

    assert route_file(name, text) == expected


def test_route_file_honours_explicit_mode() -> None:
    """Skip detection when a mode is forced."""

    assert route_file("ping.txt", PING, "note") == "note"
    with pytest.raises(ValueError):
        route_file("a.csv", None, "sideways")


def test_preview_note_keeps_first_lines() -> None:
    """Show at most the requested number of lines."""

    text = "\r\n".join(str(i) for i in range(30))

    assert preview_note(text, 3) == "0\n1\n2"
    assert preview_note(text).count("\n") == 9


def test_add_chart_file_failure_adds_note() -> None:
    """Add the pipeline note to the container instead of a chart."""

    container = ImageContainer()

    handle = add_chart_file(container, Blob("", "text/csv"))

    assert handle is None
    assert container.notes == ["chartfile: Empty file"]
    assert container.surfaces == []


def test_add_ping_log_chart_uses_ping_defaults(theme) -> None:
    """Chart ping averages as a titled bar chart."""

    container = ImageContainer(400)

    with add_ping_log_chart(container, Blob(PING, "text/plain"), theme=theme) as handle:
        container.pump()
        assert handle.kind == "bar"
        assert handle.surface.style_height == PING_LOG_DEFAULTS["height"]
        assert handle.controller.draws == 1


def test_render_png_writes_image(tmp_path, theme) -> None:
    """Write a PNG of the committed frame at device resolution."""

    out = tmp_path / "share.png"

    result = render_png({"a": 1, "b": 2}, out, "pie", width=300, scale=2, theme=theme)

    assert result.ok
    with Image.open(out) as img:
        assert img.size == (600, 2 * CHART_DEFAULTS["pie"]["height"])


def test_render_file_csv(tmp_path) -> None:
    """Ingest a CSV file and render it as a bar chart."""

    src = tmp_path / "latency.csv"
    src.write_text("label,value\n/login,120\n/search,340\n")
    out = tmp_path / "latency.png"

    result = render_file(src, out, width=320)

    assert result.ok
    assert result.route == "chart"
    assert out.exists()


def test_render_file_ping_log_txt(tmp_path) -> None:
    """Detect a ping log in a .txt file and chart it."""

    src = tmp_path / "ping.txt"
    src.write_text(PING)

    result = render_file(src, tmp_path / "ping.png")

    assert result.ok
    assert result.route == "pinglog"


def test_render_file_plain_txt_becomes_note(tmp_path) -> None:
    """Return a preview note for a text file that is not a ping log."""

    src = tmp_path / "readme.txt"
    src.write_text("first line\nsecond line\n")
    out = tmp_path / "readme.png"

    result = render_file(src, out)

    assert not result.ok
    assert result.route == "note"
    assert result.notes == ["first line\nsecond line\n"]
    assert not out.exists()


def test_render_file_ingest_failure_returns_note(tmp_path) -> None:
    """Return the ingest note and write nothing for an empty file."""

    src = tmp_path / "empty.csv"
    src.write_text("")
    out = tmp_path / "empty.png"

    result = render_file(src, out)

    assert not result.ok
    assert result.notes == ["chartfile: Empty file"]
    assert not out.exists()


def test_render_file_url_routes_on_path(stub_session, make_response, tmp_path) -> None:
    """Ignore the query string when routing a URL and fetch it only once."""

    url = "https://host/ping.txt?fresh=1"
    stub_session.responses[url] = make_response(PING)

    result = render_file(url, tmp_path / "ping.png", session=stub_session)

    assert result.route == "pinglog"
    assert result.ok
    assert [call["url"] for call in stub_session.calls] == [url]


def test_main_render_exit_codes(tmp_path, capsys) -> None:
    """Exit 0 with the PNG path, or 1 with the note on stderr."""

    good = tmp_path / "data.json"
    good.write_text('{"a": 3, "b": 4}')
    bad = tmp_path / "bad.json"
    bad.write_text("{")

    assert main.main(["--render", str(good), "--out", str(tmp_path / "ok.png"),
                      "--kind", "pie", "--title", "Share"]) == 0
    assert main.main(["--render", str(bad), "--out", str(tmp_path / "bad.png")]) == 1

    captured = capsys.readouterr()
    assert str(tmp_path / "ok.png") in captured.out
    assert "chartfile: invalid JSON" in captured.err


def test_render_result_reports_failed_draws(tmp_path, monkeypatch, theme) -> None:
    """Report a note instead of saving when every draw failed."""

    def broken(surface, series, options=None, theme=None):
        raise RuntimeError("boom")

    monkeypatch.setitem(mount.DRAWERS, "bar", broken)

    result = render_png([1, 2], tmp_path / "x.png", theme=theme)

    assert not result.ok
    assert result.notes == ["render: nothing drawn (1 failed draws)"]
