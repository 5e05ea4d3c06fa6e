"""Pytest fixtures shared across the chart and ingestion tests."""

from __future__ import annotations

from typing import Any

import pytest

from charts.palette import PALETTE
from charts.surface import ImageSurface
from charts.theme import ThemeState


class RecordingSurface(ImageSurface):
    """ImageSurface that also records every primitive it is asked to draw."""

    def __init__(self, width: float = 320, scale: float = 1.0) -> None:
        super().__init__(width, scale)
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.fail_on: str | None = None

    def _record(self, name: str, args: tuple[Any, ...]) -> None:
        if self.fail_on == name:
            raise RuntimeError(f"{name} failed")
        self.calls.append((name, args))

    def begin_frame(self, width, height, scale):
        self.calls = []
        super().begin_frame(width, height, scale)

    def fill_rect(self, x0, y0, x1, y1, fill):
        self._record("fill_rect", (x0, y0, x1, y1, fill))
        super().fill_rect(x0, y0, x1, y1, fill)

    def line(self, x0, y0, x1, y1, fill, width=1):
        self._record("line", (x0, y0, x1, y1, fill))
        super().line(x0, y0, x1, y1, fill, width)

    def wedge(self, cx, cy, r, start_deg, extent_deg, fill):
        self._record("wedge", (cx, cy, r, start_deg, extent_deg, fill))
        super().wedge(cx, cy, r, start_deg, extent_deg, fill)

    def text(self, x, y, text, fill, size=12, align="left", baseline="alphabetic"):
        self._record("text", (x, y, text, fill))
        super().text(x, y, text, fill, size, align, baseline)

    def texts(self) -> list[str]:
        return [args[2] for name, args in self.calls if name == "text"]


class StubResponse:
    """Just enough of requests.Response for fetch_text()."""

    def __init__(self, text: str = "", status_code: int = 200) -> None:
        self.text = text
        self.status_code = status_code


class StubSession:
    """Records GET calls and answers with canned responses keyed by URL."""

    def __init__(self, responses: dict[str, StubResponse] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        return self.responses.get(url, StubResponse("", 404))

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def reset_palette():
    """Keep the process-wide palette at its default between tests."""

    PALETTE.reset()
    yield
    PALETTE.reset()


@pytest.fixture
def theme() -> ThemeState:
    """Return a private dark ThemeState so tests never touch THEME_STATE."""

    return ThemeState()


@pytest.fixture
def surface() -> RecordingSurface:
    """Return a 320px wide recording surface at scale 1."""

    return RecordingSurface(320)


@pytest.fixture
def stub_session() -> StubSession:
    """Return an empty StubSession; tests add responses as needed."""

    return StubSession()


@pytest.fixture
def make_surface():
    """Return the RecordingSurface class for tests that need several surfaces."""

    return RecordingSurface


@pytest.fixture
def make_response():
    """Return the StubResponse class."""

    return StubResponse
