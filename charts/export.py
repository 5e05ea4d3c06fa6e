"""Headless rendering to PNG.

Runs the same pipeline as the dashboard -- ingest, normalise, mount,
redraw controller -- against an offscreen ImageContainer, then saves the
committed frame.
"""

import logging
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import List, Optional
from urllib.parse import urlparse

from charts.mount import ImageContainer, add_chart_file, add_ping_log_chart, mount_chart
from charts.theme import ThemeState
from ingest.errors import IngestError
from ingest.pipeline import Blob, describe, is_url, read_text
from ingest.route import preview_note, route_file

logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    path: Optional[str] = None
    route: str = "chart"
    notes: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.path is not None


def _save(container: ImageContainer, handle, out_path, result: RenderResult) -> RenderResult:
    container.pump()
    try:
        if handle.surface.image is None:
            result.notes.append(f"render: nothing drawn ({handle.controller.failures} failed draws)")
            return result
        handle.surface.save(out_path)
    finally:
        handle.dispose()
    result.path = str(out_path)
    logger.info("Wrote %s", out_path)
    return result


def render_png(values, out_path, kind: str = "bar", options=None,
               width: float = 640, scale: float = 1.0, theme=None) -> RenderResult:
    """Chart in-memory values straight to a PNG file."""
    container = ImageContainer(width, scale)
    handle = mount_chart(container, values, kind, options, theme)
    return _save(container, handle, out_path, RenderResult(route="chart"))


def render_file(source, out_path, kind: str = "bar", mode: str = "auto",
                options=None, fmt: Optional[str] = None, width: float = 640,
                scale: float = 1.0, theme_name: Optional[str] = None,
                session=None) -> RenderResult:
    """Ingest a file or URL and render it, or return the note shown instead."""
    container = ImageContainer(width, scale)
    theme = ThemeState(initial=theme_name) if theme_name else None
    name = describe(source)

    text = None
    path_name = urlparse(name).path if is_url(name) else name
    suffix = PurePosixPath(path_name).suffix.lower()
    if mode == "note" or (mode == "auto" and suffix == ".txt"):
        try:
            text = read_text(source, session=session)
        except IngestError as exc:
            logger.error("render failed: %s", exc)
            return RenderResult(route=mode, notes=[f"chartfile: {exc}"])

    route = route_file(path_name, text, mode)
    result = RenderResult(route=route)

    if route == "note":
        container.add_note(preview_note(text))
        result.notes = container.notes
        return result
    if route == "pinglog":
        if text is not None:
            source = Blob(text, "text/plain", name)
        handle = add_ping_log_chart(container, source, options, theme, session=session)
    else:
        handle = add_chart_file(container, source, kind, options, fmt,
                                theme=theme, session=session)

    result.notes = container.notes
    if handle is None:
        return result
    return _save(container, handle, out_path, result)
