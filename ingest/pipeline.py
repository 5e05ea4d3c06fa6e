"""Ingestion pipeline: raw bytes to chartable values.

Sources:
    Blob(data, mime_type, name)   in-memory bytes (e.g. an upload)
    "https://host/data.csv"       fetched with requests, no-store, no auth
    "data/latency.tsv" / Path     read from disk

Formats: json, csv, tsv, and log (ping log). A declared format always
wins; otherwise blobs are classified by MIME type and URLs / paths by
file extension.

load() raises IngestError subclasses. safe_load() and safe_load_ping_log()
are the boundary the rest of the app uses: they never raise and return an
Outcome holding either values or a note to show in place of the chart.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlparse

import requests

from charts.series import parse_number
from config import FETCH_TIMEOUT
from ingest.delimited import looks_like_header, parse_delimited
from ingest.errors import FetchError, IngestError, ParseError
from ingest.pinglog import aggregate_ping_log

logger = logging.getLogger(__name__)

FORMATS = ("json", "csv", "tsv", "log")
DELIMITERS = {"csv": ",", "tsv": "\t"}


@dataclass
class Blob:
    """In-memory file contents with the MIME type the browser/OS reported."""

    data: Union[bytes, str]
    mime_type: str = ""
    name: str = ""

    def text(self) -> str:
        if isinstance(self.data, str):
            return self.data
        return self.data.decode("utf-8-sig", errors="replace")


@dataclass
class IngestReport:
    rows: int = 0
    accepted: int = 0
    malformed: int = 0
    blank: int = 0
    header: Optional[List[str]] = None
    skipped: int = 0


@dataclass
class Ingested:
    values: Any
    fmt: str
    report: IngestReport = field(default_factory=IngestReport)


@dataclass
class Outcome:
    """Result at the pipeline boundary: values, or a note explaining the failure."""

    values: Any = None
    note: Optional[str] = None
    fmt: Optional[str] = None
    report: Optional[IngestReport] = None

    @property
    def ok(self) -> bool:
        return self.note is None


# ---------------------------------------------------------------------------
# Source reading
# ---------------------------------------------------------------------------

def is_url(source) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def extension_format(path: str) -> str:
    ext = PurePosixPath(path).suffix.lower().lstrip(".")
    if ext in ("json", "tsv"):
        return ext
    return "csv"


def mime_format(mime_type: str) -> str:
    mime = (mime_type or "").lower()
    if "json" in mime:
        return "json"
    if "tsv" in mime or "tab-separated" in mime:
        return "tsv"
    return "csv"


def resolve_format(source, declared: Optional[str] = None) -> str:
    """Declared format, else MIME type for blobs, else file extension."""
    if declared:
        fmt = declared.lower().lstrip(".")
        if fmt == "txt":
            fmt = "log"
        if fmt not in FORMATS:
            raise ParseError(f"unsupported format: {declared}")
        return fmt
    if isinstance(source, Blob):
        return mime_format(source.mime_type)
    if is_url(source):
        return extension_format(urlparse(source).path)
    return extension_format(os.fspath(source))


def fetch_text(url: str, session=None, timeout: float = FETCH_TIMEOUT) -> str:
    """GET a URL bypassing caches. Any non-2xx status is a FetchError."""
    http = session or requests
    try:
        resp = http.get(url, headers={"Cache-Control": "no-store"}, timeout=timeout)
    except requests.RequestException as exc:
        raise FetchError(f"{url}: {exc}") from exc
    if not 200 <= resp.status_code < 300:
        raise FetchError(f"HTTP {resp.status_code}", status=resp.status_code)
    return resp.text


def read_text(source, session=None) -> str:
    if isinstance(source, Blob):
        return source.text()
    if is_url(source):
        return fetch_text(source, session=session)
    try:
        return Path(source).read_text(encoding="utf-8-sig", errors="replace")
    except OSError as exc:
        raise FetchError(f"cannot read {source}: {exc.strerror or exc}") from exc


# ---------------------------------------------------------------------------
# Format handlers
# ---------------------------------------------------------------------------

def json_values(text: str):
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise ParseError(f"invalid JSON: {exc}") from exc
    if isinstance(data, (list, dict)):
        return data, IngestReport(rows=len(data), accepted=len(data))
    logger.debug("JSON top-level %s charted as empty series", type(data).__name__)
    return [], IngestReport()


def table_values(text: str, delimiter: str, has_header: Optional[bool] = None):
    """Delimited text to ``[{"label", "value"}]`` records.

    Columns named ``label`` and ``value`` (any case) are used when the
    header has both; otherwise column 0 is the label and column 1 the value.
    """
    table = parse_delimited(text, delimiter)
    kept = table.non_blank()
    report = IngestReport(rows=len(table), blank=len(table) - len(kept))
    if not kept.rows:
        raise ParseError("Empty file")

    rows = kept.rows
    is_header = looks_like_header(rows[0]) if has_header is None else has_header
    label_idx, value_idx = 0, 1
    if is_header:
        report.header = [str(c).strip().lower() for c in rows[0]]
        rows = rows[1:]
        if "label" in report.header and "value" in report.header:
            label_idx = report.header.index("label")
            value_idx = report.header.index("value")

    values = []
    for row in rows:
        label = row[label_idx] if label_idx < len(row) else ""
        raw = row[value_idx] if value_idx < len(row) else None
        value = parse_number(raw)
        if value is None:
            report.malformed += 1
            logger.debug("Non-numeric value %r for %r", raw, label)
            value = 0.0
        values.append({"label": label, "value": value})
    report.accepted = len(values)
    return values, report


def load(source, fmt: Optional[str] = None, *, has_header: Optional[bool] = None,
         limit: Optional[int] = None, session=None) -> Ingested:
    """Read ``source`` and turn it into values normalize() accepts."""
    fmt = resolve_format(source, fmt)
    text = read_text(source, session=session)

    if fmt == "json":
        values, report = json_values(text)
    elif fmt == "log":
        values, ping = aggregate_ping_log(text, limit)
        report = IngestReport(rows=ping.lines, accepted=ping.pairs,
                              skipped=ping.skipped)
    else:
        values, report = table_values(text, DELIMITERS[fmt], has_header)

    logger.info("Loaded %s (%s): %d rows, %d blank, %d malformed, %d skipped",
                describe(source), fmt, report.rows, report.blank, report.malformed,
                report.skipped)
    return Ingested(values=values, fmt=fmt, report=report)


def load_ping_log(source, limit: Optional[int] = None, *, session=None) -> Ingested:
    return load(source, "log", limit=limit, session=session)


def describe(source) -> str:
    if isinstance(source, Blob):
        return source.name or f"<{source.mime_type or 'blob'}>"
    return str(source)


# ---------------------------------------------------------------------------
# Boundary
# ---------------------------------------------------------------------------

def _failure(prefix: str, exc: Exception) -> Outcome:
    reason = str(exc) or exc.__class__.__name__
    if isinstance(exc, IngestError):
        logger.error("%s failed: %s", prefix, reason)
    else:
        logger.exception("%s failed unexpectedly: %s", prefix, reason)
    return Outcome(note=f"{prefix}: {reason}")


def safe_load(source, fmt: Optional[str] = None, **kwargs) -> Outcome:
    """load() that never raises. Failures come back as ``Outcome.note``."""
    try:
        result = load(source, fmt, **kwargs)
    except Exception as exc:
        return _failure("chartfile", exc)
    return Outcome(values=result.values, fmt=result.fmt, report=result.report)


def safe_load_ping_log(source, limit: Optional[int] = None, **kwargs) -> Outcome:
    try:
        result = load_ping_log(source, limit, **kwargs)
    except Exception as exc:
        return _failure("pinglog", exc)
    return Outcome(values=result.values, fmt=result.fmt, report=result.report)


def outcome_payload(outcome: Outcome, source_id: str = "") -> Dict[str, Any]:
    """Event-bus payload for a loaded chart file."""
    return {
        "_source": source_id,
        "values": outcome.values,
        "fmt": outcome.fmt,
        "note": outcome.note,
        "report": outcome.report,
    }
