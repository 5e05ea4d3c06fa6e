"""Ingestion: raw JSON / CSV / TSV / ping-log bytes to chartable values.

    delimited  -- quote-aware CSV/TSV tokenizer and header heuristic
    pinglog    -- per-host averages from "HH:MM:SS host:value ..." lines
    pipeline   -- source reading, format resolution, the safe_load boundary
    route      -- picks chart / ping log / note for a file by name and content
"""

from ingest.delimited import ParsedTable, looks_like_header, parse_delimited
from ingest.errors import FetchError, IngestError, ParseError, SemanticError
from ingest.pinglog import aggregate_ping_log, looks_like_ping_log
from ingest.pipeline import (
    Blob,
    IngestReport,
    Outcome,
    load,
    load_ping_log,
    safe_load,
    safe_load_ping_log,
)
from ingest.route import preview_note, route_file

__all__ = [
    "ParsedTable", "parse_delimited", "looks_like_header",
    "IngestError", "FetchError", "ParseError", "SemanticError",
    "aggregate_ping_log", "looks_like_ping_log",
    "Blob", "IngestReport", "Outcome",
    "load", "load_ping_log", "safe_load", "safe_load_ping_log",
    "route_file", "preview_note",
]
