"""Decide what to do with a dropped/opened file.

    .json / .csv / .tsv        -> "chart"
    .txt that reads as a ping  -> "pinglog"
    any other .txt             -> "note"  (first lines shown as text)
    anything else              -> "chart"
"""

from pathlib import PurePosixPath
from typing import Optional

from config import NOTE_PREVIEW_LINES
from ingest.pinglog import LINE_SPLIT_RE, looks_like_ping_log

MODES = ("auto", "chart", "pinglog", "note")


def route_file(name: str, text: Optional[str] = None, mode: str = "auto") -> str:
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode}")
    if mode != "auto":
        return mode

    ext = PurePosixPath(name or "").suffix.lower()
    if ext in (".json", ".csv", ".tsv"):
        return "chart"
    if ext == ".txt":
        return "pinglog" if looks_like_ping_log(text or "") else "note"
    return "chart"


def preview_note(text: str, lines: int = NOTE_PREVIEW_LINES) -> str:
    return "\n".join(LINE_SPLIT_RE.split(text or "")[:lines])
