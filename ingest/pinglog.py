"""Ping-log aggregation.

A ping log is what a periodic ping checker writes, one line per round:

    10:00:01 gw:3 nas:12 vps:41
    10:00:02 gw:2 nas:15 vps:39

The aggregator keeps the last ``limit`` lines, drops the timestamp, and
averages every ``host:value`` token per host. Tokens that are not
``host:number`` are skipped and counted.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from charts.series import parse_number
from config import PING_LOG_DEFAULTS
from ingest.errors import ParseError, SemanticError

logger = logging.getLogger(__name__)

LINE_SPLIT_RE = re.compile(r"\r?\n")
PING_LINE_RE = re.compile(r"\b\d{2}:\d{2}:\d{2}\s+\w+:\d+(?:\s+\w+:\d+)+")


@dataclass
class PingLogReport:
    lines: int = 0
    pairs: int = 0
    skipped: int = 0
    hosts: int = 0


def round_half_up(value: float) -> int:
    """Round like a chart reader expects: 2.5 -> 3, -2.5 -> -2."""
    return math.floor(value + 0.5)


def looks_like_ping_log(text: str) -> bool:
    return PING_LINE_RE.search(text or "") is not None


def aggregate_ping_log(text: str, limit: Optional[int] = None) -> Tuple[List[Dict], PingLogReport]:
    """Average ``host:value`` samples per host over the last ``limit`` lines.

    Returns ``([{"label": host, "value": mean}, ...], report)`` with hosts in
    first-seen order and means rounded half up. ``limit`` below 1 means
    every line.
    """
    lines = [ln for ln in LINE_SPLIT_RE.split((text or "").strip()) if ln]
    if not lines:
        raise ParseError("empty log")

    limit = PING_LOG_DEFAULTS["limit"] if limit is None else int(limit)
    if limit >= 1:
        lines = lines[-limit:]

    report = PingLogReport(lines=len(lines))
    samples: Dict[str, List[float]] = {}

    for line in lines:
        for token in line.split()[1:]:
            parts = token.split(":")
            host = parts[0]
            raw = parts[1] if len(parts) > 1 else ""
            value = parse_number(raw) if raw else None
            if not host or value is None:
                report.skipped += 1
                logger.debug("Skipping ping token %r", token)
                continue
            samples.setdefault(host, []).append(value)
            report.pairs += 1

    if not samples:
        raise SemanticError("no host:value pairs found")

    report.hosts = len(samples)
    values = [
        {"label": host, "value": round_half_up(sum(vals) / len(vals))}
        for host, vals in samples.items()
    ]
    return values, report
