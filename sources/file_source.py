"""Chart file and ping log data sources.

Load a JSON / CSV / TSV chart file, or a ping log, from disk or over HTTP
and publish the result. Loading goes through the ingestion boundary, so a
bad file never kills the thread: the payload carries a note instead.

Config example (in dashboard.yaml):
    sources:
      - id: "files.regions"
        type: "chartfile"
        path: "data/regions.csv"     # or url: "https://host/regions.json"
        format: "csv"                # optional, default from extension
        has_header: true             # optional, default: guessed

      - id: "files.ping"
        type: "pinglog"
        path: "logs/ping.txt"
        limit: 20                    # last N lines, 0 = all
        interval: 30                 # optional: reload every 30s
"""

import logging
from typing import Any, Dict, Optional

import requests

from config import PING_LOG_DEFAULTS
from core.data_source import DataSource
from core.registry import register_source
from ingest.pipeline import Outcome, outcome_payload, safe_load, safe_load_ping_log

logger = logging.getLogger(__name__)


class _FileSource(DataSource):
    """Shared config handling: ``path`` or ``url``, one requests session."""

    prefix = "chartfile"

    def __init__(self, source_id: str, bus, config: Dict):
        super().__init__(source_id, bus, config)
        self.location = config.get("path") or config.get("url") or ""
        self._session = requests.Session()

    def fetch(self) -> Optional[Dict[str, Any]]:
        if not self.location:
            logger.warning("%s %s: no path or url configured", self.prefix, self.source_id)
            return outcome_payload(
                Outcome(note=f"{self.prefix}: no path or url configured"), self.source_id
            )
        return outcome_payload(self.load(), self.source_id)

    def load(self) -> Outcome:
        raise NotImplementedError

    def close(self):
        super().close()
        self._session.close()


@register_source("chartfile")
class ChartFileSource(_FileSource):
    """Publishes chart values loaded from a JSON / CSV / TSV file or URL."""

    def __init__(self, source_id: str, bus, config: Dict):
        super().__init__(source_id, bus, config)
        self.fmt = config.get("format")
        self.has_header = config.get("has_header")

    def load(self) -> Outcome:
        return safe_load(self.location, self.fmt, has_header=self.has_header,
                         session=self._session)


@register_source("pinglog")
class PingLogSource(_FileSource):
    """Publishes per-host ping averages from the tail of a ping log."""

    prefix = "pinglog"

    def __init__(self, source_id: str, bus, config: Dict):
        super().__init__(source_id, bus, config)
        self.limit = config.get("limit", PING_LOG_DEFAULTS["limit"])

    def load(self) -> Outcome:
        return safe_load_ping_log(self.location, self.limit, session=self._session)
