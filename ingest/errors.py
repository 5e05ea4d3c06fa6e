"""Ingestion error types.

Everything raised inside the pipeline derives from IngestError so the
boundary (``safe_load``) can turn it into a visible note.
"""


class IngestError(Exception):
    """Base class for chart-file ingestion failures."""


class FetchError(IngestError):
    """A URL answered with a non-2xx status or could not be reached."""

    def __init__(self, message: str, status: int = 0):
        super().__init__(message)
        self.status = status


class ParseError(IngestError):
    """Malformed JSON, or a delimited/log file with nothing usable in it."""


class SemanticError(IngestError):
    """The text parsed, but holds no recognisable data (e.g. no host:value pairs)."""
