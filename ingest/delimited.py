"""Quote-aware delimited text parsing and header detection.

Handles CSV and TSV the way spreadsheet exports write them: a double quote
toggles quoted mode, a doubled quote inside quotes is a literal quote, and
delimiters or newlines inside quotes are part of the field. Parsing is
permissive -- an unterminated quote simply runs to the end of the text.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

HEADER_CELL_RE = re.compile(r"^[\w .\-()#]+$", re.ASCII)
NUMERIC_CELL_RE = re.compile(r"^\d+(\.\d+)?$", re.ASCII)


@dataclass
class ParsedTable:
    """Rows of string fields plus an optional header row."""

    rows: List[List[str]] = field(default_factory=list)
    header: Optional[List[str]] = None

    def __len__(self):
        return len(self.rows)

    def non_blank(self) -> "ParsedTable":
        """Copy without rows whose fields are all whitespace."""
        kept = [r for r in self.rows if any(str(c).strip() for c in r)]
        return ParsedTable(rows=kept, header=self.header)


def parse_delimited(text: str, delimiter: str = ",") -> ParsedTable:
    """Split text into rows of fields, honouring double-quoted fields."""
    if len(delimiter) != 1:
        raise ValueError(f"delimiter must be a single character, got {delimiter!r}")

    rows: List[List[str]] = []
    row: List[str] = []
    buf: List[str] = []
    in_quotes = False
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""
        if ch == '"':
            if in_quotes and nxt == '"':
                buf.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif ch == delimiter and not in_quotes:
            row.append("".join(buf))
            buf = []
        elif ch in "\r\n" and not in_quotes:
            row.append("".join(buf))
            rows.append(row)
            row, buf = [], []
            if ch == "\r" and nxt == "\n":
                i += 1
        else:
            buf.append(ch)
        i += 1

    if buf or row:
        row.append("".join(buf))
        rows.append(row)

    return ParsedTable(rows=rows)


def looks_like_header(row: Sequence) -> bool:
    """Guess whether a row is a header row.

    True when every cell is a word-ish string (letters, digits, space, dot,
    hyphen, parens, hash) and none of them is a bare number.

    This is a heuristic: a first row of plain categorical data such as
    ``apples,pears`` is indistinguishable from a header and will be
    treated as one. Pass ``has_header`` to the pipeline to skip detection.
    """
    if not row:
        return False
    for cell in row:
        if not isinstance(cell, str):
            return False
        if not HEADER_CELL_RE.match(cell) or NUMERIC_CELL_RE.match(cell):
            return False
    return True
