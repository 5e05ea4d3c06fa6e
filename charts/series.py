"""Series normalisation -- any accepted input shape to (labels, data).

Inputs are classified once into a small closed set of shapes and then
normalised by shape. Classification looks at the container type and, for
sequences, at the type of the first element:

    mapping              -> MappingInput   labels = keys, data = values
    [ {label, value} ]   -> RecordArray    labels/values taken per record
    [ 3, 1, 4 ]          -> NumberArray    labels = "1".."n"
    [ "x", "x", "y" ]    -> StringArray    histogram, first-seen order
    [ ["a", 1], ... ]    -> PairArray      label = row[0], value = row[1]
    anything else        -> Unrecognized   empty series
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class Series:
    """Canonical chart input: parallel label and value tuples."""

    labels: Tuple[str, ...] = ()
    data: Tuple[float, ...] = ()

    def __post_init__(self):
        if len(self.labels) != len(self.data):
            raise ValueError(
                f"labels/data length mismatch: {len(self.labels)} != {len(self.data)}"
            )

    def __len__(self):
        return len(self.data)

    def as_records(self) -> List[Dict[str, Any]]:
        return [{"label": l, "value": v} for l, v in zip(self.labels, self.data)]


EMPTY_SERIES = Series()


# ---------------------------------------------------------------------------
# Number / text coercion
# ---------------------------------------------------------------------------

def parse_number(value: Any) -> Optional[float]:
    """Return value as a finite float, or None when it is not a number.

    Strings are stripped first; an empty string counts as 0 the way a
    spreadsheet blank does.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        num = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if "_" in text:
            return None
        try:
            num = float(text)
        except ValueError:
            return None
    else:
        return None
    return num if math.isfinite(num) else None


def to_number(value: Any) -> float:
    """Coerce to a finite float; missing or non-numeric values become 0."""
    num = parse_number(value)
    return 0.0 if num is None else num


def format_number(value: float) -> str:
    """Render a value the way chart labels show it: 5, 2.5, -0.125."""
    if value == int(value):
        return str(int(value))
    return repr(value)


def to_label(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isfinite(value):
        return format_number(value)
    return str(value)


# ---------------------------------------------------------------------------
# Input shapes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MappingInput:
    items: Tuple[Tuple[Any, Any], ...]


@dataclass(frozen=True)
class RecordArray:
    records: Tuple[Any, ...]


@dataclass(frozen=True)
class NumberArray:
    numbers: Tuple[Any, ...]


@dataclass(frozen=True)
class StringArray:
    strings: Tuple[Any, ...]


@dataclass(frozen=True)
class PairArray:
    rows: Tuple[Any, ...]


@dataclass(frozen=True)
class Unrecognized:
    value: Any = None


ChartInput = Union[MappingInput, RecordArray, NumberArray, StringArray, PairArray, Unrecognized]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def classify(values: Any) -> ChartInput:
    """Decide which input shape ``values`` has. Never raises."""
    if isinstance(values, Series):
        return RecordArray(tuple(values.as_records()))
    if isinstance(values, Mapping):
        return MappingInput(tuple(values.items()))
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        return Unrecognized(values)
    if not values:
        return Unrecognized(values)

    first = values[0]
    items = tuple(values)
    if isinstance(first, Mapping):
        return RecordArray(items)
    if _is_number(first):
        return NumberArray(items)
    if isinstance(first, str):
        return StringArray(items)
    if isinstance(first, (list, tuple)):
        return PairArray(items)
    return Unrecognized(values)


def _record_field(record: Any, key: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(key)
    return None


def _histogram(strings: Sequence[Any]) -> Series:
    counts: Dict[str, int] = {}
    for item in strings:
        key = to_label(item)
        counts[key] = counts.get(key, 0) + 1
    return Series(tuple(counts), tuple(float(c) for c in counts.values()))


def normalize(values: Any) -> Series:
    """Convert any accepted input into a fresh Series."""
    shape = classify(values)

    if isinstance(shape, MappingInput):
        return Series(
            tuple(to_label(k) for k, _ in shape.items),
            tuple(to_number(v) for _, v in shape.items),
        )
    if isinstance(shape, RecordArray):
        return Series(
            tuple(to_label(_record_field(r, "label")) for r in shape.records),
            tuple(to_number(_record_field(r, "value")) for r in shape.records),
        )
    if isinstance(shape, NumberArray):
        return Series(
            tuple(str(i + 1) for i in range(len(shape.numbers))),
            tuple(to_number(v) for v in shape.numbers),
        )
    if isinstance(shape, StringArray):
        return _histogram(shape.strings)
    if isinstance(shape, PairArray):
        labels, data = [], []
        for row in shape.rows:
            row = row if isinstance(row, (list, tuple)) else ()
            labels.append(to_label(row[0]) if row else "")
            data.append(to_number(row[1]) if len(row) > 1 else 0.0)
        return Series(tuple(labels), tuple(data))
    if isinstance(shape, Unrecognized):
        return EMPTY_SERIES
    raise TypeError(f"unhandled input shape: {type(shape).__name__}")
