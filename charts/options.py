"""Chart options.

Options come either from Python callers (keyword arguments) or from a
card's ``options:`` block in dashboard.yaml, where camelCase spellings
are accepted too:

    options:
      title: "Latency"
      height: 200
      paddingTop: 40
      showValues: false
      valueFormat: "{value:.0f} ms ({fraction:.0%})"
"""

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Dict, List, Optional, Union

from config import CHART_DEFAULTS, PING_LOG_DEFAULTS

logger = logging.getLogger(__name__)

ValueFormat = Callable[[float, float], Any]

ALIASES = {
    "paddingTop": "padding_top",
    "showValues": "show_values",
    "showLabels": "show_labels",
    "valueFormat": "value_format",
}


@dataclass
class ChartOptions:
    title: Optional[str] = None
    height: Optional[float] = None
    max: Optional[float] = None
    padding_top: Optional[float] = None
    show_values: bool = True
    show_labels: bool = True
    palette: Optional[List[str]] = None
    value_format: Optional[ValueFormat] = None
    limit: Optional[int] = None

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]]) -> "ChartOptions":
        """Build options from a plain dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in (config or {}).items():
            name = ALIASES.get(key, key)
            if name not in known:
                logger.debug("Ignoring unknown chart option: %s", key)
                continue
            kwargs[name] = value
        if "value_format" in kwargs:
            kwargs["value_format"] = make_value_format(kwargs["value_format"])
        return cls(**kwargs)

    def with_defaults(self, kind: str) -> "ChartOptions":
        """Fill unset height / padding_top with the defaults for ``kind``."""
        defaults = CHART_DEFAULTS[kind]
        return replace(
            self,
            height=self.height if self.height is not None else defaults["height"],
            padding_top=(
                self.padding_top if self.padding_top is not None else defaults["padding_top"]
            ),
        )

    def for_ping_log(self) -> "ChartOptions":
        return replace(
            self,
            title=self.title if self.title is not None else PING_LOG_DEFAULTS["title"],
            height=self.height if self.height is not None else PING_LOG_DEFAULTS["height"],
            padding_top=(
                self.padding_top if self.padding_top is not None
                else PING_LOG_DEFAULTS["padding_top"]
            ),
        )


def make_value_format(spec: Union[None, str, ValueFormat]) -> Optional[ValueFormat]:
    """Turn a ``str.format`` template into a ``(value, fraction)`` callable."""
    if spec is None or callable(spec):
        return spec
    if isinstance(spec, str):
        template = spec

        def fmt(value, fraction):
            return template.format(value=value, fraction=fraction)

        return fmt
    raise TypeError(f"valueFormat must be a template string or callable, got {spec!r}")


def coerce_options(options: Union[None, Dict, ChartOptions]) -> ChartOptions:
    if options is None:
        return ChartOptions()
    if isinstance(options, ChartOptions):
        return options
    return ChartOptions.from_config(options)
