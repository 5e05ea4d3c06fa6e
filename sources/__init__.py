"""Data source implementations for Chart Station.

Importing this package registers all built-in source types.
"""

from sources.file_source import ChartFileSource, PingLogSource

__all__ = ["ChartFileSource", "PingLogSource"]
