#!/usr/bin/env python3
"""Chart Station -- Entry point.

Launches the chart dashboard, or renders a single chart file to PNG
without opening a window.

Usage:
    python3 main.py                          # Dashboard from dashboard.yaml
    python3 main.py --config board.yaml      # Another dashboard config
    python3 main.py --log-level DEBUG        # Verbose logging
    python3 main.py --render data.csv --out data.png
    python3 main.py --render ping.txt --out ping.png --limit 50
    python3 main.py --render https://host/share.json --kind pie --theme light

Controls:
    THEME  -- Toggle dark / light chart theme
    EXIT   -- Quit the application
    Escape -- Quit
"""

__version__ = "1.0.0"

import argparse
import logging
import sys


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Chart Station -- bar and pie charts from JSON, CSV, TSV and ping logs",
    )
    parser.add_argument(
        "--config", default="dashboard.yaml",
        help="Path to dashboard YAML config (default: dashboard.yaml)",
    )
    parser.add_argument(
        "--log-level", default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set the logging verbosity (default: INFO)",
    )
    parser.add_argument(
        "--version", action="version",
        version=f"Chart Station {__version__}",
    )

    render = parser.add_argument_group("headless rendering")
    render.add_argument(
        "--render", metavar="INPUT",
        help="Chart a file path or URL to PNG instead of opening the dashboard",
    )
    render.add_argument("--out", default="chart.png", help="Output PNG (default: chart.png)")
    render.add_argument("--kind", default="bar", choices=["bar", "pie"])
    render.add_argument(
        "--mode", default="auto", choices=["auto", "chart", "pinglog", "note"],
        help="How to treat INPUT (default: by extension and content)",
    )
    render.add_argument("--format", dest="fmt", choices=["json", "csv", "tsv", "log"],
                        help="Override the detected file format")
    render.add_argument("--width", type=float, default=640, help="Logical width in px")
    render.add_argument("--scale", type=float, default=1.0, help="Device pixel ratio")
    render.add_argument("--theme", choices=["dark", "light"], help="Chart theme")
    render.add_argument("--title", help="Chart title")
    render.add_argument("--limit", type=int, help="Ping log: last N lines (0 = all)")
    return parser.parse_args(argv)


def setup_logging(level_name: str) -> None:
    """Configure root logger with a consistent format."""
    level = getattr(logging, level_name.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-7s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )


def run_render(args) -> int:
    """Render one file to PNG. Returns the process exit status."""
    from charts.export import render_file

    options = {}
    if args.title:
        options["title"] = args.title
    if args.limit is not None:
        options["limit"] = args.limit

    result = render_file(
        args.render, args.out, kind=args.kind, mode=args.mode, options=options,
        fmt=args.fmt, width=args.width, scale=args.scale, theme_name=args.theme,
    )
    for note in result.notes:
        print(note, file=sys.stderr)
    if not result.ok:
        return 1
    print(result.path)
    return 0


def run_dashboard(args) -> int:
    import tkinter as tk
    from ui.chart_board import ChartBoard

    logger = logging.getLogger(__name__)
    root = tk.Tk()
    app = ChartBoard(root, config_path=args.config)
    try:
        root.mainloop()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        app.cleanup()
        logger.info("Shutdown complete")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)

    logger = logging.getLogger(__name__)
    logger.info("Chart Station v%s starting", __version__)

    if args.render:
        return run_render(args)
    return run_dashboard(args)


if __name__ == "__main__":
    sys.exit(main())
