"""Chart Station - Configuration

Colours, chart defaults and ingestion settings shared by the charting
core, the ingestion pipeline and the tkinter dashboard.

Dashboard layout (pages of cards, data sources) lives in dashboard.yaml;
everything here is a process-wide default that the YAML can override per
card.
"""

# ---------------------------------------------------------------------------
# UI Theme - dashboard chrome (top bar, card frames)
# ---------------------------------------------------------------------------
THEME = {
    "bg": "#1a1a2e",
    "card_bg": "#16213e",
    "accent": "#0f3460",
    "text": "#e0e0e0",
    "text_dim": "#666666",
}

# ---------------------------------------------------------------------------
# Chart themes - background / axis / text colours read at every draw.
# Hex only: tk.Canvas has no alpha, so the translucent axis and text
# shades are pre-blended against the background.
# ---------------------------------------------------------------------------
CHART_THEMES = {
    "dark": {
        "chart_bg": "#1a1a1a",
        "chart_axis": "#353535",
        "chart_text": "#ffffff",
    },
    "light": {
        "chart_bg": "#ffffff",
        "chart_axis": "#dcdcdc",
        "chart_text": "#1a1a1a",
    },
}
DEFAULT_THEME = "dark"

# ---------------------------------------------------------------------------
# Palette - 12 distinct hues, assigned by series index (cyclic)
# ---------------------------------------------------------------------------
DEFAULT_PALETTE = [
    "#1db954", "#17a2b8", "#6f42c1", "#fd7e14",
    "#0d6efd", "#dc3545", "#20c997", "#ffc107",
    "#6610f2", "#198754", "#e83e8c", "#6c757d",
]

# ---------------------------------------------------------------------------
# Chart defaults per kind
# ---------------------------------------------------------------------------
CHART_DEFAULTS = {
    "bar": {
        "height": 180,
        "min_height": 120,
        "fallback_width": 300,
        "padding_top": 36,
    },
    "pie": {
        "height": 220,
        "min_height": 160,
        "fallback_width": 320,
        "padding_top": 30,
    },
}

PING_LOG_DEFAULTS = {
    "title": "Ping Averages",
    "limit": 20,
    "height": 180,
    "padding_top": 36,
}

# ---------------------------------------------------------------------------
# Redraw / ingestion
# ---------------------------------------------------------------------------
MIN_DRAW_WIDTH = 10     # surfaces narrower than this are not laid out yet
FRAME_DELAY_MS = 16     # one animation frame at ~60 Hz
FETCH_TIMEOUT = 10      # seconds, HTTP GET for chart files
NOTE_PREVIEW_LINES = 10

# ---------------------------------------------------------------------------
# Built-in dashboard used when dashboard.yaml is missing
# ---------------------------------------------------------------------------
DASHBOARD_TITLE = "CHART STATION"
DASHBOARD_COLS = 2

DEMO_CARDS = [
    {
        "type": "chart",
        "kind": "bar",
        "label": "Requests by region",
        "values": {"eu": 42, "us": 37, "apac": 18, "latam": 9},
        "options": {"title": "Requests by region"},
    },
    {
        "type": "chart",
        "kind": "pie",
        "label": "Browser share",
        "values": ["firefox", "chrome", "chrome", "safari", "chrome", "firefox"],
        "options": {
            "title": "Browser share",
            "valueFormat": "{fraction:.0%}",
        },
    },
]
