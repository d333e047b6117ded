"""
Static settings for the sorting visualizer.

Values mirror what the control panel exposes; the live delay itself is
held by ``GlobalController`` so it can change mid-run.
"""

WINDOW_TITLE = "Sorting Algorithm Visualizer"
WINDOW_SIZE = (1100, 650)

DEFAULT_ARRAY_SIZE = 80
MIN_VALUE = 5
MAX_VALUE = 300

# per-step delay in milliseconds (slider range)
MIN_DELAY_MS = 1
MAX_DELAY_MS = 200
DEFAULT_DELAY_MS = 30

BACKGROUND_COLOR = "#404040"
LEGEND_TEXT_COLOR = "#c0c0c0"
DEFAULT_BAR_COLOR = "#ffffff"
ACTIVE_BAR_COLOR = "#ff0000"
SORTED_BAR_COLOR = "#00ff00"
