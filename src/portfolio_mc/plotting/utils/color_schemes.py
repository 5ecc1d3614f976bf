# Growth band colors, outermost to innermost
BAND_COLORS = {
    "q90": "#22d3ee",  # Cyan
    "q75": "#60a5fa",  # Blue
    "median": "#34d399",  # Green
    "q25": "#fbbf24",  # Amber
    "q10": "#f87171",  # Red
}

BAND_NAMES = {
    "q90": "90th percentile",
    "q75": "75th percentile",
    "median": "Median",
    "q25": "25th percentile",
    "q10": "10th percentile",
}

HISTOGRAM_COLOR = "#8b5cf6"  # Violet
INITIAL_AMOUNT_COLOR = "#94a3b8"  # Slate
