"""
Constants for the Matchday game-day toolkit.

This module contains the rule thresholds and defaults used throughout the application.
"""

# Application metadata
APP_TITLE = "Matchday Lineup Board"

# Squad rules
STARTING_LINEUP_SIZE = 11
RECOMMENDED_BENCH_SIZE = 7
GOALKEEPER_SLOT = "gk"

# Match duration defaults (minutes)
DEFAULT_REGULAR_TIME_MIN = 90
EXCESS_MINUTES_WARNING_PCT = 20

# Player report ratings
MIN_RATING = 1
MAX_RATING = 5
DEFAULT_RATING = 3

# Draft autosave
DEFAULT_AUTOSAVE_DEBOUNCE_SECONDS = 2.5

# Backend defaults
DEFAULT_BACKEND_URL = "http://localhost:3001"
DEFAULT_HTTP_TIMEOUT_SECONDS = 10.0

# Web app defaults
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 7122

# Slot labels that belong to each natural position type
POSITION_LABEL_FAMILIES = {
    "goalkeeper": ["gk", "goalkeeper"],
    "defender": [
        "cb", "lb", "rb", "lcb", "rcb", "defender",
        "centre-back", "left-back", "right-back",
    ],
    "midfielder": [
        "cm", "lm", "rm", "cam", "cdm", "lcm", "rcm", "midfielder",
        "centre-mid", "left-mid", "right-mid", "attacking-mid", "defensive-mid",
    ],
    "forward": [
        "st", "cf", "lw", "rw", "forward", "striker",
        "centre-forward", "left-wing", "right-wing",
    ],
}
