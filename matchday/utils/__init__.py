"""
Utilities package for the Matchday toolkit.

This package contains constants, configuration and logging helpers used throughout the application.
"""
from .constants import (
    APP_TITLE, STARTING_LINEUP_SIZE, RECOMMENDED_BENCH_SIZE, GOALKEEPER_SLOT,
    DEFAULT_REGULAR_TIME_MIN, DEFAULT_RATING, POSITION_LABEL_FAMILIES
)
from .config import Settings
from .logging_setup import configure_logging

__all__ = [
    "APP_TITLE", "STARTING_LINEUP_SIZE", "RECOMMENDED_BENCH_SIZE", "GOALKEEPER_SLOT",
    "DEFAULT_REGULAR_TIME_MIN", "DEFAULT_RATING",
    "POSITION_LABEL_FAMILIES", "Settings", "configure_logging"
]
