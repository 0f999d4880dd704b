"""
Time helpers for the Matchday toolkit.

This module contains the duration formatting and clock functions shared by the
services and the web app.
"""
import time


def format_minutes(minutes: int) -> str:
    """
    Format a number of minutes for display.

    Args:
        minutes: Number of minutes to format

    Returns:
        "<n> min" under an hour, otherwise hours with the remaining minutes

    Example:
        >>> format_minutes(45)
        '45 min'
        >>> format_minutes(120)
        '2h'
        >>> format_minutes(990)
        '16h 30min'
    """
    if minutes < 60:
        return f"{minutes} min"
    hours = minutes // 60
    mins = minutes % 60
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}min"


def now_ts() -> float:
    """
    Get current timestamp in epoch seconds.

    Returns:
        Current time as floating point epoch seconds
    """
    return time.time()
