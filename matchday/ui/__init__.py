"""
UI package for the Matchday toolkit.

This package contains the Flask web server that serves the lineup board as JSON.
"""
from .web_app import WebAppState, create_app, run_web_app

__all__ = ["WebAppState", "create_app", "run_web_app"]
