"""
API package for the Matchday toolkit.

This package contains the HTTP client for the team-management backend and its endpoint wrappers.
"""
from .client import ApiClient
from .games_api import GamesApi

__all__ = ["ApiClient", "GamesApi"]
