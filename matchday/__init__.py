"""
Matchday

Game-day toolkit for youth and amateur soccer coaches: builds the lineup and
formation from roster statuses, validates the squad before kick-off, drives
the game through Scheduled, Played and Done, and autosaves lineup and report
drafts to the team-management backend.
"""
from .models import Player, Game, Formation, RosterStatus
from .services import LineupBoard, GameLifecycle, ServiceFactory
from .api import ApiClient, GamesApi
from .ui import create_app, run_web_app
from .utils import APP_TITLE, Settings

__version__ = "1.0.0"
__author__ = "Matchday Development Team"

__all__ = [
    "Player", "Game", "Formation", "RosterStatus",
    "LineupBoard", "GameLifecycle", "ServiceFactory", "ApiClient", "GamesApi",
    "create_app", "run_web_app", "APP_TITLE", "Settings"
]
