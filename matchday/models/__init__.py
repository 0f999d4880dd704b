"""
Models package for the Matchday toolkit.

This package contains the core data models used throughout the application.
"""
from .player import Player, PlayerPosition
from .formation import (
    PositionSlot, FormationLayout, Formation, FORMATIONS, DEFAULT_FORMATION_TYPE, get_layout
)
from .game import Game, GameStatus, FinalScore, MatchDuration, TeamSummary
from .roster import GameRoster, RosterStatus
from .events import Goal, Card, CardType, Substitution, MatchEvent
from .game_report import PlayerReport

__all__ = [
    "Player", "PlayerPosition", "PositionSlot", "FormationLayout", "Formation",
    "FORMATIONS", "DEFAULT_FORMATION_TYPE", "get_layout",
    "Game", "GameStatus", "FinalScore", "MatchDuration", "TeamSummary",
    "GameRoster", "RosterStatus", "Goal", "Card", "CardType", "Substitution",
    "MatchEvent", "PlayerReport"
]
