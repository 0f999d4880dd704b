"""
Services package for the Matchday toolkit.

This package contains the validation rules, the lineup board, draft autosave
and the game lifecycle. Includes a factory for wiring them to the backend.
"""
from .squad_validator import (
    ValidationResult, PositionCheck, SquadValidation,
    validate_starting_lineup, validate_bench_size, validate_goalkeeper,
    validate_player_position, validate_squad, validate_report_completeness
)
from .minutes_validator import (
    SubmissionCheck, MinutesSummary, minutes_summary, validate_minutes_for_submission
)
from .card_rules import RuleCheck, can_receive_card
from .match_state import (
    PlayerState, player_state_at_minute, filter_players_by_state,
    validate_goal_eligibility, validate_substitution_eligibility
)
from .formation_builder import BuildResult, build_formation
from .lineup_board import LineupBoard
from .draft_service import (
    DraftAutosaver, build_report_draft, merge_report_draft, report_draft_is_empty
)
from .game_lifecycle import GameLifecycle, ReportState
from .service_factory import ServiceFactory

__all__ = [
    "ValidationResult", "PositionCheck", "SquadValidation",
    "validate_starting_lineup", "validate_bench_size", "validate_goalkeeper",
    "validate_player_position", "validate_squad", "validate_report_completeness",
    "SubmissionCheck", "MinutesSummary", "minutes_summary", "validate_minutes_for_submission",
    "RuleCheck", "can_receive_card",
    "PlayerState", "player_state_at_minute", "filter_players_by_state",
    "validate_goal_eligibility", "validate_substitution_eligibility",
    "BuildResult", "build_formation", "LineupBoard",
    "DraftAutosaver", "build_report_draft", "merge_report_draft", "report_draft_is_empty",
    "GameLifecycle", "ReportState", "ServiceFactory"
]
