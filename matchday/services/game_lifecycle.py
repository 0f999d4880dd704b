"""
Game status transitions.

    Scheduled --mark_played--> Played --finalize--> Done
        |                        ^                    |
        +--postpone--> Postponed +---reopen_report----+

Each transition checks the game's current status locally before calling the
backend, and the squad or report validation that guards it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..api import GamesApi
from ..errors import ApiError, ConfirmationRequired, GameStateError, SquadValidationError
from ..models import FinalScore, Game, GameRoster, GameStatus, MatchDuration, PlayerReport, TeamSummary
from .draft_service import DraftAutosaver, build_report_draft, merge_report_draft, report_draft_is_empty
from .lineup_board import LineupBoard
from .minutes_validator import SubmissionCheck, validate_minutes_for_submission
from .squad_validator import validate_report_completeness

logger = logging.getLogger(__name__)


@dataclass
class ReportState:
    """The post-game report being edited for a Played game."""
    team_summary: TeamSummary = field(default_factory=TeamSummary)
    final_score: FinalScore = field(default_factory=FinalScore)
    match_duration: MatchDuration = field(default_factory=MatchDuration)
    player_reports: Dict[str, PlayerReport] = field(default_factory=dict)
    player_match_stats: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return build_report_draft(self.team_summary, self.final_score, self.match_duration,
                                  self.player_reports, self.player_match_stats)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReportState":
        return cls(
            team_summary=TeamSummary.from_dict(data.get("teamSummary")),
            final_score=FinalScore.from_dict(data.get("finalScore")),
            match_duration=MatchDuration.from_dict(data.get("matchDuration")),
            player_reports={
                player_id: PlayerReport.from_dict(report)
                for player_id, report in (data.get("playerReports") or {}).items()
            },
            player_match_stats=dict(data.get("playerMatchStats") or {}),
        )

    @classmethod
    def for_game(cls, game: Game,
                 saved_reports: Optional[Mapping[str, PlayerReport]] = None) -> "ReportState":
        """Saved game data with the game's report draft laid over it."""
        saved = build_report_draft(
            game.team_summary,
            FinalScore(game.our_score or 0, game.opponent_score or 0),
            game.match_duration,
            saved_reports or {},
        )
        return cls.from_dict(merge_report_draft(saved, game.report_draft))


class GameLifecycle:
    """
    Drives one game through its statuses.

    Args:
        game: The game being managed; updated in place after each transition
        games_api: Backend endpoints
        board: Lineup board of the game (needed for mark_played and finalize)
        autosaver: Draft autosaver, paused while a transition is in flight
    """

    def __init__(self, game: Game, games_api: GamesApi,
                 board: Optional[LineupBoard] = None,
                 autosaver: Optional[DraftAutosaver] = None):
        self.game = game
        self.games_api = games_api
        self.board = board
        self.autosaver = autosaver

    def _require(self, action: str, *allowed: GameStatus) -> None:
        if self.game.status not in allowed:
            expected = " or ".join(status.value for status in allowed)
            raise GameStateError(
                f"Cannot {action}: game is {self.game.status.value}, expected {expected}"
            )

    def _require_board(self) -> LineupBoard:
        if self.board is None:
            raise GameStateError("No lineup board is attached to this game")
        return self.board

    def _pause_autosave(self) -> None:
        if self.autosaver is not None:
            self.autosaver.cancel()
            self.autosaver.enabled = False

    def _resume_autosave(self) -> None:
        if self.autosaver is not None:
            self.autosaver.enabled = True

    # ----- Scheduled -> Played -----

    def mark_played(self, confirm_bench: bool = False) -> List[GameRoster]:
        """
        Start the game with the board's lineup.

        Raises:
            GameStateError: If the game is not Scheduled
            SquadValidationError: If the starting lineup is not 11 players or
                no goalkeeper is assigned
            ConfirmationRequired: If the bench is short and not confirmed
        """
        self._require("mark game as played", GameStatus.SCHEDULED)
        board = self._require_board()

        validation = board.validate()
        if not validation.starting_lineup.is_valid:
            raise SquadValidationError(
                "Invalid Starting Lineup",
                [f"Cannot mark game as played: {validation.starting_lineup.message}"],
            )
        if not validation.goalkeeper.is_valid:
            raise SquadValidationError(
                "Missing Goalkeeper",
                [f"Cannot mark game as played: {validation.goalkeeper.message}"],
            )
        if validation.needs_confirmation and not confirm_bench:
            raise ConfirmationRequired("Bench Size Warning", validation.bench.confirmation_message)

        self._pause_autosave()
        try:
            updated, rosters = self.games_api.start_game(self.game.id, board.to_start_payload())
        finally:
            self._resume_autosave()

        self.game.status = updated.status
        self.game.lineup_draft = updated.lineup_draft
        logger.info("Game %s marked as played", self.game.id)
        return rosters

    # ----- any -> Postponed -----

    def postpone(self) -> None:
        self._pause_autosave()
        try:
            self.games_api.update_game(self.game.id, {"status": GameStatus.POSTPONED.value})
        except Exception:
            self._resume_autosave()
            raise
        self.game.status = GameStatus.POSTPONED
        logger.info("Game %s postponed", self.game.id)

    # ----- Played -> Done -----

    def check_report(self, report: ReportState) -> SubmissionCheck:
        """Errors block finalizing; warnings ask the coach to confirm."""
        board = self._require_board()
        starting = board.starting_players
        check = SubmissionCheck()

        completeness = validate_report_completeness(starting, report.player_reports)
        if not completeness.is_valid:
            check.add_error(f"Missing Reports: {completeness.message}")
        elif report.player_reports:
            check = check.combine(validate_minutes_for_submission(
                report.player_reports, report.match_duration, starting
            ))

        if report.final_score.is_goalless():
            check.add_warning("Final score is 0-0. Is this correct?")
        if not report.team_summary.has_content():
            check.add_warning("No team summary provided. Consider adding performance notes.")
        return check

    def finalize(self, report: ReportState, confirm_warnings: bool = False) -> None:
        """
        Lock the report: save the game as Done and store the player reports
        and match stats.

        Raises:
            GameStateError: If the game is not Played
            SquadValidationError: If the report has errors
            ConfirmationRequired: If there are unconfirmed warnings
        """
        self._require("finalize game", GameStatus.PLAYED)
        check = self.check_report(report)
        if not check.is_valid:
            raise SquadValidationError("Validation Errors", check.errors)
        if check.warnings and not confirm_warnings:
            raise ConfirmationRequired("Finalize Game", "\n".join(check.warnings))

        self._pause_autosave()
        body: Dict[str, Any] = {
            "status": GameStatus.DONE.value,
            "ourScore": report.final_score.our_score,
            "opponentScore": report.final_score.opponent_score,
            "matchDuration": report.match_duration.to_dict(),
        }
        body.update(report.team_summary.to_dict())
        try:
            self.games_api.update_game(self.game.id, body)
            self.games_api.batch_update_reports(self.game.id, report.player_reports)
        except Exception:
            self._resume_autosave()
            raise
        self._save_match_stats(report.player_match_stats)

        self.game.status = GameStatus.DONE
        self.game.our_score = report.final_score.our_score
        self.game.opponent_score = report.final_score.opponent_score
        self.game.match_duration = report.match_duration
        self.game.team_summary = report.team_summary
        self.game.report_draft = None
        logger.info("Game %s finalized %s", self.game.id, self.game.final_score_display)

    def _save_match_stats(self, player_match_stats: Mapping[str, Any]) -> None:
        """Store fouls for players that have any; failures are logged, the game stays Done."""
        for player_id, stats in player_match_stats.items():
            if not stats or not ((stats.get("foulsCommitted") or 0) > 0
                                 or (stats.get("foulsReceived") or 0) > 0):
                continue
            try:
                self.games_api.upsert_player_match_stats(self.game.id, player_id, stats)
            except ApiError as e:
                logger.error("Error saving match stats for player %s: %s", player_id, e)

    # ----- Done -> Played -----

    def reopen_report(self) -> None:
        self._require("edit report", GameStatus.DONE)
        self.game.status = GameStatus.PLAYED
        self._resume_autosave()

    # ----- drafts -----

    def schedule_draft(self, report: Optional[ReportState] = None) -> bool:
        """
        Queue the draft that matches the game's status for autosave.

        Returns:
            True if a draft was queued
        """
        if self.autosaver is None:
            return False
        if self.game.status is GameStatus.SCHEDULED and self.board is not None:
            return self.autosaver.schedule(self.board.to_draft())
        if self.game.status is GameStatus.PLAYED and report is not None:
            draft = report.to_dict()
            if report_draft_is_empty(draft):
                return False
            return self.autosaver.schedule(draft)
        return False
