"""
Unit tests for game status transitions.

The backend is replaced by a MagicMock GamesApi; the lineup board is real.
"""
import unittest
from unittest.mock import MagicMock

from matchday.errors import ApiError, ConfirmationRequired, GameStateError, SquadValidationError
from matchday.models import (
    FinalScore, Game, GameRoster, GameStatus, MatchDuration, PlayerReport, RosterStatus, TeamSummary
)
from matchday.services.draft_service import DraftAutosaver
from matchday.services.game_lifecycle import GameLifecycle, ReportState
from matchday.services.lineup_board import LineupBoard

from squad_fixtures import STARTER_IDS, make_team, squad_statuses


class LifecycleTestCase(unittest.TestCase):
    """Base class with a Scheduled game and a full squad."""

    status = GameStatus.SCHEDULED

    def setUp(self) -> None:
        self.team = make_team()
        self.board = LineupBoard(self.team, "1-4-4-2", squad_statuses())
        self.game = Game(id="g1", opponent="Rovers", status=self.status)
        self.api = MagicMock()
        self.autosaver = MagicMock(spec=DraftAutosaver)
        self.autosaver.enabled = True
        self.lifecycle = GameLifecycle(self.game, self.api, self.board, self.autosaver)

    def use_real_autosaver(self) -> DraftAutosaver:
        """Swap in a DraftAutosaver whose timers never fire."""
        self.autosaver = DraftAutosaver(MagicMock(), timer_factory=MagicMock())
        self.lifecycle.autosaver = self.autosaver
        return self.autosaver

    def full_report(self, **overrides) -> ReportState:
        report = ReportState(
            team_summary=TeamSummary(general_summary="Pressed well"),
            final_score=FinalScore(2, 1),
            match_duration=MatchDuration(),
            player_reports={pid: PlayerReport(minutes_played=90) for pid in STARTER_IDS},
        )
        for key, value in overrides.items():
            setattr(report, key, value)
        return report


class TestMarkPlayed(LifecycleTestCase):
    """Test Scheduled -> Played."""

    def setUp(self) -> None:
        super().setUp()
        started = Game(id="g1", opponent="Rovers", status=GameStatus.PLAYED)
        rosters = [GameRoster("g1", "gk1", RosterStatus.STARTING_LINEUP)]
        self.api.start_game.return_value = (started, rosters)

    def test_valid_squad_starts_game(self) -> None:
        rosters = self.lifecycle.mark_played()

        self.assertEqual(len(rosters), 1)
        self.assertIs(self.game.status, GameStatus.PLAYED)
        self.assertIsNone(self.game.lineup_draft)

        game_id, payload = self.api.start_game.call_args[0]
        self.assertEqual(game_id, "g1")
        self.assertEqual(len(payload["formation"]), 11)
        self.assertEqual(payload["formationType"], "1-4-4-2")

    def test_autosave_paused_and_resumed(self) -> None:
        self.lifecycle.mark_played()
        self.autosaver.cancel.assert_called_once()
        self.assertTrue(self.autosaver.enabled)

    def test_short_lineup_blocks(self) -> None:
        self.board.remove_from_slot("st2")

        with self.assertRaises(SquadValidationError) as ctx:
            self.lifecycle.mark_played()

        self.assertEqual(ctx.exception.title, "Invalid Starting Lineup")
        self.assertEqual(
            ctx.exception.messages,
            ["Cannot mark game as played: Only 10 players in starting lineup. Need exactly 11 players."],
        )
        self.api.start_game.assert_not_called()
        self.assertIs(self.game.status, GameStatus.SCHEDULED)

    def test_missing_goalkeeper_blocks(self) -> None:
        # Eleven on the pitch, none of them in the goalkeeper slot.
        self.board.formation.clear_slot("gk")
        self.board.formation.assign("extra", self.board.player("m5"))

        with self.assertRaises(SquadValidationError) as ctx:
            self.lifecycle.mark_played()
        self.assertEqual(ctx.exception.title, "Missing Goalkeeper")

    def test_short_bench_needs_confirmation(self) -> None:
        self.board = LineupBoard(self.team, "1-4-4-2", squad_statuses(bench_size=3))
        self.lifecycle.board = self.board

        with self.assertRaises(ConfirmationRequired) as ctx:
            self.lifecycle.mark_played()
        self.assertEqual(ctx.exception.title, "Bench Size Warning")
        self.api.start_game.assert_not_called()

        self.lifecycle.mark_played(confirm_bench=True)
        self.api.start_game.assert_called_once()

    def test_wrong_status(self) -> None:
        self.game.status = GameStatus.DONE
        with self.assertRaises(GameStateError):
            self.lifecycle.mark_played()


class TestPostpone(LifecycleTestCase):

    def test_postpone(self) -> None:
        self.lifecycle.postpone()
        self.api.update_game.assert_called_once_with("g1", {"status": "Postponed"})
        self.assertIs(self.game.status, GameStatus.POSTPONED)
        self.assertFalse(self.autosaver.enabled)

    def test_failed_postpone_keeps_autosave_running(self) -> None:
        autosaver = self.use_real_autosaver()
        self.api.update_game.side_effect = ApiError("network down")

        with self.assertRaises(ApiError):
            self.lifecycle.postpone()

        self.assertIs(self.game.status, GameStatus.SCHEDULED)
        self.assertTrue(autosaver.enabled)
        self.assertTrue(self.lifecycle.schedule_draft())


class TestFinalize(LifecycleTestCase):
    """Test Played -> Done and reopening the report."""

    status = GameStatus.PLAYED

    def test_complete_report_finalizes(self) -> None:
        self.game.report_draft = {"finalScore": {"ourScore": 2}}
        report = self.full_report()

        self.lifecycle.finalize(report)

        game_id, body = self.api.update_game.call_args[0]
        self.assertEqual(game_id, "g1")
        self.assertEqual(body["status"], "Done")
        self.assertEqual(body["ourScore"], 2)
        self.assertEqual(body["opponentScore"], 1)
        self.assertEqual(body["generalSummary"], "Pressed well")
        self.assertEqual(body["matchDuration"]["regularTime"], 90)
        self.api.batch_update_reports.assert_called_once_with("g1", report.player_reports)

        self.assertIs(self.game.status, GameStatus.DONE)
        self.assertEqual(self.game.final_score_display, "2 - 1")
        self.assertIsNone(self.game.report_draft)

    def test_missing_reports_block(self) -> None:
        reports = {pid: PlayerReport(minutes_played=90) for pid in STARTER_IDS[:-1]}
        report = self.full_report(player_reports=reports)

        with self.assertRaises(SquadValidationError) as ctx:
            self.lifecycle.finalize(report)

        self.assertEqual(ctx.exception.title, "Validation Errors")
        self.assertEqual(len(ctx.exception.messages), 1)
        self.assertTrue(ctx.exception.messages[0].startswith("Missing Reports: "))
        self.assertIn("Kai Strike", ctx.exception.messages[0])
        self.api.update_game.assert_not_called()

    def test_minutes_shortfall_blocks(self) -> None:
        reports = {pid: PlayerReport(minutes_played=80) for pid in STARTER_IDS}
        with self.assertRaises(SquadValidationError) as ctx:
            self.lifecycle.finalize(self.full_report(player_reports=reports))
        self.assertIn("Total team minutes (880) is less than required (990). Missing 110 minutes.",
                      ctx.exception.messages)

    def test_warnings_need_confirmation(self) -> None:
        report = self.full_report(final_score=FinalScore(0, 0), team_summary=TeamSummary())

        with self.assertRaises(ConfirmationRequired) as ctx:
            self.lifecycle.finalize(report)
        self.assertEqual(ctx.exception.title, "Finalize Game")
        self.assertIn("Final score is 0-0. Is this correct?", ctx.exception.message)
        self.assertIn("No team summary provided", ctx.exception.message)

        self.lifecycle.finalize(report, confirm_warnings=True)
        self.assertIs(self.game.status, GameStatus.DONE)

    def test_failed_finalize_keeps_autosave_running(self) -> None:
        autosaver = self.use_real_autosaver()
        self.api.update_game.side_effect = ApiError("network down")

        with self.assertRaises(ApiError):
            self.lifecycle.finalize(self.full_report())

        self.assertIs(self.game.status, GameStatus.PLAYED)
        self.assertTrue(autosaver.enabled)
        self.assertTrue(self.lifecycle.schedule_draft(self.full_report()))

    def test_failed_report_batch_keeps_autosave_running(self) -> None:
        autosaver = self.use_real_autosaver()
        self.api.batch_update_reports.side_effect = ApiError("Game not found", status_code=404)

        with self.assertRaises(ApiError):
            self.lifecycle.finalize(self.full_report())

        self.assertIs(self.game.status, GameStatus.PLAYED)
        self.assertTrue(autosaver.enabled)

    def test_match_stats_saved_for_players_with_fouls(self) -> None:
        stats = {
            "f1": {"foulsCommitted": 2, "foulsReceived": 0},
            "m1": {"foulsCommitted": 0, "foulsReceived": 1},
            "d1": {"foulsCommitted": 0, "foulsReceived": 0},
            "d2": {},
        }
        self.lifecycle.finalize(self.full_report(player_match_stats=stats))

        calls = [call[0] for call in self.api.upsert_player_match_stats.call_args_list]
        self.assertEqual(calls, [
            ("g1", "f1", {"foulsCommitted": 2, "foulsReceived": 0}),
            ("g1", "m1", {"foulsCommitted": 0, "foulsReceived": 1}),
        ])

    def test_match_stats_failure_does_not_block_finalize(self) -> None:
        self.api.upsert_player_match_stats.side_effect = ApiError("stats unavailable")
        stats = {"f1": {"foulsCommitted": 1}, "f2": {"foulsReceived": 3}}

        with self.assertLogs("matchday.services.game_lifecycle", level="ERROR") as logs:
            self.lifecycle.finalize(self.full_report(player_match_stats=stats))

        self.assertEqual(len(logs.records), 2)
        self.assertIs(self.game.status, GameStatus.DONE)
        self.assertIsNone(self.game.report_draft)

    def test_finalize_requires_played(self) -> None:
        self.game.status = GameStatus.SCHEDULED
        with self.assertRaises(GameStateError):
            self.lifecycle.finalize(self.full_report())

    def test_reopen_report(self) -> None:
        self.lifecycle.finalize(self.full_report())
        self.lifecycle.reopen_report()
        self.assertIs(self.game.status, GameStatus.PLAYED)
        self.assertTrue(self.autosaver.enabled)

        with self.assertRaises(GameStateError):
            self.lifecycle.reopen_report()


class TestReportState(unittest.TestCase):
    """Test loading the report being edited."""

    def test_draft_laid_over_saved_game(self) -> None:
        game = Game(id="g1", opponent="Rovers", status=GameStatus.PLAYED,
                    our_score=1, opponent_score=1,
                    team_summary=TeamSummary(defense_summary="Solid"),
                    report_draft={"finalScore": {"ourScore": 3},
                                  "playerReports": {"p1": {"minutesPlayed": 45}}})
        saved = {"p1": PlayerReport(minutes_played=90, notes="saved"),
                 "p2": PlayerReport(minutes_played=90)}

        state = ReportState.for_game(game, saved)

        self.assertEqual(state.final_score, FinalScore(3, 1))
        self.assertEqual(state.team_summary.defense_summary, "Solid")
        self.assertEqual(state.player_reports["p1"].minutes_played, 45)
        self.assertEqual(state.player_reports["p2"].minutes_played, 90)

    def test_new_game_defaults(self) -> None:
        state = ReportState.for_game(Game(id="g1", opponent="Rovers"))
        self.assertEqual(state.final_score, FinalScore(0, 0))
        self.assertEqual(state.match_duration.total, 90)
        self.assertEqual(state.player_reports, {})


class TestScheduleDraft(LifecycleTestCase):
    """Test that the draft matching the game's status is queued."""

    def test_scheduled_game_saves_lineup(self) -> None:
        self.autosaver.schedule.return_value = True
        self.assertTrue(self.lifecycle.schedule_draft())
        draft = self.autosaver.schedule.call_args[0][0]
        self.assertIn("rosters", draft)
        self.assertEqual(draft["formationType"], "1-4-4-2")

    def test_played_game_saves_report(self) -> None:
        self.game.status = GameStatus.PLAYED
        self.autosaver.schedule.return_value = True
        self.assertTrue(self.lifecycle.schedule_draft(self.full_report()))
        draft = self.autosaver.schedule.call_args[0][0]
        self.assertEqual(draft["finalScore"], {"ourScore": 2, "opponentScore": 1})

    def test_empty_report_not_saved(self) -> None:
        self.game.status = GameStatus.PLAYED
        self.assertFalse(self.lifecycle.schedule_draft(ReportState()))
        self.autosaver.schedule.assert_not_called()

    def test_done_game_not_saved(self) -> None:
        self.game.status = GameStatus.DONE
        self.assertFalse(self.lifecycle.schedule_draft())


if __name__ == "__main__":
    unittest.main()
