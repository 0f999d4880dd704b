"""
Unit tests for draft merging and the debounced autosaver.

The autosaver's timer is replaced by a fake so the debounce can be driven
synchronously.
"""
import unittest
from unittest.mock import MagicMock, patch

from matchday.errors import ApiError
from matchday.services.draft_service import (
    DraftAutosaver,
    merge_report_draft,
    report_draft_is_empty,
)


class FakeTimer:
    """Stands in for threading.Timer; fires only when told to."""

    created = []

    def __init__(self, interval, function, args=()):
        self.interval = interval
        self.function = function
        self.args = args
        self.daemon = False
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function(*self.args)


class TestMergeReportDraft(unittest.TestCase):
    """Test that draft values override saved ones section by section."""

    def test_draft_overrides_saved_keys(self) -> None:
        saved = {
            "teamSummary": {"defenseSummary": "Solid", "attackSummary": "Blunt"},
            "finalScore": {"ourScore": 1, "opponentScore": 0},
        }
        draft = {"teamSummary": {"attackSummary": "Sharp"}}

        merged = merge_report_draft(saved, draft)

        self.assertEqual(merged["teamSummary"],
                         {"defenseSummary": "Solid", "attackSummary": "Sharp"})
        self.assertEqual(merged["finalScore"], {"ourScore": 1, "opponentScore": 0})

    def test_player_reports_merge_per_player(self) -> None:
        saved = {"playerReports": {"a": {"notes": "saved"}, "b": {"notes": "saved"}}}
        draft = {"playerReports": {"b": {"notes": "draft"}}}

        merged = merge_report_draft(saved, draft)

        self.assertEqual(merged["playerReports"]["a"], {"notes": "saved"})
        self.assertEqual(merged["playerReports"]["b"], {"notes": "draft"})

    def test_no_draft(self) -> None:
        merged = merge_report_draft({"finalScore": {"ourScore": 2}}, None)
        self.assertEqual(merged["finalScore"], {"ourScore": 2})
        self.assertEqual(merged["playerMatchStats"], {})

    def test_saved_data_not_mutated(self) -> None:
        saved = {"teamSummary": {"generalSummary": "ok"}}
        merge_report_draft(saved, {"teamSummary": {"generalSummary": "new"}})
        self.assertEqual(saved["teamSummary"]["generalSummary"], "ok")


class TestReportDraftIsEmpty(unittest.TestCase):
    """Test detection of drafts with nothing worth saving."""

    def empty_draft(self) -> dict:
        return {
            "teamSummary": {"defenseSummary": "", "generalSummary": "   "},
            "finalScore": {"ourScore": 0, "opponentScore": 0},
            "matchDuration": {"regularTime": 90, "firstHalfExtraTime": 0, "secondHalfExtraTime": 0},
            "playerReports": {},
            "playerMatchStats": {},
        }

    def test_defaults_are_empty(self) -> None:
        self.assertTrue(report_draft_is_empty(self.empty_draft()))
        self.assertTrue(report_draft_is_empty(None))

    def test_any_content_is_not_empty(self) -> None:
        changes = [
            ("teamSummary", {"generalSummary": "Good press"}),
            ("finalScore", {"ourScore": 0, "opponentScore": 1}),
            ("matchDuration", {"regularTime": 80}),
            ("matchDuration", {"regularTime": 90, "secondHalfExtraTime": 4}),
            ("playerReports", {"p1": {"notes": "x"}}),
            ("playerMatchStats", {"p1": {"foulsCommitted": 1}}),
        ]
        for section, value in changes:
            with self.subTest(section=section, value=value):
                draft = self.empty_draft()
                draft[section] = value
                self.assertFalse(report_draft_is_empty(draft))


class TestDraftAutosaver(unittest.TestCase):
    """Test debounce, last-write-wins and error handling."""

    def setUp(self) -> None:
        FakeTimer.created = []
        self.save = MagicMock(return_value={"ok": True})
        self.saver = DraftAutosaver(self.save, debounce_seconds=2.5, timer_factory=FakeTimer)

    def test_schedule_waits_for_debounce(self) -> None:
        self.assertTrue(self.saver.schedule({"a": 1}))

        timer = FakeTimer.created[-1]
        self.assertEqual(timer.interval, 2.5)
        self.assertTrue(timer.started)
        self.assertTrue(timer.daemon)
        self.save.assert_not_called()
        self.assertTrue(self.saver.is_saving)

    def test_last_write_wins(self) -> None:
        self.saver.schedule({"v": 1})
        first = FakeTimer.created[-1]
        self.saver.schedule({"v": 2})
        second = FakeTimer.created[-1]

        self.assertTrue(first.cancelled)
        first.fire()
        self.save.assert_not_called()

        second.fire()
        self.save.assert_called_once_with({"v": 2})
        self.assertFalse(self.saver.is_saving)

    def test_success_records_time(self) -> None:
        with patch("matchday.services.draft_service.now_ts", return_value=1234.0):
            self.saver.schedule({"v": 1})
            FakeTimer.created[-1].fire()

        self.assertEqual(self.saver.last_saved_at, 1234.0)
        self.assertIsNone(self.saver.last_error)

    def test_failure_is_kept_not_retried(self) -> None:
        self.save.side_effect = ApiError("Game not found", status_code=404)

        with self.assertLogs("matchday.services.draft_service", level="ERROR"):
            self.saver.schedule({"v": 1})
            FakeTimer.created[-1].fire()

        self.assertEqual(self.saver.last_error, "Game not found")
        self.assertEqual(self.save.call_count, 1)
        self.assertEqual(len(FakeTimer.created), 1)
        self.assertFalse(self.saver.is_saving)

    def test_unexpected_error_clears_in_flight(self) -> None:
        self.save.side_effect = RuntimeError("boom")
        self.saver.schedule({"v": 1})

        with self.assertRaises(RuntimeError):
            FakeTimer.created[-1].fire()

        self.assertFalse(self.saver.is_saving)
        self.assertIsNone(self.saver.last_saved_at)

    def test_skips(self) -> None:
        self.assertFalse(self.saver.schedule({}))
        self.assertFalse(self.saver.schedule(None))

        self.saver.should_skip = lambda data: data.get("skip", False)
        self.assertFalse(self.saver.schedule({"skip": True}))

        self.saver.enabled = False
        self.assertFalse(self.saver.schedule({"v": 1}))
        self.assertEqual(FakeTimer.created, [])

    def test_flush_saves_immediately(self) -> None:
        self.saver.schedule({"v": 1})
        result = self.saver.flush()

        self.assertEqual(result, {"ok": True})
        self.save.assert_called_once_with({"v": 1})
        self.assertTrue(FakeTimer.created[-1].cancelled)

        FakeTimer.created[-1].fire()
        self.assertEqual(self.save.call_count, 1)

    def test_flush_without_pending(self) -> None:
        self.assertIsNone(self.saver.flush())
        self.save.assert_not_called()

    def test_cancel_drops_pending(self) -> None:
        self.saver.schedule({"v": 1})
        self.saver.cancel()
        FakeTimer.created[-1].fire()

        self.save.assert_not_called()
        self.assertFalse(self.saver.is_saving)


if __name__ == "__main__":
    unittest.main()
