"""
Draft handling and debounced autosave.

A Scheduled game keeps a lineup draft (roster statuses, formation and
formation type); a Played game keeps a report draft (team summary, score,
duration, player reports and match stats). Both are saved through the same
``PUT /api/games/{id}/draft`` endpoint, which stores the draft that matches
the game's status.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Mapping, Optional

from ..errors import ApiError
from ..models import FinalScore, MatchDuration, PlayerReport, TeamSummary
from ..utils.constants import DEFAULT_AUTOSAVE_DEBOUNCE_SECONDS, DEFAULT_REGULAR_TIME_MIN
from ..utils.time_utils import now_ts

logger = logging.getLogger(__name__)

REPORT_DRAFT_SECTIONS = (
    "teamSummary", "finalScore", "matchDuration", "playerReports", "playerMatchStats"
)


def build_report_draft(team_summary: TeamSummary, final_score: FinalScore,
                       match_duration: MatchDuration,
                       player_reports: Mapping[str, PlayerReport],
                       player_match_stats: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    return {
        "teamSummary": team_summary.to_dict(),
        "finalScore": final_score.to_dict(),
        "matchDuration": match_duration.to_dict(),
        "playerReports": {
            player_id: report.to_dict() for player_id, report in player_reports.items()
        },
        "playerMatchStats": dict(player_match_stats or {}),
    }


def merge_report_draft(saved: Mapping[str, Any],
                       draft: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Overlay a report draft on the saved report data.

    Each section is merged key by key with the draft's values winning; a
    section the draft does not carry is left as saved.
    """
    merged: Dict[str, Any] = {
        section: dict(saved.get(section) or {}) for section in REPORT_DRAFT_SECTIONS
    }
    for section in REPORT_DRAFT_SECTIONS:
        values = (draft or {}).get(section)
        if values:
            merged[section].update(values)
    return merged


def report_draft_is_empty(draft: Optional[Mapping[str, Any]]) -> bool:
    """True when the draft holds nothing worth saving."""
    if not draft:
        return True

    summary = draft.get("teamSummary") or {}
    has_summary = any(isinstance(value, str) and value.strip() for value in summary.values())

    score = draft.get("finalScore") or {}
    has_score = (score.get("ourScore") or 0) > 0 or (score.get("opponentScore") or 0) > 0

    duration = draft.get("matchDuration")
    has_duration = bool(duration) and (
        duration.get("regularTime") != DEFAULT_REGULAR_TIME_MIN
        or (duration.get("firstHalfExtraTime") or 0) > 0
        or (duration.get("secondHalfExtraTime") or 0) > 0
    )

    has_reports = bool(draft.get("playerReports"))
    has_stats = bool(draft.get("playerMatchStats"))

    return not (has_summary or has_score or has_duration or has_reports or has_stats)


class DraftAutosaver:
    """
    Debounced, last-write-wins draft saver.

    Every ``schedule`` call replaces the pending draft and restarts the quiet
    period; only the latest draft is sent once the period elapses. Failed
    saves are logged and remembered in ``last_error``; they are not retried.

    Args:
        save: Callable that persists one draft
        debounce_seconds: Quiet period before saving
        should_skip: Optional predicate; a draft for which it returns True is not saved
        timer_factory: Creates the debounce timer (``threading.Timer`` signature)
    """

    def __init__(self, save: Callable[[Dict[str, Any]], Any],
                 debounce_seconds: float = DEFAULT_AUTOSAVE_DEBOUNCE_SECONDS,
                 should_skip: Optional[Callable[[Dict[str, Any]], bool]] = None,
                 timer_factory: Callable[..., Any] = threading.Timer):
        self._save = save
        self.debounce_seconds = debounce_seconds
        self.should_skip = should_skip
        self._timer_factory = timer_factory
        self.enabled = True

        self._lock = threading.Lock()
        self._timer = None
        self._pending: Optional[Dict[str, Any]] = None
        self._generation = 0
        self._in_flight = False

        self.last_error: Optional[str] = None
        self.last_saved_at: Optional[float] = None

    @property
    def is_saving(self) -> bool:
        """A draft is waiting for the quiet period or being sent."""
        with self._lock:
            return self._pending is not None or self._in_flight

    def schedule(self, data: Optional[Dict[str, Any]]) -> bool:
        """
        Queue a draft for saving after the quiet period.

        Returns:
            True if the draft was queued, False if it was skipped
        """
        if not self.enabled or not data:
            return False
        if self.should_skip is not None and self.should_skip(data):
            logger.debug("Draft autosave skipped")
            return False

        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self._pending = data
            self.last_error = None
            timer = self._timer_factory(self.debounce_seconds, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
        timer.start()
        return True

    def flush(self) -> Any:
        """Save the pending draft now. Returns the save result, or None if nothing was pending."""
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            data, self._pending = self._pending, None
            if data is None:
                return None
            self._in_flight = True
        return self._send(data)

    def cancel(self) -> None:
        """Drop the pending draft without saving it."""
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self._pending = None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._pending is None:
                return
            data, self._pending = self._pending, None
            self._timer = None
            self._in_flight = True
        self._send(data)

    def _send(self, data: Dict[str, Any]) -> Any:
        try:
            result = self._save(data)
        except ApiError as e:
            logger.error("Error autosaving draft: %s", e)
            with self._lock:
                self.last_error = str(e)
            return None
        finally:
            with self._lock:
                self._in_flight = False
        with self._lock:
            self.last_saved_at = now_ts()
            self.last_error = None
        logger.debug("Draft saved")
        return result
