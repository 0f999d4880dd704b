"""
Minutes validation for post-game reports.

Eleven players are on the pitch for the whole match, so the recorded minutes
of all players must add up to exactly 11 x the match duration, and no single
player can exceed the duration itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..models import MatchDuration, Player, PlayerReport
from ..utils.constants import (
    DEFAULT_REGULAR_TIME_MIN, EXCESS_MINUTES_WARNING_PCT, STARTING_LINEUP_SIZE
)


class SubmissionCheck:
    """Errors block a submission; warnings only need the coach to confirm."""

    def __init__(self, errors: Optional[List[str]] = None, warnings: Optional[List[str]] = None):
        self.errors = errors or []
        self.warnings = warnings or []

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, error: str) -> None:
        self.errors.append(error)

    def add_warning(self, warning: str) -> None:
        self.warnings.append(warning)

    def combine(self, other: "SubmissionCheck") -> "SubmissionCheck":
        """Combine with another check."""
        return SubmissionCheck(self.errors + other.errors, self.warnings + other.warnings)

    def to_dict(self) -> Dict[str, Any]:
        return {"isValid": self.is_valid, "errors": list(self.errors), "warnings": list(self.warnings)}


@dataclass
class MinutesSummary:
    """Recorded minutes against what the match duration requires."""
    match_duration: int
    minimum_required: int
    maximum_allowed: int
    total_recorded: int
    players_reported: int
    players_with_minutes: int
    deficit: int = field(init=False)
    excess: int = field(init=False)

    def __post_init__(self):
        self.deficit = max(0, self.minimum_required - self.total_recorded)
        self.excess = max(0, self.total_recorded - self.maximum_allowed)

    @property
    def percentage(self) -> int:
        if self.minimum_required <= 0:
            return 0
        return round(self.total_recorded / self.minimum_required * 100)

    @property
    def is_sufficient(self) -> bool:
        return self.total_recorded >= self.minimum_required

    @property
    def is_over_maximum(self) -> bool:
        return self.total_recorded > self.maximum_allowed

    @property
    def is_valid(self) -> bool:
        return self.is_sufficient and not self.is_over_maximum

    @property
    def is_excessive(self) -> bool:
        return self.excess > self.minimum_required * EXCESS_MINUTES_WARNING_PCT / 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "matchDuration": self.match_duration,
            "minimumRequired": self.minimum_required,
            "maximumAllowed": self.maximum_allowed,
            "totalRecorded": self.total_recorded,
            "deficit": self.deficit,
            "excess": self.excess,
            "playersReported": self.players_reported,
            "playersWithMinutes": self.players_with_minutes,
            "percentage": self.percentage,
            "isValid": self.is_valid,
            "isSufficient": self.is_sufficient,
            "isOverMaximum": self.is_over_maximum,
            "isExcessive": self.is_excessive,
        }


def total_match_duration(match_duration: Optional[MatchDuration]) -> int:
    """Regular time plus both halves' extra time; 90 when unknown."""
    if match_duration is None:
        return DEFAULT_REGULAR_TIME_MIN
    return match_duration.total


def minimum_team_minutes(duration: int) -> int:
    return STARTING_LINEUP_SIZE * duration


def total_player_minutes(player_reports: Mapping[str, PlayerReport]) -> int:
    return sum(report.minutes_played or 0 for report in player_reports.values())


def minutes_summary(player_reports: Mapping[str, PlayerReport],
                    match_duration: Optional[MatchDuration] = None) -> MinutesSummary:
    """Summarise recorded minutes for display next to the report form."""
    duration = total_match_duration(match_duration)
    required = minimum_team_minutes(duration)
    return MinutesSummary(
        match_duration=duration,
        minimum_required=required,
        maximum_allowed=required,
        total_recorded=total_player_minutes(player_reports),
        players_reported=len(player_reports),
        players_with_minutes=sum(
            1 for report in player_reports.values() if (report.minutes_played or 0) > 0
        ),
    )


def validate_minutes_for_submission(player_reports: Mapping[str, PlayerReport],
                                    match_duration: Optional[MatchDuration] = None,
                                    starting_players: Optional[Sequence[Player]] = None
                                    ) -> SubmissionCheck:
    """
    Validate recorded minutes before a report is submitted.

    Args:
        player_reports: Reports keyed by player id
        match_duration: Duration of the game (90 minutes when None)
        starting_players: Used to name players in per-player errors

    Returns:
        SubmissionCheck with team/player errors and suspicious-pattern warnings
    """
    check = SubmissionCheck()
    duration = total_match_duration(match_duration)
    required = minimum_team_minutes(duration)
    maximum = required
    total = total_player_minutes(player_reports)

    if total < required:
        check.add_error(
            f"Total team minutes ({total}) is less than required ({required}). "
            f"Missing {required - total} minutes."
        )
    if total > maximum:
        check.add_error(
            f"Total minutes ({total}) exceed maximum allowed ({maximum}). "
            f"This is {total - maximum} minutes more than physically possible."
        )

    names = {player.id: player.name for player in (starting_players or [])}
    for player_id, report in player_reports.items():
        if not report.minutes_played:
            continue
        if report.minutes_played > duration:
            name = names.get(player_id) or f"Player {player_id[-4:]}"
            check.add_error(
                f"{name}: Player cannot play more than {duration} minutes "
                f"(recorded: {report.minutes_played})"
            )

    zero_minutes = sum(1 for report in player_reports.values() if report.minutes_played == 0)
    if 0 < zero_minutes < len(player_reports):
        check.add_warning(f"{zero_minutes} player(s) have 0 minutes recorded")

    if required > 0 and total > required:
        excess_pct = (total - required) / required * 100
        if excess_pct > EXCESS_MINUTES_WARNING_PCT:
            check.add_warning(
                f"Total minutes ({total}) significantly exceeds minimum ({required}). "
                f"This is {round(excess_pct)}% over the expected amount."
            )

    return check
