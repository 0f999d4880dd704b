"""
Game model for the Matchday toolkit.

This module contains the Game dataclass and the value objects a game carries
through its lifecycle: final score, match duration, team summary and the
lineup/report drafts saved by autosave.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from ..utils.constants import DEFAULT_REGULAR_TIME_MIN


class GameStatus(Enum):
    """Game lifecycle status."""
    SCHEDULED = "Scheduled"
    PLAYED = "Played"
    DONE = "Done"
    POSTPONED = "Postponed"


@dataclass
class FinalScore:
    """Final score from our team's point of view."""
    our_score: int = 0
    opponent_score: int = 0

    def is_goalless(self) -> bool:
        return self.our_score == 0 and self.opponent_score == 0

    def to_dict(self) -> Dict[str, int]:
        return {"ourScore": self.our_score, "opponentScore": self.opponent_score}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "FinalScore":
        if not data:
            return cls()
        return cls(
            our_score=int(data.get("ourScore") or 0),
            opponent_score=int(data.get("opponentScore") or 0),
        )


@dataclass
class MatchDuration:
    """Regular time plus stoppage time per half, in minutes."""
    regular_time: int = DEFAULT_REGULAR_TIME_MIN
    first_half_extra_time: int = 0
    second_half_extra_time: int = 0

    @property
    def total(self) -> int:
        """Total duration including extra time."""
        return self.regular_time + self.first_half_extra_time + self.second_half_extra_time

    def is_default(self) -> bool:
        return (
            self.regular_time == DEFAULT_REGULAR_TIME_MIN
            and self.first_half_extra_time == 0
            and self.second_half_extra_time == 0
        )

    def to_dict(self) -> Dict[str, int]:
        return {
            "regularTime": self.regular_time,
            "firstHalfExtraTime": self.first_half_extra_time,
            "secondHalfExtraTime": self.second_half_extra_time,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "MatchDuration":
        """Create from dictionary; a missing or zero regular time means 90."""
        if not data:
            return cls()
        return cls(
            regular_time=int(data.get("regularTime") or DEFAULT_REGULAR_TIME_MIN),
            first_half_extra_time=int(data.get("firstHalfExtraTime") or 0),
            second_half_extra_time=int(data.get("secondHalfExtraTime") or 0),
        )


@dataclass
class TeamSummary:
    """Free-text performance notes per phase of play."""
    defense_summary: str = ""
    midfield_summary: str = ""
    attack_summary: str = ""
    general_summary: str = ""

    def has_content(self) -> bool:
        return any(
            value and value.strip()
            for value in (self.defense_summary, self.midfield_summary,
                          self.attack_summary, self.general_summary)
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "defenseSummary": self.defense_summary,
            "midfieldSummary": self.midfield_summary,
            "attackSummary": self.attack_summary,
            "generalSummary": self.general_summary,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "TeamSummary":
        if not data:
            return cls()
        return cls(
            defense_summary=data.get("defenseSummary") or "",
            midfield_summary=data.get("midfieldSummary") or "",
            attack_summary=data.get("attackSummary") or "",
            general_summary=data.get("generalSummary") or "",
        )


def _parse_date(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


@dataclass
class Game:
    """
    A scheduled or played game.

    Attributes:
        id: Backend document id
        opponent: Opponent team name
        date: Kick-off date and time
        status: Lifecycle status
        team_id: Our team id
        team_name: Our team name
        season: Season label
        location: Venue, if known
        our_score: Final goals for us (None until reported)
        opponent_score: Final goals for the opponent (None until reported)
        match_duration: Regular and extra time
        team_summary: Per-phase text summaries
        lineup_draft: Autosaved lineup while Scheduled
        report_draft: Autosaved report while Played
    """
    id: str
    opponent: str
    date: Optional[datetime] = None
    status: GameStatus = GameStatus.SCHEDULED
    team_id: Optional[str] = None
    team_name: str = ""
    season: str = ""
    location: Optional[str] = None
    our_score: Optional[int] = None
    opponent_score: Optional[int] = None
    match_duration: MatchDuration = field(default_factory=MatchDuration)
    team_summary: TeamSummary = field(default_factory=TeamSummary)
    lineup_draft: Optional[Dict[str, Any]] = None
    report_draft: Optional[Dict[str, Any]] = None

    @property
    def title(self) -> str:
        return f"{self.team_name} vs {self.opponent}"

    @property
    def final_score_display(self) -> Optional[str]:
        if self.our_score is None or self.opponent_score is None:
            return None
        return f"{self.our_score} - {self.opponent_score}"

    @property
    def result(self) -> str:
        """'win', 'loss', 'draw' or 'unknown' from the final score."""
        if self.our_score is None or self.opponent_score is None:
            return "unknown"
        if self.our_score > self.opponent_score:
            return "win"
        if self.our_score < self.opponent_score:
            return "loss"
        return "draw"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the backend document shape."""
        data = {
            "_id": self.id,
            "opponent": self.opponent,
            "date": self.date.isoformat() if self.date else None,
            "status": self.status.value,
            "team": self.team_id,
            "teamName": self.team_name,
            "season": self.season,
            "location": self.location,
            "ourScore": self.our_score,
            "opponentScore": self.opponent_score,
            "matchDuration": self.match_duration.to_dict(),
            "lineupDraft": self.lineup_draft,
            "reportDraft": self.report_draft,
        }
        data.update(self.team_summary.to_dict())
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Game":
        """
        Create from a backend document.

        Raises:
            ValueError: If the document has no id or an unknown status
        """
        game_id = data.get("_id") or data.get("id")
        if not game_id:
            raise ValueError("Game document has no id")

        team = data.get("team")
        if isinstance(team, dict):
            team = team.get("_id")

        def _optional_int(key: str) -> Optional[int]:
            value = data.get(key)
            return None if value is None else int(value)

        return cls(
            id=str(game_id),
            opponent=data.get("opponent") or "",
            date=_parse_date(data.get("date")),
            status=GameStatus(data.get("status") or GameStatus.SCHEDULED.value),
            team_id=str(team) if team else None,
            team_name=data.get("teamName") or "",
            season=data.get("season") or "",
            location=data.get("location"),
            our_score=_optional_int("ourScore"),
            opponent_score=_optional_int("opponentScore"),
            match_duration=MatchDuration.from_dict(data.get("matchDuration")),
            team_summary=TeamSummary.from_dict(data),
            lineup_draft=data.get("lineupDraft") if isinstance(data.get("lineupDraft"), dict) else None,
            report_draft=data.get("reportDraft") if isinstance(data.get("reportDraft"), dict) else None,
        )
