"""Dataclasses representing post-game player reports."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..utils.constants import DEFAULT_RATING, MAX_RATING, MIN_RATING


def _rating(value: Any) -> int:
    """Clamp a rating into 1-5; missing or zero ratings fall back to the default."""
    if not value:
        return DEFAULT_RATING
    return max(MIN_RATING, min(MAX_RATING, int(value)))


@dataclass
class PlayerReport:
    """Coach's evaluation of one player for one game."""

    rating_physical: int = DEFAULT_RATING
    rating_technical: int = DEFAULT_RATING
    rating_tactical: int = DEFAULT_RATING
    rating_mental: int = DEFAULT_RATING
    notes: str = ""
    minutes_played: Optional[int] = None
    goals: int = 0
    assists: int = 0

    @property
    def overall_rating(self) -> float:
        return (self.rating_physical + self.rating_technical
                + self.rating_tactical + self.rating_mental) / 4

    @property
    def is_complete(self) -> bool:
        """A report counts once minutes have been recorded."""
        return self.minutes_played is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rating_physical": self.rating_physical,
            "rating_technical": self.rating_technical,
            "rating_tactical": self.rating_tactical,
            "rating_mental": self.rating_mental,
            "notes": self.notes,
            "minutesPlayed": self.minutes_played,
            "goals": self.goals,
            "assists": self.assists,
        }

    def to_batch_entry(self, player_id: str) -> Dict[str, Any]:
        """Entry for ``/api/game-reports/batch``: user-editable fields only."""
        return {
            "playerId": player_id,
            "rating_physical": self.rating_physical,
            "rating_technical": self.rating_technical,
            "rating_tactical": self.rating_tactical,
            "rating_mental": self.rating_mental,
            "notes": self.notes or "",
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PlayerReport":
        if not data:
            return cls()
        minutes = data.get("minutesPlayed")
        return cls(
            rating_physical=_rating(data.get("rating_physical")),
            rating_technical=_rating(data.get("rating_technical")),
            rating_tactical=_rating(data.get("rating_tactical")),
            rating_mental=_rating(data.get("rating_mental")),
            notes=data.get("notes") or "",
            minutes_played=None if minutes is None else int(minutes),
            goals=int(data.get("goals") or 0),
            assists=int(data.get("assists") or 0),
        )
