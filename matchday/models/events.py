"""
In-match event models: goals, cards and substitutions.

Events are minute-stamped and can be merged into one chronological timeline,
from which the score and every player's on-pitch state are derived.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Union

from .game import FinalScore


class CardType(Enum):
    """Disciplinary card types."""
    YELLOW = "yellow"
    SECOND_YELLOW = "second-yellow"
    RED = "red"

    @property
    def sends_off(self) -> bool:
        return self in (CardType.RED, CardType.SECOND_YELLOW)


def _ref_id(value: Any) -> Optional[str]:
    """Id of a possibly populated reference."""
    if value is None:
        return None
    if isinstance(value, dict):
        value = value.get("_id") or value.get("id")
        if value is None:
            return None
    return str(value)


@dataclass
class Goal:
    """A goal scored by us or by the opponent."""
    minute: int
    scorer_id: Optional[str] = None
    assister_id: Optional[str] = None
    is_opponent_goal: bool = False
    goal_type: str = "open-play"
    id: Optional[str] = None

    type = "goal"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"minute": self.minute, "goalType": self.goal_type}
        if self.is_opponent_goal:
            data["goalCategory"] = "OpponentGoal"
        else:
            data.update({
                "goalCategory": "TeamGoal",
                "scorerId": self.scorer_id,
                "assistedById": self.assister_id,
            })
        return data


@dataclass
class Card:
    """A yellow, second-yellow or red card shown to one of our players."""
    minute: int
    player_id: str
    card_type: CardType
    reason: Optional[str] = None
    id: Optional[str] = None

    type = "card"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "minute": self.minute,
            "playerId": self.player_id,
            "cardType": self.card_type.value,
            "reason": self.reason,
        }


@dataclass
class Substitution:
    """One player leaving the pitch for another."""
    minute: int
    player_out_id: str
    player_in_id: str
    reason: Optional[str] = None
    id: Optional[str] = None

    type = "substitution"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "minute": self.minute,
            "playerOutId": self.player_out_id,
            "playerInId": self.player_in_id,
            "reason": self.reason,
        }


MatchEvent = Union[Goal, Card, Substitution]


def event_from_timeline(data: Dict[str, Any]) -> MatchEvent:
    """
    Parse one entry of the backend's merged timeline.

    Raises:
        ValueError: If the entry type is not a goal, card or substitution
    """
    kind = data.get("type")
    minute = int(data.get("minute") or 0)
    event_id = _ref_id(data.get("id") or data.get("_id"))

    if kind in ("goal", "opponent-goal"):
        return Goal(
            minute=minute,
            scorer_id=_ref_id(data.get("scorer") or data.get("scorerId")),
            assister_id=_ref_id(data.get("assister") or data.get("assistedById")),
            is_opponent_goal=kind == "opponent-goal",
            goal_type=data.get("goalType") or "open-play",
            id=event_id,
        )
    if kind == "card":
        return Card(
            minute=minute,
            player_id=_ref_id(data.get("player") or data.get("playerId")) or "",
            card_type=CardType(data.get("cardType")),
            reason=data.get("reason"),
            id=event_id,
        )
    if kind == "substitution":
        return Substitution(
            minute=minute,
            player_out_id=_ref_id(data.get("playerOut") or data.get("playerOutId")) or "",
            player_in_id=_ref_id(data.get("playerIn") or data.get("playerInId")) or "",
            reason=data.get("reason"),
            id=event_id,
        )
    raise ValueError(f"Unknown timeline event type: {kind!r}")


def sort_timeline(events: Iterable[MatchEvent]) -> List[MatchEvent]:
    """Chronological order; events in the same minute keep their input order."""
    return sorted(events, key=lambda event: event.minute)


def score_from_goals(goals: Iterable[Goal]) -> FinalScore:
    """Derive the score from recorded goals."""
    score = FinalScore()
    for goal in goals:
        if goal.is_opponent_goal:
            score.opponent_score += 1
        else:
            score.our_score += 1
    return score
