"""
Reconstruction of each player's state during a match.

States are derived by replaying the timeline (substitutions and cards) up to
a given minute, starting from the game's roster: starters begin on the pitch,
bench players on the bench, everyone else is not in the squad.
"""

from __future__ import annotations

from enum import Enum
from typing import Collection, Iterable, List, Optional, Sequence

from ..models import Card, Player, Substitution
from ..models.events import MatchEvent, sort_timeline
from .card_rules import OK, RuleCheck


class PlayerState(Enum):
    """Where a player stands at a given minute."""
    NOT_IN_SQUAD = "NOT_IN_SQUAD"
    BENCH = "BENCH"
    ON_PITCH = "ON_PITCH"
    SUBSTITUTED_OUT = "SUBSTITUTED_OUT"
    SENT_OFF = "SENT_OFF"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    PlayerState.NOT_IN_SQUAD: "not in squad",
    PlayerState.BENCH: "on bench",
    PlayerState.ON_PITCH: "on the pitch",
    PlayerState.SUBSTITUTED_OUT: "substituted out",
    PlayerState.SENT_OFF: "sent off",
}


def player_state_at_minute(timeline: Iterable[MatchEvent], player_id: str, minute: int,
                           starting_ids: Collection[str],
                           squad_ids: Collection[str]) -> PlayerState:
    """
    Replay the timeline up to and including ``minute`` for one player.

    Args:
        timeline: Goals, cards and substitutions in any order
        player_id: Player to track
        minute: Minute to evaluate at
        starting_ids: Ids of the starting lineup
        squad_ids: Ids of the whole squad (starting lineup and bench)

    Returns:
        The player's PlayerState at that minute
    """
    if player_id not in squad_ids:
        return PlayerState.NOT_IN_SQUAD

    state = PlayerState.ON_PITCH if player_id in starting_ids else PlayerState.BENCH

    for event in sort_timeline(timeline):
        if event.minute > minute:
            break
        if isinstance(event, Substitution):
            if event.player_out_id == player_id and state is PlayerState.ON_PITCH:
                state = PlayerState.SUBSTITUTED_OUT
            if event.player_in_id == player_id and state in (PlayerState.BENCH,
                                                             PlayerState.SUBSTITUTED_OUT):
                state = PlayerState.ON_PITCH
        elif isinstance(event, Card):
            if event.player_id == player_id and event.card_type.sends_off:
                state = PlayerState.SENT_OFF

    return state


def filter_players_by_state(players: Sequence[Player], timeline: Iterable[MatchEvent],
                            minute: int, starting_ids: Collection[str],
                            squad_ids: Collection[str],
                            states: Collection[PlayerState]) -> List[Player]:
    """Players whose state at ``minute`` is one of ``states``, in input order."""
    events = list(timeline)
    return [
        player for player in players
        if player_state_at_minute(events, player.id, minute, starting_ids, squad_ids) in states
    ]


def validate_goal_eligibility(timeline: Iterable[MatchEvent], scorer_id: str,
                              assister_id: Optional[str], minute: int,
                              starting_ids: Collection[str],
                              squad_ids: Collection[str]) -> RuleCheck:
    """Scorer and assister must both be on the pitch, and must differ."""
    events = list(timeline)

    if scorer_id not in squad_ids:
        return RuleCheck(False, "Scorer must be in the game squad (starting lineup or bench)")
    scorer_state = player_state_at_minute(events, scorer_id, minute, starting_ids, squad_ids)
    if scorer_state is not PlayerState.ON_PITCH:
        return RuleCheck(False, f"Scorer must be on the pitch. Current state: {scorer_state.description}")

    if assister_id:
        if assister_id == scorer_id:
            return RuleCheck(False, "Assister cannot be the same as scorer")
        if assister_id not in squad_ids:
            return RuleCheck(False, "Assister must be in the game squad (starting lineup or bench)")
        assister_state = player_state_at_minute(events, assister_id, minute, starting_ids, squad_ids)
        if assister_state is not PlayerState.ON_PITCH:
            return RuleCheck(
                False, f"Assister must be on the pitch. Current state: {assister_state.description}"
            )

    return OK


def validate_substitution_eligibility(timeline: Iterable[MatchEvent], player_out_id: str,
                                      player_in_id: str, minute: int,
                                      starting_ids: Collection[str],
                                      squad_ids: Collection[str]) -> RuleCheck:
    """
    The outgoing player must be on the pitch; the incoming one on the bench or
    previously substituted out (rolling substitutions).
    """
    if player_out_id == player_in_id:
        return RuleCheck(False, "Player out and player in must be different")
    if player_out_id not in squad_ids:
        return RuleCheck(False, "Player leaving field must be in the game squad")
    if player_in_id not in squad_ids:
        return RuleCheck(False, "Player entering field must be in the game squad")

    events = list(timeline)
    out_state = player_state_at_minute(events, player_out_id, minute, starting_ids, squad_ids)
    in_state = player_state_at_minute(events, player_in_id, minute, starting_ids, squad_ids)

    if out_state is PlayerState.SENT_OFF:
        return RuleCheck(False, "Cannot substitute a player who has been sent off")
    if out_state is not PlayerState.ON_PITCH:
        detail = "on bench" if out_state is PlayerState.BENCH else "already substituted out"
        return RuleCheck(False, f"Player leaving field must be on the pitch. Current state: {detail}")

    if in_state is PlayerState.SENT_OFF:
        return RuleCheck(False, "Cannot substitute in a player who has been sent off")
    if in_state is PlayerState.ON_PITCH:
        return RuleCheck(False, "Player entering field is already on the pitch")

    return OK
