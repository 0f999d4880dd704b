"""
Disciplinary card rules.

A player with no cards can be shown a yellow or a straight red. After one
yellow, only a second yellow or a straight red is allowed. Once sent off, the
player cannot receive any further card.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from ..models import Card, CardType


@dataclass
class RuleCheck:
    """Outcome of an in-match rule check: valid, or the reason it is not."""
    valid: bool
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {"valid": self.valid, "error": self.error}


OK = RuleCheck(True)


def can_receive_card(existing_cards: Optional[Iterable[Card]],
                     new_card_type: Union[CardType, str]) -> RuleCheck:
    """
    Check whether a player can be shown another card.

    Args:
        existing_cards: Cards the player has already received in this game
        new_card_type: Card being requested, as a CardType or its value

    Returns:
        RuleCheck with the reason when the card is not allowed
    """
    cards = list(existing_cards or [])
    yellow_count = sum(1 for card in cards if card.card_type is CardType.YELLOW)
    if any(card.card_type.sends_off for card in cards):
        return RuleCheck(False, "Player has already been sent off and cannot receive additional cards")

    try:
        card_type = CardType(new_card_type)
    except ValueError:
        return RuleCheck(False, f"Invalid card type: {new_card_type}")

    if card_type is CardType.YELLOW:
        if yellow_count == 0:
            return OK
        return RuleCheck(False, 'Player already has a yellow card. Use "Second Yellow" instead')

    if card_type is CardType.SECOND_YELLOW:
        if yellow_count == 1:
            return OK
        if yellow_count == 0:
            return RuleCheck(False, "Player must have a yellow card before receiving a second yellow")
        return RuleCheck(False, "Player already has multiple yellow cards or has been sent off")

    # Straight red is always allowed for a player still on the pitch.
    return OK


def cards_for_player(cards: Iterable[Card], player_id: str) -> list:
    return [card for card in cards if card.player_id == player_id]
