"""Unit tests for disciplinary card rules."""
import unittest

from matchday.models import Card, CardType
from matchday.services.card_rules import can_receive_card, cards_for_player


def _card(card_type: CardType, player_id: str = "p1", minute: int = 10) -> Card:
    return Card(minute=minute, player_id=player_id, card_type=card_type)


class TestCanReceiveCard(unittest.TestCase):
    """Test the yellow / second yellow / red progression."""

    def test_clean_record(self) -> None:
        self.assertTrue(can_receive_card([], CardType.YELLOW).valid)
        self.assertTrue(can_receive_card(None, "red").valid)

    def test_second_yellow_needs_a_yellow(self) -> None:
        result = can_receive_card([], CardType.SECOND_YELLOW)
        self.assertFalse(result.valid)
        self.assertEqual(result.error, "Player must have a yellow card before receiving a second yellow")

    def test_after_one_yellow(self) -> None:
        cards = [_card(CardType.YELLOW)]
        self.assertTrue(can_receive_card(cards, "second-yellow").valid)
        self.assertTrue(can_receive_card(cards, CardType.RED).valid)

        result = can_receive_card(cards, CardType.YELLOW)
        self.assertFalse(result.valid)
        self.assertEqual(result.error, 'Player already has a yellow card. Use "Second Yellow" instead')

    def test_sent_off_blocks_everything(self) -> None:
        for sending_off in (CardType.RED, CardType.SECOND_YELLOW):
            cards = [_card(CardType.YELLOW), _card(sending_off, minute=60)]
            for card_type in CardType:
                with self.subTest(sending_off=sending_off, card_type=card_type):
                    result = can_receive_card(cards, card_type)
                    self.assertFalse(result.valid)
                    self.assertEqual(
                        result.error,
                        "Player has already been sent off and cannot receive additional cards",
                    )

    def test_invalid_card_type(self) -> None:
        result = can_receive_card([], "blue")
        self.assertFalse(result.valid)
        self.assertEqual(result.error, "Invalid card type: blue")
        self.assertEqual(result.to_dict(), {"valid": False, "error": "Invalid card type: blue"})


class TestCardsForPlayer(unittest.TestCase):

    def test_filters_by_player(self) -> None:
        cards = [_card(CardType.YELLOW, "p1"), _card(CardType.YELLOW, "p2"), _card(CardType.RED, "p1")]
        self.assertEqual([c.card_type for c in cards_for_player(cards, "p1")],
                         [CardType.YELLOW, CardType.RED])


if __name__ == "__main__":
    unittest.main()
