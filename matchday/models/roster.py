"""Per-game roster status of each player."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class RosterStatus(Enum):
    """Where a player stands for a given game."""
    STARTING_LINEUP = "Starting Lineup"
    BENCH = "Bench"
    NOT_IN_SQUAD = "Not in Squad"

    @classmethod
    def parse(cls, value: Any) -> "RosterStatus":
        """
        Parse a backend status string.

        "Unavailable" is stored by the backend for injured or absent players and
        counts as not in squad for lineup purposes.

        Raises:
            ValueError: If the value is not a known status
        """
        if isinstance(value, cls):
            return value
        if value == "Unavailable":
            return cls.NOT_IN_SQUAD
        return cls(value)

    @property
    def in_squad(self) -> bool:
        return self is not RosterStatus.NOT_IN_SQUAD


@dataclass
class GameRoster:
    """A player's roster entry for one game."""
    game_id: str
    player_id: str
    status: RosterStatus = RosterStatus.NOT_IN_SQUAD

    def to_dict(self) -> Dict[str, Any]:
        return {"game": self.game_id, "player": self.player_id, "status": self.status.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameRoster":
        """Create from a backend document whose references may be populated."""
        game = data.get("game")
        player = data.get("player")
        if isinstance(game, dict):
            game = game.get("_id")
        if isinstance(player, dict):
            player = player.get("_id")
        return cls(
            game_id=str(game),
            player_id=str(player),
            status=RosterStatus.parse(data.get("status") or RosterStatus.NOT_IN_SQUAD.value),
        )
