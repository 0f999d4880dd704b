"""
Player model for the Matchday toolkit.

This module contains the Player dataclass which represents a squad member as
the backend stores it (document id, display name, natural position, kit number).
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional
from enum import Enum


class PlayerPosition(Enum):
    """Natural playing positions."""
    GOALKEEPER = "Goalkeeper"
    DEFENDER = "Defender"
    MIDFIELDER = "Midfielder"
    FORWARD = "Forward"


@dataclass
class Player:
    """
    A team player.

    Attributes:
        id: Backend document id (``_id``)
        full_name: Display name
        position: Natural position, either a type ("Midfielder") or a slot label ("RM")
        kit_number: Shirt number, if assigned
        team_id: Owning team id
    """
    id: str
    full_name: str
    position: Optional[str] = None
    kit_number: Optional[int] = None
    team_id: Optional[str] = None

    @property
    def name(self) -> str:
        """Alias used in validation messages."""
        return self.full_name

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the backend document shape."""
        return {
            "_id": self.id,
            "fullName": self.full_name,
            "position": self.position,
            "kitNumber": self.kit_number,
            "team": self.team_id,
        }

    def to_reference(self) -> Dict[str, Any]:
        """Minimal reference stored inside lineup drafts."""
        return {"_id": self.id, "fullName": self.full_name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """
        Create from a backend document.

        Accepts ``_id`` or ``id`` and ``fullName`` or ``name``; a populated
        ``team`` reference is reduced to its id.

        Raises:
            ValueError: If the document has no id
        """
        player_id = data.get("_id") or data.get("id")
        if not player_id:
            raise ValueError("Player document has no id")

        team = data.get("team")
        if isinstance(team, dict):
            team = team.get("_id")

        kit_number = data.get("kitNumber")
        if kit_number is not None and kit_number != "":
            kit_number = int(kit_number)
        else:
            kit_number = None

        return cls(
            id=str(player_id),
            full_name=data.get("fullName") or data.get("name") or "",
            position=data.get("position"),
            kit_number=kit_number,
            team_id=str(team) if team else None,
        )
