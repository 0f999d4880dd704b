"""Formation layouts and slot assignments for the Matchday toolkit."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .player import Player
from ..utils.constants import GOALKEEPER_SLOT


@dataclass(frozen=True)
class PositionSlot:
    """A slot on the tactical board with its required position type."""
    slot_id: str
    label: str
    type: str
    x: float  # 0-100, left to right
    y: float  # 0-100, attacking to defensive

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.slot_id,
            "label": self.label,
            "type": self.type,
            "x": self.x,
            "y": self.y,
        }


@dataclass(frozen=True)
class FormationLayout:
    """A named tactical layout: the ordered set of slots players can fill."""
    name: str
    slots: Tuple[PositionSlot, ...]

    @property
    def slot_ids(self) -> List[str]:
        return [slot.slot_id for slot in self.slots]

    @property
    def goalkeeper_slots(self) -> List[str]:
        """Slot ids that count as the goalkeeper position."""
        return [slot.slot_id for slot in self.slots if slot.type.lower() == "goalkeeper"]

    def slot(self, slot_id: str) -> Optional[PositionSlot]:
        """Get a slot by id, or None if the layout has no such slot."""
        for slot in self.slots:
            if slot.slot_id == slot_id:
                return slot
        return None

    def get_formation_shape(self) -> Tuple[int, int, int, int]:
        """Get layout shape as (GK, DEF, MID, FOR) tuple."""
        counts = {"goalkeeper": 0, "defender": 0, "midfielder": 0, "forward": 0}
        for slot in self.slots:
            key = slot.type.lower()
            if key in counts:
                counts[key] += 1
        return (counts["goalkeeper"], counts["defender"], counts["midfielder"], counts["forward"])

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "positions": [slot.to_dict() for slot in self.slots]}


def _layout(name: str, rows: List[Tuple[str, str, str, float, float]]) -> FormationLayout:
    return FormationLayout(
        name=name,
        slots=tuple(PositionSlot(slot_id, label, kind, x, y) for slot_id, label, kind, x, y in rows),
    )


FORMATIONS: Dict[str, FormationLayout] = {
    "1-4-4-2": _layout("1-4-4-2", [
        (GOALKEEPER_SLOT, "GK", "Goalkeeper", 50, 85),
        ("lb", "LB", "Defender", 15, 65),
        ("cb1", "CB", "Defender", 35, 65),
        ("cb2", "CB", "Defender", 65, 65),
        ("rb", "RB", "Defender", 85, 65),
        ("lm", "LM", "Midfielder", 15, 40),
        ("cm1", "CM", "Midfielder", 35, 45),
        ("cm2", "CM", "Midfielder", 65, 45),
        ("rm", "RM", "Midfielder", 85, 40),
        ("st1", "ST", "Forward", 35, 20),
        ("st2", "ST", "Forward", 65, 20),
    ]),
    "1-4-3-3": _layout("1-4-3-3", [
        (GOALKEEPER_SLOT, "GK", "Goalkeeper", 50, 85),
        ("lb", "LB", "Defender", 15, 65),
        ("cb1", "CB", "Defender", 35, 65),
        ("cb2", "CB", "Defender", 65, 65),
        ("rb", "RB", "Defender", 85, 65),
        ("cm1", "CM", "Midfielder", 30, 45),
        ("cm2", "CM", "Midfielder", 50, 45),
        ("cm3", "CM", "Midfielder", 70, 45),
        ("lw", "LW", "Forward", 15, 20),
        ("st", "ST", "Forward", 50, 15),
        ("rw", "RW", "Forward", 85, 20),
    ]),
    "1-3-5-2": _layout("1-3-5-2", [
        (GOALKEEPER_SLOT, "GK", "Goalkeeper", 50, 85),
        ("cb1", "CB", "Defender", 25, 65),
        ("cb2", "CB", "Defender", 50, 65),
        ("cb3", "CB", "Defender", 75, 65),
        ("lwb", "LWB", "Midfielder", 10, 45),
        ("cm1", "CM", "Midfielder", 30, 45),
        ("cm2", "CM", "Midfielder", 50, 45),
        ("cm3", "CM", "Midfielder", 70, 45),
        ("rwb", "RWB", "Midfielder", 90, 45),
        ("st1", "ST", "Forward", 35, 20),
        ("st2", "ST", "Forward", 65, 20),
    ]),
}

DEFAULT_FORMATION_TYPE = "1-4-4-2"


def get_layout(formation_type: str) -> FormationLayout:
    """
    Look up a built-in layout.

    Raises:
        KeyError: If the formation type is unknown
    """
    try:
        return FORMATIONS[formation_type]
    except KeyError:
        raise KeyError(f"Unknown formation type: {formation_type}")


@dataclass
class Formation:
    """
    Mapping of slot id to the player standing in it.

    A player occupies at most one slot; ``assign`` enforces this by clearing
    the player's previous slot first.
    """
    assignments: Dict[str, Optional[Player]] = field(default_factory=dict)

    def __getitem__(self, slot_id: str) -> Optional[Player]:
        return self.assignments.get(slot_id)

    def __iter__(self) -> Iterator[str]:
        return iter(self.assignments)

    def __len__(self) -> int:
        return len(self.assignments)

    def items(self):
        return self.assignments.items()

    def values(self):
        return self.assignments.values()

    def get(self, slot_id: str, default: Optional[Player] = None) -> Optional[Player]:
        return self.assignments.get(slot_id, default)

    def assigned_players(self) -> List[Player]:
        """Players currently on the board, in slot order."""
        return [player for player in self.assignments.values() if player is not None]

    def filled_count(self) -> int:
        return len(self.assigned_players())

    def player_ids(self) -> List[str]:
        return [player.id for player in self.assigned_players()]

    def slot_of(self, player_id: str) -> Optional[str]:
        """Slot id currently holding the player, if any."""
        for slot_id, player in self.assignments.items():
            if player is not None and player.id == player_id:
                return slot_id
        return None

    def assign(self, slot_id: str, player: Player) -> Optional[Player]:
        """
        Put a player in a slot.

        Returns:
            The player previously in the slot (other than ``player``), if any
        """
        previous_slot = self.slot_of(player.id)
        if previous_slot is not None:
            self.assignments[previous_slot] = None

        displaced = self.assignments.get(slot_id)
        self.assignments[slot_id] = player
        if displaced is not None and displaced.id != player.id:
            return displaced
        return None

    def clear_slot(self, slot_id: str) -> Optional[Player]:
        """Empty a slot and return whoever was in it."""
        player = self.assignments.get(slot_id)
        if slot_id in self.assignments:
            self.assignments[slot_id] = None
        return player

    def remove_player(self, player_id: str) -> Optional[str]:
        """Take a player off the board; returns the slot they left."""
        slot_id = self.slot_of(player_id)
        if slot_id is not None:
            self.assignments[slot_id] = None
        return slot_id

    def clear_assignments(self) -> None:
        """Clear all player assignments from the formation."""
        self.assignments = {}

    def to_draft(self) -> Dict[str, Dict[str, Any]]:
        """Draft form: occupied slots with a minimal player reference."""
        return {
            slot_id: player.to_reference()
            for slot_id, player in self.assignments.items()
            if player is not None
        }

    def to_payload(self) -> Dict[str, str]:
        """Start-game form: occupied slots mapped to player ids."""
        return {
            slot_id: player.id
            for slot_id, player in self.assignments.items()
            if player is not None and player.id and player.id != "0"
        }

    @classmethod
    def from_draft(cls, data: Dict[str, Any],
                   players_by_id: Dict[str, Player]) -> Tuple[Formation, List[Dict[str, Any]]]:
        """
        Rebuild a formation from its draft form using full player objects.

        Accepts either ``{"_id": ...}`` references or bare player ids as values.

        Returns:
            Tuple of (formation, missing) where ``missing`` lists the draft
            entries whose player is not in ``players_by_id``
        """
        formation = cls()
        missing: List[Dict[str, Any]] = []
        for slot_id, reference in (data or {}).items():
            if isinstance(reference, dict):
                player_id = reference.get("_id")
            else:
                player_id = reference
            if not player_id:
                continue
            player = players_by_id.get(str(player_id))
            if player is None:
                missing.append({"slot": slot_id, "playerId": str(player_id)})
                continue
            formation.assignments[slot_id] = player
        return formation, missing
