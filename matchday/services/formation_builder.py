"""
Automatic formation building from roster statuses.

Starting Lineup players are placed on the layout in three passes over the
slots, in slot order:

1. exact label match (a player listed as "RM" goes to the RM slot),
2. type match (a "Midfielder" goes to any free midfielder slot),
3. fallback (any unplaced starter fills any remaining slot).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Mapping, Sequence

from ..models import Formation, FormationLayout, Player, PositionSlot, RosterStatus

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """A freshly built formation and the starters that did not fit."""
    formation: Formation
    unplaced: List[Player] = field(default_factory=list)

    @property
    def placed_count(self) -> int:
        return self.formation.filled_count()


def _fill_pass(layout: FormationLayout, formation: Formation, starters: Sequence[Player],
               matches: Callable[[Player, PositionSlot], bool]) -> None:
    for slot in layout.slots:
        if formation.get(slot.slot_id) is not None:
            continue
        placed = set(formation.player_ids())
        for player in starters:
            if player.id not in placed and matches(player, slot):
                formation.assignments[slot.slot_id] = player
                break


def build_formation(layout: FormationLayout, players: Sequence[Player],
                    roster_statuses: Mapping[str, RosterStatus]) -> BuildResult:
    """
    Build a formation from the players marked Starting Lineup.

    Args:
        layout: Formation layout to fill
        players: All players of the team, in display order
        roster_statuses: Player id to roster status

    Returns:
        BuildResult with every slot of the layout present (None when empty)
    """
    starters = [
        player for player in players
        if roster_statuses.get(player.id) is RosterStatus.STARTING_LINEUP
    ]
    formation = Formation({slot_id: None for slot_id in layout.slot_ids})

    _fill_pass(layout, formation, starters, lambda player, slot: player.position == slot.label)
    _fill_pass(layout, formation, starters, lambda player, slot: player.position == slot.type)
    _fill_pass(layout, formation, starters, lambda player, slot: True)

    placed = set(formation.player_ids())
    unplaced = [player for player in starters if player.id not in placed]
    if unplaced:
        logger.warning(
            "%d starting players could not be placed in %s: %s",
            len(unplaced), layout.name, ", ".join(player.name for player in unplaced),
        )
    logger.debug("Built %s with %d/%d slots filled",
                 layout.name, formation.filled_count(), len(layout.slots))
    return BuildResult(formation=formation, unplaced=unplaced)
