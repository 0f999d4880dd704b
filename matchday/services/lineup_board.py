"""
Lineup board: the game-day reconciliation of roster statuses and formation.

The board owns a game's roster statuses, the selected formation layout and the
slot assignments, and keeps them consistent as players move between the
pitch, the bench and the stands:

- every player of the team has exactly one roster status;
- a player on the pitch holds exactly one slot and is in the Starting Lineup;
- the bench is exactly the players with status Bench.

While the board is not in manual mode, status changes rebuild the formation
automatically. Dragging a player onto a slot, or restoring a saved formation,
switches manual mode on so the coach's arrangement is left alone.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from ..errors import ConfirmationRequired, OutOfPositionError
from ..models import (
    DEFAULT_FORMATION_TYPE, Formation, FormationLayout, Game, GameRoster, GameStatus,
    Player, RosterStatus, get_layout
)
from .formation_builder import BuildResult, build_formation
from .squad_validator import PositionCheck, SquadValidation, validate_player_position, validate_squad

logger = logging.getLogger(__name__)

StatusLike = Union[RosterStatus, str]


def _empty_formation(layout: FormationLayout) -> Formation:
    return Formation({slot_id: None for slot_id in layout.slot_ids})


class LineupBoard:
    """
    Roster statuses, formation layout and slot assignments for one game.

    Args:
        players: All players of the team, in display order
        formation_type: Initial layout name
        roster_statuses: Initial statuses; players not listed are Not in Squad
    """

    def __init__(self, players: Sequence[Player],
                 formation_type: str = DEFAULT_FORMATION_TYPE,
                 roster_statuses: Optional[Mapping[str, StatusLike]] = None):
        self.players: List[Player] = list(players)
        self._players_by_id: Dict[str, Player] = {player.id: player for player in self.players}
        self.formation_type = formation_type
        self.layout: FormationLayout = get_layout(formation_type)
        self.formation: Formation = _empty_formation(self.layout)
        self.manual_mode = False
        self.roster_statuses: Dict[str, RosterStatus] = {
            player.id: RosterStatus.NOT_IN_SQUAD for player in self.players
        }
        for player_id, status in (roster_statuses or {}).items():
            if player_id in self._players_by_id:
                self.roster_statuses[player_id] = RosterStatus.parse(status)
        self.rebuild()

    # ----- lookups -----

    def player(self, player_id: str) -> Player:
        """
        Get a team player by id.

        Raises:
            KeyError: If the player is not on this team
        """
        try:
            return self._players_by_id[player_id]
        except KeyError:
            raise KeyError(f"Player {player_id} is not on this team")

    def status_of(self, player_id: str) -> RosterStatus:
        return self.roster_statuses.get(player_id, RosterStatus.NOT_IN_SQUAD)

    def _players_with(self, status: RosterStatus) -> List[Player]:
        return [player for player in self.players if self.roster_statuses[player.id] is status]

    @property
    def starting_players(self) -> List[Player]:
        return self._players_with(RosterStatus.STARTING_LINEUP)

    @property
    def bench_players(self) -> List[Player]:
        return self._players_with(RosterStatus.BENCH)

    @property
    def not_in_squad_players(self) -> List[Player]:
        return self._players_with(RosterStatus.NOT_IN_SQUAD)

    @property
    def squad_players(self) -> List[Player]:
        """Starting lineup and bench."""
        return [player for player in self.players if self.roster_statuses[player.id].in_squad]

    # ----- status changes -----

    def _apply_status(self, player_id: str, status: RosterStatus) -> None:
        if status is not RosterStatus.STARTING_LINEUP:
            self.formation.remove_player(player_id)
        self.roster_statuses[player_id] = status

    def set_status(self, player_id: str, status: StatusLike) -> RosterStatus:
        """
        Change a player's roster status.

        Leaving the Starting Lineup takes the player off the pitch. Outside
        manual mode the formation is rebuilt from the new statuses.

        Raises:
            KeyError: If the player is not on this team
            ValueError: If the status is unknown
        """
        self.player(player_id)
        new_status = RosterStatus.parse(status)
        self._apply_status(player_id, new_status)
        logger.debug("Player %s status -> %s", player_id, new_status.value)
        if not self.manual_mode:
            self.rebuild()
        return new_status

    def check_position(self, player_id: str, slot_id: str) -> PositionCheck:
        return validate_player_position(self.player(player_id), self.layout.slot(slot_id))

    def assign_to_slot(self, player_id: str, slot_id: str,
                       confirm_out_of_position: bool = False) -> PositionCheck:
        """
        Place a player on a slot of the board.

        The player leaves any slot they held before; whoever stood in the
        target slot goes to the bench. The board switches to manual mode.

        Raises:
            KeyError: If the player or the slot is unknown
            OutOfPositionError: If the slot is outside the player's natural
                position and the placement was not confirmed
        """
        player = self.player(player_id)
        slot = self.layout.slot(slot_id)
        if slot is None:
            raise KeyError(f"Slot {slot_id} is not part of formation {self.formation_type}")

        check = validate_player_position(player, slot)
        if not check.is_natural_position and not confirm_out_of_position:
            raise OutOfPositionError(check, player.name)

        self.manual_mode = True
        displaced = self.formation.assign(slot_id, player)
        if displaced is not None:
            self.roster_statuses[displaced.id] = RosterStatus.BENCH
            logger.info("%s moved to the bench to make room for %s", displaced.name, player.name)
        self.roster_statuses[player.id] = RosterStatus.STARTING_LINEUP
        return check

    def remove_from_slot(self, slot_id: str) -> Optional[Player]:
        """Empty a slot; its player is taken out of the squad."""
        player = self.formation.clear_slot(slot_id)
        if player is None:
            return None
        self.roster_statuses[player.id] = RosterStatus.NOT_IN_SQUAD
        return player

    def move_to_bench(self, player_id: str) -> None:
        self.player(player_id)
        self._apply_status(player_id, RosterStatus.BENCH)

    # ----- formation -----

    def change_formation(self, formation_type: str, confirm: bool = False) -> None:
        """
        Switch to another layout. All slot assignments are cleared.

        Raises:
            KeyError: If the formation type is unknown
            ConfirmationRequired: If players are on the board and the change
                was not confirmed
        """
        layout = get_layout(formation_type)
        if self.formation.filled_count() and not confirm:
            raise ConfirmationRequired(
                "Change Formation",
                "Changing formation will clear all current position assignments. Continue?",
            )
        self.formation_type = formation_type
        self.layout = layout
        self.formation = _empty_formation(layout)
        if not self.manual_mode:
            self.rebuild()

    def rebuild(self, force: bool = False) -> Optional[BuildResult]:
        """
        Rebuild the formation from the Starting Lineup.

        Skipped in manual mode unless ``force`` is set. A rebuild always
        leaves manual mode off so later status changes rebuild again.
        """
        if self.manual_mode and not force:
            return None
        self.manual_mode = False
        if not self.players:
            return None
        result = build_formation(self.layout, self.players, self.roster_statuses)
        self.formation = result.formation
        # Starters that did not fit stay in the Starting Lineup; the lineup
        # check reports the count.
        return result

    # ----- drafts and rosters -----

    def restore_draft(self, draft: Mapping[str, Any]) -> List[Dict[str, Any]]:
        """
        Restore statuses, formation and layout from a lineup draft.

        Players missing from the draft are Not in Squad. A saved formation
        is restored as-is in manual mode; entries whose player has left the
        team are dropped.

        Returns:
            The dropped formation entries as ``{"slot", "playerId"}``
        """
        rosters = draft.get("rosters")
        if rosters is None:
            # Early drafts stored the roster map at the top level.
            rosters = {key: value for key, value in draft.items()
                       if key not in ("formation", "formationType")}

        for player in self.players:
            raw = rosters.get(player.id)
            try:
                status = RosterStatus.parse(raw) if raw else RosterStatus.NOT_IN_SQUAD
            except ValueError:
                logger.warning("Ignoring unknown draft status %r for player %s", raw, player.id)
                status = RosterStatus.NOT_IN_SQUAD
            self.roster_statuses[player.id] = status

        formation_type = draft.get("formationType") or self.formation_type
        try:
            self.layout = get_layout(formation_type)
            self.formation_type = formation_type
        except KeyError:
            logger.warning("Draft formation type %r is unknown; keeping %s",
                           formation_type, self.formation_type)

        formation_data = draft.get("formation") or {}
        missing: List[Dict[str, Any]] = []
        if formation_data:
            self.manual_mode = True
            restored, missing = Formation.from_draft(formation_data, self._players_by_id)
            self.formation = _empty_formation(self.layout)
            for slot_id, player in restored.items():
                if self.layout.slot(slot_id) is None:
                    logger.warning("Dropping draft slot %s not in %s", slot_id, self.formation_type)
                    continue
                self.formation.assign(slot_id, player)
                self.roster_statuses[player.id] = RosterStatus.STARTING_LINEUP
            for entry in missing:
                logger.error("Draft slot %s refers to player %s who is no longer on the team",
                             entry["slot"], entry["playerId"])
        else:
            self.formation = _empty_formation(self.layout)
            self.rebuild()
        return missing

    def load_rosters(self, rosters: Iterable[GameRoster]) -> None:
        """Take statuses from saved game rosters; unlisted players are Not in Squad."""
        statuses = {roster.player_id: roster.status for roster in rosters}
        for player in self.players:
            self.roster_statuses[player.id] = statuses.get(player.id, RosterStatus.NOT_IN_SQUAD)
        self.formation = _empty_formation(self.layout)
        self.rebuild()

    def load_game(self, game: Game, rosters: Iterable[GameRoster] = ()) -> List[Dict[str, Any]]:
        """
        Initialise the board for a game.

        The lineup draft wins for Scheduled and Played games; otherwise the
        saved rosters are used.
        """
        if game.status in (GameStatus.SCHEDULED, GameStatus.PLAYED) and game.lineup_draft:
            return self.restore_draft(game.lineup_draft)
        self.load_rosters([roster for roster in rosters if roster.game_id == game.id])
        return []

    # ----- validation and payloads -----

    def validate(self) -> SquadValidation:
        return validate_squad(
            self.formation, self.bench_players, self.layout.goalkeeper_slots
        )

    def to_draft(self) -> Dict[str, Any]:
        """Lineup draft for autosave."""
        return {
            "rosters": {player_id: status.value for player_id, status in self.roster_statuses.items()},
            "formation": self.formation.to_draft(),
            "formationType": self.formation_type,
        }

    def to_start_payload(self) -> Dict[str, Any]:
        """Body of the start-game request; players not in the squad are left out."""
        return {
            "rosters": {
                player_id: status.value
                for player_id, status in self.roster_statuses.items()
                if status.in_squad
            },
            "formation": self.formation.to_payload(),
            "formationType": self.formation_type,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "formationType": self.formation_type,
            "layout": self.layout.to_dict(),
            "formation": {
                slot_id: player.to_dict() if player is not None else None
                for slot_id, player in self.formation.items()
            },
            "rosterStatuses": {
                player_id: status.value for player_id, status in self.roster_statuses.items()
            },
            "startingLineup": [player.id for player in self.starting_players],
            "bench": [player.id for player in self.bench_players],
            "notInSquad": [player.id for player in self.not_in_squad_players],
            "manualMode": self.manual_mode,
        }
