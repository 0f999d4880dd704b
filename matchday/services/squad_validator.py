"""
Squad validation for game-day lineups.

This module provides the checks run before a game can move from Scheduled to
Played (starting lineup size, goalkeeper presence, bench size) and the
position-fit check used when a player is dropped on a slot. Every check is a
pure function over in-memory data and reports through a result object; none
of them raise.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional, Sequence

from ..models import Player, PlayerReport, PositionSlot
from ..utils.constants import (
    GOALKEEPER_SLOT, POSITION_LABEL_FAMILIES, RECOMMENDED_BENCH_SIZE, STARTING_LINEUP_SIZE
)

FormationLike = Mapping[str, Optional[Player]]


@dataclass
class ValidationResult:
    """Result of a validation with a user-facing message and an optional confirmation prompt."""
    is_valid: bool = True
    message: str = ""
    needs_confirmation: bool = False
    confirmation_message: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "isValid": self.is_valid,
            "message": self.message,
            "needsConfirmation": self.needs_confirmation,
            "confirmationMessage": self.confirmation_message,
        }


@dataclass
class PositionCheck:
    """Whether a player is being placed in their natural position."""
    is_natural_position: bool
    message: str

    def to_dict(self) -> dict:
        return {"isNaturalPosition": self.is_natural_position, "message": self.message}


@dataclass
class SquadValidation:
    """Aggregate of the starting lineup, bench and goalkeeper checks."""
    is_valid: bool
    needs_confirmation: bool
    starting_lineup: ValidationResult
    bench: ValidationResult
    goalkeeper: ValidationResult
    messages: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "isValid": self.is_valid,
            "needsConfirmation": self.needs_confirmation,
            "startingLineup": self.starting_lineup.to_dict(),
            "bench": self.bench.to_dict(),
            "goalkeeper": self.goalkeeper.to_dict(),
            "messages": list(self.messages),
        }


def validate_starting_lineup(formation: FormationLike) -> ValidationResult:
    """
    Validate that exactly 11 players are on the board.

    Args:
        formation: Mapping of slot id to player (None for an empty slot)

    Returns:
        ValidationResult distinguishing an empty lineup, too few and too many
    """
    on_pitch = sum(1 for player in formation.values() if player is not None)

    if on_pitch == 0:
        return ValidationResult(False, "No players assigned to starting lineup")
    if on_pitch < STARTING_LINEUP_SIZE:
        return ValidationResult(
            False,
            f"Only {on_pitch} players in starting lineup. "
            f"Need exactly {STARTING_LINEUP_SIZE} players.",
        )
    if on_pitch > STARTING_LINEUP_SIZE:
        return ValidationResult(
            False,
            f"Too many players ({on_pitch}) in starting lineup. "
            f"Maximum {STARTING_LINEUP_SIZE} players allowed.",
        )
    return ValidationResult(True, "Starting lineup is valid")


def validate_bench_size(bench_players: Sequence[Player]) -> ValidationResult:
    """
    Check the bench against the recommended size.

    A short bench never blocks the game; it only asks for confirmation.
    """
    bench_count = len(bench_players)

    if bench_count >= RECOMMENDED_BENCH_SIZE:
        return ValidationResult(True, "Bench size is adequate")

    if bench_count == 0:
        return ValidationResult(
            True,
            "No players on the bench",
            needs_confirmation=True,
            confirmation_message="You have no players on the bench. Are you sure you want to continue?",
        )

    return ValidationResult(
        True,
        f"Only {bench_count} players on bench (recommended: {RECOMMENDED_BENCH_SIZE}+)",
        needs_confirmation=True,
        confirmation_message=(
            f"You have fewer than {RECOMMENDED_BENCH_SIZE} bench players. "
            "Are you sure you want to continue?"
        ),
    )


def validate_goalkeeper(formation: FormationLike,
                        goalkeeper_slots: Iterable[str] = (GOALKEEPER_SLOT,)) -> ValidationResult:
    """Valid iff at least one goalkeeper slot holds a player."""
    if any(formation.get(slot_id) is not None for slot_id in goalkeeper_slots):
        return ValidationResult(True, "Goalkeeper is assigned")
    return ValidationResult(False, "No goalkeeper assigned to the team")


def validate_player_position(player: Optional[Player],
                             slot: Optional[PositionSlot]) -> PositionCheck:
    """
    Check whether a slot suits the player's natural position.

    The comparison is case-insensitive against the slot's type and label, and
    a position type also matches the labels of its family (a Defender fits
    CB, LB, RB). Missing player or slot data passes.
    """
    if player is None or slot is None:
        return PositionCheck(True, "Position validation passed")

    player_position = (player.position or "").lower()
    slot_type = (slot.type or "").lower()
    slot_label = (slot.label or "").lower()
    family = POSITION_LABEL_FAMILIES.get(player_position, [])

    is_natural = bool(player_position) and (
        slot_type in family
        or slot_label in family
        or player_position == slot_type
        or player_position == slot_label
    )

    if is_natural:
        return PositionCheck(True, f"{player.name} is in their natural position")
    return PositionCheck(
        False,
        f"{player.name} is being placed out of their natural position "
        f"({player.position} → {slot.label})",
    )


def validate_squad(formation: FormationLike,
                   bench_players: Sequence[Player],
                   goalkeeper_slots: Iterable[str] = (GOALKEEPER_SLOT,)) -> SquadValidation:
    """Run the lineup, bench and goalkeeper checks together."""
    starting_lineup = validate_starting_lineup(formation)
    bench = validate_bench_size(bench_players)
    goalkeeper = validate_goalkeeper(formation, goalkeeper_slots)

    return SquadValidation(
        is_valid=starting_lineup.is_valid and bench.is_valid and goalkeeper.is_valid,
        needs_confirmation=bench.needs_confirmation,
        starting_lineup=starting_lineup,
        bench=bench,
        goalkeeper=goalkeeper,
        messages=[starting_lineup.message, bench.message, goalkeeper.message],
    )


def validate_report_completeness(starting_players: Optional[Sequence[Player]],
                                 player_reports: Mapping[str, PlayerReport]) -> ValidationResult:
    """Every starting-lineup player needs a report with minutes recorded."""
    if not starting_players:
        return ValidationResult(False, "No starting lineup players found")

    missing = [
        player.name
        for player in starting_players
        if player.id not in player_reports or not player_reports[player.id].is_complete
    ]
    if missing:
        return ValidationResult(
            False,
            "Starting lineup players must have complete reports. Missing: " + ", ".join(missing),
        )
    return ValidationResult(True, "All starting lineup players have complete reports")
