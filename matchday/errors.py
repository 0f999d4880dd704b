"""Exception types raised by the Matchday services and API client."""
from typing import Any, List, Optional


class MatchdayError(Exception):
    """Base class for all Matchday errors."""
    pass


class GameStateError(MatchdayError):
    """Raised when a game status transition is not allowed."""
    pass


class SquadValidationError(MatchdayError):
    """Raised when a squad blocks a transition (lineup size, goalkeeper, reports)."""

    def __init__(self, title: str, messages: List[str]):
        super().__init__(f"{title}: {'; '.join(messages)}")
        self.title = title
        self.messages = messages


class ConfirmationRequired(MatchdayError):
    """Raised when an action needs the coach's explicit confirmation to proceed."""

    def __init__(self, title: str, message: str):
        super().__init__(message)
        self.title = title
        self.message = message


class OutOfPositionError(ConfirmationRequired):
    """Raised when a player is dropped on a slot outside their natural position."""

    def __init__(self, check: Any, player_name: str):
        super().__init__(
            "Out of Position Warning",
            f"{player_name} is being placed out of their natural position. "
            "Are you sure you want to place them here?",
        )
        self.check = check


class ApiError(MatchdayError):
    """Raised when a backend request fails or returns a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
