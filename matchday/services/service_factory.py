"""
Service factory for wiring the Matchday services together.

This module builds the API client, lineup board, draft autosaver and game
lifecycle for one game from a single ``Settings`` object, so entry points and
tests only deal with the top-level objects.
"""
from typing import Iterable, Optional, Sequence

import requests

from ..api import ApiClient, GamesApi
from ..models import DEFAULT_FORMATION_TYPE, Game, GameRoster, GameStatus, Player
from ..utils.config import Settings
from .draft_service import DraftAutosaver, report_draft_is_empty
from .game_lifecycle import GameLifecycle
from .lineup_board import LineupBoard


class ServiceFactory:
    """
    Factory for creating service instances with their dependencies injected.

    The API client is created once and shared by every service built by the
    same factory.
    """

    def __init__(self, settings: Optional[Settings] = None,
                 session: Optional[requests.Session] = None):
        """Initialize factory from settings (read from the environment by default)."""
        self.settings = settings or Settings.from_env()
        self._session = session
        self._client: Optional[ApiClient] = None
        self._games_api: Optional[GamesApi] = None

    def create_api_client(self) -> ApiClient:
        """Get the shared API client."""
        if self._client is None:
            self._client = ApiClient.from_settings(self.settings, self._session)
        return self._client

    def create_games_api(self) -> GamesApi:
        """Get the shared games endpoints."""
        if self._games_api is None:
            self._games_api = GamesApi(self.create_api_client())
        return self._games_api

    def create_lineup_board(self, game: Game, players: Sequence[Player],
                            rosters: Iterable[GameRoster] = ()) -> LineupBoard:
        """
        Create a lineup board loaded from the game's draft or saved rosters.

        Args:
            game: Game the board is for
            players: All players of the game's team
            rosters: Saved game rosters, used when there is no lineup draft

        Returns:
            LineupBoard ready for editing
        """
        board = LineupBoard(players, DEFAULT_FORMATION_TYPE)
        board.load_game(game, rosters)
        return board

    def create_autosaver(self, game: Game) -> DraftAutosaver:
        """
        Create a draft autosaver for the game.

        Report drafts with nothing in them are skipped; lineup drafts always save.
        """
        games_api = self.create_games_api()

        def skip_empty_report(draft: dict) -> bool:
            return game.status is GameStatus.PLAYED and report_draft_is_empty(draft)

        return DraftAutosaver(
            save=lambda draft: games_api.save_draft(game.id, draft),
            debounce_seconds=self.settings.autosave_debounce,
            should_skip=skip_empty_report,
        )

    def create_game_lifecycle(self, game: Game,
                              board: Optional[LineupBoard] = None,
                              autosaver: Optional[DraftAutosaver] = None) -> GameLifecycle:
        """Create the lifecycle driver; an autosaver is created when none is given."""
        return GameLifecycle(
            game=game,
            games_api=self.create_games_api(),
            board=board,
            autosaver=autosaver or self.create_autosaver(game),
        )
