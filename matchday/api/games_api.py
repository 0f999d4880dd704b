"""Endpoint wrappers for games, rosters, reports, drafts and match events."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..models import (
    Card, Game, GameRoster, Goal, Player, PlayerReport, RosterStatus, Substitution
)
from ..models.events import MatchEvent, event_from_timeline
from .client import ApiClient

logger = logging.getLogger(__name__)


def _data(body: Any, key: str = "data") -> Any:
    """Unwrap the backend's ``{"success": true, "data": ...}`` envelope."""
    if isinstance(body, dict) and key in body:
        return body[key]
    return body


class GamesApi:
    """Typed access to the game endpoints of the backend."""

    def __init__(self, client: ApiClient):
        self.client = client

    # ----- games -----

    def list_games(self) -> List[Game]:
        return [Game.from_dict(item) for item in _data(self.client.get("/api/games")) or []]

    def get_game(self, game_id: str) -> Game:
        return Game.from_dict(_data(self.client.get(f"/api/games/{game_id}")))

    def create_game(self, fields: Mapping[str, Any]) -> Game:
        return Game.from_dict(_data(self.client.post("/api/games", dict(fields))))

    def update_game(self, game_id: str, changes: Mapping[str, Any]) -> Game:
        return Game.from_dict(_data(self.client.put(f"/api/games/{game_id}", dict(changes))))

    def delete_game(self, game_id: str) -> None:
        self.client.delete(f"/api/games/{game_id}")

    # ----- drafts and transitions -----

    def get_draft(self, game_id: str) -> Optional[Dict[str, Any]]:
        return _data(self.client.get(f"/api/games/{game_id}/draft"))

    def save_draft(self, game_id: str, draft: Mapping[str, Any]) -> Any:
        """Store a lineup or report draft, depending on the game's status."""
        return _data(self.client.put(f"/api/games/{game_id}/draft", dict(draft)))

    def start_game(self, game_id: str, payload: Mapping[str, Any]) -> Tuple[Game, List[GameRoster]]:
        """
        Move a Scheduled game to Played with its lineup.

        Args:
            payload: ``{"rosters", "formation", "formationType"}``

        Returns:
            The updated game and the rosters the backend stored
        """
        body = self.client.post(f"/api/games/{game_id}/start-game", dict(payload))
        game = Game.from_dict(_data(body, "game"))
        rosters = [GameRoster.from_dict(item) for item in (body or {}).get("gameRosters") or []]
        logger.info("Game %s started with %d roster entries", game_id, len(rosters))
        return game, rosters

    # ----- rosters and reports -----

    def list_team_players(self, team_id: str) -> List[Player]:
        items = _data(self.client.get("/api/players", params={"team": team_id})) or []
        return [Player.from_dict(item) for item in items]

    def get_rosters(self, game_id: str) -> List[GameRoster]:
        items = _data(self.client.get(f"/api/game-rosters/game/{game_id}")) or []
        return [GameRoster.from_dict(item) for item in items]

    def batch_update_rosters(self, game_id: str,
                             statuses: Mapping[str, RosterStatus]) -> Any:
        rosters = [
            {"playerId": player_id, "status": status.value} for player_id, status in statuses.items()
        ]
        return _data(self.client.post("/api/game-rosters/batch",
                                      {"gameId": game_id, "rosters": rosters}))

    def batch_update_reports(self, game_id: str,
                             reports: Mapping[str, PlayerReport]) -> Any:
        entries = [report.to_batch_entry(player_id) for player_id, report in reports.items()]
        return _data(self.client.post("/api/game-reports/batch",
                                      {"gameId": game_id, "reports": entries}))

    def upsert_player_match_stats(self, game_id: str, player_id: str,
                                  stats: Mapping[str, Any]) -> Any:
        """Create or replace one player's match stats (fouls committed and received)."""
        body = self.client.put(f"/api/games/{game_id}/player-match-stats/player/{player_id}",
                               dict(stats))
        return _data(body, "stats")

    def get_reports(self, game_id: str) -> Dict[str, PlayerReport]:
        items = _data(self.client.get(f"/api/game-reports/game/{game_id}")) or []
        reports: Dict[str, PlayerReport] = {}
        for item in items:
            player = item.get("player")
            player_id = player.get("_id") if isinstance(player, dict) else player
            if player_id:
                reports[str(player_id)] = PlayerReport.from_dict(item)
        return reports

    # ----- match events -----

    def get_goals(self, game_id: str) -> List[Goal]:
        body = self.client.get(f"/api/games/{game_id}/goals") or {}
        goals = []
        for item in _data(body, "goals") or []:
            kind = "opponent-goal" if item.get("goalCategory") == "OpponentGoal" else "goal"
            goals.append(event_from_timeline({**item, "type": kind}))
        return goals

    def record_goal(self, game_id: str, goal: Goal) -> Any:
        return self.client.post(f"/api/games/{game_id}/goals", goal.to_dict())

    def get_cards(self, game_id: str) -> List[Card]:
        body = self.client.get(f"/api/games/{game_id}/cards") or {}
        return [event_from_timeline({**item, "type": "card"}) for item in _data(body, "cards") or []]

    def record_card(self, game_id: str, card: Card) -> Any:
        return self.client.post(f"/api/games/{game_id}/cards", card.to_dict())

    def get_substitutions(self, game_id: str) -> List[Substitution]:
        body = self.client.get(f"/api/games/{game_id}/substitutions") or {}
        return [
            event_from_timeline({**item, "type": "substitution"})
            for item in _data(body, "substitutions") or []
        ]

    def record_substitution(self, game_id: str, substitution: Substitution) -> Any:
        return self.client.post(f"/api/games/{game_id}/substitutions", substitution.to_dict())

    def get_timeline(self, game_id: str) -> List[MatchEvent]:
        """Chronological goals, cards and substitutions; other entries are skipped."""
        events: List[MatchEvent] = []
        for item in _data(self.client.get(f"/api/games/{game_id}/timeline")) or []:
            try:
                events.append(event_from_timeline(item))
            except ValueError:
                logger.debug("Skipping timeline entry of type %r", item.get("type"))
        return events
