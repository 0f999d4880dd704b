"""
Web application module for the Matchday lineup board.

This module contains the Flask server that exposes one game's lineup board as
JSON endpoints for the browser board: roster status changes, drag-and-drop
slot assignments, formation changes, squad validation and the transition to
Played.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, request

from ..errors import (
    ApiError, ConfirmationRequired, GameStateError, OutOfPositionError, SquadValidationError
)
from ..services import GameLifecycle, LineupBoard, ServiceFactory
from ..utils.config import Settings
from ..utils.constants import DEFAULT_HOST, DEFAULT_PORT
from ..utils.logging_setup import configure_logging

logger = logging.getLogger(__name__)


class WebAppState:
    """
    State holder for the web application: the board of one game and,
    when connected to the backend, its lifecycle driver.
    """

    def __init__(self, board: LineupBoard, lifecycle: Optional[GameLifecycle] = None):
        self.board = board
        self.lifecycle = lifecycle

    def board_changed(self) -> None:
        """Queue the lineup draft for autosave."""
        if self.lifecycle is not None:
            self.lifecycle.schedule_draft()


def _field(data: Dict[str, Any], name: str) -> Any:
    value = data.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"{name} is required")
    return value


def _flag(data: Dict[str, Any], name: str) -> bool:
    """Only a JSON ``true`` counts as set."""
    return data.get(name) is True


def _error(message: str, status: int, **extra: Any) -> Tuple[Any, int]:
    body = {"success": False, "error": message}
    body.update(extra)
    return jsonify(body), status


def create_app(app_state: WebAppState) -> Flask:
    """
    Create and configure the Flask application with the board endpoints.

    Args:
        app_state: Board (and lifecycle) the endpoints operate on

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)

    # ==================== Error handling ==================== #

    @app.errorhandler(OutOfPositionError)
    def out_of_position(e: OutOfPositionError):
        return _error(e.message, 409, title=e.title, needsConfirmation=True,
                      check=e.check.to_dict())

    @app.errorhandler(ConfirmationRequired)
    def confirmation_required(e: ConfirmationRequired):
        return _error(e.message, 409, title=e.title, needsConfirmation=True)

    @app.errorhandler(SquadValidationError)
    def squad_invalid(e: SquadValidationError):
        return _error("\n".join(e.messages), 400, title=e.title)

    @app.errorhandler(GameStateError)
    def bad_state(e: GameStateError):
        return _error(str(e), 409)

    @app.errorhandler(ApiError)
    def backend_failed(e: ApiError):
        logger.error("Backend request failed: %s", e)
        return _error(e.message, 502, backendStatus=e.status_code)

    @app.errorhandler(KeyError)
    def not_found(e: KeyError):
        return _error(str(e.args[0]) if e.args else "Not found", 404)

    @app.errorhandler(ValueError)
    def bad_request(e: ValueError):
        return _error(str(e), 400)

    # ==================== API Endpoints ==================== #

    def _board_response(**extra: Any):
        body = {"success": True, "board": app_state.board.to_dict()}
        body.update(extra)
        return jsonify(body)

    def _payload() -> Dict[str, Any]:
        return request.get_json(silent=True) or {}

    @app.route("/api/board", methods=["GET"])
    def get_board():
        """Get the current board state."""
        extra = {}
        if app_state.lifecycle is not None:
            extra["gameStatus"] = app_state.lifecycle.game.status.value
        return _board_response(**extra)

    @app.route("/api/board/status", methods=["POST"])
    def set_status():
        """Change a player's roster status."""
        data = _payload()
        app_state.board.set_status(_field(data, "playerId"), _field(data, "status"))
        app_state.board_changed()
        return _board_response()

    @app.route("/api/board/assign", methods=["POST"])
    def assign_player():
        """Drop a player on a slot; out-of-position drops need ``confirm``."""
        data = _payload()
        check = app_state.board.assign_to_slot(
            _field(data, "playerId"),
            _field(data, "slotId"),
            confirm_out_of_position=_flag(data, "confirm"),
        )
        app_state.board_changed()
        return _board_response(check=check.to_dict())

    @app.route("/api/board/remove", methods=["POST"])
    def remove_player():
        """Take the player in a slot out of the squad."""
        player = app_state.board.remove_from_slot(_field(_payload(), "slotId"))
        app_state.board_changed()
        return _board_response(removed=player.id if player else None)

    @app.route("/api/board/bench", methods=["POST"])
    def bench_player():
        """Move a player to the bench."""
        app_state.board.move_to_bench(_field(_payload(), "playerId"))
        app_state.board_changed()
        return _board_response()

    @app.route("/api/board/formation", methods=["POST"])
    def change_formation():
        """Switch formation; clearing a populated board needs ``confirm``."""
        data = _payload()
        app_state.board.change_formation(_field(data, "formationType"),
                                         confirm=_flag(data, "confirm"))
        app_state.board_changed()
        return _board_response()

    @app.route("/api/board/rebuild", methods=["POST"])
    def rebuild_formation():
        """Rebuild the formation from the starting lineup, even in manual mode."""
        result = app_state.board.rebuild(force=True)
        app_state.board_changed()
        unplaced = [player.id for player in result.unplaced] if result else []
        return _board_response(unplaced=unplaced)

    @app.route("/api/board/validate", methods=["GET"])
    def validate_board():
        """Run the squad checks on the current board."""
        return jsonify({"success": True, "validation": app_state.board.validate().to_dict()})

    @app.route("/api/board/played", methods=["POST"])
    def mark_played():
        """Start the game with the current lineup."""
        if app_state.lifecycle is None:
            raise GameStateError("The board is not connected to a game")
        rosters = app_state.lifecycle.mark_played(
            confirm_bench=_flag(_payload(), "confirmBench")
        )
        return jsonify({
            "success": True,
            "gameStatus": app_state.lifecycle.game.status.value,
            "rosterCount": len(rosters),
        })

    return app


def build_app_state(game_id: str, factory: Optional[ServiceFactory] = None) -> WebAppState:
    """Load a game, its team and rosters from the backend and build the board."""
    factory = factory or ServiceFactory()
    games_api = factory.create_games_api()
    game = games_api.get_game(game_id)
    players = games_api.list_team_players(game.team_id) if game.team_id else []
    rosters = games_api.get_rosters(game_id)
    board = factory.create_lineup_board(game, players, rosters)
    lifecycle = factory.create_game_lifecycle(game, board)
    logger.info("Loaded %s with %d players", game.title, len(players))
    return WebAppState(board, lifecycle)


def run_web_app(game_id: str, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT,
                settings: Optional[Settings] = None) -> None:
    """
    Run the web application for one game.

    Args:
        game_id: Backend id of the game to edit
        host: Host address to bind to (default: localhost only)
        port: Port number to listen on
        settings: Runtime settings (read from the environment by default)
    """
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    app = create_app(build_app_state(game_id, ServiceFactory(settings)))
    app.run(host=host, port=port, debug=False)
