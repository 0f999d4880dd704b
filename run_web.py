#!/usr/bin/env python3
"""
Main entry point for the Matchday lineup board web application.

This script launches the Flask-based web server for one game.

Usage:
    python run_web.py <game-id> [--host HOST] [--port PORT]
"""
import argparse

from matchday.ui.web_app import run_web_app
from matchday.utils.constants import DEFAULT_HOST, DEFAULT_PORT


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve the lineup board for one game.")
    parser.add_argument("game_id", help="Backend id of the game")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args()
    run_web_app(args.game_id, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
