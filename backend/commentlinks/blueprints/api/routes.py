"""
This module, 'routes.py', serves as the core interface for the Comment Connections game API, defining and managing all the necessary API endpoints for game interaction.

Detailed Endpoint Descriptions:
- GET/POST /start-game: Returns the puzzle for a session, generating it on first access, and issues a party key.
- POST /check-solution: Grades a group of four tile indices for one party.
- GET /get-solution: Reveals the full answer key and colors (debug surface, disabled by default).

Associated Functions:
- start_game_route(): Builds or joins a session and returns its public puzzle state.
- check_solution_route(): Validates a submitted group and returns the grading result.
- get_solution_route(): Returns the answer key for a session.
"""

import logging
from functools import partial

from flask import Blueprint, current_app, request

from ...errors import (
    InsufficientContentError,
    ParseError,
    SessionNotFoundError,
    TransportError,
    ValidationError,
)
from ...game.game import MODE_DAILY, build_puzzle, check_solution, get_solution, start_game
from ...services.utils import create_response, parse_and_validate_request

logger = logging.getLogger(__name__)

api_bp = Blueprint("connections", __name__)


def _puzzle_generator():
    """Binds build_puzzle to the app's feed settings."""
    config = current_app.config
    return partial(
        build_puzzle,
        feed_url=config["FEED_URL"],
        fetch_timeout=config["FETCH_TIMEOUT"],
        time_limit=config["GENERATION_DEADLINE"],
        user_agent=config["USER_AGENT"],
    )


@api_bp.route("/start-game", methods=["GET", "POST"])
def start_game_route():
    """
    Returns the puzzle for a session along with a party key for tracking progress.

    Optional fields (query string or JSON body): session_key, party_key, mode ("daily" or
    "token"). Tiles are returned without their article index.
    """
    data, error = parse_and_validate_request(allow_empty=True)
    if error:
        return create_response(error=error, status_code=400)

    try:
        session_key, party_key, puzzle = start_game(
            _puzzle_generator(),
            session_key=data.get("session_key") or None,
            party_key=data.get("party_key") or None,
            mode=data.get("mode") or MODE_DAILY,
        )
    except SessionNotFoundError as e:
        return create_response(error=str(e), status_code=404)
    except ValidationError as e:
        return create_response(error=str(e), status_code=400)
    except InsufficientContentError as e:
        logger.error("start-game failed: %s", e)
        return create_response(error=f"Failed to prepare game: {e}", status_code=503)
    except (TransportError, ParseError) as e:
        logger.error("start-game could not read the feed: %s", e)
        return create_response(error=f"Failed to fetch feed: {e}", status_code=502)

    state = {"session_key": session_key, "party_key": party_key}
    state.update(puzzle.to_public_state())
    return create_response(data=state)


@api_bp.route("/check-solution", methods=["POST"])
def check_solution_route():
    """
    Receives a group of four tile indices and grades it for the requesting party.

    :return: A JSON response with correct, finished, remaining and one_away; the article
             title, url and color are included only for a correct group.
    """
    required_fields = ["session_key", "group"]
    data, error = parse_and_validate_request(required_fields)
    if error:
        return create_response(error=error, status_code=400)

    try:
        result = check_solution(data["session_key"], data.get("party_key") or None, data["group"])
    except SessionNotFoundError as e:
        return create_response(error=str(e), status_code=404)
    except ValidationError as e:
        return create_response(error=str(e), status_code=400)

    return create_response(data=result.to_state())


@api_bp.route("/get-solution", methods=["GET"])
def get_solution_route():
    """
    Returns the full answer key for a session. Only served when SOLUTION_ENDPOINT_ENABLED
    is set; normal play clients never see it.
    """
    if not current_app.config.get("SOLUTION_ENDPOINT_ENABLED"):
        return create_response(error="Not Found", status_code=404)

    session_key = request.args.get("session_key")
    if not session_key:
        return create_response(error="Missing required fields: session_key", status_code=400)

    try:
        solution = get_solution(session_key)
    except SessionNotFoundError as e:
        return create_response(error=str(e), status_code=404)

    return create_response(data=solution)
