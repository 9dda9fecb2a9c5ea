"""
Utility functions for the Comment Connections game API.

This module provides helpers for reading request data, building JSON responses and
issuing session identifiers.

Functions:
- parse_and_validate_request(required_fields): Reads the request payload and checks required fields.
- create_response(data, error, status_code): Creates a JSON response with the provided data or error message.
- generate_session_token(): Issues an opaque, unguessable session key.
- generate_party_key(): Issues an opaque, unguessable party key.
- daily_session_key(now): The UTC calendar date used as the shared daily session key.
"""

import secrets
from datetime import datetime, timezone

from flask import jsonify, request


def parse_and_validate_request(required_fields=(), allow_empty=False):
    """
    Reads the request payload and validates the presence of required fields.

    The JSON body is merged over the query string, so GET and POST callers can supply the
    same fields either way.

    :param required_fields: Field names that must be present.
    :param allow_empty: Whether an empty payload is acceptable.
    :return: A tuple of (data, error). If successful, data contains the merged payload
             and error is None. On failure, data is None and error contains an error message.
    """
    try:
        data = dict(request.args.items())
        body = request.get_json(silent=True)
        if body is not None:
            if not isinstance(body, dict):
                raise ValueError("Request payload must be a JSON object")
            data.update(body)
        if not data and not allow_empty:
            raise ValueError("Request payload is empty")

        missing_fields = [field for field in required_fields if field not in data]
        if missing_fields:
            raise ValueError(f"Missing required fields: {', '.join(missing_fields)}")

        return data, None
    except ValueError as e:
        return None, str(e)


def create_response(data=None, error=None, status_code=200):
    """
    Creates a JSON response with the provided data or error message.

    Data fields are returned at the top level of the body; an error is returned as
    {"error": "<reason>"}.

    :param data: Dict of fields to include in the response, if any.
    :param error: The error message to include in the response, if any.
    :param status_code: The HTTP status code for the response (default: 200).
    :return: A JSON response with the provided data or error message.
    """
    response = {}
    if data is not None:
        response.update(data)
    if error is not None:
        response["error"] = error
    return jsonify(response), status_code


def generate_session_token() -> str:
    # Session tokens double as access capabilities, so they come from `secrets`.
    return secrets.token_hex(8)


def generate_party_key() -> str:
    return secrets.token_hex(16)


def daily_session_key(now: "datetime | None" = None) -> str:
    """Returns today's UTC date as YYYY-MM-DD."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).strftime("%Y-%m-%d")
