"""
Configuration for the Comment Connections game API.

Values come from the environment; a `backend/.env` file is loaded first when present
(use .env.example as a template). Every setting has a default so the app runs locally
without any environment at all.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        raise RuntimeError(f"{name} must be a number of seconds, got {value!r}")


class Config:
    """Settings read once at import time. create_app() copies them into app.config."""

    # RSS feed listing the candidate articles
    FEED_URL = os.getenv("FEED_URL", "https://www.wowhead.com/news/rss/all")
    # Seconds allowed for each feed or page request
    FETCH_TIMEOUT = _get_float("FETCH_TIMEOUT", 10.0)
    # Seconds allowed for a whole puzzle generation
    GENERATION_DEADLINE = _get_float("GENERATION_DEADLINE", 60.0)
    USER_AGENT = os.getenv("USER_AGENT", "comment-connections/1.0")
    # The full answer reveal is a debug surface; keep it off for normal play
    SOLUTION_ENDPOINT_ENABLED = _get_bool("SOLUTION_ENDPOINT_ENABLED", False)
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
