"""
Game logic module for the Comment Connections game API.

This module ties the generator, the session store and the progress tracker together. It
is the only place the HTTP layer calls into.

Functions:
- validate_id(session_key): Validates if a puzzle exists for a session key.
- build_puzzle(feed_url, fetch_timeout, time_limit, user_agent): Generates a puzzle from the live feed.
- start_game(generator_fn, session_key, party_key, mode): Returns (creating if needed) a session's puzzle.
- check_solution(session_key, party_key, group): Grades one submitted group for one party.
- get_solution(session_key): Returns the full answer key and colors.
"""

import logging
from collections import Counter
from functools import partial
from typing import Callable, Optional

from ..errors import SessionNotFoundError, ValidationError
from ..generation.comment_extractor import ListviewCommentExtractor
from ..generation.puzzle_generator import generate_puzzle
from ..models.models import COMMENTS_PER_ARTICLE, GuessResult, Puzzle
from ..services.feed_service import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, fetch_feed, fetch_page
from ..services.game_session_service import ProgressTracker, SessionStore
from ..services.utils import daily_session_key, generate_party_key, generate_session_token

logger = logging.getLogger(__name__)

MODE_DAILY = "daily"
MODE_TOKEN = "token"

# Progress key used when a request names no party
ANONYMOUS_PARTY = "anonymous"

session_store = SessionStore()
progress_tracker = ProgressTracker()


def validate_id(session_key: str) -> bool:
    """
    Validates if a generated puzzle exists for the session key.

    :param session_key: The session key to check.
    :return: True if the puzzle exists, False otherwise.
    """
    return session_store.contains(session_key)


def _require_str(value, name: str) -> None:
    """Rejects a key that is present but not a string (e.g. a JSON list or object)."""
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{name} must be a string.")


def build_puzzle(
    feed_url: str,
    fetch_timeout: float = DEFAULT_TIMEOUT,
    time_limit: Optional[float] = None,
    user_agent: str = DEFAULT_USER_AGENT,
) -> Puzzle:
    """
    Generates a puzzle from the live feed.

    :raises TransportError: If the feed cannot be fetched.
    :raises ParseError: If the feed cannot be parsed.
    :raises InsufficientContentError: If the feed cannot fill a puzzle.
    """
    articles = fetch_feed(feed_url, timeout=fetch_timeout, user_agent=user_agent)
    page_fetcher = partial(fetch_page, timeout=fetch_timeout, user_agent=user_agent)
    return generate_puzzle(
        articles, page_fetcher, ListviewCommentExtractor(), time_limit=time_limit
    )


def start_game(
    generator_fn: Callable[[], Puzzle],
    session_key: Optional[str] = None,
    party_key: Optional[str] = None,
    mode: str = MODE_DAILY,
) -> "tuple[str, str, Puzzle]":
    """
    Returns the puzzle for a session, generating it on first access.

    Without a session key, daily mode uses today's UTC date (one puzzle shared by every
    party that day) and token mode issues a fresh opaque key. An explicit session key must
    name an existing puzzle or today's date.

    :param generator_fn: Builds a puzzle when the session has none yet.
    :param session_key: Existing session to join, if any.
    :param party_key: Existing party key, if any; a new one is issued otherwise.
    :param mode: MODE_DAILY or MODE_TOKEN.
    :return: A tuple of (session_key, party_key, puzzle).
    :raises ValidationError: If the mode is unknown or a key is not a string.
    :raises SessionNotFoundError: If an explicit session key names no puzzle.
    """
    _require_str(session_key, "session_key")
    _require_str(party_key, "party_key")
    if mode not in (MODE_DAILY, MODE_TOKEN):
        raise ValidationError(f"Unknown mode {mode!r}; expected 'daily' or 'token'.")

    if session_key is None:
        session_key = daily_session_key() if mode == MODE_DAILY else generate_session_token()
    elif session_key != daily_session_key() and not validate_id(session_key):
        raise SessionNotFoundError(f"No game found for session key {session_key!r}.")

    puzzle = session_store.get_or_create(session_key, generator_fn)
    party_key = party_key or generate_party_key()
    logger.info("Party %s joined session %s", party_key, session_key)
    return session_key, party_key, puzzle


def _progress_key(session_key: str, party_key: Optional[str]) -> str:
    # Scoped to the session so a party key reused on another day starts fresh.
    return f"{session_key}:{party_key or ANONYMOUS_PARTY}"


def _validate_group(group, tile_count: int) -> "list[int]":
    """Checks the shape of a submitted group and returns its indices."""
    if not isinstance(group, (list, tuple)) or len(group) != COMMENTS_PER_ARTICLE:
        raise ValidationError(f"Group must contain exactly {COMMENTS_PER_ARTICLE} indices.")
    # bool is an int subclass but never a valid index
    if not all(isinstance(index, int) and not isinstance(index, bool) for index in group):
        raise ValidationError("Group indices must be integers.")
    if len(set(group)) != len(group):
        raise ValidationError("Group indices must be distinct.")
    out_of_range = [index for index in group if not 0 <= index < tile_count]
    if out_of_range:
        raise ValidationError(f"Index out of range: {out_of_range[0]}.")
    return list(group)


def check_solution(session_key: str, party_key: Optional[str], group) -> GuessResult:
    """
    Grades one submitted group for one party.

    A group is correct when all four tiles come from the same article; it is one away
    when exactly three do. Only a correct group consumes its tiles and reveals the
    article's title, link and color.

    :param session_key: The session whose puzzle is being played.
    :param party_key: The party submitting; None for the anonymous party.
    :param group: Four distinct display indices.
    :return: The GuessResult.
    :raises SessionNotFoundError: If the session key names no puzzle.
    :raises ValidationError: If a key is not a string, or the group is malformed or
                             reuses a consumed tile.
    """
    _require_str(session_key, "session_key")
    _require_str(party_key, "party_key")
    puzzle = session_store.get(session_key)
    indices = _validate_group(group, puzzle.tile_count)
    answer = puzzle.answer

    progress_key = _progress_key(session_key, party_key)
    progress = progress_tracker.get_or_create(progress_key)
    with progress.lock:
        reused = [index for index in indices if progress.is_used(index)]
        if reused:
            raise ValidationError(f"Index already used: {reused[0]}.")

        counts = Counter(answer[index] for index in indices)
        correct = len(counts) == 1
        one_away = not correct and 3 in counts.values()

        if correct:
            progress_tracker.mark_used(progress_key, indices)
        remaining = progress_tracker.remaining_count(progress_key, puzzle.tile_count)

    logger.debug(
        "check_solution session=%s party=%s group=%s correct=%s one_away=%s remaining=%d",
        session_key, party_key, indices, correct, one_away, remaining,
    )

    if not correct:
        return GuessResult(
            correct=False, finished=remaining == 0, remaining=remaining, one_away=one_away
        )

    article_index = answer[indices[0]]
    article = puzzle.articles[article_index]
    return GuessResult(
        correct=True,
        finished=remaining == 0,
        remaining=remaining,
        one_away=False,
        article_title=article.title,
        article_url=article.link,
        color=puzzle.colors[article_index],
    )


def get_solution(session_key: str) -> dict:
    """
    Returns the full answer key and difficulty colors for a session.

    :raises SessionNotFoundError: If the session key names no puzzle.
    """
    return session_store.get(session_key).to_solution()
