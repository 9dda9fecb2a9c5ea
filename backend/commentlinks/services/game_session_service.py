"""
Game Session Service for the Comment Connections game.

Holds generated puzzles and per-party progress in process memory. Both maps are shared
by every Flask request thread, so each is guarded by a lock.

SessionStore
    One puzzle per session key (a calendar date or an opaque token). Generation is
    single-flight: the first caller for a key installs a Future under the map lock,
    releases the lock, then generates; concurrent callers for the same key wait on that
    Future instead of generating again. A failed generation is dropped from the map so a
    later request can try afresh.

ProgressTracker
    One PartyProgress per party key, created lazily. Progress is never shared between
    parties, so many parties can solve the same daily puzzle at once.

Entries live for the lifetime of the process; there is no eviction.

Public API:
    SessionStore.get_or_create(key, generator_fn)         → Puzzle
    SessionStore.get(key)                                 → Puzzle
    SessionStore.contains(key)                            → bool
    ProgressTracker.get_or_create(party_key)              → PartyProgress
    ProgressTracker.mark_used(party_key, indices)         → None
    ProgressTracker.remaining_count(party_key, total)     → int
"""

import logging
import threading
from concurrent.futures import Future
from typing import Callable, Dict

from ..errors import SessionNotFoundError
from ..models.models import PartyProgress, Puzzle

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[str, Future] = {}

    def get_or_create(self, key: str, generator_fn: Callable[[], Puzzle]) -> Puzzle:
        """
        Returns the puzzle for `key`, generating it on first access.

        At most one generation runs per key. Callers that arrive while it runs block until
        it finishes and receive the same puzzle, or the same exception if it failed.

        :param key: The session key.
        :param generator_fn: Builds a new Puzzle; only called by the first caller.
        :return: The stored Puzzle.
        """
        with self._lock:
            future = self._entries.get(key)
            is_owner = future is None
            if is_owner:
                future = Future()
                self._entries[key] = future

        if not is_owner:
            return future.result()

        logger.info("Generating puzzle for session %s", key)
        try:
            puzzle = generator_fn()
        except BaseException as e:
            with self._lock:
                del self._entries[key]
            future.set_exception(e)
            logger.warning("Puzzle generation for session %s failed: %s", key, e)
            raise

        future.set_result(puzzle)
        logger.info("Stored puzzle for session %s", key)
        return puzzle

    def get(self, key: str) -> Puzzle:
        """
        Returns the finished puzzle for `key`.

        :raises SessionNotFoundError: If no puzzle has been generated for the key, or its
                                      generation has not finished yet.
        """
        with self._lock:
            future = self._entries.get(key)
        if future is None or not future.done() or future.exception() is not None:
            raise SessionNotFoundError(f"No game found for session key {key!r}.")
        return future.result()

    def contains(self, key: str) -> bool:
        try:
            self.get(key)
        except SessionNotFoundError:
            return False
        return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class ProgressTracker:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._parties: Dict[str, PartyProgress] = {}

    def get_or_create(self, party_key: str) -> PartyProgress:
        """Returns the party's progress, creating an empty one on first use."""
        with self._lock:
            progress = self._parties.get(party_key)
            if progress is None:
                progress = PartyProgress()
                self._parties[party_key] = progress
                logger.debug("Created progress for party %s", party_key)
            return progress

    def mark_used(self, party_key: str, indices) -> None:
        progress = self.get_or_create(party_key)
        with progress.lock:
            progress.mark_used(indices)

    def remaining_count(self, party_key: str, total_tiles: int) -> int:
        """Number of the puzzle's `total_tiles` tiles the party has not grouped yet."""
        progress = self.get_or_create(party_key)
        with progress.lock:
            used = sum(1 for index in progress.used if 0 <= index < total_tiles)
        return total_tiles - used

    def clear(self) -> None:
        with self._lock:
            self._parties.clear()
