"""
Tests for game_session_service.py.

Coverage:
  - SessionStore.get_or_create  → generates once, reuses result, single-flight under
                                  concurrent first access, failures reach every waiter
                                  and are retried
  - SessionStore.get            → found / not found
  - ProgressTracker             → lazy creation, monotonic marking, remaining count,
                                  parties are independent
"""

import threading
import unittest

from commentlinks.errors import InsufficientContentError, SessionNotFoundError
from commentlinks.models.models import Article, Comment, Puzzle, Tile
from commentlinks.services.game_session_service import ProgressTracker, SessionStore

SESSION_KEY = "2025-10-14"


def _puzzle(title_prefix="Article"):
    articles = tuple(Article(title=f"{title_prefix} {i}", link=f"L{i}") for i in range(4))
    tiles = tuple(Tile(Comment(f"C{i + 1}", f"U{i + 1}"), i // 4) for i in range(16))
    return Puzzle(articles=articles, tiles=tiles, colors=("yellow", "green", "blue", "purple"))


# ---------------------------------------------------------------------------
# SessionStore
# ---------------------------------------------------------------------------

class TestSessionStore(unittest.TestCase):

    def setUp(self):
        self.store = SessionStore()

    def test_generates_on_first_access(self):
        puzzle = _puzzle()
        calls = []

        def generator():
            calls.append(1)
            return puzzle

        self.assertIs(self.store.get_or_create(SESSION_KEY, generator), puzzle)
        self.assertIs(self.store.get_or_create(SESSION_KEY, generator), puzzle)
        self.assertEqual(len(calls), 1)

    def test_get_returns_stored_puzzle(self):
        puzzle = _puzzle()
        self.store.get_or_create(SESSION_KEY, lambda: puzzle)

        self.assertIs(self.store.get(SESSION_KEY), puzzle)
        self.assertTrue(self.store.contains(SESSION_KEY))

    def test_get_unknown_key_raises(self):
        with self.assertRaises(SessionNotFoundError):
            self.store.get("missing")
        self.assertFalse(self.store.contains("missing"))

    def test_keys_are_independent(self):
        first, second = _puzzle("First"), _puzzle("Second")
        self.store.get_or_create("a", lambda: first)
        self.store.get_or_create("b", lambda: second)

        self.assertIs(self.store.get("a"), first)
        self.assertIs(self.store.get("b"), second)

    def test_concurrent_first_access_generates_once(self):
        """Racing first requests for one key must all receive the winner's puzzle."""
        started = threading.Event()
        release = threading.Event()
        calls = []
        results = []

        def generator():
            calls.append(1)
            started.set()
            release.wait(5)
            return _puzzle(f"Gen {len(calls)}")

        def worker():
            results.append(self.store.get_or_create(SESSION_KEY, generator))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        threads[0].start()
        self.assertTrue(started.wait(5))
        for thread in threads[1:]:
            thread.start()
        release.set()
        for thread in threads:
            thread.join(5)

        self.assertEqual(len(calls), 1)
        self.assertEqual(len(results), 8)
        self.assertTrue(all(result is results[0] for result in results))

    def test_concurrent_failed_generation_reaches_every_waiter(self):
        started = threading.Event()
        release = threading.Event()
        errors = []
        results = []

        def failing():
            started.set()
            release.wait(5)
            raise InsufficientContentError("not enough articles")

        def worker():
            try:
                results.append(self.store.get_or_create(SESSION_KEY, failing))
            except InsufficientContentError as e:
                errors.append(e)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        threads[0].start()
        self.assertTrue(started.wait(5))
        for thread in threads[1:]:
            thread.start()
        release.set()
        for thread in threads:
            thread.join(5)

        self.assertEqual(results, [])
        self.assertEqual(len(errors), 4)
        self.assertFalse(self.store.contains(SESSION_KEY))

    def test_get_while_generating_raises_not_found(self):
        started = threading.Event()
        release = threading.Event()

        def generator():
            started.set()
            release.wait(5)
            return _puzzle()

        thread = threading.Thread(target=self.store.get_or_create, args=(SESSION_KEY, generator))
        thread.start()
        try:
            self.assertTrue(started.wait(5))
            with self.assertRaises(SessionNotFoundError):
                self.store.get(SESSION_KEY)
        finally:
            release.set()
            thread.join(5)
        self.assertTrue(self.store.contains(SESSION_KEY))

    def test_failed_generation_is_not_stored(self):
        def failing():
            raise InsufficientContentError("not enough articles")

        with self.assertRaises(InsufficientContentError):
            self.store.get_or_create(SESSION_KEY, failing)
        self.assertFalse(self.store.contains(SESSION_KEY))

        puzzle = _puzzle()
        self.assertIs(self.store.get_or_create(SESSION_KEY, lambda: puzzle), puzzle)


# ---------------------------------------------------------------------------
# ProgressTracker
# ---------------------------------------------------------------------------

class TestProgressTracker(unittest.TestCase):

    def setUp(self):
        self.tracker = ProgressTracker()

    def test_lazily_creates_empty_progress(self):
        progress = self.tracker.get_or_create("party")

        self.assertEqual(progress.used, set())
        self.assertIs(self.tracker.get_or_create("party"), progress)

    def test_mark_used_and_remaining(self):
        self.assertEqual(self.tracker.remaining_count("party", 16), 16)

        self.tracker.mark_used("party", [0, 1, 2, 3])
        self.assertEqual(self.tracker.remaining_count("party", 16), 12)

        self.tracker.mark_used("party", [3, 4])
        self.assertEqual(self.tracker.remaining_count("party", 16), 11)
        self.assertEqual(self.tracker.get_or_create("party").used, {0, 1, 2, 3, 4})

    def test_parties_are_independent(self):
        self.tracker.mark_used("alice", [0, 1, 2, 3])

        self.assertEqual(self.tracker.remaining_count("alice", 16), 12)
        self.assertEqual(self.tracker.remaining_count("bob", 16), 16)


if __name__ == "__main__":
    unittest.main()
