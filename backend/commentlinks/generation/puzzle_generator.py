"""
Puzzle Generator: turns a list of feed articles into a playable puzzle.

Pipeline:

  Step 1: Visit the candidate articles in random order.
  Step 2: Fetch each page and extract its comments; fetch or parse failures skip the
          candidate without retrying.
  Step 3: Keep the first four articles with at least four comments. Fewer than four
          aborts the whole generation: a partial puzzle is never produced.
  Step 4: Pick four comments per article at random, record how many quotation spans
          each raw body carried, and strip the quotations for display.
  Step 5: Flatten the 4x4 tiles and shuffle them once. That order is the permanent
          display order and defines the answer key.
  Step 6: Rank the four articles by difficulty.

Usage:
    from commentlinks.generation.puzzle_generator import generate_puzzle

    puzzle = generate_puzzle(articles, fetch_page, ListviewCommentExtractor())
    # Raises InsufficientContentError when the feed cannot fill a puzzle.

Randomness comes from random.Random and has no security requirement; pass a seeded
instance for reproducible puzzles.
"""

import logging
import random
import time
from typing import Callable, List, Optional

from ..errors import InsufficientContentError, ParseError, TransportError
from ..game.quotes import count_quoted_spans, strip_quoted_spans
from ..models.models import (
    ARTICLES_PER_PUZZLE,
    COMMENTS_PER_ARTICLE,
    Article,
    Comment,
    Puzzle,
    Tile,
)
from .comment_extractor import CommentExtractor
from .difficulty import rank_difficulty

logger = logging.getLogger(__name__)


def find_qualifying_articles(
    articles: List[Article],
    fetch_page: Callable[[str], bytes],
    extractor: CommentExtractor,
    rng: random.Random,
    deadline: Optional[float] = None,
    clock: Callable[[], float] = time.monotonic,
) -> "list[tuple[Article, list[Comment]]]":
    """
    Steps 1-3: collects up to four (article, comments) pairs with enough comments.

    :param deadline: Clock value after which no further page is fetched.
    :return: The qualifying pairs in the order they were found (may be fewer than four).
    """
    qualified = []
    order = list(range(len(articles)))
    rng.shuffle(order)

    for position in order:
        if deadline is not None and clock() >= deadline:
            logger.warning(
                "Generation deadline reached after %d qualifying article(s)", len(qualified)
            )
            break

        article = articles[position]
        try:
            page = fetch_page(article.link)
        except TransportError as e:
            logger.warning("Skipping %s: %s", article.link, e)
            continue

        try:
            comments = extractor.extract(page)
        except ParseError as e:
            logger.info("Skipping %s: %s", article.link, e)
            continue

        if comments is None:
            logger.debug("Skipping %s: no comment payload", article.link)
            continue
        if len(comments) < COMMENTS_PER_ARTICLE:
            logger.debug("Skipping %s: only %d comment(s)", article.link, len(comments))
            continue

        qualified.append((article, comments))
        if len(qualified) == ARTICLES_PER_PUZZLE:
            break

    return qualified


def _select_tiles(
    qualified: "list[tuple[Article, list[Comment]]]", rng: random.Random
) -> "list[Tile]":
    """Step 4: four random comments per article, normalized and tagged."""
    tiles = []
    for article_index, (_, comments) in enumerate(qualified):
        picks = list(comments)
        rng.shuffle(picks)
        for comment in picks[:COMMENTS_PER_ARTICLE]:
            tiles.append(
                Tile(
                    comment=Comment(body=strip_quoted_spans(comment.body), user=comment.user),
                    article_index=article_index,
                    quote_count=count_quoted_spans(comment.body),
                )
            )
    return tiles


def generate_puzzle(
    articles: List[Article],
    fetch_page: Callable[[str], bytes],
    extractor: CommentExtractor,
    rng: Optional[random.Random] = None,
    time_limit: Optional[float] = None,
    clock: Callable[[], float] = time.monotonic,
) -> Puzzle:
    """
    Builds a puzzle from the candidate articles.

    :param articles: Candidate articles from the feed.
    :param fetch_page: Returns raw page content for a link; raises TransportError on failure.
    :param extractor: Pulls comments out of a fetched page.
    :param rng: Source of randomness (a fresh random.Random when omitted).
    :param time_limit: Seconds the whole generation may spend fetching pages.
    :param clock: Monotonic clock used for the time limit.
    :return: A Puzzle with 4 articles and 16 shuffled tiles.
    :raises InsufficientContentError: If fewer than four articles qualify.
    """
    rng = rng or random.Random()
    deadline = clock() + time_limit if time_limit is not None else None

    qualified = find_qualifying_articles(articles, fetch_page, extractor, rng, deadline, clock)
    if len(qualified) < ARTICLES_PER_PUZZLE:
        logger.error(
            "generate_puzzle: only %d of %d candidate(s) qualified: aborting",
            len(qualified),
            len(articles),
        )
        raise InsufficientContentError(
            f"Not enough articles with at least {COMMENTS_PER_ARTICLE} comments "
            f"({len(qualified)} of {ARTICLES_PER_PUZZLE} found)"
        )

    tiles = _select_tiles(qualified, rng)
    rng.shuffle(tiles)
    colors = rank_difficulty(tiles)

    puzzle = Puzzle(
        articles=tuple(article for article, _ in qualified),
        tiles=tuple(tiles),
        colors=tuple(colors),
    )
    logger.info("Generated puzzle from %d articles", len(puzzle.articles))
    for article_index in range(ARTICLES_PER_PUZZLE):
        positions = [i for i, value in enumerate(puzzle.answer) if value == article_index]
        logger.debug(
            "  Group %d (%s): tiles %s", article_index + 1, colors[article_index], positions
        )
    return puzzle
