"""
Difficulty ranking for the four article groups.

Comments that quote other comments lose that context once quotations are stripped for
display, which makes their group harder to recognise. Each article is therefore ranked by
how many quotation spans its four comments carried *before* normalization: the least
quoted group is yellow (easiest) and the most quoted is purple (hardest).
"""

import logging

from ..models.models import ARTICLES_PER_PUZZLE, DIFFICULTY_COLORS

logger = logging.getLogger(__name__)


def quote_totals(tiles, article_count: int = ARTICLES_PER_PUZZLE) -> "list[int]":
    """Sums the pre-normalization quote counts of each article's tiles."""
    totals = [0] * article_count
    for tile in tiles:
        totals[tile.article_index] += tile.quote_count
    return totals


def rank_difficulty(tiles, article_count: int = ARTICLES_PER_PUZZLE) -> "list[str]":
    """
    Assigns one difficulty color per article index.

    Articles are sorted by ascending quote total; ties keep article index order. Rank 0
    maps to the first color in DIFFICULTY_COLORS, rank 3 to the last.

    :param tiles: The puzzle's tiles, in any order.
    :param article_count: Number of articles in the puzzle.
    :return: List where position i holds the color of article i.
    """
    totals = quote_totals(tiles, article_count)
    ranked = sorted(range(article_count), key=lambda index: totals[index])

    colors = [""] * article_count
    for rank, article_index in enumerate(ranked):
        colors[article_index] = DIFFICULTY_COLORS[rank]

    logger.debug("Quote totals %s ranked as %s", totals, colors)
    return colors
