"""
This module defines the in-memory models for the Comment Connections game. A puzzle is
built from four feed articles and sixteen of their comments; the models below carry that
data from the generator to the session store and out to the API.

Classes:
- Article: A feed item whose comments make up one hidden category.
- Comment: A single user comment (body and author handle).
- Tile: A comment at a fixed display position, tagged with its source article.
- Puzzle: The immutable state shared by every party playing one session key.
- PartyProgress: The display indices one party has already grouped correctly.
- GuessResult: The outcome of one submitted group.

Constants:
- DIFFICULTY_COLORS: The four difficulty tiers, easiest first.
"""

import threading
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

# Canonical difficulty order, easiest to hardest.
DIFFICULTY_COLORS = ("yellow", "green", "blue", "purple")

ARTICLES_PER_PUZZLE = 4
COMMENTS_PER_ARTICLE = 4
TILES_PER_PUZZLE = ARTICLES_PER_PUZZLE * COMMENTS_PER_ARTICLE


@dataclass(frozen=True)
class Article:
    """
    A candidate article taken verbatim from the news feed.

    Attributes:
        title (str): Headline of the article.
        link (str): URL of the article page, which embeds its comments.
        description (str): Feed summary of the article.
        pub_date (str): Publish timestamp exactly as the feed states it.
        categories (tuple): Category tags attached by the feed.
    """

    title: str
    link: str
    description: str = ""
    pub_date: str = ""
    categories: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "link": self.link,
            "description": self.description,
            "pub_date": self.pub_date,
            "categories": list(self.categories),
        }


@dataclass(frozen=True)
class Comment:
    body: str
    user: str = ""

    def to_dict(self) -> dict:
        return {"body": self.body, "user": self.user}


@dataclass(frozen=True)
class Tile:
    """
    One displayed comment unit.

    Attributes:
        comment (Comment): The comment, with its body already normalized.
        article_index (int): Index (0-3) of the article the comment belongs to.
        quote_count (int): Quotation spans the raw body carried before normalization.
    """

    comment: Comment
    article_index: int
    quote_count: int = 0


@dataclass(frozen=True)
class Puzzle:
    """
    A generated puzzle. Tiles are stored in their permanent display order, so the
    answer key is simply each tile's article index read position by position.

    Attributes:
        articles (tuple): The four source articles.
        tiles (tuple): The sixteen tiles in display order.
        colors (tuple): Difficulty tier for each article index.
    """

    articles: Tuple[Article, ...]
    tiles: Tuple[Tile, ...]
    colors: Tuple[str, ...]

    @property
    def answer(self) -> List[int]:
        """Display index -> article index."""
        return [tile.article_index for tile in self.tiles]

    @property
    def tile_count(self) -> int:
        return len(self.tiles)

    def to_public_state(self) -> dict:
        """
        The client-facing view of the puzzle. Tiles carry only their comment and
        display index, never the article they came from.
        """
        return {
            "articles": [article.to_dict() for article in self.articles],
            "tiles": [
                {"comment": tile.comment.to_dict(), "index": index}
                for index, tile in enumerate(self.tiles)
            ],
        }

    def to_solution(self) -> dict:
        return {"solution": self.answer, "colors": list(self.colors)}

    def __repr__(self):
        return "<Puzzle %r>" % [article.title for article in self.articles]


@dataclass
class PartyProgress:
    """
    The display indices one party has grouped correctly. Indices are only ever added.
    Callers hold `lock` while checking and marking so a check-then-mark sequence is atomic.
    The lock is re-entrant so tracker helpers can be called while it is held.
    """

    used: set = field(default_factory=set)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def mark_used(self, indices) -> None:
        self.used.update(indices)

    def is_used(self, index: int) -> bool:
        return index in self.used


@dataclass(frozen=True)
class GuessResult:
    correct: bool
    finished: bool
    remaining: int
    one_away: bool
    article_title: Optional[str] = None
    article_url: Optional[str] = None
    color: Optional[str] = None

    def to_state(self) -> dict:
        """Serializes the result, omitting article details unless the guess was correct."""
        state = {
            "correct": self.correct,
            "finished": self.finished,
            "remaining": self.remaining,
            "one_away": self.one_away,
        }
        if self.correct:
            state.update(
                {
                    "article_title": self.article_title,
                    "article_url": self.article_url,
                    "color": self.color,
                }
            )
        return state
