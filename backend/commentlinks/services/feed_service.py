"""
Feed and page fetching for puzzle generation.

These are the network collaborators of the generator: fetch_feed() lists candidate
articles from the RSS feed and fetch_page() downloads one article page so its comments
can be extracted. Both translate requests/feedparser failures into the game's own
TransportError and ParseError so callers never depend on the HTTP library.

Public API:
    fetch_feed(feed_url, timeout, user_agent)  → list[Article]
    fetch_page(link, timeout, user_agent)      → bytes
"""

import logging

import feedparser
import requests

from ..errors import ParseError, TransportError
from ..models.models import Article

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "comment-connections/1.0"


def _get(url: str, timeout: float, user_agent: str) -> bytes:
    """GETs a URL and returns the raw body, raising TransportError on any failure."""
    try:
        response = requests.get(url, timeout=timeout, headers={"User-Agent": user_agent})
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise TransportError(f"Failed to fetch {url}: {e}") from e
    return response.content


def _parse_entry(entry) -> "Article | None":
    """
    Turns one feedparser entry into an Article, or None if it has no link.

    Fields are taken as feedparser returns them; `summary` is its sanitized HTML.
    """
    link = entry.get("link")
    if not link:
        return None
    categories = tuple(tag["term"] for tag in entry.get("tags", []) if tag.get("term"))
    return Article(
        title=entry.get("title", ""),
        link=link,
        description=entry.get("summary", ""),
        pub_date=entry.get("published", ""),
        categories=categories,
    )


def parse_feed(content: bytes) -> "list[Article]":
    """
    Parses raw RSS bytes into articles, in feed order.

    :raises ParseError: If the document is malformed and yields no entries.
    """
    feed = feedparser.parse(content)
    if feed.bozo and not feed.entries:
        raise ParseError(f"Malformed feed: {feed.get('bozo_exception')}")

    articles = []
    for entry in feed.entries:
        article = _parse_entry(entry)
        if article is None:
            logger.debug("Skipping feed entry without a link: %s", entry.get("title"))
            continue
        articles.append(article)
    return articles


def fetch_feed(
    feed_url: str, timeout: float = DEFAULT_TIMEOUT, user_agent: str = DEFAULT_USER_AGENT
) -> "list[Article]":
    """
    Fetches the RSS feed and returns its articles.

    :raises TransportError: If the feed cannot be downloaded.
    :raises ParseError: If the feed cannot be parsed.
    """
    content = _get(feed_url, timeout, user_agent)
    articles = parse_feed(content)
    logger.info("Fetched %d candidate articles from %s", len(articles), feed_url)
    return articles


def fetch_page(
    link: str, timeout: float = DEFAULT_TIMEOUT, user_agent: str = DEFAULT_USER_AGENT
) -> bytes:
    """
    Downloads one article page.

    :raises TransportError: If the page cannot be downloaded.
    """
    return _get(link, timeout, user_agent)
