"""
Comment extraction from article pages.

Article pages do not expose comments through an API; they embed them in the page as a
JavaScript payload. How that payload is found depends on the site template, so the
generator talks to a CommentExtractor and never parses pages itself. Tests supply their
own extractors with synthetic fixtures.

Classes:
- CommentExtractor: Interface for pulling comments out of a raw page.
- ListviewCommentExtractor: Reads the `new Listview({"id":"posts", ...})` payload.
"""

import json
import logging
import re
from abc import ABC, abstractmethod
from typing import List, Optional

from ..errors import ParseError
from ..models.models import Comment

logger = logging.getLogger(__name__)


class CommentExtractor(ABC):
    """Pulls the comments out of one raw article page."""

    @abstractmethod
    def extract(self, page: bytes) -> Optional[List[Comment]]:
        """
        :param page: Raw page content as returned by the page fetcher.
        :return: The page's comments (possibly empty), or None if the page carries no
                 comment payload at all.
        :raises ParseError: If a payload is present but malformed.
        """
        raise NotImplementedError


class ListviewCommentExtractor(CommentExtractor):
    """
    Extracts the comment list embedded as `new Listview({"id":"posts", ..., "data":[...]})`.

    The object literal is decoded with a JSON decoder starting at its opening brace, so
    comment bodies containing `})` do not cut the payload short.
    """

    MARKER = re.compile(r'new Listview\((?=\{\s*"id"\s*:\s*"posts")')

    def extract(self, page: bytes) -> Optional[List[Comment]]:
        text = page.decode("utf-8", errors="replace") if isinstance(page, bytes) else page
        match = self.MARKER.search(text)
        if match is None:
            return None

        try:
            payload, _ = json.JSONDecoder().raw_decode(text, match.end())
        except json.JSONDecodeError as e:
            raise ParseError(f"Malformed Listview payload: {e}") from e

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, list):
            raise ParseError("Listview payload has no 'data' list")

        comments = []
        for entry in data:
            if not isinstance(entry, dict) or not isinstance(entry.get("body"), str):
                logger.debug("Skipping Listview entry without a text body")
                continue
            comments.append(Comment(body=entry["body"], user=str(entry.get("user") or "")))
        return comments
