"""
Exceptions raised by the Comment Connections game.

Generation failures:
- TransportError: A feed or page could not be fetched.
- ParseError: A feed or embedded comment payload could not be parsed.
- InsufficientContentError: Fewer than four articles had enough comments.

Play failures:
- ValidationError: A submitted group was rejected before any state changed.
- SessionNotFoundError: The session key does not name a generated puzzle.
"""


class GenerationError(Exception):
    """Base class for failures while building a puzzle."""
    pass


class TransportError(GenerationError):
    """Raised when the feed or an article page cannot be fetched."""
    pass


class ParseError(GenerationError):
    """Raised when the feed or a comment payload is malformed."""
    pass


class InsufficientContentError(GenerationError):
    """Raised when fewer than four qualifying articles were found."""
    pass


class ValidationError(Exception):
    """Raised when a guess is rejected; the message names the reason."""
    pass


class SessionNotFoundError(ValidationError):
    """Raised when no puzzle exists for the requested session key."""
    pass
