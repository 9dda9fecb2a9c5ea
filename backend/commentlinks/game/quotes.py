"""
Quotation markup handling for comment bodies.

Comments quote each other with `[quote]...[/quote]` or `[quote=author]...[/quote]`
blocks, and quotes may nest. A quoted block is removed as one unit: from the earliest
opening marker through the *last* closing marker after it, so an outer quote swallows
everything nested inside it.

Functions:
- strip_quoted_spans(text): Removes quoted blocks and blank lines from a comment body.
- count_quoted_spans(text): Counts the blocks strip_quoted_spans would remove.
"""

OPEN_MARKERS = ("[quote]", "[quote=")
CLOSE_MARKER = "[/quote]"


def _next_open(text: str) -> int:
    """Returns the position of the earliest opening marker, or -1 if there is none."""
    positions = [text.find(marker) for marker in OPEN_MARKERS]
    positions = [pos for pos in positions if pos != -1]
    return min(positions) if positions else -1


def _remove_spans(text: str) -> "tuple[str, int]":
    """
    Removes quoted blocks one at a time until no opening marker remains.

    An opening marker with no closing marker after it ends the scan; the unterminated
    remainder is left as it is.

    :param text: The comment body.
    :return: A tuple of (text with blocks removed, number of blocks removed).
    """
    removed = 0
    while True:
        start = _next_open(text)
        if start == -1:
            break
        end = text.rfind(CLOSE_MARKER, start)
        if end == -1:
            break
        text = text[:start] + text[end + len(CLOSE_MARKER):]
        removed += 1
    return text, removed


def strip_quoted_spans(text: str) -> str:
    """
    Removes quoted blocks (nested ones included) from a comment body, then drops
    whitespace-only lines.

    :param text: The raw comment body.
    :return: The body with quotations and blank lines removed.
    """
    stripped, _ = _remove_spans(text)
    lines = [line for line in stripped.split("\n") if line.strip()]
    return "\n".join(lines)


def count_quoted_spans(text: str) -> int:
    """Returns how many quoted blocks strip_quoted_spans removes from `text`."""
    _, removed = _remove_spans(text)
    return removed
