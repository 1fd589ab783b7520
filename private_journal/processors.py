"""
Pure text processing functions for the journal.

extract_searchable_text() produces the text that is embedded at write time
and re-derived from the entry file when excerpting, so it must stay
deterministic. The excerpt functions pick what to show for a hit or a
listing line.
"""

from __future__ import annotations

import re

# Header block at the very start of an entry
_FRONTMATTER_RE = re.compile(r"^---\n.*?\n---\n", re.DOTALL)
_SECTION_HEADING_RE = re.compile(r"^## .+$", re.MULTILINE)
_MULTIPLE_NEWLINES_RE = re.compile(r"\n{3,}")

EXCERPT_LENGTH = 200
EXCERPT_STEP = 20
LISTING_EXCERPT_LENGTH = 150

ELLIPSIS = "..."


def extract_searchable_text(markdown: str | None) -> str:
    """
    Extract searchable text from an entry file.

    Removes the YAML header, section headings, and collapses runs of
    blank lines.
    """
    if markdown is None:
        return ""
    text = _FRONTMATTER_RE.sub("", markdown, count=1)
    text = _SECTION_HEADING_RE.sub("", text)
    text = _MULTIPLE_NEWLINES_RE.sub("\n\n", text)
    return text.strip()


def _window_score(window: str, words: set[str]) -> int:
    return sum(1 for word in words if word in window)


def query_aware_excerpt(
    text: str,
    query: str,
    window_length: int = EXCERPT_LENGTH,
    step: int = EXCERPT_STEP,
) -> str:
    """
    Pick the window of *text* that mentions the most query words.

    Windows slide by *step*; the earliest best window wins, except that the
    window ending at the end of the text wins any tie with the running best.
    """
    if not text:
        return ""
    if len(text) <= window_length:
        return text

    words = {w for w in query.lower().split()} if query else set()
    lowered = text.lower()

    best_start = 0
    best_score = 0
    last_start = len(text) - window_length
    for start in range(0, last_start + 1, max(step, 1)):
        score = _window_score(lowered[start:start + window_length], words)
        if score > best_score:
            best_score = score
            best_start = start

    if _window_score(lowered[last_start:], words) >= best_score:
        best_start = last_start

    end = min(best_start + window_length, len(text))
    excerpt = text[best_start:end]
    if best_start > 0:
        excerpt = ELLIPSIS + excerpt
    if end < len(text):
        excerpt = excerpt + ELLIPSIS
    return excerpt.strip()


def listing_excerpt(text: str, length: int = LISTING_EXCERPT_LENGTH) -> str:
    """First *length* characters of *text*, with an ellipsis if truncated."""
    if not text:
        return ""
    if len(text) <= length:
        return text
    return text[:length] + ELLIPSIS
