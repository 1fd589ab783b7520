"""
Text rendering of search results and entry listings.

Used by the MCP tools and the CLI. Search excerpts are taken from the entry
file as it is now, cleaned the same way as at write time.
"""

from datetime import datetime
from typing import Sequence

from .entry_store import EntryStore
from .errors import JournalIOError
from .processors import EXCERPT_LENGTH, EXCERPT_STEP, extract_searchable_text, query_aware_excerpt
from .types import EntryInfo, SearchResult

UNABLE_TO_LOAD = "[Unable to load]"


def format_date(moment: datetime) -> str:
    """Local time like ``Jan 2, 2025 3:04 PM``."""
    local = moment.astimezone()
    hour = local.hour % 12 or 12
    return f"{local:%b} {local.day}, {local.year} {hour}:{local:%M} {local:%p}"


def format_search_results(
    results: Sequence[SearchResult],
    query: str,
    excerpt_length: int = EXCERPT_LENGTH,
    excerpt_step: int = EXCERPT_STEP,
    entry_store: EntryStore | None = None,
) -> str:
    """Numbered result blocks with score, date, sections, path and excerpt."""
    if not results:
        return "No relevant entries found."

    store = entry_store or EntryStore()
    lines = [f"Found {len(results)} relevant entries:", ""]
    for i, result in enumerate(results, start=1):
        lines.append(f"{i}. [Score: {result.score:.3f}] {format_date(result.date)}")
        if result.sections:
            lines.append(f"   Sections: {', '.join(kind.label for kind in result.sections)}")
        lines.append(f"   Path: {result.path}")
        try:
            cleaned = extract_searchable_text(store.read_entry(result.path))
            excerpt = query_aware_excerpt(cleaned, query, excerpt_length, excerpt_step)
        except JournalIOError:
            excerpt = UNABLE_TO_LOAD
        lines.append(f"   Excerpt: {excerpt}")
        lines.append("")
    return "\n".join(lines)


def format_recent_entries(entries: Sequence[EntryInfo], days: int) -> str:
    """Numbered listing of recent entries."""
    if not entries:
        return f"No entries found in the last {days} days."

    lines = [f"Recent entries (last {days} days):", ""]
    for i, entry in enumerate(entries, start=1):
        lines.append(f"{i}. {format_date(entry.date)} ({entry.scope.value})")
        if entry.sections:
            lines.append(f"   Sections: {', '.join(entry.sections)}")
        lines.append(f"   Path: {entry.path}")
        lines.append(f"   Excerpt: {entry.excerpt}")
        lines.append("")
    return "\n".join(lines)
