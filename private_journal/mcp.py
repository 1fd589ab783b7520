"""
MCP stdio server for the private journal: a place for an AI agent to
record and search its own thoughts.

Usage:
    private-journal mcp                                       # stdio server (via CLI)
    claude mcp add private-journal -- private-journal mcp     # Claude Code integration

All Journal calls are serialized through a single asyncio.Lock.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Annotated, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from .api import Journal
from .errors import JournalError, ValidationError
from .formatting import format_recent_entries, format_search_results
from .protocol import JournalProtocol
from .types import Scope, SearchQuery, SectionKind, parse_date_bound

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Server setup
# ---------------------------------------------------------------------------

mcp = FastMCP(
    "private-journal",
    instructions=(
        "Your private journal for learning and reflection. "
        "Record feelings, project notes, user context, technical insights "
        "and world knowledge. Search past entries by meaning."
    ),
)

_journal: Optional[JournalProtocol] = None
_lock = asyncio.Lock()


def _get_journal() -> JournalProtocol:
    """Lazy-init Journal with default config (respects PRIVATE_JOURNAL_PATH env).

    Must be called inside ``async with _lock``; the caller holding the lock
    keeps two tools from racing to create the global.
    """
    global _journal
    if _journal is None:
        journal_path = os.environ.get("PRIVATE_JOURNAL_PATH")
        _journal = Journal(Path(journal_path) if journal_path else None)
    return _journal


def _parse_sections(sections: Optional[str]) -> frozenset[SectionKind]:
    """Comma-separated section keys; unknown keys are dropped with a warning."""
    if not sections or not sections.strip():
        return frozenset()
    result = set()
    for key in sections.split(","):
        if not key.strip():
            continue
        try:
            result.add(SectionKind.from_key(key))
        except ValidationError:
            logger.warning("Ignoring unknown section: %s", key.strip())
    return frozenset(result)


# ---------------------------------------------------------------------------
# Tool annotations
# ---------------------------------------------------------------------------

_READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False)
_APPEND_ONLY = ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=False)


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@mcp.tool(
    description=(
        "Your PRIVATE JOURNAL for learning and reflection. Record thoughts across different categories: "
        "feelings (emotional states), project_notes (project-specific work), user_context "
        "(user preferences/info), technical_insights (learnings), world_knowledge (facts). "
        "All entries are private and searchable."
    ),
    annotations=_APPEND_ONLY,
)
async def process_thoughts(
    feelings: Annotated[Optional[str], Field(
        description="Your feelings and emotional state",
    )] = None,
    project_notes: Annotated[Optional[str], Field(
        description="Project-specific notes and progress",
    )] = None,
    user_context: Annotated[Optional[str], Field(
        description="User context, preferences, and information",
    )] = None,
    technical_insights: Annotated[Optional[str], Field(
        description="Technical insights and learnings",
    )] = None,
    world_knowledge: Annotated[Optional[str], Field(
        description="World knowledge and facts",
    )] = None,
) -> str:
    """Record thoughts."""
    thoughts = {
        SectionKind.FEELINGS: feelings,
        SectionKind.PROJECT_NOTES: project_notes,
        SectionKind.USER_CONTEXT: user_context,
        SectionKind.TECHNICAL_INSIGHTS: technical_insights,
        SectionKind.WORLD_KNOWLEDGE: world_knowledge,
    }
    thoughts = {kind: text for kind, text in thoughts.items() if text is not None}

    async with _lock:
        try:
            return _get_journal().write_thoughts(thoughts)
        except JournalError as e:
            logger.error("Failed to write journal entry: %s", e)
            return f"Error: Failed to write journal entry: {e}"


@mcp.tool(
    description=(
        "Search through your private journal entries using natural language queries. "
        "Uses semantic search to find relevant entries based on meaning. "
        "Filter by type (project/user/both), sections, date range, and limit results."
    ),
    annotations=_READ_ONLY,
)
async def search_journal(
    query: Annotated[str, Field(
        description="Natural language search query",
    )],
    limit: Annotated[int, Field(
        description="Maximum number of results to return",
    )] = 10,
    type: Annotated[str, Field(
        description="Type of entries to search: 'project', 'user', or 'both'",
    )] = "both",
    sections: Annotated[Optional[str], Field(
        description="Comma-separated list of sections to search in (e.g. 'feelings,technical_insights')",
    )] = None,
    after: Annotated[Optional[str], Field(
        description="Filter entries after this date (ISO-8601 format, e.g. '2025-01-01')",
    )] = None,
    before: Annotated[Optional[str], Field(
        description="Filter entries before this date (ISO-8601 format, e.g. '2025-12-31')",
    )] = None,
) -> str:
    """Search the journal."""
    async with _lock:
        try:
            search_query = SearchQuery(
                text=query,
                limit=limit,
                scope=Scope.parse(type or "both"),
                sections=_parse_sections(sections),
                after=parse_date_bound(after),
                before=parse_date_bound(before, end_of_day=True),
            )
            journal = _get_journal()
            results = journal.search(search_query)
            settings = journal.config.search
            return format_search_results(
                results, query,
                excerpt_length=settings.excerpt_length,
                excerpt_step=settings.excerpt_step,
            )
        except JournalError as e:
            logger.error("Error searching journal: %s", e)
            return f"Error: Failed to search journal: {e}"


@mcp.tool(
    description=(
        "Read the full content of a specific journal entry by file path. "
        "Use the path from search results or recent entries list."
    ),
    annotations=_READ_ONLY,
)
async def read_journal_entry(
    path: Annotated[str, Field(description="File path to the journal entry")],
) -> str:
    """Read one entry."""
    async with _lock:
        try:
            return _get_journal().read_entry(path)
        except JournalError as e:
            logger.error("Failed to read entry %s: %s", path, e)
            return f"Error: Failed to read entry: {e}"


@mcp.tool(
    description=(
        "Get recent journal entries in chronological order. "
        "Filter by type (project/user/both) and specify how many days to look back."
    ),
    annotations=_READ_ONLY,
)
async def list_recent_entries(
    limit: Annotated[int, Field(
        description="Maximum number of entries to return",
    )] = 10,
    type: Annotated[str, Field(
        description="Type of entries to list: 'project', 'user', or 'both'",
    )] = "both",
    days: Annotated[int, Field(
        description="Number of days to look back",
    )] = 30,
) -> str:
    """List recent entries."""
    try:
        scope = Scope.parse(type or "both")
    except ValidationError:
        return f"Error: Invalid journal type '{type}'. Valid values are: 'user', 'project', or 'both'."

    async with _lock:
        try:
            entries = _get_journal().list_recent_entries(limit=limit, scope=scope, days=days)
        except JournalError as e:
            logger.error("Error listing recent entries: %s", e)
            return f"Error: Failed to list recent entries: {e}"
    return format_recent_entries(entries, days)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    """Run the MCP stdio server."""
    import signal
    # anyio's stdin reader shields the blocking readline from cancellation,
    # so the first Ctrl+C would not stop the server without this handler.
    signal.signal(signal.SIGINT, lambda *_: os._exit(130))

    async def _warm_up():
        async with _lock:
            _get_journal()

    # Build the index before the first request arrives
    asyncio.run(_warm_up())
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
