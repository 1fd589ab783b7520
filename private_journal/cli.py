"""
CLI interface for the private journal.

Usage:
    private-journal mcp
    private-journal write --feelings "..." --technical-insights "..."
    private-journal search "query text"
    private-journal read /path/to/entry.md
    private-journal recent --days 7
"""

import atexit
import os
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from .api import Journal
from .errors import JournalError
from .formatting import format_recent_entries, format_search_results
from .logging_config import configure_quiet_mode, enable_debug_mode
from .protocol import JournalProtocol
from .types import Scope, SearchQuery, SectionKind, parse_date_bound, parse_section_keys

# Configure quiet mode by default (suppress verbose library output)
# Set PRIVATE_JOURNAL_VERBOSE=1 to enable debug mode via environment
if os.environ.get("PRIVATE_JOURNAL_VERBOSE") == "1":
    enable_debug_mode()
else:
    configure_quiet_mode(quiet=True)


def _verbose_callback(value: bool):
    if value:
        enable_debug_mode()


# Global state for CLI options
_path_override: Optional[Path] = None


def _path_callback(value: Optional[Path]):
    global _path_override
    if value is not None:
        _path_override = value
    return value


app = typer.Typer(
    name="private-journal",
    help="Private journal with semantic search.",
    no_args_is_help=True,
    rich_markup_mode=None,
)


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option(
        "--verbose", "-v",
        help="Enable debug-level logging to stderr",
        callback=_verbose_callback,
        is_eager=True,
    )] = False,
    path: Annotated[Optional[Path], typer.Option(
        "--path", "-p",
        envvar="PRIVATE_JOURNAL_PATH",
        help="Journal directory (default: ~/.private-journal/)",
        callback=_path_callback,
        is_eager=True,
    )] = None,
):
    """Private journal with semantic search."""


# -----------------------------------------------------------------------------
# Common Options
# -----------------------------------------------------------------------------

LimitOption = Annotated[
    int,
    typer.Option(
        "--limit", "-n",
        help="Maximum results to return",
    )
]

TypeOption = Annotated[
    str,
    typer.Option(
        "--type", "-t",
        help="Which entries: 'user', 'project', or 'both'",
    )
]


def _get_journal() -> JournalProtocol:
    """Open the journal, exiting cleanly on configuration errors."""
    try:
        journal = Journal(_path_override)
    except (JournalError, OSError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    atexit.register(journal.close)
    return journal


def _parse_scope(value: str) -> Scope:
    try:
        return Scope.parse(value)
    except JournalError:
        typer.echo(
            f"Error: Invalid journal type '{value}'. Valid values are: 'user', 'project', or 'both'.",
            err=True,
        )
        raise typer.Exit(1)


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------

@app.command()
def write(
    feelings: Annotated[Optional[str], typer.Option(
        "--feelings", help="Feelings and emotional state",
    )] = None,
    project_notes: Annotated[Optional[str], typer.Option(
        "--project-notes", help="Project-specific notes and progress",
    )] = None,
    user_context: Annotated[Optional[str], typer.Option(
        "--user-context", help="User context, preferences, and information",
    )] = None,
    technical_insights: Annotated[Optional[str], typer.Option(
        "--technical-insights", help="Technical insights and learnings",
    )] = None,
    world_knowledge: Annotated[Optional[str], typer.Option(
        "--world-knowledge", help="World knowledge and facts",
    )] = None,
):
    """Record a journal entry."""
    thoughts = {
        SectionKind.FEELINGS: feelings,
        SectionKind.PROJECT_NOTES: project_notes,
        SectionKind.USER_CONTEXT: user_context,
        SectionKind.TECHNICAL_INSIGHTS: technical_insights,
        SectionKind.WORLD_KNOWLEDGE: world_knowledge,
    }
    thoughts = {kind: text for kind, text in thoughts.items() if text is not None}

    journal = _get_journal()
    try:
        message = journal.write_thoughts(thoughts)
    except JournalError as e:
        typer.echo(f"Error: Failed to write journal entry: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(message)


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="Natural language search query")],
    limit: LimitOption = 10,
    type: TypeOption = "both",
    sections: Annotated[Optional[str], typer.Option(
        "--sections", "-S",
        help="Comma-separated section keys (e.g. feelings,technical_insights)",
    )] = None,
    after: Annotated[Optional[str], typer.Option(
        "--after", help="Only entries on or after this date (2025-01-01)",
    )] = None,
    before: Annotated[Optional[str], typer.Option(
        "--before", help="Only entries on or before this date (2025-12-31)",
    )] = None,
):
    """Search journal entries by meaning."""
    try:
        search_query = SearchQuery(
            text=query,
            limit=limit,
            scope=_parse_scope(type),
            sections=frozenset(parse_section_keys(sections)),
            after=parse_date_bound(after),
            before=parse_date_bound(before, end_of_day=True),
        )
    except JournalError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    journal = _get_journal()
    try:
        results = journal.search(search_query)
    except JournalError as e:
        typer.echo(f"Error: Failed to search journal: {e}", err=True)
        raise typer.Exit(1)
    settings = journal.config.search
    typer.echo(format_search_results(
        results, query,
        excerpt_length=settings.excerpt_length,
        excerpt_step=settings.excerpt_step,
    ))


@app.command()
def read(
    path: Annotated[str, typer.Argument(help="Path to the entry file")],
):
    """Print a journal entry."""
    journal = _get_journal()
    try:
        typer.echo(journal.read_entry(path))
    except JournalError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def recent(
    limit: LimitOption = 10,
    type: TypeOption = "both",
    days: Annotated[int, typer.Option(
        "--days", "-d", help="Number of days to look back",
    )] = 30,
):
    """List recent journal entries, newest first."""
    scope = _parse_scope(type)
    journal = _get_journal()
    try:
        entries = journal.list_recent_entries(limit=limit, scope=scope, days=days)
    except JournalError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(format_recent_entries(entries, days))


@app.command()
def reindex():
    """Rebuild the search index from embedding files and report its size."""
    journal = _get_journal()
    try:
        count = journal.rebuild_index()
    except JournalError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Indexed {count} entries.")


@app.command()
def mcp():
    """Start MCP stdio server for AI agent integration."""
    if _path_override is not None:
        os.environ["PRIVATE_JOURNAL_PATH"] = str(_path_override)
    from .mcp import main as mcp_main
    mcp_main()


# -----------------------------------------------------------------------------

def main():
    try:
        app()
    except SystemExit:
        raise  # Let typer handle exit codes
    except KeyboardInterrupt:
        raise SystemExit(130)  # Standard exit code for Ctrl+C
    except Exception as e:
        # Log full traceback to file, show clean message to user
        from .errors import log_exception
        log_path = log_exception(e, context="private-journal CLI")
        typer.echo(f"Error: {e}", err=True)
        typer.echo(f"Details logged to {log_path}", err=True)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
