"""
Tests for the MCP stdio server tool functions.

The tool layer is tested in isolation with a mock Journal, checking
parameter mapping, message formatting and error strings; a few tests run
against a real Journal on a temp directory.
"""

from unittest.mock import MagicMock

import pytest

from private_journal.config import JournalConfig, SearchSettings
from private_journal.errors import EmbeddingError, IOKind, JournalIOError
from private_journal.types import EntryInfo, Scope, SearchQuery, SectionKind


@pytest.fixture
def mock_journal():
    """Mock Journal instance with default return values."""
    journal = MagicMock()
    journal.write_thoughts.return_value = "Thoughts recorded successfully."
    journal.search.return_value = []
    journal.read_entry.return_value = "# entry"
    journal.list_recent_entries.return_value = []
    journal.config.search = SearchSettings()
    return journal


@pytest.fixture(autouse=True)
def patch_journal(mock_journal):
    """Install the mock as the server's journal for every test."""
    import private_journal.mcp as mcp_mod
    mcp_mod._journal = mock_journal
    yield
    mcp_mod._journal = None


# ---------------------------------------------------------------------------
# process_thoughts
# ---------------------------------------------------------------------------

class TestProcessThoughts:

    @pytest.mark.asyncio
    async def test_maps_arguments(self, mock_journal):
        from private_journal.mcp import process_thoughts
        result = await process_thoughts(feelings="good", technical_insights="use locks")
        assert result == "Thoughts recorded successfully."
        mock_journal.write_thoughts.assert_called_once_with({
            SectionKind.FEELINGS: "good",
            SectionKind.TECHNICAL_INSIGHTS: "use locks",
        })

    @pytest.mark.asyncio
    async def test_error_message(self, mock_journal):
        from private_journal.mcp import process_thoughts
        mock_journal.write_thoughts.side_effect = JournalIOError(IOKind.PERMISSION_OR_OTHER, "disk full")
        result = await process_thoughts(feelings="x")
        assert result == "Error: Failed to write journal entry: disk full"


# ---------------------------------------------------------------------------
# search_journal
# ---------------------------------------------------------------------------

class TestSearchJournal:

    @pytest.mark.asyncio
    async def test_builds_query(self, mock_journal):
        from private_journal.mcp import search_journal
        result = await search_journal(
            "pools", limit=3, type="project",
            sections="feelings, technical_insights", after=None, before=None,
        )
        assert result == "No relevant entries found."
        query = mock_journal.search.call_args.args[0]
        assert isinstance(query, SearchQuery)
        assert query.limit == 3
        assert query.scope is Scope.PROJECT
        assert query.sections == frozenset({SectionKind.FEELINGS, SectionKind.TECHNICAL_INSIGHTS})

    @pytest.mark.asyncio
    async def test_unknown_sections_ignored(self, mock_journal):
        from private_journal.mcp import search_journal
        await search_journal("x", sections="feelings,dreams")
        query = mock_journal.search.call_args.args[0]
        assert query.sections == frozenset({SectionKind.FEELINGS})

    @pytest.mark.asyncio
    async def test_date_bounds(self, mock_journal):
        from private_journal.mcp import search_journal
        await search_journal("x", after="2025-01-01T00:00:00Z", before="2025-01-02T00:00:00Z")
        query = mock_journal.search.call_args.args[0]
        assert query.after == 1735689600000
        assert query.before == 1735776000000

    @pytest.mark.asyncio
    async def test_bad_date(self, mock_journal):
        from private_journal.mcp import search_journal
        result = await search_journal("x", after="someday")
        assert result.startswith("Error: Failed to search journal:")
        mock_journal.search.assert_not_called()

    @pytest.mark.asyncio
    async def test_embedding_error(self, mock_journal):
        from private_journal.mcp import search_journal
        mock_journal.search.side_effect = EmbeddingError("Text cannot be null or empty")
        result = await search_journal("")
        assert result == "Error: Failed to search journal: Text cannot be null or empty"


# ---------------------------------------------------------------------------
# read_journal_entry
# ---------------------------------------------------------------------------

class TestReadJournalEntry:

    @pytest.mark.asyncio
    async def test_returns_content(self, mock_journal):
        from private_journal.mcp import read_journal_entry
        assert await read_journal_entry("/j/a.md") == "# entry"
        mock_journal.read_entry.assert_called_once_with("/j/a.md")

    @pytest.mark.asyncio
    async def test_missing(self, mock_journal):
        from private_journal.mcp import read_journal_entry
        mock_journal.read_entry.side_effect = JournalIOError(IOKind.NOT_FOUND, "File not found: /j/a.md")
        result = await read_journal_entry("/j/a.md")
        assert result == "Error: Failed to read entry: File not found: /j/a.md"


# ---------------------------------------------------------------------------
# list_recent_entries
# ---------------------------------------------------------------------------

class TestListRecentEntries:

    @pytest.mark.asyncio
    async def test_empty(self, mock_journal):
        from private_journal.mcp import list_recent_entries
        result = await list_recent_entries(days=7)
        assert result == "No entries found in the last 7 days."
        mock_journal.list_recent_entries.assert_called_once_with(limit=10, scope=Scope.BOTH, days=7)

    @pytest.mark.asyncio
    async def test_invalid_type(self, mock_journal):
        from private_journal.mcp import list_recent_entries
        result = await list_recent_entries(type="team")
        assert result == "Error: Invalid journal type 'team'. Valid values are: 'user', 'project', or 'both'."
        mock_journal.list_recent_entries.assert_not_called()

    @pytest.mark.asyncio
    async def test_listing(self, mock_journal):
        from private_journal.mcp import list_recent_entries
        mock_journal.list_recent_entries.return_value = [
            EntryInfo(path="/j/a.md", timestamp=0, scope=Scope.USER, sections=("Feelings",), excerpt="hi"),
        ]
        result = await list_recent_entries(type="user")
        assert result.startswith("Recent entries (last 30 days):")
        assert "(user)" in result


# ---------------------------------------------------------------------------
# Against a real journal
# ---------------------------------------------------------------------------

class TestRoundTrip:

    @pytest.fixture
    def real_journal(self, journal):
        import private_journal.mcp as mcp_mod
        mcp_mod._journal = journal
        return journal

    @pytest.mark.asyncio
    async def test_write_then_search_and_list(self, real_journal):
        from private_journal.mcp import list_recent_entries, process_thoughts, search_journal
        assert await process_thoughts(world_knowledge="Octopuses have three hearts") == \
            "Thoughts recorded successfully."

        found = await search_journal("octopuses hearts")
        assert found.startswith("Found 1 relevant entries:")
        assert "Sections: World Knowledge" in found
        assert "Excerpt: Octopuses have three hearts" in found

        listed = await list_recent_entries()
        assert "Octopuses have three hearts" in listed

    @pytest.mark.asyncio
    async def test_nothing_to_record(self, real_journal):
        from private_journal.mcp import process_thoughts
        assert await process_thoughts(feelings="   ") == "No thoughts to record (all sections were empty)."
