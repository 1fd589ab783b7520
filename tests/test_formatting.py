"""Tests for rendering search results and listings."""

from datetime import datetime

from private_journal.entry_store import EntryStore
from private_journal.formatting import (
    UNABLE_TO_LOAD,
    format_date,
    format_recent_entries,
    format_search_results,
)
from private_journal.types import EntryInfo, Scope, SearchResult, SectionKind, datetime_to_millis


def test_format_date():
    moment = datetime(2025, 1, 2, 15, 4).astimezone()
    assert format_date(moment) == "Jan 2, 2025 3:04 PM"


class TestSearchResults:

    def test_empty(self):
        assert format_search_results([], "query") == "No relevant entries found."

    def test_result_block(self, tmp_path):
        store = EntryStore()
        entry = store.create_entry({SectionKind.TECHNICAL_INSIGHTS: "Pool sizes matter a lot"})
        path = store.write_entry(tmp_path, entry)
        result = SearchResult(
            score=0.87654,
            path=str(path),
            timestamp=entry.timestamp,
            sections=(SectionKind.TECHNICAL_INSIGHTS,),
        )

        text = format_search_results([result], "pool")

        assert text.startswith("Found 1 relevant entries:")
        assert "1. [Score: 0.877]" in text
        assert "   Sections: Technical Insights" in text
        assert f"   Path: {path}" in text
        assert "   Excerpt: Pool sizes matter a lot" in text

    def test_missing_file(self, tmp_path):
        result = SearchResult(score=0.5, path=str(tmp_path / "gone.md"), timestamp=0)
        text = format_search_results([result], "anything")
        assert f"   Excerpt: {UNABLE_TO_LOAD}" in text
        assert "Sections:" not in text


class TestRecentEntries:

    def test_empty(self):
        assert format_recent_entries([], 7) == "No entries found in the last 7 days."

    def test_listing(self):
        moment = datetime(2025, 1, 2, 15, 4).astimezone()
        info = EntryInfo(
            path="/j/a.md",
            timestamp=datetime_to_millis(moment),
            scope=Scope.PROJECT,
            sections=("Project Notes",),
            excerpt="Shipped v1",
        )
        text = format_recent_entries([info], 30)
        assert text.splitlines()[:3] == [
            "Recent entries (last 30 days):",
            "",
            "1. Jan 2, 2025 3:04 PM (project)",
        ]
        assert "   Sections: Project Notes" in text
        assert "   Excerpt: Shipped v1" in text
