"""Tests for rebuilding the index from sidecar files."""

from private_journal.api import Journal
from private_journal.bootstrap import IndexBootstrapper
from private_journal.config import JournalConfig
from private_journal.index import IndexedEntry, SearchIndex
from private_journal.protocol import JournalProtocol
from private_journal.sidecar_store import SidecarStore
from private_journal.types import EmbeddingRecord, Scope, SearchQuery, SectionKind


def _save(root, name, embedding, timestamp=1000):
    store = SidecarStore()
    store.save(root / "2025-01-01" / f"{name}.index", EmbeddingRecord(
        embedding=embedding,
        text=name,
        sections=["Feelings"],
        timestamp=timestamp,
        path=str(root / "2025-01-01" / f"{name}.md"),
    ))


def test_loads_every_root_with_scope(tmp_path):
    user_root = tmp_path / "user"
    project_root = tmp_path / "project"
    _save(user_root, "u1", [1.0, 0.0])
    _save(user_root, "u2", [0.0, 1.0])
    _save(project_root, "p1", [1.0, 1.0])

    index = IndexBootstrapper([(user_root, Scope.USER), (project_root, Scope.PROJECT)]).bootstrap()

    assert len(index) == 3
    hits = index.query([1.0, 1.0], max_candidates=1)
    assert hits[0][1].scope is Scope.PROJECT
    assert hits[0][1].text == "p1"


def test_missing_root_and_bad_files(tmp_path):
    root = tmp_path / "user"
    _save(root, "good", [1.0, 0.0])
    (root / "2025-01-01" / "bad.index").write_text("not json")

    index = IndexBootstrapper([(root, Scope.USER), (tmp_path / "missing", Scope.PROJECT)]).bootstrap()
    assert len(index) == 1


def test_bootstrap_resets_given_index(tmp_path):
    root = tmp_path / "user"
    _save(root, "only", [1.0])
    index = SearchIndex()
    index.add([1.0], IndexedEntry(path="/stale.md", timestamp=0))

    IndexBootstrapper([(root, Scope.USER)]).bootstrap(index)
    assert len(index) == 1
    assert index.query([1.0], max_candidates=5)[0][1].path != "/stale.md"


def test_entries_searchable_after_restart(journal_dir, mock_embedding_provider):
    first = Journal(config=JournalConfig(path=journal_dir), embedding_provider=mock_embedding_provider)
    first.write_thoughts({SectionKind.TECHNICAL_INSIGHTS: "Rust borrow checker rules"})
    first.close()

    second = Journal(config=JournalConfig(path=journal_dir), embedding_provider=mock_embedding_provider)
    try:
        assert len(second.index) == 1
        results = second.search(SearchQuery("borrow checker"))
        assert len(results) == 1
        assert results[0].sections == (SectionKind.TECHNICAL_INSIGHTS,)
    finally:
        second.close()


def test_rebuild_index(journal):
    journal.write_thoughts({SectionKind.FEELINGS: "content"})
    assert journal.rebuild_index() == 1


def test_journal_satisfies_protocol(journal):
    assert isinstance(journal, JournalProtocol)
