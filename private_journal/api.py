"""
Core API for the private journal.

Journal wires the stores, the embedding service and one in-memory search
index together:
- write_thoughts(): write entry file -> embed -> sidecar -> live index
- search(): embed query -> filtered index scan
- read_entry() / list_recent_entries(): plain file access

The index is rebuilt from sidecar files when the Journal is created.
"""

import logging
from pathlib import Path
from typing import Mapping, Optional

from .bootstrap import IndexBootstrapper
from .config import JournalConfig, load_or_create_config
from .embedding import EmbeddingService
from .entry_store import EntryStore
from .index import SearchIndex
from .providers import get_registry
from .providers.base import EmbeddingProvider
from .reader import EntryReader
from .search import QueryPipeline
from .sidecar_store import SidecarStore
from .types import EntryInfo, Scope, SearchQuery, SearchResult, SectionKind
from .writer import WriteCoordinator

logger = logging.getLogger(__name__)


class Journal:
    """
    Private journal with semantic search.

    Example:
        journal = Journal()
        journal.write_thoughts({SectionKind.TECHNICAL_INSIGHTS: "Pool sizes matter"})
        results = journal.search(SearchQuery("connection pooling"))
    """

    def __init__(
        self,
        journal_path: Optional[str | Path] = None,
        *,
        config: Optional[JournalConfig] = None,
        embedding_provider: Optional[EmbeddingProvider] = None,
        index: Optional[SearchIndex] = None,
        bootstrap: bool = True,
    ) -> None:
        """
        Open (or create) a journal.

        Args:
            journal_path: Journal base directory. Uses PRIVATE_JOURNAL_PATH
                or ~/.private-journal if not specified.
            config: Pre-loaded JournalConfig (skips filesystem config discovery).
            embedding_provider: Injected provider (skips registry creation).
            index: Injected index; it is reset and refilled when bootstrapping.
            bootstrap: Load existing sidecars into the index now.
        """
        self._config = config if config is not None else load_or_create_config(journal_path)

        from .logging_config import configure_ops_log
        self._ops_log_handler = configure_ops_log(self._config.user_journal_path)

        self._entry_store = EntryStore()
        self._sidecar_store = SidecarStore()

        if embedding_provider is not None:
            self._embeddings = EmbeddingService(embedding_provider)
        else:
            # Lazy: loading the model is slow and reads never need it
            self._embeddings = EmbeddingService(factory=self._create_embedding_provider)

        roots = self._config.roots()
        self._bootstrapper = IndexBootstrapper(roots, self._sidecar_store)
        self._index = index if index is not None else SearchIndex()
        if bootstrap:
            logger.info("Initializing journal search index...")
            self._bootstrapper.bootstrap(self._index)

        settings = self._config.search
        self._pipeline = QueryPipeline(self._index, self._embeddings, min_score=settings.min_score)
        self._writer = WriteCoordinator(
            self._config.user_journal_path,
            self._entry_store,
            self._sidecar_store,
            self._embeddings,
            self._index,
        )
        self._reader = EntryReader(
            roots,
            self._entry_store,
            excerpt_length=settings.listing_excerpt_length,
        )

    def _create_embedding_provider(self) -> EmbeddingProvider:
        registry = get_registry()
        return registry.create_embedding(
            self._config.embedding.name,
            self._config.embedding.params,
        )

    @property
    def config(self) -> JournalConfig:
        return self._config

    @property
    def index(self) -> SearchIndex:
        return self._index

    # -- Write operations --

    def write_thoughts(self, sections: Mapping[SectionKind, Optional[str]]) -> str:
        """Record thoughts as a new entry. See WriteCoordinator.write_thoughts."""
        return self._writer.write_thoughts(sections)

    # -- Query operations --

    def search(self, query: SearchQuery) -> list[SearchResult]:
        """Semantic search. See QueryPipeline.search."""
        return self._pipeline.search(query)

    def read_entry(self, path: str | Path) -> str:
        return self._reader.read_entry(path)

    def list_recent_entries(
        self,
        limit: int = 10,
        scope: Scope = Scope.BOTH,
        days: int = 30,
    ) -> list[EntryInfo]:
        return self._reader.list_recent_entries(limit=limit, scope=scope, days=days)

    # -- Maintenance --

    def rebuild_index(self) -> int:
        """Reload the index from sidecar files. Returns the entry count."""
        self._bootstrapper.bootstrap(self._index)
        return len(self._index)

    def close(self) -> None:
        """Detach the operations log handler."""
        if self._ops_log_handler is not None:
            logging.getLogger("private_journal").removeHandler(self._ops_log_handler)
            self._ops_log_handler.close()
            self._ops_log_handler = None
