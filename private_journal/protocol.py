"""
Protocol definitions for the journal and its search index.

Defines interface contracts at two levels:
- JournalProtocol: the operations the MCP server and CLI call
- VectorIndexProtocol: the in-memory search index (brute force today)
"""

from pathlib import Path
from typing import Mapping, Optional, Protocol, Sequence, runtime_checkable

from .config import JournalConfig
from .index import FilterPredicate, IndexedEntry
from .types import EntryInfo, Scope, SearchQuery, SearchResult, SectionKind


@runtime_checkable
class JournalProtocol(Protocol):
    """
    The public interface for journal operations.

    Implemented by:
    - Journal (local markdown files + in-memory index)
    """

    @property
    def config(self) -> JournalConfig: ...

    def write_thoughts(self, sections: Mapping[SectionKind, Optional[str]]) -> str: ...

    def search(self, query: SearchQuery) -> list[SearchResult]: ...

    def read_entry(self, path: str | Path) -> str: ...

    def list_recent_entries(
        self,
        limit: int = 10,
        scope: Scope = Scope.BOTH,
        days: int = 30,
    ) -> list[EntryInfo]: ...

    def rebuild_index(self) -> int: ...


@runtime_checkable
class VectorIndexProtocol(Protocol):
    """
    Vector index contract used by the query pipeline and bootstrapper.

    Implementations must make add/query/reset mutually exclusive.
    """

    def __len__(self) -> int: ...

    def add(self, vector: Sequence[float], metadata: IndexedEntry) -> None: ...

    def query(
        self,
        query_vector: Sequence[float],
        max_candidates: int,
        min_score: float = 0.0,
        predicate: Optional[FilterPredicate] = None,
    ) -> list[tuple[float, IndexedEntry]]: ...

    def reset(self) -> None: ...
