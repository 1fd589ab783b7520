"""
Private journal with semantic search.

Entries are markdown files; each has a JSON embedding file beside it.
An in-memory index built from those files answers similarity queries.
"""

from .api import Journal
from .errors import EmbeddingError, IOKind, JournalError, JournalIOError, ValidationError
from .types import EntryInfo, Scope, SearchQuery, SearchResult, SectionKind

__version__ = "0.1.0"

__all__ = [
    "Journal",
    "EntryInfo",
    "Scope",
    "SearchQuery",
    "SearchResult",
    "SectionKind",
    "JournalError",
    "JournalIOError",
    "IOKind",
    "EmbeddingError",
    "ValidationError",
]
