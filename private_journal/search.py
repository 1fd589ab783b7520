"""
Semantic search over the journal index.

Scope and date bounds are applied inside the index scan; section filtering
happens afterwards, so the index is asked for twice the requested limit to
absorb what the section filter drops.
"""

import logging

from .embedding import EmbeddingService
from .index import FilterPredicate, IndexedEntry
from .protocol import VectorIndexProtocol
from .types import SearchQuery, SearchResult, sections_from_labels

logger = logging.getLogger(__name__)

MIN_SCORE = 0.1

# Over-fetch factor for post-filtering by section
CANDIDATE_MULTIPLIER = 2


def build_filter(query: SearchQuery) -> FilterPredicate:
    """Predicate for scope equality and inclusive timestamp bounds."""
    scope = query.scope
    after = query.after
    before = query.before

    def predicate(entry: IndexedEntry) -> bool:
        if not scope.matches(entry.scope):
            return False
        if after is not None and entry.timestamp < after:
            return False
        if before is not None and entry.timestamp > before:
            return False
        return True

    return predicate


def matches_sections(entry: IndexedEntry, query: SearchQuery) -> bool:
    """True if no section filter, or the entry has any requested section."""
    if not query.sections:
        return True
    wanted = {kind.label for kind in query.sections}
    return not wanted.isdisjoint(entry.sections)


class QueryPipeline:
    """Embeds a query, searches the index, filters and ranks the hits."""

    def __init__(
        self,
        index: VectorIndexProtocol,
        embeddings: EmbeddingService,
        min_score: float = MIN_SCORE,
    ) -> None:
        self._index = index
        self._embeddings = embeddings
        self._min_score = min_score

    def search(self, query: SearchQuery) -> list[SearchResult]:
        """
        Search journal entries.

        Raises:
            EmbeddingError: If the query text is blank or cannot be embedded
        """
        vector = self._embeddings.embed(query.text)
        candidates = self._index.query(
            vector,
            max_candidates=query.limit * CANDIDATE_MULTIPLIER,
            min_score=self._min_score,
            predicate=build_filter(query),
        )

        results: list[SearchResult] = []
        for score, entry in candidates:
            if not matches_sections(entry, query):
                continue
            results.append(SearchResult(
                score=score,
                path=entry.path,
                timestamp=entry.timestamp,
                sections=sections_from_labels(entry.sections),
                text=entry.text,
            ))
            if len(results) >= query.limit:
                break

        logger.debug(
            "Search %r: %d candidates, %d results", query.text, len(candidates), len(results),
        )
        return results
