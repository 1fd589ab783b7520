"""
In-memory vector index for journal search.

Brute-force cosine similarity over every stored vector. At journal scale
(thousands of entries) a linear scan is fast enough; VectorIndexProtocol
leaves room for an indexed structure later.

All operations hold one lock, so a query never sees a half-added entry.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

import numpy as np

from .types import Scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexedEntry:
    """Metadata stored alongside each vector."""
    path: str
    timestamp: int
    sections: tuple[str, ...] = ()
    scope: Scope = Scope.USER
    text: str = ""


FilterPredicate = Callable[[IndexedEntry], bool]


@dataclass
class _Slot:
    vector: np.ndarray
    norm: float
    entry: IndexedEntry = field(compare=False)


class SearchIndex:
    """
    Append-only in-memory vector store.

    Example:
        index = SearchIndex()
        index.add(vector, IndexedEntry(path="/j/2025-01-01/10-00-00-000001.md", timestamp=ts))
        hits = index.query(query_vector, max_candidates=10, min_score=0.1)
    """

    def __init__(self) -> None:
        self._slots: list[_Slot] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)

    def add(self, vector: Sequence[float], metadata: IndexedEntry) -> None:
        """Append a vector. Re-adding a path creates a second entry."""
        arr = np.asarray(vector, dtype=np.float32).ravel()
        slot = _Slot(vector=arr, norm=float(np.linalg.norm(arr)), entry=metadata)
        with self._lock:
            self._slots.append(slot)

    def query(
        self,
        query_vector: Sequence[float],
        max_candidates: int,
        min_score: float = 0.0,
        predicate: Optional[FilterPredicate] = None,
    ) -> list[tuple[float, IndexedEntry]]:
        """
        Rank stored entries by cosine similarity to *query_vector*.

        Args:
            query_vector: Embedding of the query
            max_candidates: Maximum number of results
            min_score: Results scoring below this are dropped
            predicate: Entries failing this are skipped before scoring

        Returns:
            (score, metadata) pairs, highest score first; equal scores
            keep insertion order
        """
        if max_candidates <= 0:
            return []
        query = np.asarray(query_vector, dtype=np.float32).ravel()
        query_norm = float(np.linalg.norm(query))

        scored: list[tuple[float, IndexedEntry]] = []
        with self._lock:
            for slot in self._slots:
                if predicate is not None and not predicate(slot.entry):
                    continue
                if slot.vector.size != query.size:
                    logger.debug(
                        "Skipping %s: dimension %d != %d",
                        slot.entry.path, slot.vector.size, query.size,
                    )
                    continue
                if slot.norm == 0.0 or query_norm == 0.0:
                    score = 0.0
                else:
                    score = float(np.dot(slot.vector, query) / (slot.norm * query_norm))
                if score >= min_score:
                    scored.append((score, slot.entry))

        # sort is stable: ties stay in insertion order
        scored.sort(key=lambda item: item[0], reverse=True)
        return scored[:max_candidates]

    def reset(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._slots = []
