"""
Startup rebuild of the search index from sidecar files.

This is the only way search state survives a restart: every ``.index`` file
under each journal root is loaded into a fresh in-memory index.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from .index import IndexedEntry, SearchIndex
from .protocol import VectorIndexProtocol
from .sidecar_store import SidecarStore
from .types import Scope

logger = logging.getLogger(__name__)


class IndexBootstrapper:
    """
    Loads sidecars into a SearchIndex.

    Args:
        roots: (directory, scope) pairs to scan
        sidecar_store: Store used to scan and parse sidecars
    """

    def __init__(
        self,
        roots: Iterable[tuple[Path, Scope]],
        sidecar_store: Optional[SidecarStore] = None,
    ) -> None:
        self._roots = [(Path(root), scope) for root, scope in roots]
        self._sidecars = sidecar_store or SidecarStore()

    def bootstrap(self, index: Optional[VectorIndexProtocol] = None) -> VectorIndexProtocol:
        """
        Build (or reset and refill) an index from every configured root.

        Never raises for bad files or unreadable roots; those are logged.
        """
        if index is None:
            index = SearchIndex()
        else:
            index.reset()

        for root, scope in self._roots:
            try:
                count = self.load_root(index, root, scope)
            except OSError as e:
                logger.error("Failed to load embeddings from %s: %s", root, e)
                continue
            logger.info("Loaded %d %s embeddings from %s", count, scope.value, root)
        return index

    def load_root(self, index: VectorIndexProtocol, root: Path, scope: Scope) -> int:
        """Add every parseable sidecar under *root*. Returns the count added."""
        count = 0
        for record in self._sidecars.scan(root):
            try:
                index.add(record.embedding, IndexedEntry(
                    path=record.path,
                    timestamp=record.timestamp,
                    sections=tuple(record.sections),
                    scope=scope,
                    text=record.text,
                ))
            except (ValueError, TypeError) as e:
                logger.warning("Failed to add embedding for %s to index: %s", record.path, e)
                continue
            count += 1
        return count
