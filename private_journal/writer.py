"""
Recording thoughts.

The entry file is written first and is the durable record. The sidecar and
the live index entry are derived from it afterwards; if that step fails the
entry stays on disk without a sidecar (readable and listable, but not
searchable) and the failure is reported to the caller. There is no rollback.
"""

import logging
from pathlib import Path
from typing import Mapping, Optional

from .embedding import EmbeddingService
from .entry_store import EntryStore
from .errors import JournalError
from .index import IndexedEntry
from .processors import extract_searchable_text
from .protocol import VectorIndexProtocol
from .sidecar_store import SidecarStore
from .types import EmbeddingRecord, Scope, SectionKind

logger = logging.getLogger(__name__)

NOTHING_TO_RECORD = "No thoughts to record (all sections were empty)."
RECORDED = "Thoughts recorded successfully."


class WriteCoordinator:
    """Creates entries and keeps the sidecar and live index in step."""

    def __init__(
        self,
        user_root: Path,
        entry_store: EntryStore,
        sidecar_store: SidecarStore,
        embeddings: EmbeddingService,
        index: VectorIndexProtocol,
    ) -> None:
        self._user_root = Path(user_root)
        self._entries = entry_store
        self._sidecars = sidecar_store
        self._embeddings = embeddings
        self._index = index

    def write_thoughts(self, sections: Mapping[SectionKind, Optional[str]]) -> str:
        """
        Record thoughts as a new journal entry.

        Args:
            sections: Text per section; None or blank values are dropped

        Returns:
            Status message

        Raises:
            JournalIOError: If the entry or sidecar cannot be written
            EmbeddingError: If the entry text cannot be embedded
        """
        non_empty = {
            kind: text for kind, text in sections.items()
            if text is not None and text.strip()
        }
        if not non_empty:
            return NOTHING_TO_RECORD

        entry = self._entries.create_entry(non_empty)
        entry_path = self._entries.write_entry(self._user_root, entry)

        try:
            self._derive(entry_path, [kind.label for kind in entry.sections], entry.timestamp)
        except JournalError:
            logger.error("Entry %s written but not indexed; it will not appear in search", entry_path)
            raise

        return RECORDED

    def _derive(self, entry_path: Path, labels: list[str], timestamp: int) -> None:
        # Re-read so the embedded text matches what readers extract later
        markdown = self._entries.read_entry(entry_path)
        cleaned = extract_searchable_text(markdown)
        if not cleaned:
            logger.warning("No text to embed after cleaning %s, skipping embedding", entry_path)
            return

        vector = self._embeddings.embed(cleaned)
        absolute = str(entry_path.resolve())
        record = EmbeddingRecord(
            embedding=vector,
            text=cleaned,
            sections=labels,
            timestamp=timestamp,
            path=absolute,
        )
        self._sidecars.save(self._sidecars.sidecar_path_for(entry_path), record)
        self._index.add(vector, IndexedEntry(
            path=absolute,
            timestamp=timestamp,
            sections=tuple(labels),
            scope=Scope.USER,
            text=cleaned,
        ))
