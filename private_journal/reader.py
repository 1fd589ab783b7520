"""
Reading entries and listing recent ones.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, Optional

from .entry_store import EntryStore
from .errors import JournalIOError, ValidationError
from .processors import LISTING_EXCERPT_LENGTH, extract_searchable_text, listing_excerpt
from .types import EntryInfo, Scope, SectionKind, datetime_to_millis

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^## (.+)$", re.MULTILINE)


def entry_sections(markdown: str) -> tuple[str, ...]:
    """Display labels of the known section headings in an entry, in order."""
    labels = []
    for match in _HEADING_RE.finditer(markdown):
        try:
            kind = SectionKind.from_label(match.group(1))
        except ValidationError:
            continue
        if kind.label not in labels:
            labels.append(kind.label)
    return tuple(labels)


class EntryReader:
    """
    Read access to entry files across journal roots.

    Args:
        roots: (directory, scope) pairs; listings pick the roots matching
            the requested scope
        entry_store: Store used to read and parse entries
        excerpt_length: Characters of cleaned text shown per listing
    """

    def __init__(
        self,
        roots: Iterable[tuple[Path, Scope]],
        entry_store: Optional[EntryStore] = None,
        excerpt_length: int = LISTING_EXCERPT_LENGTH,
    ) -> None:
        self._roots = [(Path(root), scope) for root, scope in roots]
        self._entries = entry_store or EntryStore()
        self._excerpt_length = excerpt_length

    def read_entry(self, path: str | Path) -> str:
        """
        Raw markdown of one entry.

        Raises:
            JournalIOError: If the file is missing or unreadable
        """
        return self._entries.read_entry(Path(path).expanduser())

    def list_recent_entries(
        self,
        limit: int = 10,
        scope: Scope = Scope.BOTH,
        days: int = 30,
        now: Optional[datetime] = None,
    ) -> list[EntryInfo]:
        """
        Entries from the last *days* days, newest first.

        Unreadable or malformed files are logged and skipped.

        Raises:
            ValidationError: If limit < 1 or days < 0
        """
        if limit < 1:
            raise ValidationError(f"Limit must be a positive integer, got {limit!r}")
        if days < 0:
            raise ValidationError(f"Days must not be negative, got {days!r}")

        now = now or datetime.now(timezone.utc)
        cutoff = datetime_to_millis(now - timedelta(days=days))

        entries: list[EntryInfo] = []
        for root, root_scope in self._roots:
            if not scope.matches(root_scope):
                continue
            for path in self._entries.iter_entry_paths(root):
                try:
                    info = self._entry_info(path, root_scope)
                except (JournalIOError, OSError) as e:
                    logger.warning("Skipping unreadable entry %s: %s", path, e)
                    continue
                if info.timestamp > cutoff:
                    entries.append(info)

        entries.sort(key=lambda info: info.timestamp, reverse=True)
        return entries[:limit]

    def _entry_info(self, path: Path, scope: Scope) -> EntryInfo:
        markdown = self._entries.read_entry(path)
        header = self._entries.parse_header(markdown, path)
        timestamp = header.get("timestamp")
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            # Hand-written or foreign files: fall back to modification time
            timestamp = int(path.stat().st_mtime * 1000)
        return EntryInfo(
            path=str(path.resolve()),
            timestamp=timestamp,
            scope=scope,
            sections=entry_sections(markdown),
            excerpt=listing_excerpt(extract_searchable_text(markdown), self._excerpt_length),
        )
