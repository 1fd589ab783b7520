"""
Embedding sidecar storage.

Each entry file ``X.md`` may have a sibling ``X.index`` holding its
embedding as JSON. The set of sidecars on disk is the only durable record
of what is searchable; the in-memory index is rebuilt from it at startup.
"""

import json
import logging
from pathlib import Path
from typing import Iterator

from .errors import IOKind, JournalIOError
from .types import EmbeddingRecord

logger = logging.getLogger(__name__)

SIDECAR_SUFFIX = ".index"


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def record_from_dict(data, path: Path) -> EmbeddingRecord:
    """Validate decoded sidecar JSON."""
    def malformed(reason: str) -> JournalIOError:
        return JournalIOError(IOKind.MALFORMED, f"Malformed embedding file {path}: {reason}", path)

    if not isinstance(data, dict):
        raise malformed("not an object")
    missing = [k for k in ("embedding", "text", "sections", "timestamp", "path") if k not in data]
    if missing:
        raise malformed(f"missing {', '.join(missing)}")

    embedding = data["embedding"]
    if not isinstance(embedding, list) or not embedding or not all(_is_number(v) for v in embedding):
        raise malformed("embedding must be a non-empty list of numbers")
    if not isinstance(data["text"], str):
        raise malformed("text must be a string")
    sections = data["sections"]
    if not isinstance(sections, list) or not all(isinstance(s, str) for s in sections):
        raise malformed("sections must be a list of strings")
    if not _is_number(data["timestamp"]):
        raise malformed("timestamp must be a number")
    if not isinstance(data["path"], str) or not data["path"]:
        raise malformed("path must be a non-empty string")

    return EmbeddingRecord(
        embedding=[float(v) for v in embedding],
        text=data["text"],
        sections=list(sections),
        timestamp=int(data["timestamp"]),
        path=data["path"],
    )


class SidecarStore:
    """Reads, writes and scans ``.index`` embedding files."""

    def sidecar_path_for(self, entry_path: Path) -> Path:
        """The sidecar path for an entry: same directory and stem."""
        entry_path = Path(entry_path)
        return entry_path.with_name(entry_path.stem + SIDECAR_SUFFIX)

    def save(self, path: Path, record: EmbeddingRecord) -> None:
        """
        Write a sidecar file, creating its directory.

        Raises:
            JournalIOError: If the file cannot be written
        """
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(record.to_dict()), encoding="utf-8")
        except OSError as e:
            raise JournalIOError.from_os_error(e, path, "write") from e
        logger.debug("Saved embedding to %s", path)

    def load(self, path: Path) -> EmbeddingRecord:
        """
        Read one sidecar file.

        Raises:
            JournalIOError: NOT_FOUND if absent, MALFORMED if unparseable
        """
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise JournalIOError(IOKind.MALFORMED, f"Embedding file is not valid UTF-8: {path}", path) from e
        except OSError as e:
            raise JournalIOError.from_os_error(e, path, "read") from e
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise JournalIOError(IOKind.MALFORMED, f"Malformed embedding file {path}: {e}", path) from e
        return record_from_dict(data, path)

    def scan(self, root: Path) -> Iterator[EmbeddingRecord]:
        """
        Yield every parseable sidecar under *root*.

        Unreadable or malformed files are logged and skipped. An absent root
        yields nothing.
        """
        root = Path(root)
        if not root.is_dir():
            return
        for path in sorted(root.rglob(f"*{SIDECAR_SUFFIX}")):
            if not path.is_file():
                continue
            try:
                yield self.load(path)
            except JournalIOError as e:
                logger.warning("Skipping malformed embedding file %s: %s", path, e)
