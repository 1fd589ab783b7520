"""
Entry file storage.

Entries are markdown files with a YAML header, bucketed by local date:

    <root>/2025-01-02/15-04-05-678123.md

The six-digit suffix is the sub-second millisecond remainder times 1000
plus a random 0-999 tie-breaker, so writes within the same second get
distinct names.
"""

import logging
import random
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Mapping, Optional

import yaml

from .errors import IOKind, JournalIOError
from .types import JournalEntry, SectionKind, datetime_to_millis, iso_instant, millis_to_datetime

logger = logging.getLogger(__name__)

ENTRY_SUFFIX = ".md"

_HEADER_RE = re.compile(r"^---\n(.*?)\n---\n", re.DOTALL)

# Tie-breaker values per millisecond
_DISAMBIGUATOR_RANGE = 1000


def format_title(moment: datetime) -> str:
    """Local-time title, e.g. ``3:04:05 PM - January 2, 2025``."""
    local = moment.astimezone()
    hour = local.hour % 12 or 12
    return f"{hour}:{local:%M:%S} {local:%p} - {local:%B} {local.day}, {local.year}"


class EntryStore:
    """Reads and writes journal entry files."""

    def create_entry(
        self,
        sections: Mapping[SectionKind, str],
        now: Optional[datetime] = None,
    ) -> JournalEntry:
        """Build an entry stamped with the current instant."""
        if now is None:
            now = datetime.now(timezone.utc)
        return JournalEntry(
            title=format_title(now),
            timestamp=datetime_to_millis(now),
            sections={kind: text.strip() for kind, text in sections.items()},
        )

    def render(self, entry: JournalEntry) -> str:
        """Serialize an entry as markdown with a YAML header."""
        header = yaml.safe_dump(
            {
                "title": entry.title,
                "date": iso_instant(entry.timestamp),
                "timestamp": entry.timestamp,
            },
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )
        parts = ["---\n", header, "---\n\n"]
        for kind, text in entry.sections.items():
            parts.append(f"## {kind.label}\n\n")
            parts.append(f"{text.strip()}\n\n")
        return "".join(parts)

    def write_entry(self, base_path: Path, entry: JournalEntry) -> Path:
        """
        Write an entry under its date bucket.

        Returns:
            Path of the created file

        Raises:
            JournalIOError: If the directory or file cannot be created
        """
        moment = millis_to_datetime(entry.timestamp).astimezone()
        bucket = Path(base_path) / moment.strftime("%Y-%m-%d")
        try:
            bucket.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise JournalIOError.from_os_error(e, bucket, "create directory") from e

        content = self.render(entry)
        time_prefix = moment.strftime("%H-%M-%S")
        millis = entry.timestamp % 1000
        first = random.randrange(_DISAMBIGUATOR_RANGE)

        for offset in range(_DISAMBIGUATOR_RANGE):
            tie_breaker = (first + offset) % _DISAMBIGUATOR_RANGE
            path = bucket / f"{time_prefix}-{millis * 1000 + tie_breaker:06d}{ENTRY_SUFFIX}"
            try:
                with open(path, "x", encoding="utf-8", newline="\n") as f:
                    f.write(content)
            except FileExistsError:
                continue
            except OSError as e:
                raise JournalIOError.from_os_error(e, path, "write") from e
            logger.info("Wrote journal entry to %s", path)
            return path

        raise JournalIOError(
            IOKind.PERMISSION_OR_OTHER,
            f"No free entry filename in {bucket} for {time_prefix}.{millis:03d}",
            bucket,
        )

    def read_entry(self, path: Path) -> str:
        """
        Read the raw markdown of an entry.

        Raises:
            JournalIOError: NOT_FOUND if absent, MALFORMED if not UTF-8
        """
        path = Path(path)
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise JournalIOError(IOKind.MALFORMED, f"Entry is not valid UTF-8: {path}", path) from e
        except IsADirectoryError as e:
            raise JournalIOError(IOKind.PERMISSION_OR_OTHER, f"Not a file: {path}", path) from e
        except OSError as e:
            raise JournalIOError.from_os_error(e, path, "read") from e

    def parse_header(self, text: str, path: Optional[Path] = None) -> dict:
        """
        Parse the YAML header of an entry.

        Returns an empty dict when there is no header.

        Raises:
            JournalIOError: MALFORMED if the header is not a YAML mapping
        """
        match = _HEADER_RE.match(text)
        if not match:
            return {}
        try:
            header = yaml.safe_load(match.group(1))
        except yaml.YAMLError as e:
            raise JournalIOError(IOKind.MALFORMED, f"Malformed entry header: {path or '<text>'}", path) from e
        if header is None:
            return {}
        if not isinstance(header, dict):
            raise JournalIOError(IOKind.MALFORMED, f"Entry header is not a mapping: {path or '<text>'}", path)
        return header

    def iter_entry_paths(self, root: Path) -> Iterator[Path]:
        """Every entry file under *root*, in path order."""
        root = Path(root)
        if not root.is_dir():
            return
        yield from sorted(p for p in root.rglob(f"*{ENTRY_SUFFIX}") if p.is_file())
