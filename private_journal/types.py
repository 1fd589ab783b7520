"""
Data types for the private journal.
"""

import re
from dataclasses import dataclass, field
from datetime import date as date_type, datetime, time, timedelta, timezone
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from .errors import ValidationError


class SectionKind(Enum):
    """
    Journal entry sections.

    Each section has a machine key (used in tool arguments) and a display
    label (used in markdown headings and in sidecar files).
    """

    FEELINGS = ("feelings", "Feelings")
    PROJECT_NOTES = ("project_notes", "Project Notes")
    USER_CONTEXT = ("user_context", "User Context")
    TECHNICAL_INSIGHTS = ("technical_insights", "Technical Insights")
    WORLD_KNOWLEDGE = ("world_knowledge", "World Knowledge")

    def __init__(self, key: str, label: str):
        self.key = key
        self.label = label

    @classmethod
    def from_key(cls, key: str) -> "SectionKind":
        """Look up a section by machine key (e.g. ``technical_insights``)."""
        if key is None:
            raise ValidationError("Section key cannot be None")
        wanted = key.strip().lower()
        for section in cls:
            if section.key == wanted:
                return section
        raise ValidationError(f"Unknown section key: {key!r}")

    @classmethod
    def from_label(cls, label: str) -> "SectionKind":
        """Look up a section by display label (e.g. ``Technical Insights``)."""
        if label is None:
            raise ValidationError("Section label cannot be None")
        wanted = label.strip().lower()
        for section in cls:
            if section.label.lower() == wanted:
                return section
        raise ValidationError(f"Unknown section label: {label!r}")


class Scope(Enum):
    """Which journal an entry belongs to. BOTH only selects at query time."""

    USER = "user"
    PROJECT = "project"
    BOTH = "both"

    @classmethod
    def parse(cls, value: str) -> "Scope":
        if value is None:
            raise ValidationError("Journal type cannot be None")
        wanted = value.strip().lower()
        for scope in cls:
            if scope.value == wanted:
                return scope
        raise ValidationError(f"Unknown journal type: {value!r}")

    def matches(self, stored: "Scope") -> bool:
        """Whether an entry stored under *stored* is selected by this scope."""
        return self is Scope.BOTH or self is stored


# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------

def millis_to_datetime(millis: int) -> datetime:
    """Epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)


def datetime_to_millis(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(round(dt.timestamp() * 1000))


def iso_instant(millis: int) -> str:
    """ISO-8601 UTC instant with millisecond precision: 2025-01-02T03:04:05.678Z"""
    dt = millis_to_datetime(millis)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date_bound(value: Optional[str], *, end_of_day: bool = False) -> Optional[int]:
    """
    Parse a date filter argument to epoch milliseconds.

    Accepts a plain ``YYYY-MM-DD`` date, interpreted in the local timezone
    (start of day, or the last millisecond of the day when *end_of_day*),
    or a full ISO-8601 instant. Naive instants are taken as UTC.

    Returns None for empty input.

    Raises:
        ValidationError: If the value cannot be parsed
    """
    if value is None or not value.strip():
        return None
    text = value.strip()
    try:
        if _DATE_ONLY_RE.match(text):
            day = date_type.fromisoformat(text)
            if end_of_day:
                next_day = datetime.combine(day + timedelta(days=1), time.min).astimezone()
                return datetime_to_millis(next_day) - 1
            return datetime_to_millis(datetime.combine(day, time.min).astimezone())
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError as e:
        raise ValidationError(f"Unparseable date: {value!r}") from e
    return datetime_to_millis(dt)


def parse_section_keys(value: Optional[str]) -> list["SectionKind"]:
    """
    Parse a comma-separated list of section keys.

    Raises:
        ValidationError: On the first unknown key
    """
    if value is None or not value.strip():
        return []
    return [SectionKind.from_key(part) for part in value.split(",") if part.strip()]


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class JournalEntry:
    """
    A journal entry: a title, a creation instant, and ordered section text.

    Attributes:
        title: Human-readable local time title
        timestamp: Creation instant as epoch milliseconds
        sections: Section text in insertion order (non-empty, trimmed)
    """
    title: str
    timestamp: int
    sections: Mapping[SectionKind, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "sections", MappingProxyType(dict(self.sections)))

    @property
    def date(self) -> datetime:
        return millis_to_datetime(self.timestamp)


@dataclass
class EmbeddingRecord:
    """Contents of one ``.index`` sidecar file."""
    embedding: list[float]
    text: str
    sections: list[str]
    timestamp: int
    path: str

    def to_dict(self) -> dict:
        return {
            "embedding": [float(v) for v in self.embedding],
            "text": self.text,
            "sections": list(self.sections),
            "timestamp": self.timestamp,
            "path": self.path,
        }


@dataclass(frozen=True)
class SearchQuery:
    """
    A semantic search request.

    Attributes:
        text: Natural language query
        limit: Maximum number of results (>= 1)
        scope: Journal scope filter
        sections: Optional section filter (an entry matches if it has any)
        after: Inclusive lower bound on the entry timestamp (epoch millis)
        before: Inclusive upper bound on the entry timestamp (epoch millis)
    """
    text: str
    limit: int = 10
    scope: Scope = Scope.BOTH
    sections: frozenset[SectionKind] = frozenset()
    after: Optional[int] = None
    before: Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.limit, int) or self.limit < 1:
            raise ValidationError(f"Limit must be a positive integer, got {self.limit!r}")
        if not isinstance(self.sections, frozenset):
            object.__setattr__(self, "sections", frozenset(self.sections or ()))


@dataclass(frozen=True)
class SearchResult:
    """A ranked search hit."""
    score: float
    path: str
    timestamp: int
    sections: tuple[SectionKind, ...] = ()
    text: str = ""

    @property
    def date(self) -> datetime:
        return millis_to_datetime(self.timestamp)


@dataclass(frozen=True)
class EntryInfo:
    """Listing information for one entry file."""
    path: str
    timestamp: int
    scope: Scope
    sections: tuple[str, ...]
    excerpt: str

    @property
    def date(self) -> datetime:
        return millis_to_datetime(self.timestamp)


def sections_from_labels(labels: Iterable[str]) -> tuple[SectionKind, ...]:
    """Convert stored display labels to SectionKinds, ignoring unknown labels."""
    result = []
    for label in labels:
        try:
            result.append(SectionKind.from_label(label))
        except ValidationError:
            continue
    return tuple(result)
