"""
Error types and error logging for the private journal.

Single-entity operations raise these; the MCP and CLI layers turn them into
clean messages while the full traceback goes to the error log.
"""

import os
import traceback
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional


class IOKind(Enum):
    NOT_FOUND = "not_found"
    MALFORMED = "malformed"
    PERMISSION_OR_OTHER = "permission_or_other"


class JournalError(Exception):
    """Base class for all journal errors."""


class JournalIOError(JournalError):
    """A journal or sidecar file could not be read or written."""

    def __init__(self, kind: IOKind, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.kind = kind
        self.path = path

    @classmethod
    def from_os_error(cls, exc: OSError, path: Path, action: str) -> "JournalIOError":
        """Classify an OSError raised while *action*-ing *path*."""
        if isinstance(exc, FileNotFoundError):
            return cls(IOKind.NOT_FOUND, f"File not found: {path}", path)
        return cls(IOKind.PERMISSION_OR_OTHER, f"Failed to {action} {path}: {exc}", path)


class EmbeddingError(JournalError):
    """Embedding could not be generated (blank input or provider failure)."""


class ValidationError(JournalError, ValueError):
    """Invalid argument: unknown section or scope, bad date, bad limit."""


def _error_log_path() -> Path:
    """Resolve error log path, respecting PRIVATE_JOURNAL_PATH."""
    root = os.environ.get("PRIVATE_JOURNAL_PATH")
    if root:
        return Path(root).expanduser() / "journal-errors.log"
    return Path.home() / ".private-journal" / "journal-errors.log"


def log_exception(exc: Exception, context: str = "") -> Path:
    """
    Log exception with full traceback to file.

    Args:
        exc: The exception that occurred
        context: Optional context string (e.g., command name)

    Returns:
        Path to the error log file
    """
    log_path = _error_log_path()
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(log_path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o600)
        with os.fdopen(fd, "a") as f:
            f.write(f"\n{'='*60}\n")
            f.write(f"[{timestamp}]")
            if context:
                f.write(f" {context}")
            f.write("\n")
            f.write("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    except OSError:
        pass  # Error log unwritable; the original exception still propagates
    return log_path
