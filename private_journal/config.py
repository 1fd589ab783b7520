"""
Configuration management for the private journal.

The configuration is stored as a TOML file in the journal root directory.
It specifies where entries live, which embedding provider to use, and
search tuning parameters.
"""

import os
import tomllib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import tomli_w

from .errors import IOKind, JournalIOError
from .types import Scope

CONFIG_FILENAME = "journal.toml"
CONFIG_VERSION = 1

DEFAULT_DIRNAME = ".private-journal"
PATH_ENV = "PRIVATE_JOURNAL_PATH"
AGENT_ENV = "PRIVATE_JOURNAL_AGENT"


@dataclass
class ProviderConfig:
    """Configuration for a single provider."""
    name: str
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class SearchSettings:
    """Search and excerpt tuning."""
    min_score: float = 0.1
    excerpt_length: int = 200
    excerpt_step: int = 20
    listing_excerpt_length: int = 150


@dataclass
class JournalConfig:
    """
    Complete journal configuration.

    Attributes:
        path: Journal base directory (holds journal.toml)
        agent_name: Optional namespace; entries go under path/agent_name
        project_path: Optional read-only root searched as the project scope
    """
    path: Path
    version: int = CONFIG_VERSION
    created: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    agent_name: Optional[str] = None
    project_path: Optional[Path] = None

    embedding: ProviderConfig = field(
        default_factory=lambda: ProviderConfig("sentence-transformers", {"model": "all-MiniLM-L6-v2"})
    )
    search: SearchSettings = field(default_factory=SearchSettings)

    @property
    def config_path(self) -> Path:
        """Path to the TOML config file."""
        return self.path / CONFIG_FILENAME

    @property
    def user_journal_path(self) -> Path:
        """Where new entries are written."""
        if self.agent_name:
            return self.path / self.agent_name
        return self.path

    def roots(self) -> list[tuple[Path, Scope]]:
        """
        Directories to index and list, with the scope of their entries.

        Raises:
            ValueError: If project_path and the user journal overlap
        """
        user_root = self.user_journal_path
        roots = [(user_root, Scope.USER)]
        if self.project_path is not None:
            user = user_root.resolve()
            project = self.project_path.resolve()
            if project.is_relative_to(user) or user.is_relative_to(project):
                raise ValueError(
                    f"project_path {self.project_path} overlaps the journal directory {user_root}"
                )
            roots.append((self.project_path, Scope.PROJECT))
        return roots

    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()


def _home_directory() -> Path:
    home = Path.home()
    if not home.exists():
        raise JournalIOError(IOKind.NOT_FOUND, f"Home directory does not exist: {home}", home)
    if not os.access(home, os.W_OK):
        raise JournalIOError(IOKind.PERMISSION_OR_OTHER, f"Home directory is not writable: {home}", home)
    return home


def _resolve_against_home(value: str | Path) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = _home_directory() / path
    return path


def resolve_journal_path(path: Optional[str | Path] = None) -> Path:
    """
    Resolve the journal base directory.

    Priority: explicit argument, PRIVATE_JOURNAL_PATH, ~/.private-journal.
    Relative paths are resolved against the home directory.
    """
    if path is not None:
        return _resolve_against_home(path)
    env_path = os.environ.get(PATH_ENV)
    if env_path:
        return _resolve_against_home(env_path)
    return _home_directory() / DEFAULT_DIRNAME


def load_config(journal_path: Path) -> JournalConfig:
    """
    Load configuration from a journal directory.

    Raises:
        FileNotFoundError: If config doesn't exist
        ValueError: If config is invalid
    """
    config_path = journal_path / CONFIG_FILENAME

    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")

    with open(config_path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid config {config_path}: {e}") from e

    journal = data.get("journal", {})
    version = journal.get("version", 1)
    if version > CONFIG_VERSION:
        raise ValueError(f"Config version {version} is newer than supported ({CONFIG_VERSION})")

    embedding = data.get("embedding", {"name": "sentence-transformers"})
    search = data.get("search", {})
    defaults = SearchSettings()
    project_path = journal.get("project_path")

    return JournalConfig(
        path=journal_path,
        version=version,
        created=journal.get("created", ""),
        agent_name=journal.get("agent_name") or None,
        project_path=_resolve_against_home(project_path) if project_path else None,
        embedding=ProviderConfig(
            name=embedding.get("name", ""),
            params={k: v for k, v in embedding.items() if k != "name"},
        ),
        search=SearchSettings(
            min_score=float(search.get("min_score", defaults.min_score)),
            excerpt_length=int(search.get("excerpt_length", defaults.excerpt_length)),
            excerpt_step=int(search.get("excerpt_step", defaults.excerpt_step)),
            listing_excerpt_length=int(search.get("listing_excerpt_length", defaults.listing_excerpt_length)),
        ),
    )


def save_config(config: JournalConfig) -> None:
    """
    Save configuration to the journal directory.

    Creates the directory if it doesn't exist.
    """
    config.path.mkdir(parents=True, exist_ok=True)

    journal: dict[str, Any] = {
        "version": config.version,
        "created": config.created,
    }
    if config.agent_name:
        journal["agent_name"] = config.agent_name
    if config.project_path is not None:
        journal["project_path"] = str(config.project_path)

    data = {
        "journal": journal,
        "embedding": {"name": config.embedding.name, **config.embedding.params},
        "search": {
            "min_score": config.search.min_score,
            "excerpt_length": config.search.excerpt_length,
            "excerpt_step": config.search.excerpt_step,
            "listing_excerpt_length": config.search.listing_excerpt_length,
        },
    }

    with open(config.config_path, "wb") as f:
        tomli_w.dump(data, f)


def load_or_create_config(journal_path: Optional[str | Path] = None) -> JournalConfig:
    """
    Load existing config or create a new one with defaults.

    This is the main entry point for config management. PRIVATE_JOURNAL_AGENT
    overrides the configured agent name.
    """
    base = resolve_journal_path(journal_path)

    config = JournalConfig(path=base)
    if config.exists():
        config = load_config(base)
    else:
        save_config(config)

    agent = os.environ.get(AGENT_ENV)
    if agent:
        config.agent_name = agent
    return config
