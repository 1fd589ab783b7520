"""
Shared pytest fixtures for private journal tests.

Provides a mock embedding provider so tests never load an ML model.
"""

import hashlib
import re

import pytest

from private_journal.api import Journal
from private_journal.config import JournalConfig


class MockEmbeddingProvider:
    """
    Deterministic bag-of-words embedding provider for testing.

    Each lowercase word is hashed to one of ``dimension`` buckets, so texts
    sharing words get a positive cosine similarity and unrelated texts score
    near zero. No ML model loading.
    """

    dimension = 8192
    model_name = "mock-model"

    def __init__(self):
        self.embed_calls = 0

    def embed(self, text: str) -> list[float]:
        self.embed_calls += 1
        vector = [0.0] * self.dimension
        for word in re.findall(r"[a-z0-9]+", text.lower()):
            bucket = int(hashlib.md5(word.encode()).hexdigest(), 16) % self.dimension
            vector[bucket] += 1.0
        return vector

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [self.embed(t) for t in texts]


class FailingEmbeddingProvider:
    """Provider whose every call fails, as a broken model would."""

    dimension = 8192

    def embed(self, text: str) -> list[float]:
        raise RuntimeError("model exploded")

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        raise RuntimeError("model exploded")


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep error logs and env overrides inside the test directory."""
    monkeypatch.setenv("PRIVATE_JOURNAL_PATH", str(tmp_path / "env-journal"))
    monkeypatch.delenv("PRIVATE_JOURNAL_AGENT", raising=False)
    yield


@pytest.fixture
def mock_embedding_provider():
    """Create a fresh MockEmbeddingProvider instance."""
    return MockEmbeddingProvider()


@pytest.fixture
def journal_dir(tmp_path):
    path = tmp_path / "journal"
    path.mkdir()
    return path


@pytest.fixture
def journal(journal_dir, mock_embedding_provider):
    """A Journal on a temp directory using the mock embedder."""
    jr = Journal(
        config=JournalConfig(path=journal_dir),
        embedding_provider=mock_embedding_provider,
    )
    yield jr
    jr.close()


@pytest.fixture
def failing_embedding_provider():
    return FailingEmbeddingProvider()
