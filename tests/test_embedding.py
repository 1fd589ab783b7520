"""Tests for the embedding service and provider registry."""

import threading

import pytest

from private_journal.embedding import EmbeddingService
from private_journal.errors import EmbeddingError
from private_journal.providers import ProviderRegistry, get_registry


def test_blank_text_rejected(mock_embedding_provider):
    service = EmbeddingService(mock_embedding_provider)
    for text in ("", "   ", None):
        with pytest.raises(EmbeddingError, match="Text cannot be null or empty"):
            service.embed(text)
    assert mock_embedding_provider.embed_calls == 0


def test_factory_called_once_on_first_use(mock_embedding_provider):
    calls = []

    def factory():
        calls.append(1)
        return mock_embedding_provider

    service = EmbeddingService(factory=factory)
    assert not service.is_loaded
    service.embed("hello")
    service.embed("again")
    assert service.is_loaded
    assert calls == [1]


def test_factory_failure(mock_embedding_provider):
    def factory():
        raise RuntimeError("no model here")

    service = EmbeddingService(factory=factory)
    with pytest.raises(EmbeddingError, match="no model here"):
        service.embed("hello")


def test_provider_failure(failing_embedding_provider):
    with pytest.raises(EmbeddingError):
        EmbeddingService(failing_embedding_provider).embed("hello")


def test_needs_provider_or_factory():
    with pytest.raises(ValueError):
        EmbeddingService()


def test_concurrent_embeds(mock_embedding_provider):
    service = EmbeddingService(mock_embedding_provider)
    threads = [threading.Thread(target=service.embed, args=(f"text {i}",)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert mock_embedding_provider.embed_calls == 8


class TestRegistry:

    def test_default_provider_registered(self):
        assert "sentence-transformers" in get_registry().list_embedding_providers()

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown embedding provider"):
            get_registry().create_embedding("nope")

    def test_custom_provider(self, mock_embedding_provider):
        registry = ProviderRegistry()
        registry.register_embedding("mock", lambda: mock_embedding_provider)
        assert registry.create_embedding("mock") is mock_embedding_provider

    def test_constructor_failure_wrapped(self):
        def broken(**kwargs):
            raise OSError("disk on fire")

        registry = ProviderRegistry()
        registry.register_embedding("broken", broken)
        with pytest.raises(RuntimeError, match="disk on fire"):
            registry.create_embedding("broken")
