"""
Text embedding service.

Wraps an EmbeddingProvider with input validation, error translation and
a lock so that one model instance is never driven by two threads at once.
The provider itself is created on first use, since loading a model is slow
and read-only operations never need it.
"""

import logging
import threading
from typing import Callable, Optional

from .errors import EmbeddingError
from .providers.base import EmbeddingProvider

logger = logging.getLogger(__name__)


class EmbeddingService:
    """
    Generates embeddings through a lazily created provider.

    Args:
        provider: A ready provider instance, or
        factory: A zero-argument callable that creates one on first use
    """

    def __init__(
        self,
        provider: Optional[EmbeddingProvider] = None,
        *,
        factory: Optional[Callable[[], EmbeddingProvider]] = None,
    ) -> None:
        if provider is None and factory is None:
            raise ValueError("EmbeddingService needs a provider or a factory")
        self._provider = provider
        self._factory = factory
        self._lock = threading.Lock()

    def _get_provider(self) -> EmbeddingProvider:
        # Caller holds self._lock
        if self._provider is None:
            try:
                self._provider = self._factory()
            except Exception as e:
                raise EmbeddingError(f"Embedding provider unavailable: {e}") from e
        return self._provider

    @property
    def is_loaded(self) -> bool:
        return self._provider is not None

    def embed(self, text: str) -> list[float]:
        """
        Embed non-blank text.

        Raises:
            EmbeddingError: If text is blank or the provider fails
        """
        if text is None or not text.strip():
            raise EmbeddingError("Text cannot be null or empty")
        with self._lock:
            provider = self._get_provider()
            try:
                vector = [float(v) for v in provider.embed(text)]
            except Exception as e:
                raise EmbeddingError(f"Embedding failed: {e}") from e
        if not vector:
            raise EmbeddingError("Embedding provider returned an empty vector")
        return vector
