"""
Base provider protocols.

These define the interfaces that concrete providers must implement.
Using Protocol for structural subtyping - no explicit inheritance required.
"""

from typing import Protocol, runtime_checkable


# -----------------------------------------------------------------------------
# Embedding Generation
# -----------------------------------------------------------------------------

@runtime_checkable
class EmbeddingProvider(Protocol):
    """
    Generates vector embeddings from text.

    Embeddings enable semantic similarity search. The same provider instance
    must be used for both indexing and querying to ensure consistent vectors.

    Example implementation:
        class SentenceTransformerEmbedding:
            def __init__(self, model: str = "all-MiniLM-L6-v2"):
                from sentence_transformers import SentenceTransformer
                self._model = SentenceTransformer(model)

            @property
            def dimension(self) -> int:
                return self._model.get_sentence_embedding_dimension()

            def embed(self, text: str) -> list[float]:
                return self._model.encode(text).tolist()

            def embed_batch(self, texts: list[str]) -> list[list[float]]:
                return self._model.encode(texts).tolist()
    """

    @property
    def dimension(self) -> int:
        """
        The dimensionality of the embedding vectors.

        This must be consistent across all calls. Sidecar files written with
        one dimension are skipped when querying with another.
        """
        ...

    def embed(self, text: str) -> list[float]:
        """
        Generate an embedding vector for the given text.

        Args:
            text: The text to embed

        Returns:
            A list of floats representing the embedding vector
        """
        ...

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """
        Generate embeddings for multiple texts.

        Args:
            texts: List of texts to embed

        Returns:
            List of embedding vectors, one per input text
        """
        ...


# -----------------------------------------------------------------------------
# Provider Registry
# -----------------------------------------------------------------------------

class ProviderRegistry:
    """
    Registry for discovering and instantiating providers.

    Providers are registered by name and can be instantiated from configuration.
    This allows journal.toml to specify providers by name rather than
    requiring code changes.

    Example:
        registry = ProviderRegistry()
        registry.register_embedding("sentence-transformers", SentenceTransformerEmbedding)

        # Later, from config:
        provider = registry.create_embedding("sentence-transformers", {"model": "all-MiniLM-L6-v2"})
    """

    def __init__(self):
        self._embedding_providers: dict[str, type] = {}
        self._lazy_loaded = False

    def _ensure_providers_loaded(self) -> None:
        """Lazily load all provider modules."""
        if self._lazy_loaded:
            return

        self._lazy_loaded = True

        # Importing only registers classes; models load on instantiation
        from . import embeddings  # noqa: F401

    def register_embedding(self, name: str, provider_class: type) -> None:
        """Register an embedding provider class."""
        self._embedding_providers[name] = provider_class

    def create_embedding(self, name: str, params: dict | None = None) -> EmbeddingProvider:
        """Create an embedding provider instance."""
        self._ensure_providers_loaded()
        if name not in self._embedding_providers:
            available = ", ".join(self._embedding_providers.keys()) or "none"
            raise ValueError(
                f"Unknown embedding provider: '{name}'. "
                f"Available providers: {available}. "
                f"Install missing dependencies or check provider name."
            )
        try:
            return self._embedding_providers[name](**(params or {}))
        except ImportError as e:
            raise RuntimeError(
                f"Failed to create embedding provider '{name}': {e}\n"
                f"Install required dependencies."
            ) from e
        except Exception as e:
            raise RuntimeError(
                f"Failed to create embedding provider '{name}': {e}"
            ) from e

    def list_embedding_providers(self) -> list[str]:
        """List registered embedding provider names."""
        self._ensure_providers_loaded()
        return list(self._embedding_providers.keys())


# Global registry instance
# Concrete providers register themselves on import
_registry = ProviderRegistry()


def get_registry() -> ProviderRegistry:
    """Get the global provider registry."""
    return _registry
