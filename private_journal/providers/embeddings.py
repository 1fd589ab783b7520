"""
Embedding providers backed by local models.
"""

import logging

from .base import get_registry

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "all-MiniLM-L6-v2"


class SentenceTransformerEmbedding:
    """
    Embedding provider using sentence-transformers.

    The default model, all-MiniLM-L6-v2, produces 384-dimensional vectors
    and runs locally; journal text never leaves the machine.
    """

    def __init__(self, model: str = DEFAULT_MODEL, device: str | None = None):
        from sentence_transformers import SentenceTransformer

        self.model_name = model
        logger.info("Loading embedding model %s", model)
        self._model = SentenceTransformer(model, device=device)

    @property
    def dimension(self) -> int:
        return self._model.get_sentence_embedding_dimension()

    def embed(self, text: str) -> list[float]:
        return self._model.encode(text, convert_to_numpy=True).tolist()

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        return self._model.encode(texts, convert_to_numpy=True).tolist()


# Register providers
_registry = get_registry()
_registry.register_embedding("sentence-transformers", SentenceTransformerEmbedding)
