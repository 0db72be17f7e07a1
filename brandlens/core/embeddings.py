"""
Embedding Infrastructure for brand-consistency scoring

Provides text embedding generation using Gemini, with a deterministic
hash-based fallback vector whenever the remote provider is disabled,
unreachable, or returns nothing usable. Callers never see a provider error.
"""

import asyncio
import hashlib
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

import numpy as np
from google import genai
from google.genai import types

from .config import Config
from ..services.errors import EmbeddingUnavailableError

if TYPE_CHECKING:
    from ..services.models import ContentItem
    from ..services.stores import EmbeddingStore

logger = logging.getLogger(__name__)

# Gemini embedding model and dimensions
EMBED_MODEL = Config.EMBED_MODEL
EMBED_DIM = Config.EMBED_DIM

_SENTENCE_MARKS = re.compile(r"[.!?]")


def _stable_hash(token: str) -> int:
    """Process-independent hash (builtin hash() is salted per interpreter)"""
    return int.from_bytes(hashlib.sha256(token.encode('utf-8')).digest()[:8], 'big')


def fallback_embedding(text: str, dimensions: int = EMBED_DIM) -> List[float]:
    """
    Deterministic pseudo-embedding derived from the text alone.

    Same text always yields the same vector, and the vector has the same
    dimensionality as a real embedding, so downstream math doesn't care
    which path produced it.

    Features:
        - hashed words, weighted 1 / (position + 1)
        - hashed character trigrams, +0.5 each
        - slots 0..2: word count / 100, char count / 1000, sentence marks / 10

    Args:
        text: Source text
        dimensions: Output length (default 768)

    Returns:
        L2-normalised vector; all zeros for empty text
    """
    vector = np.zeros(dimensions, dtype=np.float64)
    normalized = (text or "").lower().strip()

    if not normalized:
        return vector.tolist()

    words = normalized.split()
    for idx, word in enumerate(words):
        vector[_stable_hash(word) % dimensions] += 1.0 / (idx + 1)

    for i in range(len(normalized) - 2):
        vector[_stable_hash(normalized[i:i + 3]) % dimensions] += 0.5

    vector[0] = len(words) / 100
    vector[1] = len(normalized) / 1000
    vector[2] = len(_SENTENCE_MARKS.findall(text)) / 10

    magnitude = np.linalg.norm(vector)
    if magnitude > 0:
        vector = vector / magnitude

    return vector.tolist()


def cosine_similarity(vec1: List[float], vec2: List[float]) -> float:
    """
    Compute cosine similarity between two vectors.

    Returns 0.0 (not an error) when the lengths differ, either vector is
    empty, or either has zero magnitude.

    Args:
        vec1: First vector
        vec2: Second vector

    Returns:
        Cosine similarity in [-1, 1]
    """
    if len(vec1) != len(vec2) or len(vec1) == 0:
        return 0.0

    a = np.asarray(vec1, dtype=np.float64)
    b = np.asarray(vec2, dtype=np.float64)

    magnitude1 = np.linalg.norm(a)
    magnitude2 = np.linalg.norm(b)

    if magnitude1 == 0 or magnitude2 == 0:
        return 0.0

    return float(np.clip(np.dot(a, b) / (magnitude1 * magnitude2), -1.0, 1.0))


@dataclass
class Embedder:
    """
    Text embedding generator using the Gemini API with a local fallback.

    Attributes:
        api_key: Gemini API key (default: GEMINI_API_KEY env var)
        model: Embedding model name
        dimensions: Output dimensionality
        enabled: Use the remote provider at all (default: EMBEDDINGS_ENABLED)
    """
    api_key: Optional[str] = None
    model: str = EMBED_MODEL
    dimensions: int = EMBED_DIM
    enabled: Optional[bool] = None

    def __post_init__(self):
        """Initialize API client"""
        if self.api_key is None:
            self.api_key = Config.GEMINI_API_KEY
        if self.enabled is None:
            self.enabled = Config.EMBEDDINGS_ENABLED

        self.client = None
        if self.enabled and self.api_key:
            self.client = genai.Client(api_key=self.api_key)
        else:
            logger.info("Remote embeddings disabled, using deterministic fallback vectors")

    @property
    def remote_enabled(self) -> bool:
        return self.client is not None

    async def _embed_remote(self, text: str, task_type: str) -> List[float]:
        if self.client is None:
            raise EmbeddingUnavailableError("Embedding provider disabled")

        result = await self.client.aio.models.embed_content(
            model=self.model,
            contents=[text],
            config=types.EmbedContentConfig(
                task_type=task_type,
                output_dimensionality=self.dimensions
            )
        )

        values = list(result.embeddings[0].values or []) if result.embeddings else []
        if len(values) != self.dimensions:
            raise EmbeddingUnavailableError(
                f"Provider returned {len(values)} values, expected {self.dimensions}"
            )
        return values

    async def _embed(self, text: str, task_type: str) -> List[float]:
        try:
            return await self._embed_remote(text, task_type)
        except EmbeddingUnavailableError as e:
            if self.remote_enabled:
                logger.warning(f"No usable embedding from provider, using fallback: {e.message}")
        except Exception as e:
            logger.warning(f"Failed to generate {task_type} embedding, using fallback: {e}")

        return fallback_embedding(text, self.dimensions)

    async def embed_document(self, text: str) -> List[float]:
        """
        Embed text for storage/comparison (RETRIEVAL_DOCUMENT task type).

        Never raises for provider problems; falls back instead.
        """
        return await self._embed(text, "RETRIEVAL_DOCUMENT")

    async def embed_query(self, text: str) -> List[float]:
        """
        Embed a search query (RETRIEVAL_QUERY task type).

        Never raises for provider problems; falls back instead.
        """
        return await self._embed(text, "RETRIEVAL_QUERY")

    def store_embedding(
        self,
        store: 'EmbeddingStore',
        content_id: str,
        vector: List[float],
        text: str,
        media_type: str = "text"
    ) -> bool:
        """
        Persist an embedding, fire-and-forget.

        Duplicate writes for the same content are harmless; failures are
        logged and reported through the return value only.

        Returns:
            True if the store accepted the record
        """
        try:
            store.create(content_id, vector, text, media_type)
            return True
        except Exception as e:
            logger.error(f"Failed to store embedding for content {content_id}: {e}")
            return False

    async def generate_and_store(
        self,
        content_id: str,
        text: str,
        store: 'EmbeddingStore',
        media_type: str = "text"
    ) -> List[float]:
        """Embed text as a document and persist it for reuse."""
        vector = await self.embed_document(text)
        # Run sync Supabase call in thread pool to avoid blocking event loop
        await asyncio.to_thread(self.store_embedding, store, content_id, vector, text, media_type)
        return vector

    async def resolve_content_embedding(
        self,
        item: 'ContentItem',
        store: 'EmbeddingStore'
    ) -> List[float]:
        """
        Get the cached embedding for a content item, generating it if absent.

        The embedding store is treated as a cache: a lookup failure or a
        vector of the wrong dimensionality counts as a miss.

        Args:
            item: Content item being scored
            store: Embedding store

        Returns:
            Embedding vector
        """
        cached = None
        try:
            cached = await asyncio.to_thread(store.get_by_content_id, item.id)
        except Exception as e:
            logger.warning(f"Embedding lookup failed for content {item.id}, regenerating: {e}")

        if cached and len(cached) == self.dimensions:
            return cached

        return await self.generate_and_store(item.id, item.scoring_text(), store, item.media_type)
