"""
Tests for the embedding layer: fallback vectors, cosine similarity, the
Embedder's remote/fallback switch and the cache-or-generate lookup.
"""

import math

import pytest
from unittest.mock import AsyncMock, MagicMock

from brandlens.core.embeddings import (
    EMBED_DIM,
    Embedder,
    cosine_similarity,
    fallback_embedding,
)
from brandlens.services.models import ContentItem


def _remote_embedder(values=None, error=None):
    embedder = Embedder(api_key="", enabled=False)
    embedder.client = MagicMock()
    if error is not None:
        embedder.client.aio.models.embed_content = AsyncMock(side_effect=error)
    else:
        response = MagicMock()
        response.embeddings = [MagicMock(values=values)]
        embedder.client.aio.models.embed_content = AsyncMock(return_value=response)
    return embedder


# ============================================================================
# fallback_embedding
# ============================================================================

class TestFallbackEmbedding:
    def test_same_text_same_vector(self):
        assert fallback_embedding("Modern clean design") == fallback_embedding("Modern clean design")

    def test_different_text_different_vector(self):
        assert fallback_embedding("Modern clean design") != fallback_embedding("Vintage rustic charm")

    def test_dimensions(self):
        assert len(fallback_embedding("hello world")) == EMBED_DIM
        assert len(fallback_embedding("hello world", dimensions=64)) == 64

    def test_unit_length(self):
        vector = fallback_embedding("Bold colors for a playful brand!")
        assert math.isclose(math.sqrt(sum(v * v for v in vector)), 1.0, rel_tol=1e-9)

    def test_empty_text_is_zero_vector(self):
        vector = fallback_embedding("   ")
        assert len(vector) == EMBED_DIM
        assert all(v == 0.0 for v in vector)

    def test_case_insensitive(self):
        assert fallback_embedding("Hello World") == fallback_embedding("hello world")


# ============================================================================
# cosine_similarity
# ============================================================================

class TestCosineSimilarity:
    def test_identical_vectors(self):
        v = [0.3, -1.2, 4.0]
        assert cosine_similarity(v, v) == pytest.approx(1.0)

    def test_opposite_vectors(self):
        assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)

    def test_orthogonal_vectors(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_length_mismatch_is_zero(self):
        assert cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0]) == 0.0

    def test_zero_vector_is_zero(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0
        assert cosine_similarity([1.0, 1.0], [0.0, 0.0]) == 0.0

    def test_empty_vectors_are_zero(self):
        assert cosine_similarity([], []) == 0.0

    def test_fallback_vectors_self_similarity(self):
        v = fallback_embedding("A calm workspace app for focused teams")
        assert cosine_similarity(v, v) == pytest.approx(1.0)


# ============================================================================
# Embedder
# ============================================================================

class TestEmbedder:
    def test_disabled_has_no_client(self, embedder):
        assert embedder.client is None
        assert embedder.remote_enabled is False

    @pytest.mark.asyncio
    async def test_disabled_uses_fallback(self, embedder):
        text = "Launch day for the new workspace"
        assert await embedder.embed_document(text) == fallback_embedding(text)
        assert await embedder.embed_query(text) == fallback_embedding(text)

    @pytest.mark.asyncio
    async def test_remote_vector_returned(self):
        values = [0.01] * EMBED_DIM
        embedder = _remote_embedder(values=values)

        result = await embedder.embed_document("hello")

        assert result == values
        call = embedder.client.aio.models.embed_content.call_args
        assert call.kwargs["contents"] == ["hello"]
        assert call.kwargs["config"].task_type == "RETRIEVAL_DOCUMENT"

    @pytest.mark.asyncio
    async def test_query_task_type(self):
        embedder = _remote_embedder(values=[0.01] * EMBED_DIM)

        await embedder.embed_query("hello")

        call = embedder.client.aio.models.embed_content.call_args
        assert call.kwargs["config"].task_type == "RETRIEVAL_QUERY"

    @pytest.mark.asyncio
    async def test_provider_error_falls_back(self):
        embedder = _remote_embedder(error=RuntimeError("quota exceeded"))

        result = await embedder.embed_document("hello")

        assert result == fallback_embedding("hello")

    @pytest.mark.asyncio
    async def test_wrong_dimension_falls_back(self):
        embedder = _remote_embedder(values=[0.5, 0.5])

        result = await embedder.embed_document("hello")

        assert result == fallback_embedding("hello")

    @pytest.mark.asyncio
    async def test_empty_response_falls_back(self):
        embedder = _remote_embedder(values=None)

        result = await embedder.embed_query("hello")

        assert result == fallback_embedding("hello")


# ============================================================================
# Storage & cache lookup
# ============================================================================

class TestEmbeddingCache:
    def test_store_embedding_reports_success(self, embedder, embedding_store):
        assert embedder.store_embedding(embedding_store, "c-1", [1.0], "text") is True
        assert embedding_store.vectors["c-1"] == [1.0]

    def test_store_embedding_swallows_failure(self, embedder, flaky_embedding_store):
        assert embedder.store_embedding(flaky_embedding_store, "c-1", [1.0], "text") is False

    @pytest.mark.asyncio
    async def test_cached_vector_reused(self, embedder, embedding_store):
        cached = [0.0] * (EMBED_DIM - 1) + [1.0]
        embedding_store.vectors["c-1"] = cached
        item = ContentItem(id="c-1", project_id="p", text_content="hello")

        assert await embedder.resolve_content_embedding(item, embedding_store) == cached
        assert embedding_store.created == []

    @pytest.mark.asyncio
    async def test_missing_vector_generated_and_stored(self, embedder, embedding_store):
        item = ContentItem(id="c-1", project_id="p", text_content="hello")

        vector = await embedder.resolve_content_embedding(item, embedding_store)

        assert vector == fallback_embedding("hello")
        assert embedding_store.created == ["c-1"]

    @pytest.mark.asyncio
    async def test_wrong_dimension_cache_regenerated(self, embedder, embedding_store):
        embedding_store.vectors["c-1"] = [1.0, 2.0]
        item = ContentItem(id="c-1", project_id="p", text_content="hello")

        vector = await embedder.resolve_content_embedding(item, embedding_store)

        assert len(vector) == EMBED_DIM

    @pytest.mark.asyncio
    async def test_store_failures_do_not_propagate(self, embedder, flaky_embedding_store):
        item = ContentItem(id="c-1", project_id="p", text_content="hello")

        vector = await embedder.resolve_content_embedding(item, flaky_embedding_store)

        assert vector == fallback_embedding("hello")

    @pytest.mark.asyncio
    async def test_image_embeds_enhanced_prompt(self, embedder, embedding_store):
        item = ContentItem(
            id="img-1",
            project_id="p",
            media_type="image",
            prompt="desk",
            enhanced_prompt="minimal desk, soft light",
        )

        vector = await embedder.resolve_content_embedding(item, embedding_store)

        assert vector == fallback_embedding("minimal desk, soft light")
