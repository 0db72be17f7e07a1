"""
RAG Service - similarity retrieval over a project's prior content.

SimilarityRetriever ranks a pool of content items against a query
embedding. RAGService builds the reference context used for prompt
enhancement from a user prompt and a project's content.
"""

import asyncio
import logging
from typing import List, Optional

from ..core.config import Config
from ..core.embeddings import Embedder, cosine_similarity
from .errors import InvalidArgumentError
from .models import ContentItem, RAGContext, RetrievalResult, RetrievedItem, Theme
from .stores import ContentStore, EmbeddingStore

logger = logging.getLogger(__name__)


def theme_text(theme: Theme) -> str:
    return f"{theme.name}: {', '.join(theme.tags)} inspired by {', '.join(theme.inspirations)}"


class SimilarityRetriever:
    """Top-k cosine retrieval with cache-or-generate pool embeddings."""

    def __init__(self, embedder: Embedder, embedding_store: EmbeddingStore):
        self.embedder = embedder
        self.embedding_store = embedding_store

    async def retrieve(
        self,
        query_embedding: List[float],
        pool: List[ContentItem],
        k: int = Config.RAG_TOP_K
    ) -> RetrievalResult:
        """
        Rank pool items by similarity to the query.

        Args:
            query_embedding: Query vector
            pool: Candidate content items
            k: Number of items to return

        Returns:
            RetrievalResult; ``avg_similarity`` is the mean over the whole
            pool, not just the returned top-k
        """
        if k < 0:
            raise InvalidArgumentError("k must be non-negative")

        if not pool:
            return RetrievalResult()

        embeddings = await asyncio.gather(*[
            self.embedder.resolve_content_embedding(item, self.embedding_store)
            for item in pool
        ])

        scored = [
            RetrievedItem(content=item, similarity=cosine_similarity(query_embedding, vector))
            for item, vector in zip(pool, embeddings)
        ]
        avg_similarity = sum(s.similarity for s in scored) / len(scored)

        # sorted() is stable, so equal similarities keep pool order
        top_items = sorted(scored, key=lambda s: -s.similarity)[:k]

        logger.info(
            f"Retrieved {len(top_items)} of {len(pool)} items, avg similarity: {avg_similarity:.3f}"
        )

        return RetrievalResult(
            avg_similarity=avg_similarity,
            top_items=top_items,
            descriptions=[s.content.scoring_text() for s in top_items],
        )


class RAGService:
    """Builds prompt-enhancement context from a project's content."""

    def __init__(
        self,
        content_store: ContentStore,
        embedding_store: EmbeddingStore,
        embedder: Optional[Embedder] = None
    ):
        self.content_store = content_store
        self.embedder = embedder or Embedder()
        self.retriever = SimilarityRetriever(self.embedder, embedding_store)

    async def perform_rag(
        self,
        project_id: str,
        user_prompt: str,
        theme: Theme,
        k: int = Config.RAG_TOP_K
    ) -> RAGContext:
        """
        Retrieve the project content most similar to a prompt.

        A project with no content yields a theme-only context. A failing
        store yields an empty context; generation can still proceed.
        """
        logger.info(f"Performing RAG for project {project_id}")

        try:
            prompt_embedding = await self.embedder.embed_query(user_prompt)
            pool = await asyncio.to_thread(self.content_store.list_by_project, project_id)

            if not pool:
                logger.info("No project content found, using theme only")
                return await self._theme_context(theme)

            retrieval = await self.retriever.retrieve(prompt_embedding, pool, k)
            theme_embedding = await self.embedder.embed_document(theme_text(theme))
        except InvalidArgumentError:
            raise
        except Exception as e:
            logger.error(f"RAG retrieval failed for project {project_id}: {e}", exc_info=True)
            return RAGContext()

        return RAGContext(
            relevant_content=[item.content for item in retrieval.top_items],
            similar_descriptions=retrieval.descriptions,
            theme_embedding=theme_embedding,
            similarity_scores=[item.similarity for item in retrieval.top_items],
            avg_similarity=retrieval.avg_similarity,
        )

    async def _theme_context(self, theme: Theme) -> RAGContext:
        text = theme_text(theme)
        return RAGContext(
            similar_descriptions=[text],
            theme_embedding=await self.embedder.embed_document(text),
            avg_similarity=1.0,
        )
