"""
Ranking Service - batch brand scoring and ordering.

Scores every item of a project (or an explicit ID list) with the same
pipeline as validation, then orders them best first. One item failing to
score never fails the batch: it is ranked with zero scores and a fixed
"Unable to score content" recommendation.

Usage:
    from brandlens.services.ranking_service import RankingService

    service = RankingService.from_supabase(get_supabase_client())
    result = await service.rank(project_id="...", limit=10)
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Union

from supabase import Client

from ..core.config import Config
from ..core.embeddings import Embedder
from ..core.observability import scoring_span
from .brand_scoring import BrandScorer, ContentScore
from .errors import InvalidArgumentError, NotFoundError
from .models import (
    ContentItem,
    ProjectTheme,
    RankedContentEntry,
    RankingResult,
    RankingSummary,
)
from .stores import ContentStore, EmbeddingStore, ProjectThemeStore

logger = logging.getLogger(__name__)

UNSCORED_RECOMMENDATION = "Unable to score content"


# ============================================================================
# Per-item outcomes
# ============================================================================

@dataclass(frozen=True)
class ItemScored:
    item: ContentItem
    score: ContentScore


@dataclass(frozen=True)
class ItemFailed:
    item: ContentItem
    error: str


ItemOutcome = Union[ItemScored, ItemFailed]


def recommendation_for(overall_score: int, brand_consistency_score: int) -> str:
    """Short advice line for a ranked item."""
    if overall_score >= 85:
        return "Excellent - Best option with strong brand alignment and high quality"
    if overall_score >= 70:
        return "Good - Solid option that aligns well with brand guidelines"
    if overall_score >= 50:
        if brand_consistency_score < 60:
            return "Acceptable - Quality is good but brand alignment could be improved"
        return "Acceptable - Brand alignment is good but quality could be improved"
    return "Needs improvement - Consider regenerating or refining this content"


def _entry(outcome: ItemOutcome) -> RankedContentEntry:
    item = outcome.item
    common = dict(
        content_id=item.id,
        text_content=item.text_content,
        media_type=item.media_type,
        media_url=item.media_url,
        created_at=item.created_at,
    )

    if isinstance(outcome, ItemFailed):
        return RankedContentEntry(
            **common,
            overall_score=0,
            brand_consistency_score=0,
            quality_score=0,
            recommendation=UNSCORED_RECOMMENDATION,
            scored=False,
        )

    score = outcome.score
    return RankedContentEntry(
        **common,
        overall_score=score.overall_score,
        brand_consistency_score=score.brand_consistency_score,
        quality_score=score.quality_score,
        recommendation=recommendation_for(score.overall_score, score.brand_consistency_score),
    )


class RankingService:
    """Ranks content items by brand consistency and quality."""

    def __init__(
        self,
        content_store: ContentStore,
        project_theme_store: ProjectThemeStore,
        embedding_store: EmbeddingStore,
        embedder: Optional[Embedder] = None,
        scorer: Optional[BrandScorer] = None,
        concurrency: Optional[int] = None,
    ):
        self.content_store = content_store
        self.project_theme_store = project_theme_store
        self.embedding_store = embedding_store
        self.embedder = embedder or Embedder()
        self.scorer = scorer or BrandScorer(self.embedder)
        self.concurrency = max(1, concurrency or Config.RANK_CONCURRENCY)

    @classmethod
    def from_supabase(
        cls,
        client: Client,
        embedder: Optional[Embedder] = None,
        scorer: Optional[BrandScorer] = None
    ) -> "RankingService":
        return cls(
            ContentStore(client),
            ProjectThemeStore(client),
            EmbeddingStore(client),
            embedder=embedder,
            scorer=scorer,
        )

    async def rank(
        self,
        project_id: Optional[str] = None,
        content_ids: Optional[List[str]] = None,
        limit: Optional[int] = None,
    ) -> RankingResult:
        """
        Rank a project's content, or an explicit set of content items.

        Exactly one of ``project_id`` or a non-empty ``content_ids`` is
        required. Items given by ID are scored against the project of the
        first resolved item.

        Args:
            project_id: Rank all content of this project
            content_ids: Rank exactly these items
            limit: Truncate the returned list; summary counts are unaffected

        Raises:
            InvalidArgumentError: Neither/both selectors, or a negative limit
            NotFoundError: Project/theme missing, or no ID resolved
            InternalError: A store call failed
        """
        has_ids = bool(content_ids)

        if project_id and has_ids:
            raise InvalidArgumentError("Provide either project_id or content_ids, not both")
        if not project_id and not has_ids:
            raise InvalidArgumentError("Must provide either project_id or content_ids")
        if limit is not None and limit < 0:
            raise InvalidArgumentError("limit must be non-negative")

        with scoring_span("rank_content", project_id=project_id, requested=len(content_ids or [])):
            if project_id:
                project_theme = await self._resolve_project_theme(project_id)
                items = await asyncio.to_thread(self.content_store.list_by_project, project_id)
                if not items:
                    logger.info(f"No content to rank for project {project_id}")
                    return RankingResult(summary=RankingSummary(
                        project_id=project_id,
                        theme_id=project_theme.theme.id,
                        message="No content found for this project",
                    ))
            else:
                items = await asyncio.to_thread(self.content_store.get_by_ids, content_ids)
                if not items:
                    raise NotFoundError("No content found for the given IDs")
                project_theme = await self._resolve_project_theme(items[0].project_id)

            outcomes = await self._score_all(items, project_theme)

        return self._build_result(outcomes, project_theme, limit)

    async def _resolve_project_theme(self, project_id: str) -> ProjectTheme:
        # Store clients are synchronous; keep them off the event loop
        project_theme = await asyncio.to_thread(
            self.project_theme_store.get_project_and_theme, project_id
        )
        if project_theme is None:
            raise NotFoundError("Project or theme not found")
        return project_theme

    async def _score_all(
        self,
        items: List[ContentItem],
        project_theme: ProjectTheme
    ) -> List[ItemOutcome]:
        logger.info(f"Scoring {len(items)} items for project {project_theme.project.id}")

        brand_embedding = await self.scorer.brand_embedding(project_theme)
        semaphore = asyncio.Semaphore(self.concurrency)

        async def score_one(item: ContentItem) -> ItemOutcome:
            async with semaphore:
                try:
                    embedding = await self.embedder.resolve_content_embedding(
                        item, self.embedding_store
                    )
                    score = self.scorer.score(
                        item.scoring_text(),
                        embedding,
                        brand_embedding,
                        item.media_type,
                        project_theme.theme,
                    )
                    return ItemScored(item=item, score=score)
                except Exception as e:
                    logger.error(f"Failed to score content {item.id}: {e}", exc_info=True)
                    return ItemFailed(item=item, error=str(e))

        # gather preserves input order regardless of completion order
        return list(await asyncio.gather(*[score_one(item) for item in items]))

    @staticmethod
    def _build_result(
        outcomes: List[ItemOutcome],
        project_theme: ProjectTheme,
        limit: Optional[int]
    ) -> RankingResult:
        entries = sorted((_entry(o) for o in outcomes), key=lambda e: -e.overall_score)
        for rank, entry in enumerate(entries, start=1):
            entry.rank = rank

        scores = [e.overall_score for e in entries]
        scored = sum(1 for e in entries if e.scored)
        summary = RankingSummary(
            total_ranked=len(entries),
            scored=scored,
            failed=len(entries) - scored,
            top_score=max(scores) if scores else 0,
            # Unscored entries count as zero, like their ranked score
            average_score=round(sum(scores) / len(scores)) if scores else 0,
            project_id=project_theme.project.id,
            theme_id=project_theme.theme.id,
        )

        if limit is not None:
            entries = entries[:limit]

        logger.info(
            f"Ranked {summary.total_ranked} items ({summary.failed} failed), "
            f"top score {summary.top_score}, returning {len(entries)}"
        )
        return RankingResult(ranked_content=entries, summary=summary)
