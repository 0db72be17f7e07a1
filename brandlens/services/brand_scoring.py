"""
Brand scoring primitive shared by validation and ranking.

A content item's brand consistency is the cosine similarity between its
embedding and the embedding of the project's brand description, scaled
to [0, 100]. It is blended with the quality score under a fixed policy:

    overall = round(0.6 * brand_consistency + 0.4 * quality)
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..core.config import Config
from ..core.embeddings import Embedder, cosine_similarity
from .models import Project, ProjectTheme, Theme
from .quality_scoring_service import QualityScoringService

logger = logging.getLogger(__name__)


def build_brand_description(project: Project, theme: Theme) -> str:
    """
    Build the brand reference text content is compared against.

    Only parts with actual content are included.
    """
    parts = []

    if theme.name and theme.tags:
        parts.append(f"{theme.name}: {', '.join(theme.tags)}")
    elif theme.name:
        parts.append(theme.name)
    elif theme.tags:
        parts.append(", ".join(theme.tags))

    if theme.inspirations:
        parts.append(f"Inspired by: {', '.join(theme.inspirations)}")

    if project.description.strip():
        parts.append(project.description.strip())
    if project.goals.strip():
        parts.append(f"Goals: {project.goals.strip()}")
    if project.customer_type.strip():
        parts.append(f"Target audience: {project.customer_type.strip()}")

    return ". ".join(parts)


def similarity_to_score(similarity: float) -> int:
    return int(max(0, min(100, round(100 * similarity))))


def combine_scores(brand_consistency: int, quality: int) -> int:
    """Weighted overall score; the weights are policy constants."""
    return int(round(Config.BRAND_WEIGHT * brand_consistency + Config.QUALITY_WEIGHT * quality))


def passes(overall_score: int) -> bool:
    return overall_score >= Config.PASS_THRESHOLD


@dataclass(frozen=True)
class ContentScore:
    brand_consistency_score: int
    quality_score: int
    overall_score: int


class BrandScorer:
    """Scores content text/embeddings against one project's brand."""

    def __init__(
        self,
        embedder: Embedder,
        quality_scorer: Optional[QualityScoringService] = None
    ):
        self.embedder = embedder
        self.quality_scorer = quality_scorer or QualityScoringService()

    async def brand_embedding(self, project_theme: ProjectTheme) -> Optional[List[float]]:
        """
        Embed the brand description for a project.

        Returns:
            Vector, or None when the project and theme carry no brand signal
        """
        description = build_brand_description(project_theme.project, project_theme.theme)
        if not description:
            logger.warning(f"No brand signals for project {project_theme.project.id}")
            return None
        return await self.embedder.embed_document(description)

    def brand_consistency(
        self,
        content_embedding: List[float],
        brand_embedding: Optional[List[float]]
    ) -> int:
        if not brand_embedding or not content_embedding:
            return 0
        return similarity_to_score(cosine_similarity(content_embedding, brand_embedding))

    def quality(self, text: str, media_type: str, theme: Theme) -> int:
        if media_type == "image":
            return self.quality_scorer.score_image_quality(text, theme)
        return self.quality_scorer.score_text_quality(text)

    def score(
        self,
        text: str,
        content_embedding: List[float],
        brand_embedding: Optional[List[float]],
        media_type: str,
        theme: Theme
    ) -> ContentScore:
        brand = self.brand_consistency(content_embedding, brand_embedding)
        quality = self.quality(text, media_type, theme)
        return ContentScore(
            brand_consistency_score=brand,
            quality_score=quality,
            overall_score=combine_scores(brand, quality),
        )
