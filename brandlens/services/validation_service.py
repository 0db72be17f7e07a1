"""
Validation Service - single-item brand validation.

Resolves one content item (stored, or raw text for a project), compares its
embedding with the project's brand description, blends in the quality score
and produces a verdict with strengths, issues and recommendations.

Usage:
    from brandlens.services.validation_service import ValidationService

    service = ValidationService.from_supabase(get_supabase_client())
    result = await service.validate(content_id="...")
    result = await service.validate(content="Launch copy...", project_id="...")
"""

import asyncio
import logging
import re
from typing import List, Optional, Tuple

from supabase import Client

from ..core.embeddings import Embedder
from ..core.observability import scoring_span
from .brand_scoring import BrandScorer, passes
from .errors import InvalidArgumentError, NotFoundError
from .models import Project, Theme, ValidationIssue, ValidationResult
from .stores import ContentStore, EmbeddingStore, ProjectThemeStore

logger = logging.getLogger(__name__)

MEDIA_TYPES = ("text", "image")

STRONG_SCORE = 80
WEAK_SCORE = 60
SHORT_CONTENT_CHARS = 50

_REPEATED_EXCLAMATION = re.compile(r"!{2,}")


class ValidationService:
    """Validates content against project brand guidelines."""

    def __init__(
        self,
        content_store: ContentStore,
        project_theme_store: ProjectThemeStore,
        embedding_store: EmbeddingStore,
        embedder: Optional[Embedder] = None,
        scorer: Optional[BrandScorer] = None,
    ):
        self.content_store = content_store
        self.project_theme_store = project_theme_store
        self.embedding_store = embedding_store
        self.embedder = embedder or Embedder()
        self.scorer = scorer or BrandScorer(self.embedder)

    @classmethod
    def from_supabase(
        cls,
        client: Client,
        embedder: Optional[Embedder] = None,
        scorer: Optional[BrandScorer] = None
    ) -> "ValidationService":
        return cls(
            ContentStore(client),
            ProjectThemeStore(client),
            EmbeddingStore(client),
            embedder=embedder,
            scorer=scorer,
        )

    async def validate(
        self,
        content_id: Optional[str] = None,
        content: Optional[str] = None,
        project_id: Optional[str] = None,
        media_type: Optional[str] = None,
    ) -> ValidationResult:
        """
        Validate one content item against its project's brand.

        Either ``content_id`` or both ``content`` and ``project_id`` are
        required. A stored content item wins over raw text.

        Raises:
            InvalidArgumentError: Missing/contradictory input
            NotFoundError: Content, project or theme doesn't resolve
            InternalError: A store call failed
        """
        if not content_id and not (content and project_id):
            raise InvalidArgumentError("Must provide either content_id OR (content + project_id)")

        if media_type is not None and media_type not in MEDIA_TYPES:
            raise InvalidArgumentError(f"media_type must be one of: {', '.join(MEDIA_TYPES)}")

        with scoring_span("validate_content", content_id=content_id, project_id=project_id):
            text, resolved_project_id, resolved_media_type, item = await self._resolve_content(
                content_id, content, project_id, media_type
            )

            project_theme = await asyncio.to_thread(
                self.project_theme_store.get_project_and_theme, resolved_project_id
            )
            if project_theme is None:
                raise NotFoundError("Project or theme not found")

            if item is not None:
                content_embedding = await self.embedder.resolve_content_embedding(
                    item, self.embedding_store
                )
            else:
                content_embedding = await self.embedder.embed_document(text)

            brand_embedding = await self.scorer.brand_embedding(project_theme)
            score = self.scorer.score(
                text,
                content_embedding,
                brand_embedding,
                resolved_media_type,
                project_theme.theme,
            )

            result = generate_validation_insights(
                score.brand_consistency_score,
                score.quality_score,
                score.overall_score,
                text,
                project_theme.theme,
                project_theme.project,
            )

        logger.info(
            f"Validated content {content_id or '(raw)'} for project {resolved_project_id}: "
            f"brand={result.brand_consistency_score} quality={result.quality_score} "
            f"overall={result.overall_score} passes={result.passes_validation}"
        )
        return result

    async def _resolve_content(
        self,
        content_id: Optional[str],
        content: Optional[str],
        project_id: Optional[str],
        media_type: Optional[str],
    ):
        if content_id:
            item = await asyncio.to_thread(self.content_store.get_by_id, content_id)
            if item is None:
                raise NotFoundError(f"Content not found: {content_id}")
            return item.scoring_text(), item.project_id, item.media_type, item

        return content, project_id, media_type or "text", None


def generate_validation_insights(
    brand_consistency_score: int,
    quality_score: int,
    overall_score: int,
    text_content: str,
    theme: Theme,
    project: Project,
) -> ValidationResult:
    """
    Turn scores into a human-readable verdict.

    Rules:
        - brand/quality >= 80 is a strength, < 60 a major issue
        - repeated "!" and very short content are minor issues
        - weak brand alignment suggests theme inspirations as reference
        - an audience not mentioned in the text is recommended
        - four-band summary from the overall score
    """
    strengths: List[str] = []
    issues: List[ValidationIssue] = []
    recommendations: List[str] = []

    if brand_consistency_score >= STRONG_SCORE:
        strengths.append("Strong alignment with brand guidelines")
    elif brand_consistency_score < WEAK_SCORE:
        issues.append(ValidationIssue(
            severity="major",
            category="brand_alignment",
            description="Content does not strongly align with brand theme",
            suggestion=f"Incorporate: {', '.join(theme.tags[:3])}" if theme.tags else "Incorporate the brand theme",
        ))

    if quality_score >= STRONG_SCORE:
        strengths.append("High-quality content with good structure")
    elif quality_score < WEAK_SCORE:
        issues.append(ValidationIssue(
            severity="major",
            category="clarity",
            description="Content quality could be improved",
            suggestion="Review for clarity and professional tone",
        ))

    if _REPEATED_EXCLAMATION.search(text_content or ""):
        issues.append(ValidationIssue(
            severity="minor",
            category="tone",
            description="Excessive exclamation marks detected",
            suggestion="Use a more professional tone",
        ))

    if len(text_content or "") < SHORT_CONTENT_CHARS:
        issues.append(ValidationIssue(
            severity="minor",
            category="clarity",
            description="Content is very short",
            suggestion="Consider adding more detail",
        ))

    if brand_consistency_score < STRONG_SCORE and theme.inspirations:
        recommendations.append(f"Reference: {', '.join(theme.inspirations[:2])}")

    audience_token = project.customer_type.split()[0] if project.customer_type.split() else ""
    if audience_token and audience_token.lower() not in (text_content or "").lower():
        recommendations.append(f"Address audience: {project.customer_type}")

    summary, _ = _summary_for(overall_score)

    return ValidationResult(
        brand_consistency_score=brand_consistency_score,
        quality_score=quality_score,
        overall_score=overall_score,
        passes_validation=passes(overall_score),
        strengths=strengths or ["Meets basic requirements"],
        issues=issues,
        recommendations=recommendations or ["Content is well-aligned"],
        summary=summary,
    )


def _summary_for(overall_score: int) -> Tuple[str, str]:
    if overall_score >= 85:
        return "Excellent content that aligns well with brand guidelines.", "excellent"
    if overall_score >= 70:
        return "Good content with minor improvements possible.", "good"
    if overall_score >= 50:
        return "Content needs revision to better align with brand.", "needs_revision"
    return "Content significantly deviates from brand guidelines.", "deviates"
