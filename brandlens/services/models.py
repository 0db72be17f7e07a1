"""
Pydantic models for the BrandLens scoring engine.

These models provide validated data structures for:
- Collaborator records (Theme, Project, ContentItem, EmbeddingRecord)
- Derived brand profile (ColorPalette, ThemeAnalysis)
- Verdicts and orderings (ValidationResult, RankedContentEntry, RankingResult)
- Retrieval context (RetrievedItem, RetrievalResult, RAGContext)
- Deeper text analysis (ContentAnalysis, DiversityAnalysis, VariantRanking)

All models use Pydantic v2 for validation, serialization, and JSON schema generation.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator


# ============================================================================
# Collaborator Records
# ============================================================================

class Theme(BaseModel):
    """
    Brand theme as stored by the theme collaborator.

    Tag order is caller-supplied and irrelevant to scoring.
    """
    id: Optional[str] = None
    name: str = Field(default="", description="Theme name (e.g., 'Modern Tech')")
    font: Optional[str] = None
    tags: List[str] = Field(default_factory=list, description="Free-text style tags")
    inspirations: List[str] = Field(default_factory=list, description="Reference brands/artists")

    @field_validator("name", mode="before")
    @classmethod
    def _none_name(cls, v):
        return v or ""

    @field_validator("tags", "inspirations", mode="before")
    @classmethod
    def _none_list(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            # Legacy rows store the list as one comma-separated string
            v = [part.strip() for part in v.split(",") if part.strip()]
        return [str(item) for item in v if item is not None]

    class Config:
        from_attributes = True


class Project(BaseModel):
    """Project record; its text fields form the brand description."""
    id: Optional[str] = None
    theme_id: Optional[str] = None
    client_id: Optional[str] = None
    name: str = ""
    description: str = ""
    goals: str = ""
    customer_type: str = ""

    @field_validator("name", "description", "goals", "customer_type", mode="before")
    @classmethod
    def _none_text(cls, v):
        return v or ""

    class Config:
        from_attributes = True


class ProjectTheme(BaseModel):
    """A project resolved together with its linked theme."""
    project: Project
    theme: Theme


class ContentItem(BaseModel):
    """
    Generated content item.

    Created by the generation collaborator; the engine only reads it.
    For images, ``text_content`` may hold a prompt rather than a caption.
    """
    id: str
    project_id: str
    media_type: str = Field(default="text", description="text | image")
    text_content: Optional[str] = None
    prompt: Optional[str] = None
    enhanced_prompt: Optional[str] = None
    media_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_image(self) -> bool:
        return self.media_type == "image"

    def scoring_text(self) -> str:
        """Text used for embedding and quality scoring.

        Images are compared through the prompt they were generated from,
        preferring the enhanced prompt since it carries the brand keywords.
        """
        if self.is_image:
            return self.enhanced_prompt or self.prompt or self.text_content or ""
        return self.text_content or ""

    class Config:
        from_attributes = True


class EmbeddingRecord(BaseModel):
    """Association content_id -> vector plus the source text."""
    id: Optional[str] = None
    content_id: str
    embedding: List[float]
    text_content: str = ""
    media_type: str = "text"
    created_at: Optional[datetime] = None

    @field_validator("embedding", mode="before")
    @classmethod
    def _parse_vector(cls, v):
        # pgvector columns come back from PostgREST as "[0.1,0.2,...]"
        if isinstance(v, str):
            stripped = v.strip().strip("[]")
            return [float(x) for x in stripped.split(",") if x.strip()]
        return v


# ============================================================================
# Theme Analysis
# ============================================================================

class ColorPalette(BaseModel):
    """Ranked color buckets derived from theme keywords."""
    primary: List[str] = Field(default_factory=list)
    secondary: List[str] = Field(default_factory=list)
    accent: List[str] = Field(default_factory=list)
    mood: str = "neutral"


class ThemeAnalysis(BaseModel):
    """Structured brand profile derived from a theme."""
    color_palette: ColorPalette
    style_score: int = Field(..., ge=0, le=100)
    dominant_styles: List[str] = Field(default_factory=list, max_length=3)
    visual_mood: str = "balanced"
    complexity_score: int = Field(..., ge=0, le=100)
    brand_strength: int = Field(..., ge=0, le=100)


# ============================================================================
# Validation & Ranking
# ============================================================================

class ValidationIssue(BaseModel):
    """A single problem found during validation."""
    severity: Literal["major", "minor"]
    category: str
    description: str
    suggestion: str


class ValidationResult(BaseModel):
    """
    Single-item validation verdict.

    ``overall_score`` is always round(0.6 * brand + 0.4 * quality) and
    ``passes_validation`` is true iff overall_score >= 70.
    """
    brand_consistency_score: int = Field(..., ge=0, le=100)
    quality_score: int = Field(..., ge=0, le=100)
    overall_score: int = Field(..., ge=0, le=100)
    passes_validation: bool
    strengths: List[str] = Field(default_factory=list)
    issues: List[ValidationIssue] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    summary: str = ""


class RankedContentEntry(BaseModel):
    """One content item in a ranked ordering."""
    rank: int = Field(default=0, ge=0)
    content_id: str
    overall_score: int = Field(default=0, ge=0, le=100)
    brand_consistency_score: int = Field(default=0, ge=0, le=100)
    quality_score: int = Field(default=0, ge=0, le=100)
    text_content: Optional[str] = None
    media_type: str = "text"
    media_url: Optional[str] = None
    created_at: Optional[datetime] = None
    recommendation: str = ""
    scored: bool = True


class RankingSummary(BaseModel):
    """Batch totals, always computed before the result limit is applied."""
    total_ranked: int = 0
    scored: int = 0
    failed: int = 0
    top_score: int = 0
    average_score: int = Field(
        default=0,
        description="Mean overall score of every ranked entry; unscored entries count as 0",
    )
    project_id: Optional[str] = None
    theme_id: Optional[str] = None
    message: Optional[str] = None


class RankingResult(BaseModel):
    """Ranked content plus summary."""
    ranked_content: List[RankedContentEntry] = Field(default_factory=list)
    summary: RankingSummary = Field(default_factory=RankingSummary)


# ============================================================================
# Retrieval
# ============================================================================

class RetrievedItem(BaseModel):
    """A pool item with its similarity to the query."""
    content: ContentItem
    similarity: float


class RetrievalResult(BaseModel):
    """Top-k similar items plus the mean similarity over the full pool."""
    avg_similarity: float = 0.0
    top_items: List[RetrievedItem] = Field(default_factory=list)
    descriptions: List[str] = Field(default_factory=list)


class RAGContext(BaseModel):
    """Reference context supplied to prompt enhancement."""
    relevant_content: List[ContentItem] = Field(default_factory=list)
    similar_descriptions: List[str] = Field(default_factory=list)
    theme_embedding: List[float] = Field(default_factory=list)
    similarity_scores: List[float] = Field(default_factory=list)
    avg_similarity: float = 0.0


# ============================================================================
# Content Analysis
# ============================================================================

class Readability(BaseModel):
    score: int = 0
    grade_level: float = 0.0
    level: str = "unknown"


class KeywordCount(BaseModel):
    word: str
    count: int


class KeywordDensity(BaseModel):
    brand_keyword_count: int = 0
    brand_keyword_percentage: float = 0.0
    top_keywords: List[KeywordCount] = Field(default_factory=list)


class Sentiment(BaseModel):
    score: float = 0.0
    label: str = "neutral"
    confidence: float = 0.0


class TextStructure(BaseModel):
    sentence_count: int = 0
    word_count: int = 0
    avg_sentence_length: int = 0
    paragraph_count: int = 0


class ContentAnalysis(BaseModel):
    """Readability, brand keyword density, sentiment and structure."""
    readability: Readability
    keyword_density: KeywordDensity
    sentiment: Sentiment
    structure: TextStructure


class DiversityAnalysis(BaseModel):
    """Pairwise diversity between content variants."""
    avg_pairwise_similarity: float = 0.0
    diversity_score: int = 100
    unique_variant_count: int = 0
    duplicate_pairs: List[Tuple[int, int]] = Field(default_factory=list)


class VariantRanking(BaseModel):
    """Composite score for one variant."""
    index: int
    composite_score: int
    factors: Dict[str, float] = Field(default_factory=dict)
