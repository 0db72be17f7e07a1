"""
Services layer for the BrandLens scoring engine.

Data models and error types are exported here; service classes are imported
from their own modules so that the core package can depend on this one
without import cycles.
"""

from .errors import (
    BrandLensError,
    InvalidArgumentError,
    NotFoundError,
    EmbeddingUnavailableError,
    InternalError,
)
from .models import (
    Theme,
    Project,
    ProjectTheme,
    ContentItem,
    EmbeddingRecord,
    ColorPalette,
    ThemeAnalysis,
    ValidationIssue,
    ValidationResult,
    RankedContentEntry,
    RankingSummary,
    RankingResult,
)

__all__ = [
    "BrandLensError",
    "InvalidArgumentError",
    "NotFoundError",
    "EmbeddingUnavailableError",
    "InternalError",
    "Theme",
    "Project",
    "ProjectTheme",
    "ContentItem",
    "EmbeddingRecord",
    "ColorPalette",
    "ThemeAnalysis",
    "ValidationIssue",
    "ValidationResult",
    "RankedContentEntry",
    "RankingSummary",
    "RankingResult",
]
