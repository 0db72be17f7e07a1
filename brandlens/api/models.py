"""
API Request and Response Models.

Pydantic models for FastAPI request/response validation and
automatic OpenAPI documentation generation.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from ..services.models import ContentAnalysis, ThemeAnalysis


# ============================================================================
# Scoring Request Models
# ============================================================================

class ValidateRequest(BaseModel):
    """
    Request model for single-item validation.

    Provide either ``content_id`` or ``content`` together with ``project_id``.
    """
    content_id: Optional[str] = Field(None, description="Stored content item to validate")
    content: Optional[str] = Field(None, description="Raw text to validate")
    project_id: Optional[str] = Field(None, description="Project the raw text belongs to")
    media_type: Optional[Literal["text", "image"]] = Field(None, description="Media type of raw content")

    class Config:
        json_schema_extra = {
            "example": {
                "content": "Meet the new workspace built for focused teams.",
                "project_id": "2f0c7c1e-1111-4b1a-9d0e-6b2f3c4d5e6f",
                "media_type": "text"
            }
        }


class RankRequest(BaseModel):
    """
    Request model for batch ranking.

    Exactly one of ``project_id`` or a non-empty ``content_ids`` is required.
    """
    project_id: Optional[str] = Field(None, description="Rank all content of a project")
    content_ids: Optional[List[str]] = Field(None, description="Rank exactly these items")
    limit: Optional[int] = Field(None, description="Maximum number of ranked entries returned")

    class Config:
        json_schema_extra = {
            "example": {
                "project_id": "2f0c7c1e-1111-4b1a-9d0e-6b2f3c4d5e6f",
                "limit": 10
            }
        }


# ============================================================================
# Analysis Request/Response Models
# ============================================================================

class ThemeInput(BaseModel):
    """Theme fields accepted inline by the analysis endpoints."""
    name: str = Field(default="", description="Theme name")
    tags: List[str] = Field(default_factory=list, description="Style tags")
    inspirations: List[str] = Field(default_factory=list, description="Reference brands/artists")


class ThemeAnalyzeRequest(ThemeInput):
    """Request model for theme analysis; tags must not be empty."""

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Modern Tech",
                "tags": ["modern", "tech", "clean"],
                "inspirations": ["Apple"]
            }
        }


class ThemeAnalyzeResponse(BaseModel):
    """Theme analysis plus the theme it was derived from."""
    theme: ThemeInput
    analysis: ThemeAnalysis
    timestamp: datetime = Field(default_factory=datetime.now)


class ContentAnalyzeRequest(BaseModel):
    """Request model for deeper text analysis."""
    content: str = Field(..., description="Text to analyze")
    theme: ThemeInput = Field(default_factory=ThemeInput, description="Theme supplying brand keywords")
    media_type: Literal["text", "image"] = Field("text", description="text, or image for a prompt")


class ContentAnalyzeResponse(BaseModel):
    """Content analysis with the heuristic quality score."""
    analysis: ContentAnalysis
    quality_score: int = Field(..., ge=0, le=100)
    timestamp: datetime = Field(default_factory=datetime.now)


# ============================================================================
# Health Check Models
# ============================================================================

class HealthResponse(BaseModel):
    """Response model for health check endpoint."""
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    timestamp: datetime = Field(default_factory=datetime.now)
    services: Dict[str, str] = Field(
        default_factory=dict,
        description="Status of dependent services (database, embeddings)"
    )


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")
    timestamp: datetime = Field(default_factory=datetime.now)
