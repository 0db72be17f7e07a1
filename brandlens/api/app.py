"""
BrandLens FastAPI Application.

REST API for brand-consistency scoring, so content generation pipelines
can validate and rank output before publishing.

Features:
- Single-item validation and batch ranking
- Offline theme and content analysis
- API key authentication
- Rate limiting
- Health check endpoint
- Automatic OpenAPI documentation

Run with:
    uvicorn brandlens.api.app:app --reload
"""

# Load environment variables FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import logging
from datetime import datetime
from functools import lru_cache
from typing import Optional

from fastapi import FastAPI, HTTPException, Depends, Request, status
from fastapi.security import APIKeyHeader
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from .. import __version__
from ..core.config import Config
from ..core.database import get_supabase_client
from ..core.embeddings import Embedder
from ..core.keywords import KeywordTables, load_keyword_tables
from ..core.observability import setup_logfire
from ..services.brand_scoring import BrandScorer
from ..services.content_analysis_service import ContentAnalysisService
from ..services.errors import BrandLensError, InternalError, InvalidArgumentError
from ..services.models import RankingResult, Theme, ValidationResult
from ..services.quality_scoring_service import QualityScoringService
from ..services.ranking_service import RankingService
from ..services.theme_analysis_service import ThemeAnalysisService
from ..services.validation_service import ValidationService
from .models import (
    ContentAnalyzeRequest,
    ContentAnalyzeResponse,
    ErrorResponse,
    HealthResponse,
    RankRequest,
    ThemeAnalyzeRequest,
    ThemeAnalyzeResponse,
    ThemeInput,
    ValidateRequest,
)

# ============================================================================
# Logging Configuration
# ============================================================================

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ============================================================================
# FastAPI Application Setup
# ============================================================================

app = FastAPI(
    title="BrandLens API",
    description="Brand-consistency scoring and ranking for generated content",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# ============================================================================
# CORS Configuration
# ============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# Rate Limiting
# ============================================================================

RATE_LIMIT = f"{Config.RATE_LIMIT_PER_MINUTE}/minute"

limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ============================================================================
# API Key Authentication
# ============================================================================

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(api_key: Optional[str] = Depends(API_KEY_HEADER)):
    """
    Verify API key from request header.

    Checks against BRANDLENS_API_KEY. If not set, allows all requests
    (development mode).

    Raises:
        HTTPException: If API key is invalid or missing
    """
    expected_key = Config.API_KEY

    if not expected_key:
        return True

    if not api_key:
        logger.warning("API key missing from request")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API key required. Provide via X-API-Key header."
        )

    if api_key != expected_key:
        logger.warning(f"Invalid API key attempt: {api_key[:4]}...")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid API key"
        )

    return True


# ============================================================================
# Service Dependencies
# ============================================================================

@lru_cache(maxsize=1)
def get_keyword_tables() -> KeywordTables:
    return load_keyword_tables(Config.KEYWORDS_PATH or None)


@lru_cache(maxsize=1)
def get_embedder() -> Embedder:
    return Embedder()


def get_brand_scorer() -> BrandScorer:
    return BrandScorer(get_embedder(), get_quality_scoring_service())


def get_validation_service() -> ValidationService:
    return ValidationService.from_supabase(
        get_supabase_client(), embedder=get_embedder(), scorer=get_brand_scorer()
    )


def get_ranking_service() -> RankingService:
    return RankingService.from_supabase(
        get_supabase_client(), embedder=get_embedder(), scorer=get_brand_scorer()
    )


def get_theme_analysis_service() -> ThemeAnalysisService:
    return ThemeAnalysisService(get_keyword_tables())


def get_content_analysis_service() -> ContentAnalysisService:
    return ContentAnalysisService(get_keyword_tables())


def get_quality_scoring_service() -> QualityScoringService:
    return QualityScoringService(get_keyword_tables())


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or contradictory input"},
    401: {"model": ErrorResponse, "description": "Unauthorized - API key required"},
    403: {"model": ErrorResponse, "description": "Forbidden - Invalid API key"},
    404: {"model": ErrorResponse, "description": "Project, theme or content not found"},
    429: {"model": ErrorResponse, "description": "Too many requests"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}


# ============================================================================
# Health Check Endpoint
# ============================================================================

@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["System"],
    summary="Health check endpoint"
)
async def health_check():
    """
    Check API health and service status.

    The embedding provider is reported as "fallback" when remote
    embeddings are disabled; scoring still works in that mode.
    """
    services = {}

    try:
        get_supabase_client()
        services["database"] = "connected"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        services["database"] = "error"

    services["embeddings"] = "remote" if Config.embeddings_available() else "fallback"

    overall_status = "healthy" if all(
        s != "error" for s in services.values()
    ) else "degraded"

    return HealthResponse(
        status=overall_status,
        version=__version__,
        timestamp=datetime.now(),
        services=services
    )


# ============================================================================
# Scoring Endpoints
# ============================================================================

@app.post(
    "/validate",
    response_model=ValidationResult,
    tags=["Scoring"],
    summary="Validate one content item against its brand",
    responses=ERROR_RESPONSES,
)
@limiter.limit(RATE_LIMIT)
async def validate_content(
    request: Request,
    body: ValidateRequest,
    authenticated: bool = Depends(verify_api_key),
    service: ValidationService = Depends(get_validation_service),
):
    """
    Validate a stored content item, or raw text for a project.

    Returns brand consistency, quality and overall scores with strengths,
    issues and recommendations.
    """
    logger.info(f"Validate request: content_id={body.content_id}, project_id={body.project_id}")
    return await service.validate(
        content_id=body.content_id,
        content=body.content,
        project_id=body.project_id,
        media_type=body.media_type,
    )


@app.post(
    "/rank",
    response_model=RankingResult,
    tags=["Scoring"],
    summary="Rank content by brand consistency and quality",
    responses=ERROR_RESPONSES,
)
@limiter.limit(RATE_LIMIT)
async def rank_content(
    request: Request,
    body: RankRequest,
    authenticated: bool = Depends(verify_api_key),
    service: RankingService = Depends(get_ranking_service),
):
    """
    Rank all content of a project, or an explicit set of content IDs.

    Items that fail to score are kept with zero scores. Summary counts
    always cover the full batch, even when ``limit`` truncates the list.
    """
    logger.info(
        f"Rank request: project_id={body.project_id}, "
        f"content_ids={len(body.content_ids or [])}, limit={body.limit}"
    )
    return await service.rank(
        project_id=body.project_id,
        content_ids=body.content_ids,
        limit=body.limit,
    )


# ============================================================================
# Analysis Endpoints
# ============================================================================

@app.post(
    "/themes/analyze",
    response_model=ThemeAnalyzeResponse,
    tags=["Analysis"],
    summary="Derive a brand profile from a theme",
    responses=ERROR_RESPONSES,
)
@limiter.limit(RATE_LIMIT)
async def analyze_theme(
    request: Request,
    body: ThemeAnalyzeRequest,
    authenticated: bool = Depends(verify_api_key),
    service: ThemeAnalysisService = Depends(get_theme_analysis_service),
):
    """Offline theme analysis: palette, styles, mood, complexity, brand strength."""
    if not any(tag.strip() for tag in body.tags):
        raise InvalidArgumentError("Theme tags are required")

    theme = Theme(name=body.name, tags=body.tags, inspirations=body.inspirations)
    return ThemeAnalyzeResponse(
        theme=ThemeInput(**body.model_dump()),
        analysis=service.analyze_theme(theme),
    )


@app.post(
    "/content/analyze",
    response_model=ContentAnalyzeResponse,
    tags=["Analysis"],
    summary="Readability, keyword density, sentiment and structure",
    responses=ERROR_RESPONSES,
)
@limiter.limit(RATE_LIMIT)
async def analyze_content(
    request: Request,
    body: ContentAnalyzeRequest,
    authenticated: bool = Depends(verify_api_key),
    service: ContentAnalysisService = Depends(get_content_analysis_service),
    quality_scorer: QualityScoringService = Depends(get_quality_scoring_service),
):
    """Deeper text analysis of a single piece of content."""
    theme = Theme(**body.theme.model_dump())

    if body.media_type == "image":
        quality = quality_scorer.score_image_quality(body.content, theme)
    else:
        quality = quality_scorer.score_text_quality(body.content)

    return ContentAnalyzeResponse(
        analysis=service.analyze_content(body.content, theme),
        quality_score=quality,
    )


# ============================================================================
# Error Handlers
# ============================================================================

def _error_response(status_code: int, error: str, detail: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=detail).model_dump(mode="json")
    )


@app.exception_handler(BrandLensError)
async def brandlens_exception_handler(request: Request, exc: BrandLensError):
    """Map engine errors to HTTP status codes; internal detail stays in the logs."""
    if isinstance(exc, InternalError) or exc.status_code >= 500:
        logger.error(f"Internal error on {request.url.path}: {exc.message}")
        return _error_response(exc.status_code, "Internal server error")

    return _error_response(exc.status_code, exc.message)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with consistent error format."""
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return _error_response(500, "Internal server error")


# ============================================================================
# Startup/Shutdown Events
# ============================================================================

@app.on_event("startup")
async def startup_event():
    """Configure tracing and log startup information."""
    setup_logfire()
    logger.info("=" * 60)
    logger.info("BrandLens API Starting...")
    logger.info(f"API Version: {__version__}")
    logger.info(f"Embeddings: {'remote' if Config.embeddings_available() else 'fallback only'}")
    logger.info(f"Auth mode: {'Production (API key required)' if Config.API_KEY else 'Development (no auth)'}")
    logger.info("=" * 60)


@app.on_event("shutdown")
async def shutdown_event():
    """Log shutdown information."""
    logger.info("BrandLens API Shutting down...")


# ============================================================================
# Root Endpoint
# ============================================================================

@app.get("/", tags=["System"])
async def root():
    """
    API root endpoint with basic information.
    """
    return {
        "name": "BrandLens API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "validate": "/validate",
            "rank": "/rank",
            "theme_analysis": "/themes/analyze",
            "content_analysis": "/content/analyze",
        }
    }
