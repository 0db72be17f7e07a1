"""
BrandLens API - FastAPI application for brand-consistency scoring.

Provides REST endpoints for validating and ranking generated content,
plus offline theme and content analysis.
"""

__version__ = "0.1.0"
