"""
Score CLI Commands

Commands for validating and ranking content against a project's brand.
Results are printed to stdout as JSON; progress goes to stderr.
"""

import asyncio
import logging
from typing import Optional, Tuple

import click
import yaml

from ..core.config import Config
from ..core.database import get_supabase_client
from ..core.embeddings import Embedder
from ..core.keywords import load_keyword_tables
from ..core.observability import setup_logfire
from ..services.brand_scoring import BrandScorer
from ..services.errors import BrandLensError
from ..services.quality_scoring_service import QualityScoringService
from ..services.ranking_service import RankingService
from ..services.validation_service import ValidationService


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)

logger = logging.getLogger(__name__)


def build_brand_scorer(embedder: Embedder) -> BrandScorer:
    keywords = load_keyword_tables(Config.KEYWORDS_PATH or None)
    return BrandScorer(embedder, QualityScoringService(keywords))


def build_validation_service() -> ValidationService:
    embedder = Embedder()
    return ValidationService.from_supabase(
        get_supabase_client(), embedder=embedder, scorer=build_brand_scorer(embedder)
    )


def build_ranking_service() -> RankingService:
    embedder = Embedder()
    return RankingService.from_supabase(
        get_supabase_client(), embedder=embedder, scorer=build_brand_scorer(embedder)
    )


@click.group(name="score")
def score_group():
    """Validate and rank content by brand consistency."""
    pass


@score_group.command(name="validate")
@click.option("--content-id", help="Stored content item to validate")
@click.option("--content", help="Raw text to validate (requires --project)")
@click.option("--project", "project_id", help="Project ID for raw text")
@click.option("--media-type", type=click.Choice(["text", "image"]), help="Media type of raw text")
def validate_command(
    content_id: Optional[str],
    content: Optional[str],
    project_id: Optional[str],
    media_type: Optional[str]
):
    """
    Validate one content item against its project's brand.

    Examples:
        brandlens score validate --content-id 3f6c...
        brandlens score validate --content "Launch copy" --project 2f0c...
    """
    setup_logfire()

    try:
        service = build_validation_service()
        click.echo(f"🔍 Validating {content_id or 'raw content'}...", err=True)
        result = asyncio.run(service.validate(
            content_id=content_id,
            content=content,
            project_id=project_id,
            media_type=media_type,
        ))
    except BrandLensError as e:
        click.echo(f"❌ Error: {e.message}", err=True)
        raise click.Abort()
    except (ValueError, OSError, yaml.YAMLError) as e:
        click.echo(f"❌ Configuration error: {e}", err=True)
        raise click.Abort()

    verdict = "✅ Passes" if result.passes_validation else "⚠️  Does not pass"
    click.echo(f"{verdict} (overall {result.overall_score})", err=True)
    click.echo(result.model_dump_json(indent=2))


@score_group.command(name="rank")
@click.option("--project", "project_id", help="Rank all content of this project")
@click.option("--content-id", "content_ids", multiple=True, help="Content ID to rank (repeatable)")
@click.option("--limit", type=int, help="Maximum number of entries to print")
def rank_command(project_id: Optional[str], content_ids: Tuple[str, ...], limit: Optional[int]):
    """
    Rank content by brand consistency and quality.

    Examples:
        brandlens score rank --project 2f0c... --limit 5
        brandlens score rank --content-id a1... --content-id b2...
    """
    setup_logfire()

    try:
        service = build_ranking_service()
        click.echo("📊 Ranking content...", err=True)
        result = asyncio.run(service.rank(
            project_id=project_id,
            content_ids=list(content_ids),
            limit=limit,
        ))
    except BrandLensError as e:
        click.echo(f"❌ Error: {e.message}", err=True)
        raise click.Abort()
    except (ValueError, OSError, yaml.YAMLError) as e:
        click.echo(f"❌ Configuration error: {e}", err=True)
        raise click.Abort()

    summary = result.summary
    click.echo(
        f"✅ Ranked {summary.total_ranked} item(s), {summary.failed} failed, "
        f"top score {summary.top_score}",
        err=True
    )
    click.echo(result.model_dump_json(indent=2))
