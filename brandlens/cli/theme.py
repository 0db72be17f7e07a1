"""
Theme CLI Commands

Offline brand profile extraction for a theme, given inline or by ID.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Tuple

import click
import yaml

from ..core.database import get_supabase_client
from ..core.keywords import load_keyword_tables
from ..services.errors import BrandLensError
from ..services.models import Theme
from ..services.stores import ProjectThemeStore
from ..services.theme_analysis_service import ThemeAnalysisService

logger = logging.getLogger(__name__)


@click.group(name="theme")
def theme_group():
    """Analyze brand themes."""
    pass


@theme_group.command(name="analyze")
@click.option("--theme-id", help="Load the theme from the database")
@click.option("--name", default="", help="Theme name")
@click.option("--tag", "tags", multiple=True, help="Style tag (repeatable)")
@click.option("--inspiration", "inspirations", multiple=True, help="Reference brand/artist (repeatable)")
@click.option(
    "--keywords",
    "keywords_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file overriding the keyword tables"
)
def analyze_theme_command(
    theme_id: Optional[str],
    name: str,
    tags: Tuple[str, ...],
    inspirations: Tuple[str, ...],
    keywords_path: Optional[Path]
):
    """
    Derive palette, styles, mood, complexity and brand strength.

    Examples:
        brandlens theme analyze --name "Modern Tech" --tag modern --tag tech --inspiration Apple
        brandlens theme analyze --theme-id 9a1b...
    """
    try:
        keywords = load_keyword_tables(str(keywords_path) if keywords_path else None)
    except (ValueError, yaml.YAMLError) as e:
        click.echo(f"❌ Invalid keyword file: {e}", err=True)
        raise click.Abort()

    if theme_id:
        try:
            theme = ProjectThemeStore(get_supabase_client()).get_theme(theme_id)
        except (BrandLensError, ValueError) as e:
            click.echo(f"❌ Error: {e}", err=True)
            raise click.Abort()
        if theme is None:
            click.echo(f"❌ Theme not found: {theme_id}", err=True)
            raise click.Abort()
    else:
        if not any(t.strip() for t in tags):
            click.echo("❌ At least one --tag is required", err=True)
            raise click.Abort()
        theme = Theme(name=name, tags=list(tags), inspirations=list(inspirations))

    analysis = ThemeAnalysisService(keywords).analyze_theme(theme)

    click.echo(json.dumps({
        "theme": theme.model_dump(include={"id", "name", "tags", "inspirations"}),
        "analysis": analysis.model_dump(),
    }, indent=2))
