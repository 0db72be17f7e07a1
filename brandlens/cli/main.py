"""
Main CLI entry point for BrandLens
"""

import click

from .. import __version__
from .score import score_group
from .theme import theme_group


@click.group()
@click.version_option(version=__version__)
def cli():
    """
    BrandLens - Brand-consistency scoring for generated content

    Validate content against a project's brand, rank content sets and
    analyze brand themes.
    """
    pass


# Register command groups
cli.add_command(score_group)
cli.add_command(theme_group)


if __name__ == '__main__':
    cli()
