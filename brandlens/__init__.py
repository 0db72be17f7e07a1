"""
BrandLens - Brand-Consistency Scoring & Ranking Engine

Scores generated marketing content against a project's brand theme using
embedding similarity and text-quality heuristics, and ranks content sets.
"""

__version__ = "0.1.0"
__author__ = "BrandLens Team"
