"""
Keyword tables for the offline brand heuristics.

Every vocabulary the theme analyzer, quality scorer and content analyzer use
is kept here as data (category -> keyword list), so a new category is an
additive change. A YAML file can overlay any of the tables:

    style_keywords:
      futuristic: [futuristic, sci-fi, neon]
    professional_words: [innovative, seamless, reliable]

Usage:
    from brandlens.core.keywords import load_keyword_tables

    tables = load_keyword_tables("config/keywords.yml")
"""

import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)


def _explicit_colors() -> Dict[str, str]:
    # keyword -> canonical color name
    return {
        "red": "red",
        "blue": "blue",
        "green": "green",
        "yellow": "yellow",
        "orange": "orange",
        "purple": "purple",
        "pink": "pink",
        "black": "black",
        "white": "white",
        "gray": "gray",
        "grey": "gray",
        "brown": "brown",
        "gold": "gold",
        "silver": "silver",
        "teal": "teal",
        "navy": "navy",
    }


def _mood_implied_colors() -> Dict[str, List[str]]:
    return {
        "vibrant": ["pink", "yellow", "blue"],
        "energetic": ["red", "orange", "yellow"],
        "warm": ["orange", "red", "gold"],
        "cool": ["blue", "teal", "silver"],
        "calm": ["blue", "green", "white"],
        "natural": ["green", "brown", "white"],
        "organic": ["green", "brown"],
        "luxurious": ["black", "gold", "white"],
        "elegant": ["black", "white", "gold"],
        "earthy": ["brown", "green", "orange"],
        "fresh": ["green", "white", "yellow"],
    }


def _color_fallbacks() -> List[List]:
    # Ordered: first descriptor found wins
    return [
        ["playful", ["pink", "yellow", "blue", "purple"]],
        ["professional", ["blue", "gray", "white"]],
        ["corporate", ["blue", "gray", "white"]],
        ["modern", ["white", "black", "gray"]],
    ]


def _palette_mood_keywords() -> Dict[str, List[str]]:
    # Declaration order matters: the last group that matches wins
    return {
        "energetic": ["energetic", "dynamic", "vibrant", "exciting", "bold"],
        "calm": ["calm", "serene", "peaceful", "tranquil", "soft"],
        "professional": ["professional", "corporate", "business", "formal", "trustworthy"],
    }


def _style_keywords() -> Dict[str, List[str]]:
    return {
        "modern": ["modern", "contemporary", "sleek", "clean", "minimalist"],
        "vintage": ["vintage", "retro", "classic", "nostalgic"],
        "elegant": ["elegant", "sophisticated", "refined", "luxurious"],
        "bold": ["bold", "striking", "dramatic", "powerful"],
        "playful": ["playful", "fun", "whimsical", "creative"],
        "professional": ["professional", "corporate", "business", "formal"],
        "artistic": ["artistic", "creative", "expressive", "unique"],
        "minimalist": ["minimalist", "simple", "clean", "sparse"],
    }


def _visual_mood_keywords() -> Dict[str, List[str]]:
    # Ties are won by the first declared group
    return {
        "energetic": ["energetic", "dynamic", "vibrant", "exciting"],
        "calm": ["calm", "serene", "peaceful", "tranquil"],
        "professional": ["professional", "serious", "formal", "trustworthy"],
        "friendly": ["friendly", "approachable", "warm", "welcoming"],
        "luxurious": ["luxurious", "premium", "elegant", "sophisticated"],
        "innovative": ["innovative", "cutting-edge", "futuristic", "tech"],
    }


def _complexity_style_words() -> List[str]:
    return [
        "modern", "minimalist", "vintage", "retro", "futuristic", "classic",
        "elegant", "bold", "clean", "rustic", "industrial", "organic",
        "geometric", "abstract", "realistic", "artistic", "corporate", "playful",
    ]


def _professional_words() -> List[str]:
    return ["innovative", "professional", "seamless", "efficient", "experience", "solution"]


def _image_quality_keywords() -> List[str]:
    return ["high quality", "detailed", "professional", "premium", "polished"]


def _image_style_keywords() -> List[str]:
    return ["modern", "elegant", "minimalist", "bold", "vibrant"]


def _image_color_keywords() -> List[str]:
    return ["red", "blue", "green", "yellow", "orange", "purple"]


def _composition_keywords() -> List[str]:
    return ["composition", "layout", "centered", "symmetrical"]


def _image_negative_keywords() -> List[str]:
    return ["low quality", "blurry"]


def _negative_prompt_keywords() -> List[str]:
    return [
        "low quality", "blurry", "distorted", "watermark", "text overlay",
        "unprofessional", "amateur", "pixelated", "artifacts",
    ]


def _positive_words() -> List[str]:
    return [
        "good", "great", "excellent", "amazing", "wonderful", "fantastic",
        "outstanding", "brilliant", "superb", "perfect", "love", "best",
        "happy", "beautiful", "innovative", "exciting", "powerful", "success",
        "successful", "premium", "quality", "professional", "trusted",
        "reliable", "efficient", "effective", "impressive", "remarkable",
        "exceptional", "superior",
    ]


def _negative_words() -> List[str]:
    return [
        "bad", "poor", "terrible", "awful", "horrible", "worst", "hate",
        "disappointing", "failed", "failure", "problem", "issue", "difficult",
        "complicated", "confusing", "expensive", "slow", "broken", "error",
        "mistake", "wrong", "weak", "limited", "frustrating", "annoying",
    ]


def _stop_words() -> List[str]:
    return [
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "from", "as", "is", "was", "are", "were", "been",
        "be", "have", "has", "had", "do", "does", "did", "will", "would",
        "could", "should", "may", "might", "must", "shall", "can", "this",
        "that", "these", "those", "i", "you", "he", "she", "it", "we", "they",
        "what", "which", "who", "whom", "whose", "where", "when", "why", "how",
        "all", "each", "every", "both", "few", "more", "most", "other", "some",
        "such", "no", "nor", "not", "only", "own", "same", "so", "than", "too",
        "very", "just", "also", "now", "here", "there", "then", "once", "your",
        "our", "their", "its", "my", "his", "her",
    ]


@dataclass(frozen=True)
class KeywordTables:
    """All heuristic vocabularies used by the offline scorers."""
    explicit_colors: Dict[str, str] = field(default_factory=_explicit_colors)
    mood_implied_colors: Dict[str, List[str]] = field(default_factory=_mood_implied_colors)
    color_fallbacks: List[List] = field(default_factory=_color_fallbacks)
    neutral_colors: List[str] = field(default_factory=lambda: ["blue", "gray", "white"])
    warm_colors: List[str] = field(default_factory=lambda: ["red", "orange", "yellow", "pink", "gold"])
    cool_colors: List[str] = field(default_factory=lambda: ["blue", "green", "purple", "teal", "navy", "silver"])
    palette_mood_keywords: Dict[str, List[str]] = field(default_factory=_palette_mood_keywords)
    style_keywords: Dict[str, List[str]] = field(default_factory=_style_keywords)
    visual_mood_keywords: Dict[str, List[str]] = field(default_factory=_visual_mood_keywords)
    complexity_style_words: List[str] = field(default_factory=_complexity_style_words)
    professional_words: List[str] = field(default_factory=_professional_words)
    image_quality_keywords: List[str] = field(default_factory=_image_quality_keywords)
    image_style_keywords: List[str] = field(default_factory=_image_style_keywords)
    image_color_keywords: List[str] = field(default_factory=_image_color_keywords)
    composition_keywords: List[str] = field(default_factory=_composition_keywords)
    image_negative_keywords: List[str] = field(default_factory=_image_negative_keywords)
    negative_prompt_keywords: List[str] = field(default_factory=_negative_prompt_keywords)
    positive_words: List[str] = field(default_factory=_positive_words)
    negative_words: List[str] = field(default_factory=_negative_words)
    stop_words: List[str] = field(default_factory=_stop_words)


DEFAULT_KEYWORDS = KeywordTables()


def load_keyword_tables(path: Optional[str] = None) -> KeywordTables:
    """
    Load keyword tables, overlaying a YAML file onto the defaults.

    Args:
        path: YAML file path. None or "" returns the defaults.

    Returns:
        KeywordTables instance

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file names unknown tables or isn't a mapping
    """
    if not path:
        return DEFAULT_KEYWORDS

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Keyword configuration not found at {config_path}")

    with open(config_path, 'r') as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Keyword configuration must be a mapping: {config_path}")

    known = {f.name for f in fields(KeywordTables)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown keyword tables in {config_path}: {', '.join(unknown)}")

    overrides = {}
    for name, value in raw.items():
        default = getattr(DEFAULT_KEYWORDS, name)
        if isinstance(default, dict) and isinstance(value, dict):
            # Dict tables merge per category; list tables are replaced
            merged = dict(default)
            merged.update(value)
            overrides[name] = merged
        else:
            overrides[name] = value

    logger.info(f"Loaded {len(overrides)} keyword table override(s) from {config_path}")
    return replace(DEFAULT_KEYWORDS, **overrides)
