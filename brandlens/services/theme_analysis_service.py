"""
Theme Analysis Service - offline brand profile extraction.

Derives a ThemeAnalysis (color palette, dominant styles, visual mood,
complexity, brand strength) from a theme's name, tags and inspirations
using keyword heuristics only. No network calls; the same theme always
produces the same analysis.

Usage:
    from brandlens.services.theme_analysis_service import ThemeAnalysisService

    analysis = ThemeAnalysisService().analyze_theme(theme)
"""

import logging
import re
from typing import Dict, List, Tuple

from ..core.keywords import DEFAULT_KEYWORDS, KeywordTables
from .models import ColorPalette, Theme, ThemeAnalysis

logger = logging.getLogger(__name__)

EXPLICIT_COLOR_WEIGHT = 3
IMPLIED_COLOR_WEIGHT = 2
FALLBACK_COLOR_WEIGHT = 1

STYLE_KEYWORD_POINTS = 20

# Tag/inspiration sanitisation
INJECTION_CHARS = frozenset("'\";<>")
MAX_TOKEN_LENGTH = 50


def _clamp(value: float) -> int:
    return int(max(0, min(100, round(value))))


def _contains(text: str, keyword: str) -> bool:
    """Whole-word / whole-phrase match"""
    return re.search(rf"(?<![\w-]){re.escape(keyword)}(?![\w-])", text) is not None


def sanitize_entries(entries: List[str]) -> Tuple[List[str], bool]:
    """
    Drop tag/inspiration entries that look like injection attempts or junk.

    Returns:
        (clean entries, whether any raw entry contained special characters)
    """
    clean = []
    suspicious = False

    for entry in entries:
        if any(ch in INJECTION_CHARS for ch in entry):
            suspicious = True
            continue
        stripped = entry.strip()
        if not stripped or len(stripped) > MAX_TOKEN_LENGTH:
            continue
        clean.append(stripped)

    return clean, suspicious


class ThemeAnalysisService:
    """Keyword-table driven theme analyzer."""

    def __init__(self, keywords: KeywordTables = DEFAULT_KEYWORDS):
        self.keywords = keywords

    def analyze_theme(self, theme: Theme) -> ThemeAnalysis:
        """
        Analyze a theme and extract its brand characteristics.

        Args:
            theme: Theme with name, tags and inspirations

        Returns:
            ThemeAnalysis with all numeric scores clamped to [0, 100]
        """
        logger.info(f"Analyzing theme \"{theme.name}\"")

        text = self._token_text(theme)

        color_palette = self.extract_color_palette(text)
        style_scores = self.calculate_style_scores(text)
        dominant_styles = self.dominant_styles(style_scores)
        visual_mood = self.determine_visual_mood(text)
        complexity_score = self.calculate_complexity_score(theme, text)
        brand_strength = self.calculate_brand_strength(theme)

        top_style_score = style_scores[dominant_styles[0]] if dominant_styles else 0
        style_score = _clamp(
            top_style_score * 0.4 + complexity_score * 0.3 + brand_strength * 0.3
        )

        return ThemeAnalysis(
            color_palette=color_palette,
            style_score=style_score,
            dominant_styles=dominant_styles,
            visual_mood=visual_mood,
            complexity_score=complexity_score,
            brand_strength=brand_strength,
        )

    @staticmethod
    def _token_text(theme: Theme) -> str:
        return " ".join([theme.name, *theme.tags, *theme.inspirations]).lower()

    # =========================================================================
    # Colors
    # =========================================================================

    def extract_color_palette(self, text: str) -> ColorPalette:
        weights: Dict[str, int] = {}

        for keyword, color in self.keywords.explicit_colors.items():
            if _contains(text, keyword):
                weights[color] = weights.get(color, 0) + EXPLICIT_COLOR_WEIGHT

        for adjective, colors in self.keywords.mood_implied_colors.items():
            if _contains(text, adjective):
                for color in colors:
                    weights[color] = weights.get(color, 0) + IMPLIED_COLOR_WEIGHT

        if not weights:
            fallback = self.keywords.neutral_colors
            for descriptor, colors in self.keywords.color_fallbacks:
                if _contains(text, descriptor):
                    fallback = colors
                    break
            for color in fallback:
                weights.setdefault(color, FALLBACK_COLOR_WEIGHT)

        # Stable sort keeps first-seen order among equal weights
        ranked = [color for color, _ in sorted(weights.items(), key=lambda kv: -kv[1])]

        return ColorPalette(
            primary=ranked[:2],
            secondary=ranked[2:4],
            accent=ranked[4:7],
            mood=self._palette_mood(ranked, text),
        )

    def _palette_mood(self, colors: List[str], text: str) -> str:
        warm = sum(1 for c in colors if c in self.keywords.warm_colors)
        cool = sum(1 for c in colors if c in self.keywords.cool_colors)

        if warm > cool:
            mood = "energetic"
        elif cool > warm:
            mood = "calm"
        else:
            mood = "neutral"

        # Explicit mood words override the color reading; last match wins
        for group, words in self.keywords.palette_mood_keywords.items():
            if any(_contains(text, w) for w in words):
                mood = group

        return mood

    # =========================================================================
    # Styles & mood
    # =========================================================================

    def calculate_style_scores(self, text: str) -> Dict[str, int]:
        scores = {}
        for style, words in self.keywords.style_keywords.items():
            hits = sum(1 for w in words if _contains(text, w))
            scores[style] = min(hits * STYLE_KEYWORD_POINTS, 100)
        return scores

    @staticmethod
    def dominant_styles(style_scores: Dict[str, int]) -> List[str]:
        ranked = sorted(style_scores.items(), key=lambda kv: -kv[1])
        return [style for style, score in ranked if score > 0][:3]

    def determine_visual_mood(self, text: str) -> str:
        best_mood = "balanced"
        best_hits = 0

        for mood, words in self.keywords.visual_mood_keywords.items():
            hits = sum(1 for w in words if _contains(text, w))
            if hits > best_hits:
                best_hits = hits
                best_mood = mood

        return best_mood

    # =========================================================================
    # Complexity & brand strength
    # =========================================================================

    def calculate_complexity_score(self, theme: Theme, text: str) -> int:
        score = 50
        score += min(len(theme.tags) * 5, 20)
        score += min(len(theme.inspirations) * 5, 15)

        if len(theme.name.split()) > 2:
            score += 10

        distinct_styles = sum(
            1 for w in set(self.keywords.complexity_style_words) if _contains(text, w)
        )
        if distinct_styles > 2:
            score += 15

        return _clamp(score)

    def calculate_brand_strength(self, theme: Theme) -> int:
        tags, tags_suspicious = sanitize_entries(theme.tags)
        inspirations, insp_suspicious = sanitize_entries(theme.inspirations)

        score = 20

        meaningful_tags = [t for t in tags if len(t) > 2 and not t.replace(".", "").isdigit()]
        if len(meaningful_tags) >= 5:
            score += 25
        elif len(meaningful_tags) >= 3:
            score += 15

        if len(inspirations) >= 3:
            score += 20
        elif len(inspirations) >= 1:
            score += 10

        if len(theme.name.split()) > 1:
            score += 15

        clean_text = " ".join([theme.name, *tags, *inspirations]).lower()

        if any(_contains(clean_text, c) for c in self.keywords.explicit_colors):
            score += 10

        style_words = {w for words in self.keywords.style_keywords.values() for w in words}
        if any(_contains(clean_text, w) for w in style_words):
            score += 10

        if tags_suspicious or insp_suspicious:
            logger.warning(f"Theme \"{theme.name}\" contains special characters in tags/inspirations")
            score -= 15

        return _clamp(score)
