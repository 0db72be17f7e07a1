"""
Quality Scoring Service - structural quality heuristics for content.

Text is scored on length, sentence structure, word length, punctuation
discipline, capitalization and professional vocabulary. Image content is
scored through the prompt it was generated from, against the theme.
Scores are integers clamped to [0, 100].
"""

import logging
import re

from ..core.keywords import DEFAULT_KEYWORDS, KeywordTables
from .models import Theme

logger = logging.getLogger(__name__)

TEXT_BASELINE = 70
IMAGE_BASELINE = 60
EMPTY_TEXT_SCORE = 50
MAX_EXCLAMATIONS = 3
CAPS_RATIO_LIMIT = 0.1

_SENTENCE_SPLIT = re.compile(r"[.!?]+")


def _clamp(score: float) -> int:
    return int(max(0, min(100, round(score))))


class QualityScoringService:
    """Heuristic quality scorer for text and image prompts."""

    def __init__(self, keywords: KeywordTables = DEFAULT_KEYWORDS):
        self.keywords = keywords

    def score_text_quality(self, text: str) -> int:
        """
        Score text content quality.

        Args:
            text: Content text

        Returns:
            Integer score in [0, 100]; empty text gets a fixed neutral score
        """
        if not text or not text.strip():
            return EMPTY_TEXT_SCORE

        score = TEXT_BASELINE
        words = text.split()
        sentences = [s for s in _SENTENCE_SPLIT.split(text) if s.strip()]

        # Length
        if 20 <= len(words) <= 200:
            score += 10
        elif len(words) < 10 or len(words) > 300:
            score -= 10

        if len(sentences) >= 2:
            score += 5

        avg_word_length = sum(len(w) for w in words) / len(words)
        if 5 <= avg_word_length <= 8:
            score += 5

        if text.count("!") > MAX_EXCLAMATIONS:
            score -= 10

        caps_words = [w for w in words if len(w) > 2 and w.isupper()]
        if len(caps_words) > len(words) * CAPS_RATIO_LIMIT:
            score -= 10

        lower = text.lower()
        professional_count = sum(1 for pw in self.keywords.professional_words if pw in lower)
        score += min(professional_count * 3, 10)

        return _clamp(score)

    def score_image_quality(self, prompt_text: str, theme: Theme) -> int:
        """
        Score image content through its generation prompt.

        Args:
            prompt_text: Enhanced or original prompt of the image
            theme: Theme whose tags/inspirations the prompt should echo

        Returns:
            Integer score in [0, 100]
        """
        if not prompt_text or not prompt_text.strip():
            return EMPTY_TEXT_SCORE

        score = IMAGE_BASELINE
        lower = prompt_text.lower()
        words = prompt_text.split()

        if 10 <= len(words) <= 50:
            score += 15
        elif len(words) < 5:
            score -= 15
        elif len(words) > 100:
            score -= 10

        tag_hits = [t for t in theme.tags if t.strip() and t.lower() in lower]
        score += min(len(tag_hits) * 5, 20)

        quality_hits = [k for k in self.keywords.image_quality_keywords if k in lower]
        score += min(len(quality_hits) * 4, 12)

        style_hits = [k for k in self.keywords.image_style_keywords if k in lower]
        score += min(len(style_hits) * 3, 10)

        if any(k in lower for k in self.keywords.image_color_keywords):
            score += 8

        if any(k in lower for k in self.keywords.composition_keywords):
            score += 5

        if any(k in lower for k in self.keywords.image_negative_keywords):
            score -= 20

        inspiration_hits = [i for i in theme.inspirations if i.strip() and i.lower() in lower]
        score += min(len(inspiration_hits) * 6, 15)

        final = _clamp(score)
        logger.info(f"Image quality score: {final}")
        return final
