"""
Content Analysis Service - deeper text metrics beyond the quality heuristics.

Provides:
- Readability (Flesch reading ease, Flesch-Kincaid grade level)
- Brand keyword density against the theme
- Lexicon-based sentiment
- Structure (sentences, words, paragraphs)
- Diversity across generated variants (pairwise Jaccard)
- Composite ranking of variants
"""

import logging
import re
from collections import Counter
from itertools import combinations
from typing import List, Set

from ..core.keywords import DEFAULT_KEYWORDS, KeywordTables
from .models import (
    ContentAnalysis,
    DiversityAnalysis,
    KeywordCount,
    KeywordDensity,
    Readability,
    Sentiment,
    TextStructure,
    Theme,
    VariantRanking,
)

logger = logging.getLogger(__name__)

DUPLICATE_THRESHOLD = 0.7

# Composite variant weights
VARIANT_WEIGHTS = {
    "base_quality": 0.3,
    "readability": 0.2,
    "sentiment_positive": 0.15,
    "keyword_density": 0.15,
    "structure": 0.1,
    "sentence_variety": 0.1,
}

_WORD = re.compile(r"\b[a-zA-Z]+\b")
_SENTENCE_END = re.compile(r"[.!?]+")
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def _words(text: str) -> List[str]:
    return _WORD.findall(text or "")


def _count_sentences(text: str) -> int:
    return len(_SENTENCE_END.findall(text or "")) or 1


def count_syllables(word: str) -> int:
    """Vowel-group syllable estimate with a silent-e adjustment."""
    word = word.lower()
    if len(word) <= 3:
        return 1

    word = re.sub(r"(?:[^laeiouy]e)$", "", word)
    word = re.sub(r"^y", "", word)

    groups = re.findall(r"[aeiouy]+", word)
    return len(groups) or 1


def jaccard_similarity(a: Set[str], b: Set[str]) -> float:
    union = a | b
    return len(a & b) / len(union) if union else 0.0


class ContentAnalysisService:
    """Readability, keyword, sentiment and diversity analysis."""

    def __init__(self, keywords: KeywordTables = DEFAULT_KEYWORDS):
        self.keywords = keywords
        self._positive = set(keywords.positive_words)
        self._negative = set(keywords.negative_words)
        self._stop_words = set(keywords.stop_words)

    def analyze_content(self, text: str, theme: Theme) -> ContentAnalysis:
        """
        Perform comprehensive analysis on a piece of content.

        Args:
            text: The text content to analyze
            theme: Theme supplying brand keywords (tags, inspirations, name)

        Returns:
            ContentAnalysis with readability, keywords, sentiment, and structure
        """
        logger.info("Analyzing content")
        return ContentAnalysis(
            readability=self.calculate_readability(text),
            keyword_density=self.analyze_keyword_density(text, theme),
            sentiment=self.analyze_sentiment(text),
            structure=self.analyze_structure(text),
        )

    def calculate_readability(self, text: str) -> Readability:
        """
        Flesch reading ease and Flesch-Kincaid grade level.

        Reading ease: 206.835 - 1.015 * (words/sentences) - 84.6 * (syllables/words)
        Grade level:  0.39 * (words/sentences) + 11.8 * (syllables/words) - 15.59
        """
        words = _words(text)
        if not words:
            return Readability(score=0, grade_level=0.0, level="unknown")

        sentences = _count_sentences(text)
        syllables = sum(count_syllables(w) for w in words)

        words_per_sentence = len(words) / sentences
        syllables_per_word = syllables / len(words)

        ease = 206.835 - 1.015 * words_per_sentence - 84.6 * syllables_per_word
        score = int(max(0, min(100, round(ease))))

        grade = 0.39 * words_per_sentence + 11.8 * syllables_per_word - 15.59
        grade_level = max(0.0, round(grade, 1))

        if score >= 70:
            level = "easy"
        elif score >= 50:
            level = "moderate"
        else:
            level = "difficult"

        return Readability(score=score, grade_level=grade_level, level=level)

    def analyze_keyword_density(self, text: str, theme: Theme) -> KeywordDensity:
        words = _words(text)
        lower = (text or "").lower()

        brand_keywords = [
            k.lower().strip()
            for k in [*theme.tags, *theme.inspirations, *theme.name.split()]
        ]
        brand_keywords = [k for k in dict.fromkeys(brand_keywords) if len(k) > 2]

        brand_count = sum(
            len(re.findall(rf"\b{re.escape(k)}\b", lower)) for k in brand_keywords
        )
        percentage = (brand_count / len(words) * 100) if words else 0.0

        frequencies = Counter(
            w.lower() for w in words if w.lower() not in self._stop_words
        )
        top = [KeywordCount(word=w, count=c) for w, c in frequencies.most_common(5)]

        return KeywordDensity(
            brand_keyword_count=brand_count,
            brand_keyword_percentage=round(percentage, 2),
            top_keywords=top,
        )

    def analyze_sentiment(self, text: str) -> Sentiment:
        words = [w.lower() for w in _words(text)]
        positive = sum(1 for w in words if w in self._positive)
        negative = sum(1 for w in words if w in self._negative)
        total = positive + negative

        score = (positive - negative) / total if total else 0.0

        if score > 0.2:
            label = "positive"
        elif score < -0.2:
            label = "negative"
        else:
            label = "neutral"

        confidence = min(1.0, total / len(words) * 5) if words else 0.0

        return Sentiment(
            score=round(score, 2),
            label=label,
            confidence=round(confidence, 2),
        )

    def analyze_structure(self, text: str) -> TextStructure:
        words = _words(text)
        sentences = _count_sentences(text)
        paragraphs = [p for p in _PARAGRAPH_BREAK.split(text or "") if p.strip()]

        return TextStructure(
            sentence_count=sentences,
            word_count=len(words),
            avg_sentence_length=round(len(words) / sentences) if sentences else 0,
            paragraph_count=len(paragraphs),
        )

    def analyze_diversity(
        self,
        variants: List[str],
        similarity_threshold: float = DUPLICATE_THRESHOLD
    ) -> DiversityAnalysis:
        """
        Measure how different a set of variants are from each other.

        Args:
            variants: Content strings
            similarity_threshold: Jaccard similarity at or above which a pair
                counts as duplicate

        Returns:
            DiversityAnalysis
        """
        if len(variants) < 2:
            return DiversityAnalysis(
                avg_pairwise_similarity=0.0,
                diversity_score=100,
                unique_variant_count=len(variants),
                duplicate_pairs=[],
            )

        word_sets = [{w.lower() for w in _words(v)} for v in variants]
        similarities = []
        duplicates = []

        for i, j in combinations(range(len(word_sets)), 2):
            similarity = jaccard_similarity(word_sets[i], word_sets[j])
            similarities.append(similarity)
            if similarity >= similarity_threshold:
                duplicates.append((i, j))

        avg = sum(similarities) / len(similarities)
        duplicate_indices = {idx for pair in duplicates for idx in pair}

        logger.info(f"Diversity of {len(variants)} variants: {round((1 - avg) * 100)}, duplicates: {len(duplicates)}")

        return DiversityAnalysis(
            avg_pairwise_similarity=round(avg, 2),
            diversity_score=round((1 - avg) * 100),
            unique_variant_count=len(variants) - len(duplicate_indices),
            duplicate_pairs=duplicates,
        )

    def rank_variants(
        self,
        analyses: List[ContentAnalysis],
        quality_scores: List[int]
    ) -> List[VariantRanking]:
        """
        Order variants by a weighted composite of quality factors.

        Args:
            analyses: ContentAnalysis per variant
            quality_scores: Base quality score per variant (same order)

        Returns:
            Rankings, best first; ties keep input order

        Raises:
            ValueError: If the two lists differ in length
        """
        if len(analyses) != len(quality_scores):
            raise ValueError(
                f"Got {len(analyses)} analyses but {len(quality_scores)} quality scores"
            )

        rankings = []
        for index, (analysis, quality) in enumerate(zip(analyses, quality_scores)):
            raw = {
                "base_quality": quality,
                "readability": analysis.readability.score,
                "sentiment_positive": (analysis.sentiment.score + 1) * 50,
                "keyword_density": min(analysis.keyword_density.brand_keyword_percentage * 10, 100),
                "structure": min(analysis.structure.word_count / 2, 100),
                "sentence_variety": min(analysis.structure.sentence_count * 10, 100),
            }
            factors = {name: value * VARIANT_WEIGHTS[name] for name, value in raw.items()}
            rankings.append(VariantRanking(
                index=index,
                composite_score=round(sum(factors.values())),
                factors=factors,
            ))

        rankings.sort(key=lambda r: -r.composite_score)
        return rankings
