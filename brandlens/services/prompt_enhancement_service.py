"""
Prompt Enhancement Service - brand-aware prompt construction.

Pure functions over a RAG context and a theme analysis: enhance a user
prompt, build a branded image prompt with its negative prompt, and
estimate how well a generation from that prompt will turn out.
No generation calls are made here.
"""

import logging
from typing import Dict, List, Optional

from ..core.keywords import DEFAULT_KEYWORDS, KeywordTables
from .models import RAGContext, ThemeAnalysis

logger = logging.getLogger(__name__)

MAX_EXAMPLES = 2
EXAMPLE_MIN_CHARS = 20
EXAMPLE_MAX_CHARS = 200
DESCRIPTION_MIN_CHARS = 10
DESCRIPTION_MAX_CHARS = 150

QUALITY_MODIFIERS = "high quality, professional, marketing-ready, detailed"


def _join_naturally(items: List[str]) -> str:
    if len(items) == 1:
        return items[0]
    return f"{', '.join(items[:-1])} and {items[-1]}"


class PromptEnhancementService:
    """Enhances prompts with retrieved context and theme analysis."""

    def __init__(self, keywords: KeywordTables = DEFAULT_KEYWORDS):
        self.keywords = keywords

    def enhance_prompt_with_rag(
        self,
        user_prompt: str,
        rag_context: RAGContext,
        analysis: ThemeAnalysis
    ) -> str:
        """
        Merge the user's prompt with retrieved examples and the brand profile.

        Args:
            user_prompt: Prompt as typed by the user
            rag_context: Retrieved reference content
            analysis: Theme analysis (palette, mood, styles)

        Returns:
            Single comma-joined prompt string
        """
        enhancements = []

        if rag_context.relevant_content:
            examples = [
                item.scoring_text()
                for item in rag_context.relevant_content[:MAX_EXAMPLES]
            ]
            examples = [e[:EXAMPLE_MAX_CHARS] for e in examples if len(e) > EXAMPLE_MIN_CHARS]
            if examples:
                enhancements.append(
                    'matching the style of previous successful content: "'
                    + '" and "'.join(examples) + '"'
                )
        elif rag_context.similar_descriptions:
            descriptions = [
                d[:DESCRIPTION_MAX_CHARS]
                for d in rag_context.similar_descriptions[:MAX_EXAMPLES]
            ]
            descriptions = [d for d in descriptions if len(d) > DESCRIPTION_MIN_CHARS]
            if descriptions:
                enhancements.append(
                    'drawing inspiration from previous brand prompts: "'
                    + '" and "'.join(descriptions) + '"'
                )

        palette = analysis.color_palette
        color_parts = []
        if palette.primary:
            color_parts.append(" and ".join(palette.primary))
        if palette.secondary:
            color_parts.append(" and ".join(palette.secondary))
        if palette.accent:
            color_parts.append(f"{' and '.join(palette.accent)} accents")
        if color_parts:
            enhancements.append(f"featuring {', '.join(color_parts)}")

        enhancements.append(f"with a {analysis.visual_mood} atmosphere")

        styles = [s for s in analysis.dominant_styles if s]
        if styles:
            enhancements.append(f"in {_join_naturally(styles)} style")

        enhanced = ", ".join(p for p in [user_prompt, *enhancements] if p)
        logger.info(f"Prompt enhanced: {len(user_prompt)} -> {len(enhanced)} chars")
        return enhanced

    def build_branded_prompt(
        self,
        user_prompt: str,
        project_name: str,
        project_description: str,
        theme_inspirations: List[str],
        style_preferences: Optional[Dict[str, str]] = None,
        target_audience: str = "general"
    ) -> Dict[str, str]:
        """
        Build a branded image prompt and matching negative prompt.

        Recognised style preferences: ``composition``, ``lighting``, ``avoid``.

        Returns:
            {"prompt": ..., "negative_prompt": ...}
        """
        prefs = style_preferences or {}

        parts = [
            user_prompt,
            f"inspired by {' and '.join(theme_inspirations[:2])}" if theme_inspirations else "",
            f"for {project_name}: {project_description}",
            f"designed for {target_audience or 'general'} audience",
            QUALITY_MODIFIERS,
            f"{prefs['composition']} composition" if prefs.get("composition") else "",
            f"{prefs['lighting']} lighting" if prefs.get("lighting") else "",
        ]
        prompt = ", ".join(p for p in parts if p)

        negative_prompt = ", ".join(
            p for p in [*self.keywords.negative_prompt_keywords, prefs.get("avoid", "")] if p
        )

        logger.info(f"Built branded prompt ({len(prompt)} chars)")
        return {"prompt": prompt, "negative_prompt": negative_prompt}

    @staticmethod
    def score_rag_quality(
        analysis: ThemeAnalysis,
        rag_context: RAGContext,
        prompt_length: int
    ) -> int:
        """
        Estimate expected generation quality for an enhanced prompt.

        Args:
            analysis: Theme analysis (brand strength, complexity)
            rag_context: Retrieval context (average similarity)
            prompt_length: Prompt length in characters (~5 chars per word)

        Returns:
            Integer in [0, 100]
        """
        score = 50 + analysis.brand_strength * 0.2

        avg = rag_context.avg_similarity
        if avg > 0.7:
            score += 15
        elif avg > 0.5:
            score += 10
        elif avg > 0.3:
            score += 5

        word_count = max(0, round(prompt_length / 5))
        if 20 <= word_count <= 80:
            score += 10

        if analysis.complexity_score > 70:
            score += 5

        return int(max(0, min(100, round(score))))
