"""
Tests for PromptEnhancementService - prompt enrichment and quality estimate.
"""

import pytest

from brandlens.services.models import (
    ColorPalette,
    ContentItem,
    RAGContext,
    ThemeAnalysis,
)
from brandlens.services.prompt_enhancement_service import PromptEnhancementService


@pytest.fixture
def service():
    return PromptEnhancementService()


@pytest.fixture
def analysis():
    return ThemeAnalysis(
        color_palette=ColorPalette(primary=["white", "black"], secondary=["gray"], accent=[], mood="neutral"),
        style_score=58,
        dominant_styles=["modern", "minimalist"],
        visual_mood="innovative",
        complexity_score=70,
        brand_strength=70,
    )


class TestEnhancePrompt:
    def test_theme_only(self, service, analysis):
        prompt = service.enhance_prompt_with_rag("desk photo", RAGContext(), analysis)

        assert prompt == (
            "desk photo, featuring white and black, gray, "
            "with a innovative atmosphere, in modern and minimalist style"
        )

    def test_uses_previous_content(self, service, analysis):
        context = RAGContext(relevant_content=[
            ContentItem(id="a", project_id="p", text_content="A clean desk bathed in morning light"),
            ContentItem(id="b", project_id="p", media_type="image", prompt="short"),
        ])

        prompt = service.enhance_prompt_with_rag("desk photo", context, analysis)

        assert 'matching the style of previous successful content: "A clean desk bathed in morning light"' in prompt
        assert "short" not in prompt

    def test_examples_truncated(self, service, analysis):
        context = RAGContext(relevant_content=[
            ContentItem(id="a", project_id="p", text_content="x" * 500),
        ])

        prompt = service.enhance_prompt_with_rag("desk", context, analysis)

        assert "x" * 200 + '"' in prompt
        assert "x" * 201 not in prompt

    def test_falls_back_to_descriptions(self, service, analysis):
        context = RAGContext(similar_descriptions=["Modern Tech: modern, tech, clean inspired by Apple"])

        prompt = service.enhance_prompt_with_rag("desk", context, analysis)

        assert 'drawing inspiration from previous brand prompts: "Modern Tech' in prompt

    def test_three_styles_joined_naturally(self, service, analysis):
        analysis.dominant_styles = ["modern", "bold", "elegant"]

        prompt = service.enhance_prompt_with_rag("desk", RAGContext(), analysis)

        assert prompt.endswith("in modern, bold and elegant style")

    def test_accent_colors(self, service, analysis):
        analysis.color_palette.accent = ["gold"]

        prompt = service.enhance_prompt_with_rag("desk", RAGContext(), analysis)

        assert "featuring white and black, gray, gold accents" in prompt


class TestBuildBrandedPrompt:
    def test_full_prompt(self, service):
        result = service.build_branded_prompt(
            user_prompt="desk",
            project_name="Acme",
            project_description="Workspace app",
            theme_inspirations=["Apple", "Braun", "Dieter Rams"],
            style_preferences={"composition": "centered", "lighting": "soft", "avoid": "people"},
            target_audience="founders",
        )

        assert result["prompt"] == (
            "desk, inspired by Apple and Braun, for Acme: Workspace app, "
            "designed for founders audience, "
            "high quality, professional, marketing-ready, detailed, "
            "centered composition, soft lighting"
        )
        assert "blurry" in result["negative_prompt"]
        assert result["negative_prompt"].endswith("people")

    def test_minimal_prompt(self, service):
        result = service.build_branded_prompt("desk", "Acme", "Workspace app", [])

        assert "inspired by" not in result["prompt"]
        assert "designed for general audience" in result["prompt"]


class TestScoreRagQuality:
    def test_high_similarity(self, analysis):
        context = RAGContext(avg_similarity=0.8)
        # 50 + 70 * 0.2 + 15 + 10
        assert PromptEnhancementService.score_rag_quality(analysis, context, 200) == 89

    def test_low_similarity_short_prompt(self, analysis):
        context = RAGContext(avg_similarity=0.1)
        assert PromptEnhancementService.score_rag_quality(analysis, context, 10) == 64

    def test_complexity_bonus(self, analysis):
        analysis.complexity_score = 90
        context = RAGContext(avg_similarity=0.4)
        # 50 + 14 + 5 + 10 + 5
        assert PromptEnhancementService.score_rag_quality(analysis, context, 200) == 84

    def test_clamped(self, analysis):
        analysis.brand_strength = 100
        analysis.complexity_score = 100
        context = RAGContext(avg_similarity=1.0)
        assert PromptEnhancementService.score_rag_quality(analysis, context, 200) == 100
