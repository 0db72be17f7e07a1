"""
Tests for RankingService - batch scoring, ordering and summary.

Tests: selector rules, not-found handling, ordering and ranks, limit vs.
summary totals, per-item failure isolation, stable ties, bounded
concurrency and recommendation bands.
"""

import asyncio
import time

import pytest
from unittest.mock import MagicMock

from brandlens.services.errors import InternalError, InvalidArgumentError, NotFoundError
from brandlens.services.models import ContentItem
from brandlens.services.ranking_service import (
    UNSCORED_RECOMMENDATION,
    RankingService,
    recommendation_for,
)


@pytest.fixture
def service(content_store, project_theme_store, embedding_store, embedder):
    return RankingService(content_store, project_theme_store, embedding_store, embedder=embedder)


class SlowEmbeddingStore:
    """Blocking store, like the synchronous supabase client."""

    def __init__(self, latency: float):
        self.latency = latency

    def get_by_content_id(self, content_id):
        time.sleep(self.latency)
        return None

    def create(self, content_id, vector, text, media_type="text"):
        time.sleep(self.latency)


def _store_with(items):
    store = MagicMock()
    store.list_by_project.return_value = items
    store.get_by_ids.side_effect = lambda ids: [i for i in items if i.id in ids]
    return store


# ============================================================================
# Selector rules
# ============================================================================

class TestSelectors:
    @pytest.mark.asyncio
    async def test_empty_content_ids(self, service):
        with pytest.raises(InvalidArgumentError):
            await service.rank(content_ids=[])

    @pytest.mark.asyncio
    async def test_nothing_given(self, service):
        with pytest.raises(InvalidArgumentError):
            await service.rank()

    @pytest.mark.asyncio
    async def test_both_given(self, service):
        with pytest.raises(InvalidArgumentError, match="not both"):
            await service.rank(project_id="proj-1", content_ids=["c-1"])

    @pytest.mark.asyncio
    async def test_project_with_empty_ids_allowed(self, service):
        result = await service.rank(project_id="proj-1", content_ids=[])
        assert result.summary.total_ranked == 3

    @pytest.mark.asyncio
    async def test_negative_limit(self, service):
        with pytest.raises(InvalidArgumentError, match="limit"):
            await service.rank(project_id="proj-1", limit=-1)

    @pytest.mark.asyncio
    async def test_missing_project(self, service):
        with pytest.raises(NotFoundError):
            await service.rank(project_id="missing")

    @pytest.mark.asyncio
    async def test_unknown_content_ids(self, service):
        with pytest.raises(NotFoundError):
            await service.rank(content_ids=["nope-1", "nope-2"])

    @pytest.mark.asyncio
    async def test_content_ids_with_unresolvable_project(
        self, empty_project_theme_store, content_store, embedding_store, embedder
    ):
        service = RankingService(content_store, empty_project_theme_store, embedding_store, embedder=embedder)
        with pytest.raises(NotFoundError):
            await service.rank(content_ids=["c-1"])

    @pytest.mark.asyncio
    async def test_list_failure_is_internal(
        self, failing_content_store, project_theme_store, embedding_store, embedder
    ):
        service = RankingService(failing_content_store, project_theme_store, embedding_store, embedder=embedder)
        with pytest.raises(InternalError):
            await service.rank(project_id="proj-1")


# ============================================================================
# Ordering & summary
# ============================================================================

class TestRanking:
    @pytest.mark.asyncio
    async def test_project_ranking(self, service):
        result = await service.rank(project_id="proj-1")

        entries = result.ranked_content
        assert [e.rank for e in entries] == [1, 2, 3]
        scores = [e.overall_score for e in entries]
        assert scores == sorted(scores, reverse=True)
        assert {e.content_id for e in entries} == {"c-1", "c-2", "c-3"}

        summary = result.summary
        assert summary.total_ranked == 3
        assert summary.scored == 3
        assert summary.failed == 0
        assert summary.project_id == "proj-1"
        assert summary.theme_id == "theme-1"
        assert summary.top_score == scores[0]
        assert summary.average_score == round(sum(scores) / 3)

    @pytest.mark.asyncio
    async def test_overall_is_weighted_blend(self, service):
        result = await service.rank(project_id="proj-1")

        for entry in result.ranked_content:
            expected = round(0.6 * entry.brand_consistency_score + 0.4 * entry.quality_score)
            assert entry.overall_score == expected

    @pytest.mark.asyncio
    async def test_entries_carry_content_fields(self, service):
        result = await service.rank(content_ids=["c-3"])

        entry = result.ranked_content[0]
        assert entry.media_type == "image"
        assert entry.media_url == "https://cdn.example.com/c-3.png"
        assert entry.recommendation

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit,expected", [(None, 3), (0, 0), (1, 1), (2, 2), (10, 3)])
    async def test_limit_does_not_change_totals(self, service, limit, expected):
        result = await service.rank(project_id="proj-1", limit=limit)

        assert len(result.ranked_content) == expected
        assert result.summary.total_ranked == 3

    @pytest.mark.asyncio
    async def test_limit_keeps_best(self, service):
        full = await service.rank(project_id="proj-1")
        top = await service.rank(project_id="proj-1", limit=1)

        assert top.ranked_content[0].content_id == full.ranked_content[0].content_id

    @pytest.mark.asyncio
    async def test_empty_project(self, project_theme_store, embedding_store, embedder):
        service = RankingService(_store_with([]), project_theme_store, embedding_store, embedder=embedder)

        result = await service.rank(project_id="proj-1")

        assert result.ranked_content == []
        assert result.summary.total_ranked == 0
        assert result.summary.theme_id == "theme-1"
        assert result.summary.message

    @pytest.mark.asyncio
    async def test_ties_keep_original_order(self, project_theme_store, embedding_store, embedder):
        items = [
            ContentItem(id=f"x{i}", project_id="proj-1", text_content="Same words in every item.")
            for i in range(1, 5)
        ]
        service = RankingService(_store_with(items), project_theme_store, embedding_store, embedder=embedder)

        result = await service.rank(project_id="proj-1")

        assert [e.content_id for e in result.ranked_content] == ["x1", "x2", "x3", "x4"]


# ============================================================================
# Failure isolation & concurrency
# ============================================================================

class TestFailureIsolation:
    @pytest.mark.asyncio
    async def test_poisoned_item_ranked_with_zero(self, service, embedder, monkeypatch):
        original = embedder.resolve_content_embedding

        async def poisoned(item, store):
            if item.id == "c-2":
                raise RuntimeError("corrupt record")
            return await original(item, store)

        monkeypatch.setattr(embedder, "resolve_content_embedding", poisoned)

        result = await service.rank(project_id="proj-1")

        assert result.summary.total_ranked == 3
        assert result.summary.failed == 1
        assert result.summary.scored == 2

        failed = [e for e in result.ranked_content if e.content_id == "c-2"][0]
        assert failed.overall_score == 0
        assert failed.brand_consistency_score == 0
        assert failed.quality_score == 0
        assert failed.recommendation == UNSCORED_RECOMMENDATION
        assert failed.scored is False
        assert result.ranked_content[-1].content_id == "c-2"

        scores = [e.overall_score for e in result.ranked_content]
        assert result.summary.average_score == round(sum(scores) / 3)

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, service, embedder, monkeypatch):
        async def cancelled(item, store):
            raise asyncio.CancelledError()

        monkeypatch.setattr(embedder, "resolve_content_embedding", cancelled)

        with pytest.raises(asyncio.CancelledError):
            await service.rank(project_id="proj-1")

    @pytest.mark.asyncio
    async def test_concurrency_bounded(self, project_theme_store, embedding_store, embedder, monkeypatch):
        items = [
            ContentItem(id=f"c{i}", project_id="proj-1", text_content=f"Item number {i}")
            for i in range(8)
        ]
        service = RankingService(
            _store_with(items), project_theme_store, embedding_store,
            embedder=embedder, concurrency=2,
        )
        original = embedder.resolve_content_embedding
        active = 0
        peak = 0

        async def tracked(item, store):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return await original(item, store)

        monkeypatch.setattr(embedder, "resolve_content_embedding", tracked)

        result = await service.rank(project_id="proj-1")

        assert result.summary.total_ranked == 8
        assert peak <= 2


# ============================================================================
# Recommendations
# ============================================================================

class TestRecommendations:
    @pytest.mark.parametrize("overall,brand,prefix", [
        (90, 90, "Excellent"),
        (85, 50, "Excellent"),
        (70, 70, "Good"),
        (60, 50, "Acceptable - Quality is good"),
        (60, 70, "Acceptable - Brand alignment is good"),
        (49, 90, "Needs improvement"),
    ])
    def test_bands(self, overall, brand, prefix):
        assert recommendation_for(overall, brand).startswith(prefix)


# ============================================================================
# Event loop
# ============================================================================

class TestStoreCallsOffEventLoop:
    @pytest.mark.asyncio
    async def test_blocking_store_calls_overlap(self, project_theme_store, embedder):
        items = [
            ContentItem(id=f"s{i}", project_id="proj-1", text_content=f"Slow item {i}")
            for i in range(5)
        ]
        service = RankingService(
            _store_with(items), project_theme_store, SlowEmbeddingStore(0.1),
            embedder=embedder, concurrency=5,
        )

        started = time.perf_counter()
        result = await service.rank(project_id="proj-1")
        elapsed = time.perf_counter() - started

        assert result.summary.scored == 5
        # One lookup + one write per item; run serially this would take ~1s
        assert elapsed < 0.6
