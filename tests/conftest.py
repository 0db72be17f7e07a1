"""
Shared fixtures: in-memory collaborator stores and an offline embedder.

The embedder is always constructed disabled, so every vector in the test
suite comes from the deterministic fallback and no network call is made.
"""

from typing import Dict, List, Optional

import pytest

from brandlens.core.embeddings import Embedder
from brandlens.services.errors import InternalError
from brandlens.services.models import ContentItem, Project, ProjectTheme, Theme


class FakeContentStore:
    def __init__(self, items: Optional[List[ContentItem]] = None, fail: bool = False):
        self.items = list(items or [])
        self.fail = fail

    def _check(self):
        if self.fail:
            raise InternalError("Store query failed: contents")

    def get_by_id(self, content_id: str) -> Optional[ContentItem]:
        self._check()
        return next((i for i in self.items if i.id == content_id), None)

    def list_by_project(self, project_id: str) -> List[ContentItem]:
        self._check()
        return [i for i in self.items if i.project_id == project_id]

    def get_by_ids(self, content_ids: List[str]) -> List[ContentItem]:
        self._check()
        by_id = {i.id: i for i in self.items}
        return [by_id[cid] for cid in dict.fromkeys(content_ids) if cid in by_id]


class FakeProjectThemeStore:
    def __init__(self, project_themes: Optional[List[ProjectTheme]] = None):
        self.by_project: Dict[str, ProjectTheme] = {
            pt.project.id: pt for pt in (project_themes or [])
        }

    def get_theme(self, theme_id: str) -> Optional[Theme]:
        for pt in self.by_project.values():
            if pt.theme.id == theme_id:
                return pt.theme
        return None

    def get_project_and_theme(self, project_id: str) -> Optional[ProjectTheme]:
        return self.by_project.get(project_id)


class FakeEmbeddingStore:
    def __init__(self, fail_reads: bool = False, fail_writes: bool = False):
        self.vectors: Dict[str, List[float]] = {}
        self.created: List[str] = []
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def get_by_content_id(self, content_id: str) -> Optional[List[float]]:
        if self.fail_reads:
            raise InternalError("Store query failed: embeddings")
        return self.vectors.get(content_id)

    def create(self, content_id: str, vector: List[float], text: str, media_type: str = "text"):
        if self.fail_writes:
            raise InternalError("Store query failed: create embedding")
        self.vectors[content_id] = vector
        self.created.append(content_id)


@pytest.fixture
def embedder():
    """Offline embedder; always returns fallback vectors."""
    return Embedder(api_key="", enabled=False)


@pytest.fixture
def modern_tech_theme():
    return Theme(
        id="theme-1",
        name="Modern Tech",
        tags=["modern", "tech", "clean"],
        inspirations=["Apple"],
    )


@pytest.fixture
def project():
    return Project(
        id="proj-1",
        theme_id="theme-1",
        name="Acme Workspace",
        description="A calm workspace app for focused teams",
        goals="Grow trial signups",
        customer_type="Startup founders",
    )


@pytest.fixture
def project_theme(project, modern_tech_theme):
    return ProjectTheme(project=project, theme=modern_tech_theme)


@pytest.fixture
def content_items():
    return [
        ContentItem(
            id="c-1",
            project_id="proj-1",
            text_content="Meet Acme. A modern, clean workspace built for startup founders who value focus.",
        ),
        ContentItem(
            id="c-2",
            project_id="proj-1",
            text_content="BUY NOW!!! HUGE SALE!!! DON'T MISS OUT!!!",
        ),
        ContentItem(
            id="c-3",
            project_id="proj-1",
            media_type="image",
            prompt="clean desk",
            enhanced_prompt="clean minimal desk setup, high quality, professional lighting, white and gray",
            media_url="https://cdn.example.com/c-3.png",
        ),
    ]


@pytest.fixture
def content_store(content_items):
    return FakeContentStore(content_items)


@pytest.fixture
def project_theme_store(project_theme):
    return FakeProjectThemeStore([project_theme])


@pytest.fixture
def embedding_store():
    return FakeEmbeddingStore()


@pytest.fixture
def failing_content_store():
    return FakeContentStore(fail=True)


@pytest.fixture
def flaky_embedding_store():
    """Embedding store whose reads and writes both fail."""
    return FakeEmbeddingStore(fail_reads=True, fail_writes=True)


@pytest.fixture
def empty_project_theme_store():
    return FakeProjectThemeStore()
