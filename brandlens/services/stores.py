"""
Collaborator stores backed by Supabase.

Tables:
    contents    generated content items (owned by the generation pipeline)
    projects    project records, each linked to one theme via theme_id
    themes      brand themes
    embeddings  content_id -> vector cache (pgvector column)

"Not found" is reported as None / an empty list. A failing store call
raises InternalError.

Usage:
    from brandlens.core.database import get_supabase_client
    from brandlens.services.stores import ContentStore

    contents = ContentStore(get_supabase_client())
    items = contents.list_by_project(project_id)
"""

import logging
from typing import List, Optional

from supabase import Client

from ..core.database import run_query
from .models import ContentItem, EmbeddingRecord, Project, ProjectTheme, Theme

logger = logging.getLogger(__name__)

# PostgREST puts IN filters in the URL; keep batches short
ID_BATCH_SIZE = 100


class ContentStore:
    """Read access to generated content."""

    def __init__(self, supabase_client: Client):
        self.client = supabase_client

    def get_by_id(self, content_id: str) -> Optional[ContentItem]:
        rows = run_query(
            self.client.table("contents").select("*").eq("id", content_id),
            f"get content {content_id}"
        )
        return ContentItem(**rows[0]) if rows else None

    def list_by_project(self, project_id: str) -> List[ContentItem]:
        rows = run_query(
            self.client.table("contents").select("*").eq("project_id", project_id),
            f"list content for project {project_id}"
        )
        return [ContentItem(**row) for row in rows]

    def get_by_ids(self, content_ids: List[str]) -> List[ContentItem]:
        """
        Fetch several content items.

        Results follow the order of ``content_ids``; unknown IDs are skipped.
        """
        by_id = {}
        for i in range(0, len(content_ids), ID_BATCH_SIZE):
            batch = content_ids[i:i + ID_BATCH_SIZE]
            rows = run_query(
                self.client.table("contents").select("*").in_("id", batch),
                f"get {len(batch)} content items"
            )
            for row in rows:
                by_id[str(row["id"])] = ContentItem(**row)

        ordered = []
        seen = set()
        for content_id in content_ids:
            if content_id in by_id and content_id not in seen:
                ordered.append(by_id[content_id])
                seen.add(content_id)
        return ordered


class ProjectThemeStore:
    """Resolves a project together with its linked theme."""

    def __init__(self, supabase_client: Client):
        self.client = supabase_client

    def get_project(self, project_id: str) -> Optional[Project]:
        rows = run_query(
            self.client.table("projects").select("*").eq("id", project_id),
            f"get project {project_id}"
        )
        return Project(**rows[0]) if rows else None

    def get_theme(self, theme_id: str) -> Optional[Theme]:
        rows = run_query(
            self.client.table("themes").select("*").eq("id", theme_id),
            f"get theme {theme_id}"
        )
        return Theme(**rows[0]) if rows else None

    def get_project_and_theme(self, project_id: str) -> Optional[ProjectTheme]:
        """
        Fetch a project and its theme as one unit.

        Returns:
            ProjectTheme, or None if the project or its theme is missing
        """
        logger.info(f"Resolving project and theme for {project_id}")

        project = self.get_project(project_id)
        if project is None:
            logger.warning(f"Project not found: {project_id}")
            return None

        if not project.theme_id:
            logger.warning(f"Project {project_id} has no theme")
            return None

        theme = self.get_theme(project.theme_id)
        if theme is None:
            logger.warning(f"Theme not found for project: {project_id}")
            return None

        return ProjectTheme(project=project, theme=theme)


class EmbeddingStore:
    """Content embedding cache."""

    def __init__(self, supabase_client: Client):
        self.client = supabase_client

    def get_by_content_id(self, content_id: str) -> Optional[List[float]]:
        """Return the most recent stored vector for a content item, if any."""
        rows = run_query(
            self.client.table("embeddings").select("*").eq(
                "content_id", content_id
            ).order("created_at", desc=True).limit(1),
            f"get embedding for content {content_id}"
        )
        if not rows:
            return None
        return EmbeddingRecord(**rows[0]).embedding

    def create(
        self,
        content_id: str,
        vector: List[float],
        text: str,
        media_type: str = "text"
    ) -> EmbeddingRecord:
        record = EmbeddingRecord(
            content_id=content_id,
            embedding=vector,
            text_content=text,
            media_type=media_type,
        )
        rows = run_query(
            self.client.table("embeddings").insert(
                record.model_dump(exclude_none=True, mode="json")
            ),
            f"create embedding for content {content_id}"
        )
        return EmbeddingRecord(**rows[0]) if rows else record
