"""
Supabase client and query helpers shared by the collaborator stores.
"""

import logging
from typing import Any, List, Optional

from supabase import create_client, Client

from .config import Config
from ..services.errors import InternalError

logger = logging.getLogger(__name__)

_supabase_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get or create the Supabase client (singleton).

    Raises:
        ValueError: If SUPABASE_URL / SUPABASE_SERVICE_KEY are not configured
    """
    global _supabase_client

    if _supabase_client is None:
        Config.validate()
        _supabase_client = create_client(
            Config.SUPABASE_URL,
            Config.SUPABASE_SERVICE_KEY
        )

    return _supabase_client


def reset_supabase_client():
    """Drop the cached client so the next call re-reads configuration."""
    global _supabase_client
    _supabase_client = None


def run_query(query: Any, description: str) -> List[dict]:
    """
    Execute a postgrest query builder and return its rows.

    Args:
        query: Query builder from ``client.table(...)...``
        description: Short label used in logs and error messages

    Returns:
        List of row dicts (empty when nothing matched)

    Raises:
        InternalError: If the store call itself fails
    """
    try:
        result = query.execute()
    except Exception as e:
        logger.error(f"Store query failed ({description}): {e}", exc_info=True)
        raise InternalError(f"Store query failed: {description}") from e

    return result.data or []
