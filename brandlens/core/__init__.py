"""
Core module - Database, configuration, embeddings and keyword tables
"""

from .database import get_supabase_client
from .config import Config

__all__ = ['get_supabase_client', 'Config']
