"""
Configuration management for BrandLens
"""

import os
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_flag(name: str, default: str = 'true') -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Application configuration"""

    # Supabase
    SUPABASE_URL: str = os.getenv('SUPABASE_URL', '')
    SUPABASE_SERVICE_KEY: str = os.getenv('SUPABASE_SERVICE_KEY', '')

    # Gemini embeddings
    GEMINI_API_KEY: str = os.getenv('GEMINI_API_KEY') or os.getenv('GOOGLE_GEMINI_API_KEY', '')
    EMBEDDINGS_ENABLED: bool = _env_flag('EMBEDDINGS_ENABLED')
    EMBED_MODEL: str = os.getenv('EMBED_MODEL', 'gemini-embedding-001')
    EMBED_DIM: int = int(os.getenv('EMBED_DIM', '768'))

    # Ranking
    RANK_CONCURRENCY: int = int(os.getenv('RANK_CONCURRENCY', '5'))
    RAG_TOP_K: int = int(os.getenv('RAG_TOP_K', '5'))

    # Optional YAML override for the heuristic keyword tables
    KEYWORDS_PATH: str = os.getenv('BRANDLENS_KEYWORDS_PATH', '')

    # API
    API_KEY: str = os.getenv('BRANDLENS_API_KEY', '')
    CORS_ORIGINS: str = os.getenv('CORS_ORIGINS', '*')
    RATE_LIMIT_PER_MINUTE: int = int(os.getenv('RATE_LIMIT_PER_MINUTE', '30'))

    # Scoring policy (fixed, not read from the environment)
    BRAND_WEIGHT: float = 0.6
    QUALITY_WEIGHT: float = 0.4
    PASS_THRESHOLD: int = 70

    @classmethod
    def validate(cls) -> bool:
        """Validate required configuration"""
        required = {
            'SUPABASE_URL': cls.SUPABASE_URL,
            'SUPABASE_SERVICE_KEY': cls.SUPABASE_SERVICE_KEY,
        }

        missing = [k for k, v in required.items() if not v]

        if missing:
            raise ValueError(f"Missing required configuration: {', '.join(missing)}")

        return True

    @classmethod
    def embeddings_available(cls) -> bool:
        """True when the remote embedding provider is enabled and has a key"""
        return cls.EMBEDDINGS_ENABLED and bool(cls.GEMINI_API_KEY)

    @classmethod
    def get(cls, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get configuration value"""
        return getattr(cls, key, default)
