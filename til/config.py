"""
Configuration settings for the Today I Learned board.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    # App Settings
    app_name: str = "Today I Learned"
    app_version: str = "0.1.0"
    debug: bool = False
    
    # Local database (used when no hosted store is configured)
    database_url: str = "sqlite:///./today_i_learned.db"
    
    # Hosted store (PostgREST / Supabase)
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    store_timeout_seconds: float = 10.0
    
    # Board limits
    fact_limit: int = 1000  # Row cap for a single board load
    
    allowed_origins: str = "http://localhost:8000,http://localhost:3000"
    
    # Logging
    log_level: str = "INFO"
    
    class Config:
        env_file = ".env"
        env_prefix = "TIL_"
    
    @property
    def uses_hosted_store(self) -> bool:
        return bool(self.supabase_url)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
