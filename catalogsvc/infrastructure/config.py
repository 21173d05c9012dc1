"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Storage
    store_backend: Literal["memory", "sql"] = "memory"
    database_url: str = "postgresql+asyncpg://catalog:catalog_dev_password@db:5432/catalog"

    # Caches (seconds / entries)
    cache_item_ttl_seconds: float = 600.0
    cache_item_max_entries: int = 500
    cache_industry_ttl_seconds: float = 300.0
    cache_industry_max_entries: int = 500
    cache_all_items_ttl_seconds: float = 120.0

    # Filtering
    description_prefix_threshold: int = 3

    # Sample data
    seed_sample_data: bool = False
    sample_data_count: int = 50

    # Logging
    log_level: str = "INFO"

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
