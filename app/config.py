"""
Application settings for the storefront API.

Every value can be overridden from the environment (or a ``.env``
file) using the ``STOREFRONT_`` prefix, e.g. ``STOREFRONT_LOG_LEVEL=DEBUG``
or ``STOREFRONT_LOAD_SAMPLE_DATA=false``.
"""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SAMPLE_DATA = Path(__file__).resolve().parent / "data" / "sample_store.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_", env_file=".env", case_sensitive=False
    )

    app_title: str = "Storefront API"
    log_level: str = "INFO"

    # Seed data
    load_sample_data: bool = True
    sample_data_path: Path = DEFAULT_SAMPLE_DATA

    # Mock auth: every request acts on behalf of this user
    demo_user_id: int = 1

    # Catalog
    default_page_size: int = 10
    max_page_size: int = 100
    featured_limit: int = 4

    # Checkout
    tax_rate: float = 0.10
    free_shipping_threshold: float = 100.0
    payment_delay_seconds: float = 0.3

    cors_origins: List[str] = ["http://localhost:5173"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
