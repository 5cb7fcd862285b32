"""Configuration management using Pydantic Settings"""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database (a file-backed store; ":memory:" is only for throwaway runs)
    database_url: str = "sqlite:///./legal_collections.db"
    db_pool_size: int = 10
    db_max_overflow: int = 10
    db_pool_recycle_seconds: int = 3600
    seed_sample_data: bool = True

    # Service
    service_name: str = "legal-collections-api"
    version: str = "2.0.0"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False  # Exposes raw storage errors in responses

    # Domain
    instrument_types: List[str] = ["CHECK", "PROMISSORY_NOTE", "INVOICE"]
    default_interest_rate: float = 5.0
    upcoming_window_days: int = 7  # Calendar days counted from today, today included


settings = Settings()
