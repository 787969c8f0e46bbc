from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/jobradar.db"
    openai_api_key: str = ""

    # LLM settings
    chat_model: str = "gpt-4o-mini"
    embedding_model: str = "text-embedding-3-small"
    llm_timeout_seconds: float = 60.0
    llm_page_text_limit: int = 15000  # chars sent to the extractor

    # Scheduler
    scheduler_enabled: bool = True
    discovery_interval_hours: int = 6
    cleanup_cron_hour: int = 0
    discovery_strategy: str = "auto"  # "auto" | "ats" | "universal"

    # Batch runner
    freshness_window_hours: int = 24
    discovery_batch_size: int = 50
    max_successful_ingestions: int = 10
    politeness_delay_seconds: float = 2.0
    job_retention_days: int = 7

    # Outbound HTTP
    probe_timeout_seconds: float = 5.0
    page_fetch_timeout_seconds: float = 10.0
    ats_api_timeout_seconds: float = 10.0
    max_redirects: int = 3

    # Headless rendering
    render_timeout_ms: int = 30000
    render_body_timeout_ms: int = 10000

    # Embed new jobs during ingestion
    embed_ingested_jobs: bool = True

    cors_origins: list[str] = ["http://localhost:3000"]

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
