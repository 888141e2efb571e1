# Environment & configuration
# pydantic-settings reads .env = core/config.py

from typing import Optional
from pydantic import SecretStr, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# When running uvicorn / the worker directly on the host (no Docker),
# model_config.env_file=".env" picks up backend/.env

class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="",
        case_sensitive=False,
    )

    # ========= project config =========
    PROJECT_NAME: str = "Stylist Backend"
    ENVIRONMENT: str = "dev"
    API_PREFIX: str = "/api/v1"
    LOG_LEVEL: str = Field("INFO", alias="LOG_LEVEL")


    # ========= admin =========
    # X-Admin-Secret header for the admin job endpoints; empty disables them (401)
    ADMIN_SECRET: Optional[SecretStr] = Field(None, alias="ADMIN_SECRET")


    # ========= Database =========
    DATABASE_URL: str = Field(
        default="postgresql+psycopg://stylist:stylist@db:5432/stylist_dev",
        alias="DATABASE_URL",
    )
    EMBEDDING_DIMENSIONS: int = Field(1536, alias="EMBEDDING_DIMENSIONS")   # must match the vector(N) column


    # ========= Redis / job queue =========
    REDIS_URL: str = Field("redis://localhost:6379/0", alias="REDIS_URL")
    JOB_KEY_PREFIX: str = Field("backend2", alias="JOB_KEY_PREFIX")                   # key namespace shared with existing deployments
    ENRICHMENT_MAX_ATTEMPTS: int = Field(3, ge=1, alias="ENRICHMENT_MAX_ATTEMPTS")
    ENRICHMENT_PROCESSING_TTL_SEC: int = Field(300, ge=1, alias="ENRICHMENT_PROCESSING_TTL_SEC")  # bookkeeping only, nothing acts on expiry


    # ========= worker =========
    WORKER_POLL_INTERVAL_MS: int = Field(2000, ge=10, alias="WORKER_POLL_INTERVAL_MS")
    WORKER_IDLE_LOG_EVERY: int = Field(30, ge=1, alias="WORKER_IDLE_LOG_EVERY")        # log "idle" every N empty polls


    # ========= LLM (OpenAI) =========
    OPENAI_API_KEY: Optional[SecretStr] = Field(None, alias="OPENAI_API_KEY")
    OPENAI_BASE_URL: Optional[str] = Field(None, alias="OPENAI_BASE_URL")
    LLM_MODEL: str = Field("gpt-4o-mini", alias="LLM_MODEL")
    EMBED_MODEL: str = Field("text-embedding-3-small", alias="EMBED_MODEL")
    LLM_TIMEOUT_SEC: int = Field(60, ge=1, alias="LLM_TIMEOUT_SEC")


    # ========= Shopify Admin API =========
    SHOPIFY_API_VERSION: str = Field("2025-01", alias="SHOPIFY_API_VERSION")
    SHOPIFY_SYNC_PAGE_SIZE: int = Field(50, ge=1, le=250, alias="SHOPIFY_SYNC_PAGE_SIZE")

    # network / HTTP layer
    SHOPIFY_HTTP_TIMEOUT: int = Field(30, alias="SHOPIFY_HTTP_TIMEOUT")
    SHOPIFY_HTTP_RETRIES: int = Field(3, alias="SHOPIFY_HTTP_RETRIES")
    SHOPIFY_HTTP_BACKOFF_MS: int = Field(200, alias="SHOPIFY_HTTP_BACKOFF_MS")


settings = Settings()  # env only (incl. .env)
