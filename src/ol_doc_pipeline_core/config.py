from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ol_doc_pipeline_core.dedup import SIMILARITY_THRESHOLD
from ol_doc_pipeline_core.extractor import DEFAULT_EXTRACTION_MODEL
from ol_doc_pipeline_core.page_processor import (
    CONCURRENCY_LIMIT,
    MAX_RETRIES,
    RETRY_BACKOFF_S,
    PageProcessingConfig,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    pg_dsn: str | None = Field(default=None, alias="PG_DSN")
    db_schema: str = Field(default="ai", alias="DB_SCHEMA")

    s3_endpoint: str = Field(alias="S3_ENDPOINT")
    s3_bucket: str = Field(alias="S3_BUCKET")
    s3_access_key: str = Field(default="", alias="S3_ACCESS_KEY")
    s3_secret_key: str = Field(default="", alias="S3_SECRET_KEY")
    s3_prefix: str = Field(default="documents", alias="S3_PREFIX")

    llm_base_url: str = Field(default="https://openrouter.ai/api", alias="LLM_BASE_URL")
    llm_api_key: str | None = Field(default=None, alias="LLM_API_KEY")
    extraction_model: str = Field(default=DEFAULT_EXTRACTION_MODEL, alias="EXTRACTION_MODEL")
    extraction_timeout_s: float = Field(default=120.0, alias="EXTRACTION_TIMEOUT_S")

    page_concurrency_limit: int = Field(default=CONCURRENCY_LIMIT, alias="PAGE_CONCURRENCY_LIMIT")
    page_max_retries: int = Field(default=MAX_RETRIES, alias="PAGE_MAX_RETRIES")
    page_retry_backoff_s: float = Field(default=RETRY_BACKOFF_S, alias="PAGE_RETRY_BACKOFF_S")
    similarity_threshold: float = Field(default=SIMILARITY_THRESHOLD, alias="SIMILARITY_THRESHOLD")

    embedding_base_url: str | None = Field(default=None, alias="EMBEDDING_BASE_URL")
    embedding_model: str = Field(default="default", alias="EMBEDDING_MODEL")

    qdrant_url: str | None = Field(default=None, alias="QDRANT_URL")
    qdrant_api_key: str | None = Field(default=None, alias="QDRANT_API_KEY")
    qdrant_collection: str = Field(default="slide_chunks_v1", alias="QDRANT_COLLECTION")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    def page_processing_config(self) -> PageProcessingConfig:
        return PageProcessingConfig(
            concurrency_limit=self.page_concurrency_limit,
            max_retries=self.page_max_retries,
            retry_backoff_s=self.page_retry_backoff_s,
        )


def load_settings() -> Settings:
    return Settings()
