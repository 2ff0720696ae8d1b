"""Application configuration and settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Application
    app_name: str = "Legal RAG API"
    app_version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # API
    api_v1_prefix: str = "/api/v1"

    # CORS
    cors_origins: list[str] = ["*"]
    cors_credentials: bool = True
    cors_methods: list[str] = ["*"]
    cors_headers: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"

    # OpenAI Configuration
    openai_api_key: str | None = None
    openai_embedding_model: str = "text-embedding-3-small"
    openai_max_retries: int = 20
    embedding_dim: int = 1536

    # Qdrant Configuration
    qdrant_url: str = "http://localhost:6333"
    qdrant_api_key: str | None = None
    qdrant_prefer_grpc: bool = False
    qdrant_timeout: int = 30  # Timeout in seconds
    segment_collection_name: str = "legal-segments"  # Splitter-aware segment store
    passage_collection_name: str = "legal-passages"  # Plain chunked passage store

    # Chunking Configuration
    chunk_size: int = 2000
    chunk_overlap: int = 400
    min_chunk_size: int = 50
    legal_min_chunk_size: int = 10  # Short legal provisions must survive filtering
    legal_max_tokens: int = 512
    legal_chunk_overlap: int = 50
    contract_max_segment_size: int = 2000
    contract_context_overlap: int = 200

    # Quality Filter Configuration
    enable_quality_filter: bool = True
    quality_punctuation: str = "。！？；，"

    # Search Configuration
    precise_oversample_factor: int = 5
    chapter_oversample_factor: int = 3

    # Rebuild Configuration
    rebuild_max_concurrency: int = 4

    # Supabase Configuration (document corpus)
    supabase_url: str | None = None
    supabase_key: str | None = None
    corpus_table: str = "knowledge_documents"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
