"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Vector store
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_collection: str = "ragsync_docs"

    # Embedding
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"

    # Record store
    record_db_url: str = Field(
        default="sqlite:///record_manager.db",
        description="SQLAlchemy URL of the ledger database (SQLite or PostgreSQL)",
    )
    record_namespace: str = Field(
        default="",
        description="Ledger namespace. Empty means 'chroma/<chroma_collection>'.",
    )

    # Indexing
    batch_size: int = 100
    cleanup_batch_size: int = 1000
    force_update: bool = Field(
        default=False,
        description="Re-write every document even if it is already indexed",
    )

    # Chunking
    chunk_size: int = 4000
    chunk_overlap: int = 200

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton: import `settings` wherever needed.
settings = Settings()
